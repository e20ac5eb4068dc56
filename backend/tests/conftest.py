import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

from main import app
from database import Base, get_db
from models import User
from auth import get_password_hash, create_access_token

# Import rate limiters to override them
from utils.rate_limiter import auth_rate_limiter, password_reset_rate_limiter

# Setup in-memory SQLite database for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database session for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """Create a FastAPI TestClient with overridden database dependency."""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.pop(get_db, None)


def make_user(db_session, email, full_name="Test User", password="password123"):
    user = User(
        email=email,
        hashed_password=get_password_hash(password),
        full_name=full_name,
        is_active=True
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def headers_for(user):
    return {"Authorization": f"Bearer {create_access_token(data={'sub': user.email})}"}


@pytest.fixture
def test_user(db_session):
    """Create a test user and return the user object."""
    return make_user(db_session, "test@example.com", full_name="Ana")


@pytest.fixture
def auth_headers(test_user):
    """Return authorization headers for the test user."""
    return headers_for(test_user)


@pytest.fixture
def trip_group(client, auth_headers):
    """Group "Trip" with participants A (the creator), B and C. Returns (group_id, [a, b, c])."""
    group_id = client.post("/groups", headers=auth_headers, json={"name": "Trip"}).json()["id"]
    creator_id = client.get(f"/groups/{group_id}", headers=auth_headers).json()["participants"][0]["id"]
    b_id = client.post(f"/groups/{group_id}/participants", headers=auth_headers, json={"name": "B"}).json()["id"]
    c_id = client.post(f"/groups/{group_id}/participants", headers=auth_headers, json={"name": "C"}).json()["id"]
    return group_id, [creator_id, b_id, c_id]


@pytest.fixture(autouse=True)
def disable_rate_limits():
    """Disable all rate limits during testing using dependency overrides."""
    async def mock_rate_limit():
        return True

    limiters = [auth_rate_limiter, password_reset_rate_limiter]
    for limiter in limiters:
        app.dependency_overrides[limiter] = mock_rate_limit

    yield

    for limiter in limiters:
        app.dependency_overrides.pop(limiter, None)
