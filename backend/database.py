import os
import logging
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

logger = logging.getLogger(__name__)

# Use DATABASE_PATH env var for Docker, default to local path for development
DATABASE_PATH = os.environ.get("DATABASE_PATH", "./rachafacil.sqlite3")
SQLALCHEMY_DATABASE_URL = f"sqlite:///{DATABASE_PATH}"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL, connect_args={"check_same_thread": False}
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def commit_or_rollback(db, action: str):
    """Commit the session, rolling everything back if any statement fails.

    Multi-row mutations (group + creator participant, cascading deletes,
    expense + shares) go through here so they land all at once or not at all.
    """
    try:
        db.commit()
    except Exception:
        db.rollback()
        logger.exception(f"Rolled back transaction while trying to {action}")
        raise
