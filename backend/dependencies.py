"""Request dependencies that resolve the signed-in user."""

from typing import Annotated
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

import models
import auth
from database import get_db
from utils.validation import get_user_by_email


oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token")

INVALID_CREDENTIALS = "Could not validate credentials"


def unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=INVALID_CREDENTIALS,
        headers={"WWW-Authenticate": "Bearer"},
    )


def email_from_access_token(token: str) -> str:
    """Return the account email carried by a valid access token, or raise 401.

    Refresh tokens are opaque strings stored server-side, so anything that
    decodes here must also be marked as an access token.
    """
    try:
        claims = auth.jwt.decode(token, auth.SECRET_KEY, algorithms=[auth.ALGORITHM])
    except auth.JWTError:
        raise unauthorized()

    email = claims.get("sub")
    if not email or claims.get("type") != "access":
        raise unauthorized()
    return email


async def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    db: Session = Depends(get_db)
) -> models.User:
    user = get_user_by_email(db, email=email_from_access_token(token))
    # Deactivated accounts keep their rows but lose API access
    if user is None or not user.is_active:
        raise unauthorized()
    return user
