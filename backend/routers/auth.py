"""Authentication router: register, login, refresh, logout, password reset and change."""

import logging
from typing import Annotated
from datetime import timedelta, datetime
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

import models
import schemas
import auth
from database import get_db
from dependencies import get_current_user
from utils.errors import ExternalServiceError
from utils.validation import get_user_by_email, validate_password
from utils.rate_limiter import auth_rate_limiter, password_reset_rate_limiter
from utils.email import send_password_reset_email, send_password_changed_notification


logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])

FORGOT_PASSWORD_MESSAGE = "If an account exists for this email, a password reset link has been sent."


def issue_tokens(db: Session, user: models.User) -> dict:
    """Create an access token and a stored refresh token for the user."""
    access_token = auth.create_access_token(
        data={"sub": user.email},
        expires_delta=timedelta(minutes=auth.ACCESS_TOKEN_EXPIRE_MINUTES)
    )

    refresh_token = auth.create_refresh_token()
    db.add(models.RefreshToken(
        user_id=user.id,
        token_hash=auth.hash_token(refresh_token),
        expires_at=auth.get_refresh_token_expiry()
    ))
    db.commit()

    return {
        "access_token": access_token,
        "refresh_token": refresh_token,
        "token_type": "bearer"
    }


def revoke_refresh_tokens(db: Session, user_id: int) -> None:
    db.query(models.RefreshToken).filter(
        models.RefreshToken.user_id == user_id,
        models.RefreshToken.revoked == False
    ).update({"revoked": True})


@router.post("/register", response_model=schemas.Token, dependencies=[Depends(auth_rate_limiter)])
def register_user(
    user: schemas.UserCreate,
    db: Session = Depends(get_db)
):
    if get_user_by_email(db, email=user.email):
        raise HTTPException(status_code=400, detail="Email already registered")

    validate_password(user.password)

    db_user = models.User(
        email=user.email,
        hashed_password=auth.get_password_hash(user.password),
        full_name=(user.full_name or "").strip() or None
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    logger.info(f"Registered user {db_user.id}")

    # Sign the new user in straight away
    return issue_tokens(db, db_user)


@router.post("/token", response_model=schemas.Token, dependencies=[Depends(auth_rate_limiter)])
def login_for_access_token(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    db: Session = Depends(get_db)
):
    user = get_user_by_email(db, form_data.username)
    if not user or not auth.verify_password(form_data.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return issue_tokens(db, user)


@router.post("/auth/refresh", response_model=schemas.Token)
def refresh_access_token(request: schemas.RefreshTokenRequest, db: Session = Depends(get_db)):
    """Exchange a valid refresh token for a new access token"""
    db_token = db.query(models.RefreshToken).filter(
        models.RefreshToken.token_hash == auth.hash_token(request.refresh_token),
        models.RefreshToken.revoked == False,
        models.RefreshToken.expires_at > datetime.utcnow()
    ).first()

    if not db_token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired refresh token"
        )

    user = db.query(models.User).filter(models.User.id == db_token.user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")

    access_token = auth.create_access_token(data={"sub": user.email})
    return {"access_token": access_token, "token_type": "bearer"}


@router.post("/auth/logout")
def logout(request: schemas.RefreshTokenRequest, db: Session = Depends(get_db)):
    """Revoke a refresh token (logout)"""
    db_token = db.query(models.RefreshToken).filter(
        models.RefreshToken.token_hash == auth.hash_token(request.refresh_token)
    ).first()

    if db_token:
        db_token.revoked = True
        db.commit()

    return {"message": "Logged out successfully"}


@router.get("/users/me", response_model=schemas.User)
async def read_users_me(current_user: Annotated[models.User, Depends(get_current_user)]):
    return current_user


@router.post("/auth/forgot-password", dependencies=[Depends(password_reset_rate_limiter)])
async def forgot_password(
    request: schemas.ForgotPasswordRequest,
    db: Session = Depends(get_db)
):
    """
    Request a password reset link.

    The response is the same whether or not the email is registered.
    """
    user = get_user_by_email(db, request.email)
    if not user:
        return {"message": FORGOT_PASSWORD_MESSAGE}

    # Only the newest link stays valid
    db.query(models.PasswordResetToken).filter(
        models.PasswordResetToken.user_id == user.id,
        models.PasswordResetToken.used == False
    ).update({"used": True})

    reset_token = auth.create_password_reset_token()
    db.add(models.PasswordResetToken(
        user_id=user.id,
        token_hash=auth.hash_token(reset_token),
        expires_at=auth.get_password_reset_token_expiry()
    ))
    db.commit()

    email_sent = await send_password_reset_email(
        user_email=user.email,
        user_name=user.full_name or user.email,
        reset_token=reset_token
    )
    if not email_sent:
        raise ExternalServiceError(
            "Could not send the password reset email. Please try again later.",
            service="email"
        )

    return {"message": FORGOT_PASSWORD_MESSAGE}


@router.post("/auth/reset-password", dependencies=[Depends(password_reset_rate_limiter)])
def reset_password(
    request: schemas.ResetPasswordRequest,
    db: Session = Depends(get_db)
):
    """Set a new password using the token from the reset email."""
    db_token = db.query(models.PasswordResetToken).filter(
        models.PasswordResetToken.token_hash == auth.hash_token(request.token)
    ).first()

    if not db_token or db_token.used or db_token.expires_at < datetime.utcnow():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid or expired reset token"
        )

    validate_password(request.new_password)

    user = db.query(models.User).filter(models.User.id == db_token.user_id).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    user.hashed_password = auth.get_password_hash(request.new_password)
    user.password_changed_at = datetime.utcnow()
    db_token.used = True
    revoke_refresh_tokens(db, user.id)
    db.commit()
    logger.info(f"Password reset for user {user.id}")

    return {"message": "Password has been reset. Please sign in with your new password."}


@router.post("/auth/change-password")
async def change_password(
    request: schemas.PasswordChangeRequest,
    current_user: Annotated[models.User, Depends(get_current_user)],
    db: Session = Depends(get_db)
):
    """Change password (requires current password). Logs out all other sessions."""
    if not auth.verify_password(request.current_password, current_user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Current password is incorrect"
        )

    if auth.verify_password(request.new_password, current_user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="New password must be different from current password"
        )

    validate_password(request.new_password)

    current_user.hashed_password = auth.get_password_hash(request.new_password)
    current_user.password_changed_at = datetime.utcnow()
    revoke_refresh_tokens(db, current_user.id)
    db.commit()

    # Notification is best effort; the password is already changed
    notified = await send_password_changed_notification(
        user_email=current_user.email,
        user_name=current_user.full_name or current_user.email
    )
    if not notified:
        logger.warning(f"Password changed for user {current_user.id} but notification email was not sent")

    return {"message": "Password changed successfully. Other sessions have been logged out."}
