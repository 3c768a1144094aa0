"""
Authentication endpoints.

- POST /signup: candidate self-registration, optionally through an invitation link
- POST /login: email/password login returning a JWT (blocked for disqualified candidates)
- POST /forgot-password: email a persisted, expiring reset token
- POST /reset-password: set a new password with a reset token
- GET /validate-reset-token: check a reset token before showing the form
"""

import logging
from datetime import datetime, timedelta, timezone
from fastapi import APIRouter, HTTPException, Depends, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.celery_utils import queue_task_safely
from app.core.config import settings
from app.core.database import as_utc, get_db
from app.core.deps import get_invitation_manager
from app.core.security import create_access_token, generate_reset_token, get_password_hash, verify_password
from app.crud import candidate as crud_candidate
from app.models.user import User, UserRole
from app.schemas.user import (
    ForgotPasswordRequest,
    LoginRequest,
    ResetPasswordRequest,
    SignupRequest,
    TokenResponse,
    UserResponse,
)
from app.services.invitations import InvitationTokenManager
from app.tasks.email_tasks import send_password_reset_email_task

router = APIRouter(prefix="/auth", tags=["Authentication"])
logger = logging.getLogger(__name__)

DISQUALIFIED_DETAIL = "Your account has been disabled due to disciplinary action."


def _get_user_by_email(db: Session, email: str):
    return db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()


def _token_response(user: User) -> TokenResponse:
    access_token = create_access_token(data={"sub": str(user.id), "role": user.role.value})
    return TokenResponse(
        access_token=access_token,
        token_type="bearer",
        user=UserResponse.model_validate(user)
    )


@router.post("/signup", status_code=201, response_model=TokenResponse)
def signup(
    request: SignupRequest,
    db: Session = Depends(get_db),
    invitations: InvitationTokenManager = Depends(get_invitation_manager),
):
    """
    Register a candidate account and return a JWT for immediate login.

    With an invitation token the invitation is accepted first; a token issued
    for a different email is rejected (403) and no account is created.
    """
    if _get_user_by_email(db, request.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    if crud_candidate.is_email_disqualified(db, request.email):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=DISQUALIFIED_DETAIL)

    if request.invitation_token:
        invitations.mark_accepted(request.invitation_token, request.email, name=request.name)

    new_user = User(
        email=request.email,
        hashed_password=get_password_hash(request.password),
        role=UserRole.CANDIDATE,
    )
    db.add(new_user)
    db.commit()
    db.refresh(new_user)

    logger.info(f"New user registered: {new_user.email} (invited: {bool(request.invitation_token)})")
    return _token_response(new_user)


@router.post("/login", response_model=TokenResponse)
def login(
    request: LoginRequest,
    db: Session = Depends(get_db)
):
    """
    Authenticate user and return a JWT.

    Disqualified candidates are refused even with correct credentials.
    """
    user = _get_user_by_email(db, request.email)
    if not user or not verify_password(request.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if crud_candidate.is_email_disqualified(db, user.email):
        logger.warning(f"Login refused for disqualified candidate: {user.email}")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=DISQUALIFIED_DETAIL)

    user.last_login_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(user)

    logger.info(f"User logged in: {user.email} (role: {user.role.value})")
    return _token_response(user)


@router.post("/forgot-password")
def forgot_password(
    request: ForgotPasswordRequest,
    db: Session = Depends(get_db)
):
    """
    Email a password reset link.

    Always returns the same message so callers can't probe which emails exist.
    """
    success_message = {
        "message": "If an account with that email exists, a password reset link has been sent."
    }

    user = _get_user_by_email(db, request.email)
    if not user:
        logger.info(f"Password reset requested for non-existent email: {request.email}")
        return success_message

    user.reset_token = generate_reset_token()
    user.reset_token_expires_at = datetime.now(timezone.utc) + timedelta(minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES)
    db.commit()

    queued = queue_task_safely(send_password_reset_email_task, to_email=user.email, reset_token=user.reset_token)
    if not queued:
        logger.error(f"Failed to queue password reset email for {user.email}")

    return success_message


def _user_for_reset_token(db: Session, token: str) -> User:
    """
    Raises:
        HTTPException 400: Unknown or expired token (expired tokens are cleared)
    """
    user = db.query(User).filter(User.reset_token == token).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid or expired reset token"
        )

    expires_at = as_utc(user.reset_token_expires_at)
    if not expires_at or expires_at < datetime.now(timezone.utc):
        user.reset_token = None
        user.reset_token_expires_at = None
        db.commit()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Reset token has expired. Please request a new password reset."
        )
    return user


@router.get("/validate-reset-token")
def validate_reset_token(token: str, db: Session = Depends(get_db)):
    user = _user_for_reset_token(db, token)
    return {"valid": True, "email": user.email}


@router.post("/reset-password")
def reset_password(
    request: ResetPasswordRequest,
    db: Session = Depends(get_db)
):
    """Set a new password; the reset token is single-use."""
    user = _user_for_reset_token(db, request.token)

    user.hashed_password = get_password_hash(request.new_password)
    user.reset_token = None
    user.reset_token_expires_at = None
    db.commit()

    logger.info(f"Password successfully reset for user: {user.email}")
    return {
        "message": "Password has been reset successfully. You can now login with your new password."
    }
