"""
FastAPI dependencies for authentication and the service layer.

Services are built per request from the explicit Settings object (plus the
admin-selected AI provider stored in the database). Tests swap them out
through app.dependency_overrides.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.database import get_db
from app.core.security import decode_token
from app.crud import app_setting as crud_app_setting
from app.models.user import User
from app.services.interview_ai import InterviewAssistant, build_interview_assistant
from app.services.interview_state import InterviewStateMachine
from app.services.invitations import InvitationTokenManager
from app.services.resume_extraction import ExtractionOrchestrator

# HTTP Bearer token scheme (Authorization: Bearer <token>)
security = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """
    Extract and validate the current user from JWT token.

    Raises:
        HTTPException 401: If token is invalid or user not found
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = decode_token(credentials.credentials)
        user_id = payload.get("sub")
        if user_id is None:
            raise credentials_exception
    except JWTError:
        raise credentials_exception

    user = db.query(User).filter(User.id == int(user_id)).first()
    if user is None:
        raise credentials_exception

    return user


async def get_current_admin(user: User = Depends(get_current_user)) -> User:
    """
    Raises:
        HTTPException 403: If the user is not an admin
    """
    if not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )
    return user


def get_extraction_orchestrator() -> ExtractionOrchestrator:
    return ExtractionOrchestrator.from_settings(settings)


def get_interview_assistant(db: Session = Depends(get_db)) -> InterviewAssistant:
    """Assistant for the admin-selected AI provider."""
    provider = crud_app_setting.get_ai_provider(db, default=settings.DEFAULT_AI_PROVIDER)
    return build_interview_assistant(settings, provider)


def get_interview_state_machine(
    db: Session = Depends(get_db),
    assistant: InterviewAssistant = Depends(get_interview_assistant),
) -> InterviewStateMachine:
    return InterviewStateMachine(db, assistant, technical_count=settings.TECHNICAL_QUESTION_COUNT)


def get_invitation_manager(db: Session = Depends(get_db)) -> InvitationTokenManager:
    return InvitationTokenManager(db, ttl_hours=settings.INVITATION_TTL_HOURS)
