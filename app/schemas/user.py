"""
Pydantic schemas for signup, login and password reset.
"""

from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from app.models.user import UserRole
from app.schemas.common import CamelModel


class SignupRequest(CamelModel):
    """Candidate self-registration, optionally through an invitation link."""
    name: Optional[str] = None
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)  # bcrypt limit
    invitation_token: Optional[str] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    """User profile response (no sensitive data)."""
    id: int
    email: str
    role: UserRole

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    """JWT token response."""
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ResetPasswordRequest(CamelModel):
    token: str
    new_password: str = Field(..., min_length=8, max_length=72)
