"""
Pydantic schemas for admin invitations.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Union
from pydantic import EmailStr, Field, field_validator
from app.models.invitation import InvitationStatus
from app.schemas.common import CamelModel
from app.schemas.candidate import clean_list


class CandidateInfo(CamelModel):
    """Candidate details submitted by the admin, usually from extract-resume-info."""
    name: Optional[str] = None
    email: EmailStr
    phone: Optional[str] = None
    resume_text: Optional[str] = None


class SendInviteRequest(CamelModel):
    candidate_info: CandidateInfo
    job_role: str = Field(..., min_length=1)
    # Accepts "React, Node.js" or ["React", "Node.js"]
    skillset: Union[List[str], str, None] = None

    @field_validator("skillset", mode="after")
    @classmethod
    def normalize_skillset(cls, v: Union[List[str], str, None]) -> List[str]:
        return clean_list(v)


class SendInviteResponse(CamelModel):
    success: bool
    message: str
    invitation_id: int
    token: str
    candidate_id: int


class InvitationResponse(CamelModel):
    id: int
    candidate_id: Optional[int] = None
    email: str
    token: str
    job_role: str
    skillset: List[str]
    status: InvitationStatus
    candidate_info: Dict[str, Any]
    created_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
    accepted_at: Optional[datetime] = None
