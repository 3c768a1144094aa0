"""
Pydantic schemas for candidate profiles and Candidate API responses.
"""

from datetime import datetime
from typing import Any, List, Optional
from pydantic import Field, field_validator, ValidationInfo
from app.schemas.common import CamelModel

NOT_SPECIFIED = "Not specified"
MAX_PAST_COMPANIES = 5
MAX_SKILLS = 10


def is_missing(value: Optional[str]) -> bool:
    """True for None, blank strings and the "Not specified" sentinel."""
    if value is None:
        return True
    value = str(value).strip()
    return not value or value.lower() == NOT_SPECIFIED.lower()


def clean_list(value: Any, limit: Optional[int] = None) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple)):
        raise ValueError("must be a list of strings")

    cleaned: List[str] = []
    seen = set()
    for item in value:
        if item is None:
            continue
        item = str(item).strip()
        if is_missing(item) or item.lower() in seen:
            continue
        seen.add(item.lower())
        cleaned.append(item)
    return cleaned[:limit] if limit else cleaned


class CandidateProfile(CamelModel):
    """
    Structured resume data. Always total: missing scalars hold the
    "Not specified" sentinel and missing lists are empty.

    Also used as the validation envelope for LLM extraction replies, which
    use the same camelCase keys.
    """
    name: str = NOT_SPECIFIED
    email: str = NOT_SPECIFIED
    phone: str = NOT_SPECIFIED
    designation: str = NOT_SPECIFIED
    past_companies: List[str] = Field(default_factory=list)
    skillset: List[str] = Field(default_factory=list)

    @field_validator("name", "email", "phone", "designation", mode="before")
    @classmethod
    def default_scalar(cls, v: Any) -> str:
        if isinstance(v, (list, dict)):
            raise ValueError("must be a string")
        if is_missing(v):
            return NOT_SPECIFIED
        return str(v).strip()

    @field_validator("past_companies", "skillset", mode="before")
    @classmethod
    def clean_lists(cls, v: Any, info: ValidationInfo) -> List[str]:
        limit = MAX_PAST_COMPANIES if info.field_name == "past_companies" else MAX_SKILLS
        return clean_list(v, limit)


class CandidateResponse(CamelModel):
    """Candidate record as returned in interview snapshots."""
    id: int
    name: str
    email: str
    phone: str
    job_role: str
    invited: bool
    disqualified: bool
    created_at: Optional[datetime] = None
