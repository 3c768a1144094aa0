"""
Pydantic schemas for admin-only endpoints.
"""

from typing import Literal
from app.schemas.common import CamelModel


class AIProviderRequest(CamelModel):
    provider: Literal["openai", "gemini"]


class AIProviderResponse(CamelModel):
    provider: str


class CandidateActionResponse(CamelModel):
    success: bool
    candidate_id: int
    message: str
