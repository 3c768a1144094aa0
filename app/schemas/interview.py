"""
Pydantic schemas for the interview lifecycle API.
"""

from datetime import datetime
from typing import List, Optional
from pydantic import EmailStr, Field
from app.models.interview import InterviewStatus
from app.schemas.common import CamelModel
from app.schemas.candidate import CandidateResponse


class StartInvitedRequest(CamelModel):
    email: EmailStr


class StartInterviewResponse(CamelModel):
    interview_id: int
    candidate_id: int
    questions: List[str]
    current_question: Optional[str] = None
    candidate_name: str
    candidate_role: str
    candidate_phone: str


class SubmitAnswerRequest(CamelModel):
    interview_id: int
    question_index: int = Field(..., ge=0)
    answer_text: str = Field(..., min_length=1)


class InterviewSummary(CamelModel):
    """Narrative produced once per completed interview."""
    strengths: List[str] = Field(default_factory=list)
    improvement_areas: List[str] = Field(default_factory=list)
    recommendation: str


class SubmitAnswerResponse(CamelModel):
    score: float
    feedback: str
    completed: bool
    next_question: Optional[str] = None
    question_index: Optional[int] = None
    summary: Optional[InterviewSummary] = None


class InterviewResponse(CamelModel):
    id: int
    candidate_id: int
    questions: List[str]
    current_question_index: int
    status: InterviewStatus
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


class AnswerResponse(CamelModel):
    id: int
    interview_id: int
    question_index: int
    question_text: str
    answer_text: str
    score: float
    feedback: Optional[str] = None
    created_at: Optional[datetime] = None


class EvaluationResponse(CamelModel):
    id: int
    interview_id: int
    overall_score: int
    technical_score: int
    behavioral_score: int
    strengths: List[str]
    improvement_areas: List[str]
    recommendation: str
    created_at: Optional[datetime] = None


class InterviewSnapshotResponse(CamelModel):
    interview: InterviewResponse
    candidate: Optional[CandidateResponse] = None
    answers: List[AnswerResponse]
    evaluation: Optional[EvaluationResponse] = None
