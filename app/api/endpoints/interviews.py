"""
Interview lifecycle endpoints.

- POST /interviews/start: self-serve start with a resume upload
- POST /interviews/start-invited: start for a candidate created by an invitation
- POST /interviews/answer: submit the answer to the current question
- GET /interviews/{interview_id}: full snapshot (interview, candidate, answers, evaluation)
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile
from pydantic import EmailStr, TypeAdapter, ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.deps import get_extraction_orchestrator, get_interview_state_machine, get_invitation_manager
from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.crud import candidate as crud_candidate
from app.models.candidate import Candidate
from app.models.interview import Interview
from app.schemas.candidate import is_missing
from app.schemas.interview import (
    InterviewSnapshotResponse,
    StartInterviewResponse,
    StartInvitedRequest,
    SubmitAnswerRequest,
    SubmitAnswerResponse,
)
from app.services.interview_state import InterviewStateMachine
from app.services.invitations import InvitationTokenManager
from app.services.resume_extraction import ExtractionOrchestrator
from app.services.text_extraction import extract_text

router = APIRouter(prefix="/interviews", tags=["Interviews"])
logger = logging.getLogger(__name__)

_email_adapter = TypeAdapter(EmailStr)

DISQUALIFIED_MESSAGE = "Interview cancelled due to disciplinary action."


def _start_response(interview: Interview, candidate: Candidate) -> StartInterviewResponse:
    return StartInterviewResponse(
        interview_id=interview.id,
        candidate_id=candidate.id,
        questions=interview.questions,
        current_question=interview.current_question,
        candidate_name=candidate.name,
        candidate_role=candidate.job_role,
        candidate_phone=candidate.phone,
    )


@router.post("/start", response_model=StartInterviewResponse)
def start_interview(
    email: str = Form(...),
    job_role: str = Form(..., alias="jobRole", min_length=1),
    name: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    resume: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
    state_machine: InterviewStateMachine = Depends(get_interview_state_machine),
    orchestrator: ExtractionOrchestrator = Depends(get_extraction_orchestrator),
):
    """
    Start an interview from a resume upload.

    Existing candidates (matched by email) get their details refreshed and
    keep their stored resume unless a new file is uploaded. New candidates
    must upload a resume; missing name/phone are filled from it.
    """
    try:
        email = _email_adapter.validate_python(email.strip())
    except PydanticValidationError:
        raise ValidationError("Invalid email address")

    if state_machine.is_blocked(email):
        raise ConflictError(DISQUALIFIED_MESSAGE)

    candidate = crud_candidate.get_by_email(db, email)
    if candidate is None and resume is None:
        raise ValidationError("Resume file is required")
    if candidate is not None:
        state_machine.ensure_can_start(candidate)

    resume_text = None
    if resume is not None:
        content = resume.file.read()
        resume_text = extract_text(content, resume.content_type or "", resume.filename or "resume")
        if is_missing(name) or is_missing(phone):
            profile = orchestrator.extract(resume_text, resume.filename or "resume")
            name = profile.name if is_missing(name) else name
            phone = profile.phone if is_missing(phone) else phone

    if candidate is None:
        candidate = crud_candidate.create(
            db,
            email=email,
            job_role=job_role,
            name=name,
            phone=phone,
            resume_text=resume_text,
            commit=False,
        )
        logger.info(f"Created candidate {candidate.id} for {email}")
    else:
        crud_candidate.update_details(
            db, candidate, name=name, phone=phone, job_role=job_role, resume_text=resume_text, commit=False
        )

    interview = state_machine.start(candidate)
    db.refresh(candidate)
    return _start_response(interview, candidate)


@router.post("/start-invited", response_model=StartInterviewResponse)
def start_invited_interview(
    request: StartInvitedRequest,
    db: Session = Depends(get_db),
    state_machine: InterviewStateMachine = Depends(get_interview_state_machine),
    invitations: InvitationTokenManager = Depends(get_invitation_manager),
):
    """Start an interview for an invited candidate using the stored resume/profile."""
    if state_machine.is_blocked(request.email):
        raise ConflictError(DISQUALIFIED_MESSAGE)

    candidate = crud_candidate.get_by_email(db, request.email)
    if candidate is None:
        raise NotFoundError("Candidate not found. Please contact your administrator.")

    invitation = invitations.latest_for_email(request.email)
    skillset = invitation.skillset if invitation else None

    interview = state_machine.start(candidate, skillset=skillset)
    return _start_response(interview, candidate)


@router.post("/answer", response_model=SubmitAnswerResponse)
def submit_answer(
    request: SubmitAnswerRequest,
    state_machine: InterviewStateMachine = Depends(get_interview_state_machine),
):
    outcome = state_machine.submit_answer(request.interview_id, request.question_index, request.answer_text)
    return SubmitAnswerResponse(
        score=outcome.score,
        feedback=outcome.feedback,
        completed=outcome.completed,
        next_question=outcome.next_question,
        question_index=outcome.question_index,
        summary=outcome.summary,
    )


@router.get("/{interview_id}", response_model=InterviewSnapshotResponse)
def get_interview(
    interview_id: int,
    state_machine: InterviewStateMachine = Depends(get_interview_state_machine),
):
    return InterviewSnapshotResponse.model_validate(state_machine.snapshot(interview_id))
