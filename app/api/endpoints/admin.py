"""
Admin API endpoints.

Every route requires an admin JWT (get_current_admin).
"""

import logging
from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from app.core.celery_utils import queue_task_safely
from app.core.config import settings
from app.core.database import get_db
from app.core.deps import get_current_admin, get_extraction_orchestrator, get_interview_state_machine, get_invitation_manager
from app.core.exceptions import NotFoundError
from app.crud import app_setting as crud_app_setting
from app.crud import candidate as crud_candidate
from app.models.user import User
from app.schemas.admin import AIProviderRequest, AIProviderResponse, CandidateActionResponse
from app.schemas.candidate import CandidateProfile, NOT_SPECIFIED
from app.schemas.invitation import SendInviteRequest, SendInviteResponse
from app.services.interview_state import InterviewStateMachine
from app.services.invitations import InvitationTokenManager
from app.services.resume_extraction import ExtractionOrchestrator
from app.services.text_extraction import extract_text
from app.tasks.email_tasks import send_invitation_email_task

router = APIRouter(prefix="/admin", tags=["Admin"])
logger = logging.getLogger(__name__)


@router.post("/extract-resume-info", response_model=CandidateProfile)
def extract_resume_info(
    resume: UploadFile = File(...),
    orchestrator: ExtractionOrchestrator = Depends(get_extraction_orchestrator),
    admin_user: User = Depends(get_current_admin),
):
    """
    Extract a CandidateProfile from an uploaded resume.

    Always returns all six fields; anything that could not be found is
    "Not specified" (or an empty list).
    """
    filename = resume.filename or "resume"
    raw_text = extract_text(resume.file.read(), resume.content_type or "", filename)
    profile = orchestrator.extract(raw_text, filename)
    logger.info(f"Admin {admin_user.email} extracted resume info from {filename} (strategies: {orchestrator.strategy_names})")
    return profile


@router.post("/send-interview-invite", response_model=SendInviteResponse)
def send_interview_invite(
    request: SendInviteRequest,
    db: Session = Depends(get_db),
    invitations: InvitationTokenManager = Depends(get_invitation_manager),
    admin_user: User = Depends(get_current_admin),
):
    """
    Create (or refresh) the candidate, issue an invitation token and queue
    the invitation email.
    """
    info = request.candidate_info
    resume_text = info.resume_text or (
        f"Job Role: {request.job_role}\n"
        f"Required Skills: {', '.join(request.skillset) or NOT_SPECIFIED}\n"
        f"Candidate: {info.name or NOT_SPECIFIED} ({info.email})"
    )

    candidate = crud_candidate.get_by_email(db, info.email)
    if candidate:
        crud_candidate.update_details(
            db, candidate, name=info.name, phone=info.phone, job_role=request.job_role,
            resume_text=info.resume_text, commit=False,
        )
        candidate.invited = True
        db.commit()
    else:
        candidate = crud_candidate.create(
            db,
            email=info.email,
            job_role=request.job_role,
            name=info.name,
            phone=info.phone,
            resume_text=resume_text,
            invited=True,
        )
        logger.info(f"Created candidate {candidate.id} for invitation to {info.email}")

    snapshot = {
        "name": info.name or NOT_SPECIFIED,
        "email": info.email,
        "phone": info.phone or NOT_SPECIFIED,
        "resumeText": resume_text,
    }
    invitation = invitations.issue(
        candidate_id=candidate.id,
        email=info.email,
        job_role=request.job_role,
        skillset=request.skillset,
        candidate_info=snapshot,
    )

    queued = queue_task_safely(
        send_invitation_email_task,
        to_email=info.email,
        token=invitation.token,
        job_role=request.job_role,
        candidate_name=info.name,
        skillset=request.skillset,
    )
    if queued:
        message = f"Invitation sent to {info.email}"
    else:
        logger.error(f"Invitation {invitation.id} created but email could not be queued for {info.email}")
        message = f"Invitation created for {info.email}, but the email could not be sent. Share the link manually."

    return SendInviteResponse(
        success=True,
        message=message,
        invitation_id=invitation.id,
        token=invitation.token,
        candidate_id=candidate.id,
    )


@router.post("/candidates/{candidate_id}/disqualify", response_model=CandidateActionResponse)
def disqualify_candidate(
    candidate_id: int,
    state_machine: InterviewStateMachine = Depends(get_interview_state_machine),
    admin_user: User = Depends(get_current_admin),
):
    state_machine.disqualify(candidate_id)
    logger.info(f"Admin {admin_user.email} disqualified candidate {candidate_id}")
    return CandidateActionResponse(success=True, candidate_id=candidate_id, message="Candidate disqualified")


@router.delete("/candidates/{candidate_id}", response_model=CandidateActionResponse)
def delete_candidate(
    candidate_id: int,
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_current_admin),
):
    """Delete a candidate with all interviews, answers, evaluations and invitations."""
    candidate = crud_candidate.get_by_id(db, candidate_id)
    if not candidate:
        raise NotFoundError("Candidate not found")

    crud_candidate.delete(db, candidate)
    logger.info(f"Admin {admin_user.email} deleted candidate {candidate_id}")
    return CandidateActionResponse(success=True, candidate_id=candidate_id, message="Candidate deleted")


@router.get("/ai-provider", response_model=AIProviderResponse)
def get_ai_provider(
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_current_admin),
):
    return AIProviderResponse(provider=crud_app_setting.get_ai_provider(db, default=settings.DEFAULT_AI_PROVIDER))


@router.post("/ai-provider", response_model=AIProviderResponse)
def set_ai_provider(
    request: AIProviderRequest,
    db: Session = Depends(get_db),
    admin_user: User = Depends(get_current_admin),
):
    """Select the provider used for interview questions, scoring and summaries."""
    provider = crud_app_setting.set_ai_provider(db, request.provider)
    logger.info(f"Admin {admin_user.email} set AI provider to {provider}")
    return AIProviderResponse(provider=provider)
