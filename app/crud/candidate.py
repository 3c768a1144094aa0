"""
CRUD operations for the Candidate model.

Email is the lookup key for candidates but is not unique; lookups are
case-insensitive and always return the oldest matching row.
"""

from typing import Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from app.models.candidate import Candidate
from app.schemas.candidate import NOT_SPECIFIED, is_missing


def get_by_id(db: Session, candidate_id: int) -> Optional[Candidate]:
    return db.query(Candidate).filter(Candidate.id == candidate_id).first()


def get_by_email(db: Session, email: str) -> Optional[Candidate]:
    """
    Retrieve the first candidate registered with an email.

    Args:
        db: Database session
        email: Email address (compared case-insensitively)

    Returns:
        Candidate instance if found, None otherwise
    """
    return (
        db.query(Candidate)
        .filter(func.lower(Candidate.email) == email.strip().lower())
        .order_by(Candidate.id)
        .first()
    )


def is_email_disqualified(db: Session, email: str) -> bool:
    """True if any candidate with this email has been disqualified."""
    return db.query(
        db.query(Candidate)
        .filter(func.lower(Candidate.email) == email.strip().lower(), Candidate.disqualified.is_(True))
        .exists()
    ).scalar()


def create(
    db: Session,
    email: str,
    job_role: str,
    name: Optional[str] = None,
    phone: Optional[str] = None,
    resume_text: str = "",
    invited: bool = False,
    commit: bool = True,
) -> Candidate:
    """
    Create a new candidate.

    Args:
        db: Database session
        email: Candidate email
        job_role: Role the candidate is interviewing for
        name: Display name ("Not specified" when missing)
        phone: Phone number ("Not specified" when missing)
        resume_text: Extracted resume text
        invited: True when created from an admin invitation
        commit: Commit immediately, or only flush so the caller owns the transaction

    Returns:
        Created Candidate instance with id
    """
    candidate = Candidate(
        email=email.strip(),
        job_role=job_role,
        name=NOT_SPECIFIED if is_missing(name) else name.strip(),
        phone=NOT_SPECIFIED if is_missing(phone) else phone.strip(),
        resume_text=resume_text or "",
        invited=invited,
        disqualified=False,
    )
    db.add(candidate)
    if commit:
        db.commit()
        db.refresh(candidate)
    else:
        db.flush()
    return candidate


def update_details(
    db: Session,
    candidate: Candidate,
    name: Optional[str] = None,
    phone: Optional[str] = None,
    job_role: Optional[str] = None,
    resume_text: Optional[str] = None,
    commit: bool = True,
) -> Candidate:
    """Overwrite the given fields; missing values leave the current data alone."""
    if not is_missing(name):
        candidate.name = name.strip()
    if not is_missing(phone):
        candidate.phone = phone.strip()
    if job_role and job_role.strip():
        candidate.job_role = job_role.strip()
    if resume_text:
        candidate.resume_text = resume_text

    if commit:
        db.commit()
        db.refresh(candidate)
    else:
        db.flush()
    return candidate


def set_disqualified(db: Session, candidate: Candidate, disqualified: bool = True) -> Candidate:
    candidate.disqualified = disqualified
    db.commit()
    db.refresh(candidate)
    return candidate


def delete(db: Session, candidate: Candidate) -> None:
    """Delete a candidate; interviews, answers, evaluations and invitations cascade."""
    db.delete(candidate)
    db.commit()
