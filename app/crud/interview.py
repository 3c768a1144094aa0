"""
CRUD operations for Interview, Answer and Evaluation.

These helpers never commit: the interview state machine owns the
transaction boundaries.
"""

from typing import List, Optional
from sqlalchemy.orm import Session
from app.models.evaluation import Evaluation
from app.models.interview import Answer, Interview, InterviewStatus


def get_by_id(db: Session, interview_id: int) -> Optional[Interview]:
    return db.query(Interview).filter(Interview.id == interview_id).first()


def get_for_update(db: Session, interview_id: int) -> Optional[Interview]:
    """Load an interview with a row lock (SELECT ... FOR UPDATE where supported)."""
    return (
        db.query(Interview)
        .filter(Interview.id == interview_id)
        .with_for_update()
        .populate_existing()
        .first()
    )


def get_for_candidate(db: Session, candidate_id: int, status: InterviewStatus) -> Optional[Interview]:
    return (
        db.query(Interview)
        .filter(Interview.candidate_id == candidate_id, Interview.status == status)
        .order_by(Interview.id)
        .first()
    )


def get_answers(db: Session, interview_id: int) -> List[Answer]:
    return (
        db.query(Answer)
        .filter(Answer.interview_id == interview_id)
        .order_by(Answer.question_index)
        .all()
    )


def get_evaluation(db: Session, interview_id: int) -> Optional[Evaluation]:
    return db.query(Evaluation).filter(Evaluation.interview_id == interview_id).first()
