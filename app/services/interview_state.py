"""
Interview lifecycle state machine.

    no-interview -> in-progress -> completed

`disqualified` on the Candidate is an orthogonal flag that blocks every
transition. A candidate gets at most one completed interview ever.

submit_answer is serialised per interview: the interview row is locked
(SELECT ... FOR UPDATE), the mapper bumps Interview.version on every
update, and unique constraints on (interview_id, question_index) and
evaluations.interview_id reject anything that slips through. Losing a race
surfaces as ConflictError.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError
from app.core.exceptions import ConflictError, NotFoundError, StorageError, UpstreamProviderError, ValidationError
from app.crud import candidate as crud_candidate
from app.crud import interview as crud_interview
from app.models.candidate import Candidate
from app.models.evaluation import Evaluation
from app.models.interview import Answer, Interview, InterviewStatus
from app.schemas.interview import InterviewSummary
from app.services.interview_ai import InterviewAssistant, default_questions
from app.services.scoring import AnsweredQuestion, ScoringAggregator

logger = logging.getLogger(__name__)


@dataclass
class AnswerOutcome:
    score: float
    feedback: str
    completed: bool
    next_question: Optional[str] = None
    question_index: Optional[int] = None
    summary: Optional[InterviewSummary] = None
    evaluation: Optional[Evaluation] = None


@dataclass
class InterviewSnapshot:
    interview: Interview
    candidate: Optional[Candidate]
    answers: List[Answer] = field(default_factory=list)
    evaluation: Optional[Evaluation] = None


class InterviewStateMachine:
    """Start, answer, snapshot and disqualify, over one database session."""

    def __init__(self, db: Session, assistant: InterviewAssistant, technical_count: int = 4):
        self.db = db
        self.assistant = assistant
        self.aggregator = ScoringAggregator(assistant, technical_count=technical_count)

    def is_blocked(self, email: str) -> bool:
        """True if this email belongs to a disqualified candidate."""
        return crud_candidate.is_email_disqualified(self.db, email)

    def _generate_questions(self, candidate: Candidate, skillset: Optional[List[str]]) -> List[str]:
        try:
            return self.assistant.generate_questions(candidate.job_role, candidate.resume_text, skillset)
        except Exception as e:
            logger.warning(f"Question generation failed for candidate {candidate.id}, using built-in questions: {e}")
            return default_questions(
                candidate.job_role,
                count=self.assistant.question_count,
                technical_count=self.assistant.technical_count,
            )

    def ensure_can_start(self, candidate: Candidate) -> None:
        """
        Raise ConflictError if the candidate may not start an interview.

        Read-only; callers run it before any expensive work (resume parsing,
        AI extraction) so a hard stop is returned immediately.
        """
        if candidate.disqualified or self.is_blocked(candidate.email):
            raise ConflictError("You have been disqualified from this interview process")
        if crud_interview.get_for_candidate(self.db, candidate.id, InterviewStatus.COMPLETED):
            raise ConflictError("You have already completed your interview. Only one interview is allowed per candidate.")

    def start(self, candidate: Candidate, skillset: Optional[List[str]] = None) -> Interview:
        """
        Start (or resume) the candidate's interview.

        Returns the existing in-progress interview unchanged if there is one.

        Raises:
            NotFoundError: Candidate no longer exists
            ConflictError: Candidate is disqualified or already completed an interview
        """
        locked = (
            self.db.query(Candidate)
            .filter(Candidate.id == candidate.id)
            .with_for_update()
            .populate_existing()
            .first()
        )
        if locked is None:
            raise NotFoundError("Candidate not found")

        try:
            self.ensure_can_start(locked)
        except ConflictError:
            self.db.rollback()
            raise

        existing = crud_interview.get_for_candidate(self.db, locked.id, InterviewStatus.IN_PROGRESS)
        if existing:
            # Keeps any pending candidate updates from the caller and releases the lock
            self.db.commit()
            logger.info(f"Resuming interview {existing.id} for candidate {locked.id}")
            return existing

        questions = self._generate_questions(locked, skillset)
        interview = Interview(
            candidate_id=locked.id,
            questions=questions,
            current_question_index=0,
            status=InterviewStatus.IN_PROGRESS,
        )
        self.db.add(interview)

        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError(f"Interview could not be started: {e.orig}")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to persist interview for candidate {locked.id}: {e}")
            raise StorageError("Failed to start interview")

        self.db.refresh(interview)
        logger.info(f"Started interview {interview.id} for candidate {locked.id} with {len(questions)} questions")
        return interview

    def submit_answer(self, interview_id: int, question_index: int, answer_text: str) -> AnswerOutcome:
        """
        Score and record the answer to the current question.

        Raises:
            NotFoundError: Unknown interview
            ConflictError: Completed interview, disqualified candidate, or a
                question that is not the current one (already answered / out of order)
            ValidationError: question_index does not address a real question
            UpstreamProviderError: The answer could not be scored; nothing is persisted
            StorageError: The database write failed
        """
        interview = crud_interview.get_for_update(self.db, interview_id)
        if not interview:
            raise NotFoundError("Interview not found")

        try:
            self._check_can_answer(interview, question_index)
        except Exception:
            self.db.rollback()
            raise

        candidate = interview.candidate
        question_text = interview.questions[question_index]

        try:
            evaluation = self.assistant.evaluate_answer(question_text, answer_text, candidate.job_role)
        except UpstreamProviderError:
            self.db.rollback()
            logger.error(f"Answer scoring failed for interview {interview_id}, question {question_index}")
            raise

        interview.answers.append(Answer(
            question_index=question_index,
            question_text=question_text,
            answer_text=answer_text,
            score=evaluation.score,
            feedback=evaluation.feedback,
        ))

        outcome = AnswerOutcome(score=evaluation.score, feedback=evaluation.feedback, completed=False)
        if question_index + 1 == len(interview.questions):
            outcome = self._complete(interview, candidate, outcome)
        else:
            interview.current_question_index = question_index + 1
            outcome.question_index = interview.current_question_index
            outcome.next_question = interview.questions[interview.current_question_index]

        try:
            self.db.commit()
        except (IntegrityError, StaleDataError) as e:
            self.db.rollback()
            logger.warning(f"Concurrent submission rejected for interview {interview_id}: {e}")
            raise ConflictError("This question has already been answered")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to save answer for interview {interview_id}: {e}")
            raise StorageError("Failed to save answer")

        if outcome.evaluation is not None:
            self.db.refresh(outcome.evaluation)
        logger.info(
            f"Interview {interview_id}: answered question {question_index} "
            f"(score {evaluation.score}, completed {outcome.completed})"
        )
        return outcome

    def _check_can_answer(self, interview: Interview, question_index: int) -> None:
        if interview.status == InterviewStatus.COMPLETED:
            raise ConflictError("Interview already completed")
        if interview.candidate is None or interview.candidate.disqualified:
            raise ConflictError("You have been disqualified from this interview process")
        if question_index < 0 or question_index >= len(interview.questions or []):
            raise ValidationError(f"Question index {question_index} is out of range")
        if question_index < interview.current_question_index:
            raise ConflictError(f"Question {question_index} has already been answered")
        if question_index > interview.current_question_index:
            raise ConflictError(f"Question {question_index} is not the current question")

    def _complete(self, interview: Interview, candidate: Candidate, outcome: AnswerOutcome) -> AnswerOutcome:
        answered = [
            AnsweredQuestion(question=a.question_text, answer=a.answer_text, score=a.score, feedback=a.feedback or "")
            for a in sorted(interview.answers, key=lambda a: a.question_index)
        ]
        result = self.aggregator.aggregate(candidate.job_role, answered)

        interview.status = InterviewStatus.COMPLETED
        interview.completed_at = datetime.now(timezone.utc)
        interview.current_question_index = len(interview.questions)

        evaluation = Evaluation(
            overall_score=result.scores.overall_score,
            technical_score=result.scores.technical_score,
            behavioral_score=result.scores.behavioral_score,
            strengths=result.summary.strengths,
            improvement_areas=result.summary.improvement_areas,
            recommendation=result.summary.recommendation,
        )
        interview.evaluation = evaluation

        outcome.completed = True
        outcome.summary = result.summary
        outcome.evaluation = evaluation
        return outcome

    def snapshot(self, interview_id: int) -> InterviewSnapshot:
        """
        Raises:
            NotFoundError: Unknown interview
        """
        interview = crud_interview.get_by_id(self.db, interview_id)
        if not interview:
            raise NotFoundError("Interview not found")
        return InterviewSnapshot(
            interview=interview,
            candidate=interview.candidate,
            answers=crud_interview.get_answers(self.db, interview_id),
            evaluation=crud_interview.get_evaluation(self.db, interview_id),
        )

    def disqualify(self, candidate_id: int) -> Candidate:
        """
        Raises:
            NotFoundError: Unknown candidate
        """
        candidate = crud_candidate.get_by_id(self.db, candidate_id)
        if not candidate:
            raise NotFoundError("Candidate not found")
        crud_candidate.set_disqualified(self.db, candidate)
        logger.info(f"Candidate {candidate_id} ({candidate.email}) disqualified")
        return candidate
