"""
Interview and Answer database models.

An interview is the per-candidate Q&A session:

    (no interview) -> IN_PROGRESS -> COMPLETED

`current_question_index` only moves forward and never exceeds
len(questions). An interview is COMPLETED iff its Evaluation exists.
"""

import enum
from sqlalchemy import Column, Integer, String, Float, ForeignKey, Enum, Text, DateTime, UniqueConstraint, func
from sqlalchemy.orm import relationship
from app.core.database import Base, JSONType


class InterviewStatus(str, enum.Enum):
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class Interview(Base):
    __tablename__ = "interviews"

    id = Column(Integer, primary_key=True, index=True)
    candidate_id = Column(Integer, ForeignKey("candidates.id", ondelete="CASCADE"), nullable=False, index=True)

    # Ordered list of question strings
    questions = Column(JSONType, nullable=False)
    current_question_index = Column(Integer, nullable=False, default=0)

    status = Column(
        Enum(InterviewStatus, values_callable=lambda e: [m.value for m in e]),
        default=InterviewStatus.IN_PROGRESS,
        nullable=False,
        index=True
    )

    # Optimistic lock counter, bumped on every UPDATE by the mapper
    version = Column(Integer, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    completed_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    candidate = relationship("Candidate", back_populates="interviews")
    answers = relationship(
        "Answer",
        back_populates="interview",
        cascade="all, delete-orphan",
        order_by="Answer.question_index"
    )
    evaluation = relationship("Evaluation", back_populates="interview", uselist=False, cascade="all, delete-orphan")

    __mapper_args__ = {"version_id_col": version}

    @property
    def current_question(self):
        if self.current_question_index < len(self.questions or []):
            return self.questions[self.current_question_index]
        return None

    def __repr__(self):
        return f"<Interview(id={self.id}, candidate_id={self.candidate_id}, status={self.status.value})>"


class Answer(Base):
    """Append-only: one row per question per interview."""
    __tablename__ = "answers"

    id = Column(Integer, primary_key=True, index=True)
    interview_id = Column(Integer, ForeignKey("interviews.id", ondelete="CASCADE"), nullable=False, index=True)
    question_index = Column(Integer, nullable=False)
    question_text = Column(Text, nullable=False)
    answer_text = Column(Text, nullable=False)

    # 0-10, produced by the answer-scoring collaborator
    score = Column(Float, nullable=False)
    feedback = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    interview = relationship("Interview", back_populates="answers")

    __table_args__ = (
        UniqueConstraint("interview_id", "question_index", name="uq_answers_interview_question"),
    )

    def __repr__(self):
        return f"<Answer(interview_id={self.interview_id}, question_index={self.question_index}, score={self.score})>"
