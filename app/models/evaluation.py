"""
Evaluation model for the final scored assessment of an interview.

Created exactly once, when the last question is answered.
"""

from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, func
from sqlalchemy.orm import relationship
from app.core.database import Base, JSONType


class Evaluation(Base):
    """
    Numeric rollup plus AI narrative for a completed interview.

    - overall_score: mean of every answer score, 0-100
    - technical_score: mean of the technical (leading) answers, 0-100
    - behavioral_score: mean of the remaining answers, 0-100
    - strengths / improvement_areas / recommendation: summary collaborator output
    """
    __tablename__ = "evaluations"

    id = Column(Integer, primary_key=True, index=True)
    interview_id = Column(Integer, ForeignKey("interviews.id", ondelete="CASCADE"), nullable=False, unique=True, index=True)

    overall_score = Column(Integer, nullable=False, index=True)
    technical_score = Column(Integer, nullable=False)
    behavioral_score = Column(Integer, nullable=False)

    strengths = Column(JSONType, nullable=False, default=list)
    improvement_areas = Column(JSONType, nullable=False, default=list)
    recommendation = Column(String, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    interview = relationship("Interview", back_populates="evaluation")

    def __repr__(self):
        return f"<Evaluation(interview_id={self.interview_id}, overall_score={self.overall_score})>"
