"""
Candidate database model.

A candidate is created on the first resume upload or admin invitation and
updated on repeat uploads with the same email. Email is the lookup key but
is deliberately not unique.
"""

from sqlalchemy import Column, Integer, String, Boolean, Text, DateTime, func
from sqlalchemy.orm import relationship
from app.core.database import Base


class Candidate(Base):
    """
    A person going through the interview pipeline.

    `disqualified` is set by an admin and blocks every interview transition
    and login for this candidate's email.
    """
    __tablename__ = "candidates"

    id = Column(Integer, primary_key=True, index=True)

    name = Column(String, nullable=False, default="Not specified")
    email = Column(String, nullable=False, index=True)
    phone = Column(String, nullable=False, default="Not specified")
    job_role = Column(String, nullable=False)

    # Plain text produced by the RawTextProvider
    resume_text = Column(Text, nullable=False, default="")

    invited = Column(Boolean, nullable=False, default=False)
    disqualified = Column(Boolean, nullable=False, default=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    interviews = relationship("Interview", back_populates="candidate", cascade="all, delete-orphan")
    invitations = relationship("Invitation", back_populates="candidate", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Candidate(id={self.id}, email='{self.email}', disqualified={self.disqualified})>"
