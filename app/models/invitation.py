"""
Invitation model for admin-issued interview links.

Each invitation binds a candidate email to a job role and skillset through
an opaque token. Status moves PENDING -> ACCEPTED exactly once, on signup
with a matching token and email.
"""

import enum
from sqlalchemy import Column, Integer, String, ForeignKey, Enum, DateTime, func
from sqlalchemy.orm import relationship
from app.core.database import Base, JSONType


class InvitationStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"


class Invitation(Base):
    __tablename__ = "invitations"

    id = Column(Integer, primary_key=True, index=True)
    candidate_id = Column(Integer, ForeignKey("candidates.id", ondelete="CASCADE"), nullable=True, index=True)

    email = Column(String, nullable=False, index=True)
    token = Column(String, nullable=False, unique=True, index=True)
    job_role = Column(String, nullable=False)
    skillset = Column(JSONType, nullable=False, default=list)

    status = Column(
        Enum(InvitationStatus, values_callable=lambda e: [m.value for m in e]),
        default=InvitationStatus.PENDING,
        nullable=False
    )

    # Snapshot of what the admin submitted: name, email, phone, resume text
    candidate_info = Column(JSONType, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    expires_at = Column(DateTime(timezone=True), nullable=True)  # None = never expires
    accepted_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    candidate = relationship("Candidate", back_populates="invitations")

    def __repr__(self):
        return f"<Invitation(id={self.id}, email='{self.email}', status={self.status.value})>"
