"""
Invitation tokens for admin-issued interview links.

Token layout: "{candidate_id}-{email digest}-{unix ms}-{random}". Uniqueness
comes from the timestamp plus `secrets` randomness and is also enforced by
the unique index on invitations.token.
"""

import hashlib
import logging
import secrets
import time
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from app.core.database import as_utc
from app.core.exceptions import ConflictError, NotFoundError
from app.crud import candidate as crud_candidate
from app.models.invitation import Invitation, InvitationStatus

logger = logging.getLogger(__name__)


def generate_token(candidate_id: Optional[int], email: str) -> str:
    digest = hashlib.sha256(email.strip().lower().encode("utf-8")).hexdigest()[:12]
    timestamp_ms = int(time.time() * 1000)
    return f"{candidate_id or 0}-{digest}-{timestamp_ms}-{secrets.token_urlsafe(12)}"


class InvitationTokenManager:
    """Issues, resolves and accepts invitation tokens."""

    def __init__(self, db: Session, ttl_hours: Optional[int] = None):
        self.db = db
        self.ttl_hours = ttl_hours

    def issue(
        self,
        candidate_id: Optional[int],
        email: str,
        job_role: str,
        skillset: Optional[List[str]] = None,
        candidate_info: Optional[Dict[str, Any]] = None,
    ) -> Invitation:
        """
        Create a pending invitation.

        Args:
            candidate_id: Candidate the invitation belongs to, if already known
            email: Invited email address
            job_role: Role the candidate is invited to interview for
            skillset: Skills the interview should focus on
            candidate_info: Snapshot of the admin-submitted candidate details

        Returns:
            Invitation: The persisted invitation with its token
        """
        expires_at = None
        if self.ttl_hours:
            expires_at = datetime.now(timezone.utc) + timedelta(hours=self.ttl_hours)

        invitation = Invitation(
            candidate_id=candidate_id,
            email=email.strip(),
            token=generate_token(candidate_id, email),
            job_role=job_role,
            skillset=list(skillset or []),
            status=InvitationStatus.PENDING,
            candidate_info=dict(candidate_info or {}),
            expires_at=expires_at,
        )
        self.db.add(invitation)
        self.db.commit()
        self.db.refresh(invitation)

        logger.info(f"Issued invitation {invitation.id} for {invitation.email} (expires: {expires_at or 'never'})")
        return invitation

    def _lookup(self, token: str, for_update: bool = False) -> Invitation:
        query = self.db.query(Invitation).filter(Invitation.token == token)
        if for_update:
            query = query.with_for_update().populate_existing()
        invitation = query.first()

        if not invitation:
            raise NotFoundError("Invitation not found")

        expires_at = as_utc(invitation.expires_at)
        if expires_at is not None and expires_at < datetime.now(timezone.utc):
            logger.info(f"Invitation {invitation.id} expired at {expires_at}")
            raise NotFoundError("Invitation has expired")
        return invitation

    def resolve(self, token: str) -> Invitation:
        """
        Raises:
            NotFoundError: Unknown or expired token
        """
        return self._lookup(token)

    def latest_for_email(self, email: str) -> Optional[Invitation]:
        return (
            self.db.query(Invitation)
            .filter(func.lower(Invitation.email) == email.strip().lower())
            .order_by(Invitation.id.desc())
            .first()
        )

    def mark_accepted(self, token: str, email: str, name: Optional[str] = None) -> Invitation:
        """
        Accept an invitation on behalf of `email`.

        Idempotent: an already accepted invitation is returned unchanged and
        no second candidate is created.

        Raises:
            NotFoundError: Unknown or expired token
            ConflictError: `email` is not the invited address
        """
        invitation = self._lookup(token, for_update=True)

        if invitation.email.strip().lower() != email.strip().lower():
            self.db.rollback()
            logger.warning(f"Invitation {invitation.id} email mismatch: invited {invitation.email}, got {email}")
            raise ConflictError("Email does not match the invitation")

        if invitation.status == InvitationStatus.ACCEPTED:
            self.db.rollback()
            logger.info(f"Invitation {invitation.id} already accepted")
            return invitation

        info = invitation.candidate_info or {}
        candidate = invitation.candidate or crud_candidate.get_by_email(self.db, invitation.email)
        if candidate is None:
            candidate = crud_candidate.create(
                self.db,
                email=invitation.email,
                job_role=invitation.job_role,
                name=name or info.get("name"),
                phone=info.get("phone"),
                resume_text=info.get("resumeText") or "",
                invited=True,
                commit=False,
            )
            logger.info(f"Created candidate {candidate.id} from invitation {invitation.id}")
        else:
            candidate.invited = True

        invitation.candidate_id = candidate.id
        invitation.status = InvitationStatus.ACCEPTED
        invitation.accepted_at = datetime.now(timezone.utc)
        self.db.commit()
        self.db.refresh(invitation)

        logger.info(f"Invitation {invitation.id} accepted by {email}")
        return invitation
