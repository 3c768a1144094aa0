"""
Tests for invitation tokens: issue, resolve, accept.
"""

from datetime import datetime, timedelta, timezone

import pytest

from app.core.exceptions import ConflictError, NotFoundError
from app.models.candidate import Candidate
from app.models.invitation import InvitationStatus
from app.services.invitations import InvitationTokenManager, generate_token


class TestGenerateToken:

    def test_tokens_are_unique(self):
        tokens = {generate_token(1, "jane@corp.io") for _ in range(50)}

        assert len(tokens) == 50

    def test_token_layout(self):
        candidate_id, digest, timestamp_ms, _ = generate_token(42, "Jane@Corp.io").split("-", 3)

        assert candidate_id == "42"
        assert len(digest) == 12
        assert timestamp_ms.isdigit()

    def test_email_digest_ignores_case(self):
        first = generate_token(None, "JANE@corp.io").split("-")[1]
        second = generate_token(None, "jane@corp.io").split("-")[1]

        assert first == second


class TestInvitationTokenManager:

    @pytest.fixture
    def manager(self, db_session):
        return InvitationTokenManager(db_session)

    def test_issue_and_resolve(self, manager):
        invitation = manager.issue(
            candidate_id=None,
            email="jane@corp.io",
            job_role="Backend Engineer",
            skillset=["Python", "PostgreSQL"],
            candidate_info={"name": "Jane Roe", "phone": "+1 415 867 5309", "resumeText": "Jane Roe resume"},
        )

        resolved = manager.resolve(invitation.token)

        assert resolved.id == invitation.id
        assert resolved.status == InvitationStatus.PENDING
        assert resolved.skillset == ["Python", "PostgreSQL"]
        assert resolved.expires_at is None

    def test_unknown_token(self, manager):
        with pytest.raises(NotFoundError):
            manager.resolve("0-deadbeef0000-0-nope")

    def test_expired_token(self, db_session):
        manager = InvitationTokenManager(db_session, ttl_hours=1)
        invitation = manager.issue(None, "jane@corp.io", "Backend Engineer")
        invitation.expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
        db_session.commit()

        with pytest.raises(NotFoundError, match="expired"):
            manager.resolve(invitation.token)

    def test_ttl_sets_expiry(self, db_session):
        invitation = InvitationTokenManager(db_session, ttl_hours=48).issue(None, "jane@corp.io", "Backend Engineer")

        assert invitation.expires_at is not None

    def test_accept_creates_candidate_from_snapshot(self, manager, db_session):
        invitation = manager.issue(
            None, "jane@corp.io", "Backend Engineer",
            candidate_info={"name": "Jane Roe", "phone": "+1 415 867 5309", "resumeText": "Jane Roe resume"},
        )

        accepted = manager.mark_accepted(invitation.token, "JANE@corp.io")

        assert accepted.status == InvitationStatus.ACCEPTED
        assert accepted.accepted_at is not None
        candidate = db_session.query(Candidate).filter(Candidate.id == accepted.candidate_id).one()
        assert candidate.name == "Jane Roe"
        assert candidate.resume_text == "Jane Roe resume"
        assert candidate.invited

    def test_accept_links_existing_candidate(self, manager, db_session, make_candidate):
        candidate = make_candidate("jane@corp.io")
        invitation = manager.issue(candidate.id, "jane@corp.io", "Backend Engineer")

        accepted = manager.mark_accepted(invitation.token, "jane@corp.io")

        assert accepted.candidate_id == candidate.id
        assert db_session.query(Candidate).count() == 1

    def test_accept_is_idempotent(self, manager, db_session):
        invitation = manager.issue(None, "jane@corp.io", "Backend Engineer", candidate_info={"name": "Jane Roe"})

        first = manager.mark_accepted(invitation.token, "jane@corp.io")
        second = manager.mark_accepted(invitation.token, "jane@corp.io")

        assert first.id == second.id
        assert second.status == InvitationStatus.ACCEPTED
        assert db_session.query(Candidate).count() == 1

    def test_email_mismatch_is_rejected(self, manager, db_session):
        invitation = manager.issue(None, "jane@corp.io", "Backend Engineer")

        with pytest.raises(ConflictError):
            manager.mark_accepted(invitation.token, "mallory@corp.io")

        assert manager.resolve(invitation.token).status == InvitationStatus.PENDING
        assert db_session.query(Candidate).count() == 0

    def test_latest_for_email(self, manager):
        manager.issue(None, "jane@corp.io", "Backend Engineer", skillset=["Python"])
        latest = manager.issue(None, "jane@corp.io", "Backend Engineer", skillset=["Go"])

        assert manager.latest_for_email("Jane@Corp.io").id == latest.id
        assert manager.latest_for_email("nobody@corp.io") is None
