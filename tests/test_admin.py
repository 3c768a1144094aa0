"""
Tests for admin endpoints.

Tests:
- Resume info extraction
- Sending interview invitations
- Disqualifying and deleting candidates
- AI provider selection
"""

from app.models.candidate import Candidate
from app.models.evaluation import Evaluation
from app.models.interview import Answer, Interview, InterviewStatus
from app.models.invitation import Invitation
from app.services.invitations import InvitationTokenManager


def invite(client, headers, email="jane@corp.io", **overrides):
    payload = {
        "candidateInfo": {"name": "Jane Roe", "email": email, "phone": "+1 415 867 5309"},
        "jobRole": "Backend Engineer",
        "skillset": "Python, PostgreSQL",
    }
    payload.update(overrides)
    return client.post("/api/admin/send-interview-invite", json=payload, headers=headers)


class TestExtractResumeInfo:

    def test_extract_from_text_resume(self, client, admin_headers):
        resume = b"Jane Roe\nSenior Backend Engineer\njane@corp.io\n+1 (415) 867-5309\nSkills: Python, FastAPI\n"

        response = client.post(
            "/api/admin/extract-resume-info",
            files={"resume": ("jane_roe.txt", resume, "text/plain")},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Jane Roe"
        assert data["email"] == "jane@corp.io"
        assert data["designation"] == "Senior Backend Engineer"
        assert data["skillset"][:2] == ["Python", "FastAPI"]
        assert data["pastCompanies"] == []

    def test_unreadable_file_still_returns_full_profile(self, client, admin_headers):
        response = client.post(
            "/api/admin/extract-resume-info",
            files={"resume": ("maria_garcia.pdf", b"not really a pdf", "application/pdf")},
            headers=admin_headers,
        )

        assert response.status_code == 200
        data = response.json()
        assert data["name"] == "Maria Garcia"
        assert data["email"] == "Not specified"
        assert data["phone"] == "Not specified"
        assert data["designation"] == "Not specified"
        assert data["pastCompanies"] == []
        assert data["skillset"] == []


class TestSendInvite:

    def test_invite_new_candidate(self, client, db_session, admin_headers, queued_tasks):
        response = invite(client, admin_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Invitation sent to jane@corp.io"

        candidate = db_session.query(Candidate).one()
        assert candidate.id == data["candidateId"]
        assert candidate.invited
        assert "Required Skills: Python, PostgreSQL" in candidate.resume_text

        invitation = db_session.query(Invitation).one()
        assert invitation.token == data["token"]
        assert invitation.skillset == ["Python", "PostgreSQL"]
        assert invitation.candidate_info["name"] == "Jane Roe"

        assert len(queued_tasks) == 1
        task_name, kwargs = queued_tasks[0]
        assert task_name.endswith("send_invitation_email_task")
        assert kwargs["to_email"] == "jane@corp.io"
        assert kwargs["token"] == data["token"]

    def test_invite_existing_candidate(self, client, db_session, admin_headers, make_candidate):
        candidate = make_candidate("jane@corp.io")

        response = invite(client, admin_headers, jobRole="Staff Engineer")

        assert response.json()["candidateId"] == candidate.id
        db_session.refresh(candidate)
        assert candidate.invited
        assert candidate.job_role == "Staff Engineer"
        assert db_session.query(Candidate).count() == 1

    def test_queue_failure_still_creates_invitation(self, client, db_session, admin_headers, monkeypatch):
        monkeypatch.setattr("app.api.endpoints.admin.queue_task_safely", lambda task, *a, **kw: False)

        response = invite(client, admin_headers)

        assert response.status_code == 200
        assert "could not be sent" in response.json()["message"]
        assert db_session.query(Invitation).count() == 1

    def test_invalid_candidate_email(self, client, admin_headers):
        response = invite(client, admin_headers, email="not-an-email")

        assert response.status_code == 400

    def test_invitation_lookup(self, client, admin_headers):
        token = invite(client, admin_headers).json()["token"]

        response = client.get(f"/api/invitations/{token}")

        assert response.status_code == 200
        data = response.json()
        assert data["email"] == "jane@corp.io"
        assert data["status"] == "pending"
        assert data["candidateInfo"]["phone"] == "+1 415 867 5309"

    def test_unknown_invitation_lookup(self, client):
        response = client.get("/api/invitations/0-000000000000-0-missing")

        assert response.status_code == 404


class TestCandidateActions:

    def test_disqualify(self, client, db_session, admin_headers, make_candidate):
        candidate = make_candidate("jane@corp.io")

        response = client.post(f"/api/admin/candidates/{candidate.id}/disqualify", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True, "candidateId": candidate.id, "message": "Candidate disqualified"}
        db_session.refresh(candidate)
        assert candidate.disqualified

    def test_disqualify_unknown(self, client, admin_headers):
        response = client.post("/api/admin/candidates/99999/disqualify", headers=admin_headers)

        assert response.status_code == 404

    def test_delete_cascades(self, client, db_session, admin_headers, make_candidate):
        candidate = make_candidate("jane@corp.io")
        interview = Interview(
            candidate_id=candidate.id,
            questions=["Q1"],
            current_question_index=1,
            status=InterviewStatus.COMPLETED,
        )
        interview.answers.append(Answer(question_index=0, question_text="Q1", answer_text="A1", score=7))
        interview.evaluation = Evaluation(
            overall_score=70, technical_score=70, behavioral_score=0,
            strengths=[], improvement_areas=[], recommendation="Recommended for the next round",
        )
        db_session.add(interview)
        db_session.commit()
        InvitationTokenManager(db_session).issue(candidate.id, "jane@corp.io", "Backend Engineer")

        response = client.delete(f"/api/admin/candidates/{candidate.id}", headers=admin_headers)

        assert response.status_code == 200
        for model in (Candidate, Interview, Answer, Evaluation, Invitation):
            assert db_session.query(model).count() == 0

    def test_delete_unknown(self, client, admin_headers):
        response = client.delete("/api/admin/candidates/99999", headers=admin_headers)

        assert response.status_code == 404


class TestAIProvider:

    def test_default_provider(self, client, admin_headers):
        response = client.get("/api/admin/ai-provider", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["provider"] in ("openai", "gemini")

    def test_set_provider(self, client, admin_headers):
        response = client.post("/api/admin/ai-provider", json={"provider": "gemini"}, headers=admin_headers)

        assert response.json() == {"provider": "gemini"}
        assert client.get("/api/admin/ai-provider", headers=admin_headers).json() == {"provider": "gemini"}

    def test_unknown_provider(self, client, admin_headers):
        response = client.post("/api/admin/ai-provider", json={"provider": "llama"}, headers=admin_headers)

        assert response.status_code == 400
