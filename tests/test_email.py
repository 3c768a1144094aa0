"""
Tests for transactional email content and SES error handling.
"""

from botocore.exceptions import ClientError, EndpointConnectionError

from app.core.config import settings
from app.services.email_service import EmailService, build_invitation_text, build_password_reset_text


class StubSES:
    def __init__(self, error=None):
        self.error = error
        self.sent = []

    def send_email(self, **kwargs):
        if self.error:
            raise self.error
        self.sent.append(kwargs)
        return {"MessageId": "msg-1"}


def service_with(ses_client):
    service = EmailService()
    service.ses_client = ses_client
    return service


class TestEmailText:

    def test_invitation_text(self):
        text = build_invitation_text("tok-123", "Backend Engineer", "Jane Roe", ["Python", "PostgreSQL"])

        assert text.startswith("Hi Jane Roe,")
        assert "Backend Engineer position" in text
        assert "focus on: Python, PostgreSQL" in text
        assert f"{settings.FRONTEND_URL.rstrip('/')}/signup?token=tok-123" in text

    def test_invitation_text_without_name_or_skills(self):
        text = build_invitation_text("tok-123", "Backend Engineer")

        assert text.startswith("Hi there,")
        assert "focus on" not in text

    def test_password_reset_text(self):
        text = build_password_reset_text("reset-abc")

        assert "/reset-password?token=reset-abc" in text
        assert f"{settings.PASSWORD_RESET_EXPIRE_MINUTES} minutes" in text


class TestEmailService:

    def test_send_invitation(self):
        ses = StubSES()

        sent = service_with(ses).send_invitation_email("jane@corp.io", "tok-123", "Backend Engineer")

        assert sent is True
        assert ses.sent[0]["Destination"] == {"ToAddresses": ["jane@corp.io"]}
        assert "tok-123" in ses.sent[0]["Message"]["Body"]["Text"]["Data"]

    def test_ses_rejection_returns_false(self):
        error = ClientError({"Error": {"Code": "MessageRejected", "Message": "Address blacklisted"}}, "SendEmail")

        assert service_with(StubSES(error)).send_password_reset_email("jane@corp.io", "reset-abc") is False

    def test_connection_failure_returns_false(self):
        error = EndpointConnectionError(endpoint_url="https://email.us-east-1.amazonaws.com")

        assert service_with(StubSES(error)).send_password_reset_email("jane@corp.io", "reset-abc") is False
