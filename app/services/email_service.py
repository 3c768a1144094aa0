"""
AWS SES email service for invitation and password reset emails.

Emails are plain text; links point at the frontend (FRONTEND_URL).
"""

import logging
from typing import List, Optional
import boto3
from botocore.exceptions import ClientError, BotoCoreError
from app.core.config import settings

logger = logging.getLogger(__name__)


class EmailService:
    """Sends transactional email through AWS SES."""

    def __init__(self):
        session_kwargs = {
            "region_name": settings.AWS_REGION,
        }

        # Explicit credentials if provided, otherwise the IAM role
        if settings.AWS_ACCESS_KEY_ID and settings.AWS_SECRET_ACCESS_KEY:
            session_kwargs["aws_access_key_id"] = settings.AWS_ACCESS_KEY_ID
            session_kwargs["aws_secret_access_key"] = settings.AWS_SECRET_ACCESS_KEY

        self.ses_client = boto3.client("ses", **session_kwargs)

    def _send(self, to_email: str, subject: str, text_body: str) -> bool:
        """
        Send one plain-text email.

        Returns:
            bool: True if SES accepted the message, False otherwise
        """
        try:
            response = self.ses_client.send_email(
                Source=f"{settings.AWS_SES_FROM_NAME} <{settings.AWS_SES_FROM_EMAIL}>",
                Destination={"ToAddresses": [to_email]},
                Message={
                    "Subject": {"Data": subject, "Charset": "UTF-8"},
                    "Body": {"Text": {"Data": text_body, "Charset": "UTF-8"}},
                },
            )
            logger.info(f"Email '{subject}' sent to {to_email} (MessageId: {response.get('MessageId')})")
            return True

        except ClientError as e:
            error_code = e.response["Error"]["Code"]
            error_message = e.response["Error"]["Message"]
            logger.error(f"AWS SES ClientError: {error_code} - {error_message}")
            if error_code == "MessageRejected":
                logger.error(f"Email rejected: {error_message}")
            elif error_code == "MailFromDomainNotVerified":
                logger.error("Sender email not verified in SES")
            return False

        except BotoCoreError as e:
            logger.error(f"AWS BotoCoreError: {str(e)}")
            return False

    def send_invitation_email(
        self,
        to_email: str,
        token: str,
        job_role: str,
        candidate_name: Optional[str] = None,
        skillset: Optional[List[str]] = None,
    ) -> bool:
        subject = f"Interview Invitation - {job_role}"
        return self._send(to_email, subject, build_invitation_text(token, job_role, candidate_name, skillset))

    def send_password_reset_email(self, to_email: str, reset_token: str) -> bool:
        subject = "Reset Your Password - AI Interview Platform"
        return self._send(to_email, subject, build_password_reset_text(reset_token))


def build_invitation_text(
    token: str,
    job_role: str,
    candidate_name: Optional[str] = None,
    skillset: Optional[List[str]] = None,
) -> str:
    greeting = f"Hi {candidate_name}," if candidate_name else "Hi there,"
    link = f"{settings.FRONTEND_URL.rstrip('/')}/signup?token={token}"
    skills = f"\nThe interview will focus on: {', '.join(skillset)}\n" if skillset else ""

    return f"""{greeting}

You have been invited to an AI-assisted interview for the {job_role} position.
{skills}
Create your account and start the interview here:
{link}

The interview has {settings.INTERVIEW_QUESTION_COUNT} questions and can only be taken once.

Best regards,
{settings.AWS_SES_FROM_NAME}
"""


def build_password_reset_text(reset_token: str) -> str:
    link = f"{settings.FRONTEND_URL.rstrip('/')}/reset-password?token={reset_token}"
    return f"""Hi there,

We received a request to reset your password. Use the link below to choose a new one:

{link}

This link expires in {settings.PASSWORD_RESET_EXPIRE_MINUTES} minutes. If you didn't request a reset, you can ignore this email.

Best regards,
{settings.AWS_SES_FROM_NAME}
"""


# Global email service instance
email_service = EmailService()
