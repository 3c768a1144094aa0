"""
Celery tasks for email delivery.

Both tasks retry with exponential backoff when SES refuses or is unreachable.
"""

import logging
from typing import List, Optional
from celery import shared_task
from app.services.email_service import email_service

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    pass


@shared_task(
    bind=True,
    name="send_invitation_email_task",
    max_retries=3,
    default_retry_delay=60,
    autoretry_for=(EmailDeliveryError,),
    retry_backoff=True,
    retry_backoff_max=600,  # Max 10 minutes between retries
    retry_jitter=True
)
def send_invitation_email_task(
    self,
    to_email: str,
    token: str,
    job_role: str,
    candidate_name: Optional[str] = None,
    skillset: Optional[List[str]] = None,
):
    """
    Send an interview invitation email.

    Raises:
        EmailDeliveryError: If SES did not accept the message (triggers a retry)
    """
    logger.info(f"Sending invitation email to {to_email} (attempt {self.request.retries + 1})")

    sent = email_service.send_invitation_email(
        to_email=to_email,
        token=token,
        job_role=job_role,
        candidate_name=candidate_name,
        skillset=skillset,
    )
    if not sent:
        if self.request.retries >= self.max_retries:
            logger.error(f"All retry attempts exhausted for invitation to {to_email}")
        raise EmailDeliveryError(f"Failed to send invitation email to {to_email}")

    return {"status": "success", "email": to_email}


@shared_task(
    bind=True,
    name="send_password_reset_email_task",
    max_retries=3,
    default_retry_delay=30,
    autoretry_for=(EmailDeliveryError,),
    retry_backoff=True,
    retry_jitter=True
)
def send_password_reset_email_task(self, to_email: str, reset_token: str):
    logger.info(f"Sending password reset email to {to_email} (attempt {self.request.retries + 1})")

    if not email_service.send_password_reset_email(to_email=to_email, reset_token=reset_token):
        raise EmailDeliveryError(f"Failed to send password reset email to {to_email}")

    return {"status": "success", "email": to_email}
