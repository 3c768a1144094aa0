"""
Celery application configuration.

Redis is both the message broker and the result backend. The worker only
runs email delivery (invitations, password resets); everything on the
interview path stays synchronous in the API process.
"""

from celery import Celery
from celery.signals import setup_logging as celery_setup_logging
from app.core.config import settings
from app.core.logging_config import setup_logging

celery_app = Celery(
    "interview_platform_worker",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
    include=["app.tasks.email_tasks"],
)

celery_app.conf.update(
    # Serialization
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",

    timezone="UTC",
    enable_utc=True,

    # Emails are small; a stuck SES call should not hold a worker for long
    task_time_limit=120,
    task_soft_time_limit=90,
    result_expires=3600,

    # Ack after the send so a crashed worker retries the email
    task_acks_late=True,
    worker_prefetch_multiplier=1,
)


@celery_setup_logging.connect
def configure_worker_logging(**kwargs):
    # Connecting this signal stops Celery from installing its own handlers
    setup_logging(log_level=settings.LOG_LEVEL, json_logs=settings.JSON_LOGS, role="worker")
