"""
Celery tasks package.

- email_tasks: invitation and password reset emails
"""

from app.tasks import email_tasks

__all__ = ["email_tasks"]
