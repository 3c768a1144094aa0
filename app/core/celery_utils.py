"""
Helpers for queueing Celery tasks from request handlers.

Queueing must never fail a request: if the broker is down the caller gets
False back and decides what to tell the user.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from typing import Optional
from celery import Task
from kombu import Connection
from app.core.config import settings

logger = logging.getLogger(__name__)

QUEUE_TIMEOUT_SECONDS = 5

# Publishing runs off the event loop thread; uvicorn's loop and kombu's
# connection pool do not mix well
_executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="celery_queue")


def _publish(task: Task, args: tuple, kwargs: dict) -> str:
    # Fresh connection per publish so a stale pooled connection can't hang us
    with Connection(settings.REDIS_URL) as conn:
        result = task.apply_async(
            args=args,
            kwargs=kwargs,
            connection=conn,
            retry=True,
            retry_policy={"max_retries": 2, "interval_start": 0, "interval_step": 0.2, "interval_max": 0.5},
        )
        return result.id


def queue_task_safely(task: Task, *args, **kwargs) -> bool:
    """
    Queue a Celery task without letting broker problems escape.

    Returns:
        bool: True if the task was queued, False otherwise

    Example:
        queue_task_safely(send_invitation_email_task, to_email="jane@corp.io", ...)
    """
    task_id: Optional[str] = None
    try:
        task_id = _executor.submit(_publish, task, args, kwargs).result(timeout=QUEUE_TIMEOUT_SECONDS)
    except FutureTimeout:
        logger.error(f"Timed out queueing task {task.name} after {QUEUE_TIMEOUT_SECONDS}s")
        return False
    except Exception as e:
        logger.error(f"Failed to queue task {task.name}: {e}")
        return False

    logger.info(f"Task {task.name} queued successfully: {task_id}")
    return True
