"""Celery application configuration."""

from celery import Celery
from celery.signals import setup_logging as celery_setup_logging

from notetaking.config import settings
from notetaking.logging_config import setup_logging

# Create Celery app
celery_app = Celery(
    "notetaking",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["notetaking.workers.tasks"],
)

# Celery configuration
celery_app.conf.update(
    # Task settings
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    # Task routing
    task_routes={
        "notetaking.workers.tasks.purge_expired_signups": {"queue": "maintenance"},
    },

    # Task execution settings
    task_acks_late=True,  # Acknowledge after task completion
    task_reject_on_worker_lost=True,  # Requeue if worker dies

    # Result settings
    result_expires=3600,

    # Periodic tasks
    beat_schedule={
        "purge-expired-signups": {
            "task": "notetaking.workers.tasks.purge_expired_signups",
            "schedule": float(settings.PENDING_SIGNUP_PURGE_INTERVAL),
        },
    },

    # Worker settings
    worker_prefetch_multiplier=1,
)


@celery_setup_logging.connect
def configure_worker_logging(**kwargs):
    """Use the application's log format in worker processes."""
    setup_logging(settings.LOG_LEVEL)
