"""Celery tasks for periodic maintenance."""

import logging

from notetaking.config import get_settings
from notetaking.db.session import SessionLocal
from notetaking.services.auth_service import AuthService
from notetaking.workers.celery_app import celery_app

logger = logging.getLogger(__name__)


@celery_app.task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    autoretry_for=(Exception,),
)
def purge_expired_signups(self) -> dict:
    """
    Remove pending signups whose one-time code has expired.

    Returns:
        Result metadata with the number of purged records
    """
    db = SessionLocal()
    service = AuthService(db, get_settings())

    try:
        purged = service.purge_expired_pending_signups()
        logger.info(f"Expired signup purge finished, {purged} removed")
        return {"status": "completed", "purged": purged}

    except Exception as e:
        logger.error(f"Expired signup purge failed: {str(e)}")
        db.rollback()
        raise

    finally:
        db.close()
