"""
Periodic purge of expired verification and password reset tokens.

Expired tokens are already rejected on use; this keeps the tables small.
"""
from sqlalchemy.orm import Session

from shutterconnect.jobs.scheduler import SchedulerManager, with_job_lock
from shutterconnect.lib.logging import get_logger
from shutterconnect.lib.settings import settings
from shutterconnect.services.token_service import (
    password_reset_tokens,
    verification_tokens,
)

logger = get_logger(__name__)

JOB_ID = "token_cleanup"


def purge_expired_tokens(db: Session) -> dict[str, int]:
    """Delete expired tokens of both kinds. Returns counts per kind."""
    removed = {
        "verification": verification_tokens(db).purge_expired(),
        "password_reset": password_reset_tokens(db).purge_expired(),
    }
    logger.info("Purged expired tokens", extra=removed)
    return removed


@with_job_lock(JOB_ID)
def run_token_cleanup(db: Session) -> dict[str, int]:
    return purge_expired_tokens(db)


def register(scheduler: SchedulerManager) -> None:
    """Schedule the cleanup at the configured interval."""
    scheduler.add_interval_job(
        run_token_cleanup,
        JOB_ID,
        minutes=settings.token_cleanup_interval_minutes,
    )
