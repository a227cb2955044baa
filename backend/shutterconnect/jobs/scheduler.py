"""
Background job scheduler.

An APScheduler `BackgroundScheduler` runs housekeeping jobs inside the API
process. Job bodies are wrapped with `with_job_lock`; when several API
workers each run a scheduler, the lock makes sure only one of them does the
work for a given tick.

Usage:
    scheduler = get_scheduler()
    token_cleanup.register(scheduler)
    scheduler.start()
"""
import functools
from typing import Any, Callable, Optional

from apscheduler.events import EVENT_JOB_ERROR, EVENT_JOB_EXECUTED, JobExecutionEvent
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from shutterconnect.lib.db import get_db_context
from shutterconnect.lib.locks import release_lock, try_acquire_lock
from shutterconnect.lib.logging import get_logger

logger = get_logger(__name__)

_scheduler: Optional["SchedulerManager"] = None


def with_job_lock(job_id: str):
    """
    Run the job only when its lock is free.

    The wrapped function gets an open Session as its first argument. The
    session commits when the job returns.
    """
    lock_name = f"job:{job_id}"

    def decorator(func: Callable[..., Any]):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            with get_db_context() as db:
                if not try_acquire_lock(db, lock_name):
                    logger.info(f"Job {job_id} is running elsewhere, skipping this tick")
                    return None
                try:
                    return func(db, *args, **kwargs)
                finally:
                    release_lock(db, lock_name)
        return wrapper
    return decorator


class SchedulerManager:
    """Owns the BackgroundScheduler and its lifecycle."""

    def __init__(self):
        # One run at a time per job; missed runs collapse into one
        self.scheduler = BackgroundScheduler(
            timezone="UTC",
            job_defaults={
                "coalesce": True,
                "max_instances": 1,
                "misfire_grace_time": 300,
            },
        )
        self.scheduler.add_listener(self._log_job_event, EVENT_JOB_EXECUTED | EVENT_JOB_ERROR)

    @staticmethod
    def _log_job_event(event: JobExecutionEvent) -> None:
        if event.exception is not None:
            logger.error(
                f"Job {event.job_id} failed: {event.exception!r}",
                exc_info=event.exception,
            )
        else:
            logger.info(f"Job {event.job_id} finished", extra={"job_result": event.retval})

    @property
    def running(self) -> bool:
        return self.scheduler.running

    def start(self) -> None:
        if self.scheduler.running:
            logger.warning("Scheduler already running")
            return
        self.scheduler.start()
        logger.info("Scheduler started", extra={"jobs": [job.id for job in self.get_jobs()]})

    def shutdown(self, wait: bool = True) -> None:
        if not self.scheduler.running:
            logger.warning("Scheduler not running")
            return
        self.scheduler.shutdown(wait=wait)
        logger.info("Scheduler stopped")

    def add_interval_job(
        self,
        func: Callable[..., Any],
        job_id: str,
        seconds: int = 0,
        minutes: int = 0,
        hours: int = 0,
    ) -> None:
        """
        Schedule `func` every interval, replacing any job with the same id.

        Raises:
            ValueError: The interval is zero
        """
        if not (seconds or minutes or hours):
            raise ValueError("At least one of seconds, minutes, or hours must be specified")

        self.scheduler.add_job(
            func,
            trigger=IntervalTrigger(seconds=seconds, minutes=minutes, hours=hours, timezone="UTC"),
            id=job_id,
            replace_existing=True,
        )
        logger.info(
            f"Scheduled {job_id}",
            extra={"seconds": seconds, "minutes": minutes, "hours": hours},
        )

    def get_jobs(self) -> list:
        return self.scheduler.get_jobs()


def get_scheduler() -> SchedulerManager:
    global _scheduler

    if _scheduler is None:
        _scheduler = SchedulerManager()

    return _scheduler
