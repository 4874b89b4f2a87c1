import logging
from typing import Callable

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from saknak.config import booking_settings
from saknak.database.init import SessionLocal
from saknak.services.booking_jobs import BookingJobs

logger = logging.getLogger("saknak.scheduler")


class BackgroundTasks:
    """Runs the booking sweeps on fixed intervals inside the API process."""

    def __init__(self, jobs: BookingJobs = None):
        self.jobs = jobs or BookingJobs()
        self.scheduler = AsyncIOScheduler()

        self._add_job(
            self.jobs.expire_unpaid_bookings,
            "expire_bookings_task",
            minutes=booking_settings.expire_interval_minutes,
        )
        self._add_job(
            self.jobs.expire_stale_bookings,
            "cleanup_expired_bookings_task",
            hours=booking_settings.cleanup_interval_hours,
        )
        self._add_job(
            self.jobs.send_rent_reminders,
            "rent_reminder_task",
            hours=booking_settings.rent_reminder_interval_hours,
        )
        self._add_job(
            self.jobs.send_rating_reminders,
            "monthly_ratings_task",
            hours=booking_settings.rating_reminder_interval_hours,
        )

    def _add_job(self, sweep: Callable, job_id: str, **interval) -> None:
        # Sweeps are synchronous; APScheduler runs them in its thread pool
        self.scheduler.add_job(
            self.run_sweep,
            "interval",
            args=[sweep, job_id],
            id=job_id,
            max_instances=1,
            coalesce=True,
            **interval,
        )

    def run_sweep(self, sweep: Callable, job_id: str) -> dict:
        db = SessionLocal()
        try:
            result = sweep(db)
            logger.info("%s finished: %s", job_id, result)
            return result
        except Exception:
            db.rollback()
            logger.exception("%s failed", job_id)
            return {}
        finally:
            db.close()
            SessionLocal.remove()

    def start(self) -> None:
        self.scheduler.start()
        logger.info("Background tasks initialized and scheduled")

    def shutdown(self) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Background tasks stopped")
