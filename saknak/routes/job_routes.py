"""HTTP entry points for the booking sweeps.

An external scheduler can call these instead of (or as well as) the
in-process APScheduler. Each endpoint accepts POST and GET and answers
OPTIONS preflight requests with an empty 200.
"""

import logging
from typing import Callable

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from saknak.database.init import get_db
from saknak.responses.job import job_failure, job_preflight, job_success
from saknak.services.booking_jobs import BookingJobs
from saknak.utils.dependencies import require_jobs_token

logger = logging.getLogger("saknak.jobs")

router = APIRouter(prefix="/functions", tags=["Jobs"])
booking_jobs = BookingJobs()


def run_job(name: str, sweep: Callable[[Session], dict], db: Session):
    logger.info("Starting %s", name)
    try:
        result = sweep(db)
    except Exception as e:
        db.rollback()
        logger.exception("Error in %s", name)
        return job_failure(str(e))
    return job_success(result)


@router.options("/{job_name}")
def job_options(job_name: str):
    return job_preflight()


@router.api_route(
    "/expire-bookings",
    methods=["GET", "POST"],
    dependencies=[Depends(require_jobs_token)],
)
def expire_bookings(db: Session = Depends(get_db)):
    return run_job("expire-bookings", booking_jobs.expire_unpaid_bookings, db)


@router.api_route(
    "/cleanup-expired-bookings",
    methods=["GET", "POST"],
    dependencies=[Depends(require_jobs_token)],
)
def cleanup_expired_bookings(db: Session = Depends(get_db)):
    return run_job("cleanup-expired-bookings", booking_jobs.expire_stale_bookings, db)


@router.api_route(
    "/rent-reminder",
    methods=["GET", "POST"],
    dependencies=[Depends(require_jobs_token)],
)
def rent_reminder(db: Session = Depends(get_db)):
    return run_job("rent-reminder", booking_jobs.send_rent_reminders, db)


@router.api_route(
    "/create-monthly-ratings",
    methods=["GET", "POST"],
    dependencies=[Depends(require_jobs_token)],
)
def create_monthly_ratings(db: Session = Depends(get_db)):
    return run_job("create-monthly-ratings", booking_jobs.send_rating_reminders, db)
