"""Scheduled sweeps over booking requests.

Each sweep is a stateless run: it loads its whole candidate set in one query,
walks it sequentially and returns the counters reported by the job endpoint.
Status changes are applied with a conditional update that re-checks the
selection predicate on the row, so two overlapping runs never expire the same
booking twice. A failure to notify one booking is logged and the sweep moves
on to the next one.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from saknak.config import booking_settings
from saknak.database.models.booking_reminder_model import BookingReminder
from saknak.database.models.booking_request_model import BookingRequest
from saknak.enums.booking_status import BookingStatus
from saknak.enums.payment_status import PaymentStatus
from saknak.enums.reminder_kind import ReminderKind
from saknak.services import notification_templates
from saknak.services.booking_lifecycle import (
    BookingEvent,
    BookingState,
    SideEffect,
    stale_cutoff,
    transition,
)
from saknak.services.exceptions import InvalidTransitionError
from saknak.services.notification_service import NotificationService
from saknak.services.rating_service import RatingService
from saknak.utils.date_helper import days_until, month_key, previous_month_range, utcnow

logger = logging.getLogger("saknak.jobs")


@dataclass(frozen=True)
class _BookingSnapshot:
    id: int
    student_id: int
    owner_id: int
    property_title: Optional[str]
    rent_due_date: Optional[date] = None


def _snapshot(booking: BookingRequest) -> _BookingSnapshot:
    return _BookingSnapshot(
        id=booking.id,
        student_id=booking.student_id,
        owner_id=booking.owner_id,
        property_title=booking.property.title if booking.property else None,
        rent_due_date=booking.rent_due_date,
    )


class BookingJobs:
    def __init__(self):
        self.notification_service = NotificationService()
        self.rating_service = RatingService()

    # ------------------------------------------------------------------
    # Expiry sweeps
    # ------------------------------------------------------------------

    def expire_unpaid_bookings(self, db: Session, now: Optional[datetime] = None) -> dict:
        """Expire pending bookings whose payment window closed without a confirmed payment."""
        now = now or utcnow()
        predicate = (
            BookingRequest.status == BookingStatus.PENDING.value,
            BookingRequest.payment_status != PaymentStatus.CONFIRMED.value,
            BookingRequest.expires_at < now,
        )

        candidates = db.query(BookingRequest).filter(*predicate).all()
        logger.info("Found %s bookings past their payment window", len(candidates))

        expired_count = 0
        for booking in candidates:
            try:
                transition(BookingState.of(booking), BookingEvent.EXPIRE_PAYMENT_WINDOW, now)
            except InvalidTransitionError as e:
                logger.info("Skipping booking %s: %s", booking.id, e)
                continue

            if self._expire(db, booking.id, predicate, now):
                expired_count += 1

        logger.info("Payment window sweep expired %s bookings", expired_count)
        return {"expiredCount": expired_count}

    def expire_stale_bookings(self, db: Session, now: Optional[datetime] = None) -> dict:
        """Expire pending bookings older than the retention window and tell the student."""
        now = now or utcnow()
        predicate = (
            BookingRequest.status == BookingStatus.PENDING.value,
            BookingRequest.created_at < stale_cutoff(now),
        )

        candidates = (
            db.query(BookingRequest)
            .options(joinedload(BookingRequest.property))
            .filter(*predicate)
            .all()
        )
        logger.info("Found %s stale pending bookings", len(candidates))

        work = []
        for booking in candidates:
            try:
                result = transition(BookingState.of(booking), BookingEvent.EXPIRE_STALE, now)
            except InvalidTransitionError as e:
                logger.info("Skipping booking %s: %s", booking.id, e)
                continue
            work.append((_snapshot(booking), result))

        expired_count = 0
        notifications_sent = 0
        for snapshot, result in work:
            if not self._expire(db, snapshot.id, predicate, now):
                continue
            expired_count += 1

            if SideEffect.NOTIFY_STUDENT_EXPIRED in result.side_effects:
                title, body = notification_templates.booking_expired(
                    snapshot.property_title or "a property"
                )
                if self._notify(db, snapshot.id, snapshot.student_id, title, body):
                    notifications_sent += 1

        logger.info(
            "Cleanup complete. Expired %s bookings and sent %s notifications.",
            expired_count,
            notifications_sent,
        )
        return {"expiredCount": expired_count, "notificationsSent": notifications_sent}

    # ------------------------------------------------------------------
    # Reminder sweeps
    # ------------------------------------------------------------------

    def send_rent_reminders(self, db: Session, today: Optional[date] = None) -> dict:
        today = today or utcnow().date()
        period_key = today.isoformat()
        lead_days = booking_settings.rent_reminder_lead_days

        bookings = (
            db.query(BookingRequest)
            .options(joinedload(BookingRequest.property))
            .filter(
                BookingRequest.status == BookingStatus.ACCEPTED.value,
                BookingRequest.rent_paid_date.is_(None),
                BookingRequest.rent_due_date.isnot(None),
            )
            .all()
        )
        snapshots = [_snapshot(b) for b in bookings]
        logger.info("Found %s bookings with unpaid rent", len(snapshots))

        notifications_sent = 0
        for booking in snapshots:
            days = days_until(booking.rent_due_date, today)
            title_text = booking.property_title or "your property"
            logger.debug("Booking %s: %s days until rent is due", booking.id, days)

            if days == lead_days:
                title, body = notification_templates.rent_upcoming(title_text, days)
                if self._notify(
                    db, booking.id, booking.student_id, title, body,
                    kind=ReminderKind.RENT_UPCOMING, period_key=period_key,
                ):
                    notifications_sent += 1

            elif 0 <= days <= 1:
                title, body = notification_templates.rent_urgent(title_text, days)
                if self._notify(
                    db, booking.id, booking.student_id, title, body,
                    kind=ReminderKind.RENT_URGENT, period_key=period_key,
                ):
                    notifications_sent += 1

            elif days < 0:
                days_overdue = abs(days)
                title, body = notification_templates.rent_overdue_student(title_text, days_overdue)
                if self._notify(
                    db, booking.id, booking.student_id, title, body,
                    kind=ReminderKind.RENT_OVERDUE_STUDENT, period_key=period_key,
                ):
                    notifications_sent += 1

                title, body = notification_templates.rent_overdue_owner(title_text, days_overdue)
                if self._notify(
                    db, booking.id, booking.owner_id, title, body,
                    kind=ReminderKind.RENT_OVERDUE_OWNER, period_key=period_key,
                ):
                    notifications_sent += 1

        logger.info("Rent reminder check complete. Sent %s notifications.", notifications_sent)
        return {"bookingsChecked": len(snapshots), "notificationsSent": notifications_sent}

    def send_rating_reminders(self, db: Session, now: Optional[datetime] = None) -> dict:
        """Open rating for last month's accepted bookings and remind whoever has not rated."""
        now = now or utcnow()
        start, end = previous_month_range(now)
        period_key = month_key(start)
        logger.info("Checking bookings from %s to %s", start.isoformat(), end.isoformat())

        bookings = (
            db.query(BookingRequest)
            .options(joinedload(BookingRequest.property))
            .filter(
                BookingRequest.status == BookingStatus.ACCEPTED.value,
                BookingRequest.created_at >= start,
                BookingRequest.created_at < end,
            )
            .all()
        )
        snapshots = [_snapshot(b) for b in bookings]
        logger.info("Found %s bookings from last month", len(snapshots))

        notifications_sent = 0
        for booking in snapshots:
            try:
                student_rated = self.rating_service.exists(
                    db, booking.id, booking.student_id, booking.owner_id
                )
                owner_rated = self.rating_service.exists(
                    db, booking.id, booking.owner_id, booking.student_id
                )
            except SQLAlchemyError:
                db.rollback()
                logger.exception("Error checking ratings for booking %s", booking.id)
                continue

            if not student_rated:
                self._open_rating(db, booking.id, BookingRequest.student_can_rate)
                title, body = notification_templates.rate_owner(
                    booking.property_title or "the property"
                )
                if self._notify(
                    db, booking.id, booking.student_id, title, body,
                    kind=ReminderKind.RATE_OWNER, period_key=period_key,
                ):
                    notifications_sent += 1

            if not owner_rated:
                self._open_rating(db, booking.id, BookingRequest.owner_can_rate)
                title, body = notification_templates.rate_student()
                if self._notify(
                    db, booking.id, booking.owner_id, title, body,
                    kind=ReminderKind.RATE_STUDENT, period_key=period_key,
                ):
                    notifications_sent += 1

        logger.info(
            "Monthly rating reminders complete. Sent %s notifications.", notifications_sent
        )
        return {"bookingsChecked": len(snapshots), "notificationsSent": notifications_sent}

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _expire(self, db: Session, booking_id: int, predicate: tuple, now: datetime) -> bool:
        updated = (
            db.query(BookingRequest)
            .filter(BookingRequest.id == booking_id, *predicate)
            .update(
                {
                    BookingRequest.status: BookingStatus.EXPIRED.value,
                    BookingRequest.pending_slot: None,
                    BookingRequest.updated_at: now,
                },
                synchronize_session=False,
            )
        )
        db.commit()
        if updated:
            logger.info("Booking %s expired", booking_id)
        return bool(updated)

    def _open_rating(self, db: Session, booking_id: int, flag) -> None:
        try:
            db.query(BookingRequest).filter(
                BookingRequest.id == booking_id, flag.is_(False)
            ).update({flag: True}, synchronize_session=False)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Failed to open rating for booking %s", booking_id)

    def _notify(
        self,
        db: Session,
        booking_id: int,
        user_id: int,
        title: str,
        body: str,
        kind: Optional[ReminderKind] = None,
        period_key: Optional[str] = None,
    ) -> bool:
        """Insert one notification. With ``kind`` it is sent at most once per period."""
        try:
            if kind is not None:
                already_sent = (
                    db.query(BookingReminder.id)
                    .filter(
                        BookingReminder.booking_id == booking_id,
                        BookingReminder.kind == kind.value,
                        BookingReminder.period_key == period_key,
                    )
                    .first()
                )
                if already_sent:
                    logger.debug(
                        "Reminder %s for booking %s already sent for %s",
                        kind, booking_id, period_key,
                    )
                    return False
                db.add(BookingReminder(booking_id=booking_id, kind=kind.value, period_key=period_key))

            self.notification_service.create(db, user_id, title, body, commit=False)
            db.commit()
            return True
        except IntegrityError:
            db.rollback()
            logger.info("Reminder %s for booking %s was sent by a concurrent run", kind, booking_id)
            return False
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Error sending notification for booking %s", booking_id)
            return False
