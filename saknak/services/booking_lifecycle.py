"""Booking request state machine.

Every status change of a booking request goes through :func:`transition`,
whether it comes from an owner decision, a student payment or one of the
scheduled sweeps. The function is pure: it looks at a snapshot of the booking
and an event and returns the new status plus the side effects the caller has
to carry out.

    pending --accept------------------> accepted
    pending --reject------------------> rejected
    pending --expire_payment_window---> expired
    pending --expire_stale------------> expired
    pending --record_payment----------> pending

accepted, rejected and expired are terminal.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from saknak.config import booking_settings
from saknak.enums.booking_status import BookingStatus
from saknak.enums.payment_status import PaymentStatus
from saknak.services.exceptions import (
    InvalidTransitionError,
    PaymentWindowClosedError,
    ValidationFailedError,
)
from saknak.utils.date_helper import as_utc


class BookingEvent(str, Enum):
    ACCEPT = "accept"
    REJECT = "reject"
    RECORD_PAYMENT = "record_payment"
    EXPIRE_PAYMENT_WINDOW = "expire_payment_window"
    EXPIRE_STALE = "expire_stale"


class SideEffect(str, Enum):
    NOTIFY_STUDENT_DECISION = "notify_student_decision"
    NOTIFY_STUDENT_EXPIRED = "notify_student_expired"


@dataclass(frozen=True)
class BookingState:
    status: BookingStatus
    payment_confirmed: bool = False
    expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    def of(cls, booking) -> "BookingState":
        return cls(
            status=BookingStatus(booking.status),
            payment_confirmed=booking.payment_status == PaymentStatus.CONFIRMED.value,
            expires_at=as_utc(booking.expires_at),
            created_at=as_utc(booking.created_at),
        )


@dataclass(frozen=True)
class Transition:
    status: BookingStatus
    side_effects: tuple = ()


_DECISIONS = {
    BookingStatus.ACCEPTED.value: BookingEvent.ACCEPT,
    BookingStatus.REJECTED.value: BookingEvent.REJECT,
}


def decision_event(decision: str) -> BookingEvent:
    """Map an owner decision (``accepted``/``rejected``) onto its event."""
    event = _DECISIONS.get(str(decision))
    if event is None:
        raise ValidationFailedError(
            f"Invalid decision: {decision}. Expected one of: accepted, rejected",
            code="invalid_decision",
        )
    return event


def payment_window_elapsed(state: BookingState, now: datetime) -> bool:
    return (
        not state.payment_confirmed
        and state.expires_at is not None
        and state.expires_at < now
    )


def stale_cutoff(now: datetime, stale_after_days: Optional[int] = None) -> datetime:
    days = booking_settings.stale_after_days if stale_after_days is None else stale_after_days
    return now - timedelta(days=days)


def is_stale(state: BookingState, now: datetime, stale_after_days: Optional[int] = None) -> bool:
    return state.created_at is not None and state.created_at < stale_cutoff(now, stale_after_days)


def transition(
    state: BookingState,
    event: BookingEvent,
    now: datetime,
    stale_after_days: Optional[int] = None,
) -> Transition:
    if state.status != BookingStatus.PENDING:
        raise InvalidTransitionError(
            f"Cannot {event.value.replace('_', ' ')} a booking that is already {state.status.value}."
        )

    if event in (BookingEvent.ACCEPT, BookingEvent.REJECT):
        new_status = (
            BookingStatus.ACCEPTED if event == BookingEvent.ACCEPT else BookingStatus.REJECTED
        )
        return Transition(new_status, (SideEffect.NOTIFY_STUDENT_DECISION,))

    if event == BookingEvent.RECORD_PAYMENT:
        if state.expires_at is not None and state.expires_at < now:
            raise PaymentWindowClosedError("The payment window for this booking has closed.")
        return Transition(BookingStatus.PENDING)

    if event == BookingEvent.EXPIRE_PAYMENT_WINDOW:
        if not payment_window_elapsed(state, now):
            raise InvalidTransitionError("Booking payment window has not elapsed.")
        return Transition(BookingStatus.EXPIRED)

    if event == BookingEvent.EXPIRE_STALE:
        if not is_stale(state, now, stale_after_days):
            raise InvalidTransitionError("Booking is not old enough to expire.")
        return Transition(BookingStatus.EXPIRED, (SideEffect.NOTIFY_STUDENT_EXPIRED,))

    raise InvalidTransitionError(f"Unknown booking event: {event}")
