from saknak.config import booking_settings
from saknak.enums.booking_status import BookingStatus


def booking_decision(status: BookingStatus, property_title: str) -> tuple[str, str]:
    if status == BookingStatus.ACCEPTED:
        return (
            "Booking Accepted",
            f'Your booking request for "{property_title}" has been accepted by the owner.',
        )
    return (
        "Booking Rejected",
        f'Your booking request for "{property_title}" has been rejected by the owner.',
    )


def booking_expired(property_title: str) -> tuple[str, str]:
    return (
        "Booking Expired",
        f'Your booking request for "{property_title}" has expired due to inactivity.',
    )


def rent_upcoming(property_title: str, days: int) -> tuple[str, str]:
    points = booking_settings.rent_reminder_bonus_points
    return (
        "⏰ Rent payment is coming up",
        f'Rent for "{property_title}" is due in {days} days. '
        f"Pay within this window and earn +{points} points!",
    )


def rent_urgent(property_title: str, days: int) -> tuple[str, str]:
    when = "today" if days == 0 else "tomorrow"
    return ("🚨 Urgent: rent payment due", f'Rent for "{property_title}" is due {when}!')


def rent_overdue_student(property_title: str, days_overdue: int) -> tuple[str, str]:
    return (
        "⚠️ Rent payment overdue",
        f'Rent for "{property_title}" is {days_overdue} day(s) overdue. '
        "Please pay as soon as possible.",
    )


def rent_overdue_owner(property_title: str, days_overdue: int) -> tuple[str, str]:
    return (
        "⚠️ Tenant rent overdue",
        f'Rent for "{property_title}" is {days_overdue} day(s) overdue.',
    )


def rate_owner(property_title: str) -> tuple[str, str]:
    return (
        "Rate Your Owner",
        f'Please rate your experience with the owner of "{property_title}". '
        "Your feedback helps our community!",
    )


def rate_student() -> tuple[str, str]:
    return (
        "Rate Your Tenant",
        "Please rate your experience with your tenant. "
        "Your feedback helps maintain quality in our community!",
    )
