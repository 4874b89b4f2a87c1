from datetime import date, datetime, timezone
from typing import Optional

from dateutil.relativedelta import relativedelta


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes read back from the database."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def days_until(due: date, today: date) -> int:
    """Whole days from ``today`` to ``due``; negative once ``due`` has passed."""
    return (due - today).days


def previous_month_range(now: datetime) -> tuple[datetime, datetime]:
    """Return ``[first day of last month, first day of this month)`` for ``now``."""
    current_month = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    last_month = current_month - relativedelta(months=1)
    return last_month, current_month


def month_key(value: datetime) -> str:
    return value.strftime("%Y-%m")
