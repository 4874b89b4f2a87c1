from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint

from saknak.database.init import Base
from saknak.utils.date_helper import utcnow


class BookingReminder(Base):
    """Marks a reminder as sent for a booking within a period (a day or a month)."""

    __tablename__ = "booking_reminders"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("booking_requests.id"), nullable=False)
    kind = Column(String(40), nullable=False)
    period_key = Column(String(20), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    __table_args__ = (
        UniqueConstraint("booking_id", "kind", "period_key", name="uq_booking_reminder_period"),
    )
