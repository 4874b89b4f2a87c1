from sqlalchemy import (
    Column,
    Integer,
    Text,
    DateTime,
    ForeignKey,
    CheckConstraint,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from saknak.database.init import Base
from saknak.utils.date_helper import utcnow


class Rating(Base):
    __tablename__ = "ratings"

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("booking_requests.id"), nullable=False)
    from_user = Column(Integer, ForeignKey("users.id"), nullable=False)
    to_user = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    stars = Column(Integer, nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    rater = relationship("User", foreign_keys=[from_user])

    __table_args__ = (
        UniqueConstraint("booking_id", "from_user", name="uq_rating_booking_from_user"),
        CheckConstraint("stars BETWEEN 1 AND 5", name="ck_rating_stars_range"),
    )
