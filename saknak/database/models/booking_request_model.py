from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Float,
    Index,
)
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import relationship

from saknak.database.init import Base
from saknak.enums.booking_status import BookingStatus
from saknak.enums.payment_status import PaymentStatus
from saknak.utils.date_helper import utcnow


def pending_slot_key(student_id: int, property_id: int) -> str:
    return f"{student_id}:{property_id}"


class BookingRequest(Base):
    __tablename__ = "booking_requests"

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, ForeignKey("properties.id"), nullable=False)
    student_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    message = Column(Text, nullable=True)

    status = Column(String(20), default=BookingStatus.PENDING.value, nullable=False)
    # "<student_id>:<property_id>" while pending, NULL otherwise. The unique
    # key allows one pending request per student and property.
    pending_slot = Column(String(64), unique=True, nullable=True)

    deposit_amount = Column(Float, nullable=True)
    vodafone_number = Column(String(20), nullable=True)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    payment_option = Column(String(20), nullable=True)
    payment_proof_url = Column(String(500), nullable=True)
    payment_status = Column(String(20), default=PaymentStatus.NONE.value, nullable=False)

    rent_due_date = Column(Date, nullable=True)
    rent_paid_date = Column(Date, nullable=True)

    student_can_rate = Column(Boolean, default=False, nullable=False)
    owner_can_rate = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=utcnow, nullable=True)

    # Declared before the relationship named "property" shadows the builtin
    @property
    def full_insurance_amount(self):
        return self.property.price if self.property else None

    property = relationship("Property", back_populates="booking_requests")
    student = relationship("User", foreign_keys=[student_id])
    owner = relationship("User", foreign_keys=[owner_id])

    __table_args__ = (
        Index("ix_booking_requests_status_expires_at", "status", "expires_at"),
        Index("ix_booking_requests_status_created_at", "status", "created_at"),
    )

    @hybrid_property
    def payment_confirmed(self) -> bool:
        return self.payment_status == PaymentStatus.CONFIRMED.value

    @payment_confirmed.inplace.expression
    @classmethod
    def _payment_confirmed_expression(cls):
        return cls.payment_status == PaymentStatus.CONFIRMED.value
