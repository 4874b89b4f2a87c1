import logging
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from saknak.config import booking_settings
from saknak.database.models.booking_request_model import BookingRequest, pending_slot_key
from saknak.database.models.property_model import Property
from saknak.database.models.user_model import User
from saknak.enums.booking_status import BookingStatus
from saknak.enums.payment_status import PaymentStatus
from saknak.schemas.booking_schema import (
    BookingRequestCreate,
    PaymentSubmission,
    RentUpdate,
)
from saknak.services import notification_templates
from saknak.services.booking_lifecycle import (
    BookingEvent,
    BookingState,
    SideEffect,
    decision_event,
    transition,
)
from saknak.services.exceptions import (
    DuplicateBookingError,
    InvalidTransitionError,
    NotFoundError,
    PermissionDeniedError,
    ProfileIncompleteError,
)
from saknak.services.notification_service import NotificationService
from saknak.utils.date_helper import utcnow

logger = logging.getLogger("saknak.bookings")


class BookingService:
    def __init__(self):
        self.notification_service = NotificationService()

    def get(self, db: Session, booking_id: int) -> Optional[BookingRequest]:
        return (
            db.query(BookingRequest)
            .options(joinedload(BookingRequest.property))
            .filter(BookingRequest.id == booking_id)
            .first()
        )

    def get_for_user(self, db: Session, user: User) -> List[BookingRequest]:
        """Bookings the user requested as a student, or received as an owner."""
        column = BookingRequest.student_id if user.is_student else BookingRequest.owner_id
        return (
            db.query(BookingRequest)
            .options(joinedload(BookingRequest.property))
            .filter(column == user.id)
            .order_by(BookingRequest.created_at.desc(), BookingRequest.id.desc())
            .all()
        )

    def get_accessible(self, db: Session, booking_id: int, user: User) -> BookingRequest:
        booking = self.get(db, booking_id)
        if not booking:
            raise NotFoundError(f"Booking {booking_id} not found")
        if user.id not in (booking.student_id, booking.owner_id):
            raise PermissionDeniedError("Not authorized to view this booking")
        return booking

    def pending_count_for_owner(self, db: Session, owner_id: int) -> int:
        return (
            db.query(BookingRequest)
            .filter(
                BookingRequest.owner_id == owner_id,
                BookingRequest.status == BookingStatus.PENDING.value,
            )
            .count()
        )

    def check_existing_pending(
        self, db: Session, student_id: int, property_id: int
    ) -> Optional[BookingRequest]:
        return (
            db.query(BookingRequest)
            .filter(
                BookingRequest.student_id == student_id,
                BookingRequest.property_id == property_id,
                BookingRequest.status == BookingStatus.PENDING.value,
            )
            .first()
        )

    def create(
        self,
        db: Session,
        student: User,
        booking_in: BookingRequestCreate,
        now: Optional[datetime] = None,
    ) -> BookingRequest:
        now = now or utcnow()

        property_obj = db.query(Property).filter(Property.id == booking_in.property_id).first()
        if not property_obj:
            raise NotFoundError(f"Property with ID {booking_in.property_id} not found.")

        if property_obj.owner_id == student.id:
            raise PermissionDeniedError("Property owners cannot book their own properties.")

        if student.is_student:
            missing = student.missing_profile_fields()
            if missing:
                raise ProfileIncompleteError(missing)

        if self.check_existing_pending(db, student.id, property_obj.id):
            raise DuplicateBookingError()

        booking = BookingRequest(
            property_id=property_obj.id,
            student_id=student.id,
            # Always taken from the property record, never from the client
            owner_id=property_obj.owner_id,
            message=booking_in.message,
            status=BookingStatus.PENDING.value,
            pending_slot=pending_slot_key(student.id, property_obj.id),
            deposit_amount=round(property_obj.price * booking_settings.deposit_rate, 2),
            vodafone_number=booking_settings.collection_number,
            expires_at=now + timedelta(minutes=booking_settings.payment_window_minutes),
            payment_status=PaymentStatus.NONE.value,
            created_at=now,
        )
        db.add(booking)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            logger.info(
                "Duplicate pending booking rejected by the store for student %s, property %s",
                student.id,
                property_obj.id,
            )
            raise DuplicateBookingError()

        db.refresh(booking)
        logger.info(
            "Booking %s created by student %s for property %s",
            booking.id,
            student.id,
            property_obj.id,
        )
        return booking

    def decide(
        self,
        db: Session,
        booking_id: int,
        owner: User,
        decision: str,
        now: Optional[datetime] = None,
    ) -> BookingRequest:
        """Accept or reject a pending booking and tell the student."""
        now = now or utcnow()
        event = decision_event(decision)

        booking = self.get(db, booking_id)
        if not booking:
            raise NotFoundError(f"Booking {booking_id} not found")
        if booking.owner_id != owner.id:
            raise PermissionDeniedError("Only the property owner can decide on this booking.")

        result = transition(BookingState.of(booking), event, now)

        updated = (
            db.query(BookingRequest)
            .filter(
                BookingRequest.id == booking.id,
                BookingRequest.status == BookingStatus.PENDING.value,
            )
            .update(
                {
                    BookingRequest.status: result.status.value,
                    BookingRequest.pending_slot: None,
                    BookingRequest.updated_at: now,
                },
                synchronize_session=False,
            )
        )
        if not updated:
            db.rollback()
            raise InvalidTransitionError("Booking is no longer pending.")

        if SideEffect.NOTIFY_STUDENT_DECISION in result.side_effects:
            title, body = notification_templates.booking_decision(
                result.status, self._property_title(booking)
            )
            self.notification_service.create(
                db, booking.student_id, title, body, commit=False
            )

        db.commit()
        db.refresh(booking)
        logger.info("Booking %s %s by owner %s", booking.id, result.status.value, owner.id)
        return booking

    def record_payment(
        self,
        db: Session,
        booking_id: int,
        student: User,
        payment_in: PaymentSubmission,
        now: Optional[datetime] = None,
    ) -> BookingRequest:
        now = now or utcnow()

        booking = self.get(db, booking_id)
        if not booking:
            raise NotFoundError(f"Booking {booking_id} not found")
        if booking.student_id != student.id:
            raise PermissionDeniedError("Only the requesting student can pay for this booking.")

        transition(BookingState.of(booking), BookingEvent.RECORD_PAYMENT, now)

        booking.payment_option = payment_in.payment_option.value
        if payment_in.payment_proof_url:
            booking.payment_proof_url = payment_in.payment_proof_url
        booking.payment_status = (
            PaymentStatus.CONFIRMED.value
            if payment_in.payment_proof_url
            else PaymentStatus.NONE.value
        )
        booking.updated_at = now
        db.commit()
        db.refresh(booking)
        logger.info(
            "Payment recorded for booking %s (option=%s, status=%s)",
            booking.id,
            booking.payment_option,
            booking.payment_status,
        )
        return booking

    def update_rent(
        self, db: Session, booking_id: int, owner: User, rent_in: RentUpdate
    ) -> BookingRequest:
        booking = self.get(db, booking_id)
        if not booking:
            raise NotFoundError(f"Booking {booking_id} not found")
        if booking.owner_id != owner.id:
            raise PermissionDeniedError("Only the property owner can update rent details.")
        if booking.status != BookingStatus.ACCEPTED.value:
            raise InvalidTransitionError("Rent can only be tracked on accepted bookings.")

        update_data = rent_in.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            setattr(booking, field, value)

        booking.updated_at = utcnow()
        db.commit()
        db.refresh(booking)
        return booking

    def _property_title(self, booking: BookingRequest) -> str:
        return booking.property.title if booking.property else "a property"
