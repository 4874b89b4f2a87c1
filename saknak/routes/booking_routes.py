import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from saknak.database.init import get_db
from saknak.database.models.user_model import User
from saknak.schemas.booking_schema import (
    BookingDecision,
    BookingRequestCreate,
    BookingRequestResponse,
    PaymentSubmission,
    RentUpdate,
)
from saknak.services.booking_service import BookingService
from saknak.services.exceptions import BookingError
from saknak.utils.dependencies import get_current_user, owner_required, student_required
from saknak.responses.success import created_response, data_response
from saknak.responses.error import domain_error, internal_server_error

logger = logging.getLogger("saknak.bookings")

router = APIRouter(prefix="/bookings", tags=["Bookings"])
booking_service = BookingService()


@router.post("")
def create_booking_request(
    booking_in: BookingRequestCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(student_required),
):
    """Send a booking request and open its payment window."""
    try:
        booking = booking_service.create(db, current_user, booking_in)
        return created_response(BookingRequestResponse.model_validate(booking))
    except BookingError as e:
        return domain_error(e)
    except Exception as e:
        db.rollback()
        logger.exception("Failed to create booking request")
        return internal_server_error(str(e))


@router.get("")
def list_my_bookings(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    bookings = booking_service.get_for_user(db, current_user)
    return data_response([BookingRequestResponse.model_validate(b) for b in bookings])


@router.get("/pending-count")
def get_pending_count(
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_required),
):
    return data_response({"count": booking_service.pending_count_for_owner(db, current_user.id)})


@router.get("/{booking_id}")
def get_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        booking = booking_service.get_accessible(db, booking_id, current_user)
    except BookingError as e:
        return domain_error(e)
    return data_response(BookingRequestResponse.model_validate(booking))


@router.patch("/{booking_id}/status")
def decide_booking(
    booking_id: int,
    decision: BookingDecision,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_required),
):
    """Owner accepts or rejects a pending request."""
    try:
        booking = booking_service.decide(db, booking_id, current_user, decision.status)
        return data_response(BookingRequestResponse.model_validate(booking))
    except BookingError as e:
        return domain_error(e)
    except Exception as e:
        db.rollback()
        logger.exception("Failed to decide booking %s", booking_id)
        return internal_server_error(str(e))


@router.post("/{booking_id}/payment")
def submit_payment(
    booking_id: int,
    payment_in: PaymentSubmission,
    db: Session = Depends(get_db),
    current_user: User = Depends(student_required),
):
    try:
        booking = booking_service.record_payment(db, booking_id, current_user, payment_in)
        return data_response(BookingRequestResponse.model_validate(booking))
    except BookingError as e:
        return domain_error(e)
    except Exception as e:
        db.rollback()
        logger.exception("Failed to record payment for booking %s", booking_id)
        return internal_server_error(str(e))


@router.patch("/{booking_id}/rent")
def update_rent(
    booking_id: int,
    rent_in: RentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_required),
):
    try:
        booking = booking_service.update_rent(db, booking_id, current_user, rent_in)
        return data_response(BookingRequestResponse.model_validate(booking))
    except BookingError as e:
        return domain_error(e)
    except Exception as e:
        db.rollback()
        logger.exception("Failed to update rent for booking %s", booking_id)
        return internal_server_error(str(e))
