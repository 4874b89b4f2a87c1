import logging
from typing import List

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from saknak.database.models.booking_request_model import BookingRequest
from saknak.database.models.rating_model import Rating
from saknak.database.models.user_model import User
from saknak.enums.booking_status import BookingStatus
from saknak.schemas.rating_schema import RatingCreate
from saknak.services.exceptions import (
    DuplicateRatingError,
    NotFoundError,
    PermissionDeniedError,
)

logger = logging.getLogger("saknak.ratings")


class RatingService:
    def exists(self, db: Session, booking_id: int, from_user: int, to_user: int) -> bool:
        return (
            db.query(Rating.id)
            .filter(
                Rating.booking_id == booking_id,
                Rating.from_user == from_user,
                Rating.to_user == to_user,
            )
            .first()
            is not None
        )

    def can_rate(self, booking: BookingRequest, user_id: int) -> bool:
        if booking.status != BookingStatus.ACCEPTED.value:
            return False
        if user_id == booking.student_id:
            return bool(booking.student_can_rate)
        if user_id == booking.owner_id:
            return bool(booking.owner_can_rate)
        return False

    def create(self, db: Session, rater: User, rating_in: RatingCreate) -> Rating:
        booking = (
            db.query(BookingRequest).filter(BookingRequest.id == rating_in.booking_id).first()
        )
        if not booking:
            raise NotFoundError(f"Booking {rating_in.booking_id} not found")

        if rater.id not in (booking.student_id, booking.owner_id):
            raise PermissionDeniedError("Only the student or owner of a booking can rate it.")

        is_student = rater.id == booking.student_id
        to_user = booking.owner_id if is_student else booking.student_id

        if self.exists(db, booking.id, rater.id, to_user):
            raise DuplicateRatingError()

        if not self.can_rate(booking, rater.id):
            raise PermissionDeniedError("Rating is not open for this booking yet.")

        rating = Rating(
            booking_id=booking.id,
            from_user=rater.id,
            to_user=to_user,
            stars=rating_in.stars,
            comment=(rating_in.comment or "").strip() or None,
        )
        db.add(rating)

        # One rating per party per booking
        if is_student:
            booking.student_can_rate = False
        else:
            booking.owner_can_rate = False

        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise DuplicateRatingError()

        db.refresh(rating)
        logger.info("User %s rated user %s for booking %s", rater.id, to_user, booking.id)
        return rating

    def get_received(self, db: Session, user_id: int) -> List[Rating]:
        return (
            db.query(Rating)
            .options(joinedload(Rating.rater))
            .filter(Rating.to_user == user_id)
            .order_by(Rating.created_at.desc())
            .all()
        )

    def average_for_user(self, db: Session, user_id: int) -> float:
        average = db.query(func.avg(Rating.stars)).filter(Rating.to_user == user_id).scalar()
        return float(average) if average is not None else 0.0
