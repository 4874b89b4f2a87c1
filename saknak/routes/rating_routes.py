import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from saknak.database.init import get_db
from saknak.database.models.user_model import User
from saknak.schemas.rating_schema import RatingCreate, RatingResponse
from saknak.services.booking_service import BookingService
from saknak.services.exceptions import BookingError
from saknak.services.rating_service import RatingService
from saknak.utils.dependencies import get_current_user
from saknak.responses.success import created_response, data_response
from saknak.responses.error import domain_error, internal_server_error

logger = logging.getLogger("saknak.ratings")

router = APIRouter(prefix="/ratings", tags=["Ratings"])
rating_service = RatingService()
booking_service = BookingService()


@router.post("")
def create_rating(
    rating_in: RatingCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        rating = rating_service.create(db, current_user, rating_in)
        return created_response(RatingResponse.model_validate(rating))
    except BookingError as e:
        return domain_error(e)
    except Exception as e:
        db.rollback()
        logger.exception("Failed to create rating")
        return internal_server_error(str(e))


@router.get("/received/{user_id}")
def get_received_ratings(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    ratings = rating_service.get_received(db, user_id)
    return data_response([RatingResponse.model_validate(r) for r in ratings])


@router.get("/can-rate/{booking_id}")
def can_rate(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        booking = booking_service.get_accessible(db, booking_id, current_user)
    except BookingError as e:
        return domain_error(e)
    return data_response({"can_rate": rating_service.can_rate(booking, current_user.id)})
