import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from saknak.database.init import get_db
from saknak.database.models.user_model import User
from saknak.schemas.auth_schema import ProfileUpdate, UserMinimumResponse, UserResponse
from saknak.services.auth_service import get_user_by_id, update_profile
from saknak.services.rating_service import RatingService
from saknak.utils.dependencies import get_current_user
from saknak.responses.success import data_response
from saknak.responses.error import internal_server_error, not_found_error

logger = logging.getLogger("saknak.profiles")

router = APIRouter(prefix="/profiles", tags=["Profiles"])
rating_service = RatingService()


@router.get("/me")
def get_my_profile(current_user: User = Depends(get_current_user)):
    """Own profile plus the fields still missing before a booking can be sent."""
    return data_response(
        {
            "profile": UserResponse.model_validate(current_user),
            "missing_fields": current_user.missing_profile_fields()
            if current_user.is_student
            else [],
        }
    )


@router.patch("/me")
def update_my_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        user = update_profile(current_user, payload, db)
        return data_response(UserResponse.model_validate(user))
    except Exception as e:
        db.rollback()
        logger.exception("Failed to update profile for user %s", current_user.id)
        return internal_server_error(str(e))


@router.get("/{user_id}/rating")
def get_user_rating(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    user = get_user_by_id(user_id, db)
    if not user:
        return not_found_error(f"No user found with id {user_id}")

    return data_response(
        {
            "user": UserMinimumResponse.model_validate(user),
            "average_rating": rating_service.average_for_user(db, user_id),
        }
    )
