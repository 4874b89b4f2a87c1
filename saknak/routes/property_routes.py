import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from saknak.database.init import get_db
from saknak.database.models.user_model import User
from saknak.schemas.property_schema import (
    PropertyCreate,
    PropertyFilter,
    PropertyResponse,
    PropertyUpdate,
)
from saknak.services.exceptions import BookingError
from saknak.services.property_service import PropertyService
from saknak.utils.dependencies import get_current_user, owner_required
from saknak.responses.success import created_response, data_response, empty_response
from saknak.responses.error import domain_error, internal_server_error

logger = logging.getLogger("saknak.properties")

router = APIRouter(prefix="/properties", tags=["Properties"])
property_service = PropertyService()


@router.get("")
def list_available_properties(
    filters: PropertyFilter = Depends(),
    db: Session = Depends(get_db),
):
    """Available listings, newest first."""
    try:
        properties = property_service.search(db, filters)
        return data_response([PropertyResponse.model_validate(p) for p in properties])
    except Exception as e:
        logger.exception("Failed to search properties")
        return internal_server_error(str(e))


@router.get("/mine")
def list_my_properties(
    db: Session = Depends(get_db),
    current_user: User = Depends(owner_required),
):
    properties = property_service.get_owner_properties(db, current_user.id)
    return data_response([PropertyResponse.model_validate(p) for p in properties])


@router.get("/{property_id}")
def get_property(property_id: int, db: Session = Depends(get_db)):
    try:
        property_obj = property_service.get_or_404(db, property_id)
    except BookingError as e:
        return domain_error(e)
    return data_response(PropertyResponse.model_validate(property_obj))


@router.post("")
def create_property(
    property_in: PropertyCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        property_obj = property_service.create_for_owner(db, current_user, property_in)
        logger.info("Property %s listed by owner %s", property_obj.id, current_user.id)
        return created_response(PropertyResponse.model_validate(property_obj))
    except BookingError as e:
        return domain_error(e)
    except Exception as e:
        db.rollback()
        logger.exception("Failed to create property")
        return internal_server_error(str(e))


@router.patch("/{property_id}")
def update_property(
    property_id: int,
    property_in: PropertyUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        property_obj = property_service.update_for_owner(
            db, property_id, current_user, property_in
        )
        return data_response(PropertyResponse.model_validate(property_obj))
    except BookingError as e:
        return domain_error(e)
    except Exception as e:
        db.rollback()
        logger.exception("Failed to update property %s", property_id)
        return internal_server_error(str(e))


@router.delete("/{property_id}")
def delete_property(
    property_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        property_service.delete_for_owner(db, property_id, current_user)
        return empty_response()
    except BookingError as e:
        return domain_error(e)
    except Exception as e:
        db.rollback()
        logger.exception("Failed to delete property %s", property_id)
        return internal_server_error(str(e))
