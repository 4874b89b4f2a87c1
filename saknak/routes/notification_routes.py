from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from saknak.database.init import get_db
from saknak.database.models.user_model import User
from saknak.schemas.notification_schema import NotificationResponse
from saknak.services.exceptions import BookingError
from saknak.services.notification_service import NotificationService
from saknak.utils.dependencies import get_current_user
from saknak.responses.success import data_response, empty_response
from saknak.responses.error import domain_error

router = APIRouter(prefix="/notifications", tags=["Notifications"])
notification_service = NotificationService()


@router.get("")
def list_notifications(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    notifications = notification_service.get_for_user(db, current_user.id)
    return data_response(
        {
            "items": [NotificationResponse.model_validate(n) for n in notifications],
            "unread_count": notification_service.unread_count(db, current_user.id),
        }
    )


@router.patch("/read-all")
def mark_all_read(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    updated = notification_service.mark_all_as_read(db, current_user.id)
    return data_response({"updated": updated})


@router.patch("/{notification_id}/read")
def mark_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        notification = notification_service.mark_as_read(db, notification_id, current_user.id)
    except BookingError as e:
        return domain_error(e)
    return data_response(NotificationResponse.model_validate(notification))


@router.delete("/{notification_id}")
def delete_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        notification_service.delete(db, notification_id, current_user.id)
    except BookingError as e:
        return domain_error(e)
    return empty_response()
