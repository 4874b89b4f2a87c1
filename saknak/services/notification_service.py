import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from saknak.database.models.notification_model import Notification
from saknak.services.exceptions import NotFoundError, PermissionDeniedError

logger = logging.getLogger("saknak.notifications")


class NotificationService:
    def create(
        self, db: Session, user_id: int, title: str, body: str, commit: bool = True
    ) -> Notification:
        notification = Notification(user_id=user_id, title=title, body=body, read=False)
        db.add(notification)
        if commit:
            db.commit()
            db.refresh(notification)
        return notification

    def get(self, db: Session, notification_id: int) -> Optional[Notification]:
        return db.query(Notification).filter(Notification.id == notification_id).first()

    def get_for_user(self, db: Session, user_id: int, limit: int = 50) -> List[Notification]:
        return (
            db.query(Notification)
            .filter(Notification.user_id == user_id)
            .order_by(Notification.created_at.desc(), Notification.id.desc())
            .limit(limit)
            .all()
        )

    def unread_count(self, db: Session, user_id: int) -> int:
        return (
            db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.read.is_(False))
            .count()
        )

    def get_owned(self, db: Session, notification_id: int, user_id: int) -> Notification:
        notification = self.get(db, notification_id)
        if not notification:
            raise NotFoundError(f"Notification {notification_id} not found")
        if notification.user_id != user_id:
            raise PermissionDeniedError("Not authorized to access this notification")
        return notification

    def mark_as_read(self, db: Session, notification_id: int, user_id: int) -> Notification:
        notification = self.get_owned(db, notification_id, user_id)
        notification.read = True
        db.commit()
        db.refresh(notification)
        return notification

    def mark_all_as_read(self, db: Session, user_id: int) -> int:
        updated = (
            db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.read.is_(False))
            .update({Notification.read: True}, synchronize_session=False)
        )
        db.commit()
        logger.info("Marked %s notifications read for user %s", updated, user_id)
        return updated

    def delete(self, db: Session, notification_id: int, user_id: int) -> None:
        notification = self.get_owned(db, notification_id, user_id)
        db.delete(notification)
        db.commit()
