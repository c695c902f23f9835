"""
Admin-to-user notifications
"""
import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from app.exceptions import NotFoundError
from app.models import Notification, User

logger = logging.getLogger(__name__)


class NotificationService:
    def __init__(self, db: Session):
        self.db = db

    def notify(self, user_id: int, message: str) -> None:
        if not self.db.query(User.id).filter(User.id == user_id).first():
            raise NotFoundError("User not found")

        self.db.add(Notification(user_id=user_id, message=message))
        self.db.commit()

        logger.info(f"Notification sent to user {user_id}")

    def list_for_user(self, user_id: int) -> List[Dict[str, Any]]:
        notifications = self.db.query(Notification).filter(
            Notification.user_id == user_id
        ).order_by(Notification.created_at.desc(), Notification.id.desc()).all()

        return [
            {
                "id": item.id,
                "message": item.message,
                "is_read": item.is_read,
                "created_at": item.created_at,
            }
            for item in notifications
        ]

    def mark_read(self, user_id: int, notification_id: int) -> None:
        """Only the recipient can mark a notification as read"""
        notification = self.db.query(Notification).filter(
            Notification.id == notification_id,
            Notification.user_id == user_id
        ).first()

        if not notification:
            raise NotFoundError("Notification not found")

        notification.is_read = True
        self.db.commit()
