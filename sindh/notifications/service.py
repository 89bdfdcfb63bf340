"""In-app notification inbox."""
import logging

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from sindh.exceptions import NotificationNotFoundError, ValidationError
from sindh.persistence.models import Notification

logger = logging.getLogger(__name__)

RECIPIENT_TYPES = ("worker", "employer")


class NotificationService:
    """Store and read notifications shown in a user's inbox."""

    def __init__(self, session: Session):
        self.session = session

    def record(
        self,
        recipient_id: str,
        recipient_type: str,
        event: str,
        message: str,
        channel: str = "sms",
    ) -> Notification:
        """Store a copy of a notification for the recipient's inbox."""
        if recipient_type not in RECIPIENT_TYPES:
            raise ValidationError("recipient_type", f"Must be one of {RECIPIENT_TYPES}")

        notification = Notification(
            recipient_id=recipient_id,
            recipient_type=recipient_type,
            event=event,
            message=message,
            channel=channel,
        )
        self.session.add(notification)
        self.session.commit()
        self.session.refresh(notification)
        return notification

    def list_for_recipient(
        self,
        recipient_id: str,
        unread_only: bool = False,
        limit: int = 50,
    ) -> list[Notification]:
        """Newest notifications first."""
        stmt = (
            select(Notification)
            .where(Notification.recipient_id == recipient_id)
            .order_by(Notification.created_at.desc())
        )
        if unread_only:
            stmt = stmt.where(Notification.is_read.is_(False))
        stmt = stmt.limit(limit)
        return list(self.session.execute(stmt).scalars().all())

    def mark_read(self, notification_id: str) -> Notification:
        notification = self.session.get(Notification, notification_id)
        if notification is None:
            raise NotificationNotFoundError(notification_id)
        notification.is_read = True
        self.session.commit()
        return notification

    def mark_all_read(self, recipient_id: str) -> int:
        """Mark every unread notification as read; returns how many changed."""
        stmt = (
            update(Notification)
            .where(Notification.recipient_id == recipient_id, Notification.is_read.is_(False))
            .values(is_read=True)
        )
        result = self.session.execute(stmt)
        self.session.commit()
        logger.debug("Marked %d notifications read for %s", result.rowcount, recipient_id)
        return result.rowcount

    def unread_count(self, recipient_id: str) -> int:
        stmt = select(func.count(Notification.id)).where(
            Notification.recipient_id == recipient_id,
            Notification.is_read.is_(False),
        )
        return self.session.execute(stmt).scalar_one()
