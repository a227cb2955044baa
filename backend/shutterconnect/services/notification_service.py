"""
In-app notification service.

Notifications are rows in the notifications table; the frontend polls the
list endpoint. Callers add notifications inside their own transaction and
commit together with the change they describe.
"""
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from shutterconnect.api.middleware.error_handler import NotFoundException
from shutterconnect.lib.logging import get_logger
from shutterconnect.lib.pagination import offset_for
from shutterconnect.models.notifications import Notification


logger = get_logger(__name__)


class NotificationService:
    """Create, list and mark in-app notifications."""

    def __init__(self, session: Session):
        self.session = session

    def notify(
        self,
        user_id: UUID,
        title: str,
        message: str,
        type: str,
        data: Optional[dict[str, Any]] = None,
    ) -> Notification:
        """
        Queue a notification for `user_id` in the current transaction.

        Does not commit.
        """
        notification = Notification(
            user_id=user_id,
            title=title,
            message=message,
            type=type,
            data=data,
        )
        self.session.add(notification)
        logger.info(
            "Notification queued",
            extra={"user_id": str(user_id), "notification_type": type},
        )
        return notification

    def list_for_user(
        self,
        user_id: UUID,
        unread_only: bool = False,
        page: int = 1,
        limit: int = 20,
    ) -> tuple[list[Notification], int, int]:
        """
        Notifications for a user, newest first.

        Returns:
            (page of notifications, total matching, unread count)
        """
        stmt = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            stmt = stmt.where(Notification.is_read.is_(False))

        total = self.session.execute(
            select(func.count()).select_from(stmt.subquery())
        ).scalar_one()
        unread = self.session.execute(
            select(func.count(Notification.id)).where(
                Notification.user_id == user_id,
                Notification.is_read.is_(False),
            )
        ).scalar_one()

        stmt = (
            stmt.order_by(Notification.created_at.desc())
            .offset(offset_for(page, limit))
            .limit(limit)
        )
        notifications = list(self.session.execute(stmt).scalars().all())
        return notifications, total, unread

    def mark_read(self, user_id: UUID, notification_id: UUID) -> Notification:
        """
        Mark one of the user's notifications as read.

        Raises:
            NotFoundException: Missing, or owned by someone else
        """
        notification = self.session.get(Notification, notification_id)
        if notification is None or notification.user_id != user_id:
            raise NotFoundException("Notification", str(notification_id))

        notification.is_read = True
        self.session.commit()
        return notification

    def mark_all_read(self, user_id: UUID) -> int:
        """Mark every unread notification for a user as read."""
        notifications = self.session.execute(
            select(Notification).where(
                Notification.user_id == user_id,
                Notification.is_read.is_(False),
            )
        ).scalars().all()
        for notification in notifications:
            notification.is_read = True
        self.session.commit()
        return len(notifications)
