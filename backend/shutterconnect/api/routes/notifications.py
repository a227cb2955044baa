"""
In-app notification routes for the signed-in user.
"""
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from shutterconnect.api.dependencies import get_current_user
from shutterconnect.api.schemas import NotificationResponse
from shutterconnect.lib.db import get_db
from shutterconnect.lib.pagination import Pagination, build_pagination
from shutterconnect.models.users import User
from shutterconnect.services.notification_service import NotificationService


router = APIRouter(prefix="/notifications", tags=["notifications"])


class NotificationListResponse(BaseModel):
    notifications: List[NotificationResponse]
    unread_count: int
    pagination: Pagination


class MarkAllReadResponse(BaseModel):
    message: str
    updated: int


@router.get("", response_model=NotificationListResponse)
def list_notifications(
    unread_only: bool = Query(False),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> NotificationListResponse:
    notifications, total, unread = NotificationService(db).list_for_user(
        current_user.id, unread_only=unread_only, page=page, limit=limit
    )
    return NotificationListResponse(
        notifications=[NotificationResponse.model_validate(n) for n in notifications],
        unread_count=unread,
        pagination=build_pagination(page, limit, total),
    )


@router.put("/{notification_id}/read", response_model=NotificationResponse)
def mark_notification_read(
    notification_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> NotificationResponse:
    """
    Raises:
        404: Notification missing or owned by another user
    """
    notification = NotificationService(db).mark_read(current_user.id, notification_id)
    return NotificationResponse.model_validate(notification)


@router.put("/read-all", response_model=MarkAllReadResponse)
def mark_all_notifications_read(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> MarkAllReadResponse:
    updated = NotificationService(db).mark_all_read(current_user.id)
    return MarkAllReadResponse(message="All notifications marked as read", updated=updated)
