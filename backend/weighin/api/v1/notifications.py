"""
Notification Endpoints

Endpoints:
- GET  /notifications              - List own notifications (newest first)
- GET  /notifications/unread-count - Number of unread notifications
- POST /notifications/{id}/read    - Mark one as read
- POST /notifications/read-all     - Mark all as read
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from weighin.api.v1.deps import get_current_user, raise_http
from weighin.core.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from weighin.core.exceptions import WeighInError
from weighin.db.session import get_db
from weighin.models.user import User
from weighin.schemas.notification import (
    MarkAllReadResponse,
    NotificationResponse,
    UnreadCountResponse,
)
from weighin.services.notification_service import NotificationService


router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=List[NotificationResponse], summary="List notifications")
def list_notifications(
    unread_only: bool = Query(False, description="Only unread notifications"),
    limit: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return NotificationService.list_for_user(
        db, current_user.id, unread_only=unread_only, limit=limit, offset=offset
    )


@router.get("/unread-count", response_model=UnreadCountResponse, summary="Unread count")
def unread_count(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return UnreadCountResponse(unread=NotificationService.unread_count(db, current_user.id))


@router.post("/read-all", response_model=MarkAllReadResponse, summary="Mark all as read")
def mark_all_read(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    return MarkAllReadResponse(updated=NotificationService.mark_all_read(db, current_user.id))


@router.post("/{notification_id}/read", response_model=NotificationResponse, summary="Mark as read")
def mark_read(
    notification_id: UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        return NotificationService.mark_read(db, current_user.id, notification_id)
    except WeighInError as e:
        raise_http(e)
