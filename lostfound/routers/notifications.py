import uuid

from fastapi import APIRouter, Depends, Query

from lostfound.services.auth import SessionContext
from lostfound.services.notifications import NotificationService
from lostfound.utils.auth_helper import get_current_user_required
from lostfound.utils.dependencies import get_notification_service

router = APIRouter()


@router.get("")
def list_notifications(
    limit: int = Query(10, ge=1, le=100),
    notifications: NotificationService = Depends(get_notification_service),
    current_user: SessionContext = Depends(get_current_user_required),
):
    return notifications.list_notifications(current_user, limit=limit)


@router.get("/unread-count")
def unread_count(
    notifications: NotificationService = Depends(get_notification_service),
    current_user: SessionContext = Depends(get_current_user_required),
):
    return {"unread": notifications.unread_count(current_user)}


@router.post("/read-all")
def mark_all_read(
    notifications: NotificationService = Depends(get_notification_service),
    current_user: SessionContext = Depends(get_current_user_required),
):
    return {"updated": notifications.mark_all_read(current_user)}


@router.post("/{notification_id}/read")
def mark_notification_read(
    notification_id: uuid.UUID,
    notifications: NotificationService = Depends(get_notification_service),
    current_user: SessionContext = Depends(get_current_user_required),
):
    return notifications.mark_notification_read(current_user, notification_id)
