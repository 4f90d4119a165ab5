"""Notification API endpoints."""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_caller, get_clock, get_db, require_admin
from app.schemas.notification import (
    CheckRemindersResponse,
    MarkAllReadResponse,
    NotificationResponse,
    UnreadCountResponse,
)
from app.services.clock import Clock
from app.services.notifications import (
    delete_notification,
    list_notifications,
    mark_all_read,
    mark_read,
    unread_count,
)
from app.services.reminder_store import run_reminder_sweep
from app.services.visibility import Caller

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)


@router.get("", response_model=list[NotificationResponse])
def get_notifications(
    include_read: bool = Query(False, alias="includeRead"),
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    """Notifications visible to the caller, newest first."""
    notifications = list_notifications(db, caller, include_read=include_read)
    logger.debug(f"Found {len(notifications)} notifications for {caller.role.value}")
    return notifications


@router.get("/unread-count", response_model=UnreadCountResponse)
def get_unread_count(
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    """Unread notifications visible to the caller."""
    return UnreadCountResponse(count=unread_count(db, caller))


@router.put("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
def mark_notification_read(
    notification_id: int,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    """Mark a notification as read. Marking it again is a no-op."""
    if not mark_read(db, caller, notification_id):
        raise HTTPException(status_code=404, detail="Notification not found")


@router.post("/mark-all-read", response_model=MarkAllReadResponse)
def mark_all_notifications_read(
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    """Mark every unread notification the caller can see as read."""
    return MarkAllReadResponse(updated=mark_all_read(db, caller))


@router.post("/check-reminders", response_model=CheckRemindersResponse)
def check_reminders(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    _: Caller = Depends(require_admin),
):
    """Run one reminder sweep now."""
    result = run_reminder_sweep(db, clock)
    return CheckRemindersResponse(
        message="Reminders checked and notifications created",
        **result.as_dict(),
    )


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    _: Caller = Depends(require_admin),
):
    """Delete a notification."""
    if not delete_notification(db, notification_id):
        raise HTTPException(status_code=404, detail="Notification not found")
