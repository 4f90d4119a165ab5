"""Notification service: read-state operations and announcement emitters."""
import logging
from datetime import datetime

from sqlalchemy.orm import Session

from app.models.child import Child
from app.models.event import Event
from app.models.fee import Fee
from app.models.notification import EVENT_REGISTRATION, NEW_EVENT, NEW_FEE, Notification
from app.models.parent import Parent
from app.models.teacher import Teacher
from app.services.reminders import format_amount
from app.services.visibility import Caller, can_view, parent_target, teacher_target, visibility_clause

logger = logging.getLogger(__name__)


def create_notification(
    db: Session,
    notification_type: str,
    title: str,
    message: str,
    user_id: str | None = None,
    redirect_url: str | None = None,
) -> Notification:
    """Add an in-app notification to the session (caller commits)."""
    notification = Notification(
        type=notification_type,
        title=title,
        message=message,
        user_id=user_id,
        redirect_url=redirect_url,
    )
    db.add(notification)
    return notification


def list_notifications(db: Session, caller: Caller, include_read: bool = False) -> list[Notification]:
    """Notifications visible to the caller, newest first."""
    query = db.query(Notification).filter(visibility_clause(caller))
    if not include_read:
        query = query.filter(Notification.read == 0)
    return query.order_by(Notification.created_at.desc(), Notification.id.desc()).all()


def unread_count(db: Session, caller: Caller) -> int:
    return db.query(Notification).filter(
        visibility_clause(caller),
        Notification.read == 0,
    ).count()


def get_visible_notification(db: Session, caller: Caller, notification_id: int) -> Notification | None:
    """The notification, or None if it does not exist or the caller cannot see it."""
    notification = db.query(Notification).filter(Notification.id == notification_id).first()
    if notification is None or not can_view(caller, notification):
        return None
    return notification


def mark_read(db: Session, caller: Caller, notification_id: int) -> bool:
    """Mark one notification read. Already-read notifications are left as they are."""
    notification = get_visible_notification(db, caller, notification_id)
    if notification is None:
        return False
    if not notification.read:
        notification.read = 1
        notification.read_at = datetime.utcnow().isoformat()
        db.commit()
    return True


def mark_all_read(db: Session, caller: Caller) -> int:
    """Mark every unread notification visible to the caller as read."""
    updated = db.query(Notification).filter(
        visibility_clause(caller),
        Notification.read == 0,
    ).update(
        {"read": 1, "read_at": datetime.utcnow().isoformat()},
        synchronize_session=False,
    )
    db.commit()
    return updated


def delete_notification(db: Session, notification_id: int) -> bool:
    notification = db.query(Notification).filter(Notification.id == notification_id).first()
    if notification is None:
        return False
    db.delete(notification)
    db.commit()
    return True


def notify_new_fee(db: Session, fee: Fee, child: Child) -> Notification:
    """Tell the owning parent about a freshly created fee."""
    return create_notification(
        db,
        NEW_FEE,
        "New Fee Added",
        (
            f"A new fee of {format_amount(fee.amount)} for {child.full_name} is due on "
            f"{datetime.fromisoformat(fee.due_date):%b %d, %Y}. Description: {fee.description}"
        ),
        user_id=parent_target(child.parent_id),
        redirect_url="/fees",
    )


def notify_new_event(db: Session, event: Event) -> int:
    """Announce an event to every active parent and teacher."""
    parents = db.query(Parent).filter(Parent.is_active == 1).all()
    teachers = db.query(Teacher).filter(Teacher.is_active == 1).all()
    when = datetime.fromisoformat(event.time)

    for parent in parents:
        create_notification(
            db,
            NEW_EVENT,
            "New Event Available",
            f"New event '{event.name}' has been created. Register your children now!",
            user_id=parent_target(parent.id),
            redirect_url=f"/events/{event.id}",
        )
    for teacher in teachers:
        create_notification(
            db,
            NEW_EVENT,
            "New Event Created",
            f"New event '{event.name}' has been created on {when:%b %d, %Y}",
            user_id=teacher_target(teacher.id),
            redirect_url=f"/events/{event.id}",
        )

    count = len(parents) + len(teachers)
    logger.info(f"Created {count} notifications for new event {event.id}")
    return count


def notify_event_registration(db: Session, event: Event, child: Child) -> Notification:
    """Tell staff a child was registered for an event."""
    return create_notification(
        db,
        EVENT_REGISTRATION,
        "New Event Registration",
        f"{child.full_name} has been registered for '{event.name}'.",
        redirect_url=f"/events/{event.id}",
    )
