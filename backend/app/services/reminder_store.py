"""Database side of the reminder sweep.

Loads snapshots for the reminder engine, writes its plan back, and runs the
three phases (birthdays, fee reminders, overdue fees) in that order, each
committed before the next starts.
"""
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from datetime import date, datetime, timedelta

from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session, joinedload

from app.config import Settings, get_settings
from app.models.child import Child
from app.models.fee import FEE_OVERDUE, FEE_PENDING, Fee
from app.models.notification import Notification
from app.services.clock import Clock
from app.services.reminders import (
    ChildSnapshot,
    FeeSnapshot,
    NotificationDraft,
    ReminderPolicy,
    plan_birthday_reminders,
    plan_fee_reminders,
    plan_overdue_fees,
)

logger = logging.getLogger(__name__)

_CONFLICT_INSERTS = {
    "sqlite": sqlite_insert,
    "postgresql": postgresql_insert,
}


@dataclass
class SweepResult:
    """Summary of one sweep."""

    day: str
    birthday_reminders: int = 0
    fee_reminders: int = 0
    overdue_fees: int = 0
    overdue_notifications: int = 0

    def as_dict(self) -> dict:
        return asdict(self)


def policy_from_settings(settings: Settings | None = None) -> ReminderPolicy:
    settings = settings or get_settings()
    return ReminderPolicy(
        birthday_window_days=settings.birthday_window_days,
        fee_reminder_days=tuple(settings.fee_reminder_days),
    )


def list_active_children(db: Session) -> list[ChildSnapshot]:
    """Active children with a parseable date of birth."""
    snapshots = []
    for child in db.query(Child).filter(Child.is_active == 1).all():
        try:
            date_of_birth = date.fromisoformat(child.date_of_birth)
        except (TypeError, ValueError):
            logger.warning(f"Skipping child {child.id}: invalid date of birth {child.date_of_birth!r}")
            continue
        snapshots.append(ChildSnapshot(
            id=child.id,
            first_name=child.first_name,
            last_name=child.last_name,
            date_of_birth=date_of_birth,
        ))
    return snapshots


def list_pending_fees(
    db: Session,
    due_from: date | None = None,
    due_until: date | None = None,
    due_before: date | None = None,
) -> list[FeeSnapshot]:
    """Pending fees with their child's name and owning parent."""
    query = (
        db.query(Fee)
        .options(joinedload(Fee.child))
        .filter(Fee.status == FEE_PENDING)
    )
    if due_from:
        query = query.filter(Fee.due_date >= due_from.isoformat())
    if due_until:
        query = query.filter(Fee.due_date <= due_until.isoformat())
    if due_before:
        query = query.filter(Fee.due_date < due_before.isoformat())

    snapshots = []
    for fee in query.order_by(Fee.due_date, Fee.id).all():
        try:
            due_date = date.fromisoformat(fee.due_date)
        except (TypeError, ValueError):
            logger.warning(f"Skipping fee {fee.id}: invalid due date {fee.due_date!r}")
            continue
        snapshots.append(FeeSnapshot(
            id=fee.id,
            amount=fee.amount,
            due_date=due_date,
            description=fee.description or "",
            child_name=fee.child.full_name,
            parent_id=fee.child.parent_id,
            status=fee.status,
        ))
    return snapshots


def existing_dedup_keys(db: Session, day: date) -> set[str]:
    """Dedup keys of notifications created on ``day`` (UTC)."""
    start = day.isoformat()
    end = (day + timedelta(days=1)).isoformat()
    rows = db.query(Notification.dedup_key).filter(
        Notification.dedup_key.isnot(None),
        Notification.created_at >= start,
        Notification.created_at < end,
    ).all()
    return {row[0] for row in rows}


def insert_notifications(db: Session, drafts: list[NotificationDraft], created_at: datetime) -> int:
    """Insert drafts, skipping any whose dedup key is already stored.
    
    Each row is written with ``ON CONFLICT (dedup_key) DO NOTHING`` so a key
    committed by a concurrent sweep is skipped instead of failing the phase.
    """
    if not drafts:
        return 0

    dialect = db.get_bind().dialect.name
    insert = _CONFLICT_INSERTS.get(dialect)
    if insert is None:
        raise RuntimeError(f"Reminder inserts are not supported on the {dialect} dialect")

    inserted = 0
    for draft in drafts:
        statement = insert(Notification).values(
            type=draft.type,
            title=draft.title,
            message=draft.message,
            redirect_url=draft.redirect_url,
            user_id=draft.user_id,
            dedup_key=draft.dedup_key,
            read=0,
            created_at=created_at.isoformat(),
        ).on_conflict_do_nothing(index_elements=["dedup_key"])
        if db.execute(statement).rowcount == 0:
            logger.info(f"Skipped duplicate notification {draft.dedup_key}")
            continue
        logger.info(f"{draft.type} notification created ({draft.dedup_key})")
        inserted += 1
    return inserted


def transition_fees_to_overdue(db: Session, fee_ids: list[int], updated_at: datetime) -> int:
    """Mark pending fees overdue. Fees no longer pending are left alone."""
    if not fee_ids:
        return 0
    return db.query(Fee).filter(
        Fee.id.in_(fee_ids),
        Fee.status == FEE_PENDING,
    ).update(
        {"status": FEE_OVERDUE, "updated_at": updated_at.isoformat()},
        synchronize_session=False,
    )


@contextmanager
def _phase(db: Session, name: str) -> Iterator[None]:
    try:
        yield
        db.commit()
    except Exception:
        db.rollback()
        logger.error(f"Reminder phase '{name}' failed, rolled back")
        raise


def run_birthday_phase(db: Session, clock: Clock, policy: ReminderPolicy) -> int:
    today = clock.today()
    with _phase(db, "birthday"):
        drafts = plan_birthday_reminders(
            today, list_active_children(db), existing_dedup_keys(db, today), policy
        )
        return insert_notifications(db, drafts, clock.now())


def run_fee_reminder_phase(db: Session, clock: Clock, policy: ReminderPolicy) -> int:
    today = clock.today()
    with _phase(db, "fee reminder"):
        fees = list_pending_fees(
            db, due_from=today, due_until=today + timedelta(days=policy.fee_window_days)
        )
        drafts = plan_fee_reminders(today, fees, existing_dedup_keys(db, today), policy)
        return insert_notifications(db, drafts, clock.now())


def run_overdue_phase(db: Session, clock: Clock) -> tuple[int, int]:
    """Returns (fees transitioned, notifications created)."""
    today = clock.today()
    now = clock.now()
    with _phase(db, "overdue"):
        drafts, fee_ids = plan_overdue_fees(today, list_pending_fees(db, due_before=today))
        transitioned = transition_fees_to_overdue(db, fee_ids, now)
        created = insert_notifications(db, drafts, now)
    if transitioned:
        logger.info(f"Updated {transitioned} fees to overdue status")
    return transitioned, created


def run_reminder_sweep(db: Session, clock: Clock, policy: ReminderPolicy | None = None) -> SweepResult:
    """One full sweep. Safe to re-run on the same day."""
    policy = policy or policy_from_settings()
    result = SweepResult(day=clock.today().isoformat())
    result.birthday_reminders = run_birthday_phase(db, clock, policy)
    result.fee_reminders = run_fee_reminder_phase(db, clock, policy)
    result.overdue_fees, result.overdue_notifications = run_overdue_phase(db, clock)
    return result
