"""Reminder engine: decides which reminder notifications a sweep must emit.

Pure functions of ``today`` and snapshots of children, fees and the dedup keys
of notifications already created today. Nothing here touches the database;
``app.services.reminder_store`` loads the snapshots and writes the plan back.

Rules:

- Birthday: active child whose birthday this year falls within
  ``[today, today + birthday_window_days]``. Unscoped (Admin and Teacher see it).
- FeeReminder: pending fee due exactly ``d`` days from today for ``d`` in
  ``fee_reminder_days``. Scoped to the owning parent; ``d == 1`` is urgent.
- FeeOverdue: pending fee due strictly before today. The fee becomes overdue
  and the owning parent gets one notification, keyed by fee id and due date.
"""
from dataclasses import dataclass, field
from datetime import date, timedelta
from decimal import Decimal

from dateutil.relativedelta import relativedelta

from app.models.fee import FEE_PENDING
from app.models.notification import BIRTHDAY, FEE_OVERDUE, FEE_REMINDER
from app.services.visibility import parent_target

URGENT_PREFIX = "⚠️ URGENT: "


@dataclass(frozen=True)
class ReminderPolicy:
    birthday_window_days: int = 3
    fee_reminder_days: tuple[int, ...] = (7, 3, 1)

    @property
    def fee_window_days(self) -> int:
        return max(self.fee_reminder_days)


@dataclass(frozen=True)
class ChildSnapshot:
    id: int
    first_name: str
    last_name: str
    date_of_birth: date

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass(frozen=True)
class FeeSnapshot:
    id: int
    amount: Decimal
    due_date: date
    description: str
    child_name: str
    parent_id: int
    status: str = FEE_PENDING


@dataclass(frozen=True)
class NotificationDraft:
    type: str
    title: str
    message: str
    redirect_url: str | None
    user_id: str | None
    dedup_key: str


@dataclass
class ReminderPlan:
    notifications: list[NotificationDraft] = field(default_factory=list)
    overdue_fee_ids: list[int] = field(default_factory=list)


def dedup_key(notification_type: str, entity: str, entity_id: int, day: date | None = None) -> str:
    """Structured key identifying one logical reminder event."""
    key = f"{notification_type}:{entity}:{entity_id}"
    if day is not None:
        key += f":{day.isoformat()}"
    return key


def birthday_in_year(date_of_birth: date, year: int) -> date:
    """Birthday observed in ``year``. Feb 29 falls back to Feb 28 in non-leap years."""
    return date_of_birth + relativedelta(years=year - date_of_birth.year)


def format_amount(amount: Decimal) -> str:
    return f"${Decimal(amount):.2f}"


def plan_birthday_reminders(
    today: date,
    children: list[ChildSnapshot],
    existing_keys: set[str],
    policy: ReminderPolicy = ReminderPolicy(),
) -> list[NotificationDraft]:
    """Birthday notifications due today, skipping ones already emitted."""
    window_end = today + timedelta(days=policy.birthday_window_days)
    seen = set(existing_keys)
    drafts = []

    for child in children:
        birthday = birthday_in_year(child.date_of_birth, today.year)
        if not today <= birthday <= window_end:
            continue

        key = dedup_key(BIRTHDAY, "child", child.id, today)
        if key in seen:
            continue
        seen.add(key)

        days_until = (birthday - today).days
        age = today.year - child.date_of_birth.year
        if days_until == 0:
            message = f"🎂 Today is {child.full_name}'s birthday! They are turning {age} years old."
        else:
            message = (
                f"🎂 {child.full_name}'s birthday is in {days_until} day(s) on "
                f"{birthday:%b %d}. They will be {age} years old."
            )

        drafts.append(NotificationDraft(
            type=BIRTHDAY,
            title="Birthday Reminder",
            message=message,
            redirect_url=f"/children/detail/{child.id}",
            user_id=None,
            dedup_key=key,
        ))

    return drafts


def plan_fee_reminders(
    today: date,
    fees: list[FeeSnapshot],
    existing_keys: set[str],
    policy: ReminderPolicy = ReminderPolicy(),
) -> list[NotificationDraft]:
    """Payment reminders for pending fees hitting one of the reminder offsets today."""
    window_end = today + timedelta(days=policy.fee_window_days)
    seen = set(existing_keys)
    drafts = []

    for fee in fees:
        if fee.status != FEE_PENDING:
            continue
        if not today <= fee.due_date <= window_end:
            continue

        days_until = (fee.due_date - today).days
        if days_until not in policy.fee_reminder_days:
            continue

        key = dedup_key(FEE_REMINDER, "fee", fee.id, today)
        if key in seen:
            continue
        seen.add(key)

        urgency = URGENT_PREFIX if days_until == 1 else ""
        message = (
            f"{urgency}Payment reminder: {format_amount(fee.amount)} for {fee.child_name} "
            f"is due in {days_until} day(s) on {fee.due_date:%b %d, %Y}. {fee.description}"
        ).rstrip()

        drafts.append(NotificationDraft(
            type=FEE_REMINDER,
            title="Payment Reminder",
            message=message,
            redirect_url="/fees",
            user_id=parent_target(fee.parent_id),
            dedup_key=key,
        ))

    return drafts


def plan_overdue_fees(
    today: date,
    fees: list[FeeSnapshot],
) -> tuple[list[NotificationDraft], list[int]]:
    """Pending fees past their due date, with one notification per transition."""
    drafts = []
    fee_ids = []

    for fee in fees:
        if fee.status != FEE_PENDING or fee.due_date >= today:
            continue
        if fee.id in fee_ids:
            continue

        fee_ids.append(fee.id)
        drafts.append(NotificationDraft(
            type=FEE_OVERDUE,
            title="⚠️ Overdue Payment",
            message=(
                f"Payment of {format_amount(fee.amount)} for {fee.child_name} is now overdue. "
                f"Due date was {fee.due_date:%b %d, %Y}. Please pay as soon as possible."
            ),
            redirect_url="/fees",
            user_id=parent_target(fee.parent_id),
            dedup_key=dedup_key(FEE_OVERDUE, "fee", fee.id, fee.due_date),
        ))

    return drafts, fee_ids


def plan_reminders(
    today: date,
    children: list[ChildSnapshot],
    fees: list[FeeSnapshot],
    existing_keys: set[str],
    policy: ReminderPolicy = ReminderPolicy(),
) -> ReminderPlan:
    """Full reminder plan: birthdays, then fee reminders, then overdue transitions."""
    plan = ReminderPlan()
    plan.notifications.extend(plan_birthday_reminders(today, children, existing_keys, policy))
    plan.notifications.extend(plan_fee_reminders(today, fees, existing_keys, policy))
    overdue_drafts, overdue_ids = plan_overdue_fees(today, fees)
    plan.notifications.extend(overdue_drafts)
    plan.overdue_fee_ids.extend(overdue_ids)
    return plan
