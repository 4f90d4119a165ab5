"""Who may see which notification.

| Role    | Visible                                             |
|---------|-----------------------------------------------------|
| Admin   | everything                                          |
| Teacher | unscoped notifications and ones targeted at them    |
| Parent  | only notifications targeted at them                 |
| other   | nothing (also Teacher/Parent with no linked profile) |

``can_view`` and ``visibility_clause`` express the same table, once for a
loaded row and once as a SQL filter.
"""
from dataclasses import dataclass
from enum import Enum

from sqlalchemy import false, or_, true

from app.models.notification import Notification


class Role(str, Enum):
    ADMIN = "Admin"
    TEACHER = "Teacher"
    PARENT = "Parent"
    OTHER = "Other"

    @classmethod
    def parse(cls, value: str | None) -> "Role":
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


def parent_target(parent_id: int) -> str:
    return f"parent:{parent_id}"


def teacher_target(teacher_id: int) -> str:
    return f"teacher:{teacher_id}"


@dataclass(frozen=True)
class Caller:
    """Resolved role and profile identity of whoever is asking."""

    role: Role
    parent_id: int | None = None
    teacher_id: int | None = None
    user_id: str | None = None

    @property
    def identity(self) -> str | None:
        if self.role == Role.PARENT and self.parent_id is not None:
            return parent_target(self.parent_id)
        if self.role == Role.TEACHER and self.teacher_id is not None:
            return teacher_target(self.teacher_id)
        return None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def can_view(caller: Caller, notification) -> bool:
    """Whether ``caller`` may see ``notification`` (anything with a ``user_id``)."""
    target = notification.user_id or ""

    if caller.role == Role.ADMIN:
        return True

    identity = caller.identity
    if identity is None:
        return False

    if caller.role == Role.TEACHER:
        return target == "" or target == identity
    if caller.role == Role.PARENT:
        return target == identity
    return False


def visibility_clause(caller: Caller):
    """SQL filter over ``Notification`` matching ``can_view``."""
    if caller.role == Role.ADMIN:
        return true()

    identity = caller.identity
    if identity is None:
        return false()

    if caller.role == Role.TEACHER:
        return or_(
            Notification.user_id.is_(None),
            Notification.user_id == "",
            Notification.user_id == identity,
        )
    return Notification.user_id == identity
