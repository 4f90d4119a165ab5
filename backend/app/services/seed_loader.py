"""Load demo parents, teachers, children and fees from YAML files."""
import logging
from datetime import date, timedelta
from pathlib import Path

import yaml
from dateutil.relativedelta import relativedelta
from sqlalchemy.orm import Session

from app.api.auth import create_user_account
from app.config import get_settings
from app.models.child import Child
from app.models.fee import FEE_PENDING, Fee
from app.models.parent import Parent
from app.models.teacher import Teacher
from app.services.visibility import Role

logger = logging.getLogger(__name__)


class SeedError(ValueError):
    """A seed document is missing a required field."""


def load_seed_data(db: Session, today: date, seed_dir: Path | None = None) -> int:
    """Load every ``*.yaml`` file under ``seed_dir`` into the database.
    
    Seeding only happens into an empty roster: if any parent exists the
    loader does nothing. Relative dates (``due_in_days``,
    ``birthday_in_days``) are resolved against ``today`` so a demo always
    has reminders to show.
    
    Returns the number of parents created.
    """
    seed_dir = seed_dir or get_settings().seed_dir
    if not seed_dir.exists():
        logger.warning(f"Seed directory not found: {seed_dir}")
        return 0

    if db.query(Parent).first() is not None:
        logger.info("Roster already populated, skipping demo seed")
        return 0

    created = 0
    for yaml_file in sorted(seed_dir.glob("*.yaml")):
        with open(yaml_file, "r") as f:
            data = yaml.safe_load(f) or {}
        for teacher_data in data.get("teachers", []):
            _create_teacher(db, teacher_data)
        for parent_data in data.get("parents", []):
            _create_parent(db, parent_data, today)
            created += 1
        logger.debug(f"Loaded seed file {yaml_file.name}")

    db.commit()
    logger.info(f"Seeded {created} demo parents")
    return created


def _require(data: dict, field: str):
    value = data.get(field)
    if value in (None, ""):
        raise SeedError(f"Seed entry missing '{field}': {data}")
    return value


def _resolve_date(data: dict, field: str, offset_field: str, today: date) -> date:
    """Absolute ``field`` or ``today`` plus ``offset_field`` days."""
    if data.get(field) is not None:
        value = data[field]
        return value if isinstance(value, date) else date.fromisoformat(str(value))
    if data.get(offset_field) is not None:
        return today + timedelta(days=int(data[offset_field]))
    raise SeedError(f"Seed entry needs '{field}' or '{offset_field}': {data}")


def _date_of_birth(data: dict, today: date) -> date:
    # birthday_in_days + age places the next birthday relative to today
    if data.get("date_of_birth") is None and data.get("birthday_in_days") is not None:
        birthday = today + timedelta(days=int(data["birthday_in_days"]))
        return birthday - relativedelta(years=int(data.get("age", 3)))
    return _resolve_date(data, "date_of_birth", "birthday_in_days", today)


def _create_teacher(db: Session, data: dict) -> Teacher:
    email = str(_require(data, "email")).lower()
    teacher = Teacher(
        first_name=_require(data, "first_name"),
        last_name=_require(data, "last_name"),
        email=email,
        phone=data.get("phone"),
        specialization=data.get("specialization"),
        annual_leave_days=int(data.get("annual_leave_days", 20)),
    )
    db.add(teacher)
    db.flush()
    if data.get("password"):
        create_user_account(
            db, email, data["password"], Role.TEACHER.value,
            first_name=teacher.first_name, last_name=teacher.last_name, teacher_id=teacher.id,
        )
    return teacher


def _create_parent(db: Session, data: dict, today: date) -> Parent:
    email = str(_require(data, "email")).lower()
    parent = Parent(
        first_name=_require(data, "first_name"),
        last_name=_require(data, "last_name"),
        email=email,
        phone_number=str(_require(data, "phone_number")),
        address=data.get("address"),
        emergency_contact=data.get("emergency_contact"),
    )
    db.add(parent)
    db.flush()
    if data.get("password"):
        create_user_account(
            db, email, data["password"], Role.PARENT.value,
            first_name=parent.first_name, last_name=parent.last_name, parent_id=parent.id,
        )

    for child_data in data.get("children", []):
        child = Child(
            first_name=_require(child_data, "first_name"),
            last_name=child_data.get("last_name", parent.last_name),
            date_of_birth=_date_of_birth(child_data, today).isoformat(),
            gender=child_data.get("gender"),
            allergies=child_data.get("allergies"),
            parent_id=parent.id,
        )
        db.add(child)
        db.flush()
        for fee_data in child_data.get("fees", []):
            db.add(Fee(
                child_id=child.id,
                amount=_require(fee_data, "amount"),
                description=_require(fee_data, "description"),
                due_date=_resolve_date(fee_data, "due_date", "due_in_days", today).isoformat(),
                fee_type=fee_data.get("fee_type", "monthly"),
                status=fee_data.get("status", FEE_PENDING),
            ))
    return parent
