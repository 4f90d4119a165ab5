from datetime import date
from pathlib import Path

import pytest

from app.api.auth import verify_password
from app.config import get_settings
from app.models.child import Child
from app.models.fee import Fee
from app.models.parent import Parent
from app.models.user import User
from app.services.clock import FixedClock
from app.services.reminder_store import run_reminder_sweep
from app.services.reminders import ReminderPolicy
from app.services.seed_loader import SeedError, load_seed_data

TODAY = date(2024, 6, 8)
SEED_DIR = Path(__file__).resolve().parents[1] / "app" / "configs" / "seed"


def test_demo_seed_resolves_relative_dates(db):
    created = load_seed_data(db, TODAY, SEED_DIR)

    assert created == 2
    emma = db.query(Child).filter(Child.first_name == "Emma").one()
    assert emma.date_of_birth == "2021-06-10"
    assert emma.last_name == "Johnson"
    due_dates = sorted(f.due_date for f in db.query(Fee).filter(Fee.child_id == emma.id))
    assert due_dates == ["2024-06-03", "2024-06-09"]

    account = db.query(User).filter(User.email == "sarah.johnson@example.com").one()
    assert account.role == "Parent"
    assert verify_password("Parent@123", account.password_hash)


def test_seed_is_skipped_when_roster_exists(db):
    load_seed_data(db, TODAY, SEED_DIR)

    assert load_seed_data(db, TODAY, SEED_DIR) == 0
    assert db.query(Parent).count() == 2


def test_seeded_demo_produces_reminders(db):
    load_seed_data(db, TODAY, SEED_DIR)

    result = run_reminder_sweep(db, FixedClock(TODAY), ReminderPolicy())

    # Emma in 2 days and Leo today
    assert result.birthday_reminders == 2
    # Emma due tomorrow, Leo due in 7 days, Mia due in 3 days
    assert result.fee_reminders == 3
    assert result.overdue_fees == 1


def test_missing_required_field_raises(db, tmp_path):
    (tmp_path / "broken.yaml").write_text("parents:\n  - first_name: Solo\n    last_name: Parent\n")

    with pytest.raises(SeedError, match="email"):
        load_seed_data(db, TODAY, tmp_path)


def test_missing_directory_loads_nothing(db, tmp_path):
    assert load_seed_data(db, TODAY, tmp_path / "absent") == 0
    assert get_settings().seed_dir.name == "seed"
