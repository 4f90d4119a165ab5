import os
import sys
from dataclasses import dataclass
from datetime import date

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "0123456789abcdef0123456789abcdef0123456789abcdef0123456789abcdef")
os.environ.setdefault("REMINDERS_ENABLED", "false")

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app import models  # noqa: E402,F401
from app.api import deps  # noqa: E402
from app.api.auth import create_access_token  # noqa: E402
from app.database import Base  # noqa: E402
from app.models.child import Child  # noqa: E402
from app.models.parent import Parent  # noqa: E402
from app.models.teacher import Teacher  # noqa: E402
from app.models.user import User  # noqa: E402
from app.services.clock import FixedClock  # noqa: E402

TODAY = date(2024, 6, 8)


@dataclass
class Roster:
    """Ids and bearer headers for a small daycare."""

    admin_headers: dict
    teacher_headers: dict
    parent_a_headers: dict
    parent_b_headers: dict
    orphan_parent_headers: dict
    guest_headers: dict
    teacher_id: int
    parent_a_id: int
    parent_b_id: int
    child_a_id: int
    child_b_id: int


def auth_headers(user: User) -> dict:
    token, _ = create_access_token({"sub": user.id, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def roster(db) -> Roster:
    teacher = Teacher(first_name="Maria", last_name="Garcia", email="maria@daycare.com")
    parent_a = Parent(first_name="Sarah", last_name="Johnson", email="sarah@example.com", phone_number="555-0101")
    parent_b = Parent(first_name="David", last_name="Chen", email="david@example.com", phone_number="555-0102")
    db.add_all([teacher, parent_a, parent_b])
    db.flush()

    child_a = Child(first_name="Emma", last_name="Johnson", date_of_birth="2021-06-10", parent_id=parent_a.id)
    child_b = Child(first_name="Leo", last_name="Chen", date_of_birth="2020-01-15", parent_id=parent_b.id)
    db.add_all([child_a, child_b])

    users = {
        "admin": User(email="admin@daycare.com", password_hash="x", role="Admin"),
        "teacher": User(email="maria@daycare.com", password_hash="x", role="Teacher", teacher_id=teacher.id),
        "parent_a": User(email="sarah@example.com", password_hash="x", role="Parent", parent_id=parent_a.id),
        "parent_b": User(email="david@example.com", password_hash="x", role="Parent", parent_id=parent_b.id),
        "orphan": User(email="nobody@example.com", password_hash="x", role="Parent"),
        "guest": User(email="guest@example.com", password_hash="x", role="Guest"),
    }
    db.add_all(users.values())
    db.commit()

    return Roster(
        admin_headers=auth_headers(users["admin"]),
        teacher_headers=auth_headers(users["teacher"]),
        parent_a_headers=auth_headers(users["parent_a"]),
        parent_b_headers=auth_headers(users["parent_b"]),
        orphan_parent_headers=auth_headers(users["orphan"]),
        guest_headers=auth_headers(users["guest"]),
        teacher_id=teacher.id,
        parent_a_id=parent_a.id,
        parent_b_id=parent_b.id,
        child_a_id=child_a.id,
        child_b_id=child_b.id,
    )


@pytest.fixture
def build_client(session_factory):
    """Return a factory building a TestClient over the given routers."""

    def _build_test_client(*routers, today: date = TODAY) -> TestClient:
        app = FastAPI()
        for router in routers:
            app.include_router(router, prefix="/api")

        def override_get_db():
            db = session_factory()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[deps.get_db] = override_get_db
        app.dependency_overrides[deps.get_clock] = lambda: FixedClock(today)
        return TestClient(app)

    return _build_test_client
