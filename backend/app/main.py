"""Daycare management API."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup: create tables, bootstrap admin, optional demo data, scheduler
    from app.api.auth import ensure_admin_account
    from app.database import Base, SessionLocal, engine, get_db_context
    from app.services.clock import SystemClock
    from app.services.reminder_store import policy_from_settings
    from app.services.scheduler import ReminderScheduler
    from app.services.seed_loader import load_seed_data

    # Import all models so they're registered with Base
    from app import models  # noqa: F401

    Base.metadata.create_all(bind=engine)

    with get_db_context() as db:
        ensure_admin_account(db, settings.admin_email, settings.admin_password)
        if settings.seed_demo_data:
            load_seed_data(db, SystemClock().today())

    scheduler = None
    if settings.reminders_enabled:
        scheduler = ReminderScheduler(
            SessionLocal,
            interval=settings.reminder_interval,
            policy=policy_from_settings(settings),
        )
        scheduler.start()
    else:
        logger.info("Reminder scheduler disabled")
    app.state.reminder_scheduler = scheduler

    yield

    # Shutdown: let an in-flight sweep finish
    if scheduler is not None:
        await scheduler.stop()


app = FastAPI(
    title=settings.app_name,
    description="Daycare roster, billing, events and reminders",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    scheduler = getattr(app.state, "reminder_scheduler", None)
    return {
        "status": "healthy",
        "app": settings.app_name,
        "reminders": scheduler.state.value if scheduler else "disabled",
    }


# Import and include routers
from app.api import (  # noqa: E402
    activities,
    attendance,
    auth,
    children,
    events,
    fees,
    holidays,
    leaves,
    messages,
    notifications,
    parents,
    teachers,
)

app.include_router(auth.router, prefix="/api")
app.include_router(parents.router, prefix="/api")
app.include_router(teachers.router, prefix="/api")
app.include_router(children.router, prefix="/api")
app.include_router(fees.router, prefix="/api")
app.include_router(holidays.router, prefix="/api")
app.include_router(events.router, prefix="/api")
app.include_router(attendance.router, prefix="/api")
app.include_router(activities.router, prefix="/api")
app.include_router(leaves.router, prefix="/api")
app.include_router(messages.router, prefix="/api")
app.include_router(notifications.router, prefix="/api")
