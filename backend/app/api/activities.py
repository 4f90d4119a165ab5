"""Daily activity API endpoints."""
import logging
from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session, joinedload

from app.api.children import get_child_for_caller
from app.api.deps import get_caller, get_db, require_admin, require_staff
from app.models.activity import DailyActivity
from app.models.child import Child
from app.schemas.activity import ActivityCreate, ActivityResponse, ActivityUpdate
from app.services.visibility import Caller

router = APIRouter(prefix="/activities", tags=["activities"])
logger = logging.getLogger(__name__)


def _activity_response(activity: DailyActivity) -> ActivityResponse:
    return ActivityResponse(
        id=activity.id,
        child_id=activity.child_id,
        child_name=activity.child.full_name,
        activity_type=activity.activity_type,
        activity_time=activity.activity_time,
        duration_minutes=activity.duration_minutes,
        food_item=activity.food_item,
        notes=activity.notes,
        created_at=activity.created_at,
    )


def _activity_query(db: Session, day: date | None):
    query = db.query(DailyActivity).options(joinedload(DailyActivity.child))
    if day is not None:
        query = query.filter(DailyActivity.activity_time.like(f"{day.isoformat()}%"))
    return query


def _get_activity_or_404(db: Session, activity_id: int) -> DailyActivity:
    activity = _activity_query(db, None).filter(DailyActivity.id == activity_id).first()
    if not activity:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Activity not found",
        )
    return activity


@router.get("", response_model=list[ActivityResponse])
def get_activities(
    day: date | None = Query(None, alias="date"),
    db: Session = Depends(get_db),
    _: Caller = Depends(require_staff),
):
    """Every child's activities, newest first, optionally for one day."""
    activities = _activity_query(db, day).order_by(DailyActivity.activity_time.desc()).all()
    return [_activity_response(a) for a in activities]


@router.get("/child/{child_id}", response_model=list[ActivityResponse])
def get_activities_by_child(
    child_id: int,
    day: date | None = Query(None, alias="date"),
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    get_child_for_caller(db, caller, child_id)
    activities = (
        _activity_query(db, day)
        .filter(DailyActivity.child_id == child_id)
        .order_by(DailyActivity.activity_time.desc())
        .all()
    )
    return [_activity_response(a) for a in activities]


@router.get("/{activity_id}", response_model=ActivityResponse)
def get_activity(
    activity_id: int,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    activity = _get_activity_or_404(db, activity_id)
    get_child_for_caller(db, caller, activity.child_id)
    return _activity_response(activity)


@router.post("", response_model=ActivityResponse, status_code=status.HTTP_201_CREATED)
def create_activity(
    activity_data: ActivityCreate,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_staff),
):
    child = db.query(Child).filter(Child.id == activity_data.child_id).first()
    if not child:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Child not found")

    activity = DailyActivity(
        child_id=child.id,
        activity_type=activity_data.activity_type,
        activity_time=activity_data.activity_time.isoformat(),
        duration_minutes=activity_data.duration_minutes,
        food_item=activity_data.food_item,
        notes=activity_data.notes,
        recorded_by=caller.user_id,
    )
    db.add(activity)
    db.commit()
    db.refresh(activity)

    logger.info(f"Recorded {activity.activity_type} activity {activity.id} for child {child.id}")
    return _activity_response(activity)


@router.patch("/{activity_id}", response_model=ActivityResponse)
def update_activity(
    activity_id: int,
    activity_data: ActivityUpdate,
    db: Session = Depends(get_db),
    _: Caller = Depends(require_staff),
):
    activity = _get_activity_or_404(db, activity_id)
    updates = activity_data.model_dump(exclude_unset=True)
    for required in ("activity_type", "activity_time"):
        if required in updates and updates[required] is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"{required} cannot be cleared",
            )
    if updates.get("activity_time") is not None:
        updates["activity_time"] = updates["activity_time"].isoformat()
    for field, value in updates.items():
        setattr(activity, field, value)
    activity.updated_at = datetime.utcnow().isoformat()

    db.commit()
    db.refresh(activity)
    return _activity_response(activity)


@router.delete("/{activity_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_activity(
    activity_id: int,
    db: Session = Depends(get_db),
    _: Caller = Depends(require_admin),
):
    activity = _get_activity_or_404(db, activity_id)
    db.delete(activity)
    db.commit()
