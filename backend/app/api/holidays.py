"""Holiday API endpoints."""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_caller, get_db, require_admin
from app.models.holiday import Holiday
from app.schemas.calendar import HolidayCreate, HolidayResponse, HolidayUpdate
from app.services.visibility import Caller

router = APIRouter(prefix="/holidays", tags=["holidays"])


def _get_holiday_or_404(db: Session, holiday_id: int) -> Holiday:
    holiday = db.query(Holiday).filter(Holiday.id == holiday_id).first()
    if not holiday:
        raise HTTPException(status_code=404, detail="Holiday not found")
    return holiday


@router.get("", response_model=list[HolidayResponse])
def get_holidays(
    year: int | None = Query(None, ge=1900, le=2999),
    db: Session = Depends(get_db),
    _: Caller = Depends(get_caller),
):
    """Holidays by date, optionally limited to one year."""
    query = db.query(Holiday)
    if year is not None:
        query = query.filter(Holiday.date.like(f"{year:04d}-%"))
    return query.order_by(Holiday.date).all()


@router.get("/{holiday_id}", response_model=HolidayResponse)
def get_holiday(
    holiday_id: int,
    db: Session = Depends(get_db),
    _: Caller = Depends(get_caller),
):
    return _get_holiday_or_404(db, holiday_id)


@router.post("", response_model=HolidayResponse, status_code=status.HTTP_201_CREATED)
def create_holiday(
    holiday_data: HolidayCreate,
    db: Session = Depends(get_db),
    _: Caller = Depends(require_admin),
):
    holiday = Holiday(
        name=holiday_data.name,
        description=holiday_data.description,
        date=holiday_data.date.isoformat(),
        is_recurring=1 if holiday_data.is_recurring else 0,
        recurrence_type=holiday_data.recurrence_type,
        color=holiday_data.color,
    )
    db.add(holiday)
    db.commit()
    db.refresh(holiday)
    return holiday


@router.patch("/{holiday_id}", response_model=HolidayResponse)
def update_holiday(
    holiday_id: int,
    holiday_data: HolidayUpdate,
    db: Session = Depends(get_db),
    _: Caller = Depends(require_admin),
):
    holiday = _get_holiday_or_404(db, holiday_id)
    updates = holiday_data.model_dump(exclude_unset=True)
    if "is_recurring" in updates:
        updates["is_recurring"] = 1 if updates["is_recurring"] else 0
    for field, value in updates.items():
        setattr(holiday, field, value)
    db.commit()
    db.refresh(holiday)
    return holiday


@router.delete("/{holiday_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_holiday(
    holiday_id: int,
    db: Session = Depends(get_db),
    _: Caller = Depends(require_admin),
):
    holiday = _get_holiday_or_404(db, holiday_id)
    db.delete(holiday)
    db.commit()
