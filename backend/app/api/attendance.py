"""Attendance API endpoints."""
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.children import get_child_for_caller
from app.api.deps import get_caller, get_clock, get_db, require_admin, require_staff
from app.models.attendance import Attendance
from app.models.child import Child
from app.schemas.activity import AttendanceResponse, CheckInRequest, CheckOutRequest
from app.services.clock import Clock
from app.services.visibility import Caller

router = APIRouter(prefix="/attendance", tags=["attendance"])


@router.get("", response_model=list[AttendanceResponse])
def get_attendance(
    db: Session = Depends(get_db),
    _: Caller = Depends(require_staff),
):
    return db.query(Attendance).order_by(Attendance.date.desc(), Attendance.check_in_time.desc()).all()


@router.post("/check-in", response_model=AttendanceResponse, status_code=status.HTTP_201_CREATED)
def check_in(
    request: CheckInRequest,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    _: Caller = Depends(require_staff),
):
    """Check a child in. A child has at most one open check-in per day."""
    child = db.query(Child).filter(Child.id == request.child_id).first()
    if not child:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Child not found")

    today = clock.today().isoformat()
    open_record = db.query(Attendance).filter(
        Attendance.child_id == child.id,
        Attendance.date == today,
        Attendance.check_out_time.is_(None),
    ).first()
    if open_record:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Child is already checked in",
        )

    record = Attendance(
        child_id=child.id,
        date=today,
        check_in_time=clock.now().isoformat(),
        check_in_notes=request.notes,
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


@router.put("/{attendance_id}/check-out", response_model=AttendanceResponse)
def check_out(
    attendance_id: int,
    request: CheckOutRequest,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    _: Caller = Depends(require_staff),
):
    record = db.query(Attendance).filter(Attendance.id == attendance_id).first()
    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Attendance record not found")
    if record.check_out_time:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Child is already checked out",
        )

    record.check_out_time = clock.now().isoformat()
    record.check_out_notes = request.notes
    db.commit()
    db.refresh(record)
    return record


@router.get("/child/{child_id}", response_model=list[AttendanceResponse])
def get_attendance_by_child(
    child_id: int,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    get_child_for_caller(db, caller, child_id)
    return (
        db.query(Attendance)
        .filter(Attendance.child_id == child_id)
        .order_by(Attendance.date.desc(), Attendance.check_in_time.desc())
        .all()
    )


@router.get("/date/{day}", response_model=list[AttendanceResponse])
def get_attendance_by_date(
    day: date,
    db: Session = Depends(get_db),
    _: Caller = Depends(require_staff),
):
    return (
        db.query(Attendance)
        .filter(Attendance.date == day.isoformat())
        .order_by(Attendance.check_in_time)
        .all()
    )


@router.delete("/{attendance_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_attendance(
    attendance_id: int,
    db: Session = Depends(get_db),
    _: Caller = Depends(require_admin),
):
    record = db.query(Attendance).filter(Attendance.id == attendance_id).first()
    if not record:
        raise HTTPException(status_code=404, detail="Attendance record not found")
    db.delete(record)
    db.commit()
