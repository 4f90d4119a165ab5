"""Teacher leave request API endpoints."""
import logging
from datetime import date, datetime

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.api.deps import get_caller, get_clock, get_db, require_admin
from app.models.leave import LEAVE_APPROVED, LEAVE_PENDING, LEAVE_REJECTED, LeaveRequest
from app.models.teacher import Teacher
from app.schemas.leave import AdminLeaveCreate, LeaveBalanceResponse, LeaveRequestCreate, LeaveResponse
from app.services.clock import Clock
from app.services.visibility import Caller, Role

router = APIRouter(prefix="/leaves", tags=["leaves"])
logger = logging.getLogger(__name__)


def _leave_response(leave: LeaveRequest) -> LeaveResponse:
    return LeaveResponse(
        id=leave.id,
        teacher_id=leave.teacher_id,
        teacher_name=f"{leave.teacher.first_name} {leave.teacher.last_name}",
        start_date=leave.start_date,
        end_date=leave.end_date,
        days=leave.days,
        reason=leave.reason,
        status=leave.status,
        requested_at=leave.requested_at,
        decided_at=leave.decided_at,
    )


def _leave_days(start: date, end: date) -> int:
    """Days in the range, counting both ends."""
    if end < start:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="end_date cannot be before start_date",
        )
    return (end - start).days + 1


def used_leave_days(db: Session, teacher_id: int, year: int) -> int:
    """Approved leave days starting in ``year``."""
    used = (
        db.query(func.sum(LeaveRequest.days))
        .filter(
            LeaveRequest.teacher_id == teacher_id,
            LeaveRequest.status == LEAVE_APPROVED,
            LeaveRequest.start_date.like(f"{year:04d}-%"),
        )
        .scalar()
    )
    return used or 0


def _check_balance(db: Session, teacher: Teacher, leave: LeaveRequest) -> None:
    year = int(leave.start_date[:4])
    remaining = teacher.annual_leave_days - used_leave_days(db, teacher.id, year)
    if leave.days > remaining:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Not enough leave left for {year}: {remaining} day(s) remaining",
        )


def _require_teacher_profile(db: Session, caller: Caller) -> Teacher:
    if caller.role != Role.TEACHER or caller.teacher_id is None:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only teachers can manage their own leave",
        )
    teacher = db.query(Teacher).filter(Teacher.id == caller.teacher_id).first()
    if not teacher:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Teacher profile not found")
    return teacher


def _get_pending_leave_or_404(db: Session, leave_id: int) -> LeaveRequest:
    leave = (
        db.query(LeaveRequest)
        .options(joinedload(LeaveRequest.teacher))
        .filter(LeaveRequest.id == leave_id)
        .first()
    )
    if not leave:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Leave request not found",
        )
    if leave.status != LEAVE_PENDING:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Leave request is already {leave.status.lower()}",
        )
    return leave


def _decide(leave: LeaveRequest, decision: str, caller: Caller) -> None:
    leave.status = decision
    leave.decided_at = datetime.utcnow().isoformat()
    leave.decided_by = caller.user_id


@router.post("/request", response_model=LeaveResponse, status_code=status.HTTP_201_CREATED)
def request_leave(
    leave_data: LeaveRequestCreate,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    """Ask for leave. Requests start out pending."""
    teacher = _require_teacher_profile(db, caller)
    leave = LeaveRequest(
        teacher_id=teacher.id,
        start_date=leave_data.start_date.isoformat(),
        end_date=leave_data.end_date.isoformat(),
        days=_leave_days(leave_data.start_date, leave_data.end_date),
        reason=leave_data.reason,
        status=LEAVE_PENDING,
    )
    db.add(leave)
    db.commit()
    db.refresh(leave)

    logger.info(f"Teacher {teacher.id} requested {leave.days} day(s) of leave")
    return _leave_response(leave)


@router.get("/my", response_model=list[LeaveResponse])
def get_my_leaves(
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    teacher = _require_teacher_profile(db, caller)
    leaves = (
        db.query(LeaveRequest)
        .options(joinedload(LeaveRequest.teacher))
        .filter(LeaveRequest.teacher_id == teacher.id)
        .order_by(LeaveRequest.start_date.desc())
        .all()
    )
    return [_leave_response(leave) for leave in leaves]


@router.get("/balance", response_model=LeaveBalanceResponse)
def get_leave_balance(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    caller: Caller = Depends(get_caller),
):
    """The caller's allowance for the current year."""
    teacher = _require_teacher_profile(db, caller)
    year = clock.today().year
    used = used_leave_days(db, teacher.id, year)
    return LeaveBalanceResponse(
        year=year,
        annual_allocation=teacher.annual_leave_days,
        used_days=used,
        remaining_days=teacher.annual_leave_days - used,
    )


@router.get("", response_model=list[LeaveResponse])
def get_leaves(
    status_filter: str | None = Query(None, alias="status"),
    db: Session = Depends(get_db),
    _: Caller = Depends(require_admin),
):
    """All leave requests (Admin only), optionally by status."""
    query = db.query(LeaveRequest).options(joinedload(LeaveRequest.teacher))
    if status_filter:
        query = query.filter(LeaveRequest.status == status_filter)
    return [_leave_response(leave) for leave in query.order_by(LeaveRequest.requested_at.desc()).all()]


@router.post("/admin/create", response_model=LeaveResponse, status_code=status.HTTP_201_CREATED)
def create_leave_for_teacher(
    leave_data: AdminLeaveCreate,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_admin),
):
    """Record leave for a teacher, approved straight away unless ``approve`` is false."""
    teacher = db.query(Teacher).filter(Teacher.id == leave_data.teacher_id).first()
    if not teacher:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Teacher not found")

    leave = LeaveRequest(
        teacher_id=teacher.id,
        start_date=leave_data.start_date.isoformat(),
        end_date=leave_data.end_date.isoformat(),
        days=_leave_days(leave_data.start_date, leave_data.end_date),
        reason=leave_data.reason,
        status=LEAVE_PENDING,
    )
    if leave_data.approve:
        _check_balance(db, teacher, leave)
        _decide(leave, LEAVE_APPROVED, caller)
    db.add(leave)
    db.commit()
    db.refresh(leave)
    return _leave_response(leave)


@router.put("/{leave_id}/approve", response_model=LeaveResponse)
def approve_leave(
    leave_id: int,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_admin),
):
    leave = _get_pending_leave_or_404(db, leave_id)
    _check_balance(db, leave.teacher, leave)
    _decide(leave, LEAVE_APPROVED, caller)
    db.commit()
    db.refresh(leave)

    logger.info(f"Approved leave {leave.id} for teacher {leave.teacher_id}")
    return _leave_response(leave)


@router.put("/{leave_id}/reject", response_model=LeaveResponse)
def reject_leave(
    leave_id: int,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_admin),
):
    leave = _get_pending_leave_or_404(db, leave_id)
    _decide(leave, LEAVE_REJECTED, caller)
    db.commit()
    db.refresh(leave)
    return _leave_response(leave)
