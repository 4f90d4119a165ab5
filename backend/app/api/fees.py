"""Fee API endpoints."""
import logging
from datetime import date
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, joinedload

from app.api.deps import get_caller, get_clock, get_db, require_admin, require_staff
from app.models.child import Child
from app.models.fee import FEE_OVERDUE, FEE_PAID, FEE_PENDING, Fee
from app.schemas.fee import (
    BulkFeesResponse,
    FeeCreate,
    FeePayment,
    FeeResponse,
    FeeSummaryResponse,
    MonthlyFeesCreate,
    OverdueUpdateResponse,
)
from app.services.clock import Clock
from app.services.notifications import notify_new_fee
from app.services.reminder_store import run_overdue_phase
from app.services.visibility import Caller, Role

router = APIRouter(prefix="/fees", tags=["fees"])
logger = logging.getLogger(__name__)


def days_overdue(fee: Fee, today: date) -> int:
    """Whole days past the due date for an unpaid fee, else 0."""
    if fee.status == FEE_PAID:
        return 0
    late = (today - date.fromisoformat(fee.due_date)).days
    return max(late, 0)


def _fee_response(fee: Fee, today: date) -> FeeResponse:
    child = fee.child
    parent = child.parent
    return FeeResponse(
        id=fee.id,
        child_id=fee.child_id,
        child_name=child.full_name,
        parent_id=parent.id,
        parent_name=parent.full_name,
        parent_email=parent.email,
        amount=fee.amount,
        description=fee.description,
        due_date=fee.due_date,
        paid_date=fee.paid_date,
        status=fee.status,
        fee_type=fee.fee_type,
        notes=fee.notes,
        days_overdue=days_overdue(fee, today),
        created_at=fee.created_at,
    )


def _fee_query(db: Session):
    return db.query(Fee).options(joinedload(Fee.child).joinedload(Child.parent))


def _get_fee_for_caller(db: Session, caller: Caller, fee_id: int) -> Fee:
    fee = _fee_query(db).filter(Fee.id == fee_id).first()
    if not fee:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Fee not found",
        )
    if caller.role == Role.PARENT and fee.child.parent_id != caller.parent_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only access fees for your own children",
        )
    if caller.role == Role.OTHER:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return fee


@router.get("", response_model=list[FeeResponse])
def get_fees(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    caller: Caller = Depends(get_caller),
):
    """Fees ordered by due date. Parents only see their own children's fees."""
    query = _fee_query(db)
    if caller.role == Role.PARENT:
        query = query.join(Child, Fee.child_id == Child.id).filter(Child.parent_id == caller.parent_id)
    elif caller.role == Role.OTHER:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")

    today = clock.today()
    return [_fee_response(fee, today) for fee in query.order_by(Fee.due_date.desc()).all()]


@router.get("/summary", response_model=FeeSummaryResponse)
def get_fee_summary(
    db: Session = Depends(get_db),
    _: Caller = Depends(require_staff),
):
    """Counts and totals per fee status."""
    fees = db.query(Fee).all()
    totals = {FEE_PAID: Decimal("0"), FEE_PENDING: Decimal("0"), FEE_OVERDUE: Decimal("0")}
    counts = {FEE_PAID: 0, FEE_PENDING: 0, FEE_OVERDUE: 0}
    for fee in fees:
        if fee.status in totals:
            totals[fee.status] += Decimal(fee.amount)
            counts[fee.status] += 1

    return FeeSummaryResponse(
        total_fees=len(fees),
        paid_fees=counts[FEE_PAID],
        pending_fees=counts[FEE_PENDING],
        overdue_fees=counts[FEE_OVERDUE],
        total_amount=sum(totals.values(), Decimal("0")),
        paid_amount=totals[FEE_PAID],
        pending_amount=totals[FEE_PENDING],
        overdue_amount=totals[FEE_OVERDUE],
    )


@router.get("/child/{child_id}", response_model=list[FeeResponse])
def get_fees_by_child(
    child_id: int,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    caller: Caller = Depends(get_caller),
):
    child = db.query(Child).filter(Child.id == child_id).first()
    if not child:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Child not found")
    if caller.role == Role.PARENT and child.parent_id != caller.parent_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only access fees for your own children",
        )

    today = clock.today()
    fees = _fee_query(db).filter(Fee.child_id == child_id).order_by(Fee.due_date.desc()).all()
    return [_fee_response(fee, today) for fee in fees]


@router.get("/parent/{parent_id}", response_model=list[FeeResponse])
def get_fees_by_parent(
    parent_id: int,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    caller: Caller = Depends(get_caller),
):
    if caller.role == Role.PARENT and caller.parent_id != parent_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only access your own fees",
        )

    today = clock.today()
    fees = (
        _fee_query(db)
        .join(Child, Fee.child_id == Child.id)
        .filter(Child.parent_id == parent_id)
        .order_by(Fee.due_date.desc())
        .all()
    )
    return [_fee_response(fee, today) for fee in fees]


@router.get("/{fee_id}", response_model=FeeResponse)
def get_fee(
    fee_id: int,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    caller: Caller = Depends(get_caller),
):
    return _fee_response(_get_fee_for_caller(db, caller, fee_id), clock.today())


@router.post("", response_model=FeeResponse, status_code=status.HTTP_201_CREATED)
def create_fee(
    fee_data: FeeCreate,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    _: Caller = Depends(require_admin),
):
    """Bill a child and notify their parent."""
    child = db.query(Child).filter(Child.id == fee_data.child_id).first()
    if not child:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Child not found",
        )

    fee = Fee(
        child_id=child.id,
        amount=fee_data.amount,
        description=fee_data.description,
        due_date=fee_data.due_date.isoformat(),
        fee_type=fee_data.fee_type,
        notes=fee_data.notes,
        status=FEE_PENDING,
    )
    db.add(fee)
    db.flush()
    notify_new_fee(db, fee, child)
    db.commit()

    logger.info(f"Created fee {fee.id} for child {child.id}")
    return _fee_response(_fee_query(db).filter(Fee.id == fee.id).one(), clock.today())


@router.post("/bulk-monthly", response_model=BulkFeesResponse, status_code=status.HTTP_201_CREATED)
def create_monthly_fees(
    fee_data: MonthlyFeesCreate,
    db: Session = Depends(get_db),
    _: Caller = Depends(require_admin),
):
    """Bill every active child the same monthly amount."""
    children = db.query(Child).filter(Child.is_active == 1).all()
    for child in children:
        fee = Fee(
            child_id=child.id,
            amount=fee_data.amount,
            description=fee_data.description,
            due_date=fee_data.due_date.isoformat(),
            fee_type="monthly",
            status=FEE_PENDING,
        )
        db.add(fee)
        db.flush()
        notify_new_fee(db, fee, child)
    db.commit()

    return BulkFeesResponse(
        message=f"Monthly fees created for {len(children)} children",
        count=len(children),
    )


@router.put("/update-overdue", response_model=OverdueUpdateResponse)
def update_overdue_fees(
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    _: Caller = Depends(require_admin),
):
    """Move pending fees past their due date to overdue."""
    transitioned, _created = run_overdue_phase(db, clock)
    return OverdueUpdateResponse(
        message=f"Updated {transitioned} fees to overdue",
        count=transitioned,
    )


@router.put("/{fee_id}/pay", response_model=FeeResponse)
def pay_fee(
    fee_id: int,
    payment: FeePayment,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    caller: Caller = Depends(get_caller),
):
    """Record a payment. Admin or the owning parent."""
    fee = _get_fee_for_caller(db, caller, fee_id)
    if caller.role == Role.TEACHER:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Teachers cannot record payments")
    if fee.status == FEE_PAID:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Fee is already paid",
        )

    paid_on = payment.paid_date or clock.today()
    fee.status = FEE_PAID
    fee.paid_date = paid_on.isoformat()
    if payment.payment_notes:
        fee.notes = f"{fee.notes} | Payment: {payment.payment_notes}" if fee.notes else f"Payment: {payment.payment_notes}"
    fee.updated_at = clock.now().isoformat()

    db.commit()
    db.refresh(fee)
    return _fee_response(fee, clock.today())


@router.delete("/{fee_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_fee(
    fee_id: int,
    db: Session = Depends(get_db),
    _: Caller = Depends(require_admin),
):
    fee = db.query(Fee).filter(Fee.id == fee_id).first()
    if not fee:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Fee not found",
        )
    db.delete(fee)
    db.commit()
