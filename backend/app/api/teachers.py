"""Teachers API endpoints."""
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, joinedload

from app.api.auth import create_user_account
from app.api.deps import get_caller, get_db, require_admin
from app.models.child import Child
from app.models.teacher import Teacher, TeacherChild
from app.models.user import User
from app.schemas.leave import AssignedChildResponse, ChildAssignment
from app.schemas.people import TeacherCreate, TeacherResponse, TeacherUpdate
from app.services.visibility import Caller, Role

router = APIRouter(prefix="/teachers", tags=["teachers"])


def _get_teacher_or_404(db: Session, teacher_id: int) -> Teacher:
    teacher = db.query(Teacher).filter(Teacher.id == teacher_id).first()
    if not teacher:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Teacher not found",
        )
    return teacher


@router.get("", response_model=list[TeacherResponse])
def get_teachers(
    db: Session = Depends(get_db),
    _: Caller = Depends(require_admin),
):
    """Active teachers (Admin only)."""
    return db.query(Teacher).filter(Teacher.is_active == 1).order_by(Teacher.created_at.desc()).all()


@router.get("/{teacher_id}", response_model=TeacherResponse)
def get_teacher(
    teacher_id: int,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    if not caller.is_admin and not (caller.role == Role.TEACHER and caller.teacher_id == teacher_id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not your profile")
    return _get_teacher_or_404(db, teacher_id)


@router.post("", response_model=TeacherResponse, status_code=status.HTTP_201_CREATED)
def create_teacher(
    teacher_data: TeacherCreate,
    db: Session = Depends(get_db),
    _: Caller = Depends(require_admin),
):
    """Add a teacher, with a login account when a password is given."""
    email = teacher_data.email.lower()
    if db.query(Teacher).filter(Teacher.email == email).first() or db.query(User).filter(User.email == email).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="A user with this email already exists",
        )

    teacher = Teacher(
        first_name=teacher_data.first_name,
        last_name=teacher_data.last_name,
        email=email,
        phone=teacher_data.phone,
        specialization=teacher_data.specialization,
        hire_date=teacher_data.hire_date.isoformat() if teacher_data.hire_date else None,
        annual_leave_days=teacher_data.annual_leave_days,
    )
    db.add(teacher)
    db.flush()

    if teacher_data.password:
        create_user_account(
            db,
            email,
            teacher_data.password,
            Role.TEACHER.value,
            first_name=teacher.first_name,
            last_name=teacher.last_name,
            teacher_id=teacher.id,
        )

    db.commit()
    db.refresh(teacher)
    return teacher


@router.patch("/{teacher_id}", response_model=TeacherResponse)
def update_teacher(
    teacher_id: int,
    teacher_data: TeacherUpdate,
    db: Session = Depends(get_db),
    _: Caller = Depends(require_admin),
):
    teacher = _get_teacher_or_404(db, teacher_id)
    updates = teacher_data.model_dump(exclude_unset=True)
    if "is_active" in updates:
        updates["is_active"] = 1 if updates["is_active"] else 0
    if updates.get("hire_date") is not None:
        updates["hire_date"] = updates["hire_date"].isoformat()
    if "annual_leave_days" in updates and updates["annual_leave_days"] is None:
        del updates["annual_leave_days"]
    for field, value in updates.items():
        setattr(teacher, field, value)
    teacher.updated_at = datetime.utcnow().isoformat()

    db.commit()
    db.refresh(teacher)
    return teacher


@router.delete("/{teacher_id}", status_code=status.HTTP_204_NO_CONTENT)
def deactivate_teacher(
    teacher_id: int,
    db: Session = Depends(get_db),
    _: Caller = Depends(require_admin),
):
    """Deactivate a teacher and their login. Records are kept."""
    teacher = _get_teacher_or_404(db, teacher_id)
    teacher.is_active = 0
    teacher.updated_at = datetime.utcnow().isoformat()
    db.query(User).filter(User.teacher_id == teacher_id).update(
        {"is_active": 0},
        synchronize_session=False,
    )
    db.commit()


def _assigned_child_response(assignment: TeacherChild) -> AssignedChildResponse:
    return AssignedChildResponse(
        child_id=assignment.child_id,
        child_name=assignment.child.full_name,
        assigned_at=assignment.assigned_at,
    )


@router.get("/{teacher_id}/children", response_model=list[AssignedChildResponse])
def get_assigned_children(
    teacher_id: int,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    """Children in a teacher's care (Admin, or that teacher)."""
    if not caller.is_admin and not (caller.role == Role.TEACHER and caller.teacher_id == teacher_id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not your profile")
    _get_teacher_or_404(db, teacher_id)
    assignments = (
        db.query(TeacherChild)
        .options(joinedload(TeacherChild.child))
        .filter(TeacherChild.teacher_id == teacher_id)
        .order_by(TeacherChild.assigned_at)
        .all()
    )
    return [_assigned_child_response(a) for a in assignments]


@router.post(
    "/{teacher_id}/assign-child",
    response_model=AssignedChildResponse,
    status_code=status.HTTP_201_CREATED,
)
def assign_child(
    teacher_id: int,
    assignment_data: ChildAssignment,
    db: Session = Depends(get_db),
    _: Caller = Depends(require_admin),
):
    teacher = db.query(Teacher).filter(Teacher.id == teacher_id).first()
    child = db.query(Child).filter(Child.id == assignment_data.child_id).first()
    if not teacher or not child:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Teacher or child not found",
        )
    existing = db.query(TeacherChild).filter(
        TeacherChild.teacher_id == teacher_id,
        TeacherChild.child_id == child.id,
    ).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Child is already assigned to this teacher",
        )

    assignment = TeacherChild(teacher_id=teacher_id, child_id=child.id)
    db.add(assignment)
    db.commit()
    db.refresh(assignment)
    return _assigned_child_response(assignment)


@router.delete("/{teacher_id}/remove-child/{child_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_child(
    teacher_id: int,
    child_id: int,
    db: Session = Depends(get_db),
    _: Caller = Depends(require_admin),
):
    assignment = db.query(TeacherChild).filter(
        TeacherChild.teacher_id == teacher_id,
        TeacherChild.child_id == child_id,
    ).first()
    if not assignment:
        raise HTTPException(status_code=404, detail="Assignment not found")
    db.delete(assignment)
    db.commit()
