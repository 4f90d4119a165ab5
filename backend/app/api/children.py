"""Children API endpoints."""
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.deps import get_caller, get_db, require_admin, require_staff
from app.models.child import Child
from app.models.parent import Parent
from app.models.teacher import TeacherChild
from app.schemas.people import ChildCreate, ChildResponse, ChildUpdate
from app.services.visibility import Caller, Role

router = APIRouter(prefix="/children", tags=["children"])


def get_child_for_caller(db: Session, caller: Caller, child_id: int) -> Child:
    """Load a child, enforcing that parents only reach their own children."""
    child = db.query(Child).filter(Child.id == child_id).first()
    if not child:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Child not found",
        )
    if caller.role == Role.PARENT and child.parent_id != caller.parent_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only access your own children",
        )
    if caller.role == Role.OTHER:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return child


@router.get("", response_model=list[ChildResponse])
def get_children(
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    """Parents see their own children; Admin and Teacher see all."""
    query = db.query(Child)
    if caller.role == Role.PARENT:
        if caller.parent_id is None:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="No parent profile linked")
        query = query.filter(Child.parent_id == caller.parent_id)
    elif caller.role == Role.OTHER:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    return query.order_by(Child.created_at.desc()).all()


@router.get("/by-parent/{parent_id}", response_model=list[ChildResponse])
def get_children_by_parent(
    parent_id: int,
    db: Session = Depends(get_db),
    _: Caller = Depends(require_staff),
):
    return db.query(Child).filter(Child.parent_id == parent_id).all()


@router.get("/{child_id}", response_model=ChildResponse)
def get_child(
    child_id: int,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    return get_child_for_caller(db, caller, child_id)


@router.post("", response_model=ChildResponse, status_code=status.HTTP_201_CREATED)
def create_child(
    child_data: ChildCreate,
    db: Session = Depends(get_db),
    _: Caller = Depends(require_staff),
):
    """Enroll a child under an existing parent."""
    if not db.query(Parent).filter(Parent.id == child_data.parent_id).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Parent not found",
        )

    child = Child(
        first_name=child_data.first_name,
        last_name=child_data.last_name,
        date_of_birth=child_data.date_of_birth.isoformat(),
        gender=child_data.gender,
        allergies=child_data.allergies,
        medical_notes=child_data.medical_notes,
        parent_id=child_data.parent_id,
    )
    db.add(child)
    db.commit()
    db.refresh(child)
    return child


@router.patch("/{child_id}", response_model=ChildResponse)
def update_child(
    child_id: int,
    child_data: ChildUpdate,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_staff),
):
    """Update a child. Date of birth and owning parent are fixed."""
    child = get_child_for_caller(db, caller, child_id)
    updates = child_data.model_dump(exclude_unset=True)
    if "is_active" in updates:
        updates["is_active"] = 1 if updates["is_active"] else 0
    for field, value in updates.items():
        setattr(child, field, value)
    child.updated_at = datetime.utcnow().isoformat()

    db.commit()
    db.refresh(child)
    return child


@router.delete("/{child_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_child(
    child_id: int,
    db: Session = Depends(get_db),
    caller: Caller = Depends(require_admin),
):
    child = get_child_for_caller(db, caller, child_id)
    db.query(TeacherChild).filter(TeacherChild.child_id == child_id).delete(synchronize_session=False)
    db.delete(child)
    db.commit()
