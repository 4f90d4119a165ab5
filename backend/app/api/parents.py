"""Parents API endpoints."""
from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.auth import create_user_account
from app.api.deps import get_caller, get_db, require_admin, require_staff
from app.models.parent import Parent
from app.models.user import User
from app.schemas.people import ParentCreate, ParentResponse, ParentUpdate
from app.services.visibility import Caller, Role

router = APIRouter(prefix="/parents", tags=["parents"])


def _get_parent_or_404(db: Session, parent_id: int) -> Parent:
    parent = db.query(Parent).filter(Parent.id == parent_id).first()
    if not parent:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Parent not found",
        )
    return parent


@router.get("", response_model=list[ParentResponse])
def get_parents(
    db: Session = Depends(get_db),
    _: Caller = Depends(require_staff),
):
    """All parents (Admin and Teacher only)."""
    return db.query(Parent).order_by(Parent.created_at.desc()).all()


@router.get("/{parent_id}", response_model=ParentResponse)
def get_parent(
    parent_id: int,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    """A single parent. Parents may only look themselves up."""
    if caller.role == Role.PARENT and caller.parent_id != parent_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not your profile")
    return _get_parent_or_404(db, parent_id)


@router.post("", response_model=ParentResponse, status_code=status.HTTP_201_CREATED)
def create_parent(
    parent_data: ParentCreate,
    db: Session = Depends(get_db),
    _: Caller = Depends(require_admin),
):
    """Register a parent, with a login account when a password is given."""
    email = parent_data.email.lower()
    if db.query(Parent).filter(Parent.email == email).first() or db.query(User).filter(User.email == email).first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="A user with this email already exists",
        )

    parent = Parent(
        first_name=parent_data.first_name,
        last_name=parent_data.last_name,
        email=email,
        phone_number=parent_data.phone_number,
        address=parent_data.address,
        emergency_contact=parent_data.emergency_contact,
    )
    db.add(parent)
    db.flush()

    if parent_data.password:
        create_user_account(
            db,
            email,
            parent_data.password,
            Role.PARENT.value,
            first_name=parent.first_name,
            last_name=parent.last_name,
            parent_id=parent.id,
        )

    db.commit()
    db.refresh(parent)
    return parent


@router.patch("/{parent_id}", response_model=ParentResponse)
def update_parent(
    parent_id: int,
    parent_data: ParentUpdate,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    """Update a parent. Parents may edit their own profile."""
    if not caller.is_admin and not (caller.role == Role.PARENT and caller.parent_id == parent_id):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not your profile")

    parent = _get_parent_or_404(db, parent_id)
    updates = parent_data.model_dump(exclude_unset=True)
    if "is_active" in updates:
        if not caller.is_admin:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin role required")
        updates["is_active"] = 1 if updates["is_active"] else 0
    for field, value in updates.items():
        setattr(parent, field, value)
    parent.updated_at = datetime.utcnow().isoformat()

    db.commit()
    db.refresh(parent)
    return parent


@router.delete("/{parent_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_parent(
    parent_id: int,
    db: Session = Depends(get_db),
    _: Caller = Depends(require_admin),
):
    """Remove a parent, their children and their login account."""
    parent = _get_parent_or_404(db, parent_id)
    db.query(User).filter(User.parent_id == parent_id).delete(synchronize_session=False)
    db.delete(parent)
    db.commit()
