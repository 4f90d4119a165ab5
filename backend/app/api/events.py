"""Event and registration API endpoints."""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.api.deps import get_caller, get_db, require_admin, require_staff
from app.models.child import Child
from app.models.event import Event, EventParticipant
from app.schemas.calendar import EventCreate, EventResponse, EventUpdate, ParticipantCreate, ParticipantResponse
from app.services.notifications import notify_event_registration, notify_new_event
from app.services.visibility import Caller, Role

router = APIRouter(prefix="/events", tags=["events"])
logger = logging.getLogger(__name__)


def _registered_count(db: Session, event_id: int) -> int:
    return db.query(func.count(EventParticipant.id)).filter(EventParticipant.event_id == event_id).scalar()


def _event_response(db: Session, event: Event) -> EventResponse:
    return EventResponse(
        id=event.id,
        name=event.name,
        type=event.type,
        description=event.description,
        price=event.price,
        age_from=event.age_from,
        age_to=event.age_to,
        capacity=event.capacity,
        time=event.time,
        registered_count=_registered_count(db, event.id),
        created_at=event.created_at,
    )


def _participant_response(participant: EventParticipant) -> ParticipantResponse:
    return ParticipantResponse(
        id=participant.id,
        event_id=participant.event_id,
        child_id=participant.child_id,
        child_name=participant.child.full_name,
        status=participant.status,
        notes=participant.notes,
        registered_at=participant.registered_at,
    )


def _get_event_or_404(db: Session, event_id: int) -> Event:
    event = db.query(Event).filter(Event.id == event_id).first()
    if not event:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Event not found",
        )
    return event


@router.get("", response_model=list[EventResponse])
def get_events(
    db: Session = Depends(get_db),
    _: Caller = Depends(get_caller),
):
    events = db.query(Event).order_by(Event.time).all()
    return [_event_response(db, event) for event in events]


@router.get("/{event_id}", response_model=EventResponse)
def get_event(
    event_id: int,
    db: Session = Depends(get_db),
    _: Caller = Depends(get_caller),
):
    return _event_response(db, _get_event_or_404(db, event_id))


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
def create_event(
    event_data: EventCreate,
    db: Session = Depends(get_db),
    _: Caller = Depends(require_staff),
):
    """Create an event and announce it to parents and teachers."""
    if event_data.age_from is not None and event_data.age_to is not None and event_data.age_from > event_data.age_to:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="age_from cannot be greater than age_to",
        )

    event = Event(
        name=event_data.name,
        type=event_data.type,
        description=event_data.description,
        price=event_data.price,
        age_from=event_data.age_from,
        age_to=event_data.age_to,
        capacity=event_data.capacity,
        time=event_data.time.isoformat(),
    )
    db.add(event)
    db.flush()
    notify_new_event(db, event)
    db.commit()
    db.refresh(event)
    return _event_response(db, event)


@router.patch("/{event_id}", response_model=EventResponse)
def update_event(
    event_id: int,
    event_data: EventUpdate,
    db: Session = Depends(get_db),
    _: Caller = Depends(require_staff),
):
    event = _get_event_or_404(db, event_id)
    updates = event_data.model_dump(exclude_unset=True)
    if updates.get("capacity") is not None and updates["capacity"] < _registered_count(db, event_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Capacity cannot be lower than the number of registrations",
        )
    if updates.get("time") is not None:
        updates["time"] = updates["time"].isoformat()
    for field, value in updates.items():
        setattr(event, field, value)

    db.commit()
    db.refresh(event)
    return _event_response(db, event)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(
    event_id: int,
    db: Session = Depends(get_db),
    _: Caller = Depends(require_admin),
):
    event = _get_event_or_404(db, event_id)
    db.delete(event)
    db.commit()


@router.get("/{event_id}/participants", response_model=list[ParticipantResponse])
def get_participants(
    event_id: int,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    """Registrations for an event. Parents only see their own children."""
    if caller.role == Role.OTHER:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    _get_event_or_404(db, event_id)
    query = (
        db.query(EventParticipant)
        .options(joinedload(EventParticipant.child))
        .filter(EventParticipant.event_id == event_id)
    )
    if caller.role == Role.PARENT:
        query = query.join(Child, EventParticipant.child_id == Child.id).filter(Child.parent_id == caller.parent_id)
    return [_participant_response(p) for p in query.order_by(EventParticipant.registered_at).all()]


@router.post(
    "/{event_id}/participants",
    response_model=ParticipantResponse,
    status_code=status.HTTP_201_CREATED,
)
def register_participant(
    event_id: int,
    registration: ParticipantCreate,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    """Register a child for an event. Parents may only register their own children."""
    event = _get_event_or_404(db, event_id)
    child = db.query(Child).filter(Child.id == registration.child_id).first()
    if not child:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Child not found")
    if caller.role == Role.PARENT and child.parent_id != caller.parent_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only register your own children",
        )
    if caller.role == Role.OTHER:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")

    existing = db.query(EventParticipant).filter(
        EventParticipant.event_id == event_id,
        EventParticipant.child_id == child.id,
    ).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Child is already registered for this event",
        )
    if _registered_count(db, event_id) >= event.capacity:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Event is full",
        )

    participant = EventParticipant(
        event_id=event_id,
        child_id=child.id,
        registered_by=caller.user_id,
        notes=registration.notes,
    )
    db.add(participant)
    notify_event_registration(db, event, child)
    db.commit()
    db.refresh(participant)

    logger.info(f"Registered child {child.id} for event {event_id}")
    return _participant_response(participant)


@router.delete("/{event_id}/participants/{child_id}", status_code=status.HTTP_204_NO_CONTENT)
def cancel_registration(
    event_id: int,
    child_id: int,
    db: Session = Depends(get_db),
    caller: Caller = Depends(get_caller),
):
    participant = (
        db.query(EventParticipant)
        .options(joinedload(EventParticipant.child))
        .filter(EventParticipant.event_id == event_id, EventParticipant.child_id == child_id)
        .first()
    )
    if not participant:
        raise HTTPException(status_code=404, detail="Registration not found")
    if caller.role == Role.PARENT and participant.child.parent_id != caller.parent_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only cancel your own children's registrations",
        )
    if caller.role == Role.OTHER:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")

    db.delete(participant)
    db.commit()
