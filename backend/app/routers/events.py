"""Event API routes — delegates to event_service for validation and ownership checks."""
import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.auth import get_current_user_id
from app.database import get_db
from app.schemas.event import EventCreate, EventOut, MessageOut
from app.services import event_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/", response_model=EventOut, status_code=status.HTTP_201_CREATED)
def create_event(
    payload: EventCreate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Create an event organized by the caller. The date must be in the future."""
    return event_service.create_event(
        db=db,
        caller_id=user_id,
        title=payload.title,
        description=payload.description,
        location=payload.location,
        date=payload.date,
    )


@router.get("/organized", response_model=list[EventOut])
def list_organized_events(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """Events the caller owns or co-organizes, soonest first."""
    return event_service.list_organized_events(db, user_id)


@router.get("/invited", response_model=list[EventOut])
def list_invited_events(user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """Events the caller takes part in, soonest first."""
    return event_service.list_invited_events(db, user_id)


@router.delete("/{event_id}", response_model=MessageOut)
def delete_event(event_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """Delete an event with its tasks and attendees (organizer only)."""
    event_service.delete_event(db, user_id, event_id)
    return {"message": "event deleted"}
