"""Invitation / RSVP API routes, nested under an event."""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.auth import get_current_user_id
from app.database import get_db
from app.schemas.attendee import AttendanceRequest, AttendeeOut, InviteOut, InviteRequest
from app.services import attendance_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/{event_id}/invite", response_model=InviteOut, response_model_exclude_none=True)
def invite_user(
    event_id: int,
    payload: InviteRequest,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Invite a user as attendee or organizer. Re-inviting a participant is a no-op."""
    return attendance_service.invite_user(db, user_id, event_id, payload.user_id, payload.role)


@router.post("/{event_id}/attendance", response_model=AttendeeOut)
def set_attendance(
    event_id: int,
    payload: AttendanceRequest,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Set or update the caller's RSVP status for an event."""
    return attendance_service.set_attendance(db, user_id, event_id, payload.status)


@router.get("/{event_id}/attendees", response_model=list[AttendeeOut])
def list_attendees(event_id: int, user_id: int = Depends(get_current_user_id), db: Session = Depends(get_db)):
    """List everyone attached to an event (organizer only)."""
    return attendance_service.list_attendees(db, user_id, event_id)
