"""Invitation and attendance service."""
import logging
from typing import Any

from sqlalchemy.orm import Session

from app.errors import NotFound, ValidationError
from app.models.attendee import EventAttendee, AttendeeRole, RSVPStatus
from app.models.user import User
from app.services import policies
from app.services.event_service import get_event_or_404

logger = logging.getLogger(__name__)

INVITE_ROLES = (AttendeeRole.attendee.value, AttendeeRole.organizer.value)
ATTENDANCE_STATUSES = (RSVPStatus.going.value, RSVPStatus.maybe.value, RSVPStatus.not_going.value)


def normalize_status(raw: str) -> str:
    """Trim, lower-case, then capitalize each word: "  not going " -> "Not Going".

    Raises ValidationError unless the result is one of the RSVP statuses.
    """
    normalized = (raw or "").strip().lower().title()
    if normalized not in ATTENDANCE_STATUSES:
        raise ValidationError("status must be one of: Going, Maybe, Not Going")
    return normalized


def _find_attendance(db: Session, event_id: int, user_id: int):
    return (
        db.query(EventAttendee)
        .filter(EventAttendee.event_id == event_id, EventAttendee.user_id == user_id)
        .first()
    )


def invite_user(db: Session, caller_id: int, event_id: int, invitee_id: int, role: str) -> dict[str, Any]:
    """Invite ``invitee_id`` to an event; inviting an existing participant is a no-op."""
    role = (role or "").lower()
    if role not in INVITE_ROLES:
        raise ValidationError("role must be attendee or organizer")

    event = get_event_or_404(db, event_id)
    policies.require_owner_or_delegate(db, event, caller_id, "only organizers can invite")

    invitee = db.query(User).filter(User.id == invitee_id).first()
    if not invitee:
        raise NotFound("invited user not found")

    if _find_attendance(db, event.id, invitee.id) is not None:
        return {"message": "user already a participant"}

    attendee = EventAttendee(
        event_id=event.id,
        user_id=invitee.id,
        role=role,
        status=RSVPStatus.unset.value,
    )
    db.add(attendee)
    db.commit()
    logger.info("User %s invited user %s to event %s as %s", caller_id, invitee.id, event.id, role)
    return {"message": "User invited successfully", "user_id": invitee.id, "role": role}


def set_attendance(db: Session, caller_id: int, event_id: int, status: str) -> EventAttendee:
    """Record the caller's RSVP, registering them as an attendee if needed."""
    normalized = normalize_status(status)
    event = get_event_or_404(db, event_id)

    attendee = _find_attendance(db, event.id, caller_id)
    if attendee is None:
        attendee = EventAttendee(
            event_id=event.id,
            user_id=caller_id,
            role=AttendeeRole.attendee.value,
            status=normalized,
        )
        db.add(attendee)
    else:
        attendee.status = normalized
    db.commit()
    db.refresh(attendee)
    logger.info("User %s set attendance '%s' on event %s", caller_id, normalized, event.id)
    return attendee


def list_attendees(db: Session, caller_id: int, event_id: int) -> list[EventAttendee]:
    event = get_event_or_404(db, event_id)
    policies.require_strict_owner(event, caller_id, "only organizer can view attendees")
    return db.query(EventAttendee).filter(EventAttendee.event_id == event.id).all()
