"""Event lifecycle service.

Responsibilities:
- Event creation with date validation (future-only, RFC3339 or YYYY-MM-DD)
- Best-effort organizer attendance row after creation
- Organized / invited listings ordered by date
- Transactional deletion of an event with its attendees and tasks
"""
import logging
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from app.errors import InternalError, NotFound, ValidationError
from app.models.attendee import EventAttendee, AttendeeRole, RSVPStatus
from app.models.event import Event, Task
from app.services import policies
from app.services.dates import parse_date, to_utc, utc_now

logger = logging.getLogger(__name__)


def get_event_or_404(db: Session, event_id: int) -> Event:
    event = db.query(Event).filter(Event.id == event_id).first()
    if not event:
        raise NotFound("event not found")
    return event


def _ensure_organizer_attendance(db: Session, event: Event, organizer_id: int) -> Optional[EventAttendee]:
    """Get-or-create the organizer's attendee row.

    Runs after the event is committed. A store failure here is rolled back and
    logged; the event itself stays created.
    """
    try:
        row = (
            db.query(EventAttendee)
            .filter(EventAttendee.event_id == event.id, EventAttendee.user_id == organizer_id)
            .first()
        )
        if row is None:
            row = EventAttendee(
                event_id=event.id,
                user_id=organizer_id,
                role=AttendeeRole.organizer.value,
                status=RSVPStatus.unset.value,
            )
            db.add(row)
            db.commit()
        return row
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("Could not record organizer %s on event %s: %s", organizer_id, event.id, exc)
        return None


def create_event(
    db: Session,
    caller_id: int,
    title: str,
    description: str,
    location: str,
    date: str,
) -> Event:
    """Create an event owned by ``caller_id``; the date must lie in the future."""
    title = (title or "").strip()
    if not title:
        raise ValidationError("invalid request: title is required")
    if not date:
        raise ValidationError("invalid request: date is required")

    try:
        event_date = parse_date(date)
    except ValueError:
        raise ValidationError("invalid date format (use RFC3339 or YYYY-MM-DD)")
    if not event_date > utc_now():
        raise ValidationError("event date must be in the future")

    event = Event(
        title=title,
        description=description or "",
        location=location or "",
        date=to_utc(event_date),
        organizer_id=caller_id,
    )
    try:
        db.add(event)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise InternalError(f"could not create event: {exc}")
    db.refresh(event)
    logger.info("Created event '%s' (%s) by organizer %s", title, event.id, caller_id)

    _ensure_organizer_attendance(db, event, caller_id)
    return event


def list_organized_events(db: Session, caller_id: int) -> list[Event]:
    """Events the caller owns or co-organizes through an organizer attendee row."""
    delegated = select(EventAttendee.event_id).where(
        EventAttendee.user_id == caller_id,
        EventAttendee.role == AttendeeRole.organizer.value,
    )
    return (
        db.query(Event)
        .options(selectinload(Event.tasks))
        .filter(or_(Event.organizer_id == caller_id, Event.id.in_(delegated)))
        .order_by(Event.date.asc(), Event.id.asc())
        .all()
    )


def list_invited_events(db: Session, caller_id: int) -> list[Event]:
    """Events where the caller holds any attendee row, as attendee or organizer."""
    event_ids = [
        row.event_id
        for row in db.query(EventAttendee)
        .filter(
            EventAttendee.user_id == caller_id,
            EventAttendee.role.in_([AttendeeRole.attendee.value, AttendeeRole.organizer.value]),
        )
        .all()
    ]
    if not event_ids:
        return []
    return (
        db.query(Event)
        .options(selectinload(Event.tasks))
        .filter(Event.id.in_(event_ids))
        .order_by(Event.date.asc(), Event.id.asc())
        .all()
    )


def delete_event(db: Session, caller_id: int, event_id: int) -> None:
    """Delete an event with its attendees and tasks in one transaction (owner only)."""
    event = get_event_or_404(db, event_id)
    policies.require_strict_owner(event, caller_id, "only organizer can delete the event")

    try:
        db.query(EventAttendee).filter(EventAttendee.event_id == event.id).delete(synchronize_session=False)
        db.query(Task).filter(Task.event_id == event.id).delete(synchronize_session=False)
        db.query(Event).filter(Event.id == event.id).delete(synchronize_session=False)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Delete of event %s rolled back: %s", event_id, exc)
        raise InternalError(f"delete failed: {exc}")
    logger.info("Deleted event %s by organizer %s", event_id, caller_id)
