"""Federated keyword / date / role search over events and tasks.

Results are a flat list: every matching event first (by event date), then
every matching task (by its parent event's date). The two groups are not
interleaved.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session, selectinload

from app.errors import ValidationError
from app.models.attendee import EventAttendee, AttendeeRole
from app.models.event import Event, Task
from app.schemas.event import EventOut, TaskOut
from app.schemas.search import EventHit, SearchHit, SearchRequest, TaskHit
from app.services.dates import end_of_day, parse_date, to_utc

logger = logging.getLogger(__name__)

SEARCH_ROLES = ("", AttendeeRole.organizer.value, AttendeeRole.attendee.value)


@dataclass
class SearchCriteria:
    keyword: str
    start: Optional[datetime]
    end: Optional[datetime]
    role: str
    type: str

    @property
    def pattern(self) -> str:
        return f"%{self.keyword}%"

    def includes(self, kind: str) -> bool:
        return self.type in (kind, "both")


def build_criteria(request: SearchRequest) -> SearchCriteria:
    """Validate raw search input and normalize its date bounds to UTC."""
    # An unknown type matches neither group and yields an empty result
    search_type = request.type or "both"

    start = end = None
    if request.start_date:
        try:
            start = to_utc(parse_date(request.start_date))
        except ValueError:
            raise ValidationError("invalid start_date format")
    if request.end_date:
        try:
            end = to_utc(end_of_day(parse_date(request.end_date)))
        except ValueError:
            raise ValidationError("invalid end_date format")

    if request.role not in SEARCH_ROLES:
        raise ValidationError("role must be 'organizer' or 'attendee'")

    return SearchCriteria(
        keyword=request.keyword.strip(),
        start=start,
        end=end,
        role=request.role,
        type=search_type,
    )


def _filter_by_event(query: Query, criteria: SearchCriteria, caller_id: int) -> Query:
    """Date and role filters, applied to the Event entity already in ``query``."""
    if criteria.start is not None:
        query = query.filter(Event.date >= criteria.start)
    if criteria.end is not None:
        query = query.filter(Event.date <= criteria.end)

    if criteria.role == AttendeeRole.organizer.value:
        query = query.filter(Event.organizer_id == caller_id)
    elif criteria.role == AttendeeRole.attendee.value:
        # Only attendee-role rows count here, organizer rows do not
        query = query.join(EventAttendee, EventAttendee.event_id == Event.id).filter(
            EventAttendee.user_id == caller_id,
            EventAttendee.role == AttendeeRole.attendee.value,
        )
    return query


def search_events(db: Session, criteria: SearchCriteria, caller_id: int) -> list[Event]:
    query = db.query(Event).options(selectinload(Event.tasks))
    if criteria.keyword:
        query = query.filter(or_(
            Event.title.ilike(criteria.pattern),
            Event.description.ilike(criteria.pattern),
        ))
    query = _filter_by_event(query, criteria, caller_id)
    return query.order_by(Event.date.asc(), Event.id.asc()).all()


def search_tasks(db: Session, criteria: SearchCriteria, caller_id: int) -> list[Task]:
    """Tasks matching on their own text or their parent event's text."""
    query = db.query(Task).join(Event, Event.id == Task.event_id)
    if criteria.keyword:
        query = query.filter(or_(
            Task.title.ilike(criteria.pattern),
            Task.description.ilike(criteria.pattern),
            Event.title.ilike(criteria.pattern),
            Event.description.ilike(criteria.pattern),
        ))
    query = _filter_by_event(query, criteria, caller_id)
    return query.order_by(Event.date.asc(), Task.id.asc()).all()


def _parent_event(db: Session, task: Task) -> Optional[Event]:
    try:
        return db.query(Event).filter(Event.id == task.event_id).first()
    except SQLAlchemyError as exc:
        logger.warning("Dropping task %s from search results: %s", task.id, exc)
        return None


def search(db: Session, caller_id: int, request: SearchRequest) -> list[SearchHit]:
    criteria = build_criteria(request)
    results: list[SearchHit] = []

    if criteria.includes("event"):
        for event in search_events(db, criteria, caller_id):
            results.append(EventHit(event=EventOut.model_validate(event)))

    if criteria.includes("task"):
        for task in search_tasks(db, criteria, caller_id):
            event = _parent_event(db, task)
            if event is None:
                continue
            results.append(TaskHit(task=TaskOut.model_validate(task), event=EventOut.model_validate(event)))

    logger.info(
        "Search by user %s (type=%s, role=%s, keyword=%r) returned %d results",
        caller_id, criteria.type, criteria.role or "any", criteria.keyword, len(results),
    )
    return results
