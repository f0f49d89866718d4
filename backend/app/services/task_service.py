"""Task service: tasks are scoped to a single event."""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.errors import ValidationError
from app.models.event import Task
from app.services import policies
from app.services.event_service import get_event_or_404

logger = logging.getLogger(__name__)


def create_task(db: Session, caller_id: int, event_id: int, title: str, description: str) -> Task:
    """Add a task to an event. Only the event's owner may do this."""
    event = get_event_or_404(db, event_id)
    policies.require_strict_owner(event, caller_id, "only organizer can create tasks")

    title = (title or "").strip()
    if not title:
        raise ValidationError("invalid body: title is required")

    task = Task(event_id=event.id, title=title, description=description or "")
    db.add(task)
    db.commit()
    db.refresh(task)
    logger.info("Created task '%s' (%s) on event %s", title, task.id, event.id)
    return task


def list_tasks(db: Session, event_id: int, caller_id: Optional[int] = None) -> list[Task]:
    policies.check_task_listing(db, event_id, caller_id)
    return db.query(Task).filter(Task.event_id == event_id).order_by(Task.id).all()
