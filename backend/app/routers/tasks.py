"""Task API routes, nested under an event."""
import logging
from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.auth import get_current_user_id, get_optional_user_id
from app.database import get_db
from app.schemas.event import TaskCreate, TaskOut
from app.services import task_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/{event_id}/tasks", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
def create_task(
    event_id: int,
    payload: TaskCreate,
    user_id: int = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Add a task to an event (organizer only)."""
    return task_service.create_task(db, user_id, event_id, payload.title, payload.description)


@router.get("/{event_id}/tasks", response_model=list[TaskOut])
def list_tasks(
    event_id: int,
    user_id: Optional[int] = Depends(get_optional_user_id),
    db: Session = Depends(get_db),
):
    """List an event's tasks. Access follows the task listing policy."""
    return task_service.list_tasks(db, event_id, caller_id=user_id)
