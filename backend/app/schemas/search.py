"""Pydantic schemas for the federated search endpoint."""
from typing import Literal, Union
from pydantic import BaseModel

from app.schemas.event import EventOut, TaskOut


class SearchRequest(BaseModel):
    keyword: str = ""
    start_date: str = ""
    end_date: str = ""
    role: str = ""   # "", organizer, attendee
    type: str = ""   # event, task, both (empty means both)


class EventHit(BaseModel):
    type: Literal["event"] = "event"
    event: EventOut


class TaskHit(BaseModel):
    type: Literal["task"] = "task"
    task: TaskOut
    event: EventOut


SearchHit = Union[EventHit, TaskHit]
