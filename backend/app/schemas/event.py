"""Pydantic schemas for Events and Tasks."""
from __future__ import annotations
from datetime import datetime
from typing import Optional
from pydantic import BaseModel


class EventCreate(BaseModel):
    title: str = ""
    description: str = ""
    location: str = ""
    date: str = ""  # RFC3339 or YYYY-MM-DD


class EventOut(BaseModel):
    id: int
    title: str
    description: str
    location: str
    date: datetime
    organizer_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    tasks: list[TaskOut] = []

    model_config = {"from_attributes": True}


class TaskCreate(BaseModel):
    title: str = ""
    description: str = ""


class TaskOut(BaseModel):
    id: int
    event_id: int
    title: str
    description: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class MessageOut(BaseModel):
    message: str


# Rebuild EventOut now that TaskOut is defined
EventOut.model_rebuild()
