"""Pydantic schemas for invitations and attendance."""
from typing import Optional
from pydantic import BaseModel


class InviteRequest(BaseModel):
    user_id: int
    role: str  # attendee or organizer, any case


class InviteOut(BaseModel):
    message: str
    user_id: Optional[int] = None
    role: Optional[str] = None


class AttendanceRequest(BaseModel):
    status: str  # Going, Maybe, Not Going, any case


class AttendeeOut(BaseModel):
    id: int
    event_id: int
    user_id: int
    role: str
    status: str

    model_config = {"from_attributes": True}
