"""EventAttendee ORM model: the join between users and the events they take part in.

(event_id, user_id) is unique by convention. The services look a row up
before inserting one instead of relying on a database constraint.
"""
import enum
from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from app.database import Base


class AttendeeRole(str, enum.Enum):
    organizer = "organizer"
    attendee = "attendee"


class RSVPStatus(str, enum.Enum):
    unset = ""
    going = "Going"
    maybe = "Maybe"
    not_going = "Not Going"


class EventAttendee(Base):
    __tablename__ = "event_attendees"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    role = Column(String(20), nullable=False, default=AttendeeRole.attendee.value)
    status = Column(String(20), nullable=False, default=RSVPStatus.unset.value)

    event = relationship("Event", back_populates="attendees")
