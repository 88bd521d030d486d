from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import CheckConstraint, DateTime, String
from sqlmodel import Column, Field, Relationship, SQLModel

if TYPE_CHECKING:
    from tournament_admin.models.match import Match
    from tournament_admin.models.registration import Registration


class EventStatus(str, Enum):
    upcoming = "Upcoming"
    ongoing = "Ongoing"
    completed = "Completed"
    cancelled = "Cancelled"


class Event(SQLModel, table=True):
    __table_args__ = (CheckConstraint("max_participants >= 2", name="ck_event_min_capacity"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    event_name: str
    sport_type: str
    format: Optional[str] = None  # "knockout" | "round_robin" | "league" (informational)
    start_date: date
    end_date: date

    # Capacity and deadline are fixed at creation; EventUpdate never touches them
    registration_deadline: datetime = Field(sa_type=DateTime)  # naive UTC
    max_participants: int
    is_team_based: bool = Field(default=False)

    event_status: EventStatus = Field(
        default=EventStatus.upcoming.value, sa_column=Column(String, nullable=False, default=EventStatus.upcoming.value)
    )
    created_at: datetime = Field(default_factory=datetime.utcnow, sa_type=DateTime)

    # Relationships
    registrations: List["Registration"] = Relationship(back_populates="event")
    matches: List["Match"] = Relationship(back_populates="event")
