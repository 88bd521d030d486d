from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, DateTime, Index, String, text
from sqlmodel import Column, Field, Relationship, SQLModel

if TYPE_CHECKING:
    from tournament_admin.models.event import Event

_ACTIVE = "status != 'Cancelled'"


class RegistrationStatus(str, Enum):
    confirmed = "Confirmed"
    waitlisted = "Waitlisted"
    cancelled = "Cancelled"


class Registration(SQLModel, table=True):
    __table_args__ = (
        # Exactly one of player_id / team_id
        CheckConstraint("(player_id IS NULL) <> (team_id IS NULL)", name="ck_registration_one_participant"),
        # At most one non-cancelled registration per (event, participant)
        Index(
            "uq_registration_active_player",
            "event_id",
            "player_id",
            unique=True,
            sqlite_where=text(_ACTIVE),
            postgresql_where=text(_ACTIVE),
        ),
        Index(
            "uq_registration_active_team",
            "event_id",
            "team_id",
            unique=True,
            sqlite_where=text(_ACTIVE),
            postgresql_where=text(_ACTIVE),
        ),
        Index("ix_registration_event_status_fifo", "event_id", "status", "registration_date", "id"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    event_id: int = Field(foreign_key="event.id")
    player_id: Optional[int] = Field(default=None, foreign_key="player.id")
    team_id: Optional[int] = Field(default=None, foreign_key="team.id")

    status: RegistrationStatus = Field(sa_column=Column(String, nullable=False))
    payment_status: str = Field(default="Pending")  # passthrough: Pending | Paid | Refunded

    # FIFO key for waitlist promotion (ties broken by id)
    registration_date: datetime = Field(default_factory=datetime.utcnow, sa_type=DateTime)
    updated_at: datetime = Field(
        default_factory=datetime.utcnow, sa_type=DateTime, sa_column_kwargs={"onupdate": datetime.utcnow}
    )

    # Relationships
    event: "Event" = Relationship(back_populates="registrations")
