from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import DateTime, String
from sqlmodel import Column, Field, Relationship, SQLModel

if TYPE_CHECKING:
    from tournament_admin.models.event import Event
    from tournament_admin.models.game_log import GameLog
    from tournament_admin.models.match_participant import MatchParticipant


class MatchStatus(str, Enum):
    scheduled = "Scheduled"
    completed = "Completed"  # terminal


class Match(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    event_id: int = Field(foreign_key="event.id", index=True)
    bracket_id: Optional[int] = Field(default=None)  # opaque; brackets are computed elsewhere
    round_name: Optional[str] = Field(default=None)
    scheduled_at: Optional[datetime] = Field(default=None, sa_type=DateTime)

    # Copied from Event.is_team_based when the match is scheduled
    is_team: bool = Field(default=False)

    status: MatchStatus = Field(
        default=MatchStatus.scheduled.value, sa_column=Column(String, nullable=False, default=MatchStatus.scheduled.value)
    )
    # Player id or team id (per is_team) of the winning side; null until completed or on a draw
    winner_id: Optional[int] = Field(default=None)
    completed_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
    created_at: datetime = Field(default_factory=datetime.utcnow, sa_type=DateTime)

    # Relationships
    event: "Event" = Relationship(back_populates="matches")
    participants: List["MatchParticipant"] = Relationship(back_populates="match")
    game_logs: List["GameLog"] = Relationship(back_populates="match")
