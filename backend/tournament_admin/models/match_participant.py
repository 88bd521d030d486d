from enum import Enum
from typing import TYPE_CHECKING, Optional

from sqlalchemy import CheckConstraint, String
from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Column, Field, Relationship, SQLModel

if TYPE_CHECKING:
    from tournament_admin.models.match import Match


class MatchResult(str, Enum):
    win = "Win"
    loss = "Loss"
    draw = "Draw"


class MatchParticipant(SQLModel, table=True):
    __table_args__ = (
        CheckConstraint("(player_id IS NULL) <> (team_id IS NULL)", name="ck_match_participant_one_side"),
        SAUniqueConstraint("match_id", "player_id", name="uq_match_participant_player"),
        SAUniqueConstraint("match_id", "team_id", name="uq_match_participant_team"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    match_id: int = Field(foreign_key="match.id", index=True)
    player_id: Optional[int] = Field(default=None, foreign_key="player.id")
    team_id: Optional[int] = Field(default=None, foreign_key="team.id")

    score: Optional[int] = Field(default=None)
    result: Optional[MatchResult] = Field(default=None, sa_column=Column(String, nullable=True))

    # Relationships
    match: "Match" = Relationship(back_populates="participants")

    @property
    def participant_id(self) -> int:
        return self.team_id if self.team_id is not None else self.player_id
