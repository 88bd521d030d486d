from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from tournament_admin.models.match import Match


class GameLog(SQLModel, table=True):
    """Append-only audit row. Inserted on match completion, never updated or deleted."""

    __tablename__ = "gamelog"

    id: Optional[int] = Field(default=None, primary_key=True)
    match_id: int = Field(foreign_key="match.id", index=True)
    event_type: str  # "Match Completed"
    description: str
    player_id: Optional[int] = Field(default=None, foreign_key="player.id")
    log_time: datetime = Field(default_factory=datetime.utcnow, sa_type=DateTime)

    # Relationships
    match: "Match" = Relationship(back_populates="game_logs")
