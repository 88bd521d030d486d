from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


class Team(SQLModel, table=True):
    """Team referenced by team-based registrations and matches (roster is managed elsewhere)."""

    id: Optional[int] = Field(default=None, primary_key=True)
    team_name: str = Field(index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow, sa_type=DateTime)
