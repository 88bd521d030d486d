"""
Match API Routes
Scheduling a two-sided match and recording its final score. Score entry goes through
MatchResultFinalizer so participant results, match status and the game log commit together.
"""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, field_validator

from tournament_admin.dependencies import get_match_finalizer
from tournament_admin.models.match import MatchStatus
from tournament_admin.models.match_participant import MatchResult
from tournament_admin.services.match_finalizer import MatchResultFinalizer
from tournament_admin.utils.http_errors import core_errors_as_http

router = APIRouter()


class MatchCreate(BaseModel):
    event_id: int
    participant1_id: int
    participant2_id: int
    bracket_id: Optional[int] = None
    round_name: Optional[str] = None
    scheduled_at: Optional[datetime] = None


class MatchScoreUpdate(BaseModel):
    participant1_id: int
    participant1_score: int
    participant2_id: int
    participant2_score: int
    is_team: Optional[bool] = None

    @field_validator("participant1_score", "participant2_score")
    @classmethod
    def validate_score(cls, v):
        if v < 0:
            raise ValueError("score must be >= 0")
        return v


class MatchResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    event_id: int
    bracket_id: Optional[int] = None
    round_name: Optional[str] = None
    scheduled_at: Optional[datetime] = None
    is_team: bool
    status: MatchStatus
    winner_id: Optional[int] = None
    completed_at: Optional[datetime] = None


class MatchParticipantResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    match_id: int
    player_id: Optional[int] = None
    team_id: Optional[int] = None
    score: Optional[int] = None
    result: Optional[MatchResult] = None


class GameLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    match_id: int
    event_type: str
    description: str
    player_id: Optional[int] = None
    log_time: datetime


@router.post("/matches", response_model=MatchResponse, status_code=201)
def schedule_match(payload: MatchCreate, finalizer: MatchResultFinalizer = Depends(get_match_finalizer)):
    """Schedule a match between two players or two teams (per the event)"""
    with core_errors_as_http():
        return finalizer.schedule_match(
            event_id=payload.event_id,
            participant1_id=payload.participant1_id,
            participant2_id=payload.participant2_id,
            bracket_id=payload.bracket_id,
            round_name=payload.round_name,
            scheduled_at=payload.scheduled_at,
        )


@router.put("/matches/{match_id}/score", response_model=MatchResponse)
def update_match_score(
    match_id: int,
    payload: MatchScoreUpdate,
    finalizer: MatchResultFinalizer = Depends(get_match_finalizer),
):
    """Record the final score. Completed is terminal; a second call returns 409."""
    with core_errors_as_http():
        return finalizer.record_score(
            match_id,
            payload.participant1_id,
            payload.participant1_score,
            payload.participant2_id,
            payload.participant2_score,
            is_team=payload.is_team,
        )


@router.get("/matches/{match_id}", response_model=MatchResponse)
def get_match(match_id: int, finalizer: MatchResultFinalizer = Depends(get_match_finalizer)):
    with core_errors_as_http():
        return finalizer.get_match(match_id)


@router.get("/matches/{match_id}/participants", response_model=List[MatchParticipantResponse])
def get_match_participants(match_id: int, finalizer: MatchResultFinalizer = Depends(get_match_finalizer)):
    with core_errors_as_http():
        return finalizer.list_participants(match_id)


@router.get("/matches/{match_id}/logs", response_model=List[GameLogResponse])
def get_match_logs(match_id: int, finalizer: MatchResultFinalizer = Depends(get_match_finalizer)):
    """Game log entries in chronological order"""
    with core_errors_as_http():
        return finalizer.list_game_logs(match_id)
