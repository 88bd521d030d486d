"""
Match Result Finalizer: the one-shot Scheduled -> Completed transition.

record_score() locks the Match row, then its two MatchParticipant rows (always in that
order), and writes participant results, match status/winner and one GameLog row in a
single transaction. A reader sees either the untouched Scheduled match or the complete
result, never a mix.

Replays are not absorbed: a second call on a Completed match raises AlreadyCompleted,
which callers retrying with match_id as idempotency key treat as already applied.
"""
import logging
from datetime import datetime
from typing import Callable, Dict, List, Optional, Tuple

from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from tournament_admin.models.event import Event
from tournament_admin.models.game_log import GameLog
from tournament_admin.models.match import Match, MatchStatus
from tournament_admin.models.match_participant import MatchParticipant, MatchResult
from tournament_admin.models.player import Player
from tournament_admin.models.team import Team
from tournament_admin.services.errors import (
    AlreadyCompleted,
    EventNotFound,
    MatchNotFound,
    ParticipantMismatch,
    PlayerNotFound,
    TeamNotFound,
)
from tournament_admin.services.unit_of_work import locked_transaction, locking_engine, read_session

logger = logging.getLogger(__name__)

MATCH_COMPLETED_LOG = "Match Completed"


def determine_outcome(score_a: int, score_b: int) -> Tuple[MatchResult, MatchResult]:
    """(result_a, result_b) for a two-sided contest."""
    if score_a > score_b:
        return MatchResult.win, MatchResult.loss
    if score_a < score_b:
        return MatchResult.loss, MatchResult.win
    return MatchResult.draw, MatchResult.draw


def _apply_participant_result(participant: MatchParticipant, score: int, result: MatchResult) -> None:
    participant.score = score
    participant.result = result.value


def _mark_completed(match: Match, winner_id: Optional[int], completed_at: datetime) -> None:
    match.status = MatchStatus.completed.value
    match.winner_id = winner_id
    match.completed_at = completed_at


def _completion_log(match_id: int, score_a: int, score_b: int, logged_at: datetime) -> GameLog:
    return GameLog(
        match_id=match_id,
        event_type=MATCH_COMPLETED_LOG,
        description=f"Final Score: {score_a} - {score_b}",
        log_time=logged_at,
    )


class MatchResultFinalizer:
    def __init__(self, engine: Engine, clock: Callable[[], datetime] = datetime.utcnow):
        self._engine = engine
        self._locking_engine = locking_engine(engine)
        self._clock = clock

    def schedule_match(
        self,
        event_id: int,
        participant1_id: int,
        participant2_id: int,
        bracket_id: Optional[int] = None,
        round_name: Optional[str] = None,
        scheduled_at: Optional[datetime] = None,
    ) -> Match:
        """
        Create a Scheduled match with exactly two participant rows (players or teams per the event).

        Raises:
            ParticipantMismatch, EventNotFound, PlayerNotFound, TeamNotFound, TransientStoreError
        """
        if participant1_id == participant2_id:
            raise ParticipantMismatch("A match needs two distinct participants")

        with locked_transaction(self._locking_engine, "schedule_match") as session:
            event = session.get(Event, event_id)
            if event is None:
                raise EventNotFound(event_id)

            is_team = bool(event.is_team_based)
            for participant_id in (participant1_id, participant2_id):
                if is_team and session.get(Team, participant_id) is None:
                    raise TeamNotFound(participant_id)
                if not is_team and session.get(Player, participant_id) is None:
                    raise PlayerNotFound(participant_id)

            match = Match(
                event_id=event_id,
                bracket_id=bracket_id,
                round_name=round_name,
                scheduled_at=scheduled_at,
                is_team=is_team,
                status=MatchStatus.scheduled.value,
                created_at=self._clock(),
            )
            session.add(match)
            session.flush()

            for participant_id in (participant1_id, participant2_id):
                if is_team:
                    session.add(MatchParticipant(match_id=match.id, team_id=participant_id))
                else:
                    session.add(MatchParticipant(match_id=match.id, player_id=participant_id))

        logger.info(
            "Scheduled match %d for event %d: %s %d vs %d",
            match.id,
            event_id,
            "team" if is_team else "player",
            participant1_id,
            participant2_id,
        )
        return match

    def record_score(
        self,
        match_id: int,
        participant_a: int,
        score_a: int,
        participant_b: int,
        score_b: int,
        is_team: Optional[bool] = None,
    ) -> Match:
        """
        Finalize a match: scores, per-participant results, winner, one GameLog row.

        participant_a / participant_b are player ids or team ids (per Match.is_team) and may be
        given in either order relative to how the match was scheduled. winner_id stays None on
        a draw.

        Raises:
            MatchNotFound, AlreadyCompleted, ParticipantMismatch, TransientStoreError
        """
        with locked_transaction(self._locking_engine, "record_score") as session:
            match = session.exec(select(Match).where(Match.id == match_id).with_for_update()).first()
            if match is None:
                raise MatchNotFound(match_id)
            if match.status == MatchStatus.completed.value:
                raise AlreadyCompleted(f"Match {match_id} is already completed")
            if is_team is not None and bool(is_team) != bool(match.is_team):
                raise ParticipantMismatch(
                    f"Match {match_id} is a {'team' if match.is_team else 'player'} match"
                )

            by_identity = self._lock_participants(session, match_id)
            if participant_a == participant_b or set(by_identity) != {participant_a, participant_b}:
                raise ParticipantMismatch(
                    f"Participants {participant_a}, {participant_b} do not match those recorded "
                    f"for match {match_id}: {sorted(by_identity)}"
                )

            result_a, result_b = determine_outcome(score_a, score_b)
            _apply_participant_result(by_identity[participant_a], score_a, result_a)
            _apply_participant_result(by_identity[participant_b], score_b, result_b)
            session.add_all(by_identity.values())
            session.flush()

            winner_id = None
            if result_a == MatchResult.win:
                winner_id = participant_a
            elif result_b == MatchResult.win:
                winner_id = participant_b

            completed_at = self._clock()
            _mark_completed(match, winner_id, completed_at)
            session.add(match)
            session.add(_completion_log(match_id, score_a, score_b, completed_at))

        logger.info(
            "Match %d completed %d-%d (winner=%s)",
            match_id,
            score_a,
            score_b,
            winner_id,
        )
        return match

    def _lock_participants(self, session: Session, match_id: int) -> Dict[int, MatchParticipant]:
        rows = session.exec(
            select(MatchParticipant)
            .where(MatchParticipant.match_id == match_id)
            .order_by(MatchParticipant.id)
            .with_for_update()
        ).all()
        return {row.participant_id: row for row in rows}

    def get_match(self, match_id: int) -> Match:
        with read_session(self._engine, "get_match") as session:
            match = session.get(Match, match_id)
            if match is None:
                raise MatchNotFound(match_id)
            return match

    def list_participants(self, match_id: int) -> List[MatchParticipant]:
        with read_session(self._engine, "list_participants") as session:
            if session.get(Match, match_id) is None:
                raise MatchNotFound(match_id)
            return list(
                session.exec(
                    select(MatchParticipant).where(MatchParticipant.match_id == match_id).order_by(MatchParticipant.id)
                ).all()
            )

    def list_game_logs(self, match_id: int) -> List[GameLog]:
        with read_session(self._engine, "list_game_logs") as session:
            if session.get(Match, match_id) is None:
                raise MatchNotFound(match_id)
            return list(
                session.exec(
                    select(GameLog).where(GameLog.match_id == match_id).order_by(GameLog.log_time, GameLog.id)
                ).all()
            )
