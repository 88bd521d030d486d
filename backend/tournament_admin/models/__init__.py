from tournament_admin.models.event import Event, EventStatus
from tournament_admin.models.game_log import GameLog
from tournament_admin.models.match import Match, MatchStatus
from tournament_admin.models.match_participant import MatchParticipant, MatchResult
from tournament_admin.models.player import Player
from tournament_admin.models.registration import Registration, RegistrationStatus
from tournament_admin.models.team import Team

__all__ = [
    "Event",
    "EventStatus",
    "GameLog",
    "Match",
    "MatchStatus",
    "MatchParticipant",
    "MatchResult",
    "Player",
    "Registration",
    "RegistrationStatus",
    "Team",
]
