# Force SQLModel table registration at test discovery time
# This ensures all models are registered before any test database creation
from tournament_admin.models.event import Event  # noqa: F401
from tournament_admin.models.game_log import GameLog  # noqa: F401
from tournament_admin.models.match import Match  # noqa: F401
from tournament_admin.models.match_participant import MatchParticipant  # noqa: F401
from tournament_admin.models.player import Player  # noqa: F401
from tournament_admin.models.registration import Registration  # noqa: F401
from tournament_admin.models.team import Team  # noqa: F401
