"""Tournament system for UpPaws competitive play."""

from .api import TournamentAPI
from .battle_integration import TournamentBattleCallback
from .brackets import (
    advancing_participants,
    all_matches_completed,
    generate_brackets,
    generate_round_robin,
    generate_single_elimination_round,
    next_single_elimination_round,
)
from .database import (
    InMemoryTournamentStore,
    SQLiteTournamentStore,
    TournamentStore,
    create_store,
)
from .manager import PrizeHandler, TournamentManager, TrainerDirectory
from .models import (
    Currency,
    LeagueDivision,
    LeagueStatus,
    MatchResult,
    MatchStatus,
    PrizeAward,
    PrizeReward,
    RewardType,
    SeasonalLeague,
    SpectatorSession,
    Tournament,
    TournamentBracket,
    TournamentCreateRequest,
    TournamentFormat,
    TournamentMatch,
    TournamentParticipant,
    TournamentPrize,
    TournamentRestriction,
    TournamentStanding,
    TournamentStatus,
    TournamentType,
    TrainerProfile,
    WeeklyTournament,
)
from .ratings import RatingCalculator, find_closest_opponent
from .scheduling import get_week_number

__all__ = [
    "TournamentAPI",
    "TournamentBattleCallback",
    "advancing_participants",
    "all_matches_completed",
    "generate_brackets",
    "generate_round_robin",
    "generate_single_elimination_round",
    "next_single_elimination_round",
    "InMemoryTournamentStore",
    "SQLiteTournamentStore",
    "TournamentStore",
    "create_store",
    "PrizeHandler",
    "TournamentManager",
    "TrainerDirectory",
    "Currency",
    "LeagueDivision",
    "LeagueStatus",
    "MatchResult",
    "MatchStatus",
    "PrizeAward",
    "PrizeReward",
    "RewardType",
    "SeasonalLeague",
    "SpectatorSession",
    "Tournament",
    "TournamentBracket",
    "TournamentCreateRequest",
    "TournamentFormat",
    "TournamentMatch",
    "TournamentParticipant",
    "TournamentPrize",
    "TournamentRestriction",
    "TournamentStanding",
    "TournamentStatus",
    "TournamentType",
    "TrainerProfile",
    "WeeklyTournament",
    "RatingCalculator",
    "find_closest_opponent",
    "get_week_number",
]
