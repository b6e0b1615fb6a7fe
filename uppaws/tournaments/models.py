"""Tournament system data models."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class TournamentType(Enum):
    """What players compete at."""

    BATTLE = "battle"
    PUZZLE_SPEED = "puzzle_speed"
    COLLECTION_SHOWCASE = "collection_showcase"
    TRIVIA = "trivia"


class TournamentFormat(Enum):
    """Bracket layout used when a tournament starts."""

    SINGLE_ELIMINATION = "single_elimination"
    ROUND_ROBIN = "round_robin"


class TournamentStatus(Enum):
    """Tournament lifecycle status."""

    REGISTRATION = "registration"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class MatchStatus(Enum):
    """Individual match status."""

    SCHEDULED = "scheduled"
    COMPLETED = "completed"


class LeagueStatus(Enum):
    """Seasonal league status."""

    REGISTRATION = "registration"
    ACTIVE = "active"
    PLAYOFFS = "playoffs"
    COMPLETED = "completed"


class RestrictionType(Enum):
    """Kinds of team restrictions a weekly tournament can impose."""

    LEVEL = "level"
    HABITAT = "habitat"
    RARITY = "rarity"
    EVOLUTION_STAGE = "evolution_stage"


class RewardType(Enum):
    """Prize reward kinds handed to the economy."""

    CURRENCY = "currency"
    ITEM = "item"
    BADGE = "badge"
    TITLE = "title"


class Currency(BaseModel):
    """In-game wallet amounts."""

    paw_coins: int = 0
    research_points: int = 0
    battle_tokens: int = 0

    def covers(self, cost: "Currency") -> bool:
        """True if every balance is at least the matching cost."""
        return (
            self.paw_coins >= cost.paw_coins
            and self.research_points >= cost.research_points
            and self.battle_tokens >= cost.battle_tokens
        )


class PrizeReward(BaseModel):
    """A single reward inside a prize."""

    type: RewardType
    currency: Currency | None = None
    item_id: str | None = None
    description: str | None = None


class TournamentPrize(BaseModel):
    """Rewards for finishing at a given position."""

    position: int = Field(..., ge=1, description="1-based finishing position")
    rewards: list[PrizeReward] = Field(default_factory=list)


class TournamentRule(BaseModel):
    """Free-text rule shown to participants."""

    id: str
    description: str
    category: str = "general"


class TournamentParticipant(BaseModel):
    """A trainer's enrollment in one tournament."""

    trainer_id: str
    username: str = ""
    registered_at: datetime
    seed: int | None = None
    current_round: int = 0
    wins: int = 0
    losses: int = 0
    eliminated: bool = False


class TournamentMatch(BaseModel):
    """Individual tournament match."""

    id: str
    participant1_id: str
    participant2_id: str
    winner_id: str | None = None  # None until the match is reported
    score: str | None = None
    duration: float | None = None  # seconds
    replay: str | None = None
    scheduled_at: datetime | None = None
    completed_at: datetime | None = None
    status: MatchStatus = MatchStatus.SCHEDULED


class TournamentBracket(BaseModel):
    """One round of a tournament."""

    round: int
    matches: list[TournamentMatch] = Field(default_factory=list)
    byes: list[str] = Field(
        default_factory=list, description="Trainer ids advanced without a match"
    )


class PrizeAward(BaseModel):
    """Who gets which prize once a tournament completes."""

    tournament_id: str
    trainer_id: str
    rank: int
    prize: TournamentPrize


class Tournament(BaseModel):
    """Complete tournament information."""

    id: str
    name: str
    description: str = ""
    type: TournamentType = TournamentType.BATTLE
    format: TournamentFormat = TournamentFormat.SINGLE_ELIMINATION
    scope: str = "global"
    subreddit_id: str | None = None
    status: TournamentStatus = TournamentStatus.REGISTRATION
    start_date: datetime
    end_date: datetime
    registration_deadline: datetime
    max_participants: int
    entry_fee: Currency | None = None
    prize_pool: list[TournamentPrize] = Field(default_factory=list)
    participants: list[TournamentParticipant] = Field(default_factory=list)
    brackets: list[TournamentBracket] = Field(default_factory=list)
    rules: list[TournamentRule] = Field(default_factory=list)
    created_by: str = "system"
    created_at: datetime | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
    winner_id: str | None = None
    awards: list[PrizeAward] = Field(default_factory=list)

    def get_participant(self, trainer_id: str) -> TournamentParticipant | None:
        for participant in self.participants:
            if participant.trainer_id == trainer_id:
                return participant
        return None

    def find_match(self, match_id: str) -> TournamentMatch | None:
        for bracket in self.brackets:
            for match in bracket.matches:
                if match.id == match_id:
                    return match
        return None

    def match_ids(self) -> list[str]:
        return [match.id for bracket in self.brackets for match in bracket.matches]


class TournamentCreateRequest(BaseModel):
    """Request to create a new tournament."""

    name: str = Field(..., description="Tournament name")
    description: str = Field(default="", description="Shown on the tournament card")
    type: TournamentType = Field(default=TournamentType.BATTLE)
    format: TournamentFormat = Field(default=TournamentFormat.SINGLE_ELIMINATION)
    max_participants: int = Field(..., ge=1, description="Registration capacity")
    entry_fee: Currency | None = Field(default=None, description="Cost to enter")
    prize_pool: list[TournamentPrize] = Field(default_factory=list)
    start_date: datetime
    end_date: datetime
    registration_deadline: datetime
    rules: list[str] = Field(default_factory=list)
    subreddit_id: str | None = Field(
        default=None, description="Restrict the tournament to one subreddit"
    )
    created_by: str = Field(default="system")


class MatchResult(BaseModel):
    """Result of a completed match, as reported by the battle system."""

    winner_id: str
    loser_id: str
    score: str = ""
    duration: float = 0
    replay: str | None = None


class TournamentStanding(BaseModel):
    """One row of a tournament leaderboard."""

    rank: int
    participant: TournamentParticipant
    points: int
    wins: int
    losses: int
    win_rate: float


class TournamentRestriction(BaseModel):
    """Team restriction for a themed weekly tournament."""

    type: RestrictionType
    value: Any
    description: str


class WeeklyTournament(Tournament):
    """Recurring themed tournament keyed by (year, week)."""

    week: int
    year: int
    theme: str
    restrictions: list[TournamentRestriction] = Field(default_factory=list)


class LeagueDivision(BaseModel):
    """A tier of a seasonal league."""

    id: str
    name: str
    tier: int
    participants: list[str] = Field(default_factory=list)
    promotion_spots: int
    relegation_spots: int


class LeagueMatch(BaseModel):
    """Scheduled league fixture."""

    id: str
    week: int
    participant1_id: str
    participant2_id: str
    scheduled_at: datetime
    result: MatchResult | None = None
    status: MatchStatus = MatchStatus.SCHEDULED


class LeagueStanding(BaseModel):
    """League table row."""

    rank: int
    trainer_id: str
    division: str
    points: int = 0
    wins: int = 0
    losses: int = 0
    draws: int = 0
    goals_for: int = 0
    goals_against: int = 0


class SeasonalLeague(BaseModel):
    """Season-long league with promotion and relegation between divisions."""

    id: str
    name: str
    season: str
    year: int
    divisions: list[LeagueDivision] = Field(default_factory=list)
    schedule: list[LeagueMatch] = Field(default_factory=list)
    standings: list[LeagueStanding] = Field(default_factory=list)
    status: LeagueStatus = LeagueStatus.REGISTRATION


class TrainerProfile(BaseModel):
    """Trainer data supplied by the trainer service."""

    trainer_id: str
    username: str
    currency: Currency = Field(default_factory=Currency)


class SpectatorSession(BaseModel):
    """Viewer session attached to a live match."""

    id: str
    match_id: str
    viewers: list[str] = Field(default_factory=list)
    chat_enabled: bool = True
    created_at: datetime = Field(default_factory=datetime.now)
