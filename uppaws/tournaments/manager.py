"""Tournament lifecycle, match resolution and skill ratings."""

import asyncio
import logging
import uuid
from collections import defaultdict
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta
from typing import Protocol

from ..config.settings import TournamentSettings
from .brackets import (
    advancing_participants,
    all_matches_completed,
    generate_brackets,
    next_single_elimination_round,
)
from .database import InMemoryTournamentStore, TournamentStore
from .models import (
    MatchResult,
    MatchStatus,
    PrizeAward,
    SeasonalLeague,
    SpectatorSession,
    Tournament,
    TournamentCreateRequest,
    TournamentFormat,
    TournamentParticipant,
    TournamentRule,
    TournamentStanding,
    TournamentStatus,
    TournamentType,
    TrainerProfile,
    WeeklyTournament,
)
from .ratings import RatingCalculator, find_closest_opponent
from .scheduling import (
    get_week_number,
    league_divisions,
    seasonal_league_id,
    weekly_prizes,
    weekly_restrictions,
    weekly_theme,
    weekly_tournament_id,
)

logger = logging.getLogger(__name__)

POINTS_PER_WIN = 3

PrizeHandler = Callable[[PrizeAward], Awaitable[None]]


class TrainerDirectory(Protocol):
    """Source of trainer profiles (username and wallet)."""

    async def get_trainer(self, trainer_id: str) -> TrainerProfile | None: ...


def _epoch_ms(when: datetime) -> int:
    return int(when.timestamp() * 1000)


def _as_aware(when: datetime) -> datetime:
    """Naive datetimes are taken as local time."""
    return when if when.tzinfo else when.astimezone()


class TournamentManager:
    """Manages tournament registration, brackets, results and ratings.

    Every read-modify-write of a tournament runs under that tournament's
    lock, so concurrent registrations cannot overshoot capacity and a match
    result is never applied twice.
    """

    def __init__(
        self,
        store: TournamentStore | None = None,
        settings: TournamentSettings | None = None,
        trainer_directory: TrainerDirectory | None = None,
        prize_handler: PrizeHandler | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store or InMemoryTournamentStore()
        self.settings = settings or TournamentSettings()
        self.rating_calculator = RatingCalculator(
            k_factor=self.settings.k_factor,
            default_rating=self.settings.default_rating,
        )
        self.trainer_directory = trainer_directory
        self.prize_handler = prize_handler
        self.clock = clock

        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._ratings_lock = asyncio.Lock()
        self._scheduling_lock = asyncio.Lock()

        self._match_index: dict[str, str] = {}
        for tournament in self.store.list_tournaments():
            self._index_matches(tournament)

    # Lifecycle

    async def create_tournament(self, request: TournamentCreateRequest) -> Tournament:
        """Create a tournament open for registration."""
        now = self.clock()
        tournament_id = f"tournament_{_epoch_ms(now)}_{uuid.uuid4().hex[:9]}"

        tournament = Tournament(
            id=tournament_id,
            name=request.name,
            description=request.description,
            type=request.type,
            format=request.format,
            scope="subreddit" if request.subreddit_id else "global",
            subreddit_id=request.subreddit_id,
            status=TournamentStatus.REGISTRATION,
            start_date=request.start_date,
            end_date=request.end_date,
            registration_deadline=request.registration_deadline,
            max_participants=request.max_participants,
            entry_fee=request.entry_fee,
            prize_pool=request.prize_pool,
            rules=[
                TournamentRule(id=f"rule_{index}", description=rule)
                for index, rule in enumerate(request.rules)
            ],
            created_by=request.created_by,
            created_at=now,
        )

        self.store.save_tournament(tournament)
        logger.info(
            f"Created tournament {tournament_id}: {request.name} "
            f"({request.format.value}, capacity {request.max_participants})"
        )
        return tournament

    async def register_participant(self, tournament_id: str, trainer_id: str) -> bool:
        """Register a trainer. Returns False when any registration rule fails."""
        tournament = self.store.get_tournament(tournament_id)
        if not tournament:
            logger.warning(f"Registration for unknown tournament {tournament_id}")
            return False

        profile: TrainerProfile | None = None
        if self.trainer_directory:
            try:
                profile = await self.trainer_directory.get_trainer(trainer_id)
            except Exception as e:
                logger.error(f"Trainer lookup failed for {trainer_id}: {e}")
                return False
            if profile is None:
                logger.warning(f"Unknown trainer {trainer_id} tried to register")
                return False
            if tournament.entry_fee and not profile.currency.covers(
                tournament.entry_fee
            ):
                logger.warning(
                    f"Trainer {trainer_id} cannot afford entry to {tournament_id}"
                )
                return False

        async with self._locks[tournament_id]:
            tournament = self.store.get_tournament(tournament_id)
            if not tournament:
                return False

            rejection = self._registration_rejection(tournament, trainer_id)
            if rejection:
                logger.warning(
                    f"Rejected registration of {trainer_id} for {tournament_id}: {rejection}"
                )
                return False

            tournament.participants.append(
                TournamentParticipant(
                    trainer_id=trainer_id,
                    username=profile.username if profile else "",
                    registered_at=self.clock(),
                    seed=len(tournament.participants) + 1,
                )
            )
            self.store.save_tournament(tournament)

        logger.info(f"Registered {trainer_id} for tournament {tournament_id}")
        return True

    def _registration_rejection(
        self, tournament: Tournament, trainer_id: str
    ) -> str | None:
        if tournament.status != TournamentStatus.REGISTRATION:
            return f"status is {tournament.status.value}"
        if len(tournament.participants) >= tournament.max_participants:
            return "tournament is full"
        if _as_aware(self.clock()) > _as_aware(tournament.registration_deadline):
            return "registration deadline has passed"
        if tournament.get_participant(trainer_id):
            return "already registered"
        return None

    async def start_tournament(self, tournament_id: str) -> bool:
        """Close registration and generate the opening brackets."""
        if not self.store.get_tournament(tournament_id):
            logger.warning(f"Start requested for unknown tournament {tournament_id}")
            return False

        async with self._locks[tournament_id]:
            tournament = self.store.get_tournament(tournament_id)
            if not tournament or tournament.status != TournamentStatus.REGISTRATION:
                logger.warning(f"Tournament {tournament_id} cannot be started")
                return False

            trainer_ids = [p.trainer_id for p in tournament.participants]
            tournament.brackets = generate_brackets(
                tournament.id, tournament.format, trainer_ids
            )
            for participant in tournament.participants:
                participant.current_round = 1

            tournament.status = TournamentStatus.IN_PROGRESS
            tournament.started_at = self.clock()
            self._index_matches(tournament)

            awards = self._check_completion(tournament)
            self.store.save_tournament(tournament)

        match_count = len(tournament.match_ids())
        logger.info(
            f"Started tournament {tournament_id} with {len(trainer_ids)} participants "
            f"and {match_count} matches"
        )
        await self._distribute_prizes(awards)
        return True

    async def cancel_tournament(self, tournament_id: str) -> bool:
        """Cancel a tournament that has not finished."""
        if not self.store.get_tournament(tournament_id):
            return False

        async with self._locks[tournament_id]:
            tournament = self.store.get_tournament(tournament_id)
            if not tournament or tournament.status not in (
                TournamentStatus.REGISTRATION,
                TournamentStatus.IN_PROGRESS,
            ):
                return False

            tournament.status = TournamentStatus.CANCELLED
            self.store.save_tournament(tournament)

        logger.info(f"Cancelled tournament {tournament_id}")
        return True

    async def delete_tournament(self, tournament_id: str) -> bool:
        """Delete tournament and forget its matches."""
        async with self._locks[tournament_id]:
            deleted = self.store.delete_tournament(tournament_id)
            if deleted:
                self._match_index = {
                    match_id: owner
                    for match_id, owner in self._match_index.items()
                    if owner != tournament_id
                }
        self._locks.pop(tournament_id, None)
        return deleted

    # Match resolution

    async def process_match(self, match_id: str, result: MatchResult) -> bool:
        """Apply a reported result to its match, standings and ratings."""
        tournament_id = self.find_tournament_for_match(match_id)
        if tournament_id is None:
            logger.warning(f"Result reported for unknown match {match_id}")
            return False

        async with self._locks[tournament_id]:
            tournament = self.store.get_tournament(tournament_id)
            match = tournament.find_match(match_id) if tournament else None
            if not tournament or not match:
                logger.warning(f"Match {match_id} no longer exists")
                return False

            if tournament.status != TournamentStatus.IN_PROGRESS:
                logger.warning(
                    f"Ignoring result for match {match_id}: tournament "
                    f"{tournament_id} is {tournament.status.value}"
                )
                return False

            if match.status == MatchStatus.COMPLETED:
                logger.warning(f"Match {match_id} already completed")
                return False

            players = {match.participant1_id, match.participant2_id}
            if result.winner_id == result.loser_id or {
                result.winner_id,
                result.loser_id,
            } != players:
                logger.warning(
                    f"Result for match {match_id} does not name its participants "
                    f"({result.winner_id} vs {result.loser_id})"
                )
                return False

            match.status = MatchStatus.COMPLETED
            match.winner_id = result.winner_id
            match.score = result.score
            match.duration = result.duration
            match.replay = result.replay
            match.completed_at = self.clock()

            winner = tournament.get_participant(result.winner_id)
            loser = tournament.get_participant(result.loser_id)
            if winner:
                winner.wins += 1
            if loser:
                loser.losses += 1
                if tournament.format == TournamentFormat.SINGLE_ELIMINATION:
                    loser.eliminated = True

            await self._update_skill_ratings(result.winner_id, result.loser_id)

            awards = self._check_completion(tournament)
            self.store.save_tournament(tournament)

        logger.info(
            f"Match {match_id} completed: {result.winner_id} beat {result.loser_id}"
        )
        await self._distribute_prizes(awards)
        return True

    def find_tournament_for_match(self, match_id: str) -> str | None:
        tournament_id = self._match_index.get(match_id)
        if tournament_id is not None:
            return tournament_id

        # Another process may have written the tournament to a shared store.
        for tournament in self.store.list_tournaments():
            if tournament.find_match(match_id):
                self._index_matches(tournament)
                return tournament.id
        return None

    def _index_matches(self, tournament: Tournament) -> None:
        for match_id in tournament.match_ids():
            self._match_index[match_id] = tournament.id

    def _check_completion(self, tournament: Tournament) -> list[PrizeAward]:
        """Advance or finish a tournament whose matches are all reported."""
        if not all_matches_completed(tournament.brackets):
            return []

        if (
            tournament.format == TournamentFormat.SINGLE_ELIMINATION
            and tournament.brackets
        ):
            next_bracket = next_single_elimination_round(
                tournament.id, tournament.brackets[-1]
            )
            if next_bracket:
                tournament.brackets.append(next_bracket)
                for trainer_id in advancing_participants(tournament.brackets[-2]):
                    participant = tournament.get_participant(trainer_id)
                    if participant:
                        participant.current_round = next_bracket.round
                self._index_matches(tournament)
                logger.info(
                    f"Tournament {tournament.id} advanced to round {next_bracket.round}"
                )
                return []

        return self._complete_tournament(tournament)

    def _complete_tournament(self, tournament: Tournament) -> list[PrizeAward]:
        tournament.status = TournamentStatus.COMPLETED
        tournament.completed_at = self.clock()

        # Stable: equal win counts keep registration order.
        ranked = sorted(tournament.participants, key=lambda p: p.wins, reverse=True)

        if tournament.format == TournamentFormat.SINGLE_ELIMINATION and tournament.brackets:
            survivors = advancing_participants(tournament.brackets[-1])
            tournament.winner_id = survivors[0] if survivors else None
        elif ranked:
            tournament.winner_id = ranked[0].trainer_id

        tournament.awards = [
            PrizeAward(
                tournament_id=tournament.id,
                trainer_id=participant.trainer_id,
                rank=index + 1,
                prize=prize,
            )
            for index, (participant, prize) in enumerate(
                zip(ranked, tournament.prize_pool)
            )
        ]

        logger.info(
            f"Tournament {tournament.id} completed, winner: {tournament.winner_id}"
        )
        return tournament.awards

    async def _distribute_prizes(self, awards: list[PrizeAward]) -> None:
        if not awards:
            return
        if not self.prize_handler:
            logger.warning(
                f"No prize handler configured, {len(awards)} awards not delivered"
            )
            return

        for award in awards:
            try:
                await self.prize_handler(award)
            except Exception as e:
                logger.error(
                    f"Failed to deliver prize {award.rank} of {award.tournament_id} "
                    f"to {award.trainer_id}: {e}"
                )

    # Ratings

    async def _update_skill_ratings(self, winner_id: str, loser_id: str) -> None:
        async with self._ratings_lock:
            winner_rating = self.get_player_skill_rating(winner_id)
            loser_rating = self.get_player_skill_rating(loser_id)

            new_winner, new_loser = self.rating_calculator.update(
                winner_rating, loser_rating
            )
            self.store.set_rating(winner_id, new_winner)
            self.store.set_rating(loser_id, new_loser)

        logger.debug(
            f"Ratings: {winner_id} {winner_rating}->{new_winner}, "
            f"{loser_id} {loser_rating}->{new_loser}"
        )

    def get_player_skill_rating(self, trainer_id: str) -> int:
        rating = self.store.get_rating(trainer_id)
        return self.settings.default_rating if rating is None else rating

    def get_rating_leaderboard(self, limit: int | None = 10) -> list[tuple[str, int]]:
        """Highest rated trainers first; ties keep first-rated order.

        A ``limit`` below 1 yields an empty list.
        """
        ranked = sorted(self.store.list_ratings(), key=lambda entry: entry[1], reverse=True)
        return ranked if limit is None else ranked[: max(limit, 0)]

    def find_matchmaking_opponent(
        self, trainer_id: str, game_mode: str | None = None
    ) -> str | None:
        """Closest-rated trainer within the matchmaking window.

        ``game_mode`` is accepted for callers that pass one; all modes share
        a single ladder.
        """
        return find_closest_opponent(
            trainer_id,
            self.get_player_skill_rating(trainer_id),
            self.store.list_ratings(),
            window=self.settings.matchmaking_window,
        )

    # Recurring events

    async def create_weekly_tournament(self) -> WeeklyTournament:
        """Get or create this week's themed tournament."""
        now = self.clock()
        week = get_week_number(now)
        year = now.year
        weekly_id = weekly_tournament_id(year, week)

        async with self._scheduling_lock:
            existing = self.store.get_tournament(weekly_id)
            if isinstance(existing, WeeklyTournament):
                return existing

            theme = weekly_theme(week)
            restrictions = weekly_restrictions(week)
            weekly = WeeklyTournament(
                id=weekly_id,
                name=f"Weekly Tournament: {theme}",
                description=f"Week {week} of {year}",
                type=TournamentType.BATTLE,
                format=TournamentFormat.SINGLE_ELIMINATION,
                status=TournamentStatus.REGISTRATION,
                start_date=now,
                end_date=now + timedelta(days=7),
                registration_deadline=now
                + timedelta(days=self.settings.weekly_registration_days),
                max_participants=self.settings.weekly_max_participants,
                prize_pool=weekly_prizes(),
                rules=[
                    TournamentRule(
                        id=f"rule_{index}",
                        description=restriction.description,
                        category="restriction",
                    )
                    for index, restriction in enumerate(restrictions)
                ],
                created_at=now,
                week=week,
                year=year,
                theme=theme,
                restrictions=restrictions,
            )
            self.store.save_tournament(weekly)

        logger.info(f"Created weekly tournament {weekly_id} ({theme})")
        return weekly

    async def create_seasonal_league(self, season: str, year: int) -> SeasonalLeague:
        """Get or create the league for a season."""
        league_id = seasonal_league_id(season, year)

        async with self._scheduling_lock:
            existing = self.store.get_league(league_id)
            if existing:
                return existing

            league = SeasonalLeague(
                id=league_id,
                name=f"{season} {year} Competitive League",
                season=season,
                year=year,
                divisions=league_divisions(),
            )
            self.store.save_league(league)

        logger.info(f"Created seasonal league {league_id}")
        return league

    def get_weekly_tournament(self, week: int, year: int) -> WeeklyTournament | None:
        tournament = self.store.get_tournament(weekly_tournament_id(year, week))
        return tournament if isinstance(tournament, WeeklyTournament) else None

    def get_seasonal_league(self, season: str, year: int) -> SeasonalLeague | None:
        return self.store.get_league(seasonal_league_id(season, year))

    # Readers

    def get_tournament(self, tournament_id: str) -> Tournament | None:
        return self.store.get_tournament(tournament_id)

    def get_all_tournaments(self) -> list[Tournament]:
        return self.store.list_tournaments()

    def get_active_tournaments(self) -> list[Tournament]:
        return [
            t
            for t in self.store.list_tournaments()
            if t.status == TournamentStatus.IN_PROGRESS
        ]

    def get_upcoming_tournaments(self) -> list[Tournament]:
        return [
            t
            for t in self.store.list_tournaments()
            if t.status == TournamentStatus.REGISTRATION
        ]

    def get_tournament_standings(self, tournament_id: str) -> list[TournamentStanding]:
        """Participants ranked by points (3 per win), registration order on ties."""
        tournament = self.store.get_tournament(tournament_id)
        if not tournament:
            return []

        ordered = sorted(
            tournament.participants, key=lambda p: p.wins * POINTS_PER_WIN, reverse=True
        )
        return [
            TournamentStanding(
                rank=index + 1,
                participant=participant,
                points=participant.wins * POINTS_PER_WIN,
                wins=participant.wins,
                losses=participant.losses,
                win_rate=participant.wins / max(1, participant.wins + participant.losses),
            )
            for index, participant in enumerate(ordered)
        ]

    def create_spectator_session(self, match_id: str) -> SpectatorSession:
        now = self.clock()
        return SpectatorSession(
            id=f"spectator_{match_id}_{_epoch_ms(now)}",
            match_id=match_id,
            created_at=now,
        )
