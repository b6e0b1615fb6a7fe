"""Tournament storage backends."""

import logging
import sqlite3
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from ..config.settings import StorageConfig
from .models import SeasonalLeague, Tournament, WeeklyTournament

logger = logging.getLogger(__name__)

TOURNAMENT_KINDS: dict[str, type[Tournament]] = {
    "standard": Tournament,
    "weekly": WeeklyTournament,
}


def tournament_kind(tournament: Tournament) -> str:
    return "weekly" if isinstance(tournament, WeeklyTournament) else "standard"


class TournamentStore(ABC):
    """Key-value persistence for tournaments, leagues and skill ratings.

    Records handed out by a store are detached copies; callers persist
    changes by saving the record again.
    """

    @abstractmethod
    def save_tournament(self, tournament: Tournament) -> None:
        """Insert or replace a tournament record."""

    @abstractmethod
    def get_tournament(self, tournament_id: str) -> Tournament | None:
        """Get tournament by ID."""

    @abstractmethod
    def list_tournaments(self) -> list[Tournament]:
        """All tournaments in creation order."""

    @abstractmethod
    def delete_tournament(self, tournament_id: str) -> bool:
        """Delete tournament, returning False if it did not exist."""

    @abstractmethod
    def save_league(self, league: SeasonalLeague) -> None:
        """Insert or replace a seasonal league."""

    @abstractmethod
    def get_league(self, league_id: str) -> SeasonalLeague | None:
        """Get seasonal league by ID."""

    @abstractmethod
    def get_rating(self, trainer_id: str) -> int | None:
        """Stored rating, or None for an unrated trainer."""

    @abstractmethod
    def set_rating(self, trainer_id: str, rating: int) -> None:
        """Store a rating; a trainer keeps their original position on update."""

    @abstractmethod
    def list_ratings(self) -> list[tuple[str, int]]:
        """All (trainer_id, rating) pairs in first-rated order."""


class InMemoryTournamentStore(TournamentStore):
    """Process-local store. Lost on restart."""

    def __init__(self):
        self._tournaments: dict[str, Tournament] = {}
        self._leagues: dict[str, SeasonalLeague] = {}
        self._ratings: dict[str, int] = {}

    def save_tournament(self, tournament: Tournament) -> None:
        self._tournaments[tournament.id] = tournament.model_copy(deep=True)

    def get_tournament(self, tournament_id: str) -> Tournament | None:
        tournament = self._tournaments.get(tournament_id)
        return tournament.model_copy(deep=True) if tournament else None

    def list_tournaments(self) -> list[Tournament]:
        return [t.model_copy(deep=True) for t in self._tournaments.values()]

    def delete_tournament(self, tournament_id: str) -> bool:
        return self._tournaments.pop(tournament_id, None) is not None

    def save_league(self, league: SeasonalLeague) -> None:
        self._leagues[league.id] = league.model_copy(deep=True)

    def get_league(self, league_id: str) -> SeasonalLeague | None:
        league = self._leagues.get(league_id)
        return league.model_copy(deep=True) if league else None

    def get_rating(self, trainer_id: str) -> int | None:
        return self._ratings.get(trainer_id)

    def set_rating(self, trainer_id: str, rating: int) -> None:
        self._ratings[trainer_id] = rating

    def list_ratings(self) -> list[tuple[str, int]]:
        return list(self._ratings.items())


class SQLiteTournamentStore(TournamentStore):
    """Stores serialized tournament records in SQLite."""

    def __init__(self, db_path: str = "tournaments.db"):
        self.db_path = Path(db_path)
        self._init_database()

    @contextmanager
    def _get_connection(self) -> Iterator[sqlite3.Connection]:
        """Get a database connection with proper error handling."""
        conn = None
        try:
            conn = sqlite3.connect(self.db_path)
            conn.row_factory = sqlite3.Row
            yield conn
        except sqlite3.Error as e:
            if conn:
                conn.rollback()
            logger.error(f"Tournament database error: {e}")
            raise
        finally:
            if conn:
                conn.close()

    def _init_database(self) -> None:
        if self.db_path.parent != Path("."):
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

        with self._get_connection() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS tournaments (
                    id TEXT PRIMARY KEY,
                    kind TEXT NOT NULL,
                    status TEXT NOT NULL,
                    data TEXT NOT NULL,
                    created_at TEXT
                );
                CREATE TABLE IF NOT EXISTS seasonal_leagues (
                    id TEXT PRIMARY KEY,
                    data TEXT NOT NULL
                );
                CREATE TABLE IF NOT EXISTS skill_ratings (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    trainer_id TEXT UNIQUE NOT NULL,
                    rating INTEGER NOT NULL
                );
                """
            )
            conn.commit()

        logger.info(f"Tournament database ready at {self.db_path}")

    def _row_to_tournament(self, row: sqlite3.Row) -> Tournament:
        model = TOURNAMENT_KINDS.get(row["kind"], Tournament)
        return model.model_validate_json(row["data"])

    def save_tournament(self, tournament: Tournament) -> None:
        with self._get_connection() as conn:
            conn.execute(
                """
                INSERT INTO tournaments (id, kind, status, data, created_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    status = excluded.status,
                    data = excluded.data
                """,
                (
                    tournament.id,
                    tournament_kind(tournament),
                    tournament.status.value,
                    tournament.model_dump_json(),
                    tournament.created_at.isoformat() if tournament.created_at else None,
                ),
            )
            conn.commit()

    def get_tournament(self, tournament_id: str) -> Tournament | None:
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT kind, data FROM tournaments WHERE id = ?", (tournament_id,)
            ).fetchone()

            if not row:
                return None
            return self._row_to_tournament(row)

    def list_tournaments(self) -> list[Tournament]:
        with self._get_connection() as conn:
            rows = conn.execute(
                "SELECT kind, data FROM tournaments ORDER BY rowid"
            ).fetchall()
            return [self._row_to_tournament(row) for row in rows]

    def delete_tournament(self, tournament_id: str) -> bool:
        with self._get_connection() as conn:
            cursor = conn.execute(
                "DELETE FROM tournaments WHERE id = ?", (tournament_id,)
            )
            deleted = cursor.rowcount > 0
            conn.commit()

            if deleted:
                logger.info(f"Deleted tournament {tournament_id}")

            return deleted

    def save_league(self, league: SeasonalLeague) -> None:
        with self._get_connection() as conn:
            conn.execute(
                """
                INSERT INTO seasonal_leagues (id, data) VALUES (?, ?)
                ON CONFLICT(id) DO UPDATE SET data = excluded.data
                """,
                (league.id, league.model_dump_json()),
            )
            conn.commit()

    def get_league(self, league_id: str) -> SeasonalLeague | None:
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT data FROM seasonal_leagues WHERE id = ?", (league_id,)
            ).fetchone()
            return SeasonalLeague.model_validate_json(row["data"]) if row else None

    def get_rating(self, trainer_id: str) -> int | None:
        with self._get_connection() as conn:
            row = conn.execute(
                "SELECT rating FROM skill_ratings WHERE trainer_id = ?", (trainer_id,)
            ).fetchone()
            return row["rating"] if row else None

    def set_rating(self, trainer_id: str, rating: int) -> None:
        with self._get_connection() as conn:
            conn.execute(
                """
                INSERT INTO skill_ratings (trainer_id, rating) VALUES (?, ?)
                ON CONFLICT(trainer_id) DO UPDATE SET rating = excluded.rating
                """,
                (trainer_id, rating),
            )
            conn.commit()

    def list_ratings(self) -> list[tuple[str, int]]:
        with self._get_connection() as conn:
            rows = conn.execute(
                "SELECT trainer_id, rating FROM skill_ratings ORDER BY seq"
            ).fetchall()
            return [(row["trainer_id"], row["rating"]) for row in rows]


def create_store(config: StorageConfig) -> TournamentStore:
    """Build the store selected by the storage config."""
    if config.backend == "sqlite":
        return SQLiteTournamentStore(config.db_path)
    return InMemoryTournamentStore()
