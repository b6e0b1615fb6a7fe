"""Tournament API endpoint handlers."""

import logging
from typing import Any

from fastapi import HTTPException

from .manager import TournamentManager
from .models import (
    MatchResult,
    Tournament,
    TournamentCreateRequest,
    TournamentStatus,
)

logger = logging.getLogger(__name__)


def tournament_summary(tournament: Tournament) -> dict[str, Any]:
    """Compact listing view of a tournament."""
    return {
        "id": tournament.id,
        "name": tournament.name,
        "type": tournament.type.value,
        "format": tournament.format.value,
        "status": tournament.status.value,
        "participant_count": len(tournament.participants),
        "max_participants": tournament.max_participants,
        "registration_deadline": tournament.registration_deadline.isoformat(),
        "current_round": tournament.brackets[-1].round if tournament.brackets else 0,
        "winner_id": tournament.winner_id,
    }


class TournamentAPI:
    """FastAPI endpoint handlers for tournament operations."""

    def __init__(self, tournament_manager: TournamentManager):
        self.manager = tournament_manager

    def _require_tournament(self, tournament_id: str) -> Tournament:
        tournament = self.manager.get_tournament(tournament_id)
        if not tournament:
            raise HTTPException(status_code=404, detail="Tournament not found")
        return tournament

    async def create_tournament(
        self, request: TournamentCreateRequest
    ) -> dict[str, Any]:
        """Create a new tournament."""
        try:
            tournament = await self.manager.create_tournament(request)

            return {
                "tournament_id": tournament.id,
                "message": f"Tournament '{request.name}' created successfully",
                "status": tournament.status.value,
                "max_participants": tournament.max_participants,
            }

        except Exception as e:
            logger.error(f"Failed to create tournament: {e}")
            raise HTTPException(status_code=500, detail="Internal server error")

    async def list_tournaments(self, status: str | None = None) -> dict[str, Any]:
        """List all tournaments, optionally filtered by status."""
        try:
            wanted = TournamentStatus(status) if status else None
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Unknown status: {status}")

        tournaments = [
            t
            for t in self.manager.get_all_tournaments()
            if wanted is None or t.status == wanted
        ]
        return {
            "tournaments": [tournament_summary(t) for t in tournaments],
            "count": len(tournaments),
        }

    async def list_active_tournaments(self) -> dict[str, Any]:
        tournaments = self.manager.get_active_tournaments()
        return {
            "tournaments": [tournament_summary(t) for t in tournaments],
            "count": len(tournaments),
        }

    async def list_upcoming_tournaments(self) -> dict[str, Any]:
        tournaments = self.manager.get_upcoming_tournaments()
        return {
            "tournaments": [tournament_summary(t) for t in tournaments],
            "count": len(tournaments),
        }

    async def get_tournament(self, tournament_id: str) -> dict[str, Any]:
        """Get tournament details."""
        tournament = self._require_tournament(tournament_id)
        return tournament.model_dump(mode="json")

    async def register_participant(
        self, tournament_id: str, trainer_id: str
    ) -> dict[str, Any]:
        """Register a trainer for a tournament."""
        try:
            self._require_tournament(tournament_id)

            registered = await self.manager.register_participant(
                tournament_id, trainer_id
            )
            if not registered:
                raise HTTPException(status_code=409, detail="Registration rejected")

            tournament = self._require_tournament(tournament_id)
            return {
                "tournament_id": tournament_id,
                "trainer_id": trainer_id,
                "message": "Registered successfully",
                "participant_count": len(tournament.participants),
            }

        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Failed to register {trainer_id} for {tournament_id}: {e}")
            raise HTTPException(status_code=500, detail="Internal server error")

    async def start_tournament(self, tournament_id: str) -> dict[str, Any]:
        """Start a tournament."""
        try:
            self._require_tournament(tournament_id)

            started = await self.manager.start_tournament(tournament_id)
            if not started:
                raise HTTPException(
                    status_code=409, detail="Tournament is not open for starting"
                )

            tournament = self._require_tournament(tournament_id)
            return {
                "tournament_id": tournament_id,
                "message": "Tournament started successfully",
                "status": tournament.status.value,
                "rounds": len(tournament.brackets),
                "matches": len(tournament.match_ids()),
            }

        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Failed to start tournament {tournament_id}: {e}")
            raise HTTPException(status_code=500, detail="Internal server error")

    async def cancel_tournament(self, tournament_id: str) -> dict[str, Any]:
        """Cancel a tournament."""
        try:
            self._require_tournament(tournament_id)

            if not await self.manager.cancel_tournament(tournament_id):
                raise HTTPException(
                    status_code=409, detail="Tournament can no longer be cancelled"
                )

            return {
                "tournament_id": tournament_id,
                "message": "Tournament cancelled successfully",
                "status": "cancelled",
            }

        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Failed to cancel tournament {tournament_id}: {e}")
            raise HTTPException(status_code=500, detail="Internal server error")

    async def delete_tournament(self, tournament_id: str) -> dict[str, Any]:
        """Delete a tournament and all related data."""
        try:
            success = await self.manager.delete_tournament(tournament_id)
            if not success:
                raise HTTPException(status_code=404, detail="Tournament not found")

            return {
                "tournament_id": tournament_id,
                "message": "Tournament deleted successfully",
            }

        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Failed to delete tournament {tournament_id}: {e}")
            raise HTTPException(status_code=500, detail="Internal server error")

    async def get_standings(self, tournament_id: str) -> dict[str, Any]:
        """Get tournament standings."""
        self._require_tournament(tournament_id)
        standings = self.manager.get_tournament_standings(tournament_id)

        return {
            "tournament_id": tournament_id,
            "standings": [
                {
                    "rank": s.rank,
                    "trainer_id": s.participant.trainer_id,
                    "username": s.participant.username,
                    "points": s.points,
                    "wins": s.wins,
                    "losses": s.losses,
                    "win_rate": s.win_rate,
                    "eliminated": s.participant.eliminated,
                }
                for s in standings
            ],
        }

    async def get_bracket(self, tournament_id: str) -> dict[str, Any]:
        """Get tournament bracket visualization data."""
        tournament = self._require_tournament(tournament_id)

        return {
            "tournament": tournament_summary(tournament),
            "rounds": [
                {
                    "round": bracket.round,
                    "byes": bracket.byes,
                    "matches": [
                        {
                            "id": m.id,
                            "participant1_id": m.participant1_id,
                            "participant2_id": m.participant2_id,
                            "winner_id": m.winner_id,
                            "score": m.score,
                            "status": m.status.value,
                        }
                        for m in bracket.matches
                    ],
                }
                for bracket in tournament.brackets
            ],
        }

    async def report_match_result(
        self, match_id: str, result: MatchResult
    ) -> dict[str, Any]:
        """Record the outcome of a tournament match."""
        try:
            tournament_id = self.manager.find_tournament_for_match(match_id)
            if tournament_id is None:
                raise HTTPException(status_code=404, detail="Match not found")

            if not await self.manager.process_match(match_id, result):
                raise HTTPException(status_code=409, detail="Match result rejected")

            tournament = self._require_tournament(tournament_id)
            return {
                "match_id": match_id,
                "tournament_id": tournament_id,
                "tournament_status": tournament.status.value,
                "winner_rating": self.manager.get_player_skill_rating(result.winner_id),
                "loser_rating": self.manager.get_player_skill_rating(result.loser_id),
            }

        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Failed to process result for match {match_id}: {e}")
            raise HTTPException(status_code=500, detail="Internal server error")

    async def create_spectator_session(self, match_id: str) -> dict[str, Any]:
        if self.manager.find_tournament_for_match(match_id) is None:
            raise HTTPException(status_code=404, detail="Match not found")
        return self.manager.create_spectator_session(match_id).model_dump(mode="json")

    async def get_rating(self, trainer_id: str) -> dict[str, Any]:
        return {
            "trainer_id": trainer_id,
            "rating": self.manager.get_player_skill_rating(trainer_id),
        }

    async def get_leaderboard(self, limit: int = 10) -> dict[str, Any]:
        leaderboard = self.manager.get_rating_leaderboard(limit)
        return {
            "leaderboard": [
                {"rank": index + 1, "trainer_id": trainer_id, "rating": rating}
                for index, (trainer_id, rating) in enumerate(leaderboard)
            ]
        }

    async def find_opponent(
        self, trainer_id: str, game_mode: str | None = None
    ) -> dict[str, Any]:
        return {
            "trainer_id": trainer_id,
            "opponent_id": self.manager.find_matchmaking_opponent(trainer_id, game_mode),
        }

    async def create_weekly_tournament(self) -> dict[str, Any]:
        try:
            weekly = await self.manager.create_weekly_tournament()
            return weekly.model_dump(mode="json")
        except Exception as e:
            logger.error(f"Failed to create weekly tournament: {e}")
            raise HTTPException(status_code=500, detail="Internal server error")

    async def get_weekly_tournament(self, year: int, week: int) -> dict[str, Any]:
        weekly = self.manager.get_weekly_tournament(week, year)
        if not weekly:
            raise HTTPException(status_code=404, detail="Weekly tournament not found")
        return weekly.model_dump(mode="json")

    async def create_seasonal_league(self, season: str, year: int) -> dict[str, Any]:
        try:
            league = await self.manager.create_seasonal_league(season, year)
            return league.model_dump(mode="json")
        except Exception as e:
            logger.error(f"Failed to create league {season} {year}: {e}")
            raise HTTPException(status_code=500, detail="Internal server error")

    async def get_seasonal_league(self, season: str, year: int) -> dict[str, Any]:
        league = self.manager.get_seasonal_league(season, year)
        if not league:
            raise HTTPException(status_code=404, detail="League not found")
        return league.model_dump(mode="json")
