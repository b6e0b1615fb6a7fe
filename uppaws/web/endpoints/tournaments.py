"""Tournament, rating and schedule endpoints."""

from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel

from ...tournaments.api import TournamentAPI
from ...tournaments.models import MatchResult, TournamentCreateRequest

router = APIRouter(prefix="/api")


class RegistrationRequest(BaseModel):
    """Body for registering a trainer."""

    trainer_id: str


def get_tournament_api(request: Request) -> TournamentAPI:
    """Tournament API bound to the running app."""
    return request.app.state.tournament_api


@router.post("/tournaments")
async def create_tournament(
    request: TournamentCreateRequest, api: TournamentAPI = Depends(get_tournament_api)
):
    """Create a new tournament."""
    return await api.create_tournament(request)


@router.get("/tournaments")
async def list_tournaments(
    status: str | None = None, api: TournamentAPI = Depends(get_tournament_api)
):
    """List all tournaments."""
    return await api.list_tournaments(status)


@router.get("/tournaments/active")
async def list_active_tournaments(api: TournamentAPI = Depends(get_tournament_api)):
    """Tournaments currently being played."""
    return await api.list_active_tournaments()


@router.get("/tournaments/upcoming")
async def list_upcoming_tournaments(api: TournamentAPI = Depends(get_tournament_api)):
    """Tournaments open for registration."""
    return await api.list_upcoming_tournaments()


@router.get("/tournaments/{tournament_id}")
async def get_tournament(
    tournament_id: str, api: TournamentAPI = Depends(get_tournament_api)
):
    """Get tournament details."""
    return await api.get_tournament(tournament_id)


@router.post("/tournaments/{tournament_id}/participants")
async def register_participant(
    tournament_id: str,
    registration: RegistrationRequest,
    api: TournamentAPI = Depends(get_tournament_api),
):
    """Register a trainer for a tournament."""
    return await api.register_participant(tournament_id, registration.trainer_id)


@router.post("/tournaments/{tournament_id}/start")
async def start_tournament(
    tournament_id: str, api: TournamentAPI = Depends(get_tournament_api)
):
    """Start a tournament."""
    return await api.start_tournament(tournament_id)


@router.post("/tournaments/{tournament_id}/cancel")
async def cancel_tournament(
    tournament_id: str, api: TournamentAPI = Depends(get_tournament_api)
):
    """Cancel a tournament."""
    return await api.cancel_tournament(tournament_id)


@router.delete("/tournaments/{tournament_id}")
async def delete_tournament(
    tournament_id: str, api: TournamentAPI = Depends(get_tournament_api)
):
    """Delete a tournament and all related data."""
    return await api.delete_tournament(tournament_id)


@router.get("/tournaments/{tournament_id}/standings")
async def get_tournament_standings(
    tournament_id: str, api: TournamentAPI = Depends(get_tournament_api)
):
    """Get tournament standings."""
    return await api.get_standings(tournament_id)


@router.get("/tournaments/{tournament_id}/bracket")
async def get_tournament_bracket(
    tournament_id: str, api: TournamentAPI = Depends(get_tournament_api)
):
    """Get tournament bracket visualization data."""
    return await api.get_bracket(tournament_id)


@router.post("/matches/{match_id}/result")
async def report_match_result(
    match_id: str, result: MatchResult, api: TournamentAPI = Depends(get_tournament_api)
):
    """Report the outcome of a match."""
    return await api.report_match_result(match_id, result)


@router.post("/matches/{match_id}/spectate")
async def spectate_match(match_id: str, api: TournamentAPI = Depends(get_tournament_api)):
    """Open a spectator session for a match."""
    return await api.create_spectator_session(match_id)


@router.get("/ratings")
async def get_rating_leaderboard(
    limit: int = Query(10, ge=1), api: TournamentAPI = Depends(get_tournament_api)
):
    """Top rated trainers."""
    return await api.get_leaderboard(limit)


@router.get("/ratings/{trainer_id}")
async def get_player_rating(
    trainer_id: str, api: TournamentAPI = Depends(get_tournament_api)
):
    """Get a trainer's skill rating."""
    return await api.get_rating(trainer_id)


@router.get("/matchmaking/{trainer_id}")
async def find_matchmaking_opponent(
    trainer_id: str,
    game_mode: str | None = None,
    api: TournamentAPI = Depends(get_tournament_api),
):
    """Find a similarly rated opponent."""
    return await api.find_opponent(trainer_id, game_mode)


@router.post("/weekly")
async def create_weekly_tournament(api: TournamentAPI = Depends(get_tournament_api)):
    """Get or create this week's tournament."""
    return await api.create_weekly_tournament()


@router.get("/weekly/{year}/{week}")
async def get_weekly_tournament(
    year: int, week: int, api: TournamentAPI = Depends(get_tournament_api)
):
    """Get the weekly tournament for a given week."""
    return await api.get_weekly_tournament(year, week)


@router.post("/leagues/{season}/{year}")
async def create_seasonal_league(
    season: str, year: int, api: TournamentAPI = Depends(get_tournament_api)
):
    """Get or create a seasonal league."""
    return await api.create_seasonal_league(season, year)


@router.get("/leagues/{season}/{year}")
async def get_seasonal_league(
    season: str, year: int, api: TournamentAPI = Depends(get_tournament_api)
):
    """Get a seasonal league."""
    return await api.get_seasonal_league(season, year)
