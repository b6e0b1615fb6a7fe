"""Tests for the tournament HTTP endpoints."""

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from uppaws.config.settings import AppConfig
from uppaws.tournaments.manager import TournamentManager
from uppaws.web.app import create_app

OPENS = datetime(2026, 10, 19, 12, 0, 0)


@pytest.fixture
def client(clock):
    manager = TournamentManager(clock=clock)
    with TestClient(create_app(AppConfig(), manager=manager)) as test_client:
        yield test_client


def tournament_body(max_participants: int = 4, **overrides) -> dict:
    body = {
        "name": "Forest Cup",
        "format": "single_elimination",
        "max_participants": max_participants,
        "start_date": (OPENS + timedelta(days=2)).isoformat(),
        "end_date": (OPENS + timedelta(days=3)).isoformat(),
        "registration_deadline": (OPENS + timedelta(days=1)).isoformat(),
        "rules": ["Three animals per team"],
    }
    body.update(overrides)
    return body


def create_tournament(client: TestClient, trainers: list[str], **overrides) -> str:
    response = client.post("/api/tournaments", json=tournament_body(**overrides))
    assert response.status_code == 200
    tournament_id = response.json()["tournament_id"]
    for trainer_id in trainers:
        registered = client.post(
            f"/api/tournaments/{tournament_id}/participants",
            json={"trainer_id": trainer_id},
        )
        assert registered.status_code == 200
    return tournament_id


def test_health(client: TestClient) -> None:
    assert client.get("/api/health").json() == {"isAlive": True}


def test_create_and_fetch_tournament(client: TestClient) -> None:
    tournament_id = create_tournament(client, [])

    response = client.get(f"/api/tournaments/{tournament_id}")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "registration"
    assert data["rules"][0] == {
        "id": "rule_0",
        "description": "Three animals per team",
        "category": "general",
    }


def test_invalid_capacity_is_unprocessable(client: TestClient) -> None:
    response = client.post("/api/tournaments", json=tournament_body(max_participants=0))

    assert response.status_code == 422


def test_unknown_tournament_is_404(client: TestClient) -> None:
    assert client.get("/api/tournaments/missing").status_code == 404
    assert client.post("/api/tournaments/missing/start").status_code == 404
    assert client.get("/api/tournaments/missing/standings").status_code == 404
    assert client.delete("/api/tournaments/missing").status_code == 404


def test_registration_over_capacity_conflicts(client: TestClient) -> None:
    tournament_id = create_tournament(client, ["ash", "misty"], max_participants=2)

    response = client.post(
        f"/api/tournaments/{tournament_id}/participants", json={"trainer_id": "brock"}
    )

    assert response.status_code == 409
    summary = client.get("/api/tournaments").json()["tournaments"][0]
    assert summary["participant_count"] == 2


def test_list_filters(client: TestClient) -> None:
    open_id = create_tournament(client, [])
    running_id = create_tournament(client, ["ash", "misty"])
    client.post(f"/api/tournaments/{running_id}/start")

    active = client.get("/api/tournaments/active").json()
    upcoming = client.get("/api/tournaments/upcoming").json()
    filtered = client.get("/api/tournaments", params={"status": "in_progress"}).json()

    assert [t["id"] for t in active["tournaments"]] == [running_id]
    assert [t["id"] for t in upcoming["tournaments"]] == [open_id]
    assert filtered["count"] == 1
    assert client.get("/api/tournaments", params={"status": "bogus"}).status_code == 400


def test_full_single_elimination_over_http(client: TestClient) -> None:
    tournament_id = create_tournament(client, ["ash", "misty", "brock", "dawn"])

    started = client.post(f"/api/tournaments/{tournament_id}/start")
    assert started.status_code == 200
    assert started.json()["matches"] == 2
    assert client.post(f"/api/tournaments/{tournament_id}/start").status_code == 409

    first_round = client.get(f"/api/tournaments/{tournament_id}/bracket").json()
    m1, m2 = first_round["rounds"][0]["matches"]
    first = client.post(
        f"/api/matches/{m1['id']}/result",
        json={"winner_id": "ash", "loser_id": "misty", "score": "2-1"},
    )
    assert first.json()["winner_rating"] == 1016
    assert first.json()["loser_rating"] == 984
    client.post(
        f"/api/matches/{m2['id']}/result", json={"winner_id": "brock", "loser_id": "dawn"}
    )

    bracket = client.get(f"/api/tournaments/{tournament_id}/bracket").json()
    assert bracket["tournament"]["status"] == "in_progress"
    assert bracket["tournament"]["current_round"] == 2
    final = bracket["rounds"][1]["matches"][0]
    assert (final["participant1_id"], final["participant2_id"]) == ("ash", "brock")

    finished = client.post(
        f"/api/matches/{final['id']}/result", json={"winner_id": "brock", "loser_id": "ash"}
    )
    assert finished.json()["tournament_status"] == "completed"

    standings = client.get(f"/api/tournaments/{tournament_id}/standings").json()
    assert [s["trainer_id"] for s in standings["standings"][:2]] == ["brock", "ash"]
    assert standings["standings"][0]["points"] == 6


def test_match_result_errors(client: TestClient) -> None:
    tournament_id = create_tournament(client, ["ash", "misty"])
    client.post(f"/api/tournaments/{tournament_id}/start")
    bracket = client.get(f"/api/tournaments/{tournament_id}/bracket").json()
    match_id = bracket["rounds"][0]["matches"][0]["id"]

    unknown = client.post(
        "/api/matches/ghost/result", json={"winner_id": "ash", "loser_id": "misty"}
    )
    stranger = client.post(
        f"/api/matches/{match_id}/result", json={"winner_id": "ash", "loser_id": "gary"}
    )
    malformed = client.post(f"/api/matches/{match_id}/result", json={"winner_id": "ash"})

    assert unknown.status_code == 404
    assert stranger.status_code == 409
    assert malformed.status_code == 422


def test_cancel_then_cancel_again_conflicts(client: TestClient) -> None:
    tournament_id = create_tournament(client, [])

    assert client.post(f"/api/tournaments/{tournament_id}/cancel").status_code == 200
    assert client.post(f"/api/tournaments/{tournament_id}/cancel").status_code == 409


def test_ratings_and_matchmaking(client: TestClient) -> None:
    tournament_id = create_tournament(client, ["ash", "misty"])
    client.post(f"/api/tournaments/{tournament_id}/start")
    bracket = client.get(f"/api/tournaments/{tournament_id}/bracket").json()
    match_id = bracket["rounds"][0]["matches"][0]["id"]
    client.post(f"/api/matches/{match_id}/result", json={"winner_id": "misty", "loser_id": "ash"})

    leaderboard = client.get("/api/ratings", params={"limit": 1}).json()["leaderboard"]
    rating = client.get("/api/ratings/newcomer").json()
    opponent = client.get("/api/matchmaking/misty", params={"game_mode": "ranked"}).json()

    assert leaderboard == [{"rank": 1, "trainer_id": "misty", "rating": 1016}]
    assert rating == {"trainer_id": "newcomer", "rating": 1000}
    assert opponent["opponent_id"] == "ash"


def test_spectate_known_match_only(client: TestClient) -> None:
    tournament_id = create_tournament(client, ["ash", "misty"])
    client.post(f"/api/tournaments/{tournament_id}/start")
    bracket = client.get(f"/api/tournaments/{tournament_id}/bracket").json()
    match_id = bracket["rounds"][0]["matches"][0]["id"]

    session = client.post(f"/api/matches/{match_id}/spectate")

    assert session.status_code == 200
    assert session.json()["match_id"] == match_id
    assert client.post("/api/matches/ghost/spectate").status_code == 404


def test_weekly_and_league_endpoints(client: TestClient) -> None:
    weekly = client.post("/api/weekly").json()
    again = client.post("/api/weekly").json()

    assert weekly["id"] == again["id"] == "weekly_2026_43"
    assert client.get("/api/weekly/2026/43").json()["theme"] == "Desert Survivors"
    assert client.get("/api/weekly/2026/1").status_code == 404

    league = client.post("/api/leagues/Autumn/2026").json()
    assert league["id"] == "league_Autumn_2026"
    assert client.get("/api/leagues/Autumn/2026").json() == league
    assert client.get("/api/leagues/Winter/2026").status_code == 404


@pytest.mark.parametrize("limit", [0, -1])
def test_leaderboard_limit_must_be_positive(client: TestClient, limit: int) -> None:
    assert client.get("/api/ratings", params={"limit": limit}).status_code == 422
