"""Tests for feeding battle results into tournament matches."""

import asyncio

from uppaws.tournaments.battle_integration import TournamentBattleCallback
from uppaws.tournaments.models import TournamentStatus


async def started_duel(manager, request_factory) -> str:
    """Start a two-trainer tournament and return its only match id."""
    tournament = await manager.create_tournament(request_factory(2))
    await manager.register_participant(tournament.id, "ash")
    await manager.register_participant(tournament.id, "misty")
    await manager.start_tournament(tournament.id)
    return manager.get_tournament(tournament.id).brackets[0].matches[0].id


def test_nested_result_completes_match(manager, request_factory) -> None:
    callback = TournamentBattleCallback(manager)

    async def scenario():
        match_id = await started_duel(manager, request_factory)
        handled = await callback.on_battle_completed(
            {
                "battle_id": "battle_42",
                "tournament_match_id": match_id,
                "result": {
                    "winner_id": "misty",
                    "loser_id": "ash",
                    "score": "3-2",
                    "duration": 241.5,
                    "replay": "replays/battle_42.json",
                },
            }
        )
        return handled, manager.find_tournament_for_match(match_id), match_id

    handled, tournament_id, match_id = asyncio.run(scenario())

    tournament = manager.get_tournament(tournament_id)
    match = tournament.find_match(match_id)
    assert handled is True
    assert match.score == "3-2"
    assert match.replay == "replays/battle_42.json"
    assert tournament.status == TournamentStatus.COMPLETED
    assert tournament.winner_id == "misty"


def test_flat_payload_is_accepted(manager, request_factory) -> None:
    callback = TournamentBattleCallback(manager)

    async def scenario():
        match_id = await started_duel(manager, request_factory)
        return await callback.on_battle_completed(
            {"tournament_match_id": match_id, "winner_id": "ash", "loser_id": "misty"}
        )

    assert asyncio.run(scenario()) is True
    assert manager.get_player_skill_rating("ash") == 1016


def test_non_tournament_battle_is_ignored(manager) -> None:
    callback = TournamentBattleCallback(manager)

    handled = asyncio.run(
        callback.on_battle_completed({"winner_id": "ash", "loser_id": "misty"})
    )

    assert handled is False
    assert manager.get_rating_leaderboard() == []


def test_malformed_result_is_rejected(manager, request_factory) -> None:
    callback = TournamentBattleCallback(manager)

    async def scenario():
        match_id = await started_duel(manager, request_factory)
        handled = await callback.on_battle_completed(
            {"tournament_match_id": match_id, "result": {"winner_id": "ash"}}
        )
        return handled, manager.find_tournament_for_match(match_id)

    handled, tournament_id = asyncio.run(scenario())

    assert handled is False
    assert manager.get_tournament(tournament_id).status == TournamentStatus.IN_PROGRESS


def test_unknown_match_is_reported_as_failure(manager) -> None:
    callback = TournamentBattleCallback(manager)

    handled = asyncio.run(
        callback.on_battle_completed(
            {"tournament_match_id": "ghost_r1_m1", "winner_id": "a", "loser_id": "b"}
        )
    )

    assert handled is False
