"""Tests for Elo ratings and matchmaking."""

import pytest

from uppaws.tournaments.ratings import (
    RatingCalculator,
    find_closest_opponent,
    round_half_up,
)


def test_equal_ratings_move_by_half_k() -> None:
    calculator = RatingCalculator()

    assert calculator.update(1000, 1000) == (1016, 984)


@pytest.mark.parametrize(
    "winner, loser", [(1000, 1000), (1200, 900), (850, 1300), (1500, 1499)]
)
def test_update_is_zero_sum_within_rounding(winner: int, loser: int) -> None:
    new_winner, new_loser = RatingCalculator().update(winner, loser)

    assert new_winner >= winner
    assert new_loser <= loser
    assert abs((new_winner + new_loser) - (winner + loser)) <= 1


def test_upset_gains_more_than_expected_win() -> None:
    calculator = RatingCalculator()

    upset_gain = calculator.update(900, 1300)[0] - 900
    expected_gain = calculator.update(1300, 900)[0] - 1300

    assert upset_gain > expected_gain


def test_expected_score_is_symmetric() -> None:
    calculator = RatingCalculator()

    assert calculator.expected_score(1000, 1000) == pytest.approx(0.5)
    total = calculator.expected_score(1100, 1000) + calculator.expected_score(1000, 1100)
    assert total == pytest.approx(1.0)


def test_custom_k_factor() -> None:
    assert RatingCalculator(k_factor=16).update(1000, 1000) == (1008, 992)


def test_round_half_up() -> None:
    assert round_half_up(1016.5) == 1017
    assert round_half_up(983.5) == 984
    assert round_half_up(983.49) == 983


def test_closest_opponent_within_window() -> None:
    ratings = [("me", 1000), ("far", 1150), ("near", 1040), ("nearer", 980)]

    assert find_closest_opponent("me", 1000, ratings) == "nearer"


def test_window_edge_is_inclusive() -> None:
    assert find_closest_opponent("me", 1000, [("edge", 1100)]) == "edge"
    assert find_closest_opponent("me", 1000, [("out", 1101)]) is None


def test_ties_go_to_first_rated() -> None:
    ratings = [("below", 950), ("above", 1050)]

    assert find_closest_opponent("me", 1000, ratings) == "below"


def test_never_matches_self() -> None:
    assert find_closest_opponent("me", 1000, [("me", 1000)]) is None
