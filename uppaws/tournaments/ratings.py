"""Elo skill ratings and rating-window matchmaking."""

import math
from collections.abc import Iterable

DEFAULT_RATING = 1000
DEFAULT_K_FACTOR = 32
DEFAULT_MATCHMAKING_WINDOW = 100


def round_half_up(value: float) -> int:
    """Round .5 toward +infinity instead of to the nearest even integer."""
    return math.floor(value + 0.5)


class RatingCalculator:
    """Paired Elo update with a fixed K-factor."""

    def __init__(
        self, k_factor: int = DEFAULT_K_FACTOR, default_rating: int = DEFAULT_RATING
    ):
        self.k_factor = k_factor
        self.default_rating = default_rating

    def expected_score(self, player_rating: float, opponent_rating: float) -> float:
        """Probability that ``player`` beats ``opponent``."""
        return 1 / (1 + 10 ** ((opponent_rating - player_rating) / 400))

    def update(self, winner_rating: float, loser_rating: float) -> tuple[int, int]:
        """Return the (winner, loser) ratings after one decisive match."""
        expected_winner = self.expected_score(winner_rating, loser_rating)
        expected_loser = 1 - expected_winner

        new_winner = winner_rating + self.k_factor * (1 - expected_winner)
        new_loser = loser_rating + self.k_factor * (0 - expected_loser)

        return round_half_up(new_winner), round_half_up(new_loser)


def find_closest_opponent(
    trainer_id: str,
    player_rating: int,
    ratings: Iterable[tuple[str, int]],
    window: int = DEFAULT_MATCHMAKING_WINDOW,
) -> str | None:
    """Closest-rated other trainer within ``window`` points.

    Ties go to whoever appears first in ``ratings``.
    """
    best_id: str | None = None
    best_gap: int | None = None

    for candidate_id, rating in ratings:
        if candidate_id == trainer_id:
            continue
        gap = abs(rating - player_rating)
        if gap > window:
            continue
        if best_gap is None or gap < best_gap:
            best_id, best_gap = candidate_id, gap

    return best_id
