"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta

import pytest

from uppaws.tournaments.manager import TournamentManager
from uppaws.tournaments.models import (
    Currency,
    PrizeReward,
    RewardType,
    TournamentCreateRequest,
    TournamentFormat,
    TournamentPrize,
)

START = datetime(2026, 10, 19, 12, 0, 0)


class FakeClock:
    """Controllable stand-in for datetime.now."""

    def __init__(self, start: datetime = START):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


def make_request(
    max_participants: int = 4,
    tournament_format: TournamentFormat = TournamentFormat.SINGLE_ELIMINATION,
    prize_positions: int = 0,
    **overrides,
) -> TournamentCreateRequest:
    """Tournament config opening at START with a one-day registration window."""
    fields = {
        "name": "Forest Cup",
        "description": "Weekend bracket",
        "format": tournament_format,
        "max_participants": max_participants,
        "prize_pool": [
            TournamentPrize(
                position=position,
                rewards=[
                    PrizeReward(
                        type=RewardType.CURRENCY,
                        currency=Currency(paw_coins=100 * (prize_positions - position + 1)),
                    )
                ],
            )
            for position in range(1, prize_positions + 1)
        ],
        "start_date": START + timedelta(days=2),
        "end_date": START + timedelta(days=3),
        "registration_deadline": START + timedelta(days=1),
        "rules": ["Three animals per team", "No items"],
        "created_by": "mod_fern",
    }
    fields.update(overrides)
    return TournamentCreateRequest(**fields)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def manager(clock: FakeClock) -> TournamentManager:
    """In-memory manager on a fixed clock."""
    return TournamentManager(clock=clock)


@pytest.fixture
def trainers() -> list[str]:
    return ["trainer_ash", "trainer_misty", "trainer_brock", "trainer_dawn"]


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


@pytest.fixture
def request_factory():
    """Build tournament configs; see make_request for the defaults."""
    return make_request
