"""Templates for recurring weekly tournaments and seasonal leagues."""

import math
from datetime import date, datetime

from .models import (
    Currency,
    LeagueDivision,
    PrizeReward,
    RestrictionType,
    RewardType,
    TournamentPrize,
    TournamentRestriction,
)

WEEKLY_THEMES = [
    "Forest Dwellers Only",
    "Ocean Creatures Battle",
    "Mountain Peak Challenge",
    "Desert Survivors",
    "Rare Species Showcase",
    "Evolution Masters",
    "Speed Demons",
    "Tank Battle",
]

WEEKLY_RESTRICTIONS = [
    TournamentRestriction(
        type=RestrictionType.HABITAT, value=["forest"], description="Forest animals only"
    ),
    TournamentRestriction(
        type=RestrictionType.LEVEL, value={"max": 10}, description="Level 10 or below"
    ),
    TournamentRestriction(
        type=RestrictionType.RARITY,
        value=["common", "uncommon"],
        description="Common and uncommon only",
    ),
    TournamentRestriction(
        type=RestrictionType.EVOLUTION_STAGE,
        value=1,
        description="First evolution stage only",
    ),
]

# (position, battle tokens, paw coins)
WEEKLY_PRIZE_TABLE = [(1, 100, 500), (2, 75, 300), (3, 50, 200)]

# (id, name, tier, promotion spots, relegation spots)
LEAGUE_DIVISION_TEMPLATE = [
    ("premier", "Premier Division", 1, 0, 3),
    ("championship", "Championship Division", 2, 3, 4),
    ("league_one", "League One", 3, 4, 4),
    ("league_two", "League Two", 4, 4, 0),
]


def get_week_number(when: date | datetime) -> int:
    """Week of the year, with weeks starting on Sunday.

    Computed as ceil((days since Jan 1 + weekday of Jan 1 + 1) / 7) where the
    weekday counts Sunday as 0. Only the calendar date matters.
    """
    day = when.date() if isinstance(when, datetime) else when
    first_day = date(day.year, 1, 1)
    past_days = (day - first_day).days
    first_weekday = (first_day.weekday() + 1) % 7
    return math.ceil((past_days + first_weekday + 1) / 7)


def weekly_tournament_id(year: int, week: int) -> str:
    return f"weekly_{year}_{week}"


def seasonal_league_id(season: str, year: int) -> str:
    return f"league_{season}_{year}"


def weekly_theme(week: int) -> str:
    return WEEKLY_THEMES[week % len(WEEKLY_THEMES)]


def weekly_restrictions(week: int) -> list[TournamentRestriction]:
    restriction = WEEKLY_RESTRICTIONS[week % len(WEEKLY_RESTRICTIONS)]
    return [restriction.model_copy(deep=True)]


def weekly_prizes() -> list[TournamentPrize]:
    return [
        TournamentPrize(
            position=position,
            rewards=[
                PrizeReward(
                    type=RewardType.CURRENCY,
                    currency=Currency(battle_tokens=tokens, paw_coins=coins),
                )
            ],
        )
        for position, tokens, coins in WEEKLY_PRIZE_TABLE
    ]


def league_divisions() -> list[LeagueDivision]:
    return [
        LeagueDivision(
            id=division_id,
            name=name,
            tier=tier,
            promotion_spots=promotion,
            relegation_spots=relegation,
        )
        for division_id, name, tier, promotion, relegation in LEAGUE_DIVISION_TEMPLATE
    ]
