"""Bracket generation for single-elimination and round-robin tournaments.

Every function here is pure and deterministic: participants are paired in the
order they are given (registration order), with no seeding or shuffling.
Single-elimination rounds are produced one at a time; the next round is built
from the actual winners of the previous one once all of its matches are
reported.
"""

from .models import MatchStatus, TournamentBracket, TournamentFormat, TournamentMatch


def generate_single_elimination_round(
    tournament_id: str, round_number: int, trainer_ids: list[str]
) -> TournamentBracket:
    """Pair adjacent participants; an odd participant out gets a bye."""
    matches: list[TournamentMatch] = []
    byes: list[str] = []

    for i in range(0, len(trainer_ids), 2):
        if i + 1 < len(trainer_ids):
            matches.append(
                TournamentMatch(
                    id=f"{tournament_id}_r{round_number}_m{i // 2 + 1}",
                    participant1_id=trainer_ids[i],
                    participant2_id=trainer_ids[i + 1],
                    status=MatchStatus.SCHEDULED,
                )
            )
        else:
            byes.append(trainer_ids[i])

    return TournamentBracket(round=round_number, matches=matches, byes=byes)


def generate_round_robin(
    tournament_id: str, trainer_ids: list[str]
) -> list[TournamentBracket]:
    """Every unordered pair meets once, all in round 1."""
    matches: list[TournamentMatch] = []
    match_number = 1

    for i in range(len(trainer_ids)):
        for j in range(i + 1, len(trainer_ids)):
            matches.append(
                TournamentMatch(
                    id=f"{tournament_id}_rr_{match_number}",
                    participant1_id=trainer_ids[i],
                    participant2_id=trainer_ids[j],
                    status=MatchStatus.SCHEDULED,
                )
            )
            match_number += 1

    return [TournamentBracket(round=1, matches=matches)]


def generate_brackets(
    tournament_id: str, tournament_format: TournamentFormat, trainer_ids: list[str]
) -> list[TournamentBracket]:
    """Generate the opening brackets for a tournament."""
    if tournament_format == TournamentFormat.ROUND_ROBIN:
        return generate_round_robin(tournament_id, trainer_ids)

    if len(trainer_ids) < 2:
        return []
    return [generate_single_elimination_round(tournament_id, 1, trainer_ids)]


def advancing_participants(bracket: TournamentBracket) -> list[str]:
    """Winners in match order, then byes. Unreported matches contribute nobody."""
    winners = [
        match.winner_id
        for match in bracket.matches
        if match.status == MatchStatus.COMPLETED and match.winner_id
    ]
    return winners + list(bracket.byes)


def next_single_elimination_round(
    tournament_id: str, bracket: TournamentBracket
) -> TournamentBracket | None:
    """Build the round after ``bracket``, or None once a champion remains."""
    pool = advancing_participants(bracket)
    if len(pool) < 2:
        return None
    return generate_single_elimination_round(tournament_id, bracket.round + 1, pool)


def all_matches_completed(brackets: list[TournamentBracket]) -> bool:
    return all(
        match.status == MatchStatus.COMPLETED
        for bracket in brackets
        for match in bracket.matches
    )
