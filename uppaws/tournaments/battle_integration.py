"""Tournament integration with the battle system."""

import logging
from typing import Any

from pydantic import ValidationError

from .manager import TournamentManager
from .models import MatchResult

logger = logging.getLogger(__name__)


class TournamentBattleCallback:
    """Feeds finished battles that belong to tournament matches into the manager."""

    def __init__(self, tournament_manager: TournamentManager):
        self.tournament_manager = tournament_manager

    async def on_battle_completed(self, battle: dict[str, Any]) -> bool:
        """Handle a battle-completion payload. Returns True if a match was updated."""
        match_id = battle.get("tournament_match_id")
        if not match_id:
            # Not a tournament battle, ignore
            return False

        result = self._extract_result(battle)
        if result is None:
            logger.error(f"Could not determine result for tournament match {match_id}")
            return False

        success = await self.tournament_manager.process_match(match_id, result)
        if success:
            logger.info(
                f"Tournament match {match_id} completed from battle: {result.winner_id} wins"
            )
        else:
            logger.error(f"Failed to update tournament match {match_id}")
        return success

    def _extract_result(self, battle: dict[str, Any]) -> MatchResult | None:
        """Extract a match result from a battle payload."""
        # Battle engine nests the outcome under "result"; older payloads are flat
        payload = battle.get("result") if isinstance(battle.get("result"), dict) else battle

        try:
            return MatchResult(
                winner_id=payload["winner_id"],
                loser_id=payload["loser_id"],
                score=payload.get("score", ""),
                duration=payload.get("duration", 0),
                replay=payload.get("replay"),
            )
        except (KeyError, ValidationError) as e:
            logger.warning(f"Malformed battle result payload: {e}")
            return None
