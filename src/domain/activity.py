"""Track consecutive days without a recorded game."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from domain.protocol import PlayerStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActivityUpdateResult:
    players_marked_inactive: int
    players_not_marked_inactive: int


def update_player_activity(
    store: PlayerStore,
    game_date: str,
    inactivity_threshold: int,
) -> ActivityUpdateResult:
    """Age every player without a game on ``game_date``.

    Players that played were already reset when their result was written.
    """
    if inactivity_threshold < 1:
        raise ValueError("inactivity_threshold must be >= 1")

    marked_inactive = 0
    not_marked = 0
    for player in store.players_with_no_game_on(game_date):
        store.increment_inactive_days(player.id)
        inactive_days = player.consecutive_inactive_days + 1

        if player.is_active and inactive_days >= inactivity_threshold:
            store.mark_inactive(player.id)
            marked_inactive += 1
            logger.info(
                "Marked player %s (%s) inactive after %d days",
                player.username,
                player.discord_id,
                inactive_days,
            )
        else:
            not_marked += 1

    logger.info(
        "Activity update complete: %d marked inactive, %d not marked",
        marked_inactive,
        not_marked,
    )
    return ActivityUpdateResult(
        players_marked_inactive=marked_inactive,
        players_not_marked_inactive=not_marked,
    )


__all__ = ["ActivityUpdateResult", "update_player_activity"]
