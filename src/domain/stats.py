"""Player statistics and leaderboard read model."""

from __future__ import annotations

from dataclasses import dataclass

from domain.common import RecentGame
from domain.protocol import PlayerStore

RECENT_GAMES_LIMIT = 5


@dataclass(frozen=True)
class PlayerStats:
    discord_id: str
    username: str
    rating: int
    rank: int
    total_games: int
    total_solved: int
    total_crowns: int
    average_guesses: float
    solve_rate: float
    is_active: bool
    last_played: str | None
    recent_games: tuple[RecentGame, ...] = ()


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int
    discord_id: str
    username: str
    rating: int
    total_games: int
    solve_rate: float
    is_active: bool


def _ratio(numerator: int, denominator: int, *, scale: float = 1.0) -> float:
    if denominator <= 0:
        return 0.0
    return round(numerator / denominator * scale, 2)


def build_player_stats(store: PlayerStore, discord_id: str) -> PlayerStats | None:
    """Collect one player's stats; players sharing a rating share a rank."""
    player = store.find_player(discord_id)
    if player is None:
        return None

    return PlayerStats(
        discord_id=player.discord_id,
        username=player.username,
        rating=player.rating,
        rank=store.count_players_rated_above(player.rating) + 1,
        total_games=player.total_games,
        total_solved=player.total_solved,
        total_crowns=player.total_crowns,
        average_guesses=_ratio(player.total_guesses, player.total_games),
        solve_rate=_ratio(player.total_solved, player.total_games, scale=100.0),
        is_active=player.is_active,
        last_played=player.last_played,
        recent_games=tuple(store.recent_games(player.id, RECENT_GAMES_LIMIT)),
    )


def build_leaderboard(
    store: PlayerStore,
    *,
    limit: int = 10,
    active_only: bool = True,
) -> list[LeaderboardEntry]:
    if limit <= 0:
        raise ValueError("limit must be greater than 0")

    players = store.list_players(active_only=active_only)[:limit]
    return [
        LeaderboardEntry(
            rank=index,
            discord_id=player.discord_id,
            username=player.username,
            rating=player.rating,
            total_games=player.total_games,
            solve_rate=_ratio(player.total_solved, player.total_games, scale=100.0),
            is_active=player.is_active,
        )
        for index, player in enumerate(players, start=1)
    ]


__all__ = ["LeaderboardEntry", "PlayerStats", "build_leaderboard", "build_player_stats"]
