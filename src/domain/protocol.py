"""Collaborator contracts consumed by the daily results pipeline."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from domain.common import DirectoryMember, PlayerRecord, RecentGame


@runtime_checkable
class MemberDirectory(Protocol):
    """Guild member lookups used to confirm player identities."""

    def resolve_by_id(self, discord_id: str) -> str | None: ...

    def find_by_name(self, name: str) -> DirectoryMember | None: ...


@runtime_checkable
class PlayerStore(Protocol):
    """Transactional repository for players, games and daily summaries.

    Writes become durable on ``commit()``; ``rollback()`` discards everything
    since the last commit.
    """

    def find_player(self, discord_id: str) -> PlayerRecord | None: ...

    def create_player(self, discord_id: str, display_name: str, rating: int) -> PlayerRecord: ...

    def update_display_name(self, player_id: int, display_name: str) -> None: ...

    def update_rating_and_counters(
        self,
        player_id: int,
        *,
        new_rating: int,
        guess_count: int,
        game_date: str,
        crowned: bool,
    ) -> None: ...

    def has_game_record(self, player_id: int, game_date: str) -> bool: ...

    def record_game(
        self,
        player_id: int,
        *,
        guess_count: int,
        game_date: str,
        rating_before: int,
        rating_after: int,
        puzzle_number: int | None,
    ) -> None: ...

    def record_rating_history(self, player_id: int, *, rating: int, game_date: str) -> None: ...

    def is_date_processed(self, game_date: str) -> bool: ...

    def record_daily_summary(
        self,
        game_date: str,
        *,
        participant_count: int,
        highest_player_ids: Sequence[int],
        lowest_player_ids: Sequence[int],
        puzzle_number: int | None,
    ) -> None: ...

    def players_with_no_game_on(self, game_date: str) -> list[PlayerRecord]: ...

    def increment_inactive_days(self, player_id: int) -> None: ...

    def mark_inactive(self, player_id: int) -> None: ...

    def highest_rated_players(self) -> list[PlayerRecord]: ...

    def lowest_rated_players(self) -> list[PlayerRecord]: ...

    def list_players(self, *, active_only: bool) -> list[PlayerRecord]: ...

    def count_players_rated_above(self, rating: int) -> int: ...

    def recent_games(self, player_id: int, limit: int) -> list[RecentGame]: ...

    def reset_all(self) -> None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


__all__ = ["MemberDirectory", "PlayerStore"]
