"""Shared fixtures: an in-memory player store and a small member directory."""

from __future__ import annotations

import copy
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime

import pytest

from domain.common import DirectoryMember, PlayerRecord, RecentGame, is_solved
from domain.ratings.elo.calculator import EloParameters
from ingestion.resolver import StaticMemberDirectory

ANNOUNCER_ID = "1211781489931452447"


@dataclass
class _State:
    players: dict[int, PlayerRecord] = field(default_factory=dict)
    games: list[dict[str, object]] = field(default_factory=list)
    history: list[dict[str, object]] = field(default_factory=list)
    summaries: dict[str, dict[str, object]] = field(default_factory=dict)
    next_id: int = 1


class InMemoryPlayerStore:
    """PlayerStore fake; ``rollback()`` restores the last committed snapshot."""

    def __init__(self) -> None:
        self.state = _State()
        self._committed = copy.deepcopy(self.state)
        self.fail_on: str | None = None
        self.write_calls: list[str] = []
        self.commits = 0
        self.rollbacks = 0

    def _write(self, name: str) -> None:
        self.write_calls.append(name)
        if self.fail_on == name:
            raise RuntimeError(f"simulated failure in {name}")

    def _sorted(self, players) -> list[PlayerRecord]:
        return sorted(players, key=lambda player: (-player.rating, player.id))

    def find_player(self, discord_id: str) -> PlayerRecord | None:
        for player in self.state.players.values():
            if player.discord_id == discord_id:
                return player
        return None

    def create_player(self, discord_id: str, display_name: str, rating: int) -> PlayerRecord:
        self._write("create_player")
        player = PlayerRecord(
            id=self.state.next_id,
            discord_id=discord_id,
            username=display_name,
            rating=rating,
        )
        self.state.players[player.id] = player
        self.state.next_id += 1
        return player

    def update_display_name(self, player_id: int, display_name: str) -> None:
        self._write("update_display_name")
        player = self.state.players[player_id]
        self.state.players[player_id] = replace(player, username=display_name)

    def update_rating_and_counters(
        self,
        player_id: int,
        *,
        new_rating: int,
        guess_count: int,
        game_date: str,
        crowned: bool,
    ) -> None:
        self._write("update_rating_and_counters")
        player = self.state.players[player_id]
        self.state.players[player_id] = replace(
            player,
            rating=new_rating,
            total_games=player.total_games + 1,
            total_solved=player.total_solved + (1 if is_solved(guess_count) else 0),
            total_crowns=player.total_crowns + (1 if crowned else 0),
            total_guesses=player.total_guesses + guess_count,
            last_played=game_date,
            consecutive_inactive_days=0,
            is_active=True,
        )

    def has_game_record(self, player_id: int, game_date: str) -> bool:
        return any(
            game["player_id"] == player_id and game["game_date"] == game_date
            for game in self.state.games
        )

    def record_game(
        self,
        player_id: int,
        *,
        guess_count: int,
        game_date: str,
        rating_before: int,
        rating_after: int,
        puzzle_number: int | None,
    ) -> None:
        self._write("record_game")
        if self.has_game_record(player_id, game_date):
            raise RuntimeError(f"duplicate game for player_id={player_id} on {game_date}")
        self.state.games.append(
            {
                "player_id": player_id,
                "guess_count": guess_count,
                "game_date": game_date,
                "rating_before": rating_before,
                "rating_after": rating_after,
                "rating_change": rating_after - rating_before,
                "puzzle_number": puzzle_number,
            }
        )

    def record_rating_history(self, player_id: int, *, rating: int, game_date: str) -> None:
        self._write("record_rating_history")
        self.state.history.append({"player_id": player_id, "rating": rating, "game_date": game_date})

    def is_date_processed(self, game_date: str) -> bool:
        return game_date in self.state.summaries

    def record_daily_summary(
        self,
        game_date: str,
        *,
        participant_count: int,
        highest_player_ids: Sequence[int],
        lowest_player_ids: Sequence[int],
        puzzle_number: int | None,
    ) -> None:
        self._write("record_daily_summary")
        self.state.summaries[game_date] = {
            "participant_count": participant_count,
            "highest_player_ids": list(highest_player_ids),
            "lowest_player_ids": list(lowest_player_ids),
            "puzzle_number": puzzle_number,
        }

    def players_with_no_game_on(self, game_date: str) -> list[PlayerRecord]:
        return self._sorted(
            player
            for player in self.state.players.values()
            if not self.has_game_record(player.id, game_date)
        )

    def increment_inactive_days(self, player_id: int) -> None:
        self._write("increment_inactive_days")
        player = self.state.players[player_id]
        self.state.players[player_id] = replace(
            player,
            consecutive_inactive_days=player.consecutive_inactive_days + 1,
        )

    def mark_inactive(self, player_id: int) -> None:
        self._write("mark_inactive")
        self.state.players[player_id] = replace(self.state.players[player_id], is_active=False)

    def highest_rated_players(self) -> list[PlayerRecord]:
        active = [player for player in self.state.players.values() if player.is_active]
        if not active:
            return []
        top = max(player.rating for player in active)
        return self._sorted(player for player in active if player.rating == top)

    def lowest_rated_players(self) -> list[PlayerRecord]:
        eligible = [
            player
            for player in self.state.players.values()
            if player.is_active and player.total_games > 0
        ]
        if not eligible:
            return []
        bottom = min(player.rating for player in eligible)
        return self._sorted(player for player in eligible if player.rating == bottom)

    def list_players(self, *, active_only: bool) -> list[PlayerRecord]:
        return self._sorted(
            player
            for player in self.state.players.values()
            if player.is_active or not active_only
        )

    def count_players_rated_above(self, rating: int) -> int:
        return sum(1 for player in self.state.players.values() if player.rating > rating)

    def recent_games(self, player_id: int, limit: int) -> list[RecentGame]:
        games = sorted(
            (game for game in self.state.games if game["player_id"] == player_id),
            key=lambda game: str(game["game_date"]),
            reverse=True,
        )
        return [
            RecentGame(
                game_date=str(game["game_date"]),
                guess_count=int(game["guess_count"]),
                rating_change=int(game["rating_change"]),
            )
            for game in games[:limit]
        ]

    def reset_all(self) -> None:
        self._write("reset_all")
        self.state = _State()

    def commit(self) -> None:
        self.commits += 1
        self._committed = copy.deepcopy(self.state)

    def rollback(self) -> None:
        self.rollbacks += 1
        self.state = copy.deepcopy(self._committed)

    def seed_player(self, discord_id: str, username: str, **values) -> PlayerRecord:
        """Insert a committed player directly, bypassing the write log."""
        player = PlayerRecord(id=self.state.next_id, discord_id=discord_id, username=username, **values)
        self.state.players[player.id] = player
        self.state.next_id += 1
        self.commit()
        return player


@pytest.fixture
def store() -> InMemoryPlayerStore:
    return InMemoryPlayerStore()


@pytest.fixture
def directory() -> StaticMemberDirectory:
    return StaticMemberDirectory(
        [
            DirectoryMember(discord_id="111", username="alice", display_name="Alice A"),
            DirectoryMember(discord_id="222", username="bob", nickname="bobby"),
            DirectoryMember(discord_id="333", username="carol"),
            DirectoryMember(discord_id="444", username="dave", display_name="Dave"),
            DirectoryMember(discord_id="555", username="erin"),
        ]
    )


@pytest.fixture
def elo_params() -> EloParameters:
    return EloParameters(default_rating=1000, k_factor=32.0, scale_factor=400.0)


@pytest.fixture
def posted_at() -> datetime:
    return datetime(2024, 3, 15, 9, 30, tzinfo=UTC)
