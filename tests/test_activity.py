"""Tests for inactivity tracking."""

from __future__ import annotations

import pytest

from domain.activity import update_player_activity

from conftest import InMemoryPlayerStore


def test_players_without_a_game_age_by_one_day(store: InMemoryPlayerStore) -> None:
    played = store.seed_player("111", "alice", rating=1000)
    store.seed_player("222", "bob", rating=1000, consecutive_inactive_days=0)
    store.record_game(
        played.id,
        guess_count=3,
        game_date="2024-03-14",
        rating_before=1000,
        rating_after=1000,
        puzzle_number=None,
    )

    result = update_player_activity(store, "2024-03-14", inactivity_threshold=3)

    assert result.players_marked_inactive == 0
    assert result.players_not_marked_inactive == 1
    assert store.find_player("111").consecutive_inactive_days == 0
    assert store.find_player("222").consecutive_inactive_days == 1


def test_player_reaching_threshold_is_marked_inactive_once(store: InMemoryPlayerStore) -> None:
    store.seed_player("222", "bob", rating=1000, consecutive_inactive_days=2)
    store.seed_player("333", "carol", rating=1000, consecutive_inactive_days=7, is_active=False)

    result = update_player_activity(store, "2024-03-14", inactivity_threshold=3)

    assert result.players_marked_inactive == 1
    assert result.players_not_marked_inactive == 1
    assert not store.find_player("222").is_active
    carol = store.find_player("333")
    assert carol.consecutive_inactive_days == 8
    assert store.write_calls.count("mark_inactive") == 1


def test_threshold_below_one_is_rejected(store: InMemoryPlayerStore) -> None:
    with pytest.raises(ValueError, match="inactivity_threshold"):
        update_player_activity(store, "2024-03-14", inactivity_threshold=0)
