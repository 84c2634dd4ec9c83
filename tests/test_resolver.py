"""Tests for resolving result rows against the member directory."""

from __future__ import annotations

import pytest

from domain.common import DirectoryMember, ResolvedResult, ResultRow
from domain.exceptions import DirectoryLookupError
from domain.protocol import MemberDirectory
from ingestion.resolver import StaticMemberDirectory, resolve_rows


class _FlakyDirectory:
    def __init__(self, inner: StaticMemberDirectory, failing_id: str) -> None:
        self.inner = inner
        self.failing_id = failing_id

    def resolve_by_id(self, discord_id: str) -> str | None:
        if discord_id == self.failing_id:
            raise DirectoryLookupError("gateway timeout")
        return self.inner.resolve_by_id(discord_id)

    def find_by_name(self, name: str) -> DirectoryMember | None:
        return self.inner.find_by_name(name)


def test_static_directory_satisfies_protocol(directory: StaticMemberDirectory) -> None:
    assert isinstance(directory, MemberDirectory)
    assert len(directory) == 5


def test_find_by_name_matches_username_display_name_and_nickname(
    directory: StaticMemberDirectory,
) -> None:
    assert directory.find_by_name("ALICE").discord_id == "111"
    assert directory.find_by_name("alice a").discord_id == "111"
    assert directory.find_by_name("Bobby").discord_id == "222"
    assert directory.find_by_name("mallory") is None


def test_username_match_wins_over_other_members_display_name() -> None:
    directory = StaticMemberDirectory(
        [
            DirectoryMember(discord_id="1", username="zed", display_name="sam"),
            DirectoryMember(discord_id="2", username="sam"),
        ]
    )
    assert directory.find_by_name("sam").discord_id == "2"


def test_resolve_rows_confirms_mentions_and_bare_names(directory: StaticMemberDirectory) -> None:
    outcome = resolve_rows(
        [
            ResultRow(guess_count=2, discord_id="111", crowned=True),
            ResultRow(guess_count=4, username="bobby"),
        ],
        directory,
    )

    assert outcome.resolved == (
        ResolvedResult(discord_id="111", display_name="alice", guess_count=2, crowned=True),
        ResolvedResult(discord_id="222", display_name="bob", guess_count=4),
    )
    assert outcome.unresolved == ()


def test_unresolvable_rows_are_dropped_and_reported(
    directory: StaticMemberDirectory,
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level("WARNING", logger="ingestion.resolver"):
        outcome = resolve_rows(
            [
                ResultRow(guess_count=3, discord_id="999"),
                ResultRow(guess_count=3, username="ghost"),
                ResultRow(guess_count=5, discord_id="333"),
            ],
            directory,
        )

    assert [result.discord_id for result in outcome.resolved] == ["333"]
    assert outcome.unresolved == ("<@999>", "@ghost")
    assert outcome.unresolved_count == 2
    assert "2 results could not be resolved" in caplog.text


def test_directory_failure_only_drops_that_row(directory: StaticMemberDirectory) -> None:
    outcome = resolve_rows(
        [
            ResultRow(guess_count=3, discord_id="111"),
            ResultRow(guess_count=4, discord_id="222"),
        ],
        _FlakyDirectory(directory, failing_id="111"),
    )

    assert [result.discord_id for result in outcome.resolved] == ["222"]
    assert outcome.unresolved == ("<@111>",)


def test_player_named_twice_keeps_first_result(directory: StaticMemberDirectory) -> None:
    outcome = resolve_rows(
        [
            ResultRow(guess_count=2, discord_id="111"),
            ResultRow(guess_count=5, username="alice"),
        ],
        directory,
    )

    assert len(outcome.resolved) == 1
    assert outcome.resolved[0].guess_count == 2


def test_from_records_builds_directory_and_validates() -> None:
    directory = StaticMemberDirectory.from_records(
        [{"id": 42, "username": "quinn", "nickname": "Q"}]
    )
    assert directory.resolve_by_id("42") == "quinn"
    assert directory.find_by_name("q").discord_id == "42"

    with pytest.raises(ValueError, match="member #0"):
        StaticMemberDirectory.from_records([{"username": "nobody"}])


def test_unexpected_directory_error_only_drops_that_row(
    directory: StaticMemberDirectory,
    caplog: pytest.LogCaptureFixture,
) -> None:
    class _BrokenNameLookup(_FlakyDirectory):
        def find_by_name(self, name: str) -> DirectoryMember | None:
            if name == "ghost":
                raise ConnectionError("gateway down")
            return self.inner.find_by_name(name)

    with caplog.at_level("WARNING", logger="ingestion.resolver"):
        outcome = resolve_rows(
            [
                ResultRow(guess_count=2, discord_id="111"),
                ResultRow(guess_count=3, username="ghost"),
                ResultRow(guess_count=4, username="bob"),
            ],
            _BrokenNameLookup(directory, failing_id="none"),
        )

    assert [result.discord_id for result in outcome.resolved] == ["111", "222"]
    assert outcome.unresolved == ("@ghost",)
    assert "Unexpected directory error for @ghost" in caplog.text
    assert "ConnectionError" in caplog.text
