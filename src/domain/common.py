"""Shared value types for announcement processing."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

MAX_SOLVED_GUESS_COUNT = 6
# "X/6" results are stored as one more than the worst solve so they sort last.
FAILED_GUESS_COUNT = MAX_SOLVED_GUESS_COUNT + 1


def is_solved(guess_count: int) -> bool:
    return 1 <= guess_count <= MAX_SOLVED_GUESS_COUNT


@dataclass(frozen=True)
class Announcement:
    """Raw chat message as handed over by the gateway."""

    content: str
    author_id: str
    posted_at: datetime


@dataclass(frozen=True)
class ResultRow:
    """One player reference found on a result line.

    Exactly one of ``discord_id`` (structured mention) or ``username`` (bare
    ``@name``) is set.
    """

    guess_count: int
    discord_id: str | None = None
    username: str | None = None
    crowned: bool = False

    def __post_init__(self) -> None:
        if (self.discord_id is None) == (self.username is None):
            raise ValueError("ResultRow needs exactly one of discord_id or username")
        if not 1 <= self.guess_count <= FAILED_GUESS_COUNT:
            raise ValueError(f"guess_count={self.guess_count} is outside 1..{FAILED_GUESS_COUNT}")

    @property
    def identity_hint(self) -> str:
        if self.discord_id is not None:
            return f"<@{self.discord_id}>"
        return f"@{self.username}"


@dataclass(frozen=True)
class ParsedAnnouncement:
    """Structured content of one qualifying results announcement."""

    game_date: str
    rows: tuple[ResultRow, ...]
    puzzle_number: int | None = None
    streak_days: int | None = None


@dataclass(frozen=True)
class DirectoryMember:
    """Guild member as exposed by the member directory."""

    discord_id: str
    username: str
    display_name: str | None = None
    nickname: str | None = None


@dataclass(frozen=True)
class ResolvedResult:
    """A result row whose player identity has been confirmed."""

    discord_id: str
    display_name: str
    guess_count: int
    crowned: bool = False


@dataclass(frozen=True)
class PlayerRecord:
    """Read-only snapshot of a stored player."""

    id: int
    discord_id: str
    username: str
    rating: int
    total_games: int = 0
    total_solved: int = 0
    total_crowns: int = 0
    total_guesses: int = 0
    last_played: str | None = None
    consecutive_inactive_days: int = 0
    is_active: bool = True


@dataclass(frozen=True)
class RecentGame:
    game_date: str
    guess_count: int
    rating_change: int
