"""Exceptions raised by the daily results pipeline and its collaborators."""

from __future__ import annotations


class PersistenceError(RuntimeError):
    """A write failed while applying a day's results; nothing was committed."""

    def __init__(self, game_date: str, message: str) -> None:
        super().__init__(f"game_date={game_date}: {message}")
        self.game_date = game_date


class DirectoryLookupError(RuntimeError):
    """The member directory could not answer a lookup."""
