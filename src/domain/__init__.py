"""Daily results domain modules."""

from domain.common import (
    FAILED_GUESS_COUNT,
    Announcement,
    ParsedAnnouncement,
    PlayerRecord,
    ResolvedResult,
    ResultRow,
)
from domain.exceptions import DirectoryLookupError, PersistenceError

__all__ = [
    "FAILED_GUESS_COUNT",
    "Announcement",
    "DirectoryLookupError",
    "ParsedAnnouncement",
    "PersistenceError",
    "PlayerRecord",
    "ResolvedResult",
    "ResultRow",
]
