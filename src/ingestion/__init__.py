"""Announcement parsing and player identity resolution."""

from ingestion.parser import is_announcer_message, parse_announcement, parse_result_line
from ingestion.resolver import ResolutionOutcome, StaticMemberDirectory, resolve_rows

__all__ = [
    "ResolutionOutcome",
    "StaticMemberDirectory",
    "is_announcer_message",
    "parse_announcement",
    "parse_result_line",
    "resolve_rows",
]
