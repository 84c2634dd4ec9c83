"""Resolve parsed result rows to confirmed player identities."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from domain.common import DirectoryMember, ResolvedResult, ResultRow
from domain.exceptions import DirectoryLookupError
from domain.protocol import MemberDirectory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolutionOutcome:
    """Rows that resolved, in first-seen order, plus the hints that did not."""

    resolved: tuple[ResolvedResult, ...]
    unresolved: tuple[str, ...] = field(default_factory=tuple)

    @property
    def unresolved_count(self) -> int:
        return len(self.unresolved)


class StaticMemberDirectory:
    """In-memory member directory, e.g. loaded from a members export."""

    def __init__(self, members: Iterable[DirectoryMember]) -> None:
        self._members: dict[str, DirectoryMember] = {}
        for member in members:
            self._members[member.discord_id] = member

    def __len__(self) -> int:
        return len(self._members)

    def resolve_by_id(self, discord_id: str) -> str | None:
        member = self._members.get(discord_id)
        if member is None:
            return None
        return member.username

    def find_by_name(self, name: str) -> DirectoryMember | None:
        """Case-insensitive exact match on username, then display name, then nickname."""
        needle = name.casefold()
        for attribute in ("username", "display_name", "nickname"):
            for member in self._members.values():
                value = getattr(member, attribute)
                if value is not None and value.casefold() == needle:
                    return member
        return None

    @classmethod
    def from_records(cls, records: Sequence[dict[str, object]]) -> "StaticMemberDirectory":
        members: list[DirectoryMember] = []
        for index, record in enumerate(records):
            discord_id = str(record.get("id", "")).strip()
            username = str(record.get("username", "")).strip()
            if not discord_id or not username:
                raise ValueError(f"member #{index} needs non-empty 'id' and 'username'")
            display_name = record.get("display_name")
            nickname = record.get("nickname")
            members.append(
                DirectoryMember(
                    discord_id=discord_id,
                    username=username,
                    display_name=None if display_name is None else str(display_name),
                    nickname=None if nickname is None else str(nickname),
                )
            )
        return cls(members)


def _resolve_row(row: ResultRow, directory: MemberDirectory) -> ResolvedResult | None:
    if row.discord_id is not None:
        display_name = directory.resolve_by_id(row.discord_id)
        if display_name is None:
            logger.warning("Could not resolve member id %s", row.discord_id)
            return None
        return ResolvedResult(
            discord_id=row.discord_id,
            display_name=display_name,
            guess_count=row.guess_count,
            crowned=row.crowned,
        )

    assert row.username is not None
    member = directory.find_by_name(row.username)
    if member is None:
        logger.warning("Could not find member matching username @%s", row.username)
        return None
    logger.debug("Resolved @%s to %s (%s)", row.username, member.username, member.discord_id)
    return ResolvedResult(
        discord_id=member.discord_id,
        display_name=member.username,
        guess_count=row.guess_count,
        crowned=row.crowned,
    )


def resolve_rows(rows: Sequence[ResultRow], directory: MemberDirectory) -> ResolutionOutcome:
    """Confirm every row against the directory, dropping the ones that fail.

    A directory failure only costs the row being looked up. A player named
    twice keeps the first occurrence.
    """
    resolved: list[ResolvedResult] = []
    unresolved: list[str] = []
    seen_ids: set[str] = set()

    for row in rows:
        try:
            result = _resolve_row(row, directory)
        except DirectoryLookupError as exc:
            logger.warning("Directory lookup failed for %s: %s", row.identity_hint, exc)
            result = None
        except Exception:
            logger.warning("Unexpected directory error for %s", row.identity_hint, exc_info=True)
            result = None

        if result is None:
            unresolved.append(row.identity_hint)
            continue
        if result.discord_id in seen_ids:
            logger.warning(
                "Player %s listed more than once; keeping the first result",
                result.discord_id,
            )
            continue

        seen_ids.add(result.discord_id)
        resolved.append(result)

    if unresolved:
        logger.warning("%d results could not be resolved: %s", len(unresolved), ", ".join(unresolved))

    return ResolutionOutcome(resolved=tuple(resolved), unresolved=tuple(unresolved))


__all__ = ["ResolutionOutcome", "StaticMemberDirectory", "resolve_rows"]
