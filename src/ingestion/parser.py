"""Parse the Wordle bot's daily results announcement.

Expected message shape::

    **Your group is on an 85 day streak!** 🔥 Here are yesterday's results:
    👑 2/6: @brollen <@297641031401209857>
    4/6: <@1232894750080761869>
    5/6: <@371221596649684993> <@245940683221762048>
    X/6: <@245971590179717121>

The announcement is posted the morning after, so results belong to the day
before the message timestamp.
"""

from __future__ import annotations

import logging
import re
from datetime import UTC, datetime, timedelta

from domain.common import FAILED_GUESS_COUNT, ParsedAnnouncement, ResultRow

logger = logging.getLogger(__name__)

STREAK_RE = re.compile(r"(?:\*\*)?Your group is on an? (\d+) day streak!(?:\*\*)?", re.IGNORECASE)
RESULT_LINE_RE = re.compile(r"^(👑\s*)?([1-6x])/6:\s*(.+)$", re.IGNORECASE)
MENTION_RE = re.compile(r"<@!?(\d+)>")
BARE_NAME_RE = re.compile(r"@(\w+)")
PUZZLE_NUMBER_RE = re.compile(r"\bWordle\s+#?(\d{1,3}(?:,\d{3})+|\d+)\b", re.IGNORECASE)


def is_announcer_message(author_id: str, announcer_id: str | None) -> bool:
    """Only the configured results bot may trigger processing; ``None`` accepts anyone."""
    if announcer_id is None:
        return True
    return author_id == announcer_id


def extract_streak_days(content: str) -> int | None:
    match = STREAK_RE.search(content)
    if match is None:
        return None
    return int(match.group(1))


def extract_puzzle_number(content: str) -> int | None:
    match = PUZZLE_NUMBER_RE.search(content)
    if match is None:
        return None
    return int(match.group(1).replace(",", ""))


def game_date_for(posted_at: datetime) -> str:
    """Return the ``YYYY-MM-DD`` day a message posted at ``posted_at`` reports on."""
    if posted_at.tzinfo is not None:
        posted_at = posted_at.astimezone(UTC)
    return (posted_at.date() - timedelta(days=1)).isoformat()


def _overlaps(start: int, end: int, spans: list[tuple[int, int]]) -> bool:
    return any(start < span_end and end > span_start for span_start, span_end in spans)


def parse_result_line(line: str) -> list[ResultRow] | None:
    """Extract player rows from one result line.

    Returns ``None`` when the line is not a result line at all and an empty
    list when it is one but names nobody.
    """
    line_match = RESULT_LINE_RE.match(line.strip())
    if line_match is None:
        return None

    crowned = line_match.group(1) is not None
    guess_token = line_match.group(2).lower()
    guess_count = FAILED_GUESS_COUNT if guess_token == "x" else int(guess_token)
    players_section = line_match.group(3)

    rows: list[ResultRow] = []
    mention_spans: list[tuple[int, int]] = []
    for mention in MENTION_RE.finditer(players_section):
        rows.append(ResultRow(guess_count=guess_count, discord_id=mention.group(1), crowned=crowned))
        mention_spans.append(mention.span())

    for bare_name in BARE_NAME_RE.finditer(players_section):
        start, end = bare_name.span()
        if _overlaps(start, end, mention_spans):
            continue
        rows.append(ResultRow(guess_count=guess_count, username=bare_name.group(1), crowned=crowned))
        logger.debug("Found plain username @%s (needs resolution)", bare_name.group(1))

    return rows


def contains_results(content: str) -> bool:
    if STREAK_RE.search(content) is None:
        return False
    return any(RESULT_LINE_RE.match(line.strip()) for line in content.splitlines())


def parse_announcement(content: str, posted_at: datetime) -> ParsedAnnouncement | None:
    """Turn announcement text into result rows, or ``None`` if it is not one."""
    if not contains_results(content):
        logger.debug("Message does not contain daily results")
        return None

    rows: list[ResultRow] = []
    for line in content.splitlines():
        stripped = line.strip()
        if not stripped or STREAK_RE.search(stripped):
            continue

        line_rows = parse_result_line(stripped)
        if line_rows is None:
            continue
        if not line_rows:
            logger.warning("No players found in result line: %s", stripped)
            continue
        rows.extend(line_rows)

    if not rows:
        logger.warning("Daily results message contained no usable result lines")
        return None

    game_date = game_date_for(posted_at)
    streak_days = extract_streak_days(content)
    if streak_days is not None:
        logger.debug("Group streak: %d days", streak_days)

    logger.info("Parsed %d results for %s", len(rows), game_date)
    return ParsedAnnouncement(
        game_date=game_date,
        rows=tuple(rows),
        puzzle_number=extract_puzzle_number(content),
        streak_days=streak_days,
    )


__all__ = [
    "contains_results",
    "extract_puzzle_number",
    "extract_streak_days",
    "game_date_for",
    "is_announcer_message",
    "parse_announcement",
    "parse_result_line",
]
