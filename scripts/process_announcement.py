#!/usr/bin/env python3
"""Apply one daily Wordle results announcement to the ranked database."""

from __future__ import annotations

import json
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import create_db_engine, create_session_factory, ensure_schema
from domain.common import Announcement, is_solved
from domain.config import load_bot_config_or_default
from domain.exceptions import PersistenceError
from domain.pipeline import DailyProcessingResult, DailyResultsPipeline
from ingestion.resolver import StaticMemberDirectory
from logging_setup import setup_logging
from repositories import SqlAlchemyPlayerStore

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Daily results processing jobs.",
)


def _load_members(members_file: Path) -> StaticMemberDirectory:
    with members_file.open("r", encoding="utf-8") as file:
        records = json.load(file)
    if not isinstance(records, list):
        raise typer.BadParameter("--members must contain a JSON list of member objects")
    try:
        return StaticMemberDirectory.from_records(records)
    except ValueError as exc:
        raise typer.BadParameter(f"--members: {exc}") from exc


def _parse_posted_at(value: str | None) -> datetime:
    if value is None:
        return datetime.now(UTC)
    try:
        posted_at = datetime.fromisoformat(value)
    except ValueError as exc:
        raise typer.BadParameter("--posted-at must be an ISO-8601 timestamp") from exc
    if posted_at.tzinfo is None:
        posted_at = posted_at.replace(tzinfo=UTC)
    return posted_at


def _echo_result(result: DailyProcessingResult) -> None:
    typer.echo(f"status={result.status.value} game_date={result.game_date}")
    if result.unresolved:
        typer.echo(f"unresolved={', '.join(result.unresolved)}")

    summary = result.summary
    if summary is None:
        return

    typer.echo(
        f"participants={summary.participant_count} "
        f"puzzle_number={summary.puzzle_number} "
        f"marked_inactive={summary.players_marked_inactive}"
    )
    for change in sorted(summary.rating_changes, key=lambda item: item.guess_count):
        score = f"{change.guess_count}/6" if is_solved(change.guess_count) else "X/6"
        crown = " crown" if change.crowned else ""
        typer.echo(
            f"  {change.display_name:<20} {score}{crown:<6} "
            f"rating={change.rating_before:5d} -> {change.rating_after:5d} "
            f"({change.rating_change:+d})"
        )
    typer.echo("highest: " + ", ".join(f"{p.username} ({p.rating})" for p in summary.highest_players))
    typer.echo("lowest: " + ", ".join(f"{p.username} ({p.rating})" for p in summary.lowest_players))


@app.command("process")
def process_announcement(
    message_file: Annotated[
        Path,
        typer.Argument(help="Text file holding the announcement message content."),
    ],
    members_file: Annotated[
        Path,
        typer.Option(
            "--members",
            help="JSON list of guild members: id, username, display_name, nickname.",
        ),
    ],
    posted_at: Annotated[
        str | None,
        typer.Option(
            "--posted-at",
            help="Message timestamp (ISO-8601). Defaults to now; results belong to the day before.",
        ),
    ] = None,
    author_id: Annotated[
        str | None,
        typer.Option(
            "--author-id",
            help="Message author id. Defaults to the configured announcer.",
        ),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option("--config", envvar="WORDLE_RANKED_CONFIG", help="Bot config TOML file."),
    ] = None,
    db_url: Annotated[
        str | None,
        typer.Option(
            "--db-url",
            envvar="WORDLE_RANKED_DB_URL",
            help="Database URL. Overrides [database].url from the config file.",
        ),
    ] = None,
    log_level: Annotated[str, typer.Option("--log-level")] = "INFO",
) -> None:
    """Parse, resolve and rate one announcement; re-running a date is a no-op."""
    try:
        setup_logging(log_level)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    config = load_bot_config_or_default(config_path)
    directory = _load_members(members_file)
    announcement = Announcement(
        content=message_file.read_text(encoding="utf-8"),
        author_id=author_id or config.announcer_id or "",
        posted_at=_parse_posted_at(posted_at),
    )

    engine = create_db_engine(db_url or config.db_url)
    ensure_schema(engine)
    session_factory = create_session_factory(engine)

    with session_factory() as session:
        pipeline = DailyResultsPipeline(
            store=SqlAlchemyPlayerStore(session),
            directory=directory,
            elo_params=config.elo,
            inactivity_threshold=config.inactivity_threshold,
            announcer_id=config.announcer_id,
        )
        try:
            result = pipeline.process_announcement(announcement)
        except PersistenceError as exc:
            typer.echo(f"failed: {exc}", err=True)
            raise typer.Exit(code=1) from exc

    _echo_result(result)


if __name__ == "__main__":
    app()
