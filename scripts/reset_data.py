#!/usr/bin/env python3
"""Delete all players, games, rating history and daily summaries."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import create_db_engine, create_session_factory, ensure_schema
from domain.config import load_bot_config_or_default
from logging_setup import setup_logging
from repositories import SqlAlchemyPlayerStore

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Ranked data maintenance.",
)


@app.command("reset")
def reset_data(
    yes: Annotated[
        bool,
        typer.Option("--yes", help="Confirm deleting every ranked row."),
    ] = False,
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
    """Wipe all ranked data in one transaction."""
    if not yes:
        raise typer.BadParameter("refusing to delete data without --yes")
    try:
        setup_logging(log_level)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    config = load_bot_config_or_default(config_path)
    engine = create_db_engine(db_url or config.db_url)
    ensure_schema(engine)
    session_factory = create_session_factory(engine)

    with session_factory() as session:
        store = SqlAlchemyPlayerStore(session)
        try:
            store.reset_all()
            store.commit()
        except Exception:
            store.rollback()
            raise

    typer.echo("completed reset of players, games, rating_history and daily_summaries")


if __name__ == "__main__":
    app()
