#!/usr/bin/env python3
"""Show the rating leaderboard."""

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
from domain.stats import build_leaderboard
from repositories import SqlAlchemyPlayerStore

app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    help="Query the top rated players.",
)


@app.command()
def show_leaderboard(
    top_n: Annotated[
        int,
        typer.Option("--top-n", help="Number of players to return."),
    ] = 10,
    include_inactive: Annotated[
        bool,
        typer.Option("--include-inactive", help="Also list players marked inactive."),
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
) -> None:
    """Print players by current rating."""
    if top_n <= 0:
        raise typer.BadParameter("--top-n must be greater than 0")

    config = load_bot_config_or_default(config_path)
    engine = create_db_engine(db_url or config.db_url)
    ensure_schema(engine)
    session_factory = create_session_factory(engine)

    with session_factory() as session:
        entries = build_leaderboard(
            SqlAlchemyPlayerStore(session),
            limit=top_n,
            active_only=not include_inactive,
        )

    if not entries:
        typer.echo("No players found.")
        return

    typer.echo(f"top_n={top_n} include_inactive={include_inactive}")
    for entry in entries:
        status = "" if entry.is_active else " (inactive)"
        typer.echo(
            f"{entry.rank:2d}. {entry.username:<20} "
            f"rating={entry.rating:5d} games={entry.total_games:4d} "
            f"solve_rate={entry.solve_rate:6.2f}%{status}"
        )


if __name__ == "__main__":
    app()
