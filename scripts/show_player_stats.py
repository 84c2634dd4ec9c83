#!/usr/bin/env python3
"""Show one player's rating and game statistics."""

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
from domain.common import is_solved
from domain.config import load_bot_config_or_default
from domain.stats import build_player_stats
from repositories import SqlAlchemyPlayerStore

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Query stats for a single player.",
)


@app.command()
def show_player_stats(
    discord_id: Annotated[str, typer.Argument(help="Platform user id of the player.")],
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
    """Print rating, rank, totals and the last few games for one player."""
    config = load_bot_config_or_default(config_path)
    engine = create_db_engine(db_url or config.db_url)
    ensure_schema(engine)
    session_factory = create_session_factory(engine)

    with session_factory() as session:
        stats = build_player_stats(SqlAlchemyPlayerStore(session), discord_id)

    if stats is None:
        typer.echo(f"No player found with id {discord_id}.")
        raise typer.Exit(code=1)

    typer.echo(f"{stats.username} ({stats.discord_id})")
    typer.echo(
        f"rating={stats.rating} rank={stats.rank} "
        f"active={stats.is_active} last_played={stats.last_played}"
    )
    typer.echo(
        f"games={stats.total_games} solved={stats.total_solved} "
        f"crowns={stats.total_crowns} "
        f"avg_guesses={stats.average_guesses:.2f} solve_rate={stats.solve_rate:.2f}%"
    )
    for game in stats.recent_games:
        score = f"{game.guess_count}/6" if is_solved(game.guess_count) else "X/6"
        typer.echo(f"  {game.game_date} {score} ({game.rating_change:+d})")


if __name__ == "__main__":
    app()
