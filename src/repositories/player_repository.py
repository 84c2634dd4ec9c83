"""SQLAlchemy-backed store for players, games and daily summaries."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import delete, exists, func, insert, select, update
from sqlalchemy.orm import Session

from domain.common import PlayerRecord, RecentGame, is_solved
from models import DailySummary, GameRecord, Player, RatingHistory


def _to_record(player: Player) -> PlayerRecord:
    return PlayerRecord(
        id=player.id,
        discord_id=player.discord_id,
        username=player.username,
        rating=player.rating,
        total_games=player.total_games,
        total_solved=player.total_solved,
        total_crowns=player.total_crowns,
        total_guesses=player.total_guesses,
        last_played=player.last_played,
        consecutive_inactive_days=player.consecutive_inactive_days,
        is_active=player.is_active,
    )


class SqlAlchemyPlayerStore:
    """``PlayerStore`` over one SQLAlchemy session.

    Writes are issued as statements right away so later reads in the same
    transaction see them; nothing is durable until ``commit()``.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def _select_players(self, *conditions) -> list[PlayerRecord]:
        statement = (
            select(Player)
            .where(*conditions)
            .order_by(Player.rating.desc(), Player.id)
            .execution_options(populate_existing=True)
        )
        return [_to_record(player) for player in self.session.execute(statement).scalars()]

    def _update_player(self, player_id: int, **values) -> None:
        result = self.session.execute(
            update(Player)
            .where(Player.id == player_id)
            .values(updated_at=func.now(), **values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise ValueError(f"player_id={player_id} does not exist")

    def find_player(self, discord_id: str) -> PlayerRecord | None:
        players = self._select_players(Player.discord_id == discord_id)
        return players[0] if players else None

    def create_player(self, discord_id: str, display_name: str, rating: int) -> PlayerRecord:
        player = Player(
            discord_id=discord_id,
            username=display_name,
            rating=rating,
            total_games=0,
            total_solved=0,
            total_crowns=0,
            total_guesses=0,
            consecutive_inactive_days=0,
            is_active=True,
        )
        self.session.add(player)
        self.session.flush()
        return _to_record(player)

    def update_display_name(self, player_id: int, display_name: str) -> None:
        self._update_player(player_id, username=display_name)

    def update_rating_and_counters(
        self,
        player_id: int,
        *,
        new_rating: int,
        guess_count: int,
        game_date: str,
        crowned: bool,
    ) -> None:
        self._update_player(
            player_id,
            rating=new_rating,
            total_games=Player.total_games + 1,
            total_solved=Player.total_solved + (1 if is_solved(guess_count) else 0),
            total_crowns=Player.total_crowns + (1 if crowned else 0),
            total_guesses=Player.total_guesses + guess_count,
            last_played=game_date,
            consecutive_inactive_days=0,
            is_active=True,
        )

    def has_game_record(self, player_id: int, game_date: str) -> bool:
        statement = select(
            exists().where(GameRecord.player_id == player_id, GameRecord.game_date == game_date)
        )
        return bool(self.session.scalar(statement))

    def record_game(
        self,
        player_id: int,
        *,
        guess_count: int,
        game_date: str,
        rating_before: int,
        rating_after: int,
        puzzle_number: int | None,
    ) -> None:
        self.session.execute(
            insert(GameRecord).values(
                player_id=player_id,
                guess_count=guess_count,
                game_date=game_date,
                puzzle_number=puzzle_number,
                rating_change=rating_after - rating_before,
                rating_before=rating_before,
                rating_after=rating_after,
            )
        )

    def record_rating_history(self, player_id: int, *, rating: int, game_date: str) -> None:
        self.session.execute(
            insert(RatingHistory).values(player_id=player_id, rating=rating, game_date=game_date)
        )

    def is_date_processed(self, game_date: str) -> bool:
        statement = select(exists().where(DailySummary.game_date == game_date))
        return bool(self.session.scalar(statement))

    def record_daily_summary(
        self,
        game_date: str,
        *,
        participant_count: int,
        highest_player_ids: Sequence[int],
        lowest_player_ids: Sequence[int],
        puzzle_number: int | None,
    ) -> None:
        self.session.execute(
            insert(DailySummary).values(
                game_date=game_date,
                puzzle_number=puzzle_number,
                participants_count=participant_count,
                highest_player_ids=list(highest_player_ids),
                lowest_player_ids=list(lowest_player_ids),
            )
        )

    def players_with_no_game_on(self, game_date: str) -> list[PlayerRecord]:
        played = exists().where(GameRecord.player_id == Player.id, GameRecord.game_date == game_date)
        return self._select_players(~played)

    def increment_inactive_days(self, player_id: int) -> None:
        self._update_player(
            player_id,
            consecutive_inactive_days=Player.consecutive_inactive_days + 1,
        )

    def mark_inactive(self, player_id: int) -> None:
        self._update_player(player_id, is_active=False)

    def highest_rated_players(self) -> list[PlayerRecord]:
        """All active players sharing the top rating."""
        top_rating = (
            select(func.max(Player.rating)).where(Player.is_active.is_(True)).scalar_subquery()
        )
        return self._select_players(Player.is_active.is_(True), Player.rating == top_rating)

    def lowest_rated_players(self) -> list[PlayerRecord]:
        """All active players with at least one game sharing the bottom rating."""
        eligible = (Player.is_active.is_(True), Player.total_games > 0)
        bottom_rating = select(func.min(Player.rating)).where(*eligible).scalar_subquery()
        return self._select_players(*eligible, Player.rating == bottom_rating)

    def list_players(self, *, active_only: bool) -> list[PlayerRecord]:
        if active_only:
            return self._select_players(Player.is_active.is_(True))
        return self._select_players()

    def count_players_rated_above(self, rating: int) -> int:
        result = self.session.scalar(select(func.count(Player.id)).where(Player.rating > rating))
        return int(result or 0)

    def recent_games(self, player_id: int, limit: int) -> list[RecentGame]:
        statement = (
            select(GameRecord.game_date, GameRecord.guess_count, GameRecord.rating_change)
            .where(GameRecord.player_id == player_id)
            .order_by(GameRecord.game_date.desc())
            .limit(limit)
        )
        return [
            RecentGame(
                game_date=row.game_date,
                guess_count=row.guess_count,
                rating_change=row.rating_change,
            )
            for row in self.session.execute(statement)
        ]

    def reset_all(self) -> None:
        """Delete every ranked row, children before parents."""
        for model in (RatingHistory, GameRecord, DailySummary, Player):
            self.session.execute(delete(model))

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


__all__ = ["SqlAlchemyPlayerStore"]
