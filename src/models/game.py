"""games table model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class GameRecord(Base):
    """Audit row for one player's rated game on one day."""

    __tablename__ = "games"
    __table_args__ = (
        UniqueConstraint("player_id", "game_date", name="uq_games_player_date"),
        CheckConstraint("guess_count BETWEEN 1 AND 7", name="ck_games_guess_count"),
        CheckConstraint(
            "rating_change = rating_after - rating_before",
            name="ck_games_rating_change",
        ),
        Index("idx_games_player", "player_id"),
        Index("idx_games_date", "game_date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    player_id: Mapped[int] = mapped_column(ForeignKey("players.id"), nullable=False)
    guess_count: Mapped[int] = mapped_column(Integer, nullable=False)
    game_date: Mapped[str] = mapped_column(String(10), nullable=False)
    puzzle_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    rating_change: Mapped[int] = mapped_column(Integer, nullable=False)
    rating_before: Mapped[int] = mapped_column(Integer, nullable=False)
    rating_after: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )
