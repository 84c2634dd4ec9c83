"""players table model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, CheckConstraint, DateTime, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class Player(Base):
    """One ranked player, keyed by platform user id."""

    __tablename__ = "players"
    __table_args__ = (
        CheckConstraint("total_games >= 0", name="ck_players_total_games"),
        CheckConstraint(
            "consecutive_inactive_days >= 0",
            name="ck_players_consecutive_inactive_days",
        ),
        Index("idx_players_rating", "rating"),
        Index("idx_players_active", "is_active"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    discord_id: Mapped[str] = mapped_column(String(32), nullable=False, unique=True, index=True)
    username: Mapped[str] = mapped_column(String(128), nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    total_games: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_solved: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_crowns: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_guesses: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_played: Mapped[str | None] = mapped_column(String(10), nullable=True)
    consecutive_inactive_days: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )
