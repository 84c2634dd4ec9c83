"""rating_history table model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class RatingHistory(Base):
    """Post-game rating samples used for rating-over-time views."""

    __tablename__ = "rating_history"
    __table_args__ = (
        Index("idx_rating_history_player", "player_id"),
        Index("idx_rating_history_date", "game_date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    player_id: Mapped[int] = mapped_column(ForeignKey("players.id"), nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    game_date: Mapped[str] = mapped_column(String(10), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )
