"""daily_summaries table model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, JSONType


class DailySummary(Base):
    """Marks a game date as closed; its presence gates reprocessing."""

    __tablename__ = "daily_summaries"
    __table_args__ = (
        CheckConstraint("participants_count >= 0", name="ck_daily_summaries_participants"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    game_date: Mapped[str] = mapped_column(String(10), nullable=False, unique=True, index=True)
    puzzle_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    participants_count: Mapped[int] = mapped_column(Integer, nullable=False)
    highest_player_ids: Mapped[list[int]] = mapped_column(JSONType, nullable=False, default=list)
    lowest_player_ids: Mapped[list[int]] = mapped_column(JSONType, nullable=False, default=list)
    processed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=False),
        nullable=False,
        server_default=func.now(),
    )
