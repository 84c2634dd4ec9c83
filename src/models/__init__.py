"""ORM models."""

from models.base import Base
from models.daily_summary import DailySummary
from models.game import GameRecord
from models.player import Player
from models.rating_history import RatingHistory

__all__ = [
    "Base",
    "DailySummary",
    "GameRecord",
    "Player",
    "RatingHistory",
]
