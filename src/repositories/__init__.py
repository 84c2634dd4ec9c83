"""Database repository helpers."""

from repositories.player_repository import SqlAlchemyPlayerStore

__all__ = ["SqlAlchemyPlayerStore"]
