"""Database package for Puzzle Attack leaderboards."""

from puzzleattack.database.connection import DatabaseConfig, DatabaseManager
from puzzleattack.database.models import Base, HighScore
from puzzleattack.database.repository import DatabaseRepository, HighScoreRepository

__all__ = [
    "DatabaseConfig",
    "DatabaseManager",
    "DatabaseRepository",
    "HighScoreRepository",
    "Base",
    "HighScore",
]
