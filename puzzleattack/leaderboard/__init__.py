"""
Leaderboard storage for human high scores.

Leaderboard holds the ranking rules; repositories decide where the entries
live (pickle file or SQL database).
"""

from .high_score_entry import HighScoreEntry
from .leaderboard import Leaderboard
from .leaderboard_repository_interface import LeaderboardRepositoryInterface
from .pickle_leaderboard_repository import PickleLeaderboardRepository
from .database_leaderboard_repository import DatabaseLeaderboardRepository
from .leaderboard_repository_factory import LeaderboardRepositoryFactory

__all__ = [
    'HighScoreEntry',
    'Leaderboard',
    'LeaderboardRepositoryInterface',
    'PickleLeaderboardRepository',
    'DatabaseLeaderboardRepository',
    'LeaderboardRepositoryFactory',
]
