"""Factory for creating leaderboard repositories based on storage type."""

from pathlib import Path

from puzzleattack.leaderboard.database_leaderboard_repository import (
    DatabaseLeaderboardRepository,
)
from puzzleattack.leaderboard.leaderboard_repository_interface import (
    LeaderboardRepositoryInterface,
)
from puzzleattack.leaderboard.pickle_leaderboard_repository import (
    PickleLeaderboardRepository,
)


class LeaderboardRepositoryFactory:
    """Factory for creating appropriate leaderboard repository instances."""

    SUPPORTED_TYPES = ("pickle", "database")

    @staticmethod
    def create(
        storage_type: str = "pickle",
        leaderboard_path: Path | None = None,
        board_name: str = "default",
    ) -> LeaderboardRepositoryInterface:
        """Create a leaderboard repository based on storage type.

        Args:
            storage_type: Either "pickle" or "database"
            leaderboard_path: File for pickle storage, defaults to a per-board file
            board_name: Name separating leaderboards (file stem or database key)

        Returns:
            Appropriate repository instance

        Raises:
            ValueError: If storage_type is invalid
        """
        if storage_type == "pickle":
            if leaderboard_path is None:
                leaderboard_path = LeaderboardRepositoryFactory._default_path(board_name)
            return PickleLeaderboardRepository(leaderboard_path)

        elif storage_type == "database":
            return DatabaseLeaderboardRepository(board_name=board_name)

        else:
            raise ValueError(
                f"Invalid storage_type '{storage_type}'. Must be 'pickle' or 'database'"
            )

    @staticmethod
    def get_supported_types() -> list[str]:
        return list(LeaderboardRepositoryFactory.SUPPORTED_TYPES)

    @staticmethod
    def _default_path(board_name: str) -> Path:
        return Path.home() / ".puzzleattack" / f"leaderboard_{board_name}.pkl"
