"""Abstract interface for leaderboard persistence."""

from abc import ABC, abstractmethod

from puzzleattack.leaderboard.high_score_entry import HighScoreEntry


class LeaderboardRepositoryInterface(ABC):
    """Storage for an ordered list of high score entries."""

    @abstractmethod
    def save_entries(self, entries: list[HighScoreEntry]) -> None:
        """Replace the stored entries with the given list."""
        pass

    @abstractmethod
    def load_entries(self) -> list[HighScoreEntry]:
        """Load stored entries, empty if nothing has been saved yet."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove all stored entries."""
        pass

    @abstractmethod
    def data_exists(self) -> bool:
        """Check if leaderboard data exists in storage."""
        pass
