"""Pickle-based leaderboard repository for file storage."""

import pickle
from pathlib import Path

from puzzleattack.leaderboard.high_score_entry import HighScoreEntry
from puzzleattack.leaderboard.leaderboard_repository_interface import (
    LeaderboardRepositoryInterface,
)


class PickleLeaderboardRepository(LeaderboardRepositoryInterface):
    """Stores the whole leaderboard as one pickled list.

    The parent directory is created on first save, so a fresh install can
    point at a path that doesn't exist yet.
    """

    def __init__(self, leaderboard_path: Path | str):
        self.leaderboard_path = Path(leaderboard_path)

    def save_entries(self, entries: list[HighScoreEntry]) -> None:
        self.leaderboard_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.leaderboard_path, "wb") as f:
            pickle.dump(list(entries), f)

    def load_entries(self) -> list[HighScoreEntry]:
        if not self.leaderboard_path.exists():
            return []

        with open(self.leaderboard_path, "rb") as f:
            entries = pickle.load(f)

        if not isinstance(entries, list):
            raise ValueError(f"Corrupt leaderboard file: {self.leaderboard_path}")
        return entries

    def clear(self) -> None:
        if self.leaderboard_path.exists():
            self.leaderboard_path.unlink()

    def data_exists(self) -> bool:
        return self.leaderboard_path.exists()
