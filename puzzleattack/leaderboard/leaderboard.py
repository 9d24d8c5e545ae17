"""Top-N high score list with persistent storage."""

import logging

from puzzleattack.leaderboard.high_score_entry import HighScoreEntry
from puzzleattack.leaderboard.leaderboard_repository_interface import (
    LeaderboardRepositoryInterface,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_ENTRIES = 10


class Leaderboard:
    """Keeps the best scores sorted descending and trimmed to max_entries.

    Entries are loaded from the repository on construction and written back
    after every change. Storage errors propagate to the caller.
    """

    def __init__(self, repository: LeaderboardRepositoryInterface, max_entries: int = DEFAULT_MAX_ENTRIES):
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.repository = repository
        self.max_entries = max_entries
        self._entries = self._sorted(repository.load_entries())[:max_entries]
        logger.info("Loaded %d high scores. Top score: %d", len(self._entries), self.high_score)

    @property
    def high_score(self) -> int:
        return self._entries[0].score if self._entries else 0

    def entries(self) -> list[HighScoreEntry]:
        return list(self._entries)

    def would_qualify(self, score: int) -> bool:
        return len(self._entries) < self.max_entries or score > self._entries[-1].score

    def add_score(self, score: int, highest_combo: int, speed_level: int) -> int:
        """Insert a score if it qualifies.

        Returns:
            1-based rank of the new entry, or 0 if it did not make the list
        """
        if not self.would_qualify(score):
            logger.info("Score %d did not qualify for leaderboard", score)
            return 0

        new_entry = HighScoreEntry(score, highest_combo, speed_level)
        # Stable sort keeps an earlier equal score ahead of the new one
        entries = self._sorted(self._entries + [new_entry])[: self.max_entries]
        rank = entries.index(new_entry) + 1

        # Storage first so a failed save leaves the board as it was
        self.repository.save_entries(entries)
        self._entries = entries

        if rank == 1:
            logger.info(
                "NEW HIGH SCORE: %d with combo x%d at speed level %d", score, highest_combo, speed_level
            )
        else:
            logger.info("New score added at rank #%d: %d", rank, score)
        return rank

    def reset(self):
        self.repository.clear()
        self._entries = []
        logger.info("All high scores reset")

    @staticmethod
    def _sorted(entries: list[HighScoreEntry]) -> list[HighScoreEntry]:
        return sorted(entries, key=lambda e: e.score, reverse=True)
