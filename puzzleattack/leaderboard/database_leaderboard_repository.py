"""Database-backed leaderboard repository."""

from sqlalchemy.orm import Session

from puzzleattack.database import DatabaseManager, DatabaseRepository
from puzzleattack.leaderboard.high_score_entry import HighScoreEntry
from puzzleattack.leaderboard.leaderboard_repository_interface import (
    LeaderboardRepositoryInterface,
)


class DatabaseLeaderboardRepository(LeaderboardRepositoryInterface):
    """Stores leaderboard rows in the high_scores table, one board per name."""

    def __init__(
        self,
        board_name: str = "default",
        session: Session | None = None,
        manager: DatabaseManager | None = None,
    ):
        """
        Args:
            board_name: Separates leaderboards that share one database
            session: Existing session to reuse (tests pass an in-memory one)
            manager: Connection manager used when no session is given
        """
        self.board_name = board_name
        self._session = session
        self._manager = manager

    def _repository(self) -> DatabaseRepository:
        return DatabaseRepository(session=self._session, manager=self._manager)

    def save_entries(self, entries: list[HighScoreEntry]) -> None:
        with self._repository() as repo:
            repo.high_scores.delete_board(self.board_name)
            for entry in entries:
                repo.high_scores.add(
                    board_name=self.board_name,
                    score=entry.score,
                    highest_combo=entry.highest_combo,
                    speed_level=entry.speed_level,
                    achieved_at=entry.date,
                )

    def load_entries(self) -> list[HighScoreEntry]:
        with self._repository() as repo:
            return [
                HighScoreEntry(
                    score=row.score,
                    highest_combo=row.highest_combo,
                    speed_level=row.speed_level,
                    date=row.achieved_at,
                )
                for row in repo.high_scores.get_top(self.board_name)
            ]

    def clear(self) -> None:
        with self._repository() as repo:
            repo.high_scores.delete_board(self.board_name)

    def data_exists(self) -> bool:
        with self._repository() as repo:
            return repo.high_scores.count(self.board_name) > 0
