"""Repository pattern for database operations."""

from typing import Optional

from sqlalchemy.orm import Session

from puzzleattack.database.connection import DatabaseManager
from puzzleattack.database.models import HighScore


class HighScoreRepository:
    def __init__(self, session: Session):
        self.session = session

    def add(self, board_name: str, score: int, highest_combo: int,
            speed_level: int, achieved_at=None) -> HighScore:
        """Add a high score row."""
        row = HighScore(
            board_name=board_name,
            score=score,
            highest_combo=highest_combo,
            speed_level=speed_level,
        )
        if achieved_at is not None:
            row.achieved_at = achieved_at
        self.session.add(row)
        self.session.flush()  # Get ID without committing
        return row

    def get_top(self, board_name: str, limit: int = None) -> list[HighScore]:
        """Get scores for a board, best first."""
        query = (
            self.session.query(HighScore)
            .filter_by(board_name=board_name)
            .order_by(HighScore.score.desc(), HighScore.id)
        )

        if limit is not None:
            query = query.limit(limit)

        return query.all()

    def get_best(self, board_name: str) -> Optional[HighScore]:
        """Get the top score for a board."""
        return (
            self.session.query(HighScore)
            .filter_by(board_name=board_name)
            .order_by(HighScore.score.desc(), HighScore.id)
            .first()
        )

    def count(self, board_name: str) -> int:
        return self.session.query(HighScore).filter_by(board_name=board_name).count()

    def delete_board(self, board_name: str) -> int:
        """Delete every row of a board. Returns the number of rows removed."""
        deleted = (
            self.session.query(HighScore)
            .filter_by(board_name=board_name)
            .delete(synchronize_session=False)
        )
        self.session.flush()
        return deleted


class DatabaseRepository:
    """Main repository that provides access to all sub-repositories.

    A session passed in by the caller is left open on exit; a session the
    repository opened itself is closed.
    """

    def __init__(self, session: Session = None, manager: DatabaseManager = None):
        self._owns_session = session is None
        self.session = session or (manager or DatabaseManager()).get_session()
        self.high_scores = HighScoreRepository(self.session)

    def commit(self):
        """Commit the current transaction."""
        self.session.commit()

    def rollback(self):
        """Rollback the current transaction."""
        self.session.rollback()

    def close(self):
        """Close the session."""
        if self._owns_session:
            self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            self.rollback()
        else:
            self.commit()
        self.close()
