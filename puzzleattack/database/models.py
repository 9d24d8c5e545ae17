"""SQLAlchemy ORM models for Puzzle Attack persistence."""

from datetime import datetime

from sqlalchemy import Column, DateTime, Index, Integer, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class HighScore(Base):
    __tablename__ = "high_scores"

    id = Column(Integer, primary_key=True, autoincrement=True)
    board_name = Column(String(100), nullable=False, default="default")
    score = Column(Integer, nullable=False)
    highest_combo = Column(Integer, nullable=False, default=0)
    speed_level = Column(Integer, nullable=False, default=1)
    achieved_at = Column(DateTime, default=datetime.now)

    # Leaderboards are always read best-first per board
    __table_args__ = (Index("ix_high_scores_board_score", "board_name", "score"),)

    def __repr__(self) -> str:
        return f"<HighScore({self.board_name}, score={self.score}, combo={self.highest_combo})>"
