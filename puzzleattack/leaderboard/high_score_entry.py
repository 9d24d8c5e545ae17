"""Leaderboard entry data structure."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(eq=False)
class HighScoreEntry:
    """A single leaderboard row.

    Compared by identity so that two equal scores are still told apart when
    looking up the rank of a freshly added entry.
    """

    score: int
    highest_combo: int
    speed_level: int
    date: datetime = field(default_factory=lambda: datetime.now().replace(microsecond=0))

    def formatted_date(self) -> str:
        return self.date.strftime("%Y-%m-%d %H:%M")
