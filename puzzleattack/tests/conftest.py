"""
Shared test utilities for Puzzle Attack tests.

Contains fixtures for engines, coordinators and storage plus a small
recorder that captures signal emissions in order.
"""

import tempfile
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from puzzleattack.database.models import Base
from puzzleattack.leaderboard.leaderboard import Leaderboard
from puzzleattack.leaderboard.pickle_leaderboard_repository import PickleLeaderboardRepository
from puzzleattack.match.match_config import GameModeFactory
from puzzleattack.match.match_coordinator import MatchCoordinator
from puzzleattack.scoring.scoring_config import ScoringFactory
from puzzleattack.scoring.scoring_engine import ScoringEngine


class SignalRecorder:
    """Collects (name, args) for every emission of the signals it listens to."""

    def __init__(self):
        self.events = []

    def listen(self, signal, name=None):
        label = name or signal.name
        signal.connect(lambda *args: self.events.append((label, args)))
        return self

    def named(self, name):
        return [args for label, args in self.events if label == name]

    def names(self):
        return [label for label, _ in self.events]


def record_engine(engine: ScoringEngine) -> SignalRecorder:
    recorder = SignalRecorder()
    for signal in (engine.match_scored, engine.combo_started, engine.combo_ended, engine.chain_increased):
        recorder.listen(signal)
    return recorder


def record_coordinator(coordinator: MatchCoordinator) -> SignalRecorder:
    recorder = SignalRecorder()
    for signal in (
        coordinator.player_eliminated,
        coordinator.match_winner,
        coordinator.marathon_game_over,
        coordinator.match_draw,
        coordinator.score_updated,
    ):
        recorder.listen(signal)
    return recorder


@pytest.fixture
def engine():
    return ScoringEngine(ScoringFactory.default())


@pytest.fixture
def temp_dir():
    """Create a temporary directory for storage tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def pickle_leaderboard(temp_dir):
    return Leaderboard(PickleLeaderboardRepository(temp_dir / "scores.pkl"))


@pytest.fixture
def in_memory_db():
    """Create an in-memory SQLite database session for testing."""
    engine = create_engine("sqlite:///:memory:")
    Base.metadata.create_all(engine)
    Session = sessionmaker(bind=engine)
    session = Session()
    yield session
    session.close()


@pytest.fixture
def vs_coordinator():
    """A four player VS coordinator with one engine per slot, player 0 human."""
    coordinator = MatchCoordinator(GameModeFactory.vs_cpu())
    coordinator.initialize_match(4)
    engines = [ScoringEngine(player_index=i) for i in range(4)]
    for i, e in enumerate(engines):
        coordinator.register_player(i, e, is_human=(i == 0))
    return coordinator, engines


@pytest.fixture
def engine_recorder():
    """Returns a function that attaches a SignalRecorder to an engine."""
    return record_engine


@pytest.fixture
def coordinator_recorder():
    """Returns a function that attaches a SignalRecorder to a coordinator."""
    return record_coordinator


@pytest.fixture
def signal_recorder():
    return SignalRecorder()
