"""Tests for the leaderboard and its storage backends."""

import pickle
from datetime import datetime

import pytest

from puzzleattack.leaderboard.database_leaderboard_repository import DatabaseLeaderboardRepository
from puzzleattack.leaderboard.high_score_entry import HighScoreEntry
from puzzleattack.leaderboard.leaderboard import Leaderboard
from puzzleattack.leaderboard.leaderboard_repository_factory import LeaderboardRepositoryFactory
from puzzleattack.leaderboard.pickle_leaderboard_repository import PickleLeaderboardRepository


class TestLeaderboardRanking:
    """Test qualifying, ranking and trimming"""

    def test_empty_leaderboard(self, pickle_leaderboard):
        assert pickle_leaderboard.high_score == 0
        assert pickle_leaderboard.entries() == []
        assert pickle_leaderboard.would_qualify(1)

    def test_ranks_are_one_based(self, pickle_leaderboard):
        assert pickle_leaderboard.add_score(100, 3, 1) == 1
        assert pickle_leaderboard.add_score(50, 2, 1) == 2
        assert pickle_leaderboard.add_score(200, 5, 2) == 1

        assert [e.score for e in pickle_leaderboard.entries()] == [200, 100, 50]
        assert pickle_leaderboard.high_score == 200

    def test_equal_score_ranks_below_existing(self, pickle_leaderboard):
        pickle_leaderboard.add_score(100, 1, 1)
        assert pickle_leaderboard.add_score(100, 4, 1) == 2

    def test_full_board_requires_beating_last(self, temp_dir):
        leaderboard = Leaderboard(PickleLeaderboardRepository(temp_dir / "lb.pkl"), max_entries=3)
        for score in (300, 200, 100):
            leaderboard.add_score(score, 1, 1)

        assert leaderboard.add_score(50, 1, 1) == 0
        assert leaderboard.add_score(100, 1, 1) == 0
        assert leaderboard.add_score(150, 1, 1) == 3
        assert [e.score for e in leaderboard.entries()] == [300, 200, 150]

    def test_entry_details_are_kept(self, pickle_leaderboard):
        pickle_leaderboard.add_score(420, 7, 12)

        entry = pickle_leaderboard.entries()[0]
        assert entry.highest_combo == 7
        assert entry.speed_level == 12
        assert isinstance(entry.date, datetime)

    def test_reset_clears_storage(self, temp_dir):
        repository = PickleLeaderboardRepository(temp_dir / "lb.pkl")
        leaderboard = Leaderboard(repository)
        leaderboard.add_score(10, 1, 1)

        leaderboard.reset()

        assert leaderboard.entries() == []
        assert not repository.data_exists()

    def test_failed_save_leaves_board_unchanged(self, temp_dir):
        repository = PickleLeaderboardRepository(temp_dir / "lb.pkl")
        leaderboard = Leaderboard(repository)
        leaderboard.add_score(100, 1, 1)

        def refuse(entries):
            raise OSError("read-only save directory")

        repository.save_entries = refuse

        with pytest.raises(OSError):
            leaderboard.add_score(500, 2, 2)

        assert [e.score for e in leaderboard.entries()] == [100]
        assert leaderboard.high_score == 100

    def test_invalid_max_entries(self, temp_dir):
        with pytest.raises(ValueError):
            Leaderboard(PickleLeaderboardRepository(temp_dir / "lb.pkl"), max_entries=0)


class TestPickleLeaderboardRepository:
    """Test file persistence"""

    def test_scores_survive_reload(self, temp_dir):
        path = temp_dir / "nested" / "lb.pkl"
        Leaderboard(PickleLeaderboardRepository(path)).add_score(900, 4, 3)

        reloaded = Leaderboard(PickleLeaderboardRepository(path))

        assert reloaded.high_score == 900
        assert reloaded.entries()[0].highest_combo == 4

    def test_load_missing_file(self, temp_dir):
        repository = PickleLeaderboardRepository(temp_dir / "missing.pkl")
        assert repository.load_entries() == []
        assert not repository.data_exists()

    def test_corrupt_file_raises(self, temp_dir):
        path = temp_dir / "lb.pkl"
        with open(path, "wb") as f:
            pickle.dump({"not": "a list"}, f)

        with pytest.raises(ValueError):
            PickleLeaderboardRepository(path).load_entries()

    def test_oversized_file_is_trimmed_on_load(self, temp_dir):
        repository = PickleLeaderboardRepository(temp_dir / "lb.pkl")
        repository.save_entries([HighScoreEntry(s, 1, 1) for s in range(20)])

        leaderboard = Leaderboard(repository, max_entries=5)

        assert [e.score for e in leaderboard.entries()] == [19, 18, 17, 16, 15]


class TestDatabaseLeaderboardRepository:
    """Test SQL persistence with an in-memory database"""

    def test_save_and_load(self, in_memory_db):
        repository = DatabaseLeaderboardRepository(session=in_memory_db)
        leaderboard = Leaderboard(repository)
        leaderboard.add_score(300, 3, 2)
        leaderboard.add_score(500, 5, 4)

        reloaded = Leaderboard(DatabaseLeaderboardRepository(session=in_memory_db))

        assert [e.score for e in reloaded.entries()] == [500, 300]
        assert reloaded.entries()[0].speed_level == 4
        assert repository.data_exists()

    def test_boards_are_separate(self, in_memory_db):
        Leaderboard(DatabaseLeaderboardRepository("marathon", session=in_memory_db)).add_score(100, 1, 1)
        Leaderboard(DatabaseLeaderboardRepository("vs", session=in_memory_db)).add_score(200, 1, 1)

        marathon = Leaderboard(DatabaseLeaderboardRepository("marathon", session=in_memory_db))

        assert [e.score for e in marathon.entries()] == [100]

    def test_trimmed_entries_are_removed(self, in_memory_db):
        leaderboard = Leaderboard(DatabaseLeaderboardRepository(session=in_memory_db), max_entries=2)
        for score in (10, 20, 30):
            leaderboard.add_score(score, 1, 1)

        rows = DatabaseLeaderboardRepository(session=in_memory_db).load_entries()

        assert [e.score for e in rows] == [30, 20]

    def test_clear(self, in_memory_db):
        repository = DatabaseLeaderboardRepository(session=in_memory_db)
        Leaderboard(repository).add_score(10, 1, 1)

        repository.clear()

        assert not repository.data_exists()


class TestLeaderboardRepositoryFactory:
    def test_pickle(self, temp_dir):
        repository = LeaderboardRepositoryFactory.create("pickle", temp_dir / "lb.pkl")
        assert isinstance(repository, PickleLeaderboardRepository)

    def test_pickle_default_path_uses_board_name(self):
        repository = LeaderboardRepositoryFactory.create("pickle", board_name="marathon")
        assert repository.leaderboard_path.name == "leaderboard_marathon.pkl"

    def test_database(self):
        repository = LeaderboardRepositoryFactory.create("database", board_name="vs")
        assert isinstance(repository, DatabaseLeaderboardRepository)
        assert repository.board_name == "vs"

    def test_invalid_type(self):
        with pytest.raises(ValueError):
            LeaderboardRepositoryFactory.create("redis")

    def test_supported_types(self):
        assert LeaderboardRepositoryFactory.get_supported_types() == ["pickle", "database"]
