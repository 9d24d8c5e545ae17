"""Unit tests for database repository operations."""

import pytest
from sqlalchemy import inspect

from puzzleattack.database.connection import DatabaseConfig, DatabaseManager
from puzzleattack.database.init_db import create_schema
from puzzleattack.database.models import HighScore
from puzzleattack.database.repository import DatabaseRepository


@pytest.fixture
def repo(in_memory_db):
    """Create a repository with in-memory database."""
    return DatabaseRepository(session=in_memory_db)


class TestHighScoreRepository:
    def test_add_assigns_id(self, repo):
        row = repo.high_scores.add("default", 500, 4, 2)

        assert row.id is not None
        assert row.achieved_at is not None

    def test_get_top_orders_by_score(self, repo):
        for score in (100, 300, 200):
            repo.high_scores.add("default", score, 1, 1)

        assert [r.score for r in repo.high_scores.get_top("default")] == [300, 200, 100]
        assert [r.score for r in repo.high_scores.get_top("default", limit=2)] == [300, 200]

    def test_ties_keep_insertion_order(self, repo):
        first = repo.high_scores.add("default", 100, 1, 1)
        second = repo.high_scores.add("default", 100, 2, 1)

        assert repo.high_scores.get_top("default") == [first, second]

    def test_get_best(self, repo):
        assert repo.high_scores.get_best("default") is None
        repo.high_scores.add("default", 40, 1, 1)
        repo.high_scores.add("default", 90, 1, 1)

        assert repo.high_scores.get_best("default").score == 90

    def test_delete_board_only_touches_that_board(self, repo):
        repo.high_scores.add("a", 1, 1, 1)
        repo.high_scores.add("a", 2, 1, 1)
        repo.high_scores.add("b", 3, 1, 1)

        assert repo.high_scores.delete_board("a") == 2
        assert repo.high_scores.count("a") == 0
        assert repo.high_scores.count("b") == 1

    def test_context_manager_commits(self, in_memory_db):
        with DatabaseRepository(session=in_memory_db) as repo:
            repo.high_scores.add("default", 77, 1, 1)

        assert in_memory_db.query(HighScore).count() == 1

    def test_context_manager_rolls_back_on_error(self, in_memory_db):
        with pytest.raises(RuntimeError):
            with DatabaseRepository(session=in_memory_db) as repo:
                repo.high_scores.add("default", 77, 1, 1)
                raise RuntimeError("boom")

        assert in_memory_db.query(HighScore).count() == 0


class TestDatabaseConnection:
    def test_sqlite_url(self):
        manager = DatabaseManager(DatabaseConfig(driver="sqlite", database="scores.db"))
        assert manager.url == "sqlite:///scores.db"

    def test_server_url(self):
        config = DatabaseConfig(driver="postgresql", host="db", port=5433,
                                database="puzzle", username="me", password="pw")
        assert DatabaseManager(config).url == "postgresql://me:pw@db:5433/puzzle"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("DB_DRIVER", "postgresql")
        monkeypatch.setenv("DB_PORT", "6000")
        monkeypatch.setenv("DB_NAME", "arcade")

        config = DatabaseConfig.from_env()

        assert config.driver == "postgresql"
        assert config.port == 6000
        assert config.database == "arcade"

    def test_in_memory_connection(self):
        manager = DatabaseManager(DatabaseConfig(driver="sqlite", database=":memory:"))
        assert manager.test_connection()

    def test_create_schema(self, temp_dir):
        manager = DatabaseManager(DatabaseConfig(driver="sqlite", database=str(temp_dir / "scores.db")))

        create_schema(manager)

        assert "high_scores" in inspect(manager.get_engine()).get_table_names()
