"""Simple database connection management."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv
from sqlalchemy import create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

# Load environment variables from .env file
load_dotenv()


@dataclass
class DatabaseConfig:
    """Database connection configuration.

    driver "sqlite" stores everything in the file named by database; any other
    driver builds a server URL from the remaining fields.
    """
    driver: str = "sqlite"
    host: str = "localhost"
    port: int = 5432
    database: str = "puzzleattack.db"
    username: str = "postgres"
    password: str = ""

    @classmethod
    def from_env(cls) -> "DatabaseConfig":
        """Create config from environment variables or .env file."""
        return cls(
            driver=os.getenv("DB_DRIVER", "sqlite"),
            host=os.getenv("DB_HOST", "localhost"),
            port=int(os.getenv("DB_PORT", "5432")),
            database=os.getenv("DB_NAME", "puzzleattack.db"),
            username=os.getenv("DB_USER", os.getenv("USER", "postgres")),
            password=os.getenv("DB_PASSWORD", ""),
        )


class DatabaseManager:
    """Simple database connection manager."""

    def __init__(self, config: DatabaseConfig | None = None):
        self.config = config or DatabaseConfig.from_env()
        self._engine = None
        self._session_maker = None

    @property
    def url(self) -> str:
        """SQLAlchemy connection URL."""
        if self.config.driver == "sqlite":
            return f"sqlite:///{self.config.database}"
        password_part = f":{self.config.password}" if self.config.password else ""
        return f"{self.config.driver}://{self.config.username}{password_part}@{self.config.host}:{self.config.port}/{self.config.database}"

    def get_engine(self):
        """Get SQLAlchemy engine (creates if needed)."""
        if self._engine is None:
            self._engine = create_engine(self.url)
        return self._engine

    def get_session(self):
        """Get SQLAlchemy session."""
        if self._session_maker is None:
            self._session_maker = sessionmaker(bind=self.get_engine())
        return self._session_maker()

    def test_connection(self) -> bool:
        """Test database connectivity."""
        try:
            with self.get_engine().connect() as conn:
                return conn.execute(text("SELECT 1")).scalar() == 1
        except SQLAlchemyError:
            return False
