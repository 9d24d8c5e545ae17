"""Database initialization script."""

from sqlalchemy import inspect

from puzzleattack.database.connection import DatabaseManager
from puzzleattack.database.models import Base


def create_schema(manager: DatabaseManager):
    """Create all tables known to the ORM models."""
    engine = manager.get_engine()
    Base.metadata.create_all(engine)
    print("✅ Database schema created successfully")

    tables = inspect(engine).get_table_names()
    print(f"📋 Found {len(tables)} tables:")
    for table in sorted(tables):
        print(f"   - {table}")


def main():
    """Initialize database."""
    print("🚀 Initializing Puzzle Attack database...")
    manager = DatabaseManager()

    print("🔌 Testing database connection...")
    if not manager.test_connection():
        print("❌ Database connection failed")
        print("\n💡 Check DB_DRIVER, DB_HOST and DB_NAME in your .env file")
        return
    print("✅ Database connection successful")

    create_schema(manager)

    print("\n✨ Database initialization complete!")


if __name__ == "__main__":
    main()
