"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from famtrack.database.sqlalchemy_db import SQLAlchemyDatabase

DEFAULT_DATA_DIR = ".famtrack"
DEFAULT_DB_NAME = "famtrack.db"


def default_database_path() -> str:
    """Return ~/.famtrack/famtrack.db, creating the directory if needed."""
    db_dir = Path.home() / DEFAULT_DATA_DIR
    db_dir.mkdir(exist_ok=True)
    return str(db_dir / DEFAULT_DB_NAME)


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks the
            FAMTRACK_DB_PATH environment variable, then falls back to
            ~/.famtrack/famtrack.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    database_path = (
        database_path or os.environ.get("FAMTRACK_DB_PATH") or default_database_path()
    )
    return SQLAlchemyDatabase(f"sqlite:///{database_path}")
