"""Database layer for famtrack application."""

from famtrack.database.base import Database
from famtrack.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
