"""Database layer for orbis application."""

from orbis.database.base import Database
from orbis.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
