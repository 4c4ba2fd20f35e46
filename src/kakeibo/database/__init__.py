"""Database layer for kakeibo application."""

from kakeibo.database.base import Database
from kakeibo.database.factories import create_database, create_sqlite_database

__all__ = ["Database", "create_database", "create_sqlite_database"]
