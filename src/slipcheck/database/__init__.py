"""Database layer for slipcheck application."""

from slipcheck.database.base import Database
from slipcheck.database.factories import create_database, create_sqlite_database

__all__ = ["Database", "create_database", "create_sqlite_database"]
