"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from slipcheck.database.sqlalchemy_db import SQLAlchemyDatabase


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks SLIPCHECK_DB_PATH
            environment variable, then defaults to ~/.slipcheck/slipcheck.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get("SLIPCHECK_DB_PATH")

    if database_path is None:
        db_dir = Path.home() / ".slipcheck"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "slipcheck.db")

    return SQLAlchemyDatabase(f"sqlite:///{database_path}")


def create_database(database_url: Optional[str] = None, database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a database from a full SQLAlchemy URL, falling back to SQLite.

    A shared ledger for several server processes needs a server database
    (e.g. PostgreSQL) so the unique trans_ref constraint is enforced across them.
    """
    if database_url:
        return SQLAlchemyDatabase(database_url)
    return create_sqlite_database(database_path=database_path)
