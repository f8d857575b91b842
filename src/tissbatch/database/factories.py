"""Database factory functions for creating batch store instances."""

import os
from pathlib import Path
from typing import Optional

from tissbatch.database.sqlalchemy_db import SQLAlchemyBatchStore


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyBatchStore:
    """Create a SQLite batch store.

    Args:
        database_path: Path to SQLite database file. If None, checks TISSBATCH_DB_PATH
            environment variable, then defaults to ~/.tissbatch/tissbatch.db

    Returns:
        SQLAlchemyBatchStore instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get("TISSBATCH_DB_PATH")

    if database_path is None:
        # Default to ~/.tissbatch/tissbatch.db
        home = Path.home()
        db_dir = home / ".tissbatch"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "tissbatch.db")

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyBatchStore(database_url)


def create_database(
    database_url: Optional[str] = None, database_path: Optional[str] = None
) -> SQLAlchemyBatchStore:
    """Create a batch store from a SQLAlchemy URL or a SQLite path.

    Args:
        database_url: Any SQLAlchemy URL (e.g. the MySQL database shared with the
            billing application). If None, checks TISSBATCH_DATABASE_URL.
        database_path: SQLite file used when no URL is configured

    Returns:
        SQLAlchemyBatchStore instance
    """
    if database_url is None:
        database_url = os.environ.get("TISSBATCH_DATABASE_URL")

    if database_url:
        return SQLAlchemyBatchStore(database_url)
    return create_sqlite_database(database_path=database_path)
