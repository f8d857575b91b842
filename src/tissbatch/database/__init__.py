"""Database layer for tissbatch application."""

from tissbatch.database.base import BatchStore
from tissbatch.database.factories import create_database, create_sqlite_database

__all__ = ["BatchStore", "create_database", "create_sqlite_database"]
