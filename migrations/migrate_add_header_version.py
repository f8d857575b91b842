#!/usr/bin/env python3
"""Add reconciliation tracking columns to an existing batches table.

Batch tables created before conditional header writes lack two columns:
- header_version (INTEGER, default=0)
- reconciled_at (DATETIME, nullable)

Existing rows start at header_version 0, so the first reconciliation after
the migration behaves like a fresh one.

Usage:
    python migrations/migrate_add_header_version.py [--db-path PATH] [--database-url URL]
"""

import sys
from pathlib import Path

# Add src to path so we can import tissbatch modules
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sqlalchemy import inspect, text
from tissbatch.database.factories import create_database

TABLE_NAME = "batches"

NEW_COLUMNS = {
    "header_version": "INTEGER NOT NULL DEFAULT 0",
    "reconciled_at": "DATETIME NULL",
}


def missing_columns(engine) -> list[str]:
    """Return the tracking columns the batches table does not have yet."""
    inspector = inspect(engine)
    if TABLE_NAME not in inspector.get_table_names():
        raise RuntimeError(
            f"Table '{TABLE_NAME}' does not exist. Please initialize the database schema first."
        )
    present = {column["name"] for column in inspector.get_columns(TABLE_NAME)}
    return [name for name in NEW_COLUMNS if name not in present]


def migrate_database(database_path: str | None = None, database_url: str | None = None) -> list[str]:
    """Add the reconciliation tracking columns that are missing.

    Args:
        database_path: Path to SQLite database file
        database_url: SQLAlchemy URL; takes precedence over database_path

    Returns:
        Names of the columns that were added

    Raises:
        RuntimeError: If the batches table does not exist
    """
    # Resolves the URL the same way the CLI does; no tables are created here
    store = create_database(database_url=database_url, database_path=database_path)
    engine = store.engine
    try:
        missing = missing_columns(engine)
        if not missing:
            print(f"Nothing to do: {TABLE_NAME} already has {', '.join(NEW_COLUMNS)}")
            return []

        with engine.begin() as conn:
            for name in missing:
                conn.execute(text(f"ALTER TABLE {TABLE_NAME} ADD COLUMN {name} {NEW_COLUMNS[name]}"))
                print(f"Added column {TABLE_NAME}.{name}")
        return missing
    finally:
        store.disconnect()
        engine.dispose()


def main():
    """Run the migration from the command line."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Add header_version and reconciled_at to the batches table"
    )
    parser.add_argument(
        "--db-path",
        help="SQLite database file (overrides TISSBATCH_DB_PATH environment variable)",
    )
    parser.add_argument(
        "--database-url",
        help="SQLAlchemy database URL (overrides TISSBATCH_DATABASE_URL environment variable)",
    )
    args = parser.parse_args()

    try:
        migrate_database(database_path=args.db_path, database_url=args.database_url)
    except Exception as e:
        print(f"Migration failed: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
