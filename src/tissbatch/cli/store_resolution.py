"""CLI helpers for opening the batch store."""

from __future__ import annotations

import click
from sqlalchemy.exc import SQLAlchemyError

from tissbatch.database.base import BatchStore
from tissbatch.database.factories import create_database


def get_store(ctx: click.Context, initialize_schema: bool = True) -> BatchStore:
    """Return the batch store for this invocation, opening it on first use.

    Read-only commands pass initialize_schema=False so that pointing them at
    an empty database does not create tables.

    Raises:
        SQLAlchemyError: If the database cannot be opened
    """
    obj = ctx.find_root().obj
    if obj.get("db") is None:
        db = create_database(database_url=obj.get("database_url"), database_path=obj.get("db_path"))
        db.connect()
        if initialize_schema:
            db.initialize_schema()
        obj["db"] = db
        ctx.find_root().call_on_close(db.disconnect)
    return obj["db"]


def get_store_or_exit(ctx: click.Context) -> BatchStore:
    """Open the batch store, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return get_store(ctx)
    except SQLAlchemyError as exc:
        click.echo(f"Error: Could not open batch store: {exc}", err=True)
        ctx.exit(1)
