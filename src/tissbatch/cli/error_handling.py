"""CLI error handling helpers."""

import click
from sqlalchemy.exc import SQLAlchemyError


def handle_store_error(ctx: click.Context, error: SQLAlchemyError) -> None:
    """Render a batch store failure and exit with failure."""
    click.echo(f"Error: Batch store unavailable: {error}", err=True)
    ctx.exit(1)
