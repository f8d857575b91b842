"""Batch inspection command."""

import click
from sqlalchemy.exc import SQLAlchemyError

from tissbatch.cli.report import inspection_lines
from tissbatch.cli.store_resolution import get_store
from tissbatch.domain.backlog import BacklogService


@click.command("inspect")
@click.option("--incomplete-only", is_flag=True, help="Only list batches with an incomplete header")
@click.pass_context
def inspect_batches(ctx, incomplete_only: bool):
    """List batches and whether their header has been reconciled.

    Read-only; always exits with status 0.
    """
    try:
        db = get_store(ctx, initialize_schema=False)
        inspections = BacklogService(db).inspect_batches(incomplete_only=incomplete_only)
    except SQLAlchemyError as e:
        click.echo(f"Error: Could not list batches: {e}", err=True)
        return

    if not inspections:
        click.echo("No batches found.")
        return

    click.echo(f"Found {len(inspections)} batch(es)\n")
    for line in inspection_lines(inspections):
        click.echo(line)


def register_commands(cli):
    """Register inspect command with main CLI."""
    cli.add_command(inspect_batches)
