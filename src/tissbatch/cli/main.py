"""Main CLI entry point."""

import logging

import click
from tissbatch.utils.upload_paths import resolve_upload_root

# Import and register all commands at module level
from tissbatch.cli.commands import (
    inspect_cmd,
    reconcile,
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbosity: int) -> None:
    """Send log records to stderr; -v for INFO, -vv for DEBUG."""
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to SQLite database file (overrides TISSBATCH_DB_PATH environment variable)",
    envvar="TISSBATCH_DB_PATH",
)
@click.option(
    "--database-url",
    help="SQLAlchemy database URL; takes precedence over --db-path "
    "(overrides TISSBATCH_DATABASE_URL environment variable)",
    envvar="TISSBATCH_DATABASE_URL",
)
@click.option(
    "--upload-dir",
    type=click.Path(file_okay=False),
    help="Directory holding uploaded batch XML files "
    "(overrides TISSBATCH_UPLOAD_DIR environment variable)",
    envvar="TISSBATCH_UPLOAD_DIR",
)
@click.option("--verbose", "-v", count=True, help="Log progress to stderr (-vv for debug output)")
@click.pass_context
def cli(ctx, db_path: str | None, database_url: str | None, upload_dir: str | None, verbose: int):
    """tissbatch - TISS batch header reconciliation.

    Reads the header (cabecalho) of each batch's TISS XML file and writes it
    onto the batch record, for one batch or for every batch whose header is
    still missing.
    """
    ctx.ensure_object(dict)
    configure_logging(verbose)

    # The store is opened by the first command that needs it
    ctx.obj.setdefault("db_path", db_path)
    ctx.obj.setdefault("database_url", database_url)
    ctx.obj["upload_root"] = resolve_upload_root(upload_dir)


# Register all commands
reconcile.register_commands(cli)
inspect_cmd.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
