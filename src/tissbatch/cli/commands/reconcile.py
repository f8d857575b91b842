"""Batch header reconciliation commands."""

import click
from sqlalchemy.exc import SQLAlchemyError

from tissbatch.cli.error_handling import handle_store_error
from tissbatch.cli.report import outcome_lines, report_json, report_lines
from tissbatch.cli.store_resolution import get_store, get_store_or_exit
from tissbatch.domain.reconciliation import ReconciliationService


@click.command("reconcile-one")
@click.argument("batch_id", type=int)
@click.option(
    "--skip-unchanged",
    is_flag=True,
    help="Do not write when the stored hash already matches the XML file",
)
@click.pass_context
def reconcile_one(ctx, batch_id: int, skip_unchanged: bool):
    """Reconcile the header of a single batch.

    Reads the batch's XML file from the upload directory and overwrites the
    ten header fields of the batch record.

    Examples:
        tissbatch reconcile-one 12
        tissbatch --upload-dir /srv/uploads/financeiro reconcile-one 12
    """
    db = get_store_or_exit(ctx)
    service = ReconciliationService(db, ctx.obj["upload_root"])

    outcome = service.reconcile_batch(batch_id, skip_unchanged=skip_unchanged)
    for line in outcome_lines(outcome):
        click.echo(line, err=not outcome.ok)

    if not outcome.ok:
        ctx.exit(1)


@click.command("reconcile-all")
@click.option(
    "--id",
    "batch_ids",
    type=int,
    multiple=True,
    help="Only reconcile this batch ID (repeatable); defaults to every batch with an incomplete header",
)
@click.option(
    "--skip-unchanged",
    is_flag=True,
    help="Do not write when the stored hash already matches the XML file",
)
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")
@click.pass_context
def reconcile_all(ctx, batch_ids: tuple[int, ...], skip_unchanged: bool, as_json: bool):
    """Reconcile every batch whose header is incomplete.

    Batches are processed one at a time in ascending ID order. A failing
    batch does not stop the run; the command exits with status 1 if any
    batch failed, and those batches are picked up again on the next run.

    Examples:
        tissbatch reconcile-all
        tissbatch reconcile-all --id 3 --id 7
    """
    try:
        db = get_store(ctx)
        service = ReconciliationService(db, ctx.obj["upload_root"])
        if batch_ids:
            report = service.reconcile_ids(batch_ids, skip_unchanged=skip_unchanged)
        else:
            backlog = service.backlog_service.select_backlog()
            report = service.reconcile_backlog(backlog, skip_unchanged=skip_unchanged)
    except SQLAlchemyError as e:
        handle_store_error(ctx, e)
        return

    if as_json:
        click.echo(report_json(report))
    elif report.attempted == 0:
        click.echo("No batches to reconcile.")
    else:
        for line in report_lines(report):
            click.echo(line)

    if not report.ok:
        ctx.exit(1)


def register_commands(cli):
    """Register reconciliation commands with main CLI."""
    cli.add_command(reconcile_one)
    cli.add_command(reconcile_all)
