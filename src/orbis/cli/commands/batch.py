"""Import batch commands."""

import click
from orbis.domain.import_batch import ImportBatchService
from orbis.utils.currency import format_currency


@click.group()
def batch_group():
    """Review and undo statement imports."""
    pass


@batch_group.command("list")
@click.pass_context
def list_batches(ctx):
    """List import batches, newest first."""
    service = ImportBatchService(ctx.obj["db"])

    batches = service.list_batches()
    if not batches:
        click.echo("No imports yet.")
        return

    click.echo(f"\n{'ID':<36} {'Imported at':<17} {'Count':>5} {'Total':>14}  File")
    click.echo("-" * 100)
    for batch in batches:
        click.echo(
            f"{batch.id:<36} {batch.date:%Y-%m-%d %H:%M} {batch.count:>5} "
            f"{format_currency(batch.total_amount):>14}  {batch.file_name}"
        )


@batch_group.command("undo")
@click.argument("batch_id")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def undo_batch(ctx, batch_id: str, yes: bool):
    """Remove an import batch and every transaction it created."""
    service = ImportBatchService(ctx.obj["db"])

    batch = service.get_batch(batch_id)
    if batch is not None and not yes:
        if not click.confirm(
            f"Remove {batch.count} transaction(s) imported from {batch.file_name}?"
        ):
            click.echo("Undo cancelled.")
            return

    removed = service.delete_batch(batch_id)
    click.echo(f"Removed {removed} transaction(s) from batch {batch_id}")


def register_commands(cli):
    """Register batch commands with main CLI."""
    cli.add_command(batch_group, name="batch")
