"""Backup, restore and reset commands."""

import click
from orbis.cli.error_handling import handle_domain_error
from orbis.domain.backup import BackupService
from orbis.domain.errors import DomainError


@click.group()
def backup_group():
    """Export or restore all data as JSON."""
    pass


@backup_group.command("export")
@click.argument("backup_file", type=click.Path(dir_okay=False))
@click.pass_context
def export_backup(ctx, backup_file: str):
    """Write every transaction, movement, category and batch to a file."""
    service = BackupService(ctx.obj["db"])
    document = service.export_to_file(backup_file)
    click.echo(
        f"Exported {len(document['transactions'])} transaction(s) and "
        f"{len(document['patrimony'])} patrimony movement(s) to {backup_file}"
    )


@backup_group.command("import")
@click.argument("backup_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def import_backup(ctx, backup_file: str, yes: bool):
    """Replace all current data with a backup file."""
    service = BackupService(ctx.obj["db"])
    if not yes and not click.confirm("This replaces all current data. Continue?"):
        click.echo("Restore cancelled.")
        return
    try:
        service.import_from_file(backup_file)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Restored data from {backup_file}")


@click.command("reset")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def reset(ctx, yes: bool):
    """Delete all data and restore the default categories."""
    if not yes and not click.confirm("Delete ALL data?"):
        click.echo("Reset cancelled.")
        return
    ctx.obj["db"].reset()
    click.echo("All data removed. Default categories restored.")


def register_commands(cli):
    """Register backup commands with main CLI."""
    cli.add_command(backup_group, name="backup")
    cli.add_command(reset)
