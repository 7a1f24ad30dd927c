"""Main CLI entry point."""

import logging
import os

import click
from orbis.database.factories import create_sqlite_database

# Import and register all commands at module level
from orbis.cli.commands import (
    add,
    backup,
    batch,
    category,
    dashboard,
    import_cmd,
    patrimony,
    transaction,
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbosity: int = 0) -> int:
    """Set the root log level for the CLI and return it.

    ``-v`` selects INFO and ``-vv`` DEBUG. Without the flag the level comes
    from ORBIS_LOG_LEVEL, falling back to WARNING. Handlers are installed by
    ``main``.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = getattr(
            logging, os.environ.get("ORBIS_LOG_LEVEL", "WARNING").upper(), logging.WARNING
        )
    logging.getLogger().setLevel(level)
    return level


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides ORBIS_DB_PATH environment variable)",
    envvar="ORBIS_DB_PATH",
)
@click.option(
    "--verbose", "-v", count=True, help="Log progress (-v) or debug details (-vv)"
)
@click.pass_context
def cli(ctx, db_path: str | None, verbose: int):
    """Orbis - Personal finance tracking.

    Record income and expenses, import bank statements (OFX or CSV), keep a
    protected savings pool and review where your money goes.
    """
    ctx.ensure_object(dict)
    configure_logging(verbose)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
add.register_commands(cli)
transaction.register_commands(cli)
category.register_commands(cli)
import_cmd.register_commands(cli)
batch.register_commands(cli)
patrimony.register_commands(cli)
dashboard.register_commands(cli)
backup.register_commands(cli)


def main():
    """Main entry point for CLI."""
    logging.basicConfig(format=LOG_FORMAT)
    cli()


if __name__ == "__main__":
    main()
