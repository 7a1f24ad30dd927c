"""Statement import command."""

import logging
from pathlib import Path

import click
from orbis.cli.error_handling import handle_domain_error
from orbis.domain.category import CategoryService
from orbis.domain.entities import ColumnMapping, ParsedCandidate
from orbis.domain.errors import DomainError
from orbis.domain.import_batch import ImportBatchService
from orbis.domain.statement_import import StatementParser, decode_statement, preview_csv
from orbis.domain.transaction import TransactionService
from orbis.utils.currency import format_currency

logger = logging.getLogger(__name__)


def _print_review_table(candidates: list[ParsedCandidate], names: dict[str, str]) -> None:
    click.echo("-" * 90)
    click.echo(f"{'#':<4} {'Date':<12} {'Type':<8} {'Amount':>14} {'Category':<14} {'Description':<30}")
    click.echo("-" * 90)
    for row_num, candidate in enumerate(candidates, start=1):
        category_name = names.get(candidate.category_id, "-")
        click.echo(
            f"{row_num:<4} {str(candidate.date):<12} {candidate.type.value:<8} "
            f"{format_currency(candidate.amount):>14} {category_name:<14} "
            f"{candidate.description[:30]:<30}"
        )
    click.echo("-" * 90)


@click.command("import")
@click.argument("statement_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--date-col", default=0, show_default=True, help="CSV column index of the date")
@click.option("--desc-col", default=1, show_default=True, help="CSV column index of the description")
@click.option("--amount-col", default=2, show_default=True, help="CSV column index of the amount")
@click.option("--preview", is_flag=True, help="Show the first CSV rows and exit")
@click.option("--yes", "-y", is_flag=True, help="Commit without asking for confirmation")
@click.pass_context
def import_statement(
    ctx,
    statement_file: str,
    date_col: int,
    desc_col: int,
    amount_col: int,
    preview: bool,
    yes: bool,
):
    """Import transactions from an OFX or CSV bank statement.

    Rows are parsed, categorized from your history and a keyword list, shown
    for review and then committed together as one batch that can be undone
    with 'batch undo'.

    Examples:
        orbis import extrato.ofx
        orbis import extrato.csv --date-col 0 --desc-col 2 --amount-col 3
    """
    db = ctx.obj["db"]
    category_service = CategoryService(db)
    transaction_service = TransactionService(db)
    batch_service = ImportBatchService(db)

    path = Path(statement_file)
    content = decode_statement(path.read_bytes())

    if preview:
        for row_num, cols in enumerate(preview_csv(content), start=1):
            cells = " | ".join(f"[{i}] {value}" for i, value in enumerate(cols))
            click.echo(f"{row_num}: {cells}")
        return

    parser = StatementParser(
        categories=category_service.list_categories(),
        history=transaction_service.list_transactions(),
    )
    mapping = ColumnMapping(date_index=date_col, desc_index=desc_col, amount_index=amount_col)

    try:
        candidates = parser.parse(path.name, content, mapping)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    zero_rows = [c for c in candidates if c.amount <= 0]
    if zero_rows:
        logger.warning("Dropping %d rows with a zero amount", len(zero_rows))
        candidates = [c for c in candidates if c.amount > 0]

    if not candidates:
        click.echo("No transactions found in file.")
        return

    names = {c.id: c.name for c in category_service.list_categories()}
    click.echo(f"\nFound {len(candidates)} transaction(s) in {path.name}:")
    _print_review_table(candidates, names)

    if not yes and not click.confirm("Import these transactions?"):
        click.echo("Import cancelled.")
        return

    try:
        result = batch_service.commit(candidates, path.name)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo("\nImport complete:")
    click.echo(f"  Batch: {result.batch.id}")
    click.echo(f"  Imported: {result.batch.count} transactions")
    click.echo(f"  Total moved: {format_currency(result.batch.total_amount)}")


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_statement)
