"""Transaction management commands."""

import click
from orbis.cli.error_handling import handle_domain_error
from orbis.cli.input_parsing import (
    parse_amount_or_exit,
    parse_date_or_exit,
    resolve_category_or_exit,
)
from orbis.domain.category import CategoryService
from orbis.domain.entities import Recurrence, TransactionType
from orbis.domain.errors import DomainError
from orbis.domain.transaction import TransactionService
from orbis.utils.currency import format_currency


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or 'today', 'yesterday')")
@click.option("--end-date", help="End date (YYYY-MM-DD or 'today', 'yesterday')")
@click.option(
    "--type",
    "transaction_type",
    type=click.Choice([t.value for t in TransactionType], case_sensitive=False),
    help="Only income or only expense",
)
@click.option("--category", help="Category name or ID")
@click.option("--batch", "batch_id", help="Only transactions from this import batch")
@click.pass_context
def list_transactions(
    ctx,
    start_date: str | None,
    end_date: str | None,
    transaction_type: str | None,
    category: str | None,
    batch_id: str | None,
):
    """View transactions with optional filters."""
    db = ctx.obj["db"]
    service = TransactionService(db)
    category_service = CategoryService(db)

    start = parse_date_or_exit(ctx, start_date, "start date") if start_date else None
    end = parse_date_or_exit(ctx, end_date, "end date") if end_date else None
    category_id = None
    if category:
        category_id = resolve_category_or_exit(ctx, category_service, category).id

    transactions = service.list_transactions(
        start_date=start,
        end_date=end,
        transaction_type=TransactionType(transaction_type.lower()) if transaction_type else None,
        category_id=category_id,
    )
    if batch_id:
        transactions = [t for t in transactions if t.import_batch_id == batch_id]

    if not transactions:
        click.echo("No transactions found.")
        return

    names = {c.id: c.name for c in category_service.list_categories()}

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    click.echo("-" * 110)
    click.echo(
        f"{'ID':<36} {'Date':<12} {'Type':<8} {'Amount':>14} {'Category':<14} {'Description':<30}"
    )
    click.echo("-" * 110)

    for txn in transactions:
        flags = ""
        if txn.is_imported:
            flags += " [imp]"
        if txn.is_edited:
            flags += " [edited]"
        if txn.recurrence != Recurrence.UNIQUE:
            flags += f" [{txn.recurrence.value}]"
        description = (txn.description or "")[:30]
        click.echo(
            f"{txn.id:<36} {str(txn.date):<12} {txn.type.value:<8} "
            f"{format_currency(txn.amount):>14} {names.get(txn.category_id, '?'):<14} "
            f"{description:<30}{flags}"
        )

    total_expenses = sum(t.amount for t in transactions if t.type == TransactionType.EXPENSE)
    total_income = sum(t.amount for t in transactions if t.type == TransactionType.INCOME)
    click.echo("-" * 110)
    click.echo(
        f"TOTAL  Expenses: {format_currency(total_expenses)} | "
        f"Income: {format_currency(total_income)} | Count: {len(transactions)}"
    )


@transaction_group.command("update")
@click.argument("transaction_id")
@click.option("--date", help="Transaction date (YYYY-MM-DD or 'today', 'yesterday')")
@click.option("--amount", help="Transaction amount, e.g. 45,90")
@click.option(
    "--type",
    "transaction_type",
    type=click.Choice([t.value for t in TransactionType], case_sensitive=False),
    help="Transaction type",
)
@click.option("--description", help="Transaction description")
@click.option("--category", help="Category name or ID")
@click.option(
    "--recurrence",
    type=click.Choice([r.value for r in Recurrence], case_sensitive=False),
    help="How often the transaction repeats",
)
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: str,
    date: str | None,
    amount: str | None,
    transaction_type: str | None,
    description: str | None,
    category: str | None,
    recurrence: str | None,
) -> None:
    """Update a transaction.

    Updates only the fields that are provided.

    Examples:
        orbis transaction update <id> --amount 75,00
        orbis transaction update <id> --category Transporte
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)
    category_service = CategoryService(db)

    txn_date = parse_date_or_exit(ctx, date) if date is not None else None
    txn_amount = parse_amount_or_exit(ctx, amount) if amount is not None else None
    category_id = None
    if category is not None:
        category_id = resolve_category_or_exit(ctx, category_service, category).id

    try:
        transaction_service.update_transaction(
            transaction_id=transaction_id,
            amount=txn_amount,
            date=txn_date,
            category_id=category_id,
            transaction_type=TransactionType(transaction_type.lower()) if transaction_type else None,
            description=description,
            recurrence=Recurrence(recurrence.lower()) if recurrence else None,
        )
        click.echo(f"Updated transaction {transaction_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@transaction_group.command("delete")
@click.argument("transaction_id")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: str, yes: bool) -> None:
    """Delete a transaction.

    Examples:
        orbis transaction delete <id>
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)

    txn = transaction_service.get_transaction(transaction_id)
    if txn is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(
        f"Are you sure you want to delete transaction {transaction_id}?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        transaction_service.delete_transaction(transaction_id)
        click.echo(f"Deleted transaction {transaction_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
