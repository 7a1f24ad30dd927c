"""Add transaction command."""

import click
from orbis.cli.error_handling import handle_domain_error
from orbis.cli.input_parsing import (
    parse_amount_or_exit,
    parse_date_or_exit,
    resolve_category_or_exit,
)
from orbis.domain.category import UNCATEGORIZED_CATEGORY_ID, CategoryService
from orbis.domain.classifier import suggest_category
from orbis.domain.entities import Recurrence, TransactionType
from orbis.domain.errors import DomainError
from orbis.domain.insights import is_outlier
from orbis.domain.transaction import TransactionService
from orbis.utils.currency import format_currency


@click.command("add")
@click.option(
    "--type",
    "transaction_type",
    type=click.Choice([t.value for t in TransactionType], case_sensitive=False),
    default=TransactionType.EXPENSE.value,
    help="Transaction type (default: expense)",
)
@click.option("--amount", required=True, help="Amount, e.g. 45,90 or 1.234,56")
@click.option(
    "--date",
    default="today",
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--description", default="", help="Transaction description")
@click.option(
    "--category",
    help="Category name or ID (suggested from the description if omitted)",
)
@click.option(
    "--recurrence",
    type=click.Choice([r.value for r in Recurrence], case_sensitive=False),
    default=Recurrence.UNIQUE.value,
    help="How often the transaction repeats",
)
@click.pass_context
def add_transaction(
    ctx,
    transaction_type: str,
    amount: str,
    date: str,
    description: str,
    category: str | None,
    recurrence: str,
):
    """Add a transaction manually.

    Examples:
        orbis add --amount 45,90 --description "Uber trip"
        orbis add --type income --amount 5000 --category Salário --recurrence monthly
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)
    category_service = CategoryService(db)

    txn_date = parse_date_or_exit(ctx, date)
    txn_amount = parse_amount_or_exit(ctx, amount)
    txn_type = TransactionType(transaction_type.lower())

    history = transaction_service.list_transactions()
    if category:
        category_obj = resolve_category_or_exit(ctx, category_service, category)
    else:
        suggested = suggest_category(description, history) or UNCATEGORIZED_CATEGORY_ID
        category_obj = category_service.get_category(suggested)
        if category_obj is None or not category_obj.accepts(txn_type):
            category_obj = category_service.require_category(UNCATEGORIZED_CATEGORY_ID)

    try:
        txn = transaction_service.create_transaction(
            amount=txn_amount,
            date=txn_date,
            category_id=category_obj.id,
            transaction_type=txn_type,
            description=description,
            recurrence=Recurrence(recurrence.lower()),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created transaction {txn.id}")
    click.echo(f"  Type: {txn.type.value}")
    click.echo(f"  Date: {txn.date}")
    click.echo(f"  Amount: {format_currency(txn.amount)}")
    if txn.description:
        click.echo(f"  Description: {txn.description}")
    click.echo(f"  Category: {category_obj.name}")
    if txn.recurrence != Recurrence.UNIQUE:
        click.echo(f"  Recurrence: {txn.recurrence.value}")
    if txn.type == TransactionType.EXPENSE and is_outlier(
        txn.amount, txn.category_id, history
    ):
        click.echo("  Note: this is well above your usual spending in this category")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
