"""Category commands."""

import click
from orbis.domain.category import CategoryService
from orbis.domain.entities import TransactionType


@click.group()
def category_group():
    """Browse categories."""
    pass


@category_group.command("list")
@click.option(
    "--type",
    "transaction_type",
    type=click.Choice([t.value for t in TransactionType], case_sensitive=False),
    help="Only categories usable for this transaction type",
)
@click.pass_context
def list_categories(ctx, transaction_type: str | None):
    """List categories."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    categories = service.list_categories(
        TransactionType(transaction_type.lower()) if transaction_type else None
    )
    if not categories:
        click.echo("No categories found. Run 'reset' to restore the defaults.")
        return

    click.echo("\nCategories:")
    for cat in categories:
        click.echo(f"  {cat.name:<16} {cat.type.value:<8} (ID: {cat.id})")


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
