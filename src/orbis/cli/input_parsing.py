"""CLI helpers that parse option values or exit with a CLI error."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import click

from orbis.domain.category import CategoryService
from orbis.domain.entities import Category
from orbis.domain.errors import NotFoundError
from orbis.utils.amount_parser import parse_positive_amount
from orbis.utils.date_parser import parse_date


def parse_date_or_exit(ctx: click.Context, value: str, label: str = "date") -> date:
    """Parse a date option, or exit with a CLI error."""
    try:
        return parse_date(value)
    except ValueError as exc:
        click.echo(f"Error: Invalid {label}: {exc}", err=True)
        ctx.exit(1)


def parse_amount_or_exit(ctx: click.Context, value: str) -> Decimal:
    """Parse a strictly positive amount option, or exit with a CLI error."""
    try:
        return parse_positive_amount(value)
    except ValueError as exc:
        click.echo(f"Error: Invalid amount: {exc}", err=True)
        ctx.exit(1)


def resolve_category_or_exit(
    ctx: click.Context, category_service: CategoryService, value: str
) -> Category:
    """Resolve a category by ID or name, or exit with a CLI error."""
    try:
        return category_service.resolve_category(value)
    except NotFoundError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
