"""Patrimony (protected savings) commands."""

import click
from orbis.cli.error_handling import handle_domain_error
from orbis.cli.input_parsing import parse_amount_or_exit, parse_date_or_exit
from orbis.domain.entities import PatrimonyType
from orbis.domain.errors import DomainError
from orbis.domain.patrimony import DEFAULT_GOAL_AMOUNT, PatrimonyService, goal_progress
from orbis.utils.currency import format_currency, round_percent


@click.group()
def patrimony_group():
    """Manage the protected savings pool."""
    pass


def _record(ctx, movement_type: PatrimonyType, amount: str, date: str, description: str | None):
    service = PatrimonyService(ctx.obj["db"])
    movement_amount = parse_amount_or_exit(ctx, amount)
    movement_date = parse_date_or_exit(ctx, date)
    try:
        movement = service.add_movement(
            amount=movement_amount,
            movement_type=movement_type,
            date=movement_date,
            description=description,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(
        f"Recorded {movement.type.value} of {format_currency(movement.amount)} ({movement.id})"
    )
    click.echo(f"  Patrimony total: {format_currency(service.get_total())}")


@patrimony_group.command("deposit")
@click.argument("amount")
@click.option("--date", default="today", help="Movement date (default: today)")
@click.option("--description", help="Optional note")
@click.pass_context
def deposit(ctx, amount: str, date: str, description: str | None):
    """Move money into the savings pool."""
    _record(ctx, PatrimonyType.DEPOSIT, amount, date, description)


@patrimony_group.command("withdraw")
@click.argument("amount")
@click.option("--date", default="today", help="Movement date (default: today)")
@click.option("--description", help="Optional note")
@click.pass_context
def withdraw(ctx, amount: str, date: str, description: str | None):
    """Take money out of the savings pool."""
    _record(ctx, PatrimonyType.WITHDRAW, amount, date, description)


@patrimony_group.command("list")
@click.pass_context
def list_movements(ctx):
    """List patrimony movements."""
    service = PatrimonyService(ctx.obj["db"])
    movements = service.list_movements()
    if not movements:
        click.echo("No patrimony movements yet.")
        return

    for m in movements:
        sign = "+" if m.type == PatrimonyType.DEPOSIT else "-"
        click.echo(
            f"{m.id:<36} {str(m.date):<12} {sign}{format_currency(m.amount):>14}  {m.description or ''}"
        )
    click.echo(f"\nTotal: {format_currency(service.get_total())}")


@patrimony_group.command("delete")
@click.argument("patrimony_id")
@click.pass_context
def delete_movement(ctx, patrimony_id: str):
    """Delete a patrimony movement."""
    service = PatrimonyService(ctx.obj["db"])
    try:
        service.delete_movement(patrimony_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return
    click.echo(f"Deleted patrimony movement {patrimony_id}")


@patrimony_group.command("status")
@click.option("--goal", default=str(DEFAULT_GOAL_AMOUNT), show_default=True, help="Savings goal")
@click.pass_context
def status(ctx, goal: str):
    """Show the patrimony total and progress towards a goal."""
    service = PatrimonyService(ctx.obj["db"])
    goal_amount = parse_amount_or_exit(ctx, goal)
    total = service.get_total()
    progress = goal_progress(total, goal_amount)

    click.echo(f"Patrimony total: {format_currency(total)}")
    click.echo(f"Goal: {format_currency(progress.goal_amount)}")
    click.echo(f"Progress: {round_percent(progress.percentage)}%")
    click.echo(f"Remaining: {format_currency(progress.remaining)}")


def register_commands(cli):
    """Register patrimony commands with main CLI."""
    cli.add_command(patrimony_group, name="patrimony")
