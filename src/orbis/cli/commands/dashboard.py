"""Dashboard command."""

import click
from orbis.domain.analytics import (
    filter_transactions,
    get_balance_history,
    get_category_distribution,
    get_current_month_stats,
    get_month_forecast,
    get_monthly_data,
    get_summary,
)
from orbis.domain.category import CategoryService
from orbis.domain.entities import Reliability
from orbis.domain.insights import get_smart_insight
from orbis.domain.patrimony import PatrimonyService
from orbis.domain.transaction import TransactionService
from orbis.utils.currency import format_currency, format_signed, round_percent

PERIOD_CHOICES = ["7", "30", "90", "all"]


def _section(title: str) -> None:
    click.echo(f"\n{title}")
    click.echo("-" * 60)


@click.command("dashboard")
@click.option(
    "--period",
    type=click.Choice(PERIOD_CHOICES),
    default="30",
    show_default=True,
    help="Window in days for the summary and distribution",
)
@click.option("--months", default=6, show_default=True, help="Months in the monthly series")
@click.option("--history", is_flag=True, help="Also print the daily balance history")
@click.pass_context
def dashboard(ctx, period: str, months: int, history: bool):
    """Show the summary, forecast, spending breakdown and the insight of the day."""
    db = ctx.obj["db"]
    transactions = TransactionService(db).list_transactions()
    patrimony = PatrimonyService(db).list_movements()
    categories = CategoryService(db).list_categories()
    names = {c.id: c.name for c in categories}

    window = period if period == "all" else int(period)
    windowed = filter_transactions(transactions, window)
    summary = get_summary(windowed, patrimony)

    label = "all time" if period == "all" else f"last {period} days"
    _section(f"Summary ({label})")
    click.echo(f"  Income:          {format_currency(summary.total_income)}")
    click.echo(f"  Expenses:        {format_currency(summary.total_expense)}")
    click.echo(f"  Balance:         {format_currency(summary.balance)}")
    click.echo(f"  Patrimony:       {format_currency(summary.patrimony_total)}")
    click.echo(f"  Available cash:  {format_currency(summary.available_cash)}")
    click.echo(f"  Savings rate:    {round_percent(summary.savings_rate)}%")
    click.echo(f"  Fixed base:      {format_currency(summary.fixed_base)}/month")

    # Forecast works on the full history, not the window
    full_summary = get_summary(transactions, patrimony)
    forecast = get_month_forecast(transactions, full_summary.available_cash)
    _section("End of month forecast")
    click.echo(f"  Projected cash:  {format_currency(forecast.projected_balance)}")
    click.echo(f"  Still to come:   {format_signed(forecast.remaining_income - forecast.remaining_expense)}")
    if forecast.reliability == Reliability.LOW:
        click.echo("  (low reliability: no expense history yet)")

    stats = get_current_month_stats(transactions)
    _section("This month")
    click.echo(f"  Income:          {format_currency(stats.income)}")
    click.echo(f"  Expenses:        {format_currency(stats.expense)} ({round_percent(stats.expense_ratio)}% of income)")
    click.echo(f"  Fixed costs:     {round_percent(stats.fixed_cost_ratio)}% of income")
    click.echo(f"  Vs last month:   {round_percent(stats.expense_growth):+d}%")
    if stats.top_category_id is not None:
        click.echo(
            f"  Top category:    {names.get(stats.top_category_id, stats.top_category_id)} "
            f"({format_currency(stats.top_category_amount)})"
        )

    distribution = get_category_distribution(windowed, categories)
    if distribution:
        _section("Where the money went")
        for slice_ in distribution:
            click.echo(f"  {slice_.name:<16} {format_currency(slice_.value):>14}")

    monthly = get_monthly_data(transactions, limit=months)
    if monthly:
        _section("Monthly")
        for point in monthly:
            click.echo(
                f"  {point.name:<8} in {format_currency(point.income):>14}   "
                f"out {format_currency(point.expense):>14}"
            )

    if history:
        _section("Balance history")
        for point in get_balance_history(windowed):
            click.echo(f"  {point.label:<8} {format_currency(point.balance):>14}")

    insight = get_smart_insight(transactions, patrimony)
    _section(f"Insight ({insight.status.value})")
    click.echo(f"  {insight.text}")


def register_commands(cli):
    """Register dashboard command with main CLI."""
    cli.add_command(dashboard)
