"""Tests for the analytics functions."""

from datetime import date
from decimal import Decimal

import pytest

from orbis.domain.analytics import (
    calculate_fixed_base,
    filter_transactions,
    get_average_monthly_expenses,
    get_balance_history,
    get_category_distribution,
    get_current_month_stats,
    get_month_forecast,
    get_monthly_data,
    get_summary,
)
from orbis.domain.category import DEFAULT_CATEGORIES
from orbis.domain.entities import (
    PatrimonyType,
    Recurrence,
    Reliability,
    TransactionType,
)

INCOME = TransactionType.INCOME
EXPENSE = TransactionType.EXPENSE
TODAY = date(2024, 4, 15)


@pytest.fixture
def sample(make_txn):
    return [
        make_txn(5000, date(2024, 1, 5), INCOME, "cat_1", "Salario"),
        make_txn(1200, date(2024, 1, 10), EXPENSE, "cat_5", "Aluguel", Recurrence.MONTHLY),
        make_txn(300, date(2024, 2, 12), EXPENSE, "cat_4", "Mercado"),
        make_txn(5000, date(2024, 3, 5), INCOME, "cat_1", "Salario"),
        make_txn(120, date(2024, 3, 20), EXPENSE, "cat_6", "Uber"),
        make_txn(80, date(2024, 4, 10), EXPENSE, "cat_4", "Padaria"),
    ]


class TestFilterTransactions:
    """Tests for filter_transactions."""

    def test_all_returns_everything_unchanged(self, sample):
        assert filter_transactions(sample, "all") == sample

    def test_days_window(self, sample):
        kept = filter_transactions(sample, 30, today=TODAY)
        assert [t.description for t in kept] == ["Uber", "Padaria"]

    def test_windows_are_monotonic(self, sample):
        small = set(t.id for t in filter_transactions(sample, 7, today=TODAY))
        medium = set(t.id for t in filter_transactions(sample, 30, today=TODAY))
        large = set(t.id for t in filter_transactions(sample, 90, today=TODAY))
        assert small <= medium <= large

    def test_custom_window(self, sample):
        kept = filter_transactions(
            sample, "custom", custom_start=date(2024, 2, 1), custom_end=date(2024, 3, 10)
        )
        assert [t.description for t in kept] == ["Mercado", "Salario"]

    def test_result_is_sorted_by_date(self, sample):
        shuffled = list(reversed(sample))
        kept = filter_transactions(shuffled, 365, today=TODAY)
        assert [t.date for t in kept] == sorted(t.date for t in sample)

    def test_input_not_mutated(self, sample):
        shuffled = list(reversed(sample))
        snapshot = list(shuffled)
        filter_transactions(shuffled, 90, today=TODAY)
        assert shuffled == snapshot

    def test_unknown_window(self, sample):
        with pytest.raises(ValueError):
            filter_transactions(sample, "fortnight")


class TestSummary:
    """Tests for get_summary and calculate_fixed_base."""

    def test_balance_identity(self, sample, make_movement):
        patrimony = [
            make_movement(1000, date(2024, 2, 1)),
            make_movement(200, date(2024, 3, 1), PatrimonyType.WITHDRAW),
        ]
        summary = get_summary(sample, patrimony)

        assert summary.total_income == Decimal("10000")
        assert summary.total_expense == Decimal("1700")
        assert summary.balance == summary.total_income - summary.total_expense
        assert summary.patrimony_total == Decimal("800")
        assert summary.available_cash == summary.balance - summary.patrimony_total
        assert summary.savings_rate == Decimal("83")
        assert summary.fixed_base == Decimal("1200")

    def test_idempotent(self, sample):
        assert get_summary(sample) == get_summary(sample)

    def test_no_income_has_zero_savings_rate(self, make_txn):
        summary = get_summary([make_txn(10, TODAY)])
        assert summary.savings_rate == Decimal("0")
        assert summary.balance == Decimal("-10")

    def test_fixed_base(self, make_txn):
        transactions = [
            make_txn(100, TODAY, recurrence=Recurrence.MONTHLY),
            make_txn(1200, TODAY, recurrence=Recurrence.YEARLY),
            make_txn(999, TODAY),
            make_txn(500, TODAY, INCOME, "cat_1", recurrence=Recurrence.MONTHLY),
        ]
        assert calculate_fixed_base(transactions) == Decimal("200")


class TestAverageAndForecast:
    """Tests for get_average_monthly_expenses and get_month_forecast."""

    def test_average_skips_empty_months(self, sample):
        # Previous three months: Mar 120, Feb 300, Jan 1200
        assert get_average_monthly_expenses(sample, today=TODAY) == Decimal("540")

    def test_average_ignores_months_without_expense(self, make_txn):
        transactions = [make_txn(300, date(2024, 3, 3)), make_txn(100, date(2024, 1, 3))]
        assert get_average_monthly_expenses(transactions, today=TODAY) == Decimal("200")

    def test_average_without_history(self, make_txn):
        assert get_average_monthly_expenses([make_txn(10, TODAY)], today=TODAY) == 0

    def test_forecast_fallback_uses_daily_rate(self, make_txn):
        today = date(2024, 4, 10)
        transactions = [make_txn(100, date(2024, 4, 2)), make_txn(100, date(2024, 4, 8))]

        forecast = get_month_forecast(transactions, Decimal("1000"), today=today)

        assert forecast.reliability == Reliability.LOW
        assert forecast.history_months == 0
        # 200 spent in 10 days, 20 days left
        assert forecast.remaining_expense == Decimal("400")
        assert forecast.remaining_income == Decimal("0")
        assert forecast.projected_balance == Decimal("600")
        assert forecast.is_positive

    def test_forecast_hybrid(self, make_txn):
        today = date(2024, 4, 10)
        transactions = [
            make_txn(3000, date(2024, 3, 5), INCOME, "cat_1"),
            make_txn(1000, date(2024, 3, 1), EXPENSE, "cat_5", recurrence=Recurrence.MONTHLY),
            make_txn(500, date(2024, 3, 15), EXPENSE, "cat_4"),
            # this month so far
            make_txn(1000, date(2024, 4, 1), EXPENSE, "cat_5", recurrence=Recurrence.MONTHLY),
            make_txn(200, date(2024, 4, 3), EXPENSE, "cat_4"),
        ]

        forecast = get_month_forecast(transactions, Decimal("0"), today=today)

        assert forecast.reliability == Reliability.HIGH
        assert forecast.avg_expense == Decimal("1500")
        assert forecast.avg_income == Decimal("3000")
        # rent already paid; 500 variable expected, 200 realized
        assert forecast.remaining_expense == Decimal("300")
        assert forecast.remaining_income == Decimal("3000")
        assert forecast.projected_balance == Decimal("2700")

    def test_forecast_pending_recurring(self, make_txn):
        today = date(2024, 4, 3)
        transactions = [
            make_txn(1000, date(2024, 3, 1), EXPENSE, "cat_5", recurrence=Recurrence.MONTHLY),
            make_txn(500, date(2024, 3, 15), EXPENSE, "cat_4"),
        ]
        forecast = get_month_forecast(transactions, Decimal("2000"), today=today)
        # rent not yet paid this month plus the full variable estimate
        assert forecast.remaining_expense == Decimal("1500")
        assert forecast.projected_balance == Decimal("500")

    def test_forecast_clamps_overspending(self, make_txn):
        today = date(2024, 4, 20)
        transactions = [
            make_txn(500, date(2024, 3, 15), EXPENSE, "cat_4"),
            make_txn(900, date(2024, 4, 2), EXPENSE, "cat_4"),
        ]
        forecast = get_month_forecast(transactions, Decimal("-100"), today=today)
        assert forecast.remaining_expense == Decimal("0")
        assert not forecast.is_positive


class TestSeries:
    """Tests for monthly data, balance history and distribution."""

    def test_monthly_data(self, sample):
        points = get_monthly_data(sample)
        assert [p.name for p in points] == ["jan 24", "fev 24", "mar 24", "abr 24"]
        assert points[0].income == Decimal("5000")
        assert points[0].expense == Decimal("1200")
        assert points[1].income == Decimal("0")

    def test_monthly_data_limit(self, sample):
        points = get_monthly_data(sample, limit=2)
        assert [p.month for p in points] == [date(2024, 3, 1), date(2024, 4, 1)]

    def test_balance_history(self, make_txn):
        transactions = [
            make_txn(100, date(2024, 1, 2), INCOME, "cat_1"),
            make_txn(30, date(2024, 1, 1)),
            make_txn(20, date(2024, 1, 2)),
        ]
        history = get_balance_history(transactions)
        assert [(p.date, p.balance) for p in history] == [
            (date(2024, 1, 1), Decimal("-30")),
            (date(2024, 1, 2), Decimal("50")),
        ]
        assert history[0].label == "01 jan"

    def test_category_distribution(self, make_txn):
        transactions = [
            make_txn(10, TODAY, category_id="cat_4"),
            make_txn(15, TODAY, category_id="cat_4"),
            make_txn(40, TODAY, category_id="cat_6"),
            make_txn(5, TODAY, category_id="gone"),
            make_txn(999, TODAY, INCOME, "cat_1"),
        ]
        slices = get_category_distribution(transactions, DEFAULT_CATEGORIES)

        assert [(s.name, s.value) for s in slices] == [
            ("Transporte", Decimal("40")),
            ("Alimentação", Decimal("25")),
            ("Desconhecido", Decimal("5")),
        ]
        assert slices[2].category_id == ""
        assert slices[1].color == "#FF8A8A"


class TestCurrentMonthStats:
    """Tests for get_current_month_stats."""

    def test_stats(self, make_txn):
        transactions = [
            make_txn(200, date(2024, 3, 10), EXPENSE, "cat_4"),
            make_txn(4000, date(2024, 4, 1), INCOME, "cat_1"),
            make_txn(1000, date(2024, 4, 2), EXPENSE, "cat_5", recurrence=Recurrence.MONTHLY),
            make_txn(300, date(2024, 4, 5), EXPENSE, "cat_4"),
        ]
        stats = get_current_month_stats(transactions, today=TODAY)

        assert stats.income == Decimal("4000")
        assert stats.expense == Decimal("1300")
        assert stats.expense_ratio == Decimal("32.5")
        assert stats.fixed_cost_ratio == Decimal("25")
        assert stats.expense_growth == Decimal("550")
        assert stats.top_category_id == "cat_5"
        assert stats.top_category_amount == Decimal("1000")

    def test_no_previous_month(self, make_txn):
        stats = get_current_month_stats([make_txn(10, TODAY)], today=TODAY)
        assert stats.expense_growth == Decimal("0")
        assert stats.expense_ratio == Decimal("0")
