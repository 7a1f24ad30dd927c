"""Analytics over transaction and patrimony snapshots.

Every function here is pure: it reads the sequences it is given, never
reorders or mutates them, and keeps no state between calls. Functions that
depend on the current date accept ``today`` so results can be pinned.
"""

from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional, Sequence, Union

from orbis.domain.category import UNKNOWN_CATEGORY_COLOR, UNKNOWN_CATEGORY_NAME
from orbis.domain.entities import (
    BalancePoint,
    Category,
    CategorySlice,
    CurrentMonthStats,
    MonthForecast,
    MonthlyPoint,
    PatrimonyTransaction,
    Recurrence,
    Reliability,
    SummaryStats,
    Transaction,
    TransactionType,
)
from orbis.domain.patrimony import calculate_total
from orbis.utils.date_parser import (
    day_label,
    days_in_month,
    month_label,
    month_start,
    months_ago,
    same_month,
)

ZERO = Decimal("0")
HUNDRED = Decimal("100")
HISTORY_MONTHS = 3
FIXED_BASE_WINDOW_DAYS = 30

Window = Union[int, str]


def _sum(transactions: Iterable[Transaction]) -> Decimal:
    return sum((t.amount for t in transactions), ZERO)


def _of_type(
    transactions: Iterable[Transaction], transaction_type: TransactionType
) -> list[Transaction]:
    return [t for t in transactions if t.type == transaction_type]


def _in_month(transactions: Iterable[Transaction], month: date) -> list[Transaction]:
    return [t for t in transactions if same_month(t.date, month)]


def _percent(part: Decimal, whole: Decimal) -> Decimal:
    if whole == 0:
        return ZERO
    return part / whole * HUNDRED


def filter_transactions(
    transactions: Sequence[Transaction],
    window: Window,
    custom_start: Optional[date] = None,
    custom_end: Optional[date] = None,
    today: Optional[date] = None,
) -> list[Transaction]:
    """Restrict transactions to a time window.

    Args:
        transactions: All transactions
        window: ``"all"``, a number of days, or ``"custom"``
        custom_start: Start date for the custom window (inclusive)
        custom_end: Optional end date for the custom window (inclusive)
        today: Reference date, defaults to ``date.today()``

    Returns:
        ``"all"`` returns the transactions unchanged. Other windows keep
        transactions dated on or after the start and sort them by date.
    """
    if window == "all":
        return list(transactions)

    if window == "custom":
        if custom_start is None:
            return list(transactions)
        start = custom_start
    elif isinstance(window, int):
        start = (today or date.today()) - timedelta(days=window)
    else:
        raise ValueError(f"Unknown window: {window!r}")

    kept = [t for t in transactions if t.date >= start]
    if window == "custom" and custom_end is not None:
        kept = [t for t in kept if t.date <= custom_end]
    return sorted(kept, key=lambda t: t.date)


def calculate_fixed_base(transactions: Iterable[Transaction]) -> Decimal:
    """Monthly-equivalent cost of recurring expenses.

    Monthly expenses count in full, yearly ones as a twelfth.
    """
    total = ZERO
    for t in transactions:
        if t.type != TransactionType.EXPENSE:
            continue
        if t.recurrence == Recurrence.MONTHLY:
            total += t.amount
        elif t.recurrence == Recurrence.YEARLY:
            total += t.amount / 12
    return total


def get_summary(
    transactions: Sequence[Transaction],
    patrimony: Sequence[PatrimonyTransaction] = (),
) -> SummaryStats:
    """Headline figures for a transaction set.

    ``patrimony`` is always the full history; only ``transactions`` is
    expected to be windowed.
    """
    total_income = _sum(_of_type(transactions, TransactionType.INCOME))
    total_expense = _sum(_of_type(transactions, TransactionType.EXPENSE))
    balance = total_income - total_expense
    patrimony_total = calculate_total(patrimony)

    return SummaryStats(
        total_income=total_income,
        total_expense=total_expense,
        balance=balance,
        patrimony_total=patrimony_total,
        available_cash=balance - patrimony_total,
        savings_rate=_percent(total_income - total_expense, total_income),
        fixed_base=calculate_fixed_base(transactions),
    )


def _monthly_average(
    transactions: Sequence[Transaction],
    transaction_type: TransactionType,
    months: int,
    today: date,
) -> tuple[Decimal, int]:
    """Average of nonzero monthly totals over the previous ``months`` months.

    Returns the average and how many months contributed to it.
    """
    relevant = _of_type(transactions, transaction_type)
    total = ZERO
    count = 0
    for offset in range(1, months + 1):
        month_total = _sum(_in_month(relevant, months_ago(today, offset)))
        if month_total > 0:
            total += month_total
            count += 1
    if count == 0:
        return ZERO, 0
    return total / count, count


def get_average_monthly_expenses(
    transactions: Sequence[Transaction],
    months: int = HISTORY_MONTHS,
    today: Optional[date] = None,
) -> Decimal:
    """Average monthly expense over the months before the current one.

    Months without any expense are skipped rather than averaged in as zero.
    """
    average, _ = _monthly_average(
        transactions, TransactionType.EXPENSE, months, today or date.today()
    )
    return average


def _recurring_expense(transactions: Iterable[Transaction]) -> Decimal:
    return _sum(
        t
        for t in transactions
        if t.type == TransactionType.EXPENSE and t.recurrence == Recurrence.MONTHLY
    )


def get_month_forecast(
    transactions: Sequence[Transaction],
    current_available_cash: Decimal,
    today: Optional[date] = None,
) -> MonthForecast:
    """Project the available cash at the end of the current month.

    Remaining income is whatever the historical average still expects this
    month. Remaining expense is split in two when history exists:

    * pending recurring: last month's monthly-recurring expenses not yet
      seen this month
    * pending variable: the historical average minus its recurring part,
      minus the variable spending already realized

    Without historical expenses, the month-to-date daily rate is extended to
    the remaining days. Every subtraction is floored at zero.
    """
    today = today or date.today()
    this_month = month_start(today)
    last_month = months_ago(today, 1)

    avg_income, _ = _monthly_average(
        transactions, TransactionType.INCOME, HISTORY_MONTHS, today
    )
    avg_expense, history_months = _monthly_average(
        transactions, TransactionType.EXPENSE, HISTORY_MONTHS, today
    )

    current = _in_month(transactions, this_month)
    realized_income = _sum(_of_type(current, TransactionType.INCOME))
    current_expenses = _of_type(current, TransactionType.EXPENSE)
    realized_expense = _sum(current_expenses)

    remaining_income = max(ZERO, avg_income - realized_income)

    if avg_expense > 0:
        last_month_recurring = _recurring_expense(_in_month(transactions, last_month))
        realized_recurring = _recurring_expense(current_expenses)
        pending_recurring = max(ZERO, last_month_recurring - realized_recurring)

        estimated_variable_total = max(ZERO, avg_expense - last_month_recurring)
        realized_variable = max(ZERO, realized_expense - realized_recurring)
        pending_variable = max(ZERO, estimated_variable_total - realized_variable)

        remaining_expense = pending_recurring + pending_variable
    else:
        days_elapsed = today.day
        days_remaining = days_in_month(today) - days_elapsed
        remaining_expense = realized_expense / days_elapsed * days_remaining

    projected_balance = current_available_cash + remaining_income - remaining_expense

    return MonthForecast(
        projected_balance=projected_balance,
        is_positive=projected_balance >= 0,
        reliability=Reliability.LOW if history_months == 0 else Reliability.HIGH,
        remaining_income=remaining_income,
        remaining_expense=remaining_expense,
        avg_income=avg_income,
        avg_expense=avg_expense,
        realized_income=realized_income,
        realized_expense=realized_expense,
        history_months=history_months,
    )


def get_monthly_data(
    transactions: Sequence[Transaction], limit: Optional[int] = None
) -> list[MonthlyPoint]:
    """Income and expense per calendar month, oldest first.

    Args:
        transactions: Transactions to bucket
        limit: Keep only the most recent ``limit`` months
    """
    buckets: dict[date, dict[TransactionType, Decimal]] = defaultdict(
        lambda: {TransactionType.INCOME: ZERO, TransactionType.EXPENSE: ZERO}
    )
    for t in transactions:
        buckets[month_start(t.date)][t.type] += t.amount

    points = [
        MonthlyPoint(
            name=month_label(month),
            month=month,
            income=totals[TransactionType.INCOME],
            expense=totals[TransactionType.EXPENSE],
        )
        for month, totals in sorted(buckets.items())
    ]
    if limit is not None:
        points = points[-limit:] if limit > 0 else []
    return points


def get_balance_history(transactions: Sequence[Transaction]) -> list[BalancePoint]:
    """Running balance, one point per day that had activity."""
    daily: dict[date, Decimal] = defaultdict(lambda: ZERO)
    for t in transactions:
        signed = t.amount if t.type == TransactionType.INCOME else -t.amount
        daily[t.date] += signed

    history = []
    running = ZERO
    for day in sorted(daily):
        running += daily[day]
        history.append(BalancePoint(date=day, label=day_label(day), balance=running))
    return history


def get_category_distribution(
    transactions: Sequence[Transaction], categories: Sequence[Category]
) -> list[CategorySlice]:
    """Expense totals per category, largest first."""
    by_id = {c.id: c for c in categories}
    totals: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for t in _of_type(transactions, TransactionType.EXPENSE):
        key = t.category_id if t.category_id in by_id else ""
        totals[key] += t.amount

    slices = []
    for category_id, value in totals.items():
        category = by_id.get(category_id)
        slices.append(
            CategorySlice(
                category_id=category_id,
                name=category.name if category else UNKNOWN_CATEGORY_NAME,
                value=value,
                color=(category.color if category else None) or UNKNOWN_CATEGORY_COLOR,
            )
        )
    return sorted(slices, key=lambda s: s.value, reverse=True)


def get_current_month_stats(
    transactions: Sequence[Transaction], today: Optional[date] = None
) -> CurrentMonthStats:
    """How much of this month's income is being consumed.

    ``expense_ratio`` and ``fixed_cost_ratio`` are percentages of this
    month's income; the fixed base is taken over the trailing 30 days so
    recurring entries recorded once per month are counted once.
    ``expense_growth`` compares this month's expenses with last month's
    (0 when last month had none).
    """
    today = today or date.today()
    current = _in_month(transactions, today)
    previous = _in_month(transactions, months_ago(today, 1))

    income = _sum(_of_type(current, TransactionType.INCOME))
    expenses = _of_type(current, TransactionType.EXPENSE)
    expense = _sum(expenses)
    last_expense = _sum(_of_type(previous, TransactionType.EXPENSE))

    fixed_base = calculate_fixed_base(
        filter_transactions(transactions, FIXED_BASE_WINDOW_DAYS, today=today)
    )

    if last_expense > 0:
        growth = (expense - last_expense) / last_expense * HUNDRED
    else:
        growth = ZERO

    by_category: dict[str, Decimal] = defaultdict(lambda: ZERO)
    for t in expenses:
        by_category[t.category_id] += t.amount
    top_category_id = None
    top_amount = ZERO
    for category_id, amount in by_category.items():
        if amount > top_amount:
            top_category_id, top_amount = category_id, amount

    return CurrentMonthStats(
        income=income,
        expense=expense,
        expense_ratio=_percent(expense, income),
        fixed_cost_ratio=_percent(fixed_base, income),
        expense_growth=growth,
        top_category_id=top_category_id,
        top_category_amount=top_amount,
    )
