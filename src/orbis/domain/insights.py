"""Single-insight selection over spending and patrimony history.

``get_smart_insight`` walks an ordered list of rules and returns the first
one that applies. Thresholds live in ``InsightPolicy`` so they can be tuned
without touching the rules.
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from functools import lru_cache
from typing import Optional, Sequence

from orbis.domain.analytics import get_average_monthly_expenses
from orbis.domain.entities import (
    Insight,
    InsightStatus,
    PatrimonyTransaction,
    PatrimonyType,
    Transaction,
    TransactionType,
)
from orbis.utils.currency import format_currency, round_percent
from orbis.utils.date_parser import days_in_month, same_month


@dataclass(frozen=True)
class InsightPolicy:
    """Thresholds for the insight rules."""

    overspend_ratio: Decimal = Decimal("1.20")
    projection_min_days: int = 2
    small_cost_min_daily_avg: Decimal = Decimal("5")
    small_cost_unit_ratio: Decimal = Decimal("0.12")
    small_cost_min_count: int = 4
    small_cost_impact_ratio: Decimal = Decimal("0.5")
    patrimony_max_ratio: Decimal = Decimal("1.10")
    disciplined_ratio: Decimal = Decimal("0.85")
    disciplined_min_days: int = 5
    days_per_month: int = 30
    history_months: int = 3


DEFAULT_POLICY = InsightPolicy()

DAILY_TIPS: tuple[str, ...] = (
    "Registrar gastos no mesmo dia deixa o mês mais fácil de entender.",
    "Separar uma parte da renda logo no início do mês protege seu patrimônio.",
    "Revise suas assinaturas: pequenos valores mensais somam no fim do ano.",
    "Compras por impulso diminuem quando você espera um dia antes de decidir.",
    "Uma reserva de emergência de seis meses de gastos traz tranquilidade.",
    "Categorizar bem suas transações torna os insights mais precisos.",
    "Comparar o mês atual com a sua média ajuda a ajustar a rota cedo.",
)

_ZERO = Decimal("0")


@lru_cache(maxsize=32)
def daily_tip(day: date) -> str:
    """Tip of the day; the same calendar day always yields the same tip."""
    return DAILY_TIPS[day.toordinal() % len(DAILY_TIPS)]


def _project_month_expense(
    expense_so_far: Decimal, today: date, policy: InsightPolicy
) -> Decimal:
    days_passed = today.day
    if days_passed > policy.projection_min_days:
        return expense_so_far * days_in_month(today) / days_passed
    return expense_so_far


def _small_recurring_total(
    expenses: Sequence[Transaction], stable_daily_avg: Decimal, policy: InsightPolicy
) -> Optional[Decimal]:
    """Total of categories with frequent small charges, or None if none."""
    threshold = stable_daily_avg * policy.small_cost_unit_ratio
    groups: dict[str, list[Decimal]] = defaultdict(list)
    for t in expenses:
        if t.amount <= threshold:
            groups[t.category_id].append(t.amount)

    frequent = [amounts for amounts in groups.values() if len(amounts) >= policy.small_cost_min_count]
    if not frequent:
        return None
    return sum((sum(amounts, _ZERO) for amounts in frequent), _ZERO)


def get_smart_insight(
    transactions: Sequence[Transaction],
    patrimony: Sequence[PatrimonyTransaction],
    today: Optional[date] = None,
    policy: InsightPolicy = DEFAULT_POLICY,
) -> Insight:
    """Pick the most relevant observation for the current month.

    Rules, first match wins:
    1. spending projected well above the recent average (warning)
    2. many small charges in the same category adding up (neutral)
    3. a patrimony deposit this month without overspending (good)
    4. spending projected well below the average (good)
    5. the tip of the day (neutral)
    """
    today = today or date.today()
    days_passed = today.day

    current_expenses = [
        t
        for t in transactions
        if t.type == TransactionType.EXPENSE and same_month(t.date, today)
    ]
    expense_so_far = sum((t.amount for t in current_expenses), _ZERO)
    average = get_average_monthly_expenses(
        transactions, months=policy.history_months, today=today
    )
    projection = _project_month_expense(expense_so_far, today, policy)

    if average > 0 and projection > average * policy.overspend_ratio:
        pct = round_percent((projection / average - 1) * 100)
        return Insight(
            text=f"Seus gastos estão {pct}% acima da média habitual.",
            status=InsightStatus.WARNING,
        )

    if average > 0:
        stable_daily_avg = average / policy.days_per_month
    else:
        stable_daily_avg = projection / policy.days_per_month or Decimal("1")

    if stable_daily_avg > policy.small_cost_min_daily_avg:
        small_total = _small_recurring_total(current_expenses, stable_daily_avg, policy)
        if small_total is not None and small_total > stable_daily_avg * policy.small_cost_impact_ratio:
            return Insight(
                text=f"Pequenos gastos recorrentes somam {format_currency(small_total)}/mês.",
                status=InsightStatus.NEUTRAL,
            )

    deposited = any(
        m.type == PatrimonyType.DEPOSIT and same_month(m.date, today) for m in patrimony
    )
    if deposited and (average == 0 or projection <= average * policy.patrimony_max_ratio):
        return Insight(
            text="Seu patrimônio cresceu neste período. A constância é o segredo.",
            status=InsightStatus.GOOD,
        )

    if (
        average > 0
        and projection < average * policy.disciplined_ratio
        and days_passed > policy.disciplined_min_days
    ):
        pct = round_percent((1 - projection / average) * 100)
        return Insight(
            text=f"Controle exemplar. Gastos {pct}% menores que a média histórica.",
            status=InsightStatus.GOOD,
        )

    return Insight(text=daily_tip(today), status=InsightStatus.NEUTRAL)


def is_outlier(
    amount: Decimal,
    category_id: str,
    transactions: Sequence[Transaction],
    min_samples: int = 5,
    factor: Decimal = Decimal("2.5"),
) -> bool:
    """True if an expense is far above the category's usual amount.

    Needs at least ``min_samples`` earlier expenses in the category.
    """
    amounts = [
        t.amount
        for t in transactions
        if t.category_id == category_id and t.type == TransactionType.EXPENSE
    ]
    if len(amounts) < min_samples:
        return False
    average = sum(amounts, _ZERO) / len(amounts)
    return amount > average * factor
