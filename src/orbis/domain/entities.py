"""Domain model entities for orbis.

These are pure data classes representing business concepts, independent of
the database schema. Analytics and insight functions operate on these
snapshots only, so they never depend on how records are stored.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    """Direction of a money movement."""

    INCOME = "income"
    EXPENSE = "expense"


class CategoryType(str, Enum):
    """Which transaction types a category accepts."""

    INCOME = "income"
    EXPENSE = "expense"
    BOTH = "both"


class Recurrence(str, Enum):
    """How often a transaction repeats."""

    UNIQUE = "unique"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class PatrimonyType(str, Enum):
    """Direction of a patrimony movement."""

    DEPOSIT = "deposit"
    WITHDRAW = "withdraw"


class InsightStatus(str, Enum):
    """Tone of an insight message."""

    GOOD = "good"
    NEUTRAL = "neutral"
    WARNING = "warning"


class Reliability(str, Enum):
    """How much history a forecast rests on."""

    LOW = "low"
    HIGH = "high"


@dataclass(frozen=True)
class Category:
    """Category domain entity."""

    id: str
    name: str
    type: CategoryType
    color: Optional[str] = None

    def accepts(self, transaction_type: TransactionType) -> bool:
        """Return True if transactions of this type may use the category."""
        return self.type == CategoryType.BOTH or self.type.value == transaction_type.value


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity.

    ``amount`` is always a positive magnitude; the sign lives in ``type``.
    ``date`` is the economic event date while ``created_at`` records when the
    entry was made.
    """

    id: str
    amount: Decimal
    date: date
    category_id: str
    description: str
    type: TransactionType
    created_at: datetime
    recurrence: Recurrence = Recurrence.UNIQUE
    import_batch_id: Optional[str] = None
    is_imported: bool = False
    original_description: Optional[str] = None

    @property
    def is_edited(self) -> bool:
        """True when an imported transaction's description was changed."""
        return (
            self.is_imported
            and self.original_description is not None
            and self.original_description != self.description
        )


@dataclass(frozen=True)
class PatrimonyTransaction:
    """Patrimony (protected savings) movement."""

    id: str
    amount: Decimal
    type: PatrimonyType
    date: date
    created_at: datetime
    description: Optional[str] = None


@dataclass(frozen=True)
class ImportBatch:
    """One statement import, the unit of undo."""

    id: str
    file_name: str
    date: datetime
    count: int
    total_amount: Decimal


@dataclass
class ParsedCandidate:
    """A parsed statement row awaiting review.

    Mutable on purpose: the review step may change any field before commit.
    """

    temp_id: str
    date: date
    description: str
    amount: Decimal
    type: TransactionType
    category_id: str = ""


@dataclass(frozen=True)
class ColumnMapping:
    """Zero-based CSV column positions for the fields the parser needs."""

    date_index: int
    desc_index: int
    amount_index: int

    @property
    def max_index(self) -> int:
        return max(self.date_index, self.desc_index, self.amount_index)


@dataclass(frozen=True)
class SummaryStats:
    """Headline figures for a (possibly windowed) transaction set."""

    total_income: Decimal
    total_expense: Decimal
    balance: Decimal
    patrimony_total: Decimal
    available_cash: Decimal
    savings_rate: Decimal
    fixed_base: Decimal


@dataclass(frozen=True)
class MonthForecast:
    """Projected end-of-month position."""

    projected_balance: Decimal
    is_positive: bool
    reliability: Reliability
    remaining_income: Decimal
    remaining_expense: Decimal
    avg_income: Decimal
    avg_expense: Decimal
    realized_income: Decimal
    realized_expense: Decimal
    history_months: int


@dataclass(frozen=True)
class MonthlyPoint:
    """Income and expense totals for one calendar month."""

    name: str
    month: date
    income: Decimal
    expense: Decimal


@dataclass(frozen=True)
class BalancePoint:
    """Running balance after one day with activity."""

    date: date
    label: str
    balance: Decimal


@dataclass(frozen=True)
class CategorySlice:
    """Expense total for one category."""

    category_id: str
    name: str
    value: Decimal
    color: str


@dataclass(frozen=True)
class CurrentMonthStats:
    """Consumption figures for the current calendar month."""

    income: Decimal
    expense: Decimal
    expense_ratio: Decimal
    fixed_cost_ratio: Decimal
    expense_growth: Decimal
    top_category_id: Optional[str]
    top_category_amount: Decimal


@dataclass(frozen=True)
class GoalProgress:
    """Progress of the patrimony pool towards a target amount."""

    percentage: Decimal
    goal_amount: Decimal
    remaining: Decimal


@dataclass(frozen=True)
class Insight:
    """A single human-readable observation."""

    text: str
    status: InsightStatus


@dataclass(frozen=True)
class ImportResult:
    """Outcome of committing a reviewed import."""

    batch: ImportBatch
    transactions: tuple[Transaction, ...] = field(default_factory=tuple)
