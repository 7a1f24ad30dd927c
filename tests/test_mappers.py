"""Tests for database mappers."""

from datetime import datetime, date, UTC
from decimal import Decimal

from orbis.database.models import (
    Category as ORMCategory,
    ImportBatch as ORMImportBatch,
    PatrimonyTransaction as ORMPatrimonyTransaction,
    Transaction as ORMTransaction,
)
from orbis.database.mappers import (
    category_to_domain,
    category_to_orm,
    import_batch_to_domain,
    patrimony_to_domain,
    transaction_to_domain,
    transaction_to_orm,
)
from orbis.domain.entities import (
    Category,
    CategoryType,
    ImportBatch,
    PatrimonyType,
    Recurrence,
    Transaction,
    TransactionType,
)


class TestCategoryMapper:
    """Tests for Category mapper."""

    def test_category_round_trip(self):
        category = Category(id="cat_4", name="Alimentação", type=CategoryType.EXPENSE, color="#FF8A8A")
        orm_category = category_to_orm(category)
        assert orm_category.type == "expense"
        assert category_to_domain(orm_category) == category

    def test_category_without_color(self):
        orm_category = ORMCategory(id="c", name="X", type="both", color=None)
        assert category_to_domain(orm_category).color is None


class TestTransactionMapper:
    """Tests for Transaction mapper."""

    def test_transaction_to_domain(self):
        created_at = datetime.now(UTC)
        orm_transaction = ORMTransaction(
            id="t1",
            amount=Decimal("45.90"),
            date=date(2024, 1, 15),
            category_id="cat_6",
            description="UBER TRIP",
            type="expense",
            recurrence="unique",
            created_at=created_at,
            import_batch_id="b1",
            is_imported=True,
            original_description="UBER TRIP",
        )

        txn = transaction_to_domain(orm_transaction)

        assert isinstance(txn, Transaction)
        assert txn.amount == Decimal("45.90")
        assert txn.type == TransactionType.EXPENSE
        assert txn.recurrence == Recurrence.UNIQUE
        assert txn.import_batch_id == "b1"
        assert txn.is_imported
        assert txn.created_at == created_at

    def test_transaction_to_orm(self):
        txn = Transaction(
            id="t2",
            amount=Decimal("10"),
            date=date(2024, 1, 1),
            category_id="cat_5",
            description="Aluguel",
            type=TransactionType.EXPENSE,
            created_at=datetime.now(UTC),
            recurrence=Recurrence.MONTHLY,
        )
        orm_transaction = transaction_to_orm(txn)
        assert orm_transaction.type == "expense"
        assert orm_transaction.recurrence == "monthly"
        assert orm_transaction.is_imported is False
        assert transaction_to_domain(orm_transaction) == txn


def test_patrimony_to_domain():
    orm_movement = ORMPatrimonyTransaction(
        id="p1",
        amount=Decimal("500"),
        type="withdraw",
        date=date(2024, 1, 1),
        created_at=datetime.now(UTC),
        description=None,
    )
    movement = patrimony_to_domain(orm_movement)
    assert movement.type == PatrimonyType.WITHDRAW
    assert movement.amount == Decimal("500")


def test_import_batch_to_domain():
    imported_at = datetime(2024, 2, 1, 9, 30)
    orm_batch = ORMImportBatch(
        id="b1", file_name="extrato.ofx", date=imported_at, count=3, total_amount=Decimal("99.90")
    )
    batch = import_batch_to_domain(orm_batch)
    assert batch == ImportBatch(
        id="b1", file_name="extrato.ofx", date=imported_at, count=3, total_amount=Decimal("99.90")
    )
