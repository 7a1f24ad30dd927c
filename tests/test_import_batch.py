"""Tests for committing and undoing import batches."""

from datetime import date, datetime, UTC
from decimal import Decimal
from unittest.mock import patch

import pytest

from orbis.domain.entities import ParsedCandidate, Recurrence, TransactionType
from orbis.domain.errors import ValidationError
from orbis.domain.import_batch import build_batch


def _candidate(amount, description="Compra", category_id="", temp_id="c"):
    return ParsedCandidate(
        temp_id=temp_id,
        date=date(2024, 2, 1),
        description=description,
        amount=Decimal(str(amount)),
        type=TransactionType.EXPENSE,
        category_id=category_id,
    )


class TestBuildBatch:
    """Tests for build_batch."""

    def test_marks_every_transaction(self):
        now = datetime(2024, 2, 2, 10, 0, tzinfo=UTC)
        result = build_batch(
            [_candidate(10, "Uber", "cat_6"), _candidate(5, "Cafe", "")],
            "extrato.ofx",
            now=now,
        )

        assert result.batch.file_name == "extrato.ofx"
        assert result.batch.count == 2
        assert result.batch.total_amount == Decimal("15")
        assert result.batch.date == now
        for txn in result.transactions:
            assert txn.import_batch_id == result.batch.id
            assert txn.is_imported
            assert txn.original_description == txn.description
            assert txn.recurrence == Recurrence.UNIQUE
            assert txn.created_at == now
            assert not txn.is_edited

    def test_empty_category_falls_back(self):
        result = build_batch([_candidate(5, category_id="")], "x.csv")
        assert result.transactions[0].category_id == "cat_10"

    def test_default_file_name(self):
        result = build_batch([_candidate(5)], None)
        assert result.batch.file_name == "Importação"

    def test_rejects_empty(self):
        with pytest.raises(ValidationError):
            build_batch([], "x.csv")

    def test_rejects_non_positive_amount(self):
        with pytest.raises(ValidationError, match="greater than zero"):
            build_batch([_candidate(5), _candidate(0, "Zero")], "x.csv")


class TestImportBatchService:
    """Tests for ImportBatchService against the database."""

    def test_commit_persists_batch_and_transactions(self, batch_service, temp_db):
        result = batch_service.commit([_candidate(10), _candidate(20)], "a.csv")

        stored = temp_db.list_transactions()
        assert len(stored) == 2
        assert {t.import_batch_id for t in stored} == {result.batch.id}
        assert batch_service.get_batch(result.batch.id).count == 2

    def test_commit_is_atomic(self, batch_service, temp_db):
        with patch(
            "orbis.database.sqlalchemy_db.transaction_to_orm",
            side_effect=RuntimeError("disk full"),
        ):
            with pytest.raises(RuntimeError):
                batch_service.commit([_candidate(10)], "a.csv")

        assert temp_db.list_transactions() == []
        assert temp_db.list_import_batches() == []

    def test_delete_batch_leaves_other_data(self, batch_service, transaction_service, temp_db):
        manual = transaction_service.create_transaction(
            amount=Decimal("99"),
            date=date(2024, 2, 1),
            category_id="cat_4",
            transaction_type=TransactionType.EXPENSE,
            description="manual",
        )
        first = batch_service.commit([_candidate(10), _candidate(20)], "a.csv")
        second = batch_service.commit([_candidate(30)], "b.csv")

        removed = batch_service.delete_batch(first.batch.id)

        assert removed == 2
        remaining = temp_db.list_transactions()
        assert {t.id for t in remaining} == {manual.id, second.transactions[0].id}
        assert [b.id for b in batch_service.list_batches()] == [second.batch.id]

    def test_delete_unknown_batch_is_noop(self, batch_service, temp_db):
        batch_service.commit([_candidate(10)], "a.csv")
        assert batch_service.delete_batch("does-not-exist") == 0
        assert len(temp_db.list_transactions()) == 1
        assert len(temp_db.list_import_batches()) == 1

    def test_list_batches_newest_first(self, batch_service):
        first = batch_service.commit([_candidate(10)], "a.csv")
        second = batch_service.commit([_candidate(10)], "b.csv")
        assert [b.id for b in batch_service.list_batches()] == [second.batch.id, first.batch.id]

    def test_get_batch_unknown(self, batch_service):
        assert batch_service.get_batch("nope") is None
