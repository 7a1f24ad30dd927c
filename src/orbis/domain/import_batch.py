"""Import batch domain service: commit reviewed candidates, undo batches."""

import logging
import uuid
from datetime import datetime, UTC
from decimal import Decimal
from typing import Optional, Sequence

from orbis.database.base import Database
from orbis.domain.category import UNCATEGORIZED_CATEGORY_ID
from orbis.domain.entities import (
    ImportBatch,
    ImportResult,
    ParsedCandidate,
    Recurrence,
    Transaction,
)
from orbis.domain.errors import ValidationError

logger = logging.getLogger(__name__)

DEFAULT_BATCH_FILE_NAME = "Importação"


def build_batch(
    candidates: Sequence[ParsedCandidate],
    file_name: Optional[str],
    now: Optional[datetime] = None,
) -> ImportResult:
    """Turn reviewed candidates into committed-ready records.

    Every transaction gets the new batch id, ``is_imported``, its current
    description as ``original_description`` and ``Recurrence.UNIQUE``.
    Rows without a category fall back to the uncategorized category.

    Raises:
        ValidationError: If there are no candidates or any amount is not > 0
    """
    if not candidates:
        raise ValidationError("Nothing to import")

    invalid = [c for c in candidates if c.amount <= 0]
    if invalid:
        rows = ", ".join(f"'{c.description}' ({c.amount})" for c in invalid)
        raise ValidationError(f"Amounts must be greater than zero: {rows}")

    now = now or datetime.now(UTC)
    batch_id = str(uuid.uuid4())

    transactions = tuple(
        Transaction(
            id=str(uuid.uuid4()),
            amount=candidate.amount,
            date=candidate.date,
            category_id=candidate.category_id or UNCATEGORIZED_CATEGORY_ID,
            description=candidate.description,
            type=candidate.type,
            created_at=now,
            recurrence=Recurrence.UNIQUE,
            import_batch_id=batch_id,
            is_imported=True,
            original_description=candidate.description,
        )
        for candidate in candidates
    )
    batch = ImportBatch(
        id=batch_id,
        file_name=file_name or DEFAULT_BATCH_FILE_NAME,
        date=now,
        count=len(transactions),
        total_amount=sum((t.amount for t in transactions), Decimal("0")),
    )
    return ImportResult(batch=batch, transactions=transactions)


class ImportBatchService:
    """Service for committing and undoing statement imports."""

    def __init__(self, db: Database):
        """Initialize import batch service.

        Args:
            db: Database instance
        """
        self.db = db

    def commit(
        self, candidates: Sequence[ParsedCandidate], file_name: Optional[str]
    ) -> ImportResult:
        """Commit reviewed candidates as one batch.

        The batch record and all its transactions are written together.

        Args:
            candidates: Reviewed (possibly edited) candidates
            file_name: Name of the originating statement file

        Returns:
            ImportResult with the batch and committed transactions

        Raises:
            ValidationError: If there are no candidates or an amount is not > 0
        """
        result = build_batch(candidates, file_name)
        self.db.add_import_batch(result.batch, result.transactions)
        logger.info(
            "Committed batch %s from %s with %d transactions",
            result.batch.id,
            result.batch.file_name,
            result.batch.count,
        )
        return result

    def delete_batch(self, batch_id: str) -> int:
        """Undo a batch: remove its transactions and the batch record.

        An unknown batch id removes nothing.

        Returns:
            Number of transactions removed
        """
        removed = self.db.delete_import_batch(batch_id)
        logger.info("Deleted batch %s (%d transactions)", batch_id, removed)
        return removed

    def list_batches(self) -> list[ImportBatch]:
        """List batches, newest first."""
        return sorted(self.db.list_import_batches(), key=lambda b: b.date, reverse=True)

    def get_batch(self, batch_id: str) -> Optional[ImportBatch]:
        """Get a batch by ID, or None."""
        for batch in self.db.list_import_batches():
            if batch.id == batch_id:
                return batch
        return None
