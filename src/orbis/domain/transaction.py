"""Transaction domain service."""

import dataclasses
import uuid
from datetime import date, datetime, UTC
from decimal import Decimal
from typing import Optional

from orbis.database.base import Database
from orbis.domain.entities import Recurrence, Transaction, TransactionType
from orbis.domain.errors import (
    NotFoundError,
    ValidationError,
    category_not_found,
    category_type_mismatch,
    non_positive_amount,
    transaction_not_found,
)


class TransactionService:
    """Service for managing manually entered and imported transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def _validate(
        self, amount: Decimal, category_id: str, transaction_type: TransactionType
    ) -> None:
        if amount <= 0:
            raise ValidationError(non_positive_amount(amount))
        category = self.db.get_category(category_id)
        if category is None:
            raise NotFoundError(category_not_found(category_id))
        if not category.accepts(transaction_type):
            raise ValidationError(
                category_type_mismatch(category.name, transaction_type.value)
            )

    def create_transaction(
        self,
        amount: Decimal,
        date: date,
        category_id: str,
        transaction_type: TransactionType,
        description: str = "",
        recurrence: Recurrence = Recurrence.UNIQUE,
    ) -> Transaction:
        """Create a transaction.

        Args:
            amount: Positive amount
            date: Date the money moved
            category_id: Category ID
            transaction_type: Income or expense
            description: Optional description
            recurrence: How often it repeats

        Returns:
            The stored transaction

        Raises:
            ValidationError: If amount is not positive or the category does not
                accept the transaction type
            NotFoundError: If the category doesn't exist
        """
        self._validate(amount, category_id, transaction_type)
        transaction = Transaction(
            id=str(uuid.uuid4()),
            amount=amount,
            date=date,
            category_id=category_id,
            description=description.strip(),
            type=transaction_type,
            created_at=datetime.now(UTC),
            recurrence=recurrence,
        )
        self.db.add_transaction(transaction)
        return transaction

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get transaction by ID."""
        return self.db.get_transaction(transaction_id)

    def update_transaction(
        self,
        transaction_id: str,
        amount: Optional[Decimal] = None,
        date: Optional[date] = None,
        category_id: Optional[str] = None,
        transaction_type: Optional[TransactionType] = None,
        description: Optional[str] = None,
        recurrence: Optional[Recurrence] = None,
    ) -> Transaction:
        """Update transaction fields.

        Only the provided fields change. Imported transactions keep their
        ``original_description``, so editing the description marks them as
        edited.

        Raises:
            NotFoundError: If the transaction or category doesn't exist
            ValidationError: If the resulting record is invalid
        """
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        changes = {}
        if amount is not None:
            changes["amount"] = amount
        if date is not None:
            changes["date"] = date
        if category_id is not None:
            changes["category_id"] = category_id
        if transaction_type is not None:
            changes["type"] = transaction_type
        if description is not None:
            changes["description"] = description.strip()
        if recurrence is not None:
            changes["recurrence"] = recurrence

        updated = dataclasses.replace(txn, **changes)
        self._validate(updated.amount, updated.category_id, updated.type)
        self.db.update_transaction(updated)
        return updated

    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction.

        Raises:
            NotFoundError: If transaction doesn't exist
        """
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        self.db.delete_transaction(transaction_id)

    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        transaction_type: Optional[TransactionType] = None,
        category_id: Optional[str] = None,
    ) -> list[Transaction]:
        """List transactions with optional filters, oldest first."""
        transactions = self.db.list_transactions()
        if start_date is not None:
            transactions = [t for t in transactions if t.date >= start_date]
        if end_date is not None:
            transactions = [t for t in transactions if t.date <= end_date]
        if transaction_type is not None:
            transactions = [t for t in transactions if t.type == transaction_type]
        if category_id is not None:
            transactions = [t for t in transactions if t.category_id == category_id]
        return transactions
