"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

# Import entities directly to avoid circular import through domain/__init__.py
from orbis.domain.entities import (
    Category,
    ImportBatch,
    PatrimonyTransaction,
    Transaction,
)


class Database(ABC):
    """Abstract database interface for orbis.

    Every write method is atomic: it either applies fully or leaves the
    store unchanged.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema and seed default categories."""
        pass

    # Category operations
    @abstractmethod
    def list_categories(self) -> list[Category]:
        """List all categories in seed order."""
        pass

    @abstractmethod
    def get_category(self, category_id: str) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def replace_categories(self, categories: Sequence[Category]) -> None:
        """Replace the whole category list."""
        pass

    # Transaction operations
    @abstractmethod
    def add_transaction(self, transaction: Transaction) -> None:
        """Persist a new transaction."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def update_transaction(self, transaction: Transaction) -> None:
        """Overwrite a stored transaction with the given entity."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction."""
        pass

    @abstractmethod
    def list_transactions(self) -> list[Transaction]:
        """List all transactions ordered by date, then creation time."""
        pass

    # Patrimony operations
    @abstractmethod
    def add_patrimony(self, movement: PatrimonyTransaction) -> None:
        """Persist a new patrimony movement."""
        pass

    @abstractmethod
    def delete_patrimony(self, patrimony_id: str) -> None:
        """Delete a patrimony movement."""
        pass

    @abstractmethod
    def list_patrimony(self) -> list[PatrimonyTransaction]:
        """List all patrimony movements ordered by date."""
        pass

    # Import batch operations
    @abstractmethod
    def add_import_batch(
        self, batch: ImportBatch, transactions: Sequence[Transaction]
    ) -> None:
        """Persist a batch record together with its transactions."""
        pass

    @abstractmethod
    def delete_import_batch(self, batch_id: str) -> int:
        """Delete a batch record and all its transactions.

        Returns the number of transactions removed.
        """
        pass

    @abstractmethod
    def list_import_batches(self) -> list[ImportBatch]:
        """List import batches."""
        pass

    # Whole-store operations
    @abstractmethod
    def replace_all(
        self,
        transactions: Sequence[Transaction],
        patrimony: Sequence[PatrimonyTransaction],
        categories: Sequence[Category],
        batches: Sequence[ImportBatch],
    ) -> None:
        """Replace every list at once (backup restore)."""
        pass

    @abstractmethod
    def reset(self) -> None:
        """Remove all data and re-seed default categories."""
        pass
