"""Generic SQLAlchemy database implementation."""

import logging
from typing import Optional, Sequence
from sqlalchemy.orm import Session

from orbis.database.base import Database
from orbis.database.models import (
    Category,
    ImportBatch,
    PatrimonyTransaction,
    Transaction,
    create_session_factory,
)
from orbis.database.mappers import (
    category_to_domain,
    category_to_orm,
    import_batch_to_domain,
    import_batch_to_orm,
    patrimony_to_domain,
    patrimony_to_orm,
    transaction_to_domain,
    transaction_to_orm,
)
from orbis.domain.entities import (
    Category as DomainCategory,
    ImportBatch as DomainImportBatch,
    PatrimonyTransaction as DomainPatrimonyTransaction,
    Transaction as DomainTransaction,
)

logger = logging.getLogger(__name__)


class SQLAlchemyDatabase(Database):
    """SQLAlchemy-based implementation of Database interface."""

    def __init__(self, database_url: str):
        """Initialize SQLAlchemy database.

        Args:
            database_url: SQLAlchemy database URL (e.g., 'sqlite:///path/to.db')
        """
        self.database_url = database_url
        self.session_factory = create_session_factory(database_url)
        self._session: Optional[Session] = None

    def _get_session(self) -> Session:
        """Get current session, creating one if needed."""
        if self._session is None:
            self._session = self.session_factory()
        return self._session

    def connect(self) -> None:
        """Connect to the database."""
        # Connection is lazy, so this is a no-op
        pass

    def disconnect(self) -> None:
        """Disconnect from the database."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def initialize_schema(self) -> None:
        """Seed default categories into an empty category table."""
        # Tables are created by create_session_factory
        session = self._get_session()
        if session.query(Category).count() == 0:
            self._seed_categories(session)
            session.commit()

    def _seed_categories(self, session: Session) -> None:
        # Imported here: orbis.domain.category depends on this module via base
        from orbis.domain.category import DEFAULT_CATEGORIES

        for position, category in enumerate(DEFAULT_CATEGORIES):
            orm_category = category_to_orm(category)
            orm_category.position = position
            session.add(orm_category)
        logger.debug("Seeded %d default categories", len(DEFAULT_CATEGORIES))

    # Category operations
    def list_categories(self) -> list[DomainCategory]:
        """List all categories in seed order."""
        session = self._get_session()
        categories = session.query(Category).order_by(Category.position).all()
        return [category_to_domain(cat) for cat in categories]

    def get_category(self, category_id: str) -> Optional[DomainCategory]:
        """Get category by ID."""
        session = self._get_session()
        cat = session.query(Category).filter(Category.id == category_id).first()
        if cat is None:
            return None
        return category_to_domain(cat)

    def replace_categories(self, categories: Sequence[DomainCategory]) -> None:
        """Replace the whole category list."""
        session = self._get_session()
        try:
            session.query(Category).delete(synchronize_session=False)
            session.expunge_all()
            self._add_categories(session, categories)
            session.commit()
        except Exception:
            session.rollback()
            raise

    def _add_categories(
        self, session: Session, categories: Sequence[DomainCategory]
    ) -> None:
        for position, category in enumerate(categories):
            orm_category = category_to_orm(category)
            orm_category.position = position
            session.add(orm_category)

    # Transaction operations
    def add_transaction(self, transaction: DomainTransaction) -> None:
        """Persist a new transaction."""
        session = self._get_session()
        session.add(transaction_to_orm(transaction))
        session.commit()

    def get_transaction(self, transaction_id: str) -> Optional[DomainTransaction]:
        """Get transaction by ID."""
        session = self._get_session()
        txn = session.query(Transaction).filter(Transaction.id == transaction_id).first()
        if txn is None:
            return None
        return transaction_to_domain(txn)

    def update_transaction(self, transaction: DomainTransaction) -> None:
        """Overwrite a stored transaction with the given entity."""
        session = self._get_session()
        txn = session.query(Transaction).filter(Transaction.id == transaction.id).first()
        if txn is None:
            raise ValueError(f"Transaction {transaction.id} not found")

        txn.amount = transaction.amount
        txn.date = transaction.date
        txn.category_id = transaction.category_id
        txn.description = transaction.description
        txn.type = transaction.type.value
        txn.recurrence = transaction.recurrence.value
        session.commit()

    def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction."""
        session = self._get_session()
        txn = session.query(Transaction).filter(Transaction.id == transaction_id).first()
        if txn is None:
            raise ValueError(f"Transaction {transaction_id} not found")
        session.delete(txn)
        session.commit()

    def list_transactions(self) -> list[DomainTransaction]:
        """List all transactions ordered by date, then creation time."""
        session = self._get_session()
        transactions = (
            session.query(Transaction)
            .order_by(Transaction.date, Transaction.created_at)
            .all()
        )
        return [transaction_to_domain(txn) for txn in transactions]

    # Patrimony operations
    def add_patrimony(self, movement: DomainPatrimonyTransaction) -> None:
        """Persist a new patrimony movement."""
        session = self._get_session()
        session.add(patrimony_to_orm(movement))
        session.commit()

    def delete_patrimony(self, patrimony_id: str) -> None:
        """Delete a patrimony movement."""
        session = self._get_session()
        movement = (
            session.query(PatrimonyTransaction)
            .filter(PatrimonyTransaction.id == patrimony_id)
            .first()
        )
        if movement is None:
            raise ValueError(f"Patrimony movement {patrimony_id} not found")
        session.delete(movement)
        session.commit()

    def list_patrimony(self) -> list[DomainPatrimonyTransaction]:
        """List all patrimony movements ordered by date."""
        session = self._get_session()
        movements = (
            session.query(PatrimonyTransaction)
            .order_by(PatrimonyTransaction.date, PatrimonyTransaction.created_at)
            .all()
        )
        return [patrimony_to_domain(m) for m in movements]

    # Import batch operations
    def add_import_batch(
        self, batch: DomainImportBatch, transactions: Sequence[DomainTransaction]
    ) -> None:
        """Persist a batch record together with its transactions."""
        session = self._get_session()
        try:
            session.add(import_batch_to_orm(batch))
            session.add_all(transaction_to_orm(txn) for txn in transactions)
            session.commit()
        except Exception:
            session.rollback()
            raise

    def delete_import_batch(self, batch_id: str) -> int:
        """Delete a batch record and all its transactions."""
        session = self._get_session()
        try:
            removed = (
                session.query(Transaction)
                .filter(Transaction.import_batch_id == batch_id)
                .delete(synchronize_session=False)
            )
            session.query(ImportBatch).filter(ImportBatch.id == batch_id).delete(
                synchronize_session=False
            )
            session.commit()
        except Exception:
            session.rollback()
            raise
        return removed

    def list_import_batches(self) -> list[DomainImportBatch]:
        """List import batches, newest first."""
        session = self._get_session()
        batches = session.query(ImportBatch).order_by(ImportBatch.date.desc()).all()
        return [import_batch_to_domain(b) for b in batches]

    # Whole-store operations
    def replace_all(
        self,
        transactions: Sequence[DomainTransaction],
        patrimony: Sequence[DomainPatrimonyTransaction],
        categories: Sequence[DomainCategory],
        batches: Sequence[DomainImportBatch],
    ) -> None:
        """Replace every list at once (backup restore)."""
        session = self._get_session()
        try:
            self._clear(session)
            self._add_categories(session, categories)
            session.add_all(import_batch_to_orm(b) for b in batches)
            session.add_all(patrimony_to_orm(m) for m in patrimony)
            session.add_all(transaction_to_orm(t) for t in transactions)
            session.commit()
        except Exception:
            session.rollback()
            raise

    def reset(self) -> None:
        """Remove all data and re-seed default categories."""
        session = self._get_session()
        try:
            self._clear(session)
            self._seed_categories(session)
            session.commit()
        except Exception:
            session.rollback()
            raise

    def _clear(self, session: Session) -> None:
        session.query(Transaction).delete(synchronize_session=False)
        session.query(ImportBatch).delete(synchronize_session=False)
        session.query(PatrimonyTransaction).delete(synchronize_session=False)
        session.query(Category).delete(synchronize_session=False)
        session.expunge_all()
