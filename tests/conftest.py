"""Shared pytest fixtures for orbis tests."""

import itertools
import tempfile
import os
from datetime import date, datetime, timedelta, UTC
from decimal import Decimal
import pytest

from orbis.database.factories import create_sqlite_database
from orbis.domain.backup import BackupService
from orbis.domain.category import CategoryService
from orbis.domain.entities import (
    PatrimonyTransaction,
    PatrimonyType,
    Recurrence,
    Transaction,
    TransactionType,
)
from orbis.domain.import_batch import ImportBatchService
from orbis.domain.patrimony import PatrimonyService
from orbis.domain.transaction import TransactionService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def patrimony_service(temp_db):
    """Create a PatrimonyService with a temporary database."""
    return PatrimonyService(temp_db)


@pytest.fixture
def batch_service(temp_db):
    """Create an ImportBatchService with a temporary database."""
    return ImportBatchService(temp_db)


@pytest.fixture
def backup_service(temp_db):
    """Create a BackupService with a temporary database."""
    return BackupService(temp_db)


@pytest.fixture
def make_txn():
    """Build in-memory Transaction entities with sensible defaults.

    Each call gets a later ``created_at`` than the previous one.
    """
    counter = itertools.count()
    base = datetime(2024, 1, 1, tzinfo=UTC)

    def _make(
        amount,
        day: date,
        transaction_type: TransactionType = TransactionType.EXPENSE,
        category_id: str = "cat_4",
        description: str = "",
        recurrence: Recurrence = Recurrence.UNIQUE,
        **kwargs,
    ) -> Transaction:
        n = next(counter)
        return Transaction(
            id=f"t{n}",
            amount=Decimal(str(amount)),
            date=day,
            category_id=category_id,
            description=description,
            type=transaction_type,
            created_at=base + timedelta(minutes=n),
            recurrence=recurrence,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_movement():
    """Build in-memory PatrimonyTransaction entities."""
    counter = itertools.count()

    def _make(amount, day: date, movement_type: PatrimonyType = PatrimonyType.DEPOSIT):
        n = next(counter)
        return PatrimonyTransaction(
            id=f"p{n}",
            amount=Decimal(str(amount)),
            type=movement_type,
            date=day,
            created_at=datetime(2024, 1, 1, tzinfo=UTC) + timedelta(minutes=n),
        )

    return _make


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
