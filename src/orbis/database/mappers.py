"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic so the analytics code never sees
ORM objects.
"""

from decimal import Decimal

from orbis.domain import entities as domain
from orbis.database.models import (
    Category as ORMCategory,
    ImportBatch as ORMImportBatch,
    Transaction as ORMTransaction,
    PatrimonyTransaction as ORMPatrimonyTransaction,
)


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        type=domain.CategoryType(orm_category.type),
        color=orm_category.color,
    )


def category_to_orm(category: domain.Category) -> ORMCategory:
    """Convert domain Category entity to a new SQLAlchemy model."""
    return ORMCategory(
        id=category.id,
        name=category.name,
        type=category.type.value,
        color=category.color,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        amount=Decimal(orm_transaction.amount),
        date=orm_transaction.date,
        category_id=orm_transaction.category_id or "",
        description=orm_transaction.description or "",
        type=domain.TransactionType(orm_transaction.type),
        created_at=orm_transaction.created_at,
        recurrence=domain.Recurrence(orm_transaction.recurrence),
        import_batch_id=orm_transaction.import_batch_id,
        is_imported=bool(orm_transaction.is_imported),
        original_description=orm_transaction.original_description,
    )


def transaction_to_orm(transaction: domain.Transaction) -> ORMTransaction:
    """Convert domain Transaction entity to a new SQLAlchemy model."""
    return ORMTransaction(
        id=transaction.id,
        amount=transaction.amount,
        date=transaction.date,
        category_id=transaction.category_id,
        description=transaction.description,
        type=transaction.type.value,
        recurrence=transaction.recurrence.value,
        created_at=transaction.created_at,
        import_batch_id=transaction.import_batch_id,
        is_imported=transaction.is_imported,
        original_description=transaction.original_description,
    )


def patrimony_to_domain(
    orm_patrimony: ORMPatrimonyTransaction,
) -> domain.PatrimonyTransaction:
    """Convert SQLAlchemy PatrimonyTransaction model to domain entity."""
    return domain.PatrimonyTransaction(
        id=orm_patrimony.id,
        amount=Decimal(orm_patrimony.amount),
        type=domain.PatrimonyType(orm_patrimony.type),
        date=orm_patrimony.date,
        created_at=orm_patrimony.created_at,
        description=orm_patrimony.description,
    )


def patrimony_to_orm(movement: domain.PatrimonyTransaction) -> ORMPatrimonyTransaction:
    """Convert domain PatrimonyTransaction entity to a new SQLAlchemy model."""
    return ORMPatrimonyTransaction(
        id=movement.id,
        amount=movement.amount,
        type=movement.type.value,
        date=movement.date,
        created_at=movement.created_at,
        description=movement.description,
    )


def import_batch_to_domain(orm_batch: ORMImportBatch) -> domain.ImportBatch:
    """Convert SQLAlchemy ImportBatch model to domain ImportBatch entity."""
    return domain.ImportBatch(
        id=orm_batch.id,
        file_name=orm_batch.file_name,
        date=orm_batch.date,
        count=orm_batch.count,
        total_amount=Decimal(orm_batch.total_amount),
    )


def import_batch_to_orm(batch: domain.ImportBatch) -> ORMImportBatch:
    """Convert domain ImportBatch entity to a new SQLAlchemy model."""
    return ORMImportBatch(
        id=batch.id,
        file_name=batch.file_name,
        date=batch.date,
        count=batch.count,
        total_amount=batch.total_amount,
    )
