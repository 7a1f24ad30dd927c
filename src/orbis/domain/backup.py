"""Backup export and restore.

The backup document is a JSON object::

    {"transactions": [...], "patrimony": [...], "categories": [...],
     "batches": [...], "exportedAt": "<iso timestamp>", "app": "ORBIS"}

Keys are camelCase, dates are ISO strings and ``createdAt`` is epoch
milliseconds, so documents produced by earlier versions of the app load
unchanged.
"""

import json
import logging
from datetime import date, datetime, UTC
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Optional

from dateutil import parser as date_parser

from orbis.database.base import Database
from orbis.domain.category import DEFAULT_CATEGORIES, UNCATEGORIZED_CATEGORY_ID
from orbis.domain.entities import (
    Category,
    CategoryType,
    ImportBatch,
    PatrimonyTransaction,
    PatrimonyType,
    Recurrence,
    Transaction,
    TransactionType,
)
from orbis.domain.errors import InvalidBackupError

logger = logging.getLogger(__name__)

BACKUP_APP_MARKER = "ORBIS"


def _millis(value: datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return int(value.timestamp() * 1000)


def _from_millis(value: Any) -> datetime:
    if value is None:
        return datetime.now(UTC)
    if isinstance(value, str):
        return date_parser.isoparse(value)
    return datetime.fromtimestamp(float(value) / 1000, UTC)


def _parse_day(value: Any) -> date:
    return date_parser.isoparse(str(value)).date()


def _decimal(value: Any) -> Decimal:
    amount = Decimal(str(value))
    if not amount.is_finite():
        raise ValueError(f"Invalid amount {value!r}")
    return amount


def _amount_out(value: Decimal) -> float:
    return float(value)


# Serialization

def transaction_to_dict(t: Transaction) -> dict:
    data = {
        "id": t.id,
        "amount": _amount_out(t.amount),
        "dateISO": t.date.isoformat(),
        "categoryId": t.category_id,
        "description": t.description,
        "type": t.type.value,
        "createdAt": _millis(t.created_at),
        "recurrence": t.recurrence.value,
    }
    if t.is_imported:
        data["isImported"] = True
        data["importBatchId"] = t.import_batch_id
        data["originalDescription"] = t.original_description
    return data


def patrimony_to_dict(m: PatrimonyTransaction) -> dict:
    data = {
        "id": m.id,
        "amount": _amount_out(m.amount),
        "type": m.type.value,
        "dateISO": m.date.isoformat(),
        "createdAt": _millis(m.created_at),
    }
    if m.description:
        data["description"] = m.description
    return data


def category_to_dict(c: Category) -> dict:
    data = {"id": c.id, "name": c.name, "type": c.type.value}
    if c.color:
        data["color"] = c.color
    return data


def batch_to_dict(b: ImportBatch) -> dict:
    return {
        "id": b.id,
        "fileName": b.file_name,
        "date": b.date.isoformat(),
        "count": b.count,
        "totalAmount": _amount_out(b.total_amount),
    }


# Deserialization

def transaction_from_dict(data: dict) -> Transaction:
    return Transaction(
        id=str(data["id"]),
        amount=_decimal(data["amount"]),
        date=_parse_day(data["dateISO"]),
        category_id=data.get("categoryId") or UNCATEGORIZED_CATEGORY_ID,
        description=data.get("description") or "",
        type=TransactionType(data["type"]),
        created_at=_from_millis(data.get("createdAt")),
        recurrence=Recurrence(data.get("recurrence") or Recurrence.UNIQUE.value),
        import_batch_id=data.get("importBatchId"),
        is_imported=bool(data.get("isImported", False)),
        original_description=data.get("originalDescription"),
    )


def patrimony_from_dict(data: dict) -> PatrimonyTransaction:
    return PatrimonyTransaction(
        id=str(data["id"]),
        amount=_decimal(data["amount"]),
        type=PatrimonyType(data["type"]),
        date=_parse_day(data["dateISO"]),
        created_at=_from_millis(data.get("createdAt")),
        description=data.get("description"),
    )


def category_from_dict(data: dict) -> Category:
    return Category(
        id=str(data["id"]),
        name=data["name"],
        type=CategoryType(data["type"]),
        color=data.get("color"),
    )


def batch_from_dict(data: dict) -> ImportBatch:
    return ImportBatch(
        id=str(data["id"]),
        file_name=data.get("fileName") or "",
        date=_from_millis(data.get("date")),
        count=int(data.get("count", 0)),
        total_amount=_decimal(data.get("totalAmount", 0)),
    )


def _load_list(data: dict, key: str, loader) -> list:
    try:
        return [loader(item) for item in data[key]]
    except (KeyError, TypeError, ValueError, InvalidOperation, OverflowError) as e:
        raise InvalidBackupError(f"Invalid backup: bad entry in '{key}': {e}") from e


class BackupService:
    """Service for exporting and restoring the whole store."""

    def __init__(self, db: Database):
        """Initialize backup service.

        Args:
            db: Database instance
        """
        self.db = db

    def export_document(self, now: Optional[datetime] = None) -> dict:
        """Build the backup document for the current state."""
        now = now or datetime.now(UTC)
        return {
            "transactions": [transaction_to_dict(t) for t in self.db.list_transactions()],
            "patrimony": [patrimony_to_dict(m) for m in self.db.list_patrimony()],
            "categories": [category_to_dict(c) for c in self.db.list_categories()],
            "batches": [batch_to_dict(b) for b in self.db.list_import_batches()],
            "exportedAt": now.isoformat(),
            "app": BACKUP_APP_MARKER,
        }

    def export_to_file(self, path: str | Path) -> dict:
        """Write the backup document to ``path`` as indented JSON."""
        document = self.export_document()
        Path(path).write_text(
            json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8"
        )
        logger.info(
            "Exported %d transactions to %s", len(document["transactions"]), path
        )
        return document

    def import_document(self, data: Any) -> None:
        """Replace the current state with a backup document.

        ``patrimony`` and ``batches`` are restored only when present as
        lists; missing ``categories`` fall back to the defaults. Nothing is
        written unless the whole document validates.

        Raises:
            InvalidBackupError: If the marker is missing, ``transactions`` is
                not a list, or any entry is malformed
        """
        if not isinstance(data, dict) or data.get("app") != BACKUP_APP_MARKER:
            raise InvalidBackupError("Invalid backup: missing ORBIS marker")
        if not isinstance(data.get("transactions"), list):
            raise InvalidBackupError("Invalid backup: 'transactions' must be a list")

        transactions = _load_list(data, "transactions", transaction_from_dict)

        if isinstance(data.get("patrimony"), list):
            patrimony = _load_list(data, "patrimony", patrimony_from_dict)
        else:
            patrimony = self.db.list_patrimony()

        if isinstance(data.get("batches"), list):
            batches = _load_list(data, "batches", batch_from_dict)
        else:
            batches = self.db.list_import_batches()

        if data.get("categories"):
            categories = _load_list(data, "categories", category_from_dict)
        else:
            categories = list(DEFAULT_CATEGORIES)

        self.db.replace_all(transactions, patrimony, categories, batches)
        logger.info(
            "Restored backup: %d transactions, %d patrimony movements, %d batches",
            len(transactions),
            len(patrimony),
            len(batches),
        )

    def import_from_file(self, path: str | Path) -> None:
        """Read a JSON backup from ``path`` and restore it.

        Raises:
            InvalidBackupError: If the file is not valid JSON or fails validation
        """
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise InvalidBackupError(f"Invalid backup: not valid JSON ({e})") from e
        self.import_document(data)
