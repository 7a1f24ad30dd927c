"""Bank statement parsing (OFX and CSV) into reviewable candidates."""

import csv
import html
import logging
import re
import uuid
from pathlib import Path
from typing import Optional, Sequence

from orbis.domain.classifier import suggest_category
from orbis.domain.entities import (
    Category,
    ColumnMapping,
    ParsedCandidate,
    Transaction,
    TransactionType,
)
from orbis.domain.errors import UnsupportedFormatError, ValidationError, unsupported_format
from orbis.utils.amount_parser import parse_amount
from orbis.utils.date_parser import parse_ofx_date, parse_statement_date

logger = logging.getLogger(__name__)

OFX_BLOCK_TAG = "<STMTTRN>"
OFX_PLACEHOLDER_DESCRIPTION = "Transação"
CSV_PLACEHOLDER_DESCRIPTION = "Importado"

_OFX_AMOUNT = re.compile(r"<TRNAMT>\s*([\d.,+-]+)")
_OFX_DATE = re.compile(r"<DTPOSTED>\s*(\d+)")
_OFX_MEMO = re.compile(r"<MEMO>([^<\r\n]*)")
_OFX_NAME = re.compile(r"<NAME>([^<\r\n]*)")

SUPPORTED_EXTENSIONS = (".ofx", ".csv")


def split_csv_line(line: str) -> list[str]:
    """Split a CSV line on commas outside quote pairs.

    Wrapping quotes are removed, doubled quotes inside a quoted cell collapse
    to one, and surrounding whitespace is stripped.
    """
    cells = next(csv.reader([line], skipinitialspace=True), [])
    return [cell.strip() for cell in cells]


def decode_statement(raw: bytes) -> str:
    """Decode statement bytes as UTF-8, falling back to Windows-1252.

    Brazilian banks commonly export OFX files with ``CHARSET:1252``.
    """
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        logger.info("Statement is not UTF-8, decoding as cp1252")
        return raw.decode("cp1252", errors="replace")


def _sign_to_type(amount) -> TransactionType:
    return TransactionType.EXPENSE if amount < 0 else TransactionType.INCOME


def _new_temp_id() -> str:
    return str(uuid.uuid4())


class StatementParser:
    """Turns raw statement text into ParsedCandidate rows.

    Malformed units (an OFX block, a CSV row) are skipped; a file never
    fails as a whole because of one bad entry.
    """

    def __init__(
        self,
        categories: Sequence[Category] = (),
        history: Sequence[Transaction] = (),
    ):
        """Initialize the parser.

        Args:
            categories: Known categories
            history: Existing transactions used for category suggestions
        """
        self.categories = tuple(categories)
        self.history = tuple(history)

    def _suggest(self, description: str) -> str:
        category_id = suggest_category(description, self.history) or ""
        # Suggestions pointing at a category the user no longer has are dropped
        if self.categories and category_id not in {c.id for c in self.categories}:
            return ""
        return category_id

    def parse_ofx(self, content: str) -> list[ParsedCandidate]:
        """Parse OFX content.

        Blocks without both an amount and a posted date are dropped silently;
        OFX files routinely carry non-transaction blocks.
        """
        results: list[ParsedCandidate] = []
        blocks = content.split(OFX_BLOCK_TAG)[1:]

        for block_num, block in enumerate(blocks, start=1):
            try:
                candidate = self._parse_ofx_block(block)
            except (ValueError, ArithmeticError) as e:
                logger.warning("Skipping OFX block %d: %s", block_num, e)
                continue
            if candidate is not None:
                results.append(candidate)

        logger.info("Parsed %d candidates from %d OFX blocks", len(results), len(blocks))
        return results

    def _parse_ofx_block(self, block: str) -> Optional[ParsedCandidate]:
        amount_match = _OFX_AMOUNT.search(block)
        date_match = _OFX_DATE.search(block)
        if amount_match is None or date_match is None:
            return None

        amount_raw = parse_amount(amount_match.group(1))
        txn_date = parse_ofx_date(date_match.group(1))

        memo_match = _OFX_MEMO.search(block)
        name_match = _OFX_NAME.search(block)
        if memo_match is not None and memo_match.group(1).strip():
            description = memo_match.group(1)
        elif name_match is not None and name_match.group(1).strip():
            description = name_match.group(1)
        else:
            description = OFX_PLACEHOLDER_DESCRIPTION
        description = html.unescape(description).strip()

        return ParsedCandidate(
            temp_id=_new_temp_id(),
            date=txn_date,
            description=description,
            amount=abs(amount_raw),
            type=_sign_to_type(amount_raw),
            category_id=self._suggest(description),
        )

    def parse_csv(self, content: str, mapping: ColumnMapping) -> list[ParsedCandidate]:
        """Parse CSV content using caller supplied column positions.

        Header rows need no special handling: their date cell does not parse
        and the row is skipped like any other invalid row.
        """
        results: list[ParsedCandidate] = []

        for row_num, line in enumerate(content.splitlines(), start=1):
            if not line.strip():
                continue

            cols = split_csv_line(line)
            if len(cols) <= mapping.max_index:
                logger.debug("Row %d: expected %d columns, got %d", row_num, mapping.max_index + 1, len(cols))
                continue

            try:
                txn_date = parse_statement_date(cols[mapping.date_index])
                amount_raw = parse_amount(cols[mapping.amount_index])
            except (ValueError, ArithmeticError) as e:
                logger.debug("Row %d: skipped (%s)", row_num, e)
                continue

            description = cols[mapping.desc_index] or CSV_PLACEHOLDER_DESCRIPTION
            results.append(
                ParsedCandidate(
                    temp_id=_new_temp_id(),
                    date=txn_date,
                    description=description,
                    amount=abs(amount_raw),
                    type=_sign_to_type(amount_raw),
                    category_id=self._suggest(description),
                )
            )

        logger.info("Parsed %d candidates from CSV", len(results))
        return results

    def parse(
        self,
        file_name: str,
        content: str,
        mapping: Optional[ColumnMapping] = None,
    ) -> list[ParsedCandidate]:
        """Dispatch on file extension.

        Raises:
            UnsupportedFormatError: If the extension is neither .ofx nor .csv
            ValidationError: If a CSV file is given without a column mapping
        """
        extension = Path(file_name).suffix.lower()
        if extension == ".ofx":
            return self.parse_ofx(content)
        if extension == ".csv":
            if mapping is None:
                raise ValidationError("CSV import requires a column mapping")
            return self.parse_csv(content, mapping)
        raise UnsupportedFormatError(unsupported_format(file_name))


def parse_ofx(
    content: str,
    categories: Sequence[Category] = (),
    history: Sequence[Transaction] = (),
) -> list[ParsedCandidate]:
    """Parse OFX content into candidates."""
    return StatementParser(categories, history).parse_ofx(content)


def parse_csv(
    content: str,
    mapping: ColumnMapping,
    categories: Sequence[Category] = (),
    history: Sequence[Transaction] = (),
) -> list[ParsedCandidate]:
    """Parse CSV content into candidates."""
    return StatementParser(categories, history).parse_csv(content, mapping)


def parse_statement(
    file_name: str,
    content: str,
    mapping: Optional[ColumnMapping] = None,
    categories: Sequence[Category] = (),
    history: Sequence[Transaction] = (),
) -> list[ParsedCandidate]:
    """Parse a statement file, choosing the format from its extension."""
    return StatementParser(categories, history).parse(file_name, content, mapping)


def preview_csv(content: str, rows: int = 5) -> list[list[str]]:
    """Return the first non-blank rows, split, for the column mapping step."""
    lines = [line for line in content.splitlines() if line.strip()]
    return [split_csv_line(line) for line in lines[:rows]]
