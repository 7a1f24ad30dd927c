"""Tests for OFX and CSV statement parsing."""

import logging
from datetime import date
from decimal import Decimal

import pytest

from orbis.domain.entities import ColumnMapping, TransactionType
from orbis.domain.errors import UnsupportedFormatError, ValidationError
from orbis.domain.statement_import import (
    StatementParser,
    decode_statement,
    parse_csv,
    parse_ofx,
    preview_csv,
    split_csv_line,
)

MAPPING = ColumnMapping(date_index=0, desc_index=1, amount_index=2)

OFX_SAMPLE = """OFXHEADER:100
<OFX><BANKMSGSRSV1><STMTTRNRS><STMTRS><BANKTRANLIST>
<STMTTRN>
<TRNTYPE>DEBIT
<DTPOSTED>20240115120000[-3:BRT]
<TRNAMT>-45.90
<MEMO>UBER TRIP
</STMTTRN>
<STMTTRN>
<TRNTYPE>CREDIT
<DTPOSTED>20240105
<TRNAMT>5000.00
<NAME>EMPRESA XYZ SALARIO
</STMTTRN>
</BANKTRANLIST></STMTRS></STMTTRNRS></BANKMSGSRSV1></OFX>
"""


class TestParseOfx:
    """Tests for OFX parsing."""

    def test_example_statement(self):
        candidates = parse_ofx(OFX_SAMPLE)

        assert len(candidates) == 2
        uber = candidates[0]
        assert uber.date == date(2024, 1, 15)
        assert uber.amount == Decimal("45.90")
        assert uber.type == TransactionType.EXPENSE
        assert uber.description == "UBER TRIP"
        assert uber.category_id == "cat_6"

        salary = candidates[1]
        assert salary.type == TransactionType.INCOME
        assert salary.amount == Decimal("5000.00")
        assert salary.description == "EMPRESA XYZ SALARIO"

    def test_block_without_amount_is_dropped(self):
        content = "<STMTTRN><DTPOSTED>20240115<MEMO>X</STMTTRN>"
        assert parse_ofx(content) == []

    def test_missing_description_uses_placeholder(self):
        content = "<STMTTRN>\n<DTPOSTED>20240115\n<TRNAMT>-10.00\n</STMTTRN>"
        (candidate,) = parse_ofx(content)
        assert candidate.description == "Transação"

    def test_bad_block_is_skipped_and_logged(self, caplog):
        content = (
            "<STMTTRN>\n<DTPOSTED>20241399\n<TRNAMT>-10.00\n</STMTTRN>"
            "<STMTTRN>\n<DTPOSTED>20240110\n<TRNAMT>-20.00\n<MEMO>ok\n</STMTTRN>"
        )
        with caplog.at_level(logging.WARNING, logger="orbis.domain.statement_import"):
            candidates = parse_ofx(content)
        assert [c.amount for c in candidates] == [Decimal("20.00")]
        assert "Skipping OFX block 1" in caplog.text

    def test_sgml_entities_are_decoded(self):
        content = "<STMTTRN>\n<DTPOSTED>20240115\n<TRNAMT>-12.00\n<MEMO>PADARIA &amp; CAFE\n</STMTTRN>"
        (candidate,) = parse_ofx(content)
        assert candidate.description == "PADARIA & CAFE"

    def test_empty_content(self):
        assert parse_ofx("") == []


class TestParseCsv:
    """Tests for CSV parsing."""

    def test_amount_conventions(self):
        content = "\n".join(
            [
                "10/01/2024,Supermercado,\"-1.234,56\"",
                "11/01/2024,Salario,\"1,234.56\"",
                "12/01/2024,Padaria,-45,90",
            ]
        )
        mapping = ColumnMapping(date_index=0, desc_index=1, amount_index=2)
        candidates = parse_csv(content, mapping)

        assert [c.amount for c in candidates[:2]] == [Decimal("1234.56"), Decimal("1234.56")]
        assert candidates[0].type == TransactionType.EXPENSE
        assert candidates[1].type == TransactionType.INCOME
        # The unquoted "-45,90" splits into two cells; column 2 holds "-45"
        assert candidates[2].amount == Decimal("45")

    def test_quoted_comma_amount(self):
        (candidate,) = parse_csv('12/01/2024,Padaria,"-45,90"', MAPPING)
        assert candidate.amount == Decimal("45.90")
        assert candidate.date == date(2024, 1, 12)
        assert candidate.category_id == "cat_4"

    def test_header_row_is_skipped(self):
        content = "Data,Descrição,Valor\n01/02/2024,Cinema,\"-30,00\"\n"
        candidates = parse_csv(content, MAPPING)
        assert len(candidates) == 1
        assert candidates[0].description == "Cinema"

    def test_short_and_invalid_rows_are_skipped(self):
        content = "\n".join(
            [
                "01/02/2024,only two",
                "",
                "99/99/2024,Bad date,10",
                "01/02/2024,Bad amount,abc",
                "01/02/2024,Good,10",
            ]
        )
        candidates = parse_csv(content, MAPPING)
        assert [c.description for c in candidates] == ["Good"]

    def test_empty_description_uses_placeholder(self):
        (candidate,) = parse_csv("01/02/2024,,10", MAPPING)
        assert candidate.description == "Importado"

    def test_custom_mapping(self):
        mapping = ColumnMapping(date_index=1, desc_index=0, amount_index=3)
        (candidate,) = parse_csv("Cafe,2024-03-02,x,\"-8,50\"", mapping)
        assert candidate.date == date(2024, 3, 2)
        assert candidate.description == "Cafe"
        assert candidate.amount == Decimal("8.50")

    def test_history_drives_suggestions(self, make_txn):
        history = [make_txn(10, date(2024, 1, 1), description="loja xpto", category_id="cat_7")]
        parser = StatementParser(history=history)
        (candidate,) = parser.parse_csv("01/02/2024,LOJA XPTO,-10", MAPPING)
        assert candidate.category_id == "cat_7"


def test_split_csv_line_respects_quotes():
    assert split_csv_line('a,"b,c",d') == ["a", "b,c", "d"]
    assert split_csv_line(' "x" , y ') == ["x", "y"]


def test_split_csv_line_collapses_escaped_quotes():
    cells = split_csv_line('15/01/2024,"Loja ""A, B""","-10,00"')
    assert cells == ["15/01/2024", 'Loja "A, B"', "-10,00"]


def test_decode_statement_utf8():
    assert decode_statement("Padaria São João".encode("utf-8")) == "Padaria São João"


def test_decode_statement_falls_back_to_cp1252():
    raw = "CHARSET:1252\n<MEMO>Açougue Conceição".encode("cp1252")
    assert decode_statement(raw) == "CHARSET:1252\n<MEMO>Açougue Conceição"


def test_preview_csv():
    content = "\n".join(f"{i},desc {i},{i}" for i in range(10))
    rows = preview_csv(content, rows=3)
    assert rows == [["0", "desc 0", "0"], ["1", "desc 1", "1"], ["2", "desc 2", "2"]]


class TestDispatch:
    """Tests for StatementParser.parse."""

    def test_by_extension(self):
        parser = StatementParser()
        assert len(parser.parse("extrato.OFX", OFX_SAMPLE)) == 2
        assert len(parser.parse("extrato.csv", "01/02/2024,x,10", MAPPING)) == 1

    def test_unsupported_extension(self):
        with pytest.raises(UnsupportedFormatError, match="Format not supported"):
            StatementParser().parse("extrato.pdf", "")

    def test_csv_requires_mapping(self):
        with pytest.raises(ValidationError):
            StatementParser().parse("extrato.csv", "01/02/2024,x,10")


def test_parse_statement_dispatches_with_history(make_txn):
    from orbis.domain.statement_import import parse_statement

    history = [make_txn(10, date(2024, 1, 1), description="uber trip", category_id="cat_7")]
    (first, _) = parse_statement("extrato.ofx", OFX_SAMPLE, history=history)
    assert first.category_id == "cat_7"


def test_suggestion_for_missing_category_is_dropped():
    from orbis.domain.entities import Category, CategoryType

    parser = StatementParser(categories=[Category(id="cat_4", name="Comida", type=CategoryType.EXPENSE)])
    (candidate,) = parser.parse_csv("01/02/2024,UBER TRIP,-10", MAPPING)
    assert candidate.category_id == ""
