"""Utility functions for orbis."""

from orbis.utils.date_parser import parse_date, parse_statement_date
from orbis.utils.amount_parser import parse_amount
from orbis.utils.currency import format_currency

__all__ = ["parse_date", "parse_statement_date", "parse_amount", "format_currency"]
