"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse a statement amount string into a signed Decimal.

    Handles both decimal conventions found in bank exports:
    - "1,234.56" (US)
    - "1.234,56" (European / Brazilian)
    - "45,90" (comma as the only separator is the decimal point)
    - "R$ -45,90" (currency symbols and spaces are dropped)

    When both ``,`` and ``.`` appear, whichever comes last is the decimal
    separator and the other is a thousands separator.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount, negative for debits

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    cleaned = re.sub(r"[^\d.,-]", "", amount_str)

    if "," in cleaned and "." in cleaned:
        if cleaned.rfind(",") > cleaned.rfind("."):
            cleaned = cleaned.replace(".", "").replace(",", ".")
        else:
            cleaned = cleaned.replace(",", "")
    elif cleaned.count(",") == 1:
        cleaned = cleaned.replace(",", ".")
    elif "," in cleaned:
        # "1,234,567" has no decimal part
        cleaned = cleaned.replace(",", "")
    elif cleaned.count(".") > 1:
        cleaned = cleaned.replace(".", "")

    try:
        amount = Decimal(cleaned)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")

    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return amount


def parse_positive_amount(amount_str: str) -> Decimal:
    """Parse an amount that must be strictly positive.

    Raises:
        ValueError: If the string cannot be parsed or is not > 0
    """
    amount = parse_amount(amount_str)
    if amount <= 0:
        raise ValueError(f"Amount must be greater than zero (got {amount})")
    return amount
