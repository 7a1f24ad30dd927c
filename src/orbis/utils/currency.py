"""Currency formatting helpers."""

from decimal import Decimal, ROUND_HALF_UP


def format_currency(amount: Decimal, symbol: str = "R$") -> str:
    """Format an amount the pt-BR way, e.g. 'R$ 1.234,56'."""
    quantized = Decimal(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if quantized < 0 else ""
    us_style = f"{abs(quantized):,.2f}"
    br_style = us_style.replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}{symbol} {br_style}"


def format_signed(amount: Decimal, symbol: str = "R$") -> str:
    """Format with +/- sign."""
    sign = "+" if amount >= 0 else "-"
    return f"{sign}{format_currency(abs(amount), symbol)}"


def round_percent(value: Decimal) -> int:
    """Round a percentage to the nearest whole number, halves away from zero."""
    return int(Decimal(value).quantize(Decimal(1), rounding=ROUND_HALF_UP))
