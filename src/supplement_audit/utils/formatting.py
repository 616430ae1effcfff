"""
Display formatting for money, percentages and quantities.
"""

from decimal import ROUND_HALF_UP, Decimal

_CENT = Decimal("0.01")


def _to_cents(amount: Decimal | float | int | None) -> Decimal:
    if amount is None:
        return Decimal("0.00")
    return Decimal(str(amount)).quantize(_CENT, rounding=ROUND_HALF_UP)


def format_currency(amount: Decimal | float | int | None) -> str:
    """Format as US dollars, e.g. ``$1,234.50`` or ``-$12.00``."""
    value = _to_cents(amount)
    if value < 0:
        return f"-${abs(value):,.2f}"
    return f"${value:,.2f}"


def format_signed_currency(amount: Decimal | float | int | None) -> str:
    """Format with an explicit sign for positive values, e.g. ``+$50.00``."""
    value = _to_cents(amount)
    if value > 0:
        return f"+{format_currency(value)}"
    return format_currency(value)


def format_percentage(value: float | None, decimals: int = 2) -> str:
    """Format a percentage with sign; ``N/A`` when there is no baseline."""
    if value is None:
        return "N/A"
    rounded = round(value, decimals) or 0.0
    sign = "+" if rounded > 0 else ""
    return f"{sign}{rounded:.{decimals}f}%"


def format_quantity(value: float | None) -> str:
    """Format a quantity without trailing zeros."""
    if value is None:
        return "-"
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text
