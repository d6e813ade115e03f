"""
Currency formatting for P/L display.
"""
from decimal import ROUND_HALF_UP, Decimal


def format_currency(amount: float) -> str:
    """Whole-dollar USD amount, e.g. ``$1,235`` or ``-$500``."""
    rounded = Decimal(str(amount)).quantize(Decimal('1'), rounding=ROUND_HALF_UP)
    if rounded == 0:
        return "$0"
    if rounded < 0:
        return f"-${-rounded:,}"
    return f"${rounded:,}"


def format_profit_loss(amount: float) -> str:
    """Signed P/L, e.g. ``+$700`` or ``-$400``. Zero counts as a gain."""
    formatted = format_currency(amount)
    return formatted if formatted.startswith('-') else f"+{formatted}"
