"""Display helpers for minor-unit amounts and USD figures."""

from decimal import Decimal

MINOR_UNIT_SCALE = 100
BASE_SYMBOL = "ICP"


def minor_to_major(amount: int) -> Decimal:
    """Convert an integer minor-unit amount to a two-decimal major amount."""
    return (Decimal(amount) / MINOR_UNIT_SCALE).quantize(Decimal("0.01"))


def major_to_minor(amount) -> int:
    """Convert a major amount (e.g. ``"1.5"``) to integer minor units."""
    value = Decimal(str(amount)) * MINOR_UNIT_SCALE
    return int(value.to_integral_value())


def format_base(amount: int) -> str:
    """Format a minor-unit amount, e.g. ``500 -> '5.00 ICP'``."""
    return f"{minor_to_major(amount)} {BASE_SYMBOL}"


def format_usd(value: float) -> str:
    """Compact USD formatting used on token cards."""
    if value >= 1e9:
        return f"${value / 1e9:.2f}B"
    if value >= 1e6:
        return f"${value / 1e6:.2f}M"
    if value >= 1e3:
        return f"${value / 1e3:.2f}K"
    return f"${value:.2f}"
