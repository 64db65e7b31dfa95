from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

NOT_AVAILABLE = "N/A"

_SUFFIXES = (
    (1e12, "T"),
    (1e9, "B"),
    (1e6, "M"),
)


def _fixed(value: float, places: int) -> Decimal:
    """Round the exact binary value half away from zero (toFixed semantics)."""
    if value == 0:
        value = 0.0  # folds -0.0
    return Decimal(value).quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)


def format_price(price: float) -> str:
    # sub-unit prices keep 6 decimals
    if price >= 1:
        return f"{_fixed(price, 2):,.2f}"
    return f"{_fixed(price, 6):.6f}"


def format_large_number(value: float) -> str:
    """
    Market cap / volume style: 1.50T, 2.31B, 4.00M.
    Below one million: en-US grouping with up to 3 fraction digits, no suffix.
    """
    for threshold, suffix in _SUFFIXES:
        if value >= threshold:
            return f"{_fixed(value / threshold, 2):.2f}{suffix}"

    return f"{_fixed(value, 3):,.3f}".rstrip("0").rstrip(".")


def format_percentage(percentage: Optional[float]) -> str:
    if percentage is None:
        return NOT_AVAILABLE
    sign = "+" if percentage >= 0 else ""
    return f"{sign}{_fixed(percentage, 2):.2f}%"


def change_class(percentage: Optional[float]) -> str:
    if percentage is None:
        return "neutral"
    if percentage > 0:
        return "positive"
    if percentage < 0:
        return "negative"
    return "neutral"


def format_rank(rank: Optional[int]) -> str:
    return f"#{rank}" if rank else f"#{NOT_AVAILABLE}"
