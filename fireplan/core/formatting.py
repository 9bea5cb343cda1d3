"""Compact currency labels for chart output."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from types import MappingProxyType

CHART_CURRENCY_SYMBOLS = MappingProxyType(
    {
        "GBP": "£",
        "USD": "$",
        "EUR": "€",
        "CHF": "Fr",
        "JPY": "¥",
        "CAD": "C$",
        "AUD": "A$",
    }
)


def currency_symbol(currency_code: str) -> str:
    """Symbol for a known code, else the code followed by a space."""
    return CHART_CURRENCY_SYMBOLS.get(currency_code, f"{currency_code} ")


def round_half_up(value: float, places: int = 0) -> str:
    """Fixed-point string with halves rounded away from zero (2.5 -> "3")."""
    quantum = Decimal(1).scaleb(-places)
    return str(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def format_compact_value(value: float, currency_code: str) -> str:
    """
    Short K/M/B label for chart text, e.g. "£420K", "$1.2M", "€50".

    Millions and billions keep one decimal; thousands and units none.
    Anything below 1 in magnitude prints as zero.
    """
    symbol = currency_symbol(currency_code)
    magnitude = abs(value)
    sign = "-" if value < 0 else ""

    if magnitude >= 1_000_000_000:
        return f"{sign}{symbol}{round_half_up(magnitude / 1_000_000_000, 1)}B"
    if magnitude >= 1_000_000:
        return f"{sign}{symbol}{round_half_up(magnitude / 1_000_000, 1)}M"
    if magnitude >= 1_000:
        return f"{sign}{symbol}{round_half_up(magnitude / 1_000)}K"
    if magnitude >= 1:
        return f"{sign}{symbol}{round_half_up(magnitude)}"
    return f"{sign}{symbol}0"


__all__ = ["CHART_CURRENCY_SYMBOLS", "currency_symbol", "round_half_up", "format_compact_value"]
