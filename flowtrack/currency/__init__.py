"""Currency table and amount formatting."""

from flowtrack.currency.formatter import (
    CURRENCIES,
    DEFAULT_CURRENCY,
    format_amount,
    get_currency,
    list_currencies,
)

__all__ = [
    "CURRENCIES",
    "DEFAULT_CURRENCY",
    "format_amount",
    "get_currency",
    "list_currencies",
]
