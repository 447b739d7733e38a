"""
Currency Formatting

Static currency table plus the one function every screen uses to turn
an amount into display text.

DESIGN DECISION: A whole amount drops its decimals even for currencies
that have them ("$100", not "$100.00"). This is a display choice of the
app, not standard currency formatting.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional

from flowtrack.models.currency import CurrencyDescriptor, SymbolPosition


DEFAULT_CURRENCY = "PKR"


def _currency(code, symbol, name, position=SymbolPosition.BEFORE,
              decimal_places=2, decimal_separator=".", thousands_separator=","):
    return CurrencyDescriptor(
        code=code,
        symbol=symbol,
        name=name,
        position=position,
        decimal_places=decimal_places,
        decimal_separator=decimal_separator,
        thousands_separator=thousands_separator,
    )


CURRENCIES: dict[str, CurrencyDescriptor] = {
    c.code: c
    for c in (
        _currency("USD", "$", "US Dollar"),
        _currency("EUR", "€", "Euro", position=SymbolPosition.AFTER,
                  decimal_separator=",", thousands_separator="."),
        _currency("GBP", "£", "British Pound"),
        _currency("JPY", "¥", "Japanese Yen", decimal_places=0),
        _currency("INR", "₹", "Indian Rupee"),
        _currency("PKR", "₨", "Pakistani Rupee"),
        _currency("AUD", "A$", "Australian Dollar"),
        _currency("CAD", "C$", "Canadian Dollar"),
        _currency("CNY", "¥", "Chinese Yuan"),
        _currency("AED", "د.إ", "UAE Dirham"),
        _currency("SAR", "﷼", "Saudi Riyal"),
        _currency("SGD", "S$", "Singapore Dollar"),
        _currency("VUV", "Vt", "Vanuatu Vatu", decimal_places=0),
        _currency("YER", "﷼", "Yemeni Rial", decimal_places=0),
        _currency("ZAR", "R", "South African Rand"),
        _currency("ZMW", "ZK", "Zambian Kwacha"),
        _currency("ZWL", "Z$", "Zimbabwean Dollar"),
    )
}


def get_currency(code: Optional[str]) -> Optional[CurrencyDescriptor]:
    """Look up a currency by code. Returns None for unknown codes."""
    if not code:
        return None
    return CURRENCIES.get(code)


def list_currencies() -> list[CurrencyDescriptor]:
    """All supported currencies, in table order."""
    return list(CURRENCIES.values())


def _to_decimal(amount) -> Optional[Decimal]:
    """Parse an amount into a finite Decimal, or None if it is not a number."""
    if amount is None or isinstance(amount, bool):
        return None
    try:
        if isinstance(amount, float):
            value = Decimal(repr(amount))
        elif isinstance(amount, (int, Decimal)):
            value = Decimal(amount)
        else:
            value = Decimal(str(amount).strip())
    except (InvalidOperation, ValueError):
        return None
    if not value.is_finite():
        return None
    return value


def _plain(amount) -> str:
    """Number as text without currency rules; whole floats lose the '.0'."""
    if isinstance(amount, float) and amount.is_integer():
        return str(int(amount))
    return str(amount)


def _group_thousands(digits: str, separator: str) -> str:
    return f"{int(digits):,}".replace(",", separator)


def format_amount(amount, currency_code: str = DEFAULT_CURRENCY) -> str:
    """
    Format an amount for display in the given currency.

    Never raises:
    - unknown currency code -> plain numeric string of the amount
    - amount that is not a number -> str(amount) unchanged

    Examples:
        format_amount(1000, "USD")   -> "$1,000"
        format_amount(1000.5, "USD") -> "$1,000.50"
        format_amount(1234.5, "EUR") -> "1.234,50€"
        format_amount(5, "JPY")      -> "¥5"
    """
    currency = get_currency(currency_code)
    if currency is None:
        return _plain(amount)

    value = _to_decimal(amount)
    if value is None:
        return str(amount)

    if currency.decimal_places > 0 and value == value.to_integral_value():
        places = 0
    else:
        places = currency.decimal_places

    try:
        quantized = value.quantize(Decimal(1).scaleb(-places), rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # More digits than the decimal context can hold
        return str(amount)
    negative = quantized < 0
    integer_part, _, fraction_part = f"{abs(quantized):f}".partition(".")

    formatted = _group_thousands(integer_part, currency.thousands_separator)
    if fraction_part:
        formatted = f"{formatted}{currency.decimal_separator}{fraction_part}"
    if negative:
        formatted = f"-{formatted}"

    if currency.position == SymbolPosition.BEFORE:
        return f"{currency.symbol}{formatted}"
    return f"{formatted}{currency.symbol}"
