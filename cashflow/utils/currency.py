"""
Currency display formatting.

Display only: amounts are never converted between currencies.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Union

from cashflow.aggregation.budget_math import to_amount


# Formatter contract the report generator accepts: (amount, currency_code) -> str
CurrencyFormatter = Callable[[Union[Decimal, float, int], str], str]

CURRENCIES: dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
    "CAD": "C$",
    "AUD": "A$",
    "CHF": "CHF",
    "MXN": "MX$",
}

CURRENCY_OPTIONS = list(CURRENCIES)

TWO_PLACES = Decimal("0.01")


def currency_symbol(currency_code: str) -> str:
    """Symbol for a known code; unknown codes are shown as "<CODE> "."""
    return CURRENCIES.get(currency_code, f"{currency_code} ")


def format_amount(amount: Union[Decimal, float, int], currency_code: str) -> str:
    """
    Format an amount with its currency symbol and two decimals.

    Non-numeric, NaN and infinite amounts are shown as 0.00.

    Example:
        >>> format_amount(Decimal("1234.5"), "EUR")
        '€1234.50'
    """
    value = to_amount(amount).quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    return f"{currency_symbol(currency_code)}{value}"
