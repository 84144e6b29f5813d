"""Calendar and currency helpers."""

from cashflow.utils.currency import (
    CURRENCIES,
    CURRENCY_OPTIONS,
    CurrencyFormatter,
    currency_symbol,
    format_amount,
)
from cashflow.utils.dates import (
    current_month_key,
    iso_date,
    month_key,
    month_label,
    parse_month_key,
    shift_month,
    year_month_keys,
)

__all__ = [
    "CURRENCIES",
    "CURRENCY_OPTIONS",
    "CurrencyFormatter",
    "currency_symbol",
    "format_amount",
    "current_month_key",
    "iso_date",
    "month_key",
    "month_label",
    "parse_month_key",
    "shift_month",
    "year_month_keys",
]
