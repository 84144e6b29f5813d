"""Pure aggregation functions over ledger data."""

from cashflow.aggregation.budget_math import (
    WEEKS_PER_MONTH,
    category_breakdown,
    category_spend,
    categories_with_spent,
    monthly_equivalent,
    remaining_balance,
    remaining_budget,
    sum_expenses,
    summarize_month,
    to_amount,
    total_monthly_subscription_cost,
)

__all__ = [
    "WEEKS_PER_MONTH",
    "category_breakdown",
    "category_spend",
    "categories_with_spent",
    "monthly_equivalent",
    "remaining_balance",
    "remaining_budget",
    "sum_expenses",
    "summarize_month",
    "to_amount",
    "total_monthly_subscription_cost",
]
