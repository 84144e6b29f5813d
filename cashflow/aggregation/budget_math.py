"""
Budget Math

DESIGN DECISION: Every derived number the app shows is computed here,
by pure functions, from the stored document. Nothing derived is ever
persisted: spent totals, remaining budget, monthly subscription cost and
the home-screen balance are recomputed on demand.

GUARANTEES:
- Deterministic and side-effect free
- Never raises on bad numbers: non-numeric, NaN and infinite amounts
  count as zero
- Expenses whose category id matches no category are counted in the
  month total but in no category's breakdown
"""

from collections.abc import Iterable, Mapping
from decimal import Decimal
from typing import Any, Optional

from cashflow.models.ledger import (
    BillingCycle,
    Category,
    CategoryWithSpent,
    MonthRecord,
    MonthSummary,
    ZERO,
    to_amount,
)


# Average weeks in a month
WEEKS_PER_MONTH = Decimal(52) / Decimal(12)
MONTHS_PER_YEAR = Decimal(12)


def _field(item: Any, name: str, default: Any = None) -> Any:
    """Read a field from a model or a plain mapping."""
    if isinstance(item, Mapping):
        return item.get(name, default)
    return getattr(item, name, default)


def sum_expenses(expenses: Optional[Iterable[Any]]) -> Decimal:
    """Total of all expense amounts; empty or missing input is 0."""
    return sum((to_amount(_field(e, "amount")) for e in (expenses or [])), ZERO)


def category_spend(
    categories: Iterable[Category],
    expenses: Optional[Iterable[Any]],
) -> dict[str, Decimal]:
    """
    Spent per category id.

    Every category gets an entry (0 when unused). Expenses pointing at an
    unknown category are not bucketed anywhere.
    """
    totals = {category.id: ZERO for category in categories}
    for expense in expenses or []:
        category_id = _field(expense, "category_id")
        if category_id is None:
            category_id = _field(expense, "categoryId")
        if category_id in totals:
            totals[category_id] += to_amount(_field(expense, "amount"))
    return totals


def remaining_budget(limit: Optional[Any], spent: Any) -> Optional[Decimal]:
    """limit - spent (negative when over budget); None when no limit is set."""
    if limit is None:
        return None
    return to_amount(limit) - to_amount(spent)


def categories_with_spent(month: MonthRecord) -> list[CategoryWithSpent]:
    """The month's categories, in order, with spent/remaining/over_budget."""
    totals = category_spend(month.categories, month.expenses)
    result = []
    for category in month.categories:
        spent = totals[category.id]
        remaining = remaining_budget(category.limit, spent)
        result.append(CategoryWithSpent(
            id=category.id,
            name=category.name,
            limit=category.limit,
            spent=spent,
            remaining=remaining,
            over_budget=remaining is not None and remaining < 0,
        ))
    return result


def monthly_equivalent(subscription: Any) -> Decimal:
    """Average monthly cost of one subscription. Unknown cycles count as monthly."""
    amount = to_amount(_field(subscription, "amount"))
    cycle = _field(subscription, "billing_cycle")
    if cycle is None:
        cycle = _field(subscription, "billingCycle", BillingCycle.MONTHLY)
    try:
        cycle = BillingCycle(cycle)
    except ValueError:
        cycle = BillingCycle.MONTHLY

    if cycle == BillingCycle.WEEKLY:
        return amount * WEEKS_PER_MONTH
    if cycle == BillingCycle.YEARLY:
        return amount / MONTHS_PER_YEAR
    return amount


def total_monthly_subscription_cost(subscriptions: Optional[Iterable[Any]]) -> Decimal:
    """Sum of monthly equivalents across all subscriptions, whatever their cycle."""
    return sum((monthly_equivalent(s) for s in (subscriptions or [])), ZERO)


def remaining_balance(month: MonthRecord) -> Decimal:
    """income - total spent for the month."""
    return to_amount(month.income) - sum_expenses(month.expenses)


def summarize_month(month_key: str, month: MonthRecord) -> MonthSummary:
    income = to_amount(month.income)
    spent = sum_expenses(month.expenses)
    return MonthSummary(
        month_key=month_key,
        income=income,
        spent=spent,
        remaining=income - spent,
    )


def category_breakdown(months: Iterable[MonthRecord]) -> list[tuple[str, Decimal]]:
    """
    Spend per category name across one or more months.

    Sorted by descending total, ties by name. Categories nothing was spent
    on, and expenses with dangling category ids, are left out.
    """
    totals: dict[str, Decimal] = {}
    for month in months:
        spend = category_spend(month.categories, month.expenses)
        for category in month.categories:
            amount = spend.get(category.id, ZERO)
            if amount:
                totals[category.name] = totals.get(category.name, ZERO) + amount
            # Same id listed twice in a month would otherwise double count
            spend[category.id] = ZERO
    return sorted(totals.items(), key=lambda item: (-item[1], item[0]))
