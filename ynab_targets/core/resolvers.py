"""Entity resolution helpers for YNAB resources.

Pure functions that resolve user-friendly names (partial, case-insensitive)
and month strings to YNAB domain objects. No I/O; they operate on
already-fetched data.
"""

from __future__ import annotations

from datetime import date

from ynab_targets.core.months import first_day_of_month, parse_month
from ynab_targets.models.schemas import Budget, Category


class ResolverError(Exception):
    """Raised when an entity cannot be resolved by name."""

    def __init__(
        self,
        entity_type: str,
        query: str,
        available: list[str] | None = None,
        reason: str | None = None,
    ):
        self.entity_type = entity_type
        self.query = query
        self.available = available or []
        detail = reason or f"No {entity_type} found matching '{query}'."
        if self.available:
            detail += f" Available: {', '.join(self.available)}"
        super().__init__(detail)


def resolve_budget(
    budgets: list[Budget],
    name: str | None = None,
) -> Budget:
    """Find a budget by name (partial, case-insensitive).

    If *name* is ``None``, returns the first budget.

    Raises :class:`ResolverError` if nothing matches.
    """
    if name:
        for b in budgets:
            if name.lower() in b.name.lower():
                return b
        raise ResolverError(
            "budget",
            name,
            available=[b.name for b in budgets],
        )

    if budgets:
        return budgets[0]
    raise ResolverError("budget", "<default>")


def resolve_category(
    categories: list[Category],
    name: str,
) -> Category:
    """Find a category by name (partial, case-insensitive).

    Exact matches win over partial ones. Skips hidden and deleted categories.
    Raises :class:`ResolverError` if nothing matches.
    """
    visible = [c for c in categories if not c.hidden and not c.deleted]
    query = name.strip().lower()
    for cat in visible:
        if cat.name.lower() == query:
            return cat
    for cat in visible:
        if query in cat.name.lower():
            return cat
    raise ResolverError("category", name)


def resolve_analysis_month(
    budget: Budget,
    month: str | None = None,
    today: date | None = None,
) -> str:
    """Pick the month to analyze, as ``YYYY-MM-01``.

    An explicit *month* must fall inside the budget's first/last month.
    Without one, the current month is used, clamped into the budget's range.

    Raises :class:`ResolverError` for malformed or out-of-range months.
    """
    first = parse_month(budget.first_month)
    last = parse_month(budget.last_month)

    if month:
        requested = parse_month(month)
        if requested is None:
            raise ResolverError(
                "month", month, reason=f"Invalid month '{month}'. Expected YYYY-MM-DD or YYYY-MM."
            )
        if first and requested < first:
            raise ResolverError(
                "month", month, reason=f"Month {month} is before budget start {budget.first_month}."
            )
        if last and requested > last:
            raise ResolverError(
                "month", month, reason=f"Month {month} is after budget end {budget.last_month}."
            )
        return first_day_of_month(requested)

    current = (today or date.today()).replace(day=1)
    if last and current > last:
        return first_day_of_month(last)
    if first and current < first:
        return first_day_of_month(first)
    return first_day_of_month(current)
