"""Resolve how much a category's goal needs in a given budget month.

The rules form an ordered table; the first rule whose predicate matches
decides the amount. Everything here is pure and never raises on odd
category data: missing or malformed fields fall through to later rules.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Optional

from ynab_targets.core.months import count_weekday_occurrences, parse_month, to_month_start
from ynab_targets.models.results import GoalResolution
from ynab_targets.models.schemas import Category, GoalCadence

logger = logging.getLogger("ynab_targets")

RULE_NO_GOAL = "No Goal"
RULE_FUTURE_GOAL = "Future Goal"
RULE_MONTHLY = "Monthly Recurring"
RULE_WEEKLY = "Weekly Recurring"
RULE_FUNDING_HORIZON = "Funding Horizon"
RULE_EXHAUSTED_HORIZON = "Exhausted Horizon"
RULE_FALLBACK = "Fallback"

_Handler = Callable[[Category, Optional[date]], tuple[Optional[int], dict[str, Any]]]
_Predicate = Callable[[Category, Optional[date]], bool]


@dataclass(frozen=True)
class GoalRule:
    name: str
    applies: _Predicate
    compute: _Handler


def round_half_up(numerator: int, denominator: int) -> int:
    """Integer division rounded to nearest, halves toward +infinity."""
    return (2 * numerator + denominator) // (2 * denominator)


def _is_weekday(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= 6


# --- Predicates ---


def _has_no_goal(category: Category, month: date | None) -> bool:
    return not category.goal_type


def _is_future_goal(category: Category, month: date | None) -> bool:
    if not category.goal_creation_month or month is None:
        return False
    created = parse_month(category.goal_creation_month)
    if created is None:
        logger.warning(
            "Ignoring unparsable goal_creation_month %r on category %s",
            category.goal_creation_month,
            category.id,
        )
        return False
    return created > month


def _is_monthly(category: Category, month: date | None) -> bool:
    return (
        category.goal_cadence == GoalCadence.MONTHLY
        and category.goal_cadence_frequency == 1
    )


def _is_weekly(category: Category, month: date | None) -> bool:
    return (
        category.goal_cadence == GoalCadence.WEEKLY
        and category.goal_cadence_frequency == 1
        and _is_weekday(category.goal_day)
        and category.goal_target is not None
        and month is not None
    )


def _has_funding_horizon(category: Category, month: date | None) -> bool:
    return category.goal_months_to_budget is not None and category.goal_months_to_budget > 0


def _has_exhausted_horizon(category: Category, month: date | None) -> bool:
    return category.goal_months_to_budget is not None and category.goal_months_to_budget <= 0


def _always(category: Category, month: date | None) -> bool:
    return True


# --- Handlers ---


def _zero(category: Category, month: date | None) -> tuple[int | None, dict[str, Any]]:
    return 0, {}


def _future_goal_amount(category: Category, month: date | None) -> tuple[int | None, dict[str, Any]]:
    return 0, {
        "goal_creation_month": category.goal_creation_month,
        "analysis_month": month.isoformat() if month else None,
    }


def _goal_target(category: Category, month: date | None) -> tuple[int | None, dict[str, Any]]:
    return category.goal_target, {"goal_target": category.goal_target}


def _weekly_amount(category: Category, month: date | None) -> tuple[int | None, dict[str, Any]]:
    # _is_weekly guarantees a parsed month, a target and a valid goal_day
    target = category.goal_target or 0
    occurrences = count_weekday_occurrences(month.year, month.month, category.goal_day)
    amount = target * occurrences
    return amount, {
        "goal_target": target,
        "goal_day": category.goal_day,
        "occurrences": occurrences,
        "calculation": f"{target} x {occurrences} = {amount}",
    }


def _funding_horizon_amount(category: Category, month: date | None) -> tuple[int | None, dict[str, Any]]:
    overall_left = category.goal_overall_left or 0
    budgeted = category.budgeted or 0
    months = category.goal_months_to_budget
    amount = round_half_up(overall_left + budgeted, months)
    return amount, {
        "goal_overall_left": overall_left,
        "budgeted": budgeted,
        "goal_months_to_budget": months,
        "calculation": f"({overall_left} + {budgeted}) / {months} = {amount}",
    }


def _exhausted_amount(category: Category, month: date | None) -> tuple[int | None, dict[str, Any]]:
    return 0, {"goal_months_to_budget": category.goal_months_to_budget}


# Order matters: cadence rules must run before the funding-horizon rule,
# and future-goal suppression before both.
GOAL_RULES: tuple[GoalRule, ...] = (
    GoalRule(RULE_NO_GOAL, _has_no_goal, _zero),
    GoalRule(RULE_FUTURE_GOAL, _is_future_goal, _future_goal_amount),
    GoalRule(RULE_MONTHLY, _is_monthly, _goal_target),
    GoalRule(RULE_WEEKLY, _is_weekly, _weekly_amount),
    GoalRule(RULE_FUNDING_HORIZON, _has_funding_horizon, _funding_horizon_amount),
    GoalRule(RULE_EXHAUSTED_HORIZON, _has_exhausted_horizon, _exhausted_amount),
    GoalRule(RULE_FALLBACK, _always, _goal_target),
)


def resolve_goal(
    category: Category,
    analysis_month: str | date | None = None,
) -> GoalResolution:
    """Compute the amount *category*'s goal needs in *analysis_month*.

    Returns the amount (milliunits, or ``None`` when the goal has no usable
    target) together with the name of the rule that produced it.
    """
    month = to_month_start(analysis_month)

    # GOAL_RULES ends with an unconditional fallback, so a rule always matches
    rule = next(r for r in GOAL_RULES if r.applies(category, month))
    amount, details = rule.compute(category, month)
    if amount is not None and amount < 0:
        logger.warning(
            "Clamping negative needed amount %d to 0 for category %s (%s)",
            amount, category.id, rule.name,
        )
        details = {**details, "clamped_from": amount}
        amount = 0
    logger.debug("Category %s resolved by rule %r: %s", category.id, rule.name, amount)
    return GoalResolution(amount=amount, rule=rule.name, details=details)


def resolve_needed_this_month(
    category: Category,
    analysis_month: str | date | None = None,
) -> int | None:
    """Shorthand for ``resolve_goal(...).amount``."""
    return resolve_goal(category, analysis_month).amount
