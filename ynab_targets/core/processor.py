"""Turn a category and its resolved monthly target into an alignment record."""

from __future__ import annotations

import math
from datetime import date

from ynab_targets.core.goal_resolver import resolve_goal
from ynab_targets.core.months import months_between, parse_month, to_month_start
from ynab_targets.models.results import AlignmentStatus, ProcessedCategory
from ynab_targets.models.schemas import DEFAULT_ANALYSIS_CONFIG, AnalysisConfig, Category


def safe_percentage(numerator: float, denominator: float | None) -> float | None:
    """``numerator / denominator * 100``, or ``None`` when that is not a real number."""
    if not denominator:
        return None
    try:
        result = (numerator / denominator) * 100
    except (ZeroDivisionError, OverflowError):
        return None
    return result if math.isfinite(result) else None


def calculate_target_percentage(assigned: int, needed: int | None) -> float | None:
    return safe_percentage(assigned, needed)


def determine_alignment_status(
    assigned: int,
    needed: int | None,
    tolerance: int = DEFAULT_ANALYSIS_CONFIG.tolerance_milliunits,
) -> AlignmentStatus:
    """Classify an assignment against the month's needed amount.

    Money assigned to a category with no (or a zero) target is "no target".
    Everything else is judged on the variance, with *tolerance* milliunits
    of slack either way.
    """
    if not needed and assigned > 0:
        return AlignmentStatus.NO_TARGET

    variance = assigned - needed if needed is not None else 0
    if abs(variance) <= tolerance:
        return AlignmentStatus.ON_TARGET
    if variance > 0:
        return AlignmentStatus.OVER_TARGET
    return AlignmentStatus.UNDER_TARGET


def should_include_category(
    category: ProcessedCategory | Category,
    config: AnalysisConfig = DEFAULT_ANALYSIS_CONFIG,
) -> bool:
    """Check whether a category counts towards monthly totals."""
    if category.deleted and not config.include_deleted_categories:
        return False
    if category.hidden and not config.include_hidden_categories:
        return False

    assigned = category.assigned if isinstance(category, ProcessedCategory) else category.budgeted
    if abs(assigned) < config.minimum_assignment_threshold:
        return False

    return True


def _months_until_target(category: Category, month: date | None) -> int | None:
    target = parse_month(category.goal_target_month)
    if target is None or month is None:
        return None
    return months_between(month, target)


def process_category(
    category: Category,
    config: AnalysisConfig = DEFAULT_ANALYSIS_CONFIG,
    analysis_month: str | date | None = None,
    category_group_name: str | None = None,
) -> ProcessedCategory:
    """Resolve a category's monthly target and compare the assignment to it.

    Hidden and deleted categories are processed like any other; filtering
    is left to :func:`should_include_category`.
    """
    resolution = resolve_goal(category, analysis_month)
    needed = resolution.amount
    assigned = category.budgeted
    variance = assigned - needed if needed is not None else 0

    return ProcessedCategory(
        id=category.id,
        name=category.name,
        category_group_name=category_group_name or category.category_group_name or "Unknown",
        assigned=assigned,
        needed_this_month=needed,
        variance=variance,
        alignment_status=determine_alignment_status(
            assigned, needed, config.tolerance_milliunits
        ),
        percentage_of_target=calculate_target_percentage(assigned, needed),
        target_type=category.goal_type,
        hidden=category.hidden,
        deleted=category.deleted,
        goal_percentage_complete=category.goal_percentage_complete,
        goal_under_funded=category.goal_under_funded,
        goal_overall_left=category.goal_overall_left,
        goal_target_month=category.goal_target_month,
        months_until_target=_months_until_target(category, to_month_start(analysis_month)),
        calculation_rule=resolution.rule,
        calculation_details=resolution.details,
    )
