"""Monthly target alignment analysis.

Composes goal resolution, category processing, aggregation and ranking
into a single :class:`DashboardSummary` for one budget month. No I/O;
callers fetch the month and category groups first.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from ynab_targets.core.aggregator import aggregate_month, calculate_key_metrics
from ynab_targets.core.months import first_day_of_month, parse_month
from ynab_targets.core.processor import process_category, should_include_category
from ynab_targets.core.ranker import rank_categories
from ynab_targets.models.results import DashboardSummary, ProcessedCategory
from ynab_targets.models.schemas import (
    DEFAULT_ANALYSIS_CONFIG,
    AnalysisConfig,
    Category,
    CategoryGroup,
    MonthDetail,
)

logger = logging.getLogger("ynab_targets")


class AnalysisError(Exception):
    """Raised when month data is unusable as a whole (e.g. a malformed month)."""


def parse_categories(raw_categories: list[dict[str, Any]]) -> list[Category]:
    """Validate raw category dicts, skipping (and logging) malformed records."""
    categories: list[Category] = []
    for raw in raw_categories:
        try:
            categories.append(Category.model_validate(raw))
        except ValidationError as e:
            logger.warning(
                "Skipping malformed category %r: %d validation error(s)",
                raw.get("id") if isinstance(raw, dict) else raw,
                e.error_count(),
            )
    return categories


def attach_group_names(
    categories: list[Category],
    groups: list[CategoryGroup],
) -> list[Category]:
    """Fill in ``category_group_name`` from the category-groups listing.

    The month endpoint omits group names; categories whose group is unknown
    are returned unchanged.
    """
    names = {g.id: g.name for g in groups}
    return [
        c if c.category_group_name or c.category_group_id not in names
        else c.model_copy(update={"category_group_name": names[c.category_group_id]})
        for c in categories
    ]


def _normalize_month(month: str) -> str:
    parsed = parse_month(month)
    if parsed is None:
        raise AnalysisError(f"Invalid month format: {month!r}. Expected YYYY-MM-DD.")
    return first_day_of_month(parsed)


def analyze_categories(
    categories: list[Category],
    month: str,
    budget_id: str = "",
    budget_name: str = "",
    config: AnalysisConfig = DEFAULT_ANALYSIS_CONFIG,
    *,
    total_income: int = 0,
    total_activity: int = 0,
) -> DashboardSummary:
    """Run the full analysis over already-parsed categories.

    A category that cannot be processed is skipped with a warning instead
    of failing the whole month; its id is listed in ``skipped_categories``.
    """
    month = _normalize_month(month)

    processed: list[ProcessedCategory] = []
    skipped: list[str] = []
    for category in categories:
        try:
            processed.append(process_category(category, config, month))
        except (TypeError, ValueError, ArithmeticError):
            logger.warning(
                "Skipping category %s (%s) in %s", category.id, category.name, month,
                exc_info=True,
            )
            skipped.append(category.id)

    analysis = aggregate_month(
        processed,
        config,
        month=month,
        budget_id=budget_id,
        budget_name=budget_name,
        total_income=total_income,
        total_activity=total_activity,
    )
    included = [c for c in processed if should_include_category(c, config)]
    ranking = rank_categories(included, month)

    logger.info(
        "Analyzed %d categories for %s (%d included, %d skipped): score %.1f",
        len(processed), month, len(included), len(skipped), analysis.discipline_score,
    )

    return DashboardSummary(
        selected_month=month,
        monthly_analysis=analysis,
        ranking=ranking,
        categories=processed,
        key_metrics=calculate_key_metrics(analysis, ranking),
        skipped_categories=skipped,
    )


def analyze_month(
    month_detail: MonthDetail,
    budget_id: str = "",
    budget_name: str = "",
    config: AnalysisConfig = DEFAULT_ANALYSIS_CONFIG,
    groups: list[CategoryGroup] | None = None,
) -> DashboardSummary:
    """Analyze a month fetched from ``GET /budgets/{id}/months/{month}``.

    *groups*, when given, supplies category group names the month endpoint
    leaves out.
    """
    categories = parse_categories(month_detail.categories)
    if groups:
        categories = attach_group_names(categories, groups)

    return analyze_categories(
        categories,
        month_detail.month,
        budget_id,
        budget_name,
        config,
        total_income=month_detail.income,
        total_activity=month_detail.activity,
    )


def analyze_category_groups(
    groups: list[CategoryGroup],
    month: str,
    budget_id: str = "",
    budget_name: str = "",
    config: AnalysisConfig = DEFAULT_ANALYSIS_CONFIG,
) -> DashboardSummary:
    """Analyze the categories listed under *groups*, carrying each group's name."""
    categories = [
        c.model_copy(update={"category_group_name": group.name})
        for group in groups
        for c in group.categories
    ]
    return analyze_categories(
        categories,
        month,
        budget_id,
        budget_name,
        config,
        total_activity=sum(c.activity for c in categories),
    )
