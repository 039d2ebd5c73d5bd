"""Sorted views over processed categories.

All sorts are stable, so ties keep the input order. Lists are never
truncated here; paging is up to the presentation layer.
"""

from __future__ import annotations

from ynab_targets.core.processor import safe_percentage
from ynab_targets.models.results import (
    AlignmentStatus,
    CategoryVariance,
    ProcessedCategory,
    TargetSummaryItem,
    VarianceRanking,
)


def build_category_variance(category: ProcessedCategory, month: str = "") -> CategoryVariance:
    """Project a processed category into a ranking row."""
    return CategoryVariance(
        category_id=category.id,
        category_name=category.name,
        category_group_name=category.category_group_name,
        assigned=category.assigned,
        target=category.needed_this_month,
        variance=category.variance,
        variance_percentage=safe_percentage(category.variance, category.needed_this_month),
        target_type=category.target_type,
        month=month,
    )


def _with_status(
    categories: list[ProcessedCategory], status: AlignmentStatus
) -> list[ProcessedCategory]:
    return [c for c in categories if c.alignment_status == status]


def build_target_summary(
    categories: list[ProcessedCategory], month: str = ""
) -> list[TargetSummaryItem]:
    """Targeted categories, biggest need first, with their share of the total."""
    targeted = [c for c in categories if c.has_target]
    total_targeted = sum(c.needed_this_month for c in targeted)

    items = []
    for c in sorted(targeted, key=lambda c: c.needed_this_month, reverse=True):
        row = build_category_variance(c, month)
        share = safe_percentage(c.needed_this_month, total_targeted) if total_targeted > 0 else None
        items.append(TargetSummaryItem(
            **vars(row),
            percentage_of_total_targeted=share or 0.0,
        ))
    return items


def rank_categories(
    categories: list[ProcessedCategory], month: str = ""
) -> VarianceRanking:
    """Build the over-target, under-target, no-target and target summary lists."""
    over = sorted(
        _with_status(categories, AlignmentStatus.OVER_TARGET),
        key=lambda c: c.variance,
        reverse=True,
    )
    under = sorted(
        _with_status(categories, AlignmentStatus.UNDER_TARGET),
        key=lambda c: c.variance,
    )
    no_target = sorted(
        _with_status(categories, AlignmentStatus.NO_TARGET),
        key=lambda c: c.assigned,
        reverse=True,
    )

    return VarianceRanking(
        over_target=[build_category_variance(c, month) for c in over],
        under_target=[build_category_variance(c, month) for c in under],
        no_target=[build_category_variance(c, month) for c in no_target],
        target_summary=build_target_summary(categories, month),
    )
