"""Fold processed categories into monthly totals and a discipline score.

Pure functions: no I/O, no clock. The same inputs always produce the same
:class:`MonthlyAnalysis`.
"""

from __future__ import annotations

from ynab_targets.core.processor import safe_percentage, should_include_category
from ynab_targets.models.results import (
    AlignmentStatus,
    DisciplineRating,
    KeyMetrics,
    MonthlyAnalysis,
    ProcessedCategory,
    VarianceRanking,
)
from ynab_targets.models.schemas import DEFAULT_ANALYSIS_CONFIG, AnalysisConfig

# Discipline score weights. Each is applied to a 0-100 percentage.
ON_TARGET_WEIGHT = 1.0
OVER_TARGET_PENALTY = 0.25
UNDER_TARGET_PENALTY = 0.5
TARGET_COVERAGE_BONUS = 0.1

# Minimum score for each rating, best first.
RATING_THRESHOLDS: tuple[tuple[float, DisciplineRating], ...] = (
    (90.0, DisciplineRating.EXCELLENT),
    (75.0, DisciplineRating.GOOD),
    (60.0, DisciplineRating.FAIR),
)


def _share(amount: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return safe_percentage(amount, total) or 0.0


def calculate_discipline_score(
    on_target_percentage: float,
    over_target_percentage: float,
    under_target_percentage: float,
    target_coverage: float,
) -> float:
    """Combine alignment percentages into a 0-100 score.

    Non-decreasing in on-target share and target coverage, non-increasing
    in over- and under-target share.
    """
    score = (
        on_target_percentage * ON_TARGET_WEIGHT
        - over_target_percentage * OVER_TARGET_PENALTY
        - under_target_percentage * UNDER_TARGET_PENALTY
        + target_coverage * TARGET_COVERAGE_BONUS
    )
    return max(0.0, min(100.0, score))


def rate_discipline(score: float) -> DisciplineRating:
    for threshold, rating in RATING_THRESHOLDS:
        if score >= threshold:
            return rating
    return DisciplineRating.NEEDS_IMPROVEMENT


def _sum_assigned(categories: list[ProcessedCategory], status: AlignmentStatus) -> int:
    return sum(c.assigned for c in categories if c.alignment_status == status)


def _count(categories: list[ProcessedCategory], status: AlignmentStatus) -> int:
    return sum(1 for c in categories if c.alignment_status == status)


def aggregate_month(
    processed: list[ProcessedCategory],
    config: AnalysisConfig = DEFAULT_ANALYSIS_CONFIG,
    *,
    month: str = "",
    budget_id: str = "",
    budget_name: str = "",
    total_income: int = 0,
    total_activity: int = 0,
) -> MonthlyAnalysis:
    """Summarize a month's processed categories.

    Hidden, deleted and below-threshold categories are dropped first
    according to *config*. The four status sub-totals partition
    ``total_assigned``, so they always add back up to it.
    """
    included = [c for c in processed if should_include_category(c, config)]

    total_assigned = sum(c.assigned for c in included)
    targeted = [c for c in included if c.has_target]
    total_targeted = sum(c.needed_this_month for c in targeted)

    on_amount = _sum_assigned(included, AlignmentStatus.ON_TARGET)
    over_amount = _sum_assigned(included, AlignmentStatus.OVER_TARGET)
    under_amount = _sum_assigned(included, AlignmentStatus.UNDER_TARGET)
    no_target_amount = _sum_assigned(included, AlignmentStatus.NO_TARGET)

    on_pct = _share(on_amount, total_assigned)
    over_pct = _share(over_amount, total_assigned)
    under_pct = _share(under_amount, total_assigned)
    no_target_pct = _share(no_target_amount, total_assigned)

    coverage = _share(len(targeted), len(included))
    score = calculate_discipline_score(on_pct, over_pct, under_pct, coverage)

    return MonthlyAnalysis(
        month=month,
        budget_id=budget_id,
        budget_name=budget_name,
        total_income=total_income,
        total_activity=total_activity,
        total_assigned=total_assigned,
        total_targeted=total_targeted,
        on_target_amount=on_amount,
        over_target_amount=over_amount,
        under_target_amount=under_amount,
        no_target_amount=no_target_amount,
        on_target_percentage=on_pct,
        over_target_percentage=over_pct,
        under_target_percentage=under_pct,
        no_target_percentage=no_target_pct,
        categories_analyzed=len(included),
        categories_with_targets=len(targeted),
        categories_over_target=_count(included, AlignmentStatus.OVER_TARGET),
        categories_under_target=_count(included, AlignmentStatus.UNDER_TARGET),
        categories_without_targets=_count(included, AlignmentStatus.NO_TARGET),
        discipline_score=score,
        discipline_rating=rate_discipline(score),
    )


def calculate_key_metrics(
    analysis: MonthlyAnalysis,
    ranking: VarianceRanking,
) -> KeyMetrics:
    """Headline numbers shown next to the monthly summary."""
    total_variance = sum(
        abs(v.variance) for v in [*ranking.over_target, *ranking.under_target]
    )
    achievement = _share(
        analysis.on_target_amount + analysis.over_target_amount,
        analysis.total_targeted,
    )
    return KeyMetrics(
        total_variance=total_variance,
        average_target_achievement=achievement,
    )
