"""Result dataclasses for the target alignment engine.

These are internal types consumed by formatters: lightweight dataclasses
rather than Pydantic models since they don't need validation. All amounts
are integer milliunits; percentages are plain floats on a 0-100 scale.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class AlignmentStatus(str, Enum):
    ON_TARGET = "on-target"
    OVER_TARGET = "over-target"
    UNDER_TARGET = "under-target"
    NO_TARGET = "no-target"


class DisciplineRating(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"
    NEEDS_IMPROVEMENT = "Needs Improvement"


@dataclass
class GoalResolution:
    """The monthly amount a goal needs, and which rule produced it."""
    amount: int | None          # milliunits, never negative
    rule: str
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class ProcessedCategory:
    """A category with its resolved target and alignment classification."""
    id: str
    name: str
    category_group_name: str
    assigned: int                       # milliunits budgeted this month
    needed_this_month: int | None       # milliunits
    variance: int                       # assigned - needed (0 when needed is None)
    alignment_status: AlignmentStatus
    percentage_of_target: float | None  # (assigned / needed) * 100
    target_type: str | None = None
    hidden: bool = False
    deleted: bool = False
    goal_percentage_complete: int | None = None
    goal_under_funded: int | None = None
    goal_overall_left: int | None = None
    goal_target_month: str | None = None
    months_until_target: int | None = None
    calculation_rule: str = ""
    calculation_details: dict[str, Any] = field(default_factory=dict)

    @property
    def has_target(self) -> bool:
        return bool(self.needed_this_month)


@dataclass
class MonthlyAnalysis:
    """Aggregate alignment figures for one budget month."""
    month: str
    budget_id: str
    budget_name: str
    total_income: int = 0
    total_activity: int = 0
    total_assigned: int = 0
    total_targeted: int = 0
    on_target_amount: int = 0
    over_target_amount: int = 0
    under_target_amount: int = 0
    no_target_amount: int = 0
    on_target_percentage: float = 0.0
    over_target_percentage: float = 0.0
    under_target_percentage: float = 0.0
    no_target_percentage: float = 0.0
    categories_analyzed: int = 0
    categories_with_targets: int = 0
    categories_over_target: int = 0
    categories_under_target: int = 0
    categories_without_targets: int = 0
    discipline_score: float = 0.0
    discipline_rating: DisciplineRating = DisciplineRating.NEEDS_IMPROVEMENT


@dataclass
class CategoryVariance:
    """Ranking-friendly projection of a processed category."""
    category_id: str
    category_name: str
    category_group_name: str
    assigned: int
    target: int | None
    variance: int
    variance_percentage: float | None  # (variance / target) * 100
    target_type: str | None = None
    month: str = ""


@dataclass
class TargetSummaryItem(CategoryVariance):
    """A targeted category with its share of the month's total target."""
    percentage_of_total_targeted: float = 0.0


@dataclass
class VarianceRanking:
    """Sorted views over a month's processed categories."""
    over_target: list[CategoryVariance] = field(default_factory=list)
    under_target: list[CategoryVariance] = field(default_factory=list)
    no_target: list[CategoryVariance] = field(default_factory=list)
    target_summary: list[TargetSummaryItem] = field(default_factory=list)


@dataclass
class KeyMetrics:
    total_variance: int = 0                 # milliunits, sum of |variance|
    average_target_achievement: float = 0.0


@dataclass
class DashboardSummary:
    """Everything the presentation layer needs for one month."""
    selected_month: str
    monthly_analysis: MonthlyAnalysis
    ranking: VarianceRanking
    categories: list[ProcessedCategory] = field(default_factory=list)
    key_metrics: KeyMetrics = field(default_factory=KeyMetrics)
    skipped_categories: list[str] = field(default_factory=list)
