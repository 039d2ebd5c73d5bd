"""Shared test fixtures for the target alignment tests."""

from ynab_targets.models.results import AlignmentStatus, ProcessedCategory
from ynab_targets.models.schemas import Budget, Category, CategoryGroup, MonthDetail


def make_category(
    name: str = "Groceries",
    group_id: str = "grp-1",
    group_name: str | None = None,
    hidden: bool = False,
    deleted: bool = False,
    budgeted: int = 0,
    activity: int = 0,
    balance: int = 0,
    goal_type: str | None = None,
    goal_target: int | None = None,
    goal_target_month: str | None = None,
    goal_creation_month: str | None = None,
    goal_cadence: int | None = None,
    goal_cadence_frequency: int | None = None,
    goal_day: int | None = None,
    goal_months_to_budget: int | None = None,
    goal_overall_left: int | None = None,
    goal_overall_funded: int | None = None,
    goal_under_funded: int | None = None,
    goal_percentage_complete: int | None = None,
) -> Category:
    return Category(
        id=f"cat-{name.lower().replace(' ', '-')}",
        category_group_id=group_id,
        category_group_name=group_name,
        name=name,
        hidden=hidden,
        deleted=deleted,
        budgeted=budgeted,
        activity=activity,
        balance=balance,
        goal_type=goal_type,
        goal_target=goal_target,
        goal_target_month=goal_target_month,
        goal_creation_month=goal_creation_month,
        goal_cadence=goal_cadence,
        goal_cadence_frequency=goal_cadence_frequency,
        goal_day=goal_day,
        goal_months_to_budget=goal_months_to_budget,
        goal_overall_left=goal_overall_left,
        goal_overall_funded=goal_overall_funded,
        goal_under_funded=goal_under_funded,
        goal_percentage_complete=goal_percentage_complete,
    )


def make_category_group(
    name: str = "Monthly Bills",
    categories: list[Category] | None = None,
    hidden: bool = False,
    deleted: bool = False,
) -> CategoryGroup:
    return CategoryGroup(
        id=f"grp-{name.lower().replace(' ', '-')}",
        name=name,
        hidden=hidden,
        deleted=deleted,
        categories=categories or [],
    )


def make_processed(
    name: str = "Groceries",
    assigned: int = 0,
    needed: int | None = None,
    status: AlignmentStatus | None = None,
    group_name: str = "Food",
    hidden: bool = False,
    deleted: bool = False,
    target_type: str | None = None,
) -> ProcessedCategory:
    """Build a ProcessedCategory directly, bypassing goal resolution."""
    variance = assigned - needed if needed is not None else 0
    if status is None:
        if not needed and assigned > 0:
            status = AlignmentStatus.NO_TARGET
        elif variance > 0:
            status = AlignmentStatus.OVER_TARGET
        elif variance < 0:
            status = AlignmentStatus.UNDER_TARGET
        else:
            status = AlignmentStatus.ON_TARGET
    return ProcessedCategory(
        id=f"cat-{name.lower().replace(' ', '-')}",
        name=name,
        category_group_name=group_name,
        assigned=assigned,
        needed_this_month=needed,
        variance=variance,
        alignment_status=status,
        percentage_of_target=(assigned / needed * 100) if needed else None,
        target_type=target_type,
        hidden=hidden,
        deleted=deleted,
    )


def make_budget(
    name: str = "My Budget",
    first_month: str | None = "2024-01-01",
    last_month: str | None = "2025-12-01",
) -> Budget:
    return Budget(
        id=f"budget-{name.lower().replace(' ', '-')}",
        name=name,
        first_month=first_month,
        last_month=last_month,
    )


def make_month_detail(
    month: str = "2024-12-01",
    categories: list[dict] | None = None,
    income: int = 5000000,
    activity: int = -3200000,
) -> MonthDetail:
    return MonthDetail(
        month=month,
        income=income,
        activity=activity,
        categories=categories or [],
    )
