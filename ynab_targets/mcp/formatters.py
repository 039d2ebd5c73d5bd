"""Markdown formatters for MCP tool responses.

Pure functions that take analysis results and return human-readable Markdown
strings. Currency formatting lives here, not in the engine.
"""

from __future__ import annotations

from ynab_targets.models.results import (
    CategoryVariance,
    DashboardSummary,
    ProcessedCategory,
    TargetSummaryItem,
    VarianceRanking,
)
from ynab_targets.models.schemas import Budget, describe_goal_type, milliunits_to_dollars

VIEWS = ("over", "under", "no_target", "summary")


def _money(milliunits: int) -> str:
    dollars = milliunits_to_dollars(milliunits)
    sign = "-" if dollars < 0 else ""
    return f"{sign}${abs(dollars):,.2f}"


def _signed_money(milliunits: int) -> str:
    return ("+" if milliunits > 0 else "") + _money(milliunits)


def _pct(value: float | None) -> str:
    return "n/a" if value is None else f"{value:.1f}%"


def format_budgets(budgets: list[Budget]) -> str:
    if not budgets:
        return "No budgets found."
    lines = ["## Your Budgets\n"]
    for b in budgets:
        lines.append(f"- **{b.name}** (ID: `{b.id}`)")
    return "\n".join(lines)


def format_monthly_alignment(summary: DashboardSummary) -> str:
    """Monthly totals, status breakdown and discipline rating."""
    a = summary.monthly_analysis
    title = f"Target Alignment: {a.budget_name} ({a.month})" if a.budget_name else f"Target Alignment ({a.month})"

    lines = [
        f"## {title}\n",
        f"**Discipline:** {a.discipline_rating.value} ({a.discipline_score:.0f}/100)",
        f"**Assigned:** {_money(a.total_assigned)} | **Needed:** {_money(a.total_targeted)}",
    ]
    if a.total_income:
        lines.append(f"**Income:** {_money(a.total_income)}")

    lines.append("\n| Status | Amount | Share | Categories |")
    lines.append("|---|---|---|---|")
    on_count = (
        a.categories_analyzed
        - a.categories_over_target
        - a.categories_under_target
        - a.categories_without_targets
    )
    for label, amount, pct, count in (
        ("On target", a.on_target_amount, a.on_target_percentage, on_count),
        ("Over target", a.over_target_amount, a.over_target_percentage, a.categories_over_target),
        ("Under target", a.under_target_amount, a.under_target_percentage, a.categories_under_target),
        ("No target", a.no_target_amount, a.no_target_percentage, a.categories_without_targets),
    ):
        lines.append(f"| {label} | {_money(amount)} | {pct:.1f}% | {count} |")

    lines.append(
        f"\n{a.categories_with_targets} of {a.categories_analyzed} categories have a target. "
        f"Total variance: {_money(summary.key_metrics.total_variance)}. "
        f"Target achievement: {summary.key_metrics.average_target_achievement:.1f}%."
    )
    if summary.skipped_categories:
        lines.append(
            f"\n_{len(summary.skipped_categories)} category record(s) could not be analyzed and were skipped._"
        )
    return "\n".join(lines)


def _variance_line(v: CategoryVariance) -> str:
    target = _money(v.target) if v.target is not None else "no target"
    return (
        f"- **{v.category_name}** ({v.category_group_name}): "
        f"{_money(v.assigned)} assigned vs {target} "
        f"| {_signed_money(v.variance)} ({_pct(v.variance_percentage)})"
    )


def _no_target_line(v: CategoryVariance) -> str:
    return f"- **{v.category_name}** ({v.category_group_name}): {_money(v.assigned)} assigned"


def _summary_line(item: TargetSummaryItem) -> str:
    return (
        f"- **{item.category_name}**: {_money(item.target or 0)} needed "
        f"({item.percentage_of_total_targeted:.1f}% of total) "
        f"| {describe_goal_type(item.target_type)}"
    )


def format_variance_report(
    ranking: VarianceRanking,
    view: str = "all",
    limit: int | None = None,
) -> str:
    """Render one or all of the ranked lists."""
    sections = {
        "over": ("Over Target", ranking.over_target, _variance_line),
        "under": ("Under Target", ranking.under_target, _variance_line),
        "no_target": ("Assigned Without a Target", ranking.no_target, _no_target_line),
        "summary": ("Target Summary", ranking.target_summary, _summary_line),
    }
    chosen = VIEWS if view == "all" else (view,)

    lines: list[str] = []
    for key in chosen:
        title, rows, render = sections[key]
        lines.append(f"### {title} ({len(rows)})")
        if not rows:
            lines.append("_None._\n")
            continue
        shown = rows if limit is None else rows[:limit]
        lines.extend(render(r) for r in shown)
        if len(shown) < len(rows):
            lines.append(f"_...and {len(rows) - len(shown)} more._")
        lines.append("")

    return "\n".join(lines).rstrip()


def format_category_target_detail(category: ProcessedCategory, month: str) -> str:
    """Explain how a category's monthly need was computed."""
    needed = _money(category.needed_this_month) if category.needed_this_month is not None else "none"
    lines = [
        f"## {category.name} ({month})",
        f"**Goal:** {describe_goal_type(category.target_type)}",
        f"**Needed this month:** {needed}",
        f"**Assigned:** {_money(category.assigned)}",
        f"**Status:** {category.alignment_status.value}"
        + (f" ({_pct(category.percentage_of_target)} of target)" if category.percentage_of_target is not None else ""),
        f"**Rule applied:** {category.calculation_rule}",
    ]
    calculation = category.calculation_details.get("calculation")
    if calculation:
        lines.append(f"**Calculation:** `{calculation}` (milliunits)")
    if category.months_until_target is not None:
        lines.append(
            f"**Target month:** {category.goal_target_month} "
            f"({category.months_until_target} month(s) away)"
        )
    if category.goal_under_funded is not None:
        lines.append(f"_YNAB reports {_money(category.goal_under_funded)} underfunded._")
    return "\n".join(lines)
