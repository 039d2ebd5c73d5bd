"""Tests for the end-to-end monthly analysis composition."""

import logging

import pytest

from tests.conftest import make_category, make_category_group, make_month_detail
from ynab_targets.core.monthly_analysis import (
    AnalysisError,
    analyze_categories,
    analyze_category_groups,
    analyze_month,
    attach_group_names,
    parse_categories,
)
from ynab_targets.models.results import AlignmentStatus, DisciplineRating
from ynab_targets.models.schemas import AnalysisConfig


def _raw(name, budgeted=0, group_id="grp-bills", **goal):
    return {
        "id": f"cat-{name.lower()}",
        "category_group_id": group_id,
        "name": name,
        "budgeted": budgeted,
        "activity": 0,
        "balance": budgeted,
        "hidden": False,
        "deleted": False,
        **goal,
    }


def _december():
    return make_month_detail(
        month="2024-12-01",
        categories=[
            _raw("Rent", 1500000, goal_type="NEED", goal_target=1500000,
                 goal_cadence=1, goal_cadence_frequency=1),
            _raw("Coffee", 120000, goal_type="NEED", goal_target=20000,
                 goal_cadence=2, goal_cadence_frequency=1, goal_day=1),
            _raw("Vacation", 50000, goal_type="TBD", goal_target=1200000,
                 goal_months_to_budget=6, goal_overall_left=550000),
            _raw("Gifts", 40000),
            _raw("Holiday", 0, goal_type="NEED", goal_target=300000,
                 goal_creation_month="2025-01-01"),
        ],
    )


class TestParseCategories:
    def test_valid_records(self):
        cats = parse_categories([_raw("Rent", 1000), _raw("Food", 2000)])
        assert [c.name for c in cats] == ["Rent", "Food"]

    def test_malformed_records_skipped(self, caplog):
        raw = [_raw("Rent", 1000), {"id": "cat-broken", "budgeted": "lots"}, _raw("Food", 2000)]
        with caplog.at_level(logging.WARNING, logger="ynab_targets"):
            cats = parse_categories(raw)
        assert [c.name for c in cats] == ["Rent", "Food"]
        assert "cat-broken" in caplog.text


class TestAttachGroupNames:
    def test_fills_missing_names(self):
        groups = [make_category_group("Bills")]
        cats = attach_group_names([make_category(group_id="grp-bills")], groups)
        assert cats[0].category_group_name == "Bills"

    def test_keeps_existing_and_unknown(self):
        groups = [make_category_group("Bills")]
        cats = attach_group_names(
            [make_category("A", group_id="grp-bills", group_name="Custom"), make_category("B", group_id="grp-x")],
            groups,
        )
        assert cats[0].category_group_name == "Custom"
        assert cats[1].category_group_name is None


class TestAnalyzeMonth:
    def test_end_to_end(self):
        summary = analyze_month(_december(), "budget-1", "Home")
        assert summary.selected_month == "2024-12-01"

        by_name = {c.name: c for c in summary.categories}
        assert by_name["Rent"].alignment_status == AlignmentStatus.ON_TARGET
        # five Mondays in December 2024
        assert by_name["Coffee"].needed_this_month == 100000
        assert by_name["Coffee"].alignment_status == AlignmentStatus.OVER_TARGET
        # (550000 + 50000) / 6
        assert by_name["Vacation"].needed_this_month == 100000
        assert by_name["Vacation"].alignment_status == AlignmentStatus.UNDER_TARGET
        assert by_name["Gifts"].alignment_status == AlignmentStatus.NO_TARGET
        assert by_name["Holiday"].needed_this_month == 0
        assert by_name["Holiday"].alignment_status == AlignmentStatus.ON_TARGET

        analysis = summary.monthly_analysis
        assert analysis.budget_id == "budget-1"
        assert analysis.budget_name == "Home"
        assert analysis.total_income == 5000000
        assert analysis.total_activity == -3200000
        assert analysis.total_assigned == 1710000
        assert analysis.total_targeted == 1700000
        assert analysis.categories_with_targets == 3

    def test_ranking_and_metrics(self):
        summary = analyze_month(_december())
        assert [v.category_name for v in summary.ranking.over_target] == ["Coffee"]
        assert [v.category_name for v in summary.ranking.under_target] == ["Vacation"]
        assert [v.category_name for v in summary.ranking.no_target] == ["Gifts"]
        assert [s.category_name for s in summary.ranking.target_summary] == ["Rent", "Coffee", "Vacation"]
        assert summary.key_metrics.total_variance == 20000 + 50000

    def test_group_names_from_groups(self):
        summary = analyze_month(_december(), groups=[make_category_group("Bills")])
        assert {c.category_group_name for c in summary.categories} == {"Bills"}

    def test_without_groups_names_unknown(self):
        summary = analyze_month(_december())
        assert {c.category_group_name for c in summary.categories} == {"Unknown"}

    def test_year_month_input_normalized(self):
        summary = analyze_month(make_month_detail(month="2024-12"))
        assert summary.selected_month == "2024-12-01"

    def test_invalid_month_raises(self):
        with pytest.raises(AnalysisError, match="Invalid month"):
            analyze_month(make_month_detail(month="December"))

    def test_empty_month(self):
        summary = analyze_month(make_month_detail())
        assert summary.categories == []
        assert summary.monthly_analysis.total_assigned == 0
        assert summary.monthly_analysis.discipline_rating == DisciplineRating.NEEDS_IMPROVEMENT

    def test_malformed_record_does_not_fail_month(self):
        detail = _december()
        detail.categories.append({"id": "cat-broken"})
        summary = analyze_month(detail)
        assert len(summary.categories) == 5

    def test_hidden_processed_but_not_ranked(self):
        detail = make_month_detail(categories=[
            {**_raw("Secret", 90000), "hidden": True},
            _raw("Gifts", 40000),
        ])
        summary = analyze_month(detail)
        assert len(summary.categories) == 2
        assert [v.category_name for v in summary.ranking.no_target] == ["Gifts"]
        assert summary.monthly_analysis.total_assigned == 40000

    def test_config_is_honored(self):
        detail = make_month_detail(categories=[
            {**_raw("Secret", 90000), "hidden": True},
        ])
        summary = analyze_month(detail, config=AnalysisConfig(include_hidden_categories=True))
        assert summary.monthly_analysis.total_assigned == 90000

    def test_deterministic(self):
        first = analyze_month(_december(), "b", "Home")
        second = analyze_month(_december(), "b", "Home")
        assert first == second


class TestAnalyzeCategories:
    def test_unprocessable_category_is_skipped(self, monkeypatch):
        from ynab_targets.core import monthly_analysis

        real = monthly_analysis.process_category

        def flaky(category, config, month):
            if category.name == "Bad":
                raise ValueError("boom")
            return real(category, config, month)

        monkeypatch.setattr(monthly_analysis, "process_category", flaky)
        summary = analyze_categories(
            [make_category("Good", budgeted=1000), make_category("Bad", budgeted=2000)],
            "2024-12-01",
        )
        assert [c.name for c in summary.categories] == ["Good"]
        assert summary.skipped_categories == ["cat-bad"]


class TestAnalyzeCategoryGroups:
    def test_group_names_carried(self):
        groups = [
            make_category_group("Bills", [make_category("Rent", budgeted=1000, goal_type="MF", goal_target=1000)]),
            make_category_group("Fun", [make_category("Games", budgeted=5000)]),
        ]
        summary = analyze_category_groups(groups, "2024-12-01")
        by_name = {c.name: c for c in summary.categories}
        assert by_name["Rent"].category_group_name == "Bills"
        assert by_name["Games"].category_group_name == "Fun"
        assert summary.monthly_analysis.total_assigned == 6000
