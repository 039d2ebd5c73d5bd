"""Tests for entity resolution helpers."""

from datetime import date

import pytest

from tests.conftest import make_budget, make_category
from ynab_targets.core.resolvers import (
    ResolverError,
    resolve_analysis_month,
    resolve_budget,
    resolve_category,
)


class TestResolveBudget:
    def test_partial_case_insensitive_match(self):
        budgets = [make_budget("Household"), make_budget("Side Business")]
        assert resolve_budget(budgets, "business").name == "Side Business"

    def test_default_is_first(self):
        budgets = [make_budget("Household"), make_budget("Side Business")]
        assert resolve_budget(budgets).name == "Household"

    def test_no_match_raises_with_available(self):
        budgets = [make_budget("Household")]
        with pytest.raises(ResolverError) as exc_info:
            resolve_budget(budgets, "Vacation Fund")
        assert "Household" in str(exc_info.value)
        assert exc_info.value.entity_type == "budget"

    def test_no_budgets_raises(self):
        with pytest.raises(ResolverError):
            resolve_budget([])


class TestResolveCategory:
    def test_partial_case_insensitive_match(self):
        cats = [make_category("Rent"), make_category("Dining Out")]
        assert resolve_category(cats, "dining").name == "Dining Out"

    def test_exact_match_beats_partial(self):
        cats = [make_category("Car Insurance"), make_category("Car")]
        assert resolve_category(cats, "car").name == "Car"

    def test_skips_hidden_and_deleted(self):
        cats = [
            make_category("Old Groceries", hidden=True),
            make_category("Groceries 2019", deleted=True),
        ]
        with pytest.raises(ResolverError):
            resolve_category(cats, "Groceries")

    def test_no_match_raises(self):
        with pytest.raises(ResolverError) as exc_info:
            resolve_category([make_category("Groceries")], "Entertainment")
        assert exc_info.value.query == "Entertainment"


class TestResolveAnalysisMonth:
    def test_explicit_month_normalized(self):
        assert resolve_analysis_month(make_budget(), "2024-12") == "2024-12-01"
        assert resolve_analysis_month(make_budget(), "2024-12-15") == "2024-12-01"

    def test_invalid_month_raises(self):
        with pytest.raises(ResolverError, match="Invalid month"):
            resolve_analysis_month(make_budget(), "next month")

    def test_before_budget_start_raises(self):
        with pytest.raises(ResolverError, match="before budget start"):
            resolve_analysis_month(make_budget(), "2023-12-01")

    def test_after_budget_end_raises(self):
        with pytest.raises(ResolverError, match="after budget end"):
            resolve_analysis_month(make_budget(), "2026-01-01")

    def test_default_is_current_month(self):
        assert resolve_analysis_month(make_budget(), today=date(2024, 12, 19)) == "2024-12-01"

    def test_default_clamped_to_budget_end(self):
        assert resolve_analysis_month(make_budget(), today=date(2027, 3, 2)) == "2025-12-01"

    def test_default_clamped_to_budget_start(self):
        assert resolve_analysis_month(make_budget(), today=date(2023, 6, 1)) == "2024-01-01"

    def test_budget_without_range(self):
        budget = make_budget(first_month=None, last_month=None)
        assert resolve_analysis_month(budget, "1999-01-01") == "1999-01-01"
        assert resolve_analysis_month(budget, today=date(2030, 5, 5)) == "2030-05-01"
