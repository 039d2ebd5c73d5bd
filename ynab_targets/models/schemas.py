"""Pydantic models for YNAB API data types and analysis configuration."""

import os
from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- YNAB uses "milliunits" for currency (1000 = $1.00) ---

def milliunits_to_dollars(milliunits: int) -> float:
    """Convert YNAB milliunits to dollars."""
    return milliunits / 1000.0


# --- Enums ---

class GoalType(str, Enum):
    MONTHLY_FUNDING = "MF"
    TARGET_BALANCE = "TB"
    TARGET_BALANCE_BY_DATE = "TBD"
    PLAN_SPENDING = "NEED"
    DEBT = "DEBT"


class GoalCadence(int, Enum):
    ONE_TIME = 0
    MONTHLY = 1
    WEEKLY = 2
    YEARLY = 13


_GOAL_TYPE_DESCRIPTIONS = {
    GoalType.TARGET_BALANCE.value: "Target Category Balance",
    GoalType.TARGET_BALANCE_BY_DATE.value: "Target Category Balance by Date",
    GoalType.MONTHLY_FUNDING.value: "Monthly Funding",
    GoalType.PLAN_SPENDING.value: "Plan Your Spending",
    GoalType.DEBT.value: "Debt Payoff Goal",
}


def describe_goal_type(goal_type: Optional[str]) -> str:
    """Human-readable label for a YNAB goal type code."""
    return _GOAL_TYPE_DESCRIPTIONS.get(goal_type or "", "No Target")


# --- Response Models ---

class Budget(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    last_modified_on: Optional[str] = None
    first_month: Optional[str] = None
    last_month: Optional[str] = None


class Category(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    category_group_id: str
    category_group_name: Optional[str] = None
    name: str
    budgeted: int = 0  # milliunits, "assigned" this month
    activity: int = 0  # milliunits
    balance: int = 0  # milliunits
    hidden: bool = False
    deleted: bool = False
    note: Optional[str] = None

    # goal_type stays a plain string so unknown codes reach the fallback rule
    goal_type: Optional[str] = None
    goal_target: Optional[int] = None  # milliunits
    goal_target_month: Optional[str] = None  # YYYY-MM-DD
    goal_creation_month: Optional[str] = None  # YYYY-MM-DD
    goal_cadence: Optional[int] = None
    goal_cadence_frequency: Optional[int] = None
    goal_day: Optional[int] = None
    goal_months_to_budget: Optional[int] = None
    goal_overall_left: Optional[int] = None  # milliunits
    goal_overall_funded: Optional[int] = None  # milliunits
    goal_under_funded: Optional[int] = None  # milliunits
    goal_percentage_complete: Optional[int] = None
    goal_needs_whole_amount: Optional[bool] = None


class CategoryGroup(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    hidden: bool = False
    deleted: bool = False
    categories: list[Category] = []


class MonthDetail(BaseModel):
    """A budget month as returned by ``GET /budgets/{id}/months/{month}``.

    ``categories`` holds the raw category dicts; they are validated one by
    one so a single malformed record cannot reject the whole month.
    """
    model_config = ConfigDict(extra="ignore")

    month: str
    note: Optional[str] = None
    income: int = 0  # milliunits
    budgeted: int = 0  # milliunits
    activity: int = 0  # milliunits
    to_be_budgeted: int = 0  # milliunits
    age_of_money: Optional[int] = None
    deleted: bool = False
    categories: list[dict[str, Any]] = []


# --- Analysis Configuration ---

_TRUTHY = {"1", "true", "yes", "on"}


class AnalysisConfig(BaseModel):
    """Options accepted by the category processor and monthly aggregator."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    tolerance_milliunits: int = Field(
        default=0, ge=0, description="Width of the on-target band in milliunits"
    )
    include_hidden_categories: bool = Field(
        default=False, description="Include hidden categories in monthly totals"
    )
    include_deleted_categories: bool = Field(
        default=False, description="Include deleted categories in monthly totals"
    )
    minimum_assignment_threshold: int = Field(
        default=0,
        ge=0,
        description="Categories whose absolute assignment is below this are excluded",
    )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AnalysisConfig":
        """Build a config from ``YNAB_*`` environment variables.

        Unset variables keep their defaults. Malformed numbers raise
        pydantic's ``ValidationError``.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {}

        if env.get("YNAB_TOLERANCE_MILLIUNITS"):
            values["tolerance_milliunits"] = env["YNAB_TOLERANCE_MILLIUNITS"]
        if env.get("YNAB_MIN_ASSIGNMENT_MILLIUNITS"):
            values["minimum_assignment_threshold"] = env["YNAB_MIN_ASSIGNMENT_MILLIUNITS"]
        if env.get("YNAB_INCLUDE_HIDDEN"):
            values["include_hidden_categories"] = (
                env["YNAB_INCLUDE_HIDDEN"].strip().lower() in _TRUTHY
            )
        if env.get("YNAB_INCLUDE_DELETED"):
            values["include_deleted_categories"] = (
                env["YNAB_INCLUDE_DELETED"].strip().lower() in _TRUTHY
            )

        return cls.model_validate(values)


DEFAULT_ANALYSIS_CONFIG = AnalysisConfig()


# --- MCP Tool Input Models ---


class MonthlyAlignmentInput(BaseModel):
    """Input for the monthly target alignment report."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    month: Optional[str] = Field(
        None, description="Budget month (YYYY-MM-DD or YYYY-MM). Defaults to the current month."
    )
    budget_name: Optional[str] = Field(
        None, description="Budget name (partial match). Defaults to the configured budget."
    )


class VarianceReportInput(BaseModel):
    """Input for the ranked variance lists."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    month: Optional[str] = Field(
        None, description="Budget month (YYYY-MM-DD or YYYY-MM). Defaults to the current month."
    )
    budget_name: Optional[str] = Field(
        None, description="Budget name (partial match). Defaults to the configured budget."
    )
    view: str = Field(
        default="all",
        pattern="^(all|over|under|no_target|summary)$",
        description="Which list to show: 'over', 'under', 'no_target', 'summary' or 'all'",
    )
    limit: Optional[int] = Field(
        None, ge=1, le=500, description="Max rows per list. Omit to show every category."
    )


class CategoryTargetDetailInput(BaseModel):
    """Input for explaining how a category's monthly target was computed."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    category_name: str = Field(..., description="Category to explain (partial match)")
    month: Optional[str] = Field(
        None, description="Budget month (YYYY-MM-DD or YYYY-MM). Defaults to the current month."
    )
    budget_name: Optional[str] = Field(
        None, description="Budget name (partial match). Defaults to the configured budget."
    )
