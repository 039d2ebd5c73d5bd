"""YNAB Target Alignment MCP Server.

Exposes the monthly target alignment analysis as MCP tools for use with
desktop assistants and other MCP clients. Read-only: nothing here writes to
the budget.
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from mcp.server.fastmcp import Context, FastMCP

load_dotenv()

from ynab_targets.core.monthly_analysis import (
    analyze_month,
    attach_group_names,
    parse_categories,
)
from ynab_targets.core.processor import process_category
from ynab_targets.core.resolvers import (
    resolve_analysis_month,
    resolve_budget,
    resolve_category,
)
from ynab_targets.core.ynab_client import YNABClient
from ynab_targets.mcp.error_handling import handle_tool_errors
from ynab_targets.mcp.formatters import (
    format_budgets,
    format_category_target_detail,
    format_monthly_alignment,
    format_variance_report,
)
from ynab_targets.models.results import DashboardSummary
from ynab_targets.models.schemas import (
    AnalysisConfig,
    Budget,
    CategoryTargetDetailInput,
    MonthlyAlignmentInput,
    VarianceReportInput,
)

logging.basicConfig(
    level=os.environ.get("YNAB_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("ynab_targets")


# --- Lifespan: initialize shared resources ---


@asynccontextmanager
async def app_lifespan(server: FastMCP):
    token = os.environ.get("YNAB_API_TOKEN", "")
    budget_id = os.environ.get("YNAB_BUDGET_ID", "default")

    if not token:
        raise RuntimeError(
            "YNAB_API_TOKEN environment variable is required. "
            "Get one at https://app.ynab.com/settings/developer"
        )

    config = AnalysisConfig.from_env()
    client = YNABClient(api_token=token, budget_id=budget_id)

    # Resolve "default" to an actual budget ID (the YNAB API shortcut
    # doesn't work for all accounts).
    if budget_id == "default":
        budgets = await client.get_budgets()
        if budgets:
            client.budget_id = budgets[0].id

    logger.info("Starting with budget %s and %s", client.budget_id, config)

    yield {"ynab": client, "config": config}

    await client.close()


mcp = FastMCP("ynab_targets", lifespan=app_lifespan)


# --- Helpers ---


def _get_deps(ctx) -> tuple[YNABClient, AnalysisConfig]:
    state = ctx.request_context.lifespan_context
    return state["ynab"], state["config"]


async def _select_budget(ynab: YNABClient, budget_name: Optional[str]) -> Budget:
    budgets = await ynab.get_budgets()
    if budget_name:
        return resolve_budget(budgets, budget_name)
    for b in budgets:
        if b.id == ynab.budget_id:
            return b
    return resolve_budget(budgets)


async def _analyze(
    ynab: YNABClient,
    config: AnalysisConfig,
    budget_name: Optional[str],
    month: Optional[str],
) -> DashboardSummary:
    budget = await _select_budget(ynab, budget_name)
    target_month = resolve_analysis_month(budget, month)
    month_detail = await ynab.get_month(target_month, budget_id=budget.id)
    groups = await ynab.get_categories(budget_id=budget.id)
    return analyze_month(month_detail, budget.id, budget.name, config, groups=groups)


# --- Read-Only Tools ---


@mcp.tool(
    name="ynab_get_budgets",
    annotations={
        "title": "List YNAB Budgets",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
@handle_tool_errors
async def ynab_get_budgets(ctx: Context) -> str:
    """List all YNAB budgets for the authenticated user."""
    ynab, _ = _get_deps(ctx)
    budgets = await ynab.get_budgets()
    return format_budgets(budgets)


@mcp.tool(
    name="ynab_monthly_alignment",
    annotations={
        "title": "Monthly Target Alignment",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
@handle_tool_errors
async def ynab_monthly_alignment(params: MonthlyAlignmentInput, ctx: Context) -> str:
    """Compare a month's assignments with what each category's target needs."""
    ynab, config = _get_deps(ctx)
    summary = await _analyze(ynab, config, params.budget_name, params.month)
    return format_monthly_alignment(summary)


@mcp.tool(
    name="ynab_variance_report",
    annotations={
        "title": "Target Variance Report",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
@handle_tool_errors
async def ynab_variance_report(params: VarianceReportInput, ctx: Context) -> str:
    """List over-target, under-target and untargeted categories for a month."""
    ynab, config = _get_deps(ctx)
    summary = await _analyze(ynab, config, params.budget_name, params.month)
    return format_variance_report(summary.ranking, params.view, params.limit)


@mcp.tool(
    name="ynab_category_target_detail",
    annotations={
        "title": "Explain Category Target",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
@handle_tool_errors
async def ynab_category_target_detail(params: CategoryTargetDetailInput, ctx: Context) -> str:
    """Show how much a category needs this month and which rule decided it."""
    ynab, config = _get_deps(ctx)

    budget = await _select_budget(ynab, params.budget_name)
    target_month = resolve_analysis_month(budget, params.month)
    month_detail = await ynab.get_month(target_month, budget_id=budget.id)
    groups = await ynab.get_categories(budget_id=budget.id)

    categories = attach_group_names(parse_categories(month_detail.categories), groups)
    category = resolve_category(categories, params.category_name)
    processed = process_category(category, config, target_month)
    return format_category_target_detail(processed, target_month)


# --- Entry point ---

if __name__ == "__main__":
    mcp.run()
