"""Ledger MCP Server.

Exposes the ledger's monthly/yearly reports, month comparisons and
budget tracking as MCP tools.
"""

import os
import sys
from contextlib import asynccontextmanager
from datetime import date
from pathlib import Path
from dotenv import load_dotenv
from mcp.server.fastmcp import Context, FastMCP

# Ensure project root is on sys.path so `ledger_reports` is importable when
# loaded directly by tools like `mcp dev` (which use importlib, not `python -m`).
_project_root = str(Path(__file__).resolve().parent.parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

load_dotenv()

from ledger_reports.core.budgets import BudgetTracker
from ledger_reports.core.ledger_client import DEFAULT_TIMEOUT, LedgerClient
from ledger_reports.core.periods import current_month, current_year, get_next_month, in_month
from ledger_reports.core.reports import (
    generate_comparison_report,
    generate_monthly_report,
    generate_yearly_report,
)
from ledger_reports.mcp.error_handling import handle_tool_errors
from ledger_reports.mcp.formatters import (
    format_budget_alerts,
    format_budget_deleted,
    format_budget_progress,
    format_budget_set,
    format_comparison_report,
    format_monthly_report,
    format_transaction_created,
    format_transactions,
    format_yearly_report,
)
from ledger_reports.models.schemas import (
    AddTransactionInput,
    BudgetMonthInput,
    ComparisonReportInput,
    CreateTransactionInput,
    DeleteBudgetInput,
    GetTransactionsInput,
    MonthlyReportInput,
    SetBudgetToolInput,
    YearlyReportInput,
)


# --- Lifespan: initialize shared resources ---


@asynccontextmanager
async def app_lifespan(server: FastMCP):
    base_url = os.environ.get("LEDGER_API_URL", "")
    token = os.environ.get("LEDGER_ACCESS_TOKEN", "")
    timeout = float(os.environ.get("LEDGER_TIMEOUT", DEFAULT_TIMEOUT))

    if not base_url:
        raise RuntimeError(
            "LEDGER_API_URL environment variable is required "
            "(e.g. https://<project>.supabase.co/functions/v1/ledger)."
        )
    if not token:
        raise RuntimeError(
            "LEDGER_ACCESS_TOKEN environment variable is required. "
            "Use the access token of a signed-in session."
        )

    client = LedgerClient(base_url=base_url, access_token=token, timeout=timeout)
    tracker = BudgetTracker(client)

    yield {"ledger": client, "tracker": tracker}

    await client.close()


mcp = FastMCP("ledger_mcp", lifespan=app_lifespan)


# --- Helper to get client from context ---


def _get_deps(ctx) -> tuple[LedgerClient, BudgetTracker]:
    state = ctx.request_context.lifespan_context
    return state["ledger"], state["tracker"]


async def _refreshed_tracker(ctx) -> tuple[BudgetTracker, str | None]:
    """Reload budgets and transactions; returns the first load error, if any."""
    _, tracker = _get_deps(ctx)
    for result in (await tracker.load(), await tracker.load_transactions()):
        if not result.success:
            return tracker, result.error
    return tracker, None


# --- Report Tools ---


@mcp.tool(
    name="ledger_monthly_report",
    annotations={
        "title": "Monthly Report",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
@handle_tool_errors
async def ledger_monthly_report(params: MonthlyReportInput, ctx: Context) -> str:
    """Income, expenses, net, category breakdown and daily averages for a month."""
    ledger, _ = _get_deps(ctx)
    month = params.month or current_month(date.today())
    transactions = await ledger.get_transactions()
    return format_monthly_report(generate_monthly_report(transactions, month))


@mcp.tool(
    name="ledger_yearly_report",
    annotations={
        "title": "Yearly Report",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
@handle_tool_errors
async def ledger_yearly_report(params: YearlyReportInput, ctx: Context) -> str:
    """Month-by-month totals, best/worst month and growth vs the previous year."""
    ledger, _ = _get_deps(ctx)
    year = params.year or current_year(date.today())
    transactions = await ledger.get_transactions()
    return format_yearly_report(generate_yearly_report(transactions, year))


@mcp.tool(
    name="ledger_compare_months",
    annotations={
        "title": "Compare Months",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
@handle_tool_errors
async def ledger_compare_months(params: ComparisonReportInput, ctx: Context) -> str:
    """Compare a month's income, expenses and net against another month (default: the month before)."""
    ledger, _ = _get_deps(ctx)
    month = params.month or current_month(date.today())
    transactions = await ledger.get_transactions()
    report = generate_comparison_report(transactions, month, params.previous_month)
    return format_comparison_report(report)


# --- Budget Tools ---


@mcp.tool(
    name="ledger_budget_progress",
    annotations={
        "title": "Budget Progress",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
@handle_tool_errors
async def ledger_budget_progress(params: BudgetMonthInput, ctx: Context) -> str:
    """Show how much of each category budget has been spent this month."""
    month = params.month or current_month(date.today())
    tracker, error = await _refreshed_tracker(ctx)
    if error:
        return f"Could not load budget data: {error}"
    return format_budget_progress(tracker.get_budget_progress(month), month)


@mcp.tool(
    name="ledger_budget_alerts",
    annotations={
        "title": "Budget Alerts",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
@handle_tool_errors
async def ledger_budget_alerts(params: BudgetMonthInput, ctx: Context) -> str:
    """List budgets that are 80% used or already over."""
    month = params.month or current_month(date.today())
    tracker, error = await _refreshed_tracker(ctx)
    if error:
        return f"Could not load budget data: {error}"
    return format_budget_alerts(tracker.get_alerts(month), month)


@mcp.tool(
    name="ledger_set_budget",
    annotations={
        "title": "Set Budget",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
@handle_tool_errors
async def ledger_set_budget(params: SetBudgetToolInput, ctx: Context) -> str:
    """Set (or replace) the monthly spending cap for a category."""
    _, tracker = _get_deps(ctx)
    month = params.month
    if month is None:
        month = current_month(date.today())
        if params.next_month:
            month = get_next_month(month)
    result = await tracker.set_budget(params.category, params.amount, month)
    return format_budget_set(result, tracker.find_budget(month, params.category))


@mcp.tool(
    name="ledger_delete_budget",
    annotations={
        "title": "Delete Budget",
        "readOnlyHint": False,
        "destructiveHint": True,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
@handle_tool_errors
async def ledger_delete_budget(params: DeleteBudgetInput, ctx: Context) -> str:
    """Remove a category's budget for a month."""
    _, tracker = _get_deps(ctx)
    month = params.month or current_month(date.today())
    result = await tracker.delete_budget(month, params.category)
    return format_budget_deleted(result, params.category, month)


# --- Transaction Tools ---


@mcp.tool(
    name="ledger_get_transactions",
    annotations={
        "title": "Get Transactions",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
@handle_tool_errors
async def ledger_get_transactions(params: GetTransactionsInput, ctx: Context) -> str:
    """List recent transactions, optionally filtered by month, kind or category."""
    ledger, _ = _get_deps(ctx)
    transactions = await ledger.get_transactions()

    filtered = []
    for t in transactions:
        if params.month and not in_month(t.date, params.month):
            continue
        if params.kind and t.kind != params.kind:
            continue
        if params.category and params.category.lower() not in t.category.lower():
            continue
        filtered.append(t)

    return format_transactions(filtered, params.limit)


@mcp.tool(
    name="ledger_add_transaction",
    annotations={
        "title": "Add Transaction",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True,
    },
)
@handle_tool_errors
async def ledger_add_transaction(params: AddTransactionInput, ctx: Context) -> str:
    """Record an income or expense. Date defaults to today."""
    ledger, _ = _get_deps(ctx)
    transaction = await ledger.add_transaction(CreateTransactionInput(
        kind=params.kind,
        amount=params.amount,
        category=params.category,
        description=params.description,
        date=params.date or date.today().isoformat(),
    ))
    return format_transaction_created(transaction)


@mcp.tool(
    name="ledger_delete_transaction",
    annotations={
        "title": "Delete Transaction",
        "readOnlyHint": False,
        "destructiveHint": True,
        "idempotentHint": True,
        "openWorldHint": True,
    },
)
@handle_tool_errors
async def ledger_delete_transaction(transaction_id: str, ctx: Context) -> str:
    """Delete a transaction by id (ids are shown by ledger_get_transactions)."""
    ledger, _ = _get_deps(ctx)
    await ledger.delete_transaction(transaction_id)
    return f"Deleted transaction `{transaction_id}`."


# --- Entry point ---

if __name__ == "__main__":
    mcp.run()
