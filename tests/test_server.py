"""Tests for MCP tool wiring, using a mocked ledger backend."""

import json
from datetime import date
from types import SimpleNamespace

import httpx

from tests.conftest import budget_json, make_budget, make_income, make_transaction, transaction_json
from ledger_reports.core.budgets import BudgetTracker
from ledger_reports.core.periods import current_month, get_next_month
from ledger_reports.mcp.server import (
    ledger_add_transaction,
    ledger_budget_alerts,
    ledger_budget_progress,
    ledger_compare_months,
    ledger_delete_budget,
    ledger_delete_transaction,
    ledger_get_transactions,
    ledger_monthly_report,
    ledger_set_budget,
    ledger_yearly_report,
)
from ledger_reports.models.schemas import (
    AddTransactionInput,
    BudgetMonthInput,
    ComparisonReportInput,
    DeleteBudgetInput,
    GetTransactionsInput,
    MonthlyReportInput,
    SetBudgetToolInput,
    YearlyReportInput,
)


def _backend(transactions, budgets=(), calls=None, budget_error=None):
    def handler(request):
        if calls is not None:
            calls.append((request.method, request.url.path))
        if request.url.path.endswith("/transactions") and request.method == "GET":
            return httpx.Response(200, json={"transactions": [transaction_json(t) for t in transactions]})
        if request.url.path.endswith("/transactions") and request.method == "POST":
            body = json.loads(request.content)
            return httpx.Response(200, json={"transaction": {**body, "id": "new-1"}})
        if request.url.path.endswith("/budgets") and request.method == "GET":
            return httpx.Response(200, json={"budgets": [budget_json(b) for b in budgets]})
        if request.url.path.endswith("/budgets") and request.method == "POST":
            if budget_error:
                return httpx.Response(400, json={"error": budget_error})
            body = json.loads(request.content)
            return httpx.Response(200, json={"budget": {**body, "id": "b-new"}})
        if request.method == "DELETE" and request.url.path.startswith(("/api/budgets/", "/api/transactions/")):
            return httpx.Response(200, json={"success": True})
        return httpx.Response(404, json={"error": "Not found"})
    return handler


async def _ctx(mock_client, handler):
    client = await mock_client(handler)
    tracker = BudgetTracker(client)
    return SimpleNamespace(
        request_context=SimpleNamespace(lifespan_context={"ledger": client, "tracker": tracker})
    )


TXNS = [
    make_transaction(amount=100, category="Food", date="2024-01-05"),
    make_transaction(amount=850, category="Fun", date="2024-01-06"),
    make_income(amount=2000, date="2024-01-01"),
    make_income(amount=1000, date="2023-12-01"),
]


class TestReportTools:
    async def test_monthly_report(self, mock_client):
        ctx = await _ctx(mock_client, _backend(TXNS))
        result = await ledger_monthly_report(MonthlyReportInput(month="2024-01"), ctx)
        assert "Monthly Report: January 2024" in result
        assert "$950.00" in result

    async def test_yearly_report(self, mock_client):
        ctx = await _ctx(mock_client, _backend(TXNS))
        result = await ledger_yearly_report(YearlyReportInput(year=2024), ctx)
        assert "Yearly Report: 2024" in result

    async def test_compare_defaults_previous_month(self, mock_client):
        ctx = await _ctx(mock_client, _backend(TXNS))
        result = await ledger_compare_months(ComparisonReportInput(month="2024-01"), ctx)
        assert "January 2024 vs December 2023" in result
        assert "+100.0%" in result

    async def test_backend_error_is_reported(self, mock_client):
        def handler(request):
            return httpx.Response(500, json={"error": "Failed to fetch transactions"})

        ctx = await _ctx(mock_client, handler)
        result = await ledger_monthly_report(MonthlyReportInput(month="2024-01"), ctx)
        assert result == "Ledger API error: Failed to fetch transactions"


class TestBudgetTools:
    async def test_progress_and_alerts(self, mock_client):
        budgets = [make_budget(category="Food", amount=1000), make_budget(category="Fun", amount=1000)]
        ctx = await _ctx(mock_client, _backend(TXNS, budgets))

        progress = await ledger_budget_progress(BudgetMonthInput(month="2024-01"), ctx)
        assert "[OK] Food" in progress
        assert "[!] Fun" in progress

        alerts = await ledger_budget_alerts(BudgetMonthInput(month="2024-01"), ctx)
        assert "**Fun** has used 85%" in alerts
        assert "Food" not in alerts

    async def test_set_budget(self, mock_client):
        calls = []
        ctx = await _ctx(mock_client, _backend(TXNS, calls=calls))
        result = await ledger_set_budget(SetBudgetToolInput(category="Food", amount=300, month="2024-02"), ctx)
        assert result == "Budget saved: **Food** $300.00 for February 2024."
        assert calls == [("POST", "/api/budgets")]

    async def test_set_budget_next_month(self, mock_client):
        ctx = await _ctx(mock_client, _backend(TXNS))
        result = await ledger_set_budget(
            SetBudgetToolInput(category="Food", amount=300, next_month=True), ctx
        )
        tracker = ctx.request_context.lifespan_context["tracker"]
        expected = get_next_month(current_month(date.today()))
        assert tracker.budgets[0].month == expected
        assert result.startswith("Budget saved: **Food** $300.00")

    async def test_explicit_month_wins_over_next_month(self, mock_client):
        ctx = await _ctx(mock_client, _backend(TXNS))
        result = await ledger_set_budget(
            SetBudgetToolInput(category="Food", amount=300, month="2024-02", next_month=True), ctx
        )
        assert result.endswith("for February 2024.")

    async def test_set_budget_failure(self, mock_client):
        ctx = await _ctx(mock_client, _backend(TXNS, budget_error="Amount must be greater than 0"))
        result = await ledger_set_budget(SetBudgetToolInput(category="Food", amount=300, month="2024-02"), ctx)
        assert result == "Could not set budget: Amount must be greater than 0"

    async def test_delete_budget(self, mock_client):
        calls = []
        ctx = await _ctx(mock_client, _backend(TXNS, calls=calls))
        result = await ledger_delete_budget(DeleteBudgetInput(category="Food", month="2024-01"), ctx)
        assert result == "Removed the **Food** budget for January 2024."
        assert calls == [("DELETE", "/api/budgets/2024-01/Food")]


class TestTransactionTools:
    async def test_get_transactions_filters(self, mock_client):
        ctx = await _ctx(mock_client, _backend(TXNS))
        result = await ledger_get_transactions(
            GetTransactionsInput(month="2024-01", kind="expense"), ctx
        )
        assert "Food" in result
        assert "Fun" in result
        assert "Salary" not in result

    async def test_add_transaction(self, mock_client):
        ctx = await _ctx(mock_client, _backend(TXNS))
        result = await ledger_add_transaction(
            AddTransactionInput(kind="expense", amount=12, category="Food", date="2024-01-09"), ctx
        )
        assert "Transaction added!" in result
        assert "2024-01-09" in result

    async def test_delete_transaction(self, mock_client):
        calls = []
        ctx = await _ctx(mock_client, _backend(TXNS, calls=calls))
        result = await ledger_delete_transaction("t1", ctx)
        assert result == "Deleted transaction `t1`."
        assert calls == [("DELETE", "/api/transactions/t1")]
