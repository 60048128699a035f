"""Budget progress and alerts.

``compute_budget_progress`` and ``filter_budget_alerts`` are pure.
``BudgetTracker`` keeps the signed-in user's budgets in memory and only
changes them after the backend confirms a write.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

import httpx

from ledger_reports.core.ledger_client import LedgerAPIError, LedgerClient
from ledger_reports.core.periods import parse_month_key, transaction_period
from ledger_reports.models.results import BudgetProgress, OperationResult
from ledger_reports.models.schemas import Budget, SetBudgetInput, Transaction

# Alert once this much of a budget (percent) has been spent
BUDGET_ALERT_THRESHOLD = 80.0

logger = logging.getLogger(__name__)


def compute_budget_progress(
    budgets: Iterable[Budget],
    transactions: Iterable[Transaction],
    month: str,
) -> list[BudgetProgress]:
    """Compute spent/remaining for every budget of *month*.

    ``percentage`` is capped at 100; ``is_over_budget`` compares the
    uncapped spend, so a 120% budget still reads as over.
    """
    target = parse_month_key(month)

    spent_by_category: dict[str, float] = {}
    for t in transactions:
        if not t.is_expense or transaction_period(t.date) != target:
            continue
        spent_by_category[t.category] = spent_by_category.get(t.category, 0.0) + t.amount

    progress: list[BudgetProgress] = []
    for budget in budgets:
        if budget.month != month:
            continue
        spent = spent_by_category.get(budget.category, 0.0)
        progress.append(BudgetProgress(
            budget=budget,
            spent=spent,
            remaining=budget.amount - spent,
            percentage=min(spent / budget.amount * 100, 100.0),
            is_over_budget=spent > budget.amount,
        ))
    return progress


def filter_budget_alerts(progress: Iterable[BudgetProgress]) -> list[BudgetProgress]:
    """Keep budgets at or above the alert threshold, or over budget."""
    return [
        p for p in progress
        if p.percentage >= BUDGET_ALERT_THRESHOLD or p.is_over_budget
    ]


class BudgetTracker:
    """In-memory budgets for the token's user, synced with the ledger backend.

    Mutations return an :class:`OperationResult` instead of raising when the
    backend fails, so callers decide whether to retry. Invalid input raises
    ``pydantic.ValidationError`` before anything is sent.
    """

    def __init__(self, client: LedgerClient, transactions: Iterable[Transaction] = ()):
        self.client = client
        self.transactions: list[Transaction] = list(transactions)
        self.budgets: list[Budget] = []

    async def load(self) -> OperationResult:
        """Fetch budgets. On failure the previous budgets are kept."""
        try:
            self.budgets = await self.client.get_budgets()
        except (LedgerAPIError, httpx.HTTPError) as e:
            return self._failure("load budgets", e)
        return OperationResult(success=True)

    async def load_transactions(self) -> OperationResult:
        """Fetch transactions. On failure the previous transactions are kept."""
        try:
            self.transactions = await self.client.get_transactions()
        except (LedgerAPIError, httpx.HTTPError) as e:
            return self._failure("load transactions", e)
        return OperationResult(success=True)

    async def set_budget(self, category: str, amount: float, month: str) -> OperationResult:
        input_data = SetBudgetInput(category=category, amount=amount, month=month)
        try:
            budget = await self.client.set_budget(input_data)
        except (LedgerAPIError, httpx.HTTPError) as e:
            return self._failure("set budget", e)

        self.budgets = [
            b for b in self.budgets
            if not (b.month == budget.month and b.category == budget.category)
        ]
        self.budgets.append(budget)
        return OperationResult(success=True)

    async def delete_budget(self, month: str, category: str) -> OperationResult:
        try:
            await self.client.delete_budget(month, category)
        except (LedgerAPIError, httpx.HTTPError) as e:
            return self._failure("delete budget", e)

        self.budgets = [
            b for b in self.budgets
            if not (b.month == month and b.category == category)
        ]
        return OperationResult(success=True)

    def find_budget(self, month: str, category: str) -> Budget | None:
        for b in self.budgets:
            if b.month == month and b.category == category:
                return b
        return None

    def get_budget_progress(self, month: str) -> list[BudgetProgress]:
        return compute_budget_progress(self.budgets, self.transactions, month)

    def get_alerts(self, month: str) -> list[BudgetProgress]:
        return filter_budget_alerts(self.get_budget_progress(month))

    @staticmethod
    def _failure(action: str, error: Exception) -> OperationResult:
        message = error.detail if isinstance(error, LedgerAPIError) else str(error)
        logger.warning("Failed to %s: %s", action, message)
        return OperationResult(success=False, error=message or f"Failed to {action}")
