"""Shared test fixtures for ledger report tests."""

import httpx
import pytest

from ledger_reports.core.ledger_client import LedgerClient
from ledger_reports.models.schemas import Budget, Transaction, TransactionKind

BASE_URL = "https://ledger.example.com/api"


def make_transaction(
    kind: str = "expense",
    amount: float = 100.0,
    category: str = "Food",
    date: str = "2024-01-15",
    description: str = "",
) -> Transaction:
    return Transaction(
        id=f"txn-{kind}-{category.lower().replace(' ', '-')}-{date}-{amount:g}",
        kind=TransactionKind(kind),
        amount=amount,
        category=category,
        description=description,
        date=date,
    )


def make_income(amount: float = 2000.0, category: str = "Salary", date: str = "2024-01-01") -> Transaction:
    return make_transaction(kind="income", amount=amount, category=category, date=date)


def make_budget(
    category: str = "Food",
    amount: float = 1000.0,
    month: str = "2024-01",
    user_id: str = "user-1",
    created_at: str = "2024-01-01T00:00:00.000Z",
    updated_at: str | None = None,
) -> Budget:
    return Budget(
        id=f"bud-{month}-{category.lower().replace(' ', '-')}",
        user_id=user_id,
        category=category,
        amount=amount,
        month=month,
        created_at=created_at,
        updated_at=updated_at or created_at,
    )


def budget_json(budget: Budget) -> dict:
    """Wire form of a budget, as the backend returns it."""
    return budget.model_dump(by_alias=True)


def transaction_json(transaction: Transaction) -> dict:
    return transaction.model_dump(by_alias=True, mode="json")


@pytest.fixture
def mock_client():
    """Factory that creates a LedgerClient with a mocked transport."""
    async def _make(handler):
        client = LedgerClient(base_url=BASE_URL, access_token="test-token")
        transport = httpx.MockTransport(handler)
        client._client = httpx.AsyncClient(
            transport=transport,
            base_url=BASE_URL,
            headers={"Authorization": "Bearer test-token"},
            timeout=30.0,
        )
        return client
    return _make
