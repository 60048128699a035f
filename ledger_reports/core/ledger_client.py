"""Ledger backend API client wrapper.

Async HTTP client for the ledger REST backend that stores transactions
and budgets. The backend scopes every route to the user of the bearer
token, so the client carries no user id of its own.
"""

import logging
from typing import Any, Optional, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from ledger_reports.models.schemas import (
    Budget,
    CreateTransactionInput,
    SetBudgetInput,
    Transaction,
)

DEFAULT_TIMEOUT = 30.0
INVALID_RESPONSE = "Invalid response from ledger backend"

ModelT = TypeVar("ModelT", bound=BaseModel)

logger = logging.getLogger(__name__)


class LedgerAPIError(Exception):
    """Raised when the ledger backend rejects a request or can't be reached in time."""

    def __init__(self, status_code: int, detail: str):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"Ledger API Error [{status_code}]: {detail}")


class LedgerClient:
    """Async client for the ledger backend."""

    def __init__(self, base_url: str, access_token: str, timeout: float = DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.timeout = timeout
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={
                    "Authorization": f"Bearer {self.access_token}",
                    "Content-Type": "application/json",
                },
                timeout=self.timeout,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        json_data: Optional[dict[str, Any]] = None,
    ) -> dict[str, Any]:
        """Make an authenticated request and return the decoded JSON body.

        Error bodies look like ``{"error": "message"}``; the message becomes
        :attr:`LedgerAPIError.detail`.
        """
        logger.debug("%s %s", method, path)
        try:
            response = await self.client.request(method=method, url=path, json=json_data)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            try:
                body = e.response.json() if e.response.content else {}
            except ValueError:
                body = {}
            detail = body.get("error") if isinstance(body, dict) else None
            raise LedgerAPIError(
                status_code=e.response.status_code,
                detail=detail or f"HTTP error! status: {e.response.status_code}",
            ) from e
        except httpx.TimeoutException as e:
            raise LedgerAPIError(
                status_code=408,
                detail="Request to the ledger backend timed out. Please try again.",
            ) from e

        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError as e:
            raise LedgerAPIError(response.status_code, INVALID_RESPONSE) from e
        if not isinstance(data, dict):
            raise LedgerAPIError(response.status_code, INVALID_RESPONSE)
        return data

    @staticmethod
    def _parse(model: type[ModelT], payload: Any) -> ModelT:
        """Validate one payload object, treating a bad shape as a backend fault."""
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            logger.warning("Unusable %s payload from ledger backend: %s", model.__name__, e)
            raise LedgerAPIError(200, INVALID_RESPONSE) from e

    # --- Transactions ---

    async def get_transactions(self) -> list[Transaction]:
        """Get all transactions for the authenticated user."""
        data = await self._request("GET", "/transactions")
        return [self._parse(Transaction, t) for t in _as_list(data.get("transactions"))]

    async def add_transaction(self, input_data: CreateTransactionInput) -> Transaction:
        """Record a new transaction. The backend assigns the id."""
        data = await self._request(
            "POST",
            "/transactions",
            json_data=input_data.model_dump(by_alias=True, mode="json"),
        )
        return self._parse(Transaction, data.get("transaction"))

    async def delete_transaction(self, transaction_id: str) -> None:
        """Delete a transaction."""
        await self._request("DELETE", f"/transactions/{quote(transaction_id, safe='')}")

    # --- Budgets ---

    async def get_budgets(self) -> list[Budget]:
        """Get every budget of the authenticated user, across all months."""
        data = await self._request("GET", "/budgets")
        return [self._parse(Budget, b) for b in _as_list(data.get("budgets"))]

    async def set_budget(self, input_data: SetBudgetInput) -> Budget:
        """Create or replace the budget for ``(month, category)``.

        The backend upserts by that key atomically, keeping the original
        ``createdAt`` and refreshing ``updatedAt``.
        """
        data = await self._request("POST", "/budgets", json_data=input_data.model_dump())
        return self._parse(Budget, data.get("budget"))

    async def delete_budget(self, month: str, category: str) -> None:
        """Delete the budget for ``(month, category)``. Succeeds even if none exists."""
        await self._request(
            "DELETE",
            f"/budgets/{quote(month, safe='')}/{quote(category, safe='')}",
        )

    # --- Misc ---

    async def health(self) -> dict[str, Any]:
        """Backend liveness check."""
        return await self._request("GET", "/health")


def _as_list(value: Any) -> list[Any]:
    """A missing or null list field is empty; any other non-list is a bad response."""
    if value is None:
        return []
    if not isinstance(value, list):
        raise LedgerAPIError(200, INVALID_RESPONSE)
    return value
