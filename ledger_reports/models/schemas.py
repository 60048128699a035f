"""Pydantic models for ledger backend data types."""

import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

MONTH_KEY_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"
DATE_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])-(0[1-9]|[12]\d|3[01])$"


def _check_calendar_date(value: Optional[str]) -> Optional[str]:
    """Reject well-formed dates that don't exist, such as 2024-02-30."""
    if value is not None:
        try:
            datetime.date.fromisoformat(value)
        except ValueError:
            raise ValueError(f"{value} is not a calendar date") from None
    return value


# --- Enums ---

class TransactionKind(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


# --- Response Models ---

class Transaction(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    id: str
    kind: TransactionKind = Field(..., alias="type")
    amount: float = Field(..., gt=0)
    category: str
    description: str = ""
    date: str  # YYYY-MM-DD

    @property
    def is_income(self) -> bool:
        return self.kind == TransactionKind.INCOME

    @property
    def is_expense(self) -> bool:
        return self.kind == TransactionKind.EXPENSE


class Budget(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str
    user_id: Optional[str] = Field(None, alias="userId")
    category: str
    amount: float = Field(..., gt=0)
    month: str  # YYYY-MM
    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")


# --- Input Models for Creating/Updating ---

class CreateTransactionInput(BaseModel):
    """Input for recording a new transaction on the ledger backend."""
    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    kind: TransactionKind = Field(..., alias="type", description="'income' or 'expense'")
    amount: float = Field(..., gt=0, description="Positive amount")
    category: str = Field(..., min_length=1, max_length=100, description="Category label")
    description: str = Field(default="", max_length=200, description="Free-text note")
    date: str = Field(..., pattern=DATE_PATTERN, description="Transaction date (YYYY-MM-DD)")

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: str) -> str:
        return _check_calendar_date(v)


class SetBudgetInput(BaseModel):
    """Input for creating or replacing the budget of one category in one month."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    category: str = Field(..., min_length=1, max_length=100, description="Expense category")
    amount: float = Field(..., gt=0, description="Spending cap for the month")
    month: str = Field(..., pattern=MONTH_KEY_PATTERN, description="Budget month (YYYY-MM)")


# --- MCP Tool Input Models ---


class MonthlyReportInput(BaseModel):
    """Input for a single-month report."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    month: Optional[str] = Field(
        None, pattern=MONTH_KEY_PATTERN, description="Report month (YYYY-MM). Defaults to this month."
    )


class YearlyReportInput(BaseModel):
    """Input for a calendar-year report."""
    model_config = ConfigDict(extra="forbid")

    year: Optional[int] = Field(
        None, ge=1900, le=9999, description="Report year. Defaults to this year."
    )


class ComparisonReportInput(BaseModel):
    """Input for comparing two months."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    month: Optional[str] = Field(
        None, pattern=MONTH_KEY_PATTERN, description="Current month (YYYY-MM). Defaults to this month."
    )
    previous_month: Optional[str] = Field(
        None,
        pattern=MONTH_KEY_PATTERN,
        description="Month to compare against (YYYY-MM). Defaults to the month before.",
    )


class BudgetMonthInput(BaseModel):
    """Input for budget progress and alert queries."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    month: Optional[str] = Field(
        None, pattern=MONTH_KEY_PATTERN, description="Budget month (YYYY-MM). Defaults to this month."
    )


class SetBudgetToolInput(BaseModel):
    """Natural language input for setting a category budget."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    category: str = Field(..., min_length=1, description="Expense category (e.g. 'Food')")
    amount: float = Field(..., gt=0, description="Spending cap for the month")
    month: Optional[str] = Field(
        None, pattern=MONTH_KEY_PATTERN, description="Budget month (YYYY-MM). Defaults to this month."
    )
    next_month: bool = Field(
        default=False, description="Budget next month instead of this one. Ignored when month is given."
    )


class DeleteBudgetInput(BaseModel):
    """Input for removing a category budget."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    category: str = Field(..., min_length=1, description="Expense category")
    month: Optional[str] = Field(
        None, pattern=MONTH_KEY_PATTERN, description="Budget month (YYYY-MM). Defaults to this month."
    )


class GetTransactionsInput(BaseModel):
    """Input for listing transactions."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    month: Optional[str] = Field(
        None, pattern=MONTH_KEY_PATTERN, description="Only show this month (YYYY-MM)"
    )
    kind: Optional[TransactionKind] = Field(None, description="'income' or 'expense'")
    category: Optional[str] = Field(None, description="Filter by category (partial match)")
    limit: int = Field(default=25, ge=1, le=100, description="Max number of transactions to return")


class AddTransactionInput(BaseModel):
    """Natural language input for recording a transaction."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    kind: TransactionKind = Field(..., description="'income' or 'expense'")
    amount: float = Field(..., gt=0, description="Positive amount")
    category: str = Field(..., min_length=1, description="Category (e.g. 'Food', 'Salary')")
    description: str = Field(default="", max_length=200, description="Optional note")
    date: Optional[str] = Field(
        None, pattern=DATE_PATTERN, description="Transaction date (YYYY-MM-DD). Defaults to today."
    )

    @field_validator("date")
    @classmethod
    def validate_date(cls, v: Optional[str]) -> Optional[str]:
        return _check_calendar_date(v)
