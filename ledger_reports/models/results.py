"""Result dataclasses for the reporting engine.

These are internal types consumed by formatters: lightweight dataclasses
rather than Pydantic models since they don't need validation. Amounts are
exact floats; rounding is left to the formatters.
"""

from dataclasses import dataclass, field

from ledger_reports.models.schemas import Budget


@dataclass
class CategorySummary:
    """Total and transaction count for one category within a period."""
    category: str
    amount: float = 0.0
    count: int = 0


@dataclass
class DailyAverages:
    income: float
    expense: float


@dataclass
class MonthlyReport:
    """Income and expense breakdown for a single month."""
    month: str                  # YYYY-MM
    total_income: float
    total_expense: float
    net_amount: float
    income_by_category: list[CategorySummary] = field(default_factory=list)
    expense_by_category: list[CategorySummary] = field(default_factory=list)
    transaction_count: int = 0
    average_transaction_amount: float = 0.0
    top_income_category: CategorySummary | None = None
    top_expense_category: CategorySummary | None = None
    daily_averages: DailyAverages = field(default_factory=lambda: DailyAverages(0.0, 0.0))


@dataclass
class MonthlyDataPoint:
    """One month's totals inside a yearly report."""
    month: str  # YYYY-MM
    income: float
    expense: float
    net: float


@dataclass
class MonthNet:
    month: str
    net: float


@dataclass
class YearlyTrends:
    income_growth: float   # percent vs previous year, 0 without a baseline
    expense_growth: float


@dataclass
class YearlyReport:
    """Calendar-year totals, month-by-month data and growth vs the prior year."""
    year: int
    total_income: float
    total_expense: float
    net_amount: float
    monthly_data: list[MonthlyDataPoint] = field(default_factory=list)
    income_by_category: list[CategorySummary] = field(default_factory=list)
    expense_by_category: list[CategorySummary] = field(default_factory=list)
    best_month: MonthNet | None = None
    worst_month: MonthNet | None = None
    trends: YearlyTrends = field(default_factory=lambda: YearlyTrends(0.0, 0.0))


@dataclass
class Change:
    amount: float       # current - previous
    percentage: float   # 0 when previous is 0


@dataclass
class ComparisonChanges:
    income: Change
    expense: Change
    net: Change


@dataclass
class ComparisonReport:
    """Two monthly reports side by side with their deltas."""
    current: MonthlyReport
    previous: MonthlyReport
    changes: ComparisonChanges


@dataclass
class BudgetProgress:
    """How much of a monthly category budget has been spent."""
    budget: Budget
    spent: float
    remaining: float        # can be negative
    percentage: float       # 0-100, capped for display
    is_over_budget: bool    # uncapped spent > amount


@dataclass
class OperationResult:
    """Outcome of a tracker mutation against the ledger backend."""
    success: bool
    error: str | None = None
