"""Monthly, yearly and month-over-month reports.

All functions take already-fetched transactions and return result
dataclasses. No I/O and no clock reads, which keeps report logic testable
without mocking.
"""

from __future__ import annotations

from datetime import date

from ledger_reports.core.aggregation import (
    aggregate_by_category,
    split_by_kind,
    top_category,
    total_amount,
)
from ledger_reports.core.periods import (
    days_in_month,
    get_previous_month,
    in_year,
    month_key,
    parse_month_key,
    transaction_period,
)
from ledger_reports.models.results import (
    Change,
    ComparisonChanges,
    ComparisonReport,
    DailyAverages,
    MonthlyDataPoint,
    MonthlyReport,
    MonthNet,
    YearlyReport,
    YearlyTrends,
)
from ledger_reports.models.schemas import Transaction


# --- Monthly Report ---


def generate_monthly_report(transactions: list[Transaction], month: str) -> MonthlyReport:
    """Build the income/expense breakdown for one ``YYYY-MM`` month."""
    target = parse_month_key(month)
    month_txns = [t for t in transactions if transaction_period(t.date) == target]

    income_txns, expense_txns = split_by_kind(month_txns)
    total_income = total_amount(income_txns)
    total_expense = total_amount(expense_txns)

    income_by_category = aggregate_by_category(income_txns)
    expense_by_category = aggregate_by_category(expense_txns)

    count = len(month_txns)
    days = days_in_month(month)

    return MonthlyReport(
        month=month,
        total_income=total_income,
        total_expense=total_expense,
        net_amount=total_income - total_expense,
        income_by_category=income_by_category,
        expense_by_category=expense_by_category,
        transaction_count=count,
        average_transaction_amount=(total_income + total_expense) / count if count else 0.0,
        top_income_category=top_category(income_by_category),
        top_expense_category=top_category(expense_by_category),
        daily_averages=DailyAverages(
            income=total_income / days,
            expense=total_expense / days,
        ),
    )


# --- Yearly Report ---


def _growth(current: float, previous: float) -> float:
    if previous == 0:
        return 0.0
    return (current - previous) / previous * 100


def _year_totals(transactions: list[Transaction], year: int) -> tuple[list[Transaction], float, float]:
    year_txns = [t for t in transactions if in_year(t.date, year)]
    income, expense = split_by_kind(year_txns)
    return year_txns, total_amount(income), total_amount(expense)


def generate_yearly_report(transactions: list[Transaction], year: int) -> YearlyReport:
    """Build the calendar-year report with 12 monthly entries and YoY growth.

    Best/worst months are chosen among months with any income or expense;
    on equal net the earlier month wins.
    """
    year_txns, total_income, total_expense = _year_totals(transactions, year)

    by_month: dict[int, list[Transaction]] = {m: [] for m in range(1, 13)}
    for t in year_txns:
        by_month[transaction_period(t.date)[1]].append(t)

    monthly_data: list[MonthlyDataPoint] = []
    for mon in range(1, 13):
        income, expense = split_by_kind(by_month[mon])
        inc, exp = total_amount(income), total_amount(expense)
        monthly_data.append(MonthlyDataPoint(
            month=month_key(year, mon),
            income=inc,
            expense=exp,
            net=inc - exp,
        ))

    income_txns, expense_txns = split_by_kind(year_txns)

    best: MonthlyDataPoint | None = None
    worst: MonthlyDataPoint | None = None
    for m in monthly_data:
        if m.income == 0 and m.expense == 0:
            continue
        if best is None or m.net > best.net:
            best = m
        if worst is None or m.net < worst.net:
            worst = m

    _, prev_income, prev_expense = _year_totals(transactions, year - 1)

    return YearlyReport(
        year=year,
        total_income=total_income,
        total_expense=total_expense,
        net_amount=total_income - total_expense,
        monthly_data=monthly_data,
        income_by_category=aggregate_by_category(income_txns),
        expense_by_category=aggregate_by_category(expense_txns),
        best_month=MonthNet(best.month, best.net) if best else None,
        worst_month=MonthNet(worst.month, worst.net) if worst else None,
        trends=YearlyTrends(
            income_growth=_growth(total_income, prev_income),
            expense_growth=_growth(total_expense, prev_expense),
        ),
    )


# --- Comparison Report ---


def calculate_change(current: float, previous: float) -> Change:
    amount = current - previous
    percentage = amount / previous * 100 if previous != 0 else 0.0
    return Change(amount=amount, percentage=percentage)


def generate_comparison_report(
    transactions: list[Transaction],
    current_month: str,
    previous_month: str | None = None,
) -> ComparisonReport:
    """Compare two months. *previous_month* defaults to the calendar month before."""
    previous_month = previous_month or get_previous_month(current_month)
    current = generate_monthly_report(transactions, current_month)
    previous = generate_monthly_report(transactions, previous_month)

    return ComparisonReport(
        current=current,
        previous=previous,
        changes=ComparisonChanges(
            income=calculate_change(current.total_income, previous.total_income),
            expense=calculate_change(current.total_expense, previous.total_expense),
            net=calculate_change(current.net_amount, previous.net_amount),
        ),
    )


# --- Period Pickers ---


def available_months(transactions: list[Transaction], reference_date: date) -> list[str]:
    """Distinct months present in the data plus the reference month, newest first."""
    months = {month_key(reference_date.year, reference_date.month)}
    for t in transactions:
        period = transaction_period(t.date)
        if period:
            months.add(month_key(*period))
    return sorted(months, reverse=True)


def available_years(transactions: list[Transaction], reference_date: date) -> list[int]:
    """Distinct years present in the data plus the reference year, newest first."""
    years = {reference_date.year}
    for t in transactions:
        period = transaction_period(t.date)
        if period:
            years.add(period[0])
    return sorted(years, reverse=True)
