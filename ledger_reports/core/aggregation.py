"""Category aggregation over a slice of transactions.

Pure functions: callers filter to one period (and usually one kind)
first, these just fold and order.
"""

from __future__ import annotations

from collections.abc import Iterable

from ledger_reports.models.results import CategorySummary
from ledger_reports.models.schemas import Transaction


def aggregate_by_category(transactions: Iterable[Transaction]) -> list[CategorySummary]:
    """Group transactions by category into per-category totals and counts.

    Output is sorted by descending amount. ``sorted`` is stable, so equal
    amounts keep the order in which their category was first seen.
    """
    grouped: dict[str, CategorySummary] = {}
    for t in transactions:
        summary = grouped.get(t.category)
        if summary is None:
            summary = grouped[t.category] = CategorySummary(category=t.category)
        summary.amount += t.amount
        summary.count += 1

    return sorted(
        (CategorySummary(s.category, s.amount, s.count) for s in grouped.values()),
        key=lambda s: s.amount,
        reverse=True,
    )


def top_category(summaries: list[CategorySummary]) -> CategorySummary | None:
    """Return the max-amount summary, the first one on ties, or ``None``."""
    top: CategorySummary | None = None
    for s in summaries:
        if top is None or s.amount > top.amount:
            top = s
    return top


def total_amount(transactions: Iterable[Transaction]) -> float:
    return sum((t.amount for t in transactions), 0.0)


def split_by_kind(
    transactions: Iterable[Transaction],
) -> tuple[list[Transaction], list[Transaction]]:
    """Split into ``(income, expense)`` lists, preserving order."""
    income: list[Transaction] = []
    expense: list[Transaction] = []
    for t in transactions:
        if t.is_income:
            income.append(t)
        else:
            expense.append(t)
    return income, expense
