"""Markdown formatters for MCP tool responses.

Pure functions that take report objects and return human-readable Markdown
strings. This is the only place amounts get rounded.
"""

from __future__ import annotations

from ledger_reports.core.budgets import BUDGET_ALERT_THRESHOLD
from ledger_reports.core.periods import month_label
from ledger_reports.models.results import (
    BudgetProgress,
    CategorySummary,
    Change,
    ComparisonReport,
    MonthlyReport,
    OperationResult,
    YearlyReport,
)
from ledger_reports.models.schemas import Budget, Transaction


def format_currency(amount: float) -> str:
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def format_percentage(value: float) -> str:
    return f"{'+' if value >= 0 else ''}{value:.1f}%"


def _category_table(title: str, summaries: list[CategorySummary], total: float) -> list[str]:
    lines = [f"\n### {title}"]
    if not summaries:
        lines.append("_None_")
        return lines
    lines.append("| Category | Amount | Count | Share |")
    lines.append("|---|---|---|---|")
    for s in summaries:
        share = s.amount / total * 100 if total else 0.0
        lines.append(f"| {s.category} | {format_currency(s.amount)} | {s.count} | {share:.1f}% |")
    return lines


# --- Reports ---


def format_monthly_report(report: MonthlyReport) -> str:
    if report.transaction_count == 0:
        return f"No transactions recorded for {month_label(report.month)}."

    lines = [
        f"## Monthly Report: {month_label(report.month)}\n",
        f"- **Income:** {format_currency(report.total_income)}",
        f"- **Expenses:** {format_currency(report.total_expense)}",
        f"- **Net:** {format_currency(report.net_amount)}",
        f"- **Transactions:** {report.transaction_count} "
        f"(avg {format_currency(report.average_transaction_amount)})",
        f"- **Daily average:** {format_currency(report.daily_averages.income)} in | "
        f"{format_currency(report.daily_averages.expense)} out",
    ]
    if report.top_income_category:
        lines.append(f"- **Top income:** {report.top_income_category.category} "
                     f"({format_currency(report.top_income_category.amount)})")
    if report.top_expense_category:
        lines.append(f"- **Top expense:** {report.top_expense_category.category} "
                     f"({format_currency(report.top_expense_category.amount)})")

    lines += _category_table("Income by Category", report.income_by_category, report.total_income)
    lines += _category_table("Expenses by Category", report.expense_by_category, report.total_expense)
    return "\n".join(lines)


def format_yearly_report(report: YearlyReport) -> str:
    lines = [
        f"## Yearly Report: {report.year}\n",
        f"- **Income:** {format_currency(report.total_income)} "
        f"({format_percentage(report.trends.income_growth)} vs {report.year - 1})",
        f"- **Expenses:** {format_currency(report.total_expense)} "
        f"({format_percentage(report.trends.expense_growth)} vs {report.year - 1})",
        f"- **Net:** {format_currency(report.net_amount)}",
    ]
    if report.best_month and report.worst_month:
        lines.append(f"- **Best month:** {month_label(report.best_month.month)} "
                     f"({format_currency(report.best_month.net)})")
        lines.append(f"- **Worst month:** {month_label(report.worst_month.month)} "
                     f"({format_currency(report.worst_month.net)})")

    lines.append("\n### By Month")
    lines.append("| Month | Income | Expenses | Net |")
    lines.append("|---|---|---|---|")
    for m in report.monthly_data:
        lines.append(
            f"| {m.month} | {format_currency(m.income)} | "
            f"{format_currency(m.expense)} | {format_currency(m.net)} |"
        )

    lines += _category_table("Income by Category", report.income_by_category, report.total_income)
    lines += _category_table("Expenses by Category", report.expense_by_category, report.total_expense)
    return "\n".join(lines)


def _change_line(label: str, current: float, previous: float, change: Change) -> str:
    return (
        f"| {label} | {format_currency(current)} | {format_currency(previous)} | "
        f"{format_currency(change.amount)} | {format_percentage(change.percentage)} |"
    )


def format_comparison_report(report: ComparisonReport) -> str:
    cur, prev = report.current, report.previous
    lines = [
        f"## {month_label(cur.month)} vs {month_label(prev.month)}\n",
        f"| | {cur.month} | {prev.month} | Change | % |",
        "|---|---|---|---|---|",
        _change_line("Income", cur.total_income, prev.total_income, report.changes.income),
        _change_line("Expenses", cur.total_expense, prev.total_expense, report.changes.expense),
        _change_line("Net", cur.net_amount, prev.net_amount, report.changes.net),
    ]
    if prev.transaction_count == 0:
        lines.append(f"\n_No transactions in {month_label(prev.month)}; percentages shown as 0._")
    return "\n".join(lines)


# --- Budgets ---


def _progress_line(p: BudgetProgress) -> str:
    if p.is_over_budget:
        status = "!!"
    elif p.percentage >= BUDGET_ALERT_THRESHOLD:
        status = "!"
    else:
        status = "OK"
    return (
        f"  [{status}] {p.budget.category}: "
        f"{format_currency(p.spent)} of {format_currency(p.budget.amount)} "
        f"({p.percentage:.0f}%) | {format_currency(p.remaining)} left"
    )


def format_budget_progress(progress: list[BudgetProgress], month: str) -> str:
    if not progress:
        return f"No budgets set for {month_label(month)}."

    lines = [f"## Budgets: {month_label(month)}\n"]
    for p in sorted(progress, key=lambda x: x.budget.category):
        lines.append(_progress_line(p))

    total_budget = sum(p.budget.amount for p in progress)
    total_spent = sum(p.spent for p in progress)
    lines.append("\n---")
    lines.append(
        f"**Totals:** {format_currency(total_budget)} budgeted | "
        f"{format_currency(total_spent)} spent | "
        f"{format_currency(total_budget - total_spent)} remaining"
    )
    return "\n".join(lines)


def format_budget_alerts(alerts: list[BudgetProgress], month: str) -> str:
    if not alerts:
        return f"All budgets for {month_label(month)} are under {BUDGET_ALERT_THRESHOLD:.0f}%."

    lines = [f"## Budget Alerts: {month_label(month)}\n"]
    for p in sorted(alerts, key=lambda x: x.spent / x.budget.amount, reverse=True):
        if p.is_over_budget:
            lines.append(
                f"- **{p.budget.category}** is over budget by "
                f"{format_currency(p.spent - p.budget.amount)}"
            )
        else:
            lines.append(
                f"- **{p.budget.category}** has used {p.percentage:.0f}% "
                f"({format_currency(p.remaining)} left)"
            )
    return "\n".join(lines)


def format_budget_set(result: OperationResult, budget: Budget | None) -> str:
    if not result.success:
        return f"Could not set budget: {result.error}"
    if budget is None:
        return "Budget saved."
    return (
        f"Budget saved: **{budget.category}** "
        f"{format_currency(budget.amount)} for {month_label(budget.month)}."
    )


def format_budget_deleted(result: OperationResult, category: str, month: str) -> str:
    if not result.success:
        return f"Could not delete budget: {result.error}"
    return f"Removed the **{category}** budget for {month_label(month)}."


# --- Transactions ---


def format_transactions(transactions: list[Transaction], limit: int) -> str:
    shown = sorted(transactions, key=lambda t: t.date, reverse=True)[:limit]
    if not shown:
        return "No transactions found matching your criteria."

    lines = [f"## Transactions ({len(shown)} shown)\n"]
    for t in shown:
        direction = "IN" if t.is_income else "OUT"
        lines.append(
            f"- {t.date} [{direction}] **{format_currency(t.amount)}** "
            f"| {t.category} "
            f"| `{t.id}`"
        )
        if t.description:
            lines.append(f"  _{t.description}_")
    return "\n".join(lines)


def format_transaction_created(transaction: Transaction) -> str:
    lines = [
        "Transaction added!\n",
        f"- **Amount:** {format_currency(transaction.amount)} {transaction.kind.value}",
        f"- **Category:** {transaction.category}",
        f"- **Date:** {transaction.date}",
    ]
    if transaction.description:
        lines.append(f"- **Description:** {transaction.description}")
    return "\n".join(lines)
