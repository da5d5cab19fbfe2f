"""Dashboard spending summary: totals, monthly window, category breakdown, recent expenses."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Sequence

from app.config import settings
from app.models.schemas import CategoryTotal, ExpenseRecord, ExpenseSummary, RecentExpense
from app.services.insight_service import category_totals, in_same_month, validated_amounts


def _ordered_breakdown(records: Sequence[ExpenseRecord]) -> List[CategoryTotal]:
    """Known categories first in their fixed order, then the rest as first seen."""
    totals = category_totals(records)
    names = [c for c in settings.KNOWN_CATEGORIES if c in totals]
    names += [c for c in totals if c not in settings.KNOWN_CATEGORIES]
    return [CategoryTotal(name=n, value=totals[n]) for n in names if totals[n] > 0]


def _recent(records: Sequence[ExpenseRecord]) -> List[RecentExpense]:
    # sorted() is stable, so same-day records keep their input order.
    newest_first = sorted(records, key=lambda r: r.expense_date, reverse=True)
    picked = newest_first[: settings.RECENT_EXPENSES_LIMIT]
    return [
        RecentExpense(date=r.expense_date.isoformat(), amount=r.amount)
        for r in reversed(picked)
    ]


def summarize_expenses(records: Sequence[ExpenseRecord], now: datetime) -> ExpenseSummary:
    """Aggregate one user's expenses for the dashboard.

    Raises ``InvalidInputError`` if any amount is negative or non-finite.
    """
    amounts = validated_amounts(records)
    this_month = [r for r in records if in_same_month(r.expense_date, now)]
    breakdown = _ordered_breakdown(records)

    return ExpenseSummary(
        totalExpenses=sum(amounts, Decimal(0)),
        transactionCount=len(records),
        monthlyTotal=sum((r.amount for r in this_month), Decimal(0)),
        monthlyTransactionCount=len(this_month),
        categoryBreakdown=breakdown,
        activeCategories=len(breakdown),
        recentExpenses=_recent(records),
    )
