"""Routers for expense endpoints:
    POST  /api/v1/insights
    POST  /api/v1/expenses:summary
"""

from __future__ import annotations
import logging
from datetime import datetime
from fastapi import APIRouter, HTTPException
from app.database import record_audit
from app.models.schemas import (
    CategoryTotalOut,
    InsightRequest,
    InsightResponse,
    RecentExpenseOut,
    SummaryResponse,
)
from app.services.insight_service import generate_insights, join_insights
from app.services.summary_service import summarize_expenses
from app.utils.helpers import parse_datetime, round_currency

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1",
    tags=["Expenses"],
)


def _resolve_now(value: str | None) -> datetime:
    """Caller-supplied reference time, or the server's local time."""
    if value is None:
        return datetime.now()
    try:
        return parse_datetime(value)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

# ── 1. Insights ──────────────────────────────────────────────────────────

@router.post(
    "/insights",
    response_model=InsightResponse,
    summary="Generate rule-based spending insights",
)
async def expense_insights(body: InsightRequest) -> InsightResponse:
    """Turn a user's expenses into an ordered list of insight sentences,
    plus the same sentences joined into a single narrative.
    """
    now = _resolve_now(body.now)
    sentences = generate_insights(body.expenses, now)

    await record_audit(
        "/insights",
        input_count=len(body.expenses),
        summary={"sentences": len(sentences)},
    )

    return InsightResponse(insight=join_insights(sentences), insights=sentences)

# ── 2. Spending summary ──────────────────────────────────────────────────

@router.post(
    "/expenses:summary",
    response_model=SummaryResponse,
    summary="Aggregate expenses for the dashboard",
)
async def expense_summary(body: InsightRequest) -> SummaryResponse:
    """Totals, current-month totals, per-category breakdown and the most
    recent expenses.
    """
    now = _resolve_now(body.now)
    summary = summarize_expenses(body.expenses, now)

    total = float(round_currency(summary.totalExpenses))
    await record_audit(
        "/expenses:summary",
        input_count=len(body.expenses),
        summary={"totalExpenses": total},
    )

    return SummaryResponse(
        totalExpenses=total,
        transactionCount=summary.transactionCount,
        monthlyTotal=float(round_currency(summary.monthlyTotal)),
        monthlyTransactionCount=summary.monthlyTransactionCount,
        categoryBreakdown=[
            CategoryTotalOut(name=c.name, value=float(round_currency(c.value)))
            for c in summary.categoryBreakdown
        ],
        activeCategories=summary.activeCategories,
        recentExpenses=[
            RecentExpenseOut(date=r.date, amount=float(round_currency(r.amount)))
            for r in summary.recentExpenses
        ],
    )
