"""Rule-based spending insights.

Processing Order:
    Step 1  Empty input → onboarding prompt only
    Step 2  Total spend + transaction count            (always)
    Step 3  Spend in the calendar month of ``now``     (only if any)
    Step 4  Top category, warning if share > 40 %      (only if total > 0)
    Step 5  Weekly average since the oldest record     (always)
    Step 6  Savings tip keyed on the monthly spend     (only if monthly > 0)

Facts are computed first, then rendered to sentences in the order above.

Top category tie-break: the category first seen in input order wins.
Oldest record: found by scanning dates; input order is never assumed.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Dict, List, NamedTuple, Sequence, Union

from app.config import settings
from app.models.schemas import ExpenseRecord
from app.utils.helpers import format_amount, format_percentage, require_non_negative

logger = logging.getLogger(__name__)

ONBOARDING_PROMPT = (
    "Start tracking your expenses to get personalized financial insights! "
    "Add your first expense to see tailored recommendations."
)

_MICROSECONDS_PER_DAY = 86_400_000_000


# ── Facts ─────────────────────────────────────────────────────────────────

class TotalSpend(NamedTuple):
    total: Decimal
    count: int


class MonthlySpend(NamedTuple):
    total: Decimal
    count: int


class TopCategory(NamedTuple):
    category: str
    total: Decimal
    percentage: Decimal
    dominant: bool


class WeeklyAverage(NamedTuple):
    amount: Decimal
    days_tracked: Decimal


class SavingsTip(NamedTuple):
    overspending: bool


InsightFact = Union[TotalSpend, MonthlySpend, TopCategory, WeeklyAverage, SavingsTip]


# ── Aggregation helpers ───────────────────────────────────────────────────

def validated_amounts(records: Sequence[ExpenseRecord]) -> List[Decimal]:
    """Return every record's amount, rejecting negative or non-finite ones."""
    return [require_non_negative(r.amount, "Expense amount") for r in records]


def in_same_month(day: date, now: datetime) -> bool:
    return day.year == now.year and day.month == now.month


def category_totals(records: Sequence[ExpenseRecord]) -> Dict[str, Decimal]:
    """Sum amounts per category, keyed in first-seen order."""
    totals: Dict[str, Decimal] = {}
    for rec in records:
        totals[rec.category] = totals.get(rec.category, Decimal(0)) + rec.amount
    return totals


def top_category(totals: Dict[str, Decimal]) -> tuple[str, Decimal] | None:
    """Category with the strictly highest total; ties keep the earlier one."""
    best: tuple[str, Decimal] | None = None
    for name, total in totals.items():
        if best is None or total > best[1]:
            best = (name, total)
    return best


def days_tracked(records: Sequence[ExpenseRecord], now: datetime) -> Decimal:
    """Exact fractional days between the oldest record (at midnight) and *now*, min 1."""
    oldest = min(r.expense_date for r in records)
    start = datetime.combine(oldest, time.min, tzinfo=now.tzinfo)
    delta = now - start
    micros = delta // timedelta(microseconds=1)
    return max(Decimal(1), Decimal(micros) / _MICROSECONDS_PER_DAY)


# ── Fact computation ──────────────────────────────────────────────────────

def compute_facts(records: Sequence[ExpenseRecord], now: datetime) -> List[InsightFact]:
    """Derive the ordered list of facts for a non-empty record list."""
    amounts = validated_amounts(records)
    facts: List[InsightFact] = []

    total = sum(amounts, Decimal(0))
    facts.append(TotalSpend(total=total, count=len(records)))

    this_month = [r for r in records if in_same_month(r.expense_date, now)]
    monthly = sum((r.amount for r in this_month), Decimal(0))
    if this_month:
        facts.append(MonthlySpend(total=monthly, count=len(this_month)))

    best = top_category(category_totals(records))
    if best is not None and total > 0:
        name, cat_total = best
        percentage = cat_total / total * 100
        facts.append(
            TopCategory(
                category=name,
                total=cat_total,
                percentage=percentage,
                dominant=percentage > settings.CATEGORY_DOMINANCE_PERCENT,
            )
        )

    days = days_tracked(records, now)
    facts.append(
        WeeklyAverage(amount=total / days * settings.DAYS_PER_WEEK, days_tracked=days)
    )

    if monthly > settings.MONTHLY_TIP_THRESHOLD:
        facts.append(SavingsTip(overspending=True))
    elif monthly > 0:
        facts.append(SavingsTip(overspending=False))

    return facts


# ── Formatting ────────────────────────────────────────────────────────────

def _plural(count: int, word: str) -> str:
    return f"{count} {word}" if count == 1 else f"{count} {word}s"


def render_fact(fact: InsightFact) -> str:
    """Turn one fact into its sentence."""
    if isinstance(fact, TotalSpend):
        return (
            f"You've tracked {format_amount(fact.total)} in total expenses "
            f"across {_plural(fact.count, 'transaction')}."
        )
    if isinstance(fact, MonthlySpend):
        return (
            f"This month, you've spent {format_amount(fact.total)} "
            f"on {_plural(fact.count, 'transaction')}."
        )
    if isinstance(fact, TopCategory):
        if fact.dominant:
            return (
                f"Warning: {format_percentage(fact.percentage)}% of your spending "
                f'is on "{fact.category}". Consider setting a budget for this '
                f"category to save more."
            )
        return (
            f'Your top spending category is "{fact.category}" '
            f"at {format_amount(fact.total)}."
        )
    if isinstance(fact, WeeklyAverage):
        return f"Your average weekly spending is approximately {format_amount(fact.amount)}."
    if isinstance(fact, SavingsTip):
        if fact.overspending:
            return "Tip: Try to reduce discretionary spending by 10% to increase your savings!"
        return "You're doing great! Keep tracking your expenses to maintain financial awareness."
    raise TypeError(f"Unknown insight fact: {fact!r}")


def render_facts(facts: Sequence[InsightFact]) -> List[str]:
    return [render_fact(f) for f in facts]


# ── Public API ────────────────────────────────────────────────────────────

def generate_insights(records: Sequence[ExpenseRecord], now: datetime) -> List[str]:
    """Produce the ordered insight sentences for one user's expenses.

    ``now`` is supplied by the caller so the result is deterministic.
    Raises ``InvalidInputError`` if any amount is negative or non-finite.
    """
    if not records:
        return [ONBOARDING_PROMPT]

    facts = compute_facts(records, now)
    logger.debug("Computed %d insight facts from %d records", len(facts), len(records))
    return render_facts(facts)


def join_insights(sentences: Sequence[str]) -> str:
    """Join sentences into one narrative string."""
    return " ".join(sentences)
