"""Pydantic request / response schemas and service value models.

Naming:
  - ExpenseRecord → one dated, categorised expense (immutable input)
  - TaxEstimate / ExpenseSummary → exact ``Decimal`` service results
  - *Response → JSON payloads, rounded to 2 dp at the boundary
"""

from __future__ import annotations
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.utils.helpers import parse_date

class ExpenseRecord(BaseModel):
    """A single expense as returned by the data-access layer."""
    model_config = ConfigDict(frozen=True)

    amount: Decimal = Field(
        ...,
        allow_inf_nan=True,
        description="Expense amount in base currency units (validated by the services)",
    )
    category: str = Field(..., description="Spending category label (open set)")
    expense_date: date = Field(..., description="Calendar date (YYYY-MM-DD)")
    description: Optional[str] = Field(None, description="Free-text note")

    @field_validator("expense_date", mode="before")
    @classmethod
    def _coerce_date(cls, value):
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, str):
            return parse_date(value)
        return value

# ── 1. Insights  (/insights) ─────────────────────────────────────────────

class InsightRequest(BaseModel):
    expenses: List[ExpenseRecord] = Field(default_factory=list)
    now: Optional[str] = Field(
        None,
        description="Reference time (YYYY-MM-DD HH:mm:ss); defaults to server time",
    )

class InsightResponse(BaseModel):
    insight: str = Field(..., description="All insight sentences joined by spaces")
    insights: List[str] = Field(..., description="Ordered insight sentences")

# ── 2. Spending summary  (/expenses:summary) ─────────────────────────────

class CategoryTotal(BaseModel):
    name: str
    value: Decimal

class RecentExpense(BaseModel):
    date: str = Field(..., description="YYYY-MM-DD")
    amount: Decimal

class ExpenseSummary(BaseModel):
    """Dashboard aggregates computed from one user's expenses."""
    totalExpenses: Decimal
    transactionCount: int
    monthlyTotal: Decimal
    monthlyTransactionCount: int
    categoryBreakdown: List[CategoryTotal]
    activeCategories: int
    recentExpenses: List[RecentExpense]

class CategoryTotalOut(BaseModel):
    name: str
    value: float

class RecentExpenseOut(BaseModel):
    date: str
    amount: float

class SummaryResponse(BaseModel):
    totalExpenses: float = Field(..., description="Sum of all expense amounts")
    transactionCount: int
    monthlyTotal: float = Field(..., description="Sum for the current calendar month")
    monthlyTransactionCount: int
    categoryBreakdown: List[CategoryTotalOut]
    activeCategories: int = Field(..., description="Categories with non-zero spend")
    recentExpenses: List[RecentExpenseOut] = Field(
        ..., description="Most recent expenses, oldest first"
    )

# ── 3. Tax estimate  (/tax:estimate, /tax/slabs) ─────────────────────────

class TaxEstimate(BaseModel):
    """Exact result of the slab calculation."""
    model_config = ConfigDict(frozen=True)

    annualIncome: Decimal
    tax: Decimal = Field(..., description="Liability including the 4% cess")
    taxBeforeCess: Decimal
    cess: Decimal
    marginalRate: Decimal
    slabLabel: str
    suggestedForm: str
    takeHome: Decimal = Field(..., description="annualIncome − tax")

class TaxRequest(BaseModel):
    annualIncome: Decimal = Field(
        ...,
        allow_inf_nan=True,
        description="Annual income in base currency units (validated by the service)",
    )

class TaxResponse(BaseModel):
    tax: float
    slabLabel: str
    suggestedForm: str
    taxBeforeCess: float
    cess: float
    marginalRate: float
    takeHome: float

class TaxSlabOut(BaseModel):
    lowerBound: float
    upperBound: Optional[float] = Field(None, description="null for the top slab")
    baseTax: float
    marginalRate: float
    slabLabel: str
    suggestedForm: str

class TaxScheduleResponse(BaseModel):
    cessRate: float
    slabs: List[TaxSlabOut]
