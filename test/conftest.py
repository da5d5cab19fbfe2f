# Test type: Configuration
# Validation to be executed: Shared fixtures for all test modules
# Command: pytest test/ -v (this file is auto-loaded by pytest)

"""Shared pytest fixtures for the Expense Insights API test suite."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient

from app.main import app
from app.models.schemas import ExpenseRecord


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def client():
    """Async HTTP client bound to the FastAPI app (no real server needed)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


# ── Sample data fixtures ─────────────────────────────────────────────────

@pytest.fixture
def now():
    """Fixed reference time: midnight on 20 Oct 2024."""
    return datetime(2024, 10, 20, 0, 0, 0)


@pytest.fixture
def sample_records():
    """Five expenses over five weeks; two fall in October 2024."""
    return [
        ExpenseRecord(amount=Decimal("1200"), category="Food & Dining", expense_date=date(2024, 10, 18)),
        ExpenseRecord(amount=Decimal("800"), category="Transportation", expense_date=date(2024, 10, 2)),
        ExpenseRecord(amount=Decimal("2500"), category="Shopping", expense_date=date(2024, 9, 25)),
        ExpenseRecord(amount=Decimal("1500"), category="Food & Dining", expense_date=date(2024, 9, 20)),
        ExpenseRecord(amount=Decimal("1000"), category="Bills & Utilities", expense_date=date(2024, 9, 15)),
    ]


@pytest.fixture
def sample_expenses_json():
    """Same expenses as ``sample_records`` in request-body form."""
    return [
        {"amount": 1200, "category": "Food & Dining", "expense_date": "2024-10-18"},
        {"amount": 800, "category": "Transportation", "expense_date": "2024-10-02"},
        {"amount": 2500, "category": "Shopping", "expense_date": "2024-09-25"},
        {"amount": 1500, "category": "Food & Dining", "expense_date": "2024-09-20"},
        {"amount": 1000, "category": "Bills & Utilities", "expense_date": "2024-09-15"},
    ]
