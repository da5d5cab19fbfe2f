"""Income-tax estimate under a fixed progressive slab schedule.

Tax Slabs:
    0 – 3,00,000             → 0 %
    3,00,001 – 7,00,000      → 5 %  on amount above 3 L
    7,00,001 – 10,00,000     → 10 % on amount above 7 L   (base 20,000)
    10,00,001 – 12,00,000    → 15 % on amount above 10 L  (base 50,000)
    12,00,001 – 15,00,000    → 20 % on amount above 12 L  (base 80,000)
    Above 15,00,000          → 30 % on amount above 15 L  (base 1,40,000)

A flat 4 % cess is applied to the slab tax.  Upper bounds are inclusive:
an income exactly on a boundary stays in the lower slab.
"""

from __future__ import annotations
import logging
from decimal import Decimal
from typing import NamedTuple, Optional, Tuple
from app.config import settings
from app.models.schemas import TaxEstimate
from app.utils.helpers import Number, require_non_negative

logger = logging.getLogger(__name__)


class TaxBracket(NamedTuple):
    lower_bound: Decimal
    upper_bound: Optional[Decimal]   # None → no upper bound
    base_tax: Decimal                # tax owed at lower_bound
    marginal_rate: Decimal
    slab_label: str
    suggested_form: str


# Base tax values are fixed schedule data, not derived at runtime.
_SLABS: Tuple[TaxBracket, ...] = (
    TaxBracket(Decimal("0"),       Decimal("300000"),  Decimal("0"),      Decimal("0.00"), "0–300,000",           "Form A"),
    TaxBracket(Decimal("300000"),  Decimal("700000"),  Decimal("0"),      Decimal("0.05"), "300,001–700,000",     "Form A"),
    TaxBracket(Decimal("700000"),  Decimal("1000000"), Decimal("20000"),  Decimal("0.10"), "700,001–1,000,000",   "Form A or B"),
    TaxBracket(Decimal("1000000"), Decimal("1200000"), Decimal("50000"),  Decimal("0.15"), "1,000,001–1,200,000", "Form B"),
    TaxBracket(Decimal("1200000"), Decimal("1500000"), Decimal("80000"),  Decimal("0.20"), "1,200,001–1,500,000", "Form B"),
    TaxBracket(Decimal("1500000"), None,               Decimal("140000"), Decimal("0.30"), "Above 1,500,000",     "Form B or C"),
)


def tax_schedule() -> Tuple[TaxBracket, ...]:
    """The slab table, lowest bracket first."""
    return _SLABS


def find_bracket(annual_income: Number) -> TaxBracket:
    """Return the single bracket whose range contains *annual_income*."""
    income = require_non_negative(annual_income, "Annual income")
    for bracket in _SLABS:
        if bracket.upper_bound is None or income <= bracket.upper_bound:
            return bracket
    # The last bracket is unbounded, so the loop always returns.
    raise AssertionError("tax schedule has no unbounded top bracket")


def estimate_tax(annual_income: Number) -> TaxEstimate:
    """Compute the tax liability, slab and suggested filing form.

    Parameters
    ----------
    annual_income:
        Annual income in base currency units.  Must be finite and >= 0.

    Returns
    -------
    TaxEstimate
        Exact ``Decimal`` figures; rounding is left to the caller.

    Raises
    ------
    InvalidInputError
        For negative or non-finite income.
    """
    income = require_non_negative(annual_income, "Annual income")
    bracket = find_bracket(income)

    slab_tax = bracket.base_tax + (income - bracket.lower_bound) * bracket.marginal_rate
    cess = slab_tax * settings.CESS_RATE
    tax = slab_tax * (1 + settings.CESS_RATE)

    logger.debug("Income %s falls in slab %s; tax %s", income, bracket.slab_label, tax)

    return TaxEstimate(
        annualIncome=income,
        tax=tax,
        taxBeforeCess=slab_tax,
        cess=cess,
        marginalRate=bracket.marginal_rate,
        slabLabel=bracket.slab_label,
        suggestedForm=bracket.suggested_form,
        takeHome=income - tax,
    )
