# Test type: Unit Test
# Validation to be executed: Validates progressive income-tax slab calculations,
#   boundary inclusivity, 4% cess, slab/form labelling, and input rejection.
# Command: pytest test/test_unit_tax.py -v

"""Unit tests for app.services.tax_service module."""

from decimal import Decimal

import pytest

from app.errors import InvalidInputError
from app.models.schemas import TaxRequest
from app.services.tax_service import estimate_tax, find_bracket, tax_schedule
from app.utils.helpers import round_currency

class TestEstimateTax:
    """Validate slab tax plus 4% cess."""

    def test_zero_income(self):
        est = estimate_tax(0)
        assert est.tax == 0
        assert est.slabLabel == "0–300,000"
        assert est.suggestedForm == "Form A"

    def test_at_3L_no_tax(self):
        """₹3,00,000 is the inclusive upper edge of the nil slab."""
        est = estimate_tax(300_000)
        assert est.tax == 0
        assert est.taxBeforeCess == 0
        assert est.slabLabel == "0–300,000"

    def test_3L_plus_1(self):
        """₹3,00,001 → 5% of ₹1 = 0.05, × 1.04 = 0.052."""
        est = estimate_tax(300_001)
        assert est.taxBeforeCess == Decimal("0.05")
        assert est.tax == Decimal("0.052")
        assert est.slabLabel == "300,001–700,000"
        assert est.suggestedForm == "Form A"

    def test_at_7L(self):
        """₹7L = 5% of ₹4L = ₹20,000, × 1.04 = ₹20,800."""
        est = estimate_tax(700_000)
        assert est.tax == Decimal("20800")
        assert est.slabLabel == "300,001–700,000"

    def test_at_10L(self):
        """₹10L = ₹20,000 + 10% of ₹3L = ₹50,000, × 1.04 = ₹52,000."""
        est = estimate_tax(1_000_000)
        assert est.tax == Decimal("52000")
        assert est.slabLabel == "700,001–1,000,000"
        assert est.suggestedForm == "Form A or B"

    def test_in_15_percent_slab(self):
        """₹11L = ₹50,000 + 15% of ₹1L = ₹65,000, × 1.04 = ₹67,600."""
        est = estimate_tax(1_100_000)
        assert est.tax == Decimal("67600")
        assert est.slabLabel == "1,000,001–1,200,000"
        assert est.suggestedForm == "Form B"

    def test_at_15L(self):
        """Upper edge of the 20% slab: (80,000 + 3,00,000 × 0.20) × 1.04."""
        est = estimate_tax(1_500_000)
        assert est.tax == (Decimal("80000") + Decimal("300000") * Decimal("0.20")) * Decimal("1.04")
        assert est.tax == Decimal("145600")
        assert est.slabLabel == "1,200,001–1,500,000"

    def test_15L_plus_1(self):
        """₹15,00,001 enters the unbounded 30% slab with base ₹1,40,000."""
        est = estimate_tax(1_500_001)
        assert est.taxBeforeCess == Decimal("140000.30")
        assert est.tax == Decimal("145600.312")
        assert est.slabLabel == "Above 1,500,000"
        assert est.suggestedForm == "Form B or C"
        assert est.marginalRate == Decimal("0.30")

    def test_at_20L(self):
        """₹20L = ₹1,40,000 + 30% of ₹5L = ₹2,90,000, × 1.04 = ₹3,01,600."""
        assert estimate_tax(2_000_000).tax == Decimal("301600")

    def test_cess_and_take_home(self):
        est = estimate_tax(1_000_000)
        assert est.cess == Decimal("2000")
        assert est.taxBeforeCess + est.cess == est.tax
        assert est.takeHome == Decimal("948000")

    def test_fractional_income(self):
        est = estimate_tax(300_000.5)
        assert est.taxBeforeCess == Decimal("0.025")

    def test_idempotent(self):
        assert estimate_tax(1_234_567) == estimate_tax(1_234_567)


class TestInvalidIncome:

    def test_negative_income(self):
        with pytest.raises(InvalidInputError, match="non-negative"):
            estimate_tax(-1)

    def test_nan_income(self):
        with pytest.raises(InvalidInputError, match="finite"):
            estimate_tax(float("nan"))

    def test_infinite_income(self):
        with pytest.raises(InvalidInputError):
            estimate_tax(float("inf"))

    def test_non_numeric_income(self):
        with pytest.raises(InvalidInputError):
            estimate_tax("lots")


class TestSchedule:

    def test_six_contiguous_slabs(self):
        slabs = tax_schedule()
        assert len(slabs) == 6
        for lower, upper in zip(slabs, slabs[1:]):
            assert lower.upper_bound == upper.lower_bound
        assert slabs[-1].upper_bound is None

    def test_base_tax_constants(self):
        assert [b.base_tax for b in tax_schedule()] == [0, 0, 20000, 50000, 80000, 140000]

    def test_base_tax_matches_rates(self):
        """Each base equals the previous base plus the full previous slab."""
        slabs = tax_schedule()
        for prev, cur in zip(slabs, slabs[1:]):
            expected = prev.base_tax + (prev.upper_bound - prev.lower_bound) * prev.marginal_rate
            assert cur.base_tax == expected

    def test_find_bracket_boundaries(self):
        assert find_bracket(1_200_000).marginal_rate == Decimal("0.15")
        assert find_bracket(1_200_001).marginal_rate == Decimal("0.20")


class TestLargeAndPreciseIncome:

    def test_very_large_income(self):
        est = estimate_tax(Decimal("1E+27"))
        assert est.slabLabel == "Above 1,500,000"
        assert round_currency(est.tax) > 0
        assert round_currency(est.takeHome) > 0

    def test_request_keeps_exact_income(self):
        """Incomes above 2**53 arrive without binary float rounding."""
        body = TaxRequest(annualIncome="9007199254740993.27")
        assert body.annualIncome == Decimal("9007199254740993.27")
        est = estimate_tax(body.annualIncome)
        assert est.taxBeforeCess == Decimal("140000") + (
            Decimal("9007199254740993.27") - Decimal("1500000")
        ) * Decimal("0.30")

    def test_request_non_finite_reaches_service(self):
        body = TaxRequest(annualIncome=float("nan"))
        with pytest.raises(InvalidInputError, match="finite"):
            estimate_tax(body.annualIncome)
