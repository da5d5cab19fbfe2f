"""Routers for tax endpoints:
    POST  /api/v1/tax:estimate
    GET   /api/v1/tax/slabs
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from app.config import settings
from app.database import record_audit
from app.models.schemas import (
    TaxRequest,
    TaxResponse,
    TaxScheduleResponse,
    TaxSlabOut,
)
from app.services.tax_service import estimate_tax, tax_schedule
from app.utils.helpers import round_currency

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1",
    tags=["Tax"],
)


@router.post(
    "/tax:estimate",
    response_model=TaxResponse,
    summary="Estimate income tax under the fixed slab schedule",
)
async def tax_estimate(body: TaxRequest) -> TaxResponse:
    """Return tax (including the 4 % cess), slab label, suggested filing
    form and take-home income.
    """
    est = estimate_tax(body.annualIncome)

    tax = float(round_currency(est.tax))
    await record_audit(
        "/tax:estimate",
        input_count=1,
        summary={"slab": est.slabLabel, "tax": tax},
    )

    return TaxResponse(
        tax=tax,
        slabLabel=est.slabLabel,
        suggestedForm=est.suggestedForm,
        taxBeforeCess=float(round_currency(est.taxBeforeCess)),
        cess=float(round_currency(est.cess)),
        marginalRate=float(est.marginalRate),
        takeHome=float(round_currency(est.takeHome)),
    )


@router.get(
    "/tax/slabs",
    response_model=TaxScheduleResponse,
    summary="Published slab schedule",
)
async def tax_slabs() -> TaxScheduleResponse:
    return TaxScheduleResponse(
        cessRate=float(settings.CESS_RATE),
        slabs=[
            TaxSlabOut(
                lowerBound=float(b.lower_bound),
                upperBound=float(b.upper_bound) if b.upper_bound is not None else None,
                baseTax=float(b.base_tax),
                marginalRate=float(b.marginal_rate),
                slabLabel=b.slab_label,
                suggestedForm=b.suggested_form,
            )
            for b in tax_schedule()
        ],
    )
