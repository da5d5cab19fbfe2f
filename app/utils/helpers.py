"""Shared utility functions — date parsing, decimal conversion, rounding, formatting."""

from __future__ import annotations

from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Union

from app.errors import InvalidInputError

# ── Supported datetime formats (most specific first) ─────────────────────
_DT_FORMATS = [
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M",
]

_WHOLE = Decimal("1")

Number = Union[int, float, str, Decimal]


def parse_datetime(value: str) -> datetime:
    """Parse a datetime string using the accepted format variants.

    Raises ``ValueError`` if the string cannot be parsed.
    """
    value = value.strip()
    for fmt in _DT_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    raise ValueError(
        f"Invalid datetime format: '{value}'. "
        f"Expected YYYY-MM-DD HH:mm:ss or YYYY-MM-DD HH:mm."
    )


def parse_date(value: str) -> date:
    """Parse a calendar date; a trailing time-of-day is accepted and dropped."""
    value = value.strip()
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        pass
    try:
        return parse_datetime(value).date()
    except ValueError:
        raise ValueError(
            f"Invalid date format: '{value}'. "
            f"Expected YYYY-MM-DD or YYYY-MM-DD HH:mm:ss."
        ) from None


# ── Money helpers ─────────────────────────────────────────────────────────

def to_decimal(value: Number) -> Decimal:
    """Convert *value* to ``Decimal`` without binary float drift.

    Floats go through ``str`` so ``0.1`` becomes ``Decimal("0.1")``.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise InvalidInputError(f"Expected a number, got {value!r}")
    try:
        if isinstance(value, float):
            return Decimal(repr(value))
        return Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidInputError(f"Expected a number, got {value!r}") from None


def require_non_negative(value: Number, label: str = "Amount") -> Decimal:
    """Return *value* as a Decimal, rejecting negative and non-finite input."""
    amount = to_decimal(value)
    if not amount.is_finite():
        raise InvalidInputError(f"{label} must be a finite number, got {amount}")
    if amount < 0:
        raise InvalidInputError(f"{label} must be non-negative, got {amount}")
    return amount


def round_currency(value: Decimal, decimals: int = 2) -> Decimal:
    """Round half-up to *decimals* places.

    Precision is widened so very large values can still be quantized.
    """
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + decimals + 2)
        return value.quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)


def format_amount(value: Decimal) -> str:
    """Render a money value for a sentence: ``7000`` or ``1234.50``.

    No currency symbol or grouping; those belong to the client.
    """
    rounded = round_currency(value)
    if rounded == rounded.to_integral_value():
        return f"{rounded:.0f}"
    return f"{rounded:.2f}"


def format_percentage(value: Decimal) -> str:
    """Whole-number percentage, rounded half-up."""
    return f"{value.quantize(_WHOLE, rounding=ROUND_HALF_UP):.0f}"
