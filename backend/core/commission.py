"""
Commission math for settlements.

Splits a gross booking amount into the platform commission and the
maid's earnings. Money is handled as Decimal with half-up rounding to
cents.

Commission and maid earnings are rounded independently, so their sum
may drift from the gross amount by at most one cent when the amount
itself carries sub-cent precision. Stored payments depend on this, keep it.

Dependencies: decimal, math (stdlib)
System role: Pure settlement arithmetic
"""

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from backend.core.exceptions import ValidationError

CENT = Decimal("0.01")
ZERO = Decimal("0")
HUNDRED = Decimal("100")
DEFAULT_COMMISSION_RATE = Decimal("15")

# Column bounds: payments.amount is Numeric(12, 2), jobs.hourly_rate Numeric(10, 2)
MAX_AMOUNT = Decimal("9999999999.99")
MAX_HOURLY_RATE = Decimal("10000.00")
MAX_DURATION_HOURS = 168.0

Number = Decimal | float | int | str


@dataclass(frozen=True)
class PaymentBreakdown:
    """Result of splitting a gross amount."""

    amount: Decimal
    commission: Decimal
    maid_earnings: Decimal
    commission_rate: Decimal


def to_decimal(value: Number, field: str = "amount") -> Decimal:
    """
    Convert a number to Decimal without binary float artifacts.

    Raises:
        ValidationError: If the value is not a finite number
    """
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number", field=field)
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f"{field} must be a number", field=field) from None
    if not result.is_finite():
        raise ValidationError(f"{field} must be a finite number", field=field)
    return result


def round_money(value: Number, field: str = "amount") -> Decimal:
    """Round to cents, half-up."""
    try:
        return to_decimal(value, field).quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError(f"{field} is too large", field=field) from None


def check_hours(value: float | int, field: str) -> float:
    """
    Validate a duration in hours.

    Returns:
        float: The duration, when finite and in (0, MAX_DURATION_HOURS]

    Raises:
        ValidationError: Not a number, not finite, not positive or too long
    """
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number", field=field)
    try:
        hours = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be a number", field=field) from None
    if not math.isfinite(hours):
        raise ValidationError(f"{field} must be a finite number", field=field)
    if hours <= 0:
        raise ValidationError(f"{field} must be positive", field=field)
    if hours > MAX_DURATION_HOURS:
        raise ValidationError(
            f"{field} cannot exceed {MAX_DURATION_HOURS:g} hours", field=field
        )
    return hours


def compute_breakdown(
    amount: Number,
    commission_rate: Number = DEFAULT_COMMISSION_RATE,
) -> PaymentBreakdown:
    """
    Split a gross amount into commission and maid earnings.

    Args:
        amount: Gross amount paid by the homeowner (>= 0)
        commission_rate: Platform percentage in [0, 100]

    Returns:
        PaymentBreakdown: commission = round(amount * rate / 100, 2),
        maid_earnings = round(amount - commission, 2)

    Raises:
        ValidationError: If either value is not a finite number, the amount is
            negative or too large, or the rate is out of range
    """
    gross = to_decimal(amount, "amount")
    rate = to_decimal(commission_rate, "commission_rate")
    if gross < ZERO:
        raise ValidationError("Amount must be non-negative", field="amount")
    if gross > MAX_AMOUNT:
        raise ValidationError("Amount exceeds the largest supported payment", field="amount")
    if rate < ZERO or rate > HUNDRED:
        raise ValidationError(
            "Commission rate must be between 0 and 100", field="commission_rate"
        )

    commission = round_money(gross * rate / HUNDRED)
    # a sub-cent amount at 100% would otherwise round earnings to -0.01
    maid_earnings = max(round_money(gross - commission), ZERO)
    return PaymentBreakdown(
        amount=gross,
        commission=commission,
        maid_earnings=maid_earnings,
        commission_rate=rate,
    )


def billable_hours(
    actual_duration: float | None,
    estimated_duration: float | None,
    fallback: float = 4.0,
) -> float:
    """Pick the duration to bill: actual, then estimated, then the fallback."""
    return actual_duration or estimated_duration or fallback


def billable_amount(hourly_rate: Number, hours: Number) -> Decimal:
    """
    Gross amount for a booking, rounded to cents.

    Raises:
        ValidationError: Non-finite input, or a product above MAX_AMOUNT
    """
    gross = to_decimal(hourly_rate, "hourly_rate") * to_decimal(hours, "duration")
    if abs(gross) > MAX_AMOUNT:
        raise ValidationError("Amount exceeds the largest supported payment", field="amount")
    return round_money(gross)
