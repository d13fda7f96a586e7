"""Installment pricing: compound-interest parcels and repayment schedules"""

import math
from datetime import date, timedelta
from typing import List

from applehub_checkout.domain.exceptions import InvalidInstallmentError
from applehub_checkout.domain.models import InstallmentPlan, ScheduledInstallment

BASE_MONTHLY_RATE_PERCENT = 1.99
MIN_MONTHLY_RATE_PERCENT = 1.25
DOWN_PAYMENT_FLOOR_PERCENT = 10
RATE_REDUCTION_PER_POINT = 0.05


def _check_inputs(principal: float, count: int, monthly_rate_percent: float) -> None:
    if isinstance(count, bool) or not isinstance(count, int) or count < 1:
        raise InvalidInstallmentError(f"Installment count must be an integer >= 1, got {count!r}")
    if not math.isfinite(principal) or principal < 0:
        raise InvalidInstallmentError(f"Principal must be >= 0, got {principal!r}")
    if not math.isfinite(monthly_rate_percent) or monthly_rate_percent < 0:
        raise InvalidInstallmentError(f"Monthly rate must be >= 0, got {monthly_rate_percent!r}")


def compute_installment(principal: float, count: int, monthly_rate_percent: float) -> float:
    """
    Per-installment amount of an amortized loan (Price table).

    With i = monthly_rate_percent / 100:
        i == 0 -> principal / count
        i > 0  -> principal * (1+i)^n * i / ((1+i)^n - 1)

    The result is not rounded; round only when displaying or persisting.

    Raises:
        InvalidInstallmentError: count < 1, negative principal or negative rate
    """
    _check_inputs(principal, count, monthly_rate_percent)

    i = monthly_rate_percent / 100
    if i == 0:
        return principal / count

    factor = (1 + i) ** count
    return principal * factor * i / (factor - 1)


def interest_rate_for_down_payment(down_payment_percent: float) -> float:
    """
    Monthly rate (in percent) granted for a given down payment.

    Linear ramp: 1.99% at a 10% down payment, 0.05 points less for every
    extra 1% of down payment, never below 1.25%.

    Example:
        10% -> 1.99, 15% -> 1.74, 20% -> 1.49, 25% -> 1.25 (clamped)
    """
    reduction = (down_payment_percent - DOWN_PAYMENT_FLOOR_PERCENT) * RATE_REDUCTION_PER_POINT
    rate = max(BASE_MONTHLY_RATE_PERCENT - reduction, MIN_MONTHLY_RATE_PERCENT)
    return min(rate, BASE_MONTHLY_RATE_PERCENT)


def build_installment_plan(principal: float, count: int, monthly_rate_percent: float) -> InstallmentPlan:
    """Price a plan and derive the total paid over all installments"""
    installment_amount = compute_installment(principal, count, monthly_rate_percent)
    return InstallmentPlan(
        principal=principal,
        count=count,
        monthly_rate_percent=monthly_rate_percent,
        installment_amount=installment_amount,
        total_payable=installment_amount * count,
    )


def installment_options(
    principal: float,
    monthly_rate_percent: float,
    max_installments: int,
) -> List[InstallmentPlan]:
    """All plans from 1x up to max_installments, as offered in the checkout selector"""
    if max_installments < 1:
        raise InvalidInstallmentError(f"max_installments must be >= 1, got {max_installments!r}")

    return [
        build_installment_plan(principal, count, monthly_rate_percent)
        for count in range(1, max_installments + 1)
    ]


def generate_installment_schedule(
    installment_amount: float,
    count: int,
    start_date: date,
    interval_days: int = 30,
) -> List[ScheduledInstallment]:
    """
    Lay out due dates and persisted amounts for a priced plan.

    - First installment due on start_date, then one every interval_days (30 by default)
    - Amounts are rounded to cents; the last installment absorbs the
      rounding drift so the schedule sums to round(installment_amount * count, 2)

    Example:
        333.333 x 3 -> [333.33, 333.33, 333.34]
    """
    _check_inputs(installment_amount, count, 0)

    total = round(installment_amount * count, 2)
    base_amount = round(installment_amount, 2)
    last_amount = round(total - base_amount * (count - 1), 2)

    schedule = []
    for i in range(count):
        due_date = start_date + timedelta(days=i * interval_days)
        amount = last_amount if i == count - 1 else base_amount
        schedule.append(ScheduledInstallment(number=i + 1, due_date=due_date, amount=amount))

    return schedule
