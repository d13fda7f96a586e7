"""Credit approval and financing of the non-approved remainder"""

from abc import ABC, abstractmethod
from typing import List, Optional

from applehub_checkout.domain.exceptions import InvalidPricingInputError
from applehub_checkout.domain.installments import build_installment_plan, interest_rate_for_down_payment
from applehub_checkout.domain.models import CreditApproval, DownPaymentOption, FinancingQuote
from applehub_checkout.domain.orders import compose_financing

DEFAULT_APPROVED_PERCENTAGE = 90
DOWN_PAYMENT_OPTIONS = (10, 15, 20, 25)


class CreditPolicy(ABC):
    """Decides how much of a requested amount is approved"""

    @abstractmethod
    def approve(self, requested_amount: float) -> CreditApproval:
        raise NotImplementedError


class FixedPercentagePolicy(CreditPolicy):
    """
    Placeholder decisioning: always approve a fixed share of the request.

    Stands in for an external scoring service; it is not an underwriting model.
    """

    def __init__(self, percentage: float = DEFAULT_APPROVED_PERCENTAGE):
        if not 0 <= percentage <= 100:
            raise ValueError(f"percentage must be within [0, 100], got {percentage}")
        self.percentage = percentage

    def approve(self, requested_amount: float) -> CreditApproval:
        if requested_amount < 0:
            raise InvalidPricingInputError(f"Requested amount must be >= 0, got {requested_amount}")

        approved_amount = requested_amount * self.percentage / 100
        return CreditApproval(
            requested_amount=requested_amount,
            approved_percentage=self.percentage,
            approved_amount=approved_amount,
            remaining_amount=requested_amount - approved_amount,
        )


_default_policy = FixedPercentagePolicy()


def approve(requested_amount: float, policy: Optional[CreditPolicy] = None) -> CreditApproval:
    """Run the credit policy (fixed 90% by default) on a requested amount"""
    return (policy or _default_policy).approve(requested_amount)


def down_payment_options(approval: CreditApproval) -> List[DownPaymentOption]:
    """Down payment choices over the remaining amount, with the rate each one unlocks"""
    return [
        DownPaymentOption(
            percent=percent,
            amount=approval.remaining_amount * percent / 100,
            monthly_rate_percent=interest_rate_for_down_payment(percent),
        )
        for percent in DOWN_PAYMENT_OPTIONS
    ]


def financing_quote(approval: CreditApproval, down_payment_percent: float, count: int) -> FinancingQuote:
    """
    Price the financing of the amount left after credit approval.

    Flow:
    1. financed_base = approval.remaining_amount
    2. down_payment = financed_base * down_payment_percent / 100
    3. financed_principal = financed_base - down_payment
    4. rate from the down payment ramp, installment from the annuity formula
    5. total_payable = down_payment + installment * count
    """
    financed_base = approval.remaining_amount
    down_payment, financed_principal = compose_financing(financed_base, down_payment_percent)
    rate = interest_rate_for_down_payment(down_payment_percent)
    plan = build_installment_plan(financed_principal, count, rate)

    return FinancingQuote(
        financed_base=financed_base,
        down_payment_percent=down_payment_percent,
        down_payment=down_payment,
        financed_principal=financed_principal,
        monthly_rate_percent=rate,
        plan=plan,
        total_payable=down_payment + plan.total_payable,
    )
