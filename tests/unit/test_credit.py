"""Unit tests for credit approval and financing quotes"""

import pytest
from applehub_checkout.domain.credit import (
    CreditPolicy,
    FixedPercentagePolicy,
    approve,
    down_payment_options,
    financing_quote,
)
from applehub_checkout.domain.exceptions import InvalidInstallmentError, InvalidPricingInputError
from applehub_checkout.domain.installments import compute_installment
from applehub_checkout.domain.models import CreditApproval


def test_approve_default_policy_grants_ninety_percent():
    approval = approve(2000)

    assert approval.requested_amount == 2000
    assert approval.approved_percentage == 90
    assert approval.approved_amount == pytest.approx(1800)
    assert approval.remaining_amount == pytest.approx(200)


def test_approve_zero_request():
    approval = approve(0)

    assert approval.approved_amount == 0
    assert approval.remaining_amount == 0


def test_approve_rejects_negative_request():
    with pytest.raises(InvalidPricingInputError):
        approve(-10)


def test_custom_percentage_policy():
    approval = approve(1000, FixedPercentagePolicy(percentage=70))

    assert approval.approved_amount == pytest.approx(700)
    assert approval.remaining_amount == pytest.approx(300)


def test_policy_is_pluggable():
    class DeclineAll(CreditPolicy):
        def approve(self, requested_amount: float) -> CreditApproval:
            return CreditApproval(requested_amount, 0, 0, requested_amount)

    approval = approve(500, DeclineAll())

    assert approval.approved_amount == 0
    assert approval.remaining_amount == 500


def test_fixed_policy_rejects_out_of_range_percentage():
    with pytest.raises(ValueError):
        FixedPercentagePolicy(percentage=120)


def test_down_payment_options():
    options = down_payment_options(approve(2000))

    assert [o.percent for o in options] == [10, 15, 20, 25]
    assert [o.amount for o in options] == pytest.approx([20, 30, 40, 50])
    assert [o.monthly_rate_percent for o in options] == pytest.approx([1.99, 1.74, 1.49, 1.25])


def test_financing_quote_uses_remaining_amount_as_base():
    """2000 requested -> 200 remaining -> 20 down, 180 financed at 1.99%"""
    quote = financing_quote(approve(2000), 10, 12)

    assert quote.financed_base == pytest.approx(200)
    assert quote.down_payment == pytest.approx(20)
    assert quote.financed_principal == pytest.approx(180)
    assert quote.monthly_rate_percent == pytest.approx(1.99)
    assert quote.plan.installment_amount == pytest.approx(compute_installment(180, 12, 1.99))
    assert quote.total_payable == pytest.approx(20 + quote.plan.installment_amount * 12)


def test_larger_down_payment_lowers_rate_and_parcel():
    approval = approve(5000)

    small = financing_quote(approval, 10, 24)
    large = financing_quote(approval, 25, 24)

    assert large.monthly_rate_percent < small.monthly_rate_percent
    assert large.plan.installment_amount < small.plan.installment_amount


def test_financing_quote_rejects_zero_installments():
    with pytest.raises(InvalidInstallmentError):
        financing_quote(approve(2000), 10, 0)
