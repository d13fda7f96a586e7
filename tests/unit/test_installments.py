"""Unit tests for installment pricing"""

import pytest
from datetime import date, timedelta
from applehub_checkout.domain.exceptions import InvalidInstallmentError
from applehub_checkout.domain.installments import (
    build_installment_plan,
    compute_installment,
    generate_installment_schedule,
    installment_options,
    interest_rate_for_down_payment,
)


@pytest.mark.parametrize("principal,count", [(0, 1), (945, 12), (1000, 3), (1234.56, 24)])
def test_compute_installment_without_interest_splits_evenly(principal, count):
    """Zero rate is a plain division"""
    assert compute_installment(principal, count, 0) == principal / count


def test_compute_installment_matches_annuity_formula():
    """945 over 12x at 1.99% a month"""
    i = 0.0199
    expected = 945 * (1 + i) ** 12 * i / ((1 + i) ** 12 - 1)

    result = compute_installment(945, 12, 1.99)

    assert result == pytest.approx(expected)
    assert result == pytest.approx(89.30, abs=0.01)
    assert result * 12 > 945


def test_compute_installment_increases_with_rate():
    """Higher rate, higher parcel"""
    rates = [0, 0.5, 1.25, 1.5, 1.99, 3]
    amounts = [compute_installment(1000, 10, r) for r in rates]

    assert all(a < b for a, b in zip(amounts, amounts[1:]))


@pytest.mark.parametrize("count", [1, 2, 6, 12, 24])
def test_total_payable_never_below_principal(count):
    assert compute_installment(500, count, 0) * count == pytest.approx(500)
    assert compute_installment(500, count, 1.99) * count > 500


def test_single_installment_with_interest_charges_one_month():
    assert compute_installment(1000, 1, 2) == pytest.approx(1020)


@pytest.mark.parametrize(
    "principal,count,rate",
    [(100, 0, 1.99), (100, -1, 1.99), (-1, 3, 1.99), (100, 3, -0.5), (100, 2.5, 1.99), (float("nan"), 3, 1)],
)
def test_compute_installment_rejects_invalid_inputs(principal, count, rate):
    with pytest.raises(InvalidInstallmentError):
        compute_installment(principal, count, rate)


@pytest.mark.parametrize(
    "down_payment,expected",
    [(10, 1.99), (11, 1.94), (15, 1.74), (20, 1.49), (25, 1.25), (30, 1.25), (0, 1.99)],
)
def test_interest_rate_for_down_payment(down_payment, expected):
    assert interest_rate_for_down_payment(down_payment) == pytest.approx(expected)


def test_interest_rate_ramp_is_non_increasing_and_bounded():
    percents = [10 + step * 0.5 for step in range(31)]  # 10.0 .. 25.0
    rates = [interest_rate_for_down_payment(p) for p in percents]

    assert all(a >= b for a, b in zip(rates, rates[1:]))
    assert all(1.25 <= r <= 1.99 for r in rates)


def test_build_installment_plan_totals():
    plan = build_installment_plan(1200, 12, 0)

    assert plan.installment_amount == 100
    assert plan.total_payable == 1200
    assert plan.count == 12


def test_installment_options_cover_every_count():
    options = installment_options(1000, 1.99, 24)

    assert [o.count for o in options] == list(range(1, 25))
    assert options[0].installment_amount == pytest.approx(1019.9)


def test_installment_options_rejects_empty_range():
    with pytest.raises(InvalidInstallmentError):
        installment_options(1000, 1.99, 0)


def test_schedule_last_installment_absorbs_rounding():
    schedule = generate_installment_schedule(1000 / 3, 3, start_date=date(2026, 11, 16))

    assert [inst.amount for inst in schedule] == [333.33, 333.33, 333.34]
    assert sum(inst.amount for inst in schedule) == pytest.approx(1000)


def test_schedule_due_dates_every_30_days():
    start = date(2026, 11, 16)
    schedule = generate_installment_schedule(89.27, 4, start_date=start)

    assert [inst.number for inst in schedule] == [1, 2, 3, 4]
    assert schedule[0].due_date == start
    assert schedule[1].due_date == start + timedelta(days=30)
    assert schedule[3].due_date == start + timedelta(days=90)


def test_schedule_custom_interval():
    start = date(2026, 11, 16)
    schedule = generate_installment_schedule(50, 3, start, interval_days=15)

    assert [inst.due_date for inst in schedule] == [start, date(2026, 12, 1), date(2026, 12, 16)]


def test_schedule_requires_start_date():
    with pytest.raises(TypeError):
        generate_installment_schedule(50, 2)


def test_schedule_rejects_zero_count():
    with pytest.raises(InvalidInstallmentError):
        generate_installment_schedule(50, 0, date(2026, 11, 16))
