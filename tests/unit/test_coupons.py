"""Unit tests for coupon validation and discounts"""

import pytest
from dataclasses import replace
from datetime import timedelta
from applehub_checkout.domain.coupons import compute_discount, normalize_code, validate_coupon
from applehub_checkout.domain.models import Coupon, CouponRejection, DiscountType


def test_normalize_code_is_case_insensitive():
    assert normalize_code("  promo10 ") == "PROMO10"
    assert normalize_code("Promo10") == normalize_code("PROMO10")


def test_valid_coupon_returns_discount(percentage_coupon, now):
    result = validate_coupon(percentage_coupon, now, 200)

    assert result.ok is True
    assert result.discount == 20
    assert result.reason is None


def test_inactive_coupon_rejected(percentage_coupon, now):
    coupon = replace(percentage_coupon, active=False)

    result = validate_coupon(coupon, now, 200)

    assert result.ok is False
    assert result.reason == CouponRejection.INACTIVE
    assert result.discount is None


def test_not_yet_valid_coupon_rejected(percentage_coupon, now):
    coupon = replace(percentage_coupon, valid_from=now + timedelta(hours=1))

    assert validate_coupon(coupon, now, 200).reason == CouponRejection.NOT_YET_VALID


def test_expired_coupon_rejected(percentage_coupon, now):
    coupon = replace(percentage_coupon, valid_until=now - timedelta(seconds=1))

    assert validate_coupon(coupon, now, 200).reason == CouponRejection.EXPIRED


def test_window_boundaries_are_inclusive(percentage_coupon, now):
    """now == valid_from and now == valid_until are both inside the window"""
    assert validate_coupon(replace(percentage_coupon, valid_from=now), now, 200).ok
    assert validate_coupon(replace(percentage_coupon, valid_until=now), now, 200).ok


def test_exhausted_coupon_rejected(percentage_coupon, now):
    coupon = replace(percentage_coupon, used_count=5, max_uses=5)

    assert validate_coupon(coupon, now, 200).reason == CouponRejection.EXHAUSTED


def test_last_remaining_use_still_applies(percentage_coupon, now):
    coupon = replace(percentage_coupon, used_count=4, max_uses=5)

    assert validate_coupon(coupon, now, 200).ok


def test_below_minimum_purchase_rejected(percentage_coupon, now):
    assert validate_coupon(percentage_coupon, now, 99.99).reason == CouponRejection.BELOW_MINIMUM
    assert validate_coupon(percentage_coupon, now, 100).ok


def test_rejection_precedence_inactive_before_expired(percentage_coupon, now):
    """Inactive and expired at once reports the first check, inactive"""
    coupon = replace(percentage_coupon, active=False, valid_until=now - timedelta(days=1))

    assert validate_coupon(coupon, now, 200).reason == CouponRejection.INACTIVE


def test_rejection_precedence_follows_check_order(percentage_coupon, now):
    """Expired, exhausted and below minimum at once reports expired"""
    coupon = replace(
        percentage_coupon,
        valid_until=now - timedelta(days=1),
        used_count=10,
        max_uses=5,
        min_purchase_value=1000,
    )

    assert validate_coupon(coupon, now, 200).reason == CouponRejection.EXPIRED


def test_coupon_without_limits_always_applies(now):
    coupon = Coupon(code="FREE15", discount_type=DiscountType.FIXED, discount_value=15)

    result = validate_coupon(coupon, now, 0.5)

    assert result.ok is True


def test_percentage_discount():
    coupon = Coupon(code="P10", discount_type=DiscountType.PERCENTAGE, discount_value=10)

    assert compute_discount(coupon, 200) == 20
    assert compute_discount(coupon, 1050) == pytest.approx(105)


@pytest.mark.parametrize("base", [15, 100, 2500.75])
def test_fixed_discount_is_verbatim(base):
    coupon = Coupon(code="F15", discount_type=DiscountType.FIXED, discount_value=15)

    assert compute_discount(coupon, base) == 15


def test_fixed_discount_clamped_to_purchase_base():
    coupon = Coupon(code="F50", discount_type=DiscountType.FIXED, discount_value=50)

    assert compute_discount(coupon, 30) == 30
