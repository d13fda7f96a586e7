"""Coupon validation and discount computation"""

from datetime import datetime

from applehub_checkout.domain.models import Coupon, CouponRejection, CouponValidation, DiscountType


def normalize_code(code: str) -> str:
    """Coupon codes are case-insensitive and stored upper-case"""
    return code.strip().upper()


def compute_discount(coupon: Coupon, purchase_base: float) -> float:
    """
    Discount granted by a coupon on a purchase base (subtotal + freight).

    - percentage: purchase_base * discount_value / 100
    - fixed: discount_value

    Never exceeds the purchase base, so the order total cannot go negative.
    """
    if coupon.discount_type == DiscountType.PERCENTAGE:
        discount = purchase_base * coupon.discount_value / 100
    else:
        discount = coupon.discount_value

    return min(discount, purchase_base)


def check_coupon(coupon: Coupon, now: datetime, purchase_base: float) -> CouponRejection | None:
    """Return the first failing rule, or None when the coupon is applicable"""
    if not coupon.active:
        return CouponRejection.INACTIVE
    if coupon.valid_from is not None and now < coupon.valid_from:
        return CouponRejection.NOT_YET_VALID
    if coupon.valid_until is not None and now > coupon.valid_until:
        return CouponRejection.EXPIRED
    if coupon.max_uses is not None and coupon.used_count >= coupon.max_uses:
        return CouponRejection.EXHAUSTED
    if coupon.min_purchase_value is not None and purchase_base < coupon.min_purchase_value:
        return CouponRejection.BELOW_MINIMUM
    return None


def validate_coupon(coupon: Coupon, now: datetime, purchase_base: float) -> CouponValidation:
    """
    Validate a coupon against the clock and the purchase base.

    Rejections are ordinary results, not exceptions. The caller supplies `now`
    and is responsible for incrementing used_count once the order is placed.
    """
    reason = check_coupon(coupon, now, purchase_base)
    if reason is not None:
        return CouponValidation(ok=False, reason=reason)

    return CouponValidation(ok=True, discount=compute_discount(coupon, purchase_base))
