"""Order total composition and financing eligibility"""

from datetime import datetime
from typing import Optional, Tuple

from applehub_checkout.domain.coupons import validate_coupon
from applehub_checkout.domain.exceptions import InstallmentsNotAllowedError, InvalidPricingInputError
from applehub_checkout.domain.models import Coupon, InstallmentSettings, OrderPricing, PaymentType

# Card payments are split interest-free up to this many parcels
MAX_CARD_INSTALLMENTS = 12


def compose_total(subtotal: float, freight: float, discount: float) -> float:
    """
    total = subtotal + freight - discount

    Raises:
        InvalidPricingInputError: negative inputs, or a discount larger than
            subtotal + freight (the total would go negative)
    """
    if subtotal < 0 or freight < 0 or discount < 0:
        raise InvalidPricingInputError(
            f"Amounts must be >= 0 (subtotal={subtotal}, freight={freight}, discount={discount})"
        )
    if discount > subtotal + freight:
        raise InvalidPricingInputError(
            f"Discount {discount} exceeds purchase base {subtotal + freight}"
        )

    return subtotal + freight - discount


def price_order(
    subtotal: float,
    freight: float,
    coupon: Optional[Coupon] = None,
    now: Optional[datetime] = None,
) -> OrderPricing:
    """
    Price an order, applying a coupon to the freight-inclusive base.

    The coupon discount is computed on subtotal + freight, not on the subtotal
    alone. A coupon that fails validation is reported in coupon_rejection and
    contributes no discount.
    """
    if coupon is not None and now is None:
        raise InvalidPricingInputError("A timestamp is required to validate a coupon")

    purchase_base = subtotal + freight
    discount = 0.0
    coupon_code = None
    rejection = None

    if coupon is not None:
        validation = validate_coupon(coupon, now, purchase_base)
        if validation.ok:
            discount = validation.discount
            coupon_code = coupon.code
        else:
            rejection = validation.reason

    return OrderPricing(
        subtotal=subtotal,
        freight=freight,
        discount=discount,
        total=compose_total(subtotal, freight, discount),
        coupon_code=coupon_code,
        coupon_rejection=rejection,
    )


def compose_financing(financed_base: float, down_payment_percent: float) -> Tuple[float, float]:
    """
    Split the amount left after credit approval into down payment and financed principal.

    Returns:
        (down_payment, financed_principal) where
        down_payment = financed_base * down_payment_percent / 100
    """
    if financed_base < 0:
        raise InvalidPricingInputError(f"Financed base must be >= 0, got {financed_base}")
    if not 0 <= down_payment_percent <= 100:
        raise InvalidPricingInputError(
            f"Down payment percent must be within [0, 100], got {down_payment_percent}"
        )

    down_payment = financed_base * down_payment_percent / 100
    return down_payment, financed_base - down_payment


def check_installment_eligibility(
    payment_type: PaymentType,
    installments: int,
    total: float,
    settings: InstallmentSettings,
) -> None:
    """
    Enforce the installment limits for the chosen payment type.

    Raises:
        InstallmentsNotAllowedError: when the parcel count or the order does not qualify
    """
    if installments < 1:
        raise InstallmentsNotAllowedError("Installment count must be at least 1")

    if payment_type == PaymentType.PIX:
        if installments != 1:
            raise InstallmentsNotAllowedError("PIX payments cannot be split")
        return

    if payment_type == PaymentType.CARD:
        if installments > MAX_CARD_INSTALLMENTS:
            raise InstallmentsNotAllowedError(
                f"Card payments allow at most {MAX_CARD_INSTALLMENTS} installments"
            )
        return

    if not settings.enabled:
        raise InstallmentsNotAllowedError("Financing is currently disabled")
    if total < settings.min_purchase_for_installments:
        raise InstallmentsNotAllowedError(
            f"Financing requires a purchase of at least {settings.min_purchase_for_installments:.2f}"
        )
    if installments > settings.max_installments:
        raise InstallmentsNotAllowedError(
            f"Financing allows at most {settings.max_installments} installments"
        )
