"""Coupon endpoints: admin creation and checkout validation"""

from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from applehub_checkout.api.dependencies import get_now
from applehub_checkout.api.v1.schemas import (
    CouponCreateRequest,
    CouponResponse,
    CouponValidateRequest,
    CouponValidateResponse,
)
from applehub_checkout.domain.coupons import normalize_code, validate_coupon
from applehub_checkout.domain.models import Coupon
from applehub_checkout.infrastructure.database.models import CouponRecord
from applehub_checkout.infrastructure.database.repositories import CouponRepository, to_domain_coupon
from applehub_checkout.infrastructure.database.session import get_db
from applehub_checkout.infrastructure.observability.metrics import record_coupon_validation

router = APIRouter()


def _to_response(record: CouponRecord) -> CouponResponse:
    coupon = to_domain_coupon(record)
    return CouponResponse(
        code=coupon.code,
        discount_type=coupon.discount_type,
        discount_value=coupon.discount_value,
        active=coupon.active,
        used_count=coupon.used_count,
        max_uses=coupon.max_uses,
        valid_from=coupon.valid_from,
        valid_until=coupon.valid_until,
        min_purchase_value=coupon.min_purchase_value,
    )


@router.post("/coupons", response_model=CouponResponse, status_code=201)
def create_coupon(request_body: CouponCreateRequest, db: Session = Depends(get_db)):
    """Register a coupon; codes are stored upper-case and must be unique"""
    repo = CouponRepository(db)
    code = normalize_code(request_body.code)

    if repo.get_by_code(code) is not None:
        raise HTTPException(status_code=409, detail="Coupon code already exists")

    record = repo.create_coupon(
        Coupon(
            code=code,
            discount_type=request_body.discount_type,
            discount_value=request_body.discount_value,
            active=request_body.active,
            valid_from=request_body.valid_from,
            valid_until=request_body.valid_until,
            max_uses=request_body.max_uses,
            min_purchase_value=request_body.min_purchase_value,
        )
    )
    db.commit()
    db.refresh(record)
    return _to_response(record)


@router.post("/coupons/validate", response_model=CouponValidateResponse)
def validate_coupon_code(
    request_body: CouponValidateRequest,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """
    Check whether a coupon applies to a purchase base (subtotal + freight).

    Returns the discount, or the reason the coupon was rejected.
    """
    record = CouponRepository(db).get_by_code(normalize_code(request_body.code))
    if record is None:
        raise HTTPException(status_code=404, detail="Coupon not found")

    result = validate_coupon(to_domain_coupon(record), now, request_body.purchase_base)
    record_coupon_validation(result.reason.value if result.reason else None)

    return CouponValidateResponse(
        ok=result.ok,
        discount=round(result.discount, 2) if result.discount is not None else None,
        reason=result.reason,
    )
