"""Checkout endpoints: pricing preview, order creation and order status"""

import time
import uuid
import logging
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from applehub_checkout.api.dependencies import get_notification_client, get_now, get_request_id
from applehub_checkout.api.v1.schemas import (
    CheckoutQuoteRequest,
    CheckoutQuoteResponse,
    InstallmentOptionSchema,
    OrderCreateRequest,
    OrderResponse,
    OrderStatusUpdateRequest,
    StatusHistoryItem,
)
from applehub_checkout.domain.coupons import normalize_code
from applehub_checkout.domain.exceptions import InstallmentsNotAllowedError, InvalidPricingInputError
from applehub_checkout.domain.installments import compute_installment, installment_options
from applehub_checkout.domain.models import Coupon, CouponRejection, InstallmentSettings, OrderStatus, PaymentType
from applehub_checkout.domain.orders import MAX_CARD_INSTALLMENTS, check_installment_eligibility, price_order
from applehub_checkout.infrastructure.clients.notifications import NotificationClient
from applehub_checkout.infrastructure.database.models import Order
from applehub_checkout.infrastructure.database.repositories import (
    CouponRepository,
    OrderRepository,
    SettingsRepository,
    to_domain_coupon,
)
from applehub_checkout.infrastructure.database.session import get_db
from applehub_checkout.infrastructure.observability.logging import log_order_created
from applehub_checkout.infrastructure.observability.metrics import record_coupon_validation, record_order
from applehub_checkout.utils.codes import generate_order_number, generate_tracking_code
from applehub_checkout.utils.date_utils import format_brasilia

router = APIRouter()

SHIPPING_STATUSES = {OrderStatus.IN_TRANSIT, OrderStatus.SHIPPED}


def _load_coupon(db: Session, code: Optional[str]) -> Optional[Coupon]:
    if not code:
        return None

    record = CouponRepository(db).get_by_code(normalize_code(code))
    if record is None:
        raise HTTPException(status_code=404, detail="Coupon not found")
    return to_domain_coupon(record)


def _rate_for(payment_type: PaymentType, settings: InstallmentSettings) -> float:
    """Card parcels are interest-free; financing uses the configured monthly rate"""
    return settings.monthly_rate_percent if payment_type == PaymentType.FINANCING else 0.0


def _max_installments(payment_type: PaymentType, settings: InstallmentSettings) -> int:
    if payment_type == PaymentType.PIX:
        return 1
    if payment_type == PaymentType.CARD:
        return MAX_CARD_INSTALLMENTS
    return settings.max_installments


def to_order_response(order: Order) -> OrderResponse:
    return OrderResponse(
        order_id=str(order.id),
        order_number=order.order_number,
        user_id=order.user_id,
        status=order.status,
        payment_type=order.payment_type,
        subtotal=order.subtotal,
        freight=order.freight,
        discount=order.discount,
        total=order.total,
        coupon_code=order.coupon_code,
        installments=order.installments,
        installment_amount=order.installment_amount,
        tracking_code=order.tracking_code,
        status_history=[
            StatusHistoryItem(status=h.status, note=h.note, created_at=h.created_at.isoformat())
            for h in order.status_history
        ],
    )


def _parse_order_id(order_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(order_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid order ID format")


@router.post("/checkout/quote", response_model=CheckoutQuoteResponse)
def quote_checkout(
    request_body: CheckoutQuoteRequest,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
):
    """
    Price a cart without placing an order.

    The coupon applies to subtotal + freight; a rejected coupon is reported
    with its reason and no discount. Returns the installment table for the
    chosen payment type.
    """
    coupon = _load_coupon(db, request_body.coupon_code)
    settings = SettingsRepository(db).get_installment_settings()

    pricing = price_order(request_body.subtotal, request_body.freight, coupon, now)
    if coupon is not None:
        record_coupon_validation(pricing.coupon_rejection.value if pricing.coupon_rejection else None)

    max_count = _max_installments(request_body.payment_type, settings)
    if request_body.installments > max_count:
        raise HTTPException(status_code=422, detail=f"At most {max_count} installments allowed")

    rate = _rate_for(request_body.payment_type, settings)
    options = installment_options(pricing.total, rate, max_count)

    return CheckoutQuoteResponse(
        subtotal=round(pricing.subtotal, 2),
        freight=round(pricing.freight, 2),
        discount=round(pricing.discount, 2),
        total=round(pricing.total, 2),
        coupon_code=pricing.coupon_code,
        coupon_rejection=pricing.coupon_rejection,
        installments=request_body.installments,
        installment_amount=round(compute_installment(pricing.total, request_body.installments, rate), 2),
        options=[
            InstallmentOptionSchema(
                count=plan.count,
                installment_amount=round(plan.installment_amount, 2),
                total_payable=round(plan.total_payable, 2),
            )
            for plan in options
        ],
    )


@router.post("/orders", response_model=OrderResponse, status_code=201)
def create_order(
    request_body: OrderCreateRequest,
    background_tasks: BackgroundTasks,
    request: Request,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    notification_client: NotificationClient = Depends(get_notification_client),
):
    """
    Place an order.

    Flow:
    1. Price the cart (coupon on subtotal + freight)
    2. Enforce installment limits for the payment type
    3. Persist order, items and first status; count the coupon redemption once
    4. Schedule the order notification
    """
    start_time = time.time()
    request_id = get_request_id(request)
    payment_type = request_body.payment_type

    try:
        coupon = _load_coupon(db, request_body.coupon_code)
        subtotal = sum(item.unit_price * item.quantity for item in request_body.items)
        pricing = price_order(subtotal, request_body.freight, coupon, now)

        if coupon is not None:
            record_coupon_validation(pricing.coupon_rejection.value if pricing.coupon_rejection else None)
        if pricing.coupon_rejection is not None:
            raise HTTPException(
                status_code=422,
                detail={"message": "Coupon cannot be applied", "reason": pricing.coupon_rejection.value},
            )

        settings = SettingsRepository(db).get_installment_settings()
        check_installment_eligibility(payment_type, request_body.installments, pricing.total, settings)

        installments = None
        installment_amount = None
        if payment_type != PaymentType.PIX:
            installments = request_body.installments
            installment_amount = compute_installment(
                pricing.total, installments, _rate_for(payment_type, settings)
            )

        if payment_type == PaymentType.FINANCING:
            status, note = OrderStatus.IN_ANALYSIS, "Pedido em análise de crédito"
        else:
            status, note = OrderStatus.PAYMENT_CONFIRMED, "Pagamento confirmado"

        order_repo = OrderRepository(db)
        order = order_repo.create_order(
            user_id=request_body.user_id,
            customer=request_body.customer.model_dump(),
            order_number=generate_order_number(now),
            pricing=pricing,
            payment_type=payment_type.value,
            status=status.value,
            items=[item.model_dump() for item in request_body.items],
            installments=installments,
            installment_amount=installment_amount,
            shipping_address=request_body.shipping_address,
            note=note,
        )

        if pricing.coupon_code is not None and not CouponRepository(db).increment_usage(pricing.coupon_code):
            raise HTTPException(
                status_code=422,
                detail={"message": "Coupon cannot be applied", "reason": CouponRejection.EXHAUSTED.value},
            )

        db.commit()
        db.refresh(order)

    except HTTPException:
        db.rollback()
        raise

    except (InvalidPricingInputError, InstallmentsNotAllowedError) as e:
        db.rollback()
        logging.warning(f"Order rejected: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=422, detail=str(e))

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    background_tasks.add_task(
        notification_client.send_order_event,
        {
            "event": "ORDER_CREATED",
            "order_id": str(order.id),
            "order_number": order.order_number,
            "user_id": order.user_id,
            "status": order.status,
            "total": order.total,
            "created_at": format_brasilia(now),
        },
    )

    duration_ms = (time.time() - start_time) * 1000
    record_order(payment_type.value, pricing.total)
    log_order_created(request_id, order.order_number, payment_type.value, pricing.total, pricing.discount, duration_ms)

    return to_order_response(order)


@router.get("/orders/{order_id}", response_model=OrderResponse)
def get_order(order_id: str, db: Session = Depends(get_db)):
    order = OrderRepository(db).get_order(_parse_order_id(order_id))
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    return to_order_response(order)


@router.patch("/orders/{order_id}/status", response_model=OrderResponse)
def update_order_status(
    order_id: str,
    request_body: OrderStatusUpdateRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    notification_client: NotificationClient = Depends(get_notification_client),
):
    """Back-office status change; shipping statuses assign a Correios tracking code"""
    order_repo = OrderRepository(db)
    order = order_repo.get_order(_parse_order_id(order_id))
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")

    if request_body.status in SHIPPING_STATUSES and not order.tracking_code:
        order.tracking_code = generate_tracking_code()

    order_repo.add_status(order, request_body.status.value, request_body.note)
    db.commit()
    db.refresh(order)

    background_tasks.add_task(
        notification_client.send_order_event,
        {
            "event": "ORDER_STATUS_CHANGED",
            "order_id": str(order.id),
            "order_number": order.order_number,
            "user_id": order.user_id,
            "status": order.status,
            "tracking_code": order.tracking_code,
        },
    )

    return to_order_response(order)
