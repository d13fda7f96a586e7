"""Credit analysis and financing endpoints for parcelamento orders"""

import uuid
import logging
from datetime import datetime, timedelta
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from applehub_checkout.api.dependencies import get_credit_policy, get_edge_function_client, get_now, get_request_id
from applehub_checkout.api.v1.schemas import (
    CreditAnalysisRequest,
    CreditAnalysisResponse,
    DownPaymentOptionSchema,
    FinancingConfirmRequest,
    FinancingConfirmResponse,
    FinancingOptionsResponse,
    InstallmentOptionSchema,
    PixChargeSchema,
    ScheduledInstallmentSchema,
)
from applehub_checkout.config import settings as app_settings
from applehub_checkout.domain.credit import CreditPolicy, down_payment_options, financing_quote
from applehub_checkout.domain.exceptions import EdgeFunctionError, InstallmentsNotAllowedError, InvalidPricingInputError
from applehub_checkout.domain.installments import generate_installment_schedule, installment_options
from applehub_checkout.domain.models import OrderStatus, PaymentType
from applehub_checkout.domain.orders import check_installment_eligibility
from applehub_checkout.infrastructure.clients.edge_functions import EdgeFunctionClient
from applehub_checkout.infrastructure.database.models import CreditAnalysis
from applehub_checkout.infrastructure.database.repositories import (
    CreditAnalysisRepository,
    OrderRepository,
    SettingsRepository,
    TransactionRepository,
    to_domain_approval,
)
from applehub_checkout.infrastructure.database.session import get_db
from applehub_checkout.infrastructure.observability.logging import log_credit_decision
from applehub_checkout.infrastructure.observability.metrics import (
    credit_approval_counter,
    financing_installments_histogram,
)
from applehub_checkout.utils.date_utils import local_date

router = APIRouter()

INSTALLMENT_INTERVAL_DAYS = 30


def _parse_uuid(value: str, label: str) -> uuid.UUID:
    try:
        return uuid.UUID(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {label} ID format")


def _analysis_response(analysis: CreditAnalysis) -> CreditAnalysisResponse:
    approval = to_domain_approval(analysis)
    return CreditAnalysisResponse(
        analysis_id=str(analysis.id),
        order_id=str(analysis.order_id),
        requested_amount=round(approval.requested_amount, 2),
        approved_percentage=approval.approved_percentage,
        approved_amount=round(approval.approved_amount, 2),
        remaining_amount=round(approval.remaining_amount, 2),
    )


def _load_analysis(db: Session, analysis_id: str) -> CreditAnalysis:
    analysis = CreditAnalysisRepository(db).get_analysis(_parse_uuid(analysis_id, "analysis"))
    if not analysis:
        raise HTTPException(status_code=404, detail="Credit analysis not found")
    return analysis


@router.post("/credit/analysis", response_model=CreditAnalysisResponse, status_code=201)
def create_credit_analysis(
    request_body: CreditAnalysisRequest,
    request: Request,
    db: Session = Depends(get_db),
    policy: CreditPolicy = Depends(get_credit_policy),
):
    """
    Run the credit policy on a financed order's total.

    The approved share is credited; the remainder is financed with a down
    payment and installments (see /options and /confirm).
    """
    request_id = get_request_id(request)
    order_repo = OrderRepository(db)
    order = order_repo.get_order(_parse_uuid(request_body.order_id, "order"))
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")
    if order.payment_type != PaymentType.FINANCING.value:
        raise HTTPException(status_code=422, detail="Credit analysis only applies to financed orders")
    if order.status != OrderStatus.IN_ANALYSIS.value:
        raise HTTPException(status_code=409, detail=f"Order is not awaiting credit analysis (status {order.status})")

    try:
        approval = policy.approve(order.total)
    except InvalidPricingInputError as e:
        raise HTTPException(status_code=422, detail=str(e))

    analysis = CreditAnalysisRepository(db).create_analysis(order.user_id, order.id, approval)
    order_repo.add_status(order, OrderStatus.APPROVED.value, "Crédito aprovado")
    db.commit()
    db.refresh(analysis)

    credit_approval_counter.inc()
    log_credit_decision(
        request_id,
        str(order.id),
        approval.requested_amount,
        approval.approved_amount,
        approval.approved_percentage,
    )

    return _analysis_response(analysis)


@router.get("/credit/analysis/{analysis_id}/options", response_model=FinancingOptionsResponse)
def get_financing_options(
    analysis_id: str,
    down_payment_percent: float = Query(10, ge=0, le=100),
    db: Session = Depends(get_db),
):
    """Down payment choices and the installment table for the selected one"""
    analysis = _load_analysis(db, analysis_id)
    approval = to_domain_approval(analysis)
    settings = SettingsRepository(db).get_installment_settings()

    quote = financing_quote(approval, down_payment_percent, 1)
    plans = installment_options(quote.financed_principal, quote.monthly_rate_percent, settings.max_installments)

    return FinancingOptionsResponse(
        analysis=_analysis_response(analysis),
        down_payment_percent=down_payment_percent,
        down_payment=round(quote.down_payment, 2),
        financed_principal=round(quote.financed_principal, 2),
        monthly_rate_percent=round(quote.monthly_rate_percent, 2),
        down_payment_options=[
            DownPaymentOptionSchema(
                percent=option.percent,
                amount=round(option.amount, 2),
                monthly_rate_percent=round(option.monthly_rate_percent, 2),
            )
            for option in down_payment_options(approval)
        ],
        installment_options=[
            InstallmentOptionSchema(
                count=plan.count,
                installment_amount=round(plan.installment_amount, 2),
                total_payable=round(quote.down_payment + plan.total_payable, 2),
            )
            for plan in plans
        ],
    )


@router.post("/credit/analysis/{analysis_id}/confirm", response_model=FinancingConfirmResponse)
async def confirm_financing(
    analysis_id: str,
    request_body: FinancingConfirmRequest,
    request: Request,
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
    edge_client: EdgeFunctionClient = Depends(get_edge_function_client),
):
    """
    Fix the financing plan on the order.

    Flow:
    1. Reject orders already confirmed or no longer eligible for financing
    2. Price down payment and installments from the stored approval
    3. Request the down payment PIX charge
    4. Store installment count/value on the order and the installment schedule
    """
    request_id = get_request_id(request)
    analysis = _load_analysis(db, analysis_id)

    order_repo = OrderRepository(db)
    order = order_repo.get_order(analysis.order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Order not found")

    transaction_repo = TransactionRepository(db)
    if transaction_repo.get_installments(order.id):
        raise HTTPException(status_code=409, detail="Financing already confirmed for this order")

    settings = SettingsRepository(db).get_installment_settings()
    try:
        check_installment_eligibility(PaymentType.FINANCING, request_body.installments, order.total, settings)
    except InstallmentsNotAllowedError as e:
        raise HTTPException(status_code=422, detail=str(e))

    quote = financing_quote(to_domain_approval(analysis), request_body.down_payment_percent, request_body.installments)

    try:
        pix = await edge_client.generate_pix(
            amount=quote.down_payment,
            description=f"Entrada - Pedido {order.order_number}",
            user_id=order.user_id,
            order_id=str(order.id),
        )

        today = local_date(now, app_settings.timezone)
        schedule = generate_installment_schedule(
            quote.plan.installment_amount,
            quote.plan.count,
            interval_days=INSTALLMENT_INTERVAL_DAYS,
            start_date=today + timedelta(days=INSTALLMENT_INTERVAL_DAYS),
        )

        transaction_repo.create_down_payment(
            user_id=order.user_id,
            order_id=order.id,
            amount=quote.down_payment,
            due_date=local_date(pix.expires_at, app_settings.timezone),
            qr_code_url=pix.qr_code_url,
            copy_paste=pix.qr_code,
        )
        transaction_repo.create_installments(order.user_id, order.id, schedule)
        order_repo.set_installments(order, quote.plan.count, quote.plan.installment_amount)
        db.commit()

    except EdgeFunctionError as e:
        db.rollback()
        logging.error(f"PIX generation failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=503, detail="Payment service unavailable")

    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    financing_installments_histogram.observe(quote.plan.count)

    return FinancingConfirmResponse(
        order_id=str(order.id),
        down_payment=round(quote.down_payment, 2),
        financed_principal=round(quote.financed_principal, 2),
        monthly_rate_percent=round(quote.monthly_rate_percent, 2),
        installments=quote.plan.count,
        installment_amount=round(quote.plan.installment_amount, 2),
        total_payable=round(quote.total_payable, 2),
        pix=PixChargeSchema(
            qr_code=pix.qr_code,
            qr_code_url=pix.qr_code_url,
            amount=pix.amount,
            expires_at=pix.expires_at,
        ),
        schedule=[
            ScheduledInstallmentSchema(number=inst.number, due_date=inst.due_date, amount=inst.amount)
            for inst in schedule
        ],
    )
