"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, Field, field_validator, model_validator
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from applehub_checkout.domain.models import (
    CouponRejection,
    DiscountType,
    FreightMode,
    OrderStatus,
    PaymentType,
)
from applehub_checkout.utils.formatters import format_cpf, format_phone, validate_cpf, validate_phone


# Coupons

class CouponCreateRequest(BaseModel):
    """Request body for POST /v1/coupons"""

    code: str = Field(..., min_length=1, max_length=64)
    discount_type: DiscountType
    discount_value: float = Field(..., gt=0)
    active: bool = True
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    max_uses: Optional[int] = Field(None, ge=1)
    min_purchase_value: Optional[float] = Field(None, ge=0)

    @model_validator(mode="after")
    def check_ranges(self):
        if self.discount_type == DiscountType.PERCENTAGE and self.discount_value > 100:
            raise ValueError("percentage discount cannot exceed 100")
        if self.valid_from and self.valid_until and self.valid_until < self.valid_from:
            raise ValueError("valid_until must not be before valid_from")
        return self


class CouponResponse(BaseModel):
    code: str
    discount_type: DiscountType
    discount_value: float
    active: bool
    used_count: int
    max_uses: Optional[int] = None
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    min_purchase_value: Optional[float] = None


class CouponValidateRequest(BaseModel):
    """Request body for POST /v1/coupons/validate"""

    code: str = Field(..., min_length=1)
    purchase_base: float = Field(..., ge=0, description="Subtotal plus freight")


class CouponValidateResponse(BaseModel):
    ok: bool
    discount: Optional[float] = None
    reason: Optional[CouponRejection] = None


# Settings

class InstallmentSettingsSchema(BaseModel):
    """Body and response for /v1/settings/installments"""

    max_installments: int = Field(24, ge=1, le=48)
    monthly_rate_percent: float = Field(1.99, ge=0)
    min_purchase_for_installments: float = Field(100.0, ge=0)
    enabled: bool = True


# Freight

class FreightQuoteRequest(BaseModel):
    cep: str
    mode: FreightMode = FreightMode.NORMAL


class FreightQuoteResponse(BaseModel):
    cep: str
    mode: FreightMode
    amount: float
    min_business_days: int
    max_business_days: int


# Checkout

class InstallmentOptionSchema(BaseModel):
    count: int
    installment_amount: float
    total_payable: float


class CheckoutQuoteRequest(BaseModel):
    """Request body for POST /v1/checkout/quote"""

    subtotal: float = Field(..., ge=0)
    freight: float = Field(0, ge=0)
    coupon_code: Optional[str] = None
    payment_type: PaymentType = PaymentType.PIX
    installments: int = Field(1, ge=1)


class CheckoutQuoteResponse(BaseModel):
    subtotal: float
    freight: float
    discount: float
    total: float
    coupon_code: Optional[str] = None
    coupon_rejection: Optional[CouponRejection] = None
    installments: int
    installment_amount: float
    options: List[InstallmentOptionSchema]


class CustomerSchema(BaseModel):
    """Buyer identification, stored masked"""

    name: str = Field(..., min_length=1)
    cpf: str
    phone: str

    @field_validator("cpf")
    @classmethod
    def check_cpf(cls, value: str) -> str:
        if not validate_cpf(value):
            raise ValueError("invalid CPF")
        return format_cpf(value)

    @field_validator("phone")
    @classmethod
    def check_phone(cls, value: str) -> str:
        if not validate_phone(value):
            raise ValueError("phone must have 11 digits including area code")
        return format_phone(value)


class OrderItemSchema(BaseModel):
    product_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0)
    unit_price: float = Field(..., ge=0)


class OrderCreateRequest(BaseModel):
    """Request body for POST /v1/orders"""

    user_id: str = Field(..., min_length=1, description="User identifier")
    customer: CustomerSchema
    items: List[OrderItemSchema] = Field(..., min_length=1)
    freight: float = Field(..., gt=0, description="Freight must be quoted before ordering")
    coupon_code: Optional[str] = None
    payment_type: PaymentType
    installments: int = Field(1, ge=1)
    shipping_address: Optional[Dict[str, Any]] = None


class StatusHistoryItem(BaseModel):
    status: OrderStatus
    note: Optional[str] = None
    created_at: str


class OrderResponse(BaseModel):
    order_id: str
    order_number: str
    user_id: str
    status: OrderStatus
    payment_type: PaymentType
    subtotal: float
    freight: float
    discount: float
    total: float
    coupon_code: Optional[str] = None
    installments: Optional[int] = None
    installment_amount: Optional[float] = None
    tracking_code: Optional[str] = None
    status_history: List[StatusHistoryItem] = []


class OrderStatusUpdateRequest(BaseModel):
    status: OrderStatus
    note: Optional[str] = None


# Credit

class CreditAnalysisRequest(BaseModel):
    order_id: str


class CreditAnalysisResponse(BaseModel):
    analysis_id: str
    order_id: str
    requested_amount: float
    approved_percentage: float
    approved_amount: float
    remaining_amount: float


class DownPaymentOptionSchema(BaseModel):
    percent: int
    amount: float
    monthly_rate_percent: float


class FinancingOptionsResponse(BaseModel):
    analysis: CreditAnalysisResponse
    down_payment_percent: float
    down_payment: float
    financed_principal: float
    monthly_rate_percent: float
    down_payment_options: List[DownPaymentOptionSchema]
    installment_options: List[InstallmentOptionSchema]


class FinancingConfirmRequest(BaseModel):
    down_payment_percent: float = Field(10, ge=0, le=100)
    installments: int = Field(..., ge=1)


class PixChargeSchema(BaseModel):
    qr_code: str
    qr_code_url: str
    amount: float
    expires_at: datetime


class ScheduledInstallmentSchema(BaseModel):
    number: int
    due_date: date
    amount: float


class FinancingConfirmResponse(BaseModel):
    order_id: str
    down_payment: float
    financed_principal: float
    monthly_rate_percent: float
    installments: int
    installment_amount: float
    total_payable: float
    pix: PixChargeSchema
    schedule: List[ScheduledInstallmentSchema]


# Reports

class DelinquentCustomerSchema(BaseModel):
    user_id: str
    customer_name: str
    cpf: str
    phone: str
    total_pending: float
    late_installments: int
    days_late: int
    oldest_due_date: Optional[date] = None
    oldest_amount: float


class DelinquencyReportResponse(BaseModel):
    total_customers: int
    total_pending: float
    late_installments: int
    customers: List[DelinquentCustomerSchema]
