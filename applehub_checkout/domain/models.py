"""Domain models - pure Python dataclasses representing pricing inputs and outputs"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import List, Optional


class DiscountType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class CouponRejection(str, Enum):
    """Machine-readable reasons a coupon cannot be applied, in check order"""

    INACTIVE = "inactive"
    NOT_YET_VALID = "not_yet_valid"
    EXPIRED = "expired"
    EXHAUSTED = "exhausted"
    BELOW_MINIMUM = "below_minimum"


class PaymentType(str, Enum):
    PIX = "pix"
    CARD = "cartao"
    FINANCING = "parcelamento_applehub"


class OrderStatus(str, Enum):
    IN_ANALYSIS = "em_analise"
    APPROVED = "aprovado"
    REJECTED = "reprovado"
    PAYMENT_CONFIRMED = "pagamento_confirmado"
    PICKING = "em_separacao"
    IN_TRANSIT = "em_transporte"
    DELIVERED = "entregue"
    CANCELLED = "cancelado"
    SHIPPED = "pedido_enviado"
    ORDER_DELIVERED = "pedido_entregue"
    DELIVERY_FAILED = "entrega_nao_realizada"


class FreightMode(str, Enum):
    NORMAL = "normal"
    EXPRESS = "rapido"


@dataclass
class Coupon:
    """Discount code with activation window, usage cap and minimum-purchase gate"""

    code: str
    discount_type: DiscountType
    discount_value: float
    active: bool = True
    used_count: int = 0
    valid_from: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    max_uses: Optional[int] = None
    min_purchase_value: Optional[float] = None


@dataclass
class CouponValidation:
    """Outcome of validating a coupon: either a discount or a rejection reason"""

    ok: bool
    discount: Optional[float] = None
    reason: Optional[CouponRejection] = None


@dataclass
class OrderPricing:
    """Order total composition: total = subtotal + freight - discount"""

    subtotal: float
    freight: float
    discount: float
    total: float
    coupon_code: Optional[str] = None
    coupon_rejection: Optional[CouponRejection] = None


@dataclass
class InstallmentPlan:
    principal: float
    count: int
    monthly_rate_percent: float
    installment_amount: float
    total_payable: float


@dataclass
class ScheduledInstallment:
    """Single payment in a repayment schedule"""

    number: int
    due_date: date
    amount: float


@dataclass
class CreditApproval:
    requested_amount: float
    approved_percentage: float
    approved_amount: float
    remaining_amount: float


@dataclass
class DownPaymentOption:
    percent: int
    amount: float
    monthly_rate_percent: float


@dataclass
class FinancingQuote:
    """Financing of the amount left over after credit approval"""

    financed_base: float
    down_payment_percent: float
    down_payment: float
    financed_principal: float
    monthly_rate_percent: float
    plan: InstallmentPlan
    total_payable: float


@dataclass
class InstallmentSettings:
    """Admin-editable financing configuration, defaults apply when nothing is stored"""

    max_installments: int = 24
    monthly_rate_percent: float = 1.99
    min_purchase_for_installments: float = 100.0
    enabled: bool = True


@dataclass
class FreightQuote:
    cep: str
    mode: FreightMode
    amount: float
    min_business_days: int
    max_business_days: int


@dataclass
class OverdueInstallment:
    """Pending charge whose due date has passed"""

    user_id: str
    amount: float
    due_date: date
    customer_name: Optional[str] = None
    cpf: Optional[str] = None
    phone: Optional[str] = None


@dataclass
class DelinquentCustomer:
    user_id: str
    customer_name: str
    cpf: str
    phone: str
    total_pending: float
    late_installments: int
    days_late: int
    oldest_due_date: Optional[date]
    oldest_amount: float


@dataclass
class DelinquencyReport:
    customers: List[DelinquentCustomer]
    total_customers: int
    total_pending: float
    late_installments: int
