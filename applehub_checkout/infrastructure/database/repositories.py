"""Data access layer for checkout entities"""

import uuid
from datetime import date
from typing import List, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session
from applehub_checkout.infrastructure.database.models import (
    CouponRecord,
    CreditAnalysis,
    InstallmentSettingsRecord,
    Order,
    OrderItem,
    OrderStatusHistory,
    PaymentTransaction,
)
from applehub_checkout.domain.models import (
    Coupon,
    CreditApproval,
    DiscountType,
    InstallmentSettings,
    OrderPricing,
    OverdueInstallment,
    ScheduledInstallment,
)
from applehub_checkout.utils.date_utils import ensure_aware, to_utc


def to_domain_coupon(record: CouponRecord) -> Coupon:
    """Map a stored coupon to the validation engine's input"""
    return Coupon(
        code=record.code,
        discount_type=DiscountType(record.discount_type),
        discount_value=record.discount_value,
        active=bool(record.active),
        used_count=record.used_count or 0,
        valid_from=ensure_aware(record.valid_from) if record.valid_from else None,
        valid_until=ensure_aware(record.valid_until) if record.valid_until else None,
        max_uses=record.max_uses,
        min_purchase_value=record.min_purchase_value,
    )


class CouponRepository:
    """Repository for discount coupons"""

    def __init__(self, db: Session):
        self.db = db

    def create_coupon(self, coupon: Coupon) -> CouponRecord:
        db_coupon = CouponRecord(
            code=coupon.code,
            discount_type=coupon.discount_type.value,
            discount_value=coupon.discount_value,
            active=coupon.active,
            valid_from=to_utc(coupon.valid_from) if coupon.valid_from else None,
            valid_until=to_utc(coupon.valid_until) if coupon.valid_until else None,
            max_uses=coupon.max_uses,
            used_count=coupon.used_count,
            min_purchase_value=coupon.min_purchase_value,
        )
        self.db.add(db_coupon)
        self.db.flush()
        return db_coupon

    def get_by_code(self, code: str) -> Optional[CouponRecord]:
        """Look up a coupon by its normalized (upper-case) code"""
        return (
            self.db.query(CouponRecord)
            .filter(CouponRecord.code == code)
            .first()
        )

    def increment_usage(self, code: str) -> bool:
        """
        Count one redemption inside the order's transaction.

        The UPDATE matches only while uses remain.

        Returns:
            False when the coupon was exhausted in the meantime
        """
        updated = (
            self.db.query(CouponRecord)
            .filter(
                CouponRecord.code == code,
                or_(CouponRecord.max_uses.is_(None), CouponRecord.used_count < CouponRecord.max_uses),
            )
            .update({CouponRecord.used_count: CouponRecord.used_count + 1}, synchronize_session=False)
        )
        return updated == 1


class SettingsRepository:
    """Repository for the single-row installment settings"""

    def __init__(self, db: Session):
        self.db = db

    def get_installment_settings(self) -> InstallmentSettings:
        """Stored settings, or the defaults when none were saved yet"""
        record = self.db.query(InstallmentSettingsRecord).first()
        if record is None:
            return InstallmentSettings()

        return InstallmentSettings(
            max_installments=record.max_installments,
            monthly_rate_percent=record.monthly_rate_percent,
            min_purchase_for_installments=record.min_purchase_for_installments,
            enabled=record.enabled,
        )

    def save_installment_settings(self, settings: InstallmentSettings) -> InstallmentSettings:
        """Update the existing row or insert the first one"""
        record = self.db.query(InstallmentSettingsRecord).first()
        if record is None:
            record = InstallmentSettingsRecord()
            self.db.add(record)

        record.max_installments = settings.max_installments
        record.monthly_rate_percent = settings.monthly_rate_percent
        record.min_purchase_for_installments = settings.min_purchase_for_installments
        record.enabled = settings.enabled
        self.db.flush()
        return settings


class OrderRepository:
    """Repository for orders, their items and status history"""

    def __init__(self, db: Session):
        self.db = db

    def create_order(
        self,
        user_id: str,
        customer: dict,
        order_number: str,
        pricing: OrderPricing,
        payment_type: str,
        status: str,
        items: List[dict],
        installments: Optional[int] = None,
        installment_amount: Optional[float] = None,
        shipping_address: Optional[dict] = None,
        note: Optional[str] = None,
    ) -> Order:
        """Persist an order with line items and its first status entry"""
        db_order = Order(
            user_id=user_id,
            customer_name=customer["name"],
            customer_cpf=customer["cpf"],
            customer_phone=customer["phone"],
            order_number=order_number,
            subtotal=round(pricing.subtotal, 2),
            freight=round(pricing.freight, 2),
            discount=round(pricing.discount, 2),
            total=round(pricing.total, 2),
            coupon_code=pricing.coupon_code,
            payment_type=payment_type,
            installments=installments,
            installment_amount=round(installment_amount, 2) if installment_amount is not None else None,
            status=status,
            shipping_address=shipping_address,
        )
        self.db.add(db_order)
        self.db.flush()

        for item in items:
            self.db.add(
                OrderItem(
                    order_id=db_order.id,
                    product_id=item["product_id"],
                    product_name=item["name"],
                    quantity=item["quantity"],
                    unit_price=item["unit_price"],
                    subtotal=round(item["unit_price"] * item["quantity"], 2),
                )
            )

        self.add_status(db_order, status, note)
        return db_order

    def get_order(self, order_id: uuid.UUID) -> Optional[Order]:
        return (
            self.db.query(Order)
            .filter(Order.id == order_id)
            .first()
        )

    def add_status(self, order: Order, status: str, note: Optional[str] = None) -> None:
        """Move the order to a new status and record it in the history"""
        order.status = status
        self.db.add(OrderStatusHistory(order_id=order.id, status=status, note=note))
        self.db.flush()

    def set_installments(self, order: Order, installments: int, installment_amount: float) -> None:
        order.installments = installments
        order.installment_amount = round(installment_amount, 2)
        self.db.flush()


class CreditAnalysisRepository:
    """Repository for credit approvals"""

    def __init__(self, db: Session):
        self.db = db

    def create_analysis(self, user_id: str, order_id: uuid.UUID, approval: CreditApproval) -> CreditAnalysis:
        db_analysis = CreditAnalysis(
            user_id=user_id,
            order_id=order_id,
            requested_amount=round(approval.requested_amount, 2),
            approved_amount=round(approval.approved_amount, 2),
            approved_percentage=approval.approved_percentage,
            status="aprovado",
        )
        self.db.add(db_analysis)
        self.db.flush()
        return db_analysis

    def get_analysis(self, analysis_id: uuid.UUID) -> Optional[CreditAnalysis]:
        return (
            self.db.query(CreditAnalysis)
            .filter(CreditAnalysis.id == analysis_id)
            .first()
        )


def to_domain_approval(analysis: CreditAnalysis) -> CreditApproval:
    """Rebuild the approval from its stored (rounded) amounts"""
    return CreditApproval(
        requested_amount=analysis.requested_amount,
        approved_percentage=analysis.approved_percentage,
        approved_amount=analysis.approved_amount,
        remaining_amount=analysis.requested_amount - analysis.approved_amount,
    )


class TransactionRepository:
    """Repository for down payment and installment charges"""

    def __init__(self, db: Session):
        self.db = db

    def create_down_payment(
        self,
        user_id: str,
        order_id: uuid.UUID,
        amount: float,
        due_date: date,
        qr_code_url: Optional[str] = None,
        copy_paste: Optional[str] = None,
    ) -> PaymentTransaction:
        db_transaction = PaymentTransaction(
            user_id=user_id,
            order_id=order_id,
            kind="entrada",
            amount=round(amount, 2),
            status="pendente",
            payment_method="pix",
            due_date=due_date,
            pix_qr_code_url=qr_code_url,
            pix_copy_paste=copy_paste,
        )
        self.db.add(db_transaction)
        self.db.flush()
        return db_transaction

    def create_installments(
        self,
        user_id: str,
        order_id: uuid.UUID,
        schedule: List[ScheduledInstallment],
    ) -> None:
        """Store one pending charge per scheduled installment"""
        for inst in schedule:
            self.db.add(
                PaymentTransaction(
                    user_id=user_id,
                    order_id=order_id,
                    kind="parcela",
                    amount=inst.amount,
                    status="pendente",
                    payment_method="parcelamento_applehub",
                    installment_number=inst.number,
                    total_installments=len(schedule),
                    due_date=inst.due_date,
                )
            )
        self.db.flush()

    def get_installments(self, order_id: uuid.UUID) -> List[PaymentTransaction]:
        return (
            self.db.query(PaymentTransaction)
            .filter(PaymentTransaction.order_id == order_id, PaymentTransaction.kind == "parcela")
            .order_by(PaymentTransaction.installment_number)
            .all()
        )

    def list_overdue(self, today: date) -> List[OverdueInstallment]:
        """Pending installments due before today, with the buyer's contact data"""
        rows = (
            self.db.query(PaymentTransaction, Order)
            .join(Order, PaymentTransaction.order_id == Order.id)
            .filter(
                PaymentTransaction.status == "pendente",
                PaymentTransaction.kind == "parcela",
                PaymentTransaction.due_date < today,
            )
            .order_by(PaymentTransaction.due_date)
            .all()
        )

        return [
            OverdueInstallment(
                user_id=txn.user_id,
                amount=txn.amount,
                due_date=txn.due_date,
                customer_name=order.customer_name,
                cpf=order.customer_cpf,
                phone=order.customer_phone,
            )
            for txn, order in rows
        ]
