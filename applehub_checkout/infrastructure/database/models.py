"""SQLAlchemy ORM models for the checkout tables"""

import uuid
from sqlalchemy import Column, String, Boolean, Float, DateTime, Date, Integer, ForeignKey, Text, JSON
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class CouponRecord(Base):
    """Discount coupon"""

    __tablename__ = "coupons"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    code = Column(String(64), nullable=False, unique=True, index=True)
    discount_type = Column(Text, nullable=False)
    discount_value = Column(Float, nullable=False)
    active = Column(Boolean, nullable=False, default=True)
    valid_from = Column(DateTime(timezone=True), nullable=True)
    valid_until = Column(DateTime(timezone=True), nullable=True)
    max_uses = Column(Integer, nullable=True)
    used_count = Column(Integer, nullable=False, default=0)
    min_purchase_value = Column(Float, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())


class InstallmentSettingsRecord(Base):
    """Single-row financing configuration edited from the back-office"""

    __tablename__ = "installment_settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    max_installments = Column(Integer, nullable=False)
    monthly_rate_percent = Column(Float, nullable=False)
    min_purchase_for_installments = Column(Float, nullable=False)
    enabled = Column(Boolean, nullable=False, default=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())


class Order(Base):
    """Customer order with its priced totals"""

    __tablename__ = "orders"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    customer_name = Column(Text, nullable=False)
    customer_cpf = Column(Text, nullable=False)
    customer_phone = Column(Text, nullable=False)
    order_number = Column(Text, nullable=False, unique=True)
    subtotal = Column(Float, nullable=False)
    freight = Column(Float, nullable=False)
    discount = Column(Float, nullable=False, default=0)
    total = Column(Float, nullable=False)
    coupon_code = Column(Text, nullable=True)
    payment_type = Column(Text, nullable=False)
    installments = Column(Integer, nullable=True)
    installment_amount = Column(Float, nullable=True)
    status = Column(Text, nullable=False)
    shipping_address = Column(JSON, nullable=True)
    tracking_code = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    items = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")
    status_history = relationship("OrderStatusHistory", back_populates="order", cascade="all, delete-orphan")


class OrderItem(Base):
    """Line item captured at purchase time"""

    __tablename__ = "order_items"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    order_id = Column(UUID(as_uuid=True), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    product_id = Column(Text, nullable=False)
    product_name = Column(Text, nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Float, nullable=False)
    subtotal = Column(Float, nullable=False)

    order = relationship("Order", back_populates="items")


class OrderStatusHistory(Base):
    """Audit trail of order status changes"""

    __tablename__ = "order_status_history"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    order_id = Column(UUID(as_uuid=True), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    status = Column(Text, nullable=False)
    note = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    order = relationship("Order", back_populates="status_history")


class CreditAnalysis(Base):
    """Credit approval issued for a financed order"""

    __tablename__ = "credit_analyses"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    order_id = Column(UUID(as_uuid=True), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    requested_amount = Column(Float, nullable=False)
    approved_amount = Column(Float, nullable=False)
    approved_percentage = Column(Float, nullable=False)
    status = Column(Text, nullable=False, default="aprovado")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class PaymentTransaction(Base):
    """Down payment or installment charge"""

    __tablename__ = "transactions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    order_id = Column(UUID(as_uuid=True), ForeignKey("orders.id", ondelete="CASCADE"), nullable=True)
    kind = Column(Text, nullable=False)  # "entrada" | "parcela"
    amount = Column(Float, nullable=False)
    status = Column(Text, nullable=False, default="pendente")
    payment_method = Column(Text, nullable=False)
    installment_number = Column(Integer, nullable=True)
    total_installments = Column(Integer, nullable=True)
    due_date = Column(Date, nullable=True, index=True)
    pix_qr_code_url = Column(Text, nullable=True)
    pix_copy_paste = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
