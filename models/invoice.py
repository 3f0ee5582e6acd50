import uuid
from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, Enum, ForeignKey, Uuid
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from enum import Enum as PyEnum
from database import Base

class InvoiceStatus(PyEnum):
    ISSUED = "issued"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

class PaymentStatus(PyEnum):
    UNPAID = "unpaid"
    PARTIAL = "partial"
    PAID = "paid"

class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    customer_id = Column(Uuid, ForeignKey("customers.id"), nullable=False, index=True)
    date = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    status = Column(Enum(InvoiceStatus), nullable=False, default=InvoiceStatus.ISSUED)
    payment_status = Column(Enum(PaymentStatus), nullable=False, default=PaymentStatus.UNPAID)
    notes = Column(Text, nullable=True)
    total_usd = Column(Numeric(12, 2), nullable=False, default=0)
    total_original_sdg = Column(Numeric(12, 2), nullable=False, default=0)
    total_current_sdg = Column(Numeric(12, 2), nullable=False, default=0)
    profit_loss = Column(Numeric(12, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User", back_populates="invoices")
    customer = relationship("Customer", back_populates="invoices")
    items = relationship(
        "InvoiceItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceItem.position",
    )

class InvoiceItem(Base):
    __tablename__ = "invoice_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    invoice_id = Column(Uuid, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Uuid, ForeignKey("products.id", ondelete="SET NULL"), nullable=True, index=True)
    position = Column(Integer, nullable=False, default=0)
    name = Column(String, nullable=False)
    quantity = Column(Integer, nullable=False)

    # unit prices
    price_usd = Column(Numeric(12, 2), nullable=False)
    original_price_sdg = Column(Numeric(12, 2), nullable=False)
    current_price_sdg = Column(Numeric(12, 2), nullable=False)

    # line totals
    total_usd = Column(Numeric(12, 2), nullable=False)
    total_original_sdg = Column(Numeric(12, 2), nullable=False)
    total_current_sdg = Column(Numeric(12, 2), nullable=False)

    exchange_rate_at_purchase = Column(Numeric(10, 2), nullable=False)
    current_exchange_rate = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    invoice = relationship("Invoice", back_populates="items")
    product = relationship("Product", back_populates="invoice_items")
