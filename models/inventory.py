import uuid
from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, ForeignKey, CheckConstraint, Uuid
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from database import Base


class Product(Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("remaining >= 0", name="ck_products_remaining_non_negative"),
        CheckConstraint("quantity >= 0", name="ck_products_quantity_non_negative"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    quantity = Column(Integer, nullable=False, default=0)
    remaining = Column(Integer, nullable=False, default=0)
    price_sdg = Column(Numeric(12, 2), nullable=False)
    price_usd = Column(Numeric(12, 2), nullable=False)
    purchase_date = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    exchange_rate = Column(Numeric(10, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User", back_populates="products")
    invoice_items = relationship("InvoiceItem", back_populates="product")
