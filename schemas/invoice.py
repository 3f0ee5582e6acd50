from pydantic import BaseModel
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from uuid import UUID
from models.invoice import InvoiceStatus, PaymentStatus

# Request bodies are lenient: missing fields are reported by
# crud.invoice as ValidationError (400) instead of a framework 422.
class InvoiceItemCreate(BaseModel):
    product_id: Optional[UUID] = None
    quantity: Optional[int] = None
    current_exchange_rate: Optional[Decimal] = None

class InvoiceCreate(BaseModel):
    customer_id: Optional[UUID] = None
    items: Optional[List[InvoiceItemCreate]] = None
    date: Optional[datetime] = None
    status: Optional[InvoiceStatus] = None
    payment_status: Optional[PaymentStatus] = None
    notes: Optional[str] = None

class InvoiceUpdate(BaseModel):
    status: Optional[InvoiceStatus] = None
    payment_status: Optional[PaymentStatus] = None
    notes: Optional[str] = None

class InvoiceItem(BaseModel):
    id: UUID
    invoice_id: UUID
    product_id: Optional[UUID] = None
    name: str
    quantity: int
    price_usd: Decimal
    original_price_sdg: Decimal
    current_price_sdg: Decimal
    total_usd: Decimal
    total_original_sdg: Decimal
    total_current_sdg: Decimal
    exchange_rate_at_purchase: Decimal
    current_exchange_rate: Decimal

    class Config:
        from_attributes = True

class InvoiceCustomer(BaseModel):
    id: UUID
    name: str
    phone: str
    email: Optional[str] = None
    address: Optional[str] = None

    class Config:
        from_attributes = True

class Invoice(BaseModel):
    id: UUID
    customer_id: UUID
    date: datetime
    status: InvoiceStatus
    payment_status: PaymentStatus
    notes: Optional[str] = None
    total_usd: Decimal
    total_original_sdg: Decimal
    total_current_sdg: Decimal
    profit_loss: Decimal
    customer: Optional[InvoiceCustomer] = None
    items: List[InvoiceItem]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
