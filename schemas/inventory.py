from pydantic import BaseModel, Field, condecimal
from typing import Optional
from datetime import datetime
from decimal import Decimal
from uuid import UUID

class ProductBase(BaseModel):
    name: str = Field(min_length=1)
    description: Optional[str] = None
    quantity: int = Field(gt=0)
    price_sdg: condecimal(max_digits=12, decimal_places=2, ge=0)
    price_usd: condecimal(max_digits=12, decimal_places=2, ge=0)
    exchange_rate: condecimal(max_digits=10, decimal_places=2, gt=0)

class ProductCreate(ProductBase):
    purchase_date: Optional[datetime] = None

class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    quantity: Optional[int] = Field(None, ge=0)
    price_sdg: Optional[condecimal(max_digits=12, decimal_places=2, ge=0)] = None
    price_usd: Optional[condecimal(max_digits=12, decimal_places=2, ge=0)] = None
    purchase_date: Optional[datetime] = None
    exchange_rate: Optional[condecimal(max_digits=10, decimal_places=2, gt=0)] = None

class Product(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    quantity: int
    remaining: int
    price_sdg: Decimal
    price_usd: Decimal
    exchange_rate: Decimal
    purchase_date: datetime
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class WithdrawRequest(BaseModel):
    quantity: Optional[int] = None
    current_exchange_rate: Optional[Decimal] = None

class WithdrawalResult(BaseModel):
    product: Product
    withdrawn_quantity: int
    original_price_sdg: Decimal
    current_price_sdg: Decimal
    total_original_sdg: Decimal
    total_current_sdg: Decimal
    price_difference: Decimal
    exchange_rate_at_purchase: Decimal
    current_exchange_rate: Decimal

    class Config:
        from_attributes = True
