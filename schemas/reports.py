from pydantic import BaseModel
from decimal import Decimal
from datetime import datetime
from typing import List, Optional
from uuid import UUID

class ProductValuation(BaseModel):
    product_id: UUID
    name: str
    remaining: int
    price_usd: Decimal
    price_sdg: Decimal
    exchange_rate_at_purchase: Decimal
    value_usd: Decimal
    original_value_sdg: Decimal
    current_value_sdg: Decimal
    difference_sdg: Decimal

class InventoryValuation(BaseModel):
    generated_at: datetime
    exchange_rate: Decimal
    exchange_rate_date: Optional[datetime] = None
    total_value_usd: Decimal
    total_original_sdg: Decimal
    total_current_sdg: Decimal
    total_difference_sdg: Decimal
    products: List[ProductValuation]
