from pydantic import BaseModel, condecimal
from typing import Optional
from datetime import datetime
from decimal import Decimal
from uuid import UUID

class ExchangeRateCreate(BaseModel):
    rate: condecimal(max_digits=10, decimal_places=2, gt=0)
    date: Optional[datetime] = None

class ExchangeRateUpdate(BaseModel):
    rate: Optional[condecimal(max_digits=10, decimal_places=2, gt=0)] = None
    date: Optional[datetime] = None

class ExchangeRate(BaseModel):
    id: UUID
    rate: Decimal
    date: datetime
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
