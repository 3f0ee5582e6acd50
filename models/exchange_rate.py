import uuid
from decimal import Decimal
from sqlalchemy import Column, Numeric, DateTime, ForeignKey, Uuid
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from database import Base
from utils.pricing import quantize_money, to_decimal


class ExchangeRate(Base):
    __tablename__ = "exchange_rates"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    rate = Column(Numeric(10, 2), nullable=False)
    date = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    user = relationship("User", back_populates="exchange_rates")

    def convert_usd_to_sdg(self, amount_usd) -> Decimal:
        return quantize_money(to_decimal(amount_usd) * to_decimal(self.rate))

    def convert_sdg_to_usd(self, amount_sdg) -> Decimal:
        return quantize_money(to_decimal(amount_sdg) / to_decimal(self.rate))
