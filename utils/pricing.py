"""Dual-currency line and invoice arithmetic.

Product prices are fixed at stocking time: ``price_usd`` and ``price_sdg``
per unit, with ``price_sdg`` reflecting the exchange rate of that day.
Selling at a later rate values the same units at
``price_usd * current_exchange_rate``; the gap between the two SDG amounts
is the profit (or loss) caused by the rate moving.

Amounts are quantized to cents per line, and invoice totals are sums of the
already-quantized lines so the stored header always equals the stored items.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

CENT = Decimal("0.01")
# Largest rate the Numeric(10, 2) snapshot columns hold
MAX_EXCHANGE_RATE = Decimal("99999999.99")


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize_money(value) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class LineTotals:
    quantity: int
    unit_usd: Decimal
    unit_original_sdg: Decimal
    unit_current_sdg: Decimal
    total_usd: Decimal
    total_original_sdg: Decimal
    total_current_sdg: Decimal

    @property
    def difference_sdg(self) -> Decimal:
        return self.total_current_sdg - self.total_original_sdg


@dataclass(frozen=True)
class InvoiceTotals:
    total_usd: Decimal
    total_original_sdg: Decimal
    total_current_sdg: Decimal
    profit_loss: Decimal


def compute_line(price_usd, price_sdg, quantity: int, current_exchange_rate) -> LineTotals:
    price_usd = to_decimal(price_usd)
    price_sdg = to_decimal(price_sdg)
    rate = to_decimal(current_exchange_rate)
    qty = Decimal(int(quantity))

    return LineTotals(
        quantity=int(quantity),
        unit_usd=quantize_money(price_usd),
        unit_original_sdg=quantize_money(price_sdg),
        unit_current_sdg=quantize_money(price_usd * rate),
        total_usd=quantize_money(price_usd * qty),
        total_original_sdg=quantize_money(price_sdg * qty),
        total_current_sdg=quantize_money(price_usd * rate * qty),
    )


def summarize(lines: Iterable[LineTotals]) -> InvoiceTotals:
    total_usd = Decimal("0.00")
    total_original_sdg = Decimal("0.00")
    total_current_sdg = Decimal("0.00")
    for line in lines:
        total_usd += line.total_usd
        total_original_sdg += line.total_original_sdg
        total_current_sdg += line.total_current_sdg

    return InvoiceTotals(
        total_usd=total_usd,
        total_original_sdg=total_original_sdg,
        total_current_sdg=total_current_sdg,
        profit_loss=total_current_sdg - total_original_sdg,
    )
