from datetime import datetime, timezone
from decimal import Decimal
from io import BytesIO
from typing import Optional
from uuid import UUID
from sqlalchemy.orm import Session
import openpyxl
from openpyxl.styles import Font, PatternFill, Alignment, Border, Side
from crud.exchange_rate import get_latest_exchange_rate
from exceptions import NotFoundError, ValidationError
from models.inventory import Product
from schemas.reports import InventoryValuation, ProductValuation
from utils.pricing import compute_line, quantize_money, to_decimal


def generate_inventory_valuation(db: Session, user_id: UUID, exchange_rate: Optional[Decimal] = None) -> InventoryValuation:
    """Value every product's remaining stock at its stocking price and at today's rate.

    Uses ``exchange_rate`` when given, otherwise the user's latest recorded rate.
    """
    rate_date = None
    if exchange_rate is None:
        latest = get_latest_exchange_rate(db, user_id)
        if not latest:
            raise NotFoundError("No exchange rates found")
        exchange_rate = latest.rate
        rate_date = latest.date
    elif to_decimal(exchange_rate) <= 0:
        raise ValidationError("Exchange rate must be positive")

    rate = quantize_money(exchange_rate)
    products = (
        db.query(Product)
        .filter(Product.user_id == user_id)
        .order_by(Product.name.asc())
        .all()
    )

    rows = []
    for product in products:
        line = compute_line(product.price_usd, product.price_sdg, product.remaining, rate)
        rows.append(ProductValuation(
            product_id=product.id,
            name=product.name,
            remaining=product.remaining,
            price_usd=line.unit_usd,
            price_sdg=line.unit_original_sdg,
            exchange_rate_at_purchase=to_decimal(product.exchange_rate),
            value_usd=line.total_usd,
            original_value_sdg=line.total_original_sdg,
            current_value_sdg=line.total_current_sdg,
            difference_sdg=line.difference_sdg,
        ))

    total_original = sum((row.original_value_sdg for row in rows), Decimal("0.00"))
    total_current = sum((row.current_value_sdg for row in rows), Decimal("0.00"))
    return InventoryValuation(
        generated_at=datetime.now(timezone.utc),
        exchange_rate=rate,
        exchange_rate_date=rate_date,
        total_value_usd=sum((row.value_usd for row in rows), Decimal("0.00")),
        total_original_sdg=total_original,
        total_current_sdg=total_current,
        total_difference_sdg=total_current - total_original,
        products=rows,
    )


def generate_inventory_excel(valuation: InventoryValuation, business_name: str) -> bytes:
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Inventory"

    title_font = Font(name='Arial', size=14, bold=True, color='000080')
    subtitle_font = Font(name='Arial', size=11, bold=True, color='000080')
    header_font = Font(name='Arial', size=11, bold=True)
    total_font = Font(name='Arial', size=11, bold=True)

    header_fill = PatternFill(start_color='E0E0E0', end_color='E0E0E0', fill_type='solid')
    total_fill = PatternFill(start_color='F0F0F0', end_color='F0F0F0', fill_type='solid')

    border = Border(
        left=Side(style='thin'),
        right=Side(style='thin'),
        top=Side(style='thin'),
        bottom=Side(style='thin')
    )

    ws["A1"] = business_name
    ws["A1"].font = title_font
    ws["A2"] = "Inventory valuation"
    ws["A2"].font = subtitle_font
    ws["A3"] = f"Exchange rate {valuation.exchange_rate} SDG/USD, generated {valuation.generated_at.strftime('%d %B %Y %H:%M')}"
    ws["A3"].font = subtitle_font

    headers = [
        "Product", "Remaining", "Price USD", "Price SDG", "Rate at purchase",
        "Value USD", "Original value SDG", "Current value SDG", "Difference SDG",
    ]
    current_row = 5
    for col, header in enumerate(headers, start=1):
        cell = ws.cell(row=current_row, column=col, value=header)
        cell.font = header_font
        cell.fill = header_fill
        cell.border = border
        cell.alignment = Alignment(horizontal='center')

    for row in valuation.products:
        current_row += 1
        values = [
            row.name, row.remaining, row.price_usd, row.price_sdg, row.exchange_rate_at_purchase,
            row.value_usd, row.original_value_sdg, row.current_value_sdg, row.difference_sdg,
        ]
        for col, value in enumerate(values, start=1):
            cell = ws.cell(row=current_row, column=col, value=value)
            cell.border = border
            if col > 2:
                cell.number_format = '#,##0.00'

    current_row += 1
    totals = {
        1: "TOTAL",
        6: valuation.total_value_usd,
        7: valuation.total_original_sdg,
        8: valuation.total_current_sdg,
        9: valuation.total_difference_sdg,
    }
    for col in range(1, len(headers) + 1):
        cell = ws.cell(row=current_row, column=col, value=totals.get(col))
        cell.font = total_font
        cell.fill = total_fill
        cell.border = border
        if col > 2:
            cell.number_format = '#,##0.00'

    ws.column_dimensions['A'].width = 40
    for letter in "BCDEFGHI":
        ws.column_dimensions[letter].width = 18

    buffer = BytesIO()
    wb.save(buffer)
    excel_data = buffer.getvalue()
    buffer.close()
    return excel_data
