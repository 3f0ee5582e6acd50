from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session
from typing import Optional
from decimal import Decimal
from database import get_db
from crud.api.deps import get_current_user
from models.user import User
from crud import business, reports
from schemas.reports import InventoryValuation

router = APIRouter()

@router.get("/inventory-valuation", response_model=InventoryValuation)
def get_inventory_valuation(
    exchange_rate: Optional[Decimal] = Query(None, description="SDG per USD; defaults to the latest recorded rate"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    """
    Value remaining stock at purchase prices and at the current exchange rate
    """
    return reports.generate_inventory_valuation(db, user.id, exchange_rate)

@router.get("/inventory-valuation/export")
def export_inventory_valuation(
    exchange_rate: Optional[Decimal] = Query(None, description="SDG per USD; defaults to the latest recorded rate"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    valuation = reports.generate_inventory_valuation(db, user.id, exchange_rate)
    business_name = business.get_business_info(db, user.id).name
    content = reports.generate_inventory_excel(valuation, business_name)
    filename = f"inventory-valuation-{valuation.generated_at.date()}.xlsx"
    return Response(
        content=content,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f"attachment; filename={filename}"}
    )
