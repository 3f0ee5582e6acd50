from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
from database import get_db
from crud.api.deps import get_current_user
from models.user import User
from schemas.inventory import Product, ProductCreate, ProductUpdate, WithdrawRequest, WithdrawalResult
from crud import inventory

router = APIRouter()

@router.post("/", response_model=Product, status_code=201)
def create_product(item: ProductCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return inventory.create_product(db, user.id, item)

@router.get("/", response_model=List[Product])
def list_products(
    skip: int = 0,
    limit: int = 100,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    return inventory.get_products(db, user.id, skip, limit, search)

@router.get("/{product_id}", response_model=Product)
def get_product(product_id: UUID, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    db_item = inventory.get_product(db, user.id, product_id)
    if db_item is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return db_item

@router.put("/{product_id}", response_model=Product)
def update_product(
    product_id: UUID,
    item_update: ProductUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    db_item = inventory.update_product(db, user.id, product_id, item_update)
    if db_item is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return db_item

@router.delete("/{product_id}")
def delete_product(product_id: UUID, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    success = inventory.delete_product(db, user.id, product_id)
    if not success:
        raise HTTPException(status_code=404, detail="Product not found")
    return {"status": "success"}

@router.post("/{product_id}/withdraw", response_model=WithdrawalResult)
def withdraw_product(
    product_id: UUID,
    request: WithdrawRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    result = inventory.withdraw_product(db, user.id, product_id, request.quantity, request.current_exchange_rate)
    return WithdrawalResult.model_validate(result)
