from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID
from database import get_db
from crud.api.deps import get_current_user
from models.user import User
from schemas.exchange_rate import ExchangeRate, ExchangeRateCreate, ExchangeRateUpdate
from crud import exchange_rate

router = APIRouter()

@router.get("/", response_model=List[ExchangeRate])
def list_exchange_rates(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    return exchange_rate.get_exchange_rates(db, user.id, skip, limit)

@router.get("/latest", response_model=ExchangeRate)
def get_latest_exchange_rate(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    db_rate = exchange_rate.get_latest_exchange_rate(db, user.id)
    if db_rate is None:
        raise HTTPException(status_code=404, detail="No exchange rates found")
    return db_rate

@router.post("/", response_model=ExchangeRate, status_code=201)
def create_exchange_rate(payload: ExchangeRateCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return exchange_rate.create_exchange_rate(db, user.id, payload)

@router.put("/{rate_id}", response_model=ExchangeRate)
def update_exchange_rate(
    rate_id: UUID,
    rate_update: ExchangeRateUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    db_rate = exchange_rate.update_exchange_rate(db, user.id, rate_id, rate_update)
    if db_rate is None:
        raise HTTPException(status_code=404, detail="Exchange rate not found")
    return db_rate

@router.delete("/{rate_id}")
def delete_exchange_rate(rate_id: UUID, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    success = exchange_rate.delete_exchange_rate(db, user.id, rate_id)
    if not success:
        raise HTTPException(status_code=404, detail="Exchange rate not found")
    return {"message": "Exchange rate removed"}
