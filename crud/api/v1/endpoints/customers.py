from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List, Optional
from uuid import UUID
from database import get_db
from crud.api.deps import get_current_user
from models.user import User
from schemas.customer import Customer, CustomerCreate, CustomerUpdate
from crud import customer

router = APIRouter()

@router.post("/", response_model=Customer, status_code=201)
def create_customer(payload: CustomerCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return customer.create_customer(db, user.id, payload)

@router.get("/", response_model=List[Customer])
def list_customers(
    skip: int = 0,
    limit: int = 100,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    return customer.get_customers(db, user.id, skip, limit, search)

@router.get("/{customer_id}", response_model=Customer)
def get_customer(customer_id: UUID, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    db_customer = customer.get_customer(db, user.id, customer_id)
    if db_customer is None:
        raise HTTPException(status_code=404, detail="Customer not found")
    return db_customer

@router.put("/{customer_id}", response_model=Customer)
def update_customer(
    customer_id: UUID,
    customer_update: CustomerUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    db_customer = customer.update_customer(db, user.id, customer_id, customer_update)
    if db_customer is None:
        raise HTTPException(status_code=404, detail="Customer not found")
    return db_customer

@router.delete("/{customer_id}")
def delete_customer(customer_id: UUID, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    success = customer.delete_customer(db, user.id, customer_id)
    if not success:
        raise HTTPException(status_code=404, detail="Customer not found")
    return {"message": "Customer removed"}
