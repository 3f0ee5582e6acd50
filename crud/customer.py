import logging
from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session
from exceptions import CustomerHasInvoicesError
from models.customer import Customer
from models.invoice import Invoice
from schemas.customer import CustomerCreate, CustomerUpdate

log = logging.getLogger("ledger.customer")


def create_customer(db: Session, user_id: UUID, customer: CustomerCreate) -> Customer:
    db_customer = Customer(**customer.model_dump(), user_id=user_id)
    db.add(db_customer)
    db.commit()
    db.refresh(db_customer)
    log.info("customer_created customer_id=%s user_id=%s", db_customer.id, user_id)
    return db_customer

def get_customer(db: Session, user_id: UUID, customer_id: UUID) -> Optional[Customer]:
    return db.query(Customer).filter(Customer.id == customer_id, Customer.user_id == user_id).first()

def get_customers(db: Session, user_id: UUID, skip: int = 0, limit: int = 100, search: Optional[str] = None) -> List[Customer]:
    query = db.query(Customer).filter(Customer.user_id == user_id)

    if search:
        query = query.filter(Customer.name.ilike(f"%{search}%"))

    return query.order_by(Customer.name.asc()).offset(skip).limit(limit).all()

def update_customer(db: Session, user_id: UUID, customer_id: UUID, customer_update: CustomerUpdate) -> Optional[Customer]:
    db_customer = get_customer(db, user_id, customer_id)
    if db_customer:
        update_data = customer_update.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            if value is None and field in ("name", "phone"):
                continue
            setattr(db_customer, field, value)
        db.commit()
        db.refresh(db_customer)
        log.info("customer_updated customer_id=%s user_id=%s", customer_id, user_id)
    return db_customer

def delete_customer(db: Session, user_id: UUID, customer_id: UUID) -> bool:
    db_customer = get_customer(db, user_id, customer_id)
    if not db_customer:
        return False

    invoice_count = db.query(Invoice).filter(Invoice.customer_id == db_customer.id).count()
    if invoice_count > 0:
        log.warning(
            "customer_delete_rejected customer_id=%s user_id=%s invoice_count=%s",
            customer_id, user_id, invoice_count,
        )
        raise CustomerHasInvoicesError("Cannot delete customer with invoices")

    db.delete(db_customer)
    db.commit()
    log.info("customer_deleted customer_id=%s user_id=%s", customer_id, user_id)
    return True
