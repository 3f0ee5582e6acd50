import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional, Tuple
from uuid import UUID
from sqlalchemy.orm import Session, selectinload
from crud import customer as customers
from crud.inventory import release_product, reserve_product, validate_exchange_rate, validate_quantity
from crud.transaction import atomic
from exceptions import NotFoundError, ValidationError
from models.invoice import Invoice, InvoiceItem, InvoiceStatus, PaymentStatus
from schemas.invoice import InvoiceCreate, InvoiceItemCreate, InvoiceUpdate
from utils.pricing import compute_line, summarize

log = logging.getLogger("ledger.invoice")


def _validate_items(items: List[InvoiceItemCreate]) -> List[Tuple[InvoiceItemCreate, int, Decimal]]:
    """Check every line up front; returns (item, quantity, rate) with the rate as it will be stored."""
    checked = []
    for position, item in enumerate(items, start=1):
        if item.product_id is None:
            raise ValidationError(f"Item {position}: productId is required")
        if item.quantity is None:
            raise ValidationError(f"Item {position}: quantity must be at least 1")
        quantity = validate_quantity(item.quantity, label=f"Item {position}: quantity")
        if item.current_exchange_rate is None:
            raise ValidationError(f"Item {position}: currentExchangeRate must be positive")
        rate = validate_exchange_rate(item.current_exchange_rate, label=f"Item {position}: currentExchangeRate")
        checked.append((item, quantity, rate))
    return checked


def create_invoice(db: Session, user_id: UUID, invoice: InvoiceCreate) -> Invoice:
    """Issue an invoice and take its items out of inventory, all or nothing.

    Items are processed in submitted order: reserve stock, price the line
    against the caller's exchange rate, snapshot it. The first failure rolls
    back every reservation made so far and no invoice is left behind.
    """
    if not invoice.customer_id or not invoice.items:
        raise ValidationError("Please provide customerId and items")
    items = _validate_items(invoice.items)

    with atomic(db, "invoice_create", user_id=user_id, customer_id=invoice.customer_id, items=len(items)):
        customer = customers.get_customer(db, user_id, invoice.customer_id)
        if not customer:
            raise NotFoundError("Customer not found")

        db_invoice = Invoice(
            user_id=user_id,
            customer_id=customer.id,
            date=invoice.date or datetime.now(timezone.utc),
            status=invoice.status or InvoiceStatus.ISSUED,
            payment_status=invoice.payment_status or PaymentStatus.UNPAID,
            notes=invoice.notes or "",
        )

        lines = []
        for position, (item, quantity, rate) in enumerate(items):
            reservation = reserve_product(db, user_id, item.product_id, quantity)
            line = compute_line(
                reservation.price_usd,
                reservation.price_sdg,
                quantity,
                rate,
            )
            lines.append(line)

            db_invoice.items.append(InvoiceItem(
                product_id=reservation.product_id,
                position=position,
                name=reservation.name,
                quantity=line.quantity,
                price_usd=line.unit_usd,
                original_price_sdg=line.unit_original_sdg,
                current_price_sdg=line.unit_current_sdg,
                total_usd=line.total_usd,
                total_original_sdg=line.total_original_sdg,
                total_current_sdg=line.total_current_sdg,
                exchange_rate_at_purchase=reservation.exchange_rate,
                current_exchange_rate=rate,
            ))

        totals = summarize(lines)
        db_invoice.total_usd = totals.total_usd
        db_invoice.total_original_sdg = totals.total_original_sdg
        db_invoice.total_current_sdg = totals.total_current_sdg
        db_invoice.profit_loss = totals.profit_loss

        db.add(db_invoice)
        db.flush()

    db.refresh(db_invoice)
    log.info(
        "invoice_created invoice_id=%s user_id=%s customer_id=%s items=%s total_current_sdg=%s profit_loss=%s",
        db_invoice.id, user_id, db_invoice.customer_id, len(items),
        db_invoice.total_current_sdg, db_invoice.profit_loss,
    )
    return db_invoice

def get_invoice(db: Session, user_id: UUID, invoice_id: UUID) -> Optional[Invoice]:
    return (
        db.query(Invoice)
        .options(selectinload(Invoice.items), selectinload(Invoice.customer))
        .filter(Invoice.id == invoice_id, Invoice.user_id == user_id)
        .first()
    )

def get_invoices(
    db: Session,
    user_id: UUID,
    skip: int = 0,
    limit: int = 100,
    status: Optional[InvoiceStatus] = None,
    payment_status: Optional[PaymentStatus] = None,
    customer_id: Optional[UUID] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None
) -> List[Invoice]:
    query = (
        db.query(Invoice)
        .options(selectinload(Invoice.items), selectinload(Invoice.customer))
        .filter(Invoice.user_id == user_id)
    )

    if status:
        query = query.filter(Invoice.status == status)
    if payment_status:
        query = query.filter(Invoice.payment_status == payment_status)
    if customer_id:
        query = query.filter(Invoice.customer_id == customer_id)
    if start_date:
        query = query.filter(Invoice.date >= start_date)
    if end_date:
        query = query.filter(Invoice.date <= end_date)

    return query.order_by(Invoice.date.desc()).offset(skip).limit(limit).all()

def update_invoice(
    db: Session,
    user_id: UUID,
    invoice_id: UUID,
    invoice_update: InvoiceUpdate
) -> Optional[Invoice]:
    db_invoice = get_invoice(db, user_id, invoice_id)
    if db_invoice:
        update_data = invoice_update.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            if value is None and field != "notes":
                continue
            setattr(db_invoice, field, value)
        db.commit()
        db.refresh(db_invoice)
        log.info("invoice_updated invoice_id=%s user_id=%s", invoice_id, user_id)
    return db_invoice

def delete_invoice(db: Session, user_id: UUID, invoice_id: UUID) -> bool:
    """Delete an invoice and give its items' stock back, in one transaction."""
    with atomic(db, "invoice_delete", user_id=user_id, invoice_id=invoice_id):
        db_invoice = get_invoice(db, user_id, invoice_id)
        if not db_invoice:
            raise NotFoundError("Invoice not found")

        for item in db_invoice.items:
            release_product(db, item.product_id, item.quantity)

        for item in list(db_invoice.items):
            db.delete(item)
        db.flush()
        db.delete(db_invoice)

    log.info("invoice_deleted invoice_id=%s user_id=%s", invoice_id, user_id)
    return True
