from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime
from uuid import UUID
from database import get_db
from crud.api.deps import get_current_user
from models.invoice import InvoiceStatus, PaymentStatus
from models.user import User
from schemas.invoice import Invoice, InvoiceCreate, InvoiceUpdate
from crud import business, invoice
from utils.pdf_generator import InvoicePDFGenerator

router = APIRouter()

@router.post("/", response_model=Invoice, status_code=201)
def create_invoice(payload: InvoiceCreate, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return invoice.create_invoice(db, user.id, payload)

@router.get("/", response_model=List[Invoice])
def list_invoices(
    skip: int = 0,
    limit: int = 100,
    status: Optional[InvoiceStatus] = None,
    payment_status: Optional[PaymentStatus] = None,
    customer_id: Optional[UUID] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    return invoice.get_invoices(db, user.id, skip, limit, status, payment_status, customer_id, start_date, end_date)

@router.get("/{invoice_id}", response_model=Invoice)
def get_invoice(invoice_id: UUID, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    db_invoice = invoice.get_invoice(db, user.id, invoice_id)
    if not db_invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return db_invoice

@router.put("/{invoice_id}", response_model=Invoice)
def update_invoice(
    invoice_id: UUID,
    invoice_update: InvoiceUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user)
):
    db_invoice = invoice.update_invoice(db, user.id, invoice_id, invoice_update)
    if not db_invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return db_invoice

@router.delete("/{invoice_id}")
def delete_invoice(invoice_id: UUID, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    invoice.delete_invoice(db, user.id, invoice_id)
    return {"message": "Invoice removed"}

@router.get("/{invoice_id}/pdf")
def generate_invoice_pdf(invoice_id: UUID, db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    db_invoice = invoice.get_invoice(db, user.id, invoice_id)
    if not db_invoice:
        raise HTTPException(status_code=404, detail="Invoice not found")

    pdf_generator = InvoicePDFGenerator(business.get_business_info(db, user.id))
    content = pdf_generator.create_pdf(db_invoice)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename=invoice_{invoice_id}.pdf"}
    )
