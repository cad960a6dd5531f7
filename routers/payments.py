# routers/payments.py
"""
Invoice payment records API.

GET  /api/invoices/{invoice_id}/payments: payment history with balance.
POST /api/invoices/{invoice_id}/payments: record a payment; the invoice is
marked PAID once the received amounts cover its total.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from auth import get_current_user_id
from database import get_session
from models import Invoice, InvoicePayment
from routers.invoices import get_invoice_or_404, validation_error
from schemas.payment import PaymentCreate, PaymentHistoryResponse, PaymentResponse
from services import data_access
from services.calculator import InvoiceValidationError
from services.invoice_service import InvoiceService

router = APIRouter(prefix="/api/invoices", tags=["payments"])


def _history(db: Session, invoice: Invoice) -> PaymentHistoryResponse:
     summary = InvoiceService.payment_summary(db, invoice)
     payments = data_access.select(db, InvoicePayment, order_by=InvoicePayment.id, invoice_id=invoice.id)
     return PaymentHistoryResponse(
          invoice_id=invoice.id,
          invoice_status=invoice.status,
          total=summary.total,
          total_paid=summary.total_paid,
          balance_due=summary.balance_due,
          payments=[PaymentResponse.model_validate(p) for p in payments],
     )


@router.get("/{invoice_id}/payments", response_model=PaymentHistoryResponse, summary="List payments")
def list_payments(
     invoice_id: int,
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     invoice = get_invoice_or_404(db, user_id, invoice_id)
     return _history(db, invoice)


@router.post(
     "/{invoice_id}/payments",
     response_model=PaymentHistoryResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Record a payment"
)
def record_payment(
     invoice_id: int,
     body: PaymentCreate,
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     invoice = get_invoice_or_404(db, user_id, invoice_id)
     try:
          InvoiceService.record_payment(db, invoice, body)
     except InvoiceValidationError as e:
          raise validation_error(e)

     db.commit()
     db.refresh(invoice)
     return _history(db, invoice)
