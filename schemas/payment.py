# schemas/payment.py
"""
Pydantic schemas for invoice payment records.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict

from models.invoice import InvoiceStatus
from models.invoice_payment import PaymentMethod


class PaymentCreate(BaseModel):
     """Request body for POST /api/invoices/{invoice_id}/payments."""

     amount: Decimal = Field(..., gt=0, description="Amount received")
     payment_date: date = Field(..., description="Date the money was received")
     payment_method: PaymentMethod = Field(..., description="How the money was received")
     payment_remarks: Optional[str] = Field(None, max_length=1000)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "amount": 30.00,
                    "payment_date": "2026-10-17",
                    "payment_method": "bank_transfer",
                    "payment_remarks": "First instalment",
               }
          }
     )


class PaymentResponse(BaseModel):
     id: int
     invoice_id: int
     amount: Decimal
     payment_date: date
     payment_method: str
     payment_remarks: Optional[str] = None
     created_at: datetime

     model_config = ConfigDict(from_attributes=True)


class PaymentHistoryResponse(BaseModel):
     """Payments for one invoice with running balance."""

     invoice_id: int
     invoice_status: InvoiceStatus
     total: Decimal
     total_paid: Decimal
     balance_due: Decimal
     payments: List[PaymentResponse]
