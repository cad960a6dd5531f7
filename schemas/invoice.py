# schemas/invoice.py
"""
Pydantic schemas for Invoice API request/response validation.
"""
from datetime import date as date_type, datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict, field_validator

from models.invoice import InvoiceStatus
from models.invoice_payment import PaymentMethod


class InvoiceItemCreate(BaseModel):
     """One billable line. Quantity and price must both be positive."""
     description: str = Field(..., min_length=1, description="What is being billed")
     quantity: Decimal = Field(..., gt=0, description="Quantity (positive, at most 4 decimals)")
     unit_price: Decimal = Field(..., gt=0, description="Unit price (positive, at most 4 decimals)")


class InvoiceCreate(BaseModel):
     """Schema for creating a new invoice together with its items."""
     company_id: int = Field(..., gt=0, description="Issuing company (must belong to the user)")
     customer_id: int = Field(..., gt=0, description="Billed customer (must belong to the company)")
     due_date: date_type = Field(..., description="Payment due date")
     date: Optional[date_type] = Field(None, description="Issue date (defaults to today)")
     invoice_number: Optional[str] = Field(None, min_length=1, max_length=64)
     currency: Optional[str] = Field(None, min_length=3, max_length=3)
     tax_type: Optional[str] = Field(None, max_length=50)
     tax_rate: Decimal = Field(default=Decimal("0"), ge=0, le=100, description="Tax percentage (at most 2 decimals)")
     notes: Optional[str] = None
     items: List[InvoiceItemCreate] = Field(..., min_length=1)

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "company_id": 1,
                    "customer_id": 1,
                    "due_date": "2026-11-30",
                    "currency": "EUR",
                    "tax_type": "VAT",
                    "tax_rate": 21,
                    "items": [
                         {"description": "Design work", "quantity": 2, "unit_price": 50.00}
                    ]
               }
          }
     )


class InvoiceUpdate(BaseModel):
     """
     Schema for updating an existing invoice.

     Line items are fixed once the invoice is created.
     """
     due_date: Optional[date_type] = None
     notes: Optional[str] = None
     status: Optional[InvoiceStatus] = None

     @field_validator("due_date", "status")
     @classmethod
     def not_null(cls, value):
          if value is None:
               raise ValueError("may be omitted but not set to null")
          return value

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "status": "sent"
               }
          }
     )


class MarkPaidRequest(BaseModel):
     payment_method: Optional[PaymentMethod] = None
     payment_remarks: Optional[str] = Field(None, max_length=1000)


class InvoiceItemResponse(BaseModel):
     id: int
     description: str
     quantity: Decimal
     unit_price: Decimal
     amount: Decimal

     model_config = ConfigDict(from_attributes=True)


class InvoiceResponse(BaseModel):
     """Schema for invoice response."""
     id: int
     invoice_number: str
     company_id: int
     customer_id: int
     date: date_type
     due_date: date_type
     currency: Optional[str] = None
     tax_type: Optional[str] = None
     tax_rate: Optional[Decimal] = None
     subtotal: Decimal
     tax_amount: Decimal
     total: Decimal
     status: InvoiceStatus
     is_overdue: bool = False
     notes: Optional[str] = None
     payment_method: Optional[str] = None
     payment_remarks: Optional[str] = None
     created_at: datetime

     # Related data
     customer_name: Optional[str] = None
     company_name: Optional[str] = None
     items: List[InvoiceItemResponse] = []

     model_config = ConfigDict(from_attributes=True)


class InvoiceListResponse(BaseModel):
     """Schema for paginated invoice list response."""
     invoices: List[InvoiceResponse]
     total: int
     page: int = 1
     page_size: int = 50
