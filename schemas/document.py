# schemas/document.py
"""
Invoice document value: everything a renderer needs for one invoice.

Instances are immutable. Optional company fields (logo, bank details) stay
None; presentation fallbacks belong to the renderer.
"""
from datetime import date
from decimal import Decimal
from typing import Optional, Tuple
from pydantic import BaseModel, ConfigDict

from models.invoice import InvoiceStatus


class _Frozen(BaseModel):
     model_config = ConfigDict(frozen=True)


class CompanyBlock(_Frozen):
     name: str
     address: Optional[str] = None
     email: Optional[str] = None
     phone: Optional[str] = None
     website: Optional[str] = None
     tax_id: Optional[str] = None
     logo_url: Optional[str] = None
     bank_name: Optional[str] = None
     bank_account: Optional[str] = None


class CustomerBlock(_Frozen):
     name: str
     address: Optional[str] = None
     email: Optional[str] = None
     phone: Optional[str] = None


class DocumentHeader(_Frozen):
     invoice_number: str
     issue_date: date
     due_date: date
     currency: str
     tax_label: str
     tax_rate: Decimal


class DocumentLine(_Frozen):
     description: str
     quantity: Decimal
     unit_price: Decimal
     tax_rate: Decimal
     amount: Decimal


class DocumentTotals(_Frozen):
     subtotal: Decimal
     tax_amount: Decimal
     total: Decimal


class InvoiceDocument(_Frozen):
     header: DocumentHeader
     company: CompanyBlock
     customer: CustomerBlock
     items: Tuple[DocumentLine, ...]
     totals: DocumentTotals
     status: InvoiceStatus
     notes: Optional[str] = None

     @property
     def filename(self) -> str:
          return f"invoice-{self.header.invoice_number}.pdf"
