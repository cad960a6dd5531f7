# schemas/dashboard.py
from datetime import date as date_type
from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel

from models.invoice import InvoiceStatus


class DashboardInvoice(BaseModel):
     id: int
     invoice_number: str
     date: date_type
     due_date: date_type
     customer_name: Optional[str] = None
     company_name: Optional[str] = None
     total: Decimal
     status: InvoiceStatus


class DashboardResponse(BaseModel):
     total_customers: int
     total_invoices: int
     paid_invoices: int
     total_revenue: Decimal
     invoices: List[DashboardInvoice]
