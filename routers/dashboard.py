# routers/dashboard.py
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from auth import get_current_user_id
from database import get_session
from models.invoice import InvoiceStatus
from schemas.dashboard import DashboardInvoice, DashboardResponse
from services.invoice_service import InvoiceService

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse, summary="Dashboard statistics")
def get_dashboard(
     status_filter: Optional[InvoiceStatus] = Query(None, alias="status", description="Filter the invoice list"),
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     """Customer and invoice counts, paid revenue and the (optionally filtered) invoice list."""
     stats = InvoiceService.dashboard_stats(db, user_id, status_filter)
     return DashboardResponse(
          total_customers=stats.total_customers,
          total_invoices=stats.total_invoices,
          paid_invoices=stats.paid_invoices,
          total_revenue=stats.total_revenue,
          invoices=[
               DashboardInvoice(
                    id=inv.id,
                    invoice_number=inv.invoice_number,
                    date=inv.date,
                    due_date=inv.due_date,
                    customer_name=inv.customer.name if inv.customer else None,
                    company_name=inv.company.name if inv.company else None,
                    total=inv.total,
                    status=inv.status,
               )
               for inv in stats.invoices
          ],
     )
