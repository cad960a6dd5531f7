# routers/invoices.py
"""
Invoice API routes for the Hippo backend.

Provides CRUD operations for invoices, the single-button paid/unpaid
toggle, and document export (JSON document and PDF in preview, download
or raster mode). Every query is scoped to the authenticated user.
"""
import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import JSONResponse, Response
from sqlalchemy import and_
from sqlalchemy.orm import Session

from auth import get_current_user_id
from database import get_session
from models import Invoice
from models.invoice import InvoiceStatus
from schemas.document import InvoiceDocument
from schemas.invoice import (
     InvoiceCreate,
     InvoiceUpdate,
     InvoiceResponse,
     InvoiceListResponse,
     MarkPaidRequest,
)
from services import data_access
from services.calculator import InvoiceValidationError
from services.invoice_renderer import RenderMode, render_invoice
from services.invoice_service import InvoiceService, RecordNotFound
from services.logo_service import fetch_logo

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/invoices", tags=["invoices"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def get_invoice_or_404(db: Session, user_id: int, invoice_id: int) -> Invoice:
     try:
          return InvoiceService.get_owned_invoice(db, user_id, invoice_id)
     except RecordNotFound as e:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


def validation_error(e: InvoiceValidationError) -> HTTPException:
     return HTTPException(
          status_code=status.HTTP_400_BAD_REQUEST,
          detail={"field": e.field, "message": e.message}
     )


def _build_invoice_response(invoice: Invoice) -> InvoiceResponse:
     """Build InvoiceResponse with related customer and company names."""
     response = InvoiceResponse.model_validate(invoice)
     return response.model_copy(update={
          "customer_name": invoice.customer.name if invoice.customer else None,
          "company_name": invoice.company.name if invoice.company else None,
     })


def render_pdf_response(db: Session, invoice: Invoice, mode: RenderMode, request: Request) -> Response:
     """
     Render an invoice PDF, or answer with a retryable error payload.

     Logo download problems never fail the render (the avatar is drawn
     instead); anything else going wrong during PDF generation is logged
     and reported with the URL to retry.
     """
     document = InvoiceService.load_invoice_document(db, invoice)
     logo = fetch_logo(document.company.logo_url)
     try:
          rendered = render_invoice(document, mode, logo=logo)
     except Exception:
          logger.exception("PDF generation failed for invoice %s (%s)", invoice.id, mode.value)
          return JSONResponse(
               status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
               content={"error": "Failed to generate PDF", "retry_url": str(request.url)},
          )
     return Response(
          content=rendered.content,
          media_type=rendered.media_type,
          headers={"Content-Disposition": rendered.content_disposition},
     )


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------

@router.post(
     "",
     response_model=InvoiceResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Create a new invoice"
)
def create_invoice(
     invoice_data: InvoiceCreate,
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     """
     Create an invoice with its line items.

     - **company_id** / **customer_id**: must be the user's, and the customer must belong to the company
     - **items**: at least one item; quantity and unit price must be positive
     - **tax_rate**: percentage applied to the subtotal
     - **invoice_number** / **date**: generated / today when omitted
     """
     try:
          invoice = InvoiceService.create_invoice(db, user_id, invoice_data)
     except RecordNotFound as e:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
     except InvoiceValidationError as e:
          raise validation_error(e)

     db.commit()
     db.refresh(invoice)
     return _build_invoice_response(invoice)


@router.get(
     "",
     response_model=InvoiceListResponse,
     summary="List all invoices with filters"
)
def list_invoices(
     status_filter: Optional[InvoiceStatus] = Query(None, alias="status", description="Filter by status"),
     company_id: Optional[int] = Query(None, description="Filter by company ID"),
     customer_id: Optional[int] = Query(None, description="Filter by customer ID"),
     overdue_only: bool = Query(False, description="Show only overdue invoices"),
     page: int = Query(1, ge=1, description="Page number"),
     page_size: int = Query(50, ge=1, le=100, description="Items per page"),
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     """
     Retrieve a paginated list of the user's invoices, newest first.

     Filters:
     - **status**: Filter by status
     - **company_id** / **customer_id**: Filter by party
     - **overdue_only**: Unpaid invoices past their due date
     """
     query = db.query(Invoice).filter(Invoice.user_id == user_id)

     if status_filter:
          query = query.filter(Invoice.status == status_filter)

     if company_id:
          query = query.filter(Invoice.company_id == company_id)

     if customer_id:
          query = query.filter(Invoice.customer_id == customer_id)

     if overdue_only:
          query = query.filter(
               and_(
                    Invoice.status == InvoiceStatus.UNPAID,
                    Invoice.due_date < date.today()
               )
          )

     total = query.count()

     offset = (page - 1) * page_size
     invoices = query.order_by(Invoice.date.desc(), Invoice.id.desc()).offset(offset).limit(page_size).all()

     return InvoiceListResponse(
          invoices=[_build_invoice_response(inv) for inv in invoices],
          total=total,
          page=page,
          page_size=page_size
     )


@router.get(
     "/{invoice_id}",
     response_model=InvoiceResponse,
     summary="Get invoice by ID"
)
def get_invoice(
     invoice_id: int,
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     return _build_invoice_response(get_invoice_or_404(db, user_id, invoice_id))


@router.put(
     "/{invoice_id}",
     response_model=InvoiceResponse,
     summary="Update invoice"
)
def update_invoice(
     invoice_id: int,
     invoice_data: InvoiceUpdate,
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     """
     Update due date, notes or status. Line items cannot be edited.

     Setting the status to unpaid clears the recorded payment method and remarks.
     """
     invoice = get_invoice_or_404(db, user_id, invoice_id)
     values = invoice_data.model_dump(exclude_unset=True)

     new_status = values.pop("status", None)
     if values:
          data_access.update(db, Invoice, values, id=invoice_id, user_id=user_id)
     if new_status == InvoiceStatus.UNPAID:
          InvoiceService.mark_unpaid(db, invoice)
     elif new_status == InvoiceStatus.PAID:
          InvoiceService.mark_paid(db, invoice)
     elif new_status is not None:
          invoice.status = new_status

     db.commit()
     db.refresh(invoice)
     return _build_invoice_response(invoice)


@router.delete(
     "/{invoice_id}",
     status_code=status.HTTP_204_NO_CONTENT,
     summary="Delete invoice"
)
def delete_invoice(
     invoice_id: int,
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     """Delete an invoice together with its items, payments and share links."""
     get_invoice_or_404(db, user_id, invoice_id)
     data_access.delete(db, Invoice, id=invoice_id, user_id=user_id)
     db.commit()
     logger.info("Deleted invoice %s", invoice_id)
     return None


# ---------------------------------------------------------------------------
# Status toggle
# ---------------------------------------------------------------------------

@router.patch(
     "/{invoice_id}/mark-paid",
     response_model=InvoiceResponse,
     summary="Mark invoice as paid"
)
def mark_invoice_paid(
     invoice_id: int,
     body: Optional[MarkPaidRequest] = None,
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     invoice = get_invoice_or_404(db, user_id, invoice_id)
     body = body or MarkPaidRequest()
     InvoiceService.mark_paid(
          db,
          invoice,
          body.payment_method.value if body.payment_method else None,
          body.payment_remarks,
     )
     db.commit()
     db.refresh(invoice)
     return _build_invoice_response(invoice)


@router.patch(
     "/{invoice_id}/mark-unpaid",
     response_model=InvoiceResponse,
     summary="Mark invoice as unpaid"
)
def mark_invoice_unpaid(
     invoice_id: int,
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     invoice = get_invoice_or_404(db, user_id, invoice_id)
     InvoiceService.mark_unpaid(db, invoice)
     db.commit()
     db.refresh(invoice)
     return _build_invoice_response(invoice)


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------

@router.get(
     "/{invoice_id}/document",
     response_model=InvoiceDocument,
     summary="Get the renderable invoice document"
)
def get_invoice_document(
     invoice_id: int,
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     invoice = get_invoice_or_404(db, user_id, invoice_id)
     return InvoiceService.load_invoice_document(db, invoice)


@router.get("/{invoice_id}/pdf", summary="Export invoice as PDF")
def export_invoice_pdf(
     invoice_id: int,
     request: Request,
     mode: RenderMode = Query(RenderMode.DOWNLOAD, description="preview, download or raster"),
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     """
     Export the invoice as `invoice-{number}.pdf`.

     - **preview**: served inline
     - **download**: served as an attachment
     - **raster**: page bitmaps embedded in a PDF, served as an attachment
     """
     invoice = get_invoice_or_404(db, user_id, invoice_id)
     return render_pdf_response(db, invoice, mode, request)
