# routers/shares.py
"""
Invoice sharing.

Authenticated:
- POST /api/invoices/{invoice_id}/shares          issue a public link
- POST /api/invoices/{invoice_id}/share/message   pre-filled text + compose link
- POST /api/invoices/{invoice_id}/share/email     e-mail the PDF to the customer

Public (no token; the share token is the only credential):
- GET /invoice/share/{token}        invoice document
- GET /invoice/share/{token}/pdf    invoice PDF
"""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from auth import get_current_user_id
from database import get_session
from models import Invoice
from routers.invoices import get_invoice_or_404, render_pdf_response
from schemas.document import InvoiceDocument
from schemas.share import (
     ShareCreate,
     ShareEmailRequest,
     ShareEmailResponse,
     ShareMessageResponse,
     ShareResponse,
)
from services import data_access, share_service
from services.invoice_renderer import RenderMode, render_invoice
from services.invoice_service import InvoiceService
from services.logo_service import fetch_logo
from utils.email import send_invoice_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/invoices", tags=["shares"])
public_router = APIRouter(prefix="/invoice/share", tags=["public"])


@router.post(
     "/{invoice_id}/shares",
     response_model=ShareResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Create a public share link"
)
def create_share(
     invoice_id: int,
     body: ShareCreate = ShareCreate(),
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     """
     Issue a new share token. Earlier tokens for the invoice remain valid.

     - **expires_in_days**: link lifetime (defaults to the configured TTL)
     - **never_expires**: issue a link without expiry
     """
     get_invoice_or_404(db, user_id, invoice_id)
     share = share_service.issue_share(db, invoice_id, body.expires_in_days, body.never_expires)
     db.commit()
     return ShareResponse(
          invoice_id=invoice_id,
          token=share.token,
          expires_at=share.expires_at,
          url=share_service.share_url(share.token),
     )


@router.post(
     "/{invoice_id}/share/message",
     response_model=ShareMessageResponse,
     summary="Compose a share message"
)
def compose_share_message(
     invoice_id: int,
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     invoice = get_invoice_or_404(db, user_id, invoice_id)
     document = InvoiceService.load_invoice_document(db, invoice)
     message = share_service.compose_share_message(document)
     return ShareMessageResponse(
          message=message,
          compose_url=share_service.compose_link(message),
          filename=document.filename,
     )


@router.post(
     "/{invoice_id}/share/email",
     response_model=ShareEmailResponse,
     summary="E-mail the invoice PDF"
)
def email_invoice(
     invoice_id: int,
     body: ShareEmailRequest = ShareEmailRequest(),
     db: Session = Depends(get_session),
     user_id: int = Depends(get_current_user_id)
):
     """Send the downloaded PDF as an attachment, to the customer unless another address is given."""
     invoice = get_invoice_or_404(db, user_id, invoice_id)
     document = InvoiceService.load_invoice_document(db, invoice)
     to_email = body.to_email or document.customer.email
     if not to_email:
          raise HTTPException(
               status_code=status.HTTP_400_BAD_REQUEST,
               detail="Customer has no e-mail address"
          )

     rendered = render_invoice(document, RenderMode.DOWNLOAD, logo=fetch_logo(document.company.logo_url))
     try:
          send_invoice_email(
               to_email,
               subject=f"Invoice #{document.header.invoice_number} from {document.company.name}",
               message=share_service.compose_share_message(document),
               filename=rendered.filename,
               pdf=rendered.content,
          )
     except RuntimeError as e:
          logger.error("Failed to e-mail invoice %s: %s", invoice_id, e)
          raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to send e-mail")

     return ShareEmailResponse(sent_to=to_email, filename=rendered.filename)


# ---------------------------------------------------------------------------
# Public routes
# ---------------------------------------------------------------------------

def _shared_invoice_or_error(db: Session, token: str) -> Invoice:
     try:
          invoice_id = share_service.resolve_share(db, token)
     except share_service.ShareExpired as e:
          raise HTTPException(status_code=status.HTTP_410_GONE, detail=str(e))
     except share_service.ShareNotFound as e:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

     invoice = data_access.select_one(db, Invoice, id=invoice_id)
     if invoice is None:
          raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Share link not found")
     return invoice


@public_router.get("/{token}", response_model=InvoiceDocument, summary="View a shared invoice")
def view_shared_invoice(token: str, db: Session = Depends(get_session)):
     invoice = _shared_invoice_or_error(db, token)
     return InvoiceService.load_invoice_document(db, invoice)


@public_router.get("/{token}/pdf", summary="Download a shared invoice")
def download_shared_invoice(
     token: str,
     request: Request,
     mode: RenderMode = Query(RenderMode.DOWNLOAD, description="preview, download or raster"),
     db: Session = Depends(get_session)
):
     invoice = _shared_invoice_or_error(db, token)
     return render_pdf_response(db, invoice, mode, request)
