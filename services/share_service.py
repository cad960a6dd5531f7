# services/share_service.py
"""
Public share links for invoices.

A share token grants unauthenticated read access to exactly one invoice.
Tokens are random (secrets.token_urlsafe) and carry an optional expiry;
expiry timestamps are naive UTC, matching the DateTime column.
"""
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional
from urllib.parse import quote

from sqlalchemy.orm import Session

import config
from models import InvoiceShare
from schemas.document import InvoiceDocument
from services import data_access
from services.invoice_renderer import format_amount

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32
COMPOSE_BASE_URL = "https://wa.me/"


class ShareError(LookupError):
     """Base class for share resolution failures."""


class ShareNotFound(ShareError):
     def __init__(self):
          super().__init__("Share link not found")


class ShareExpired(ShareError):
     def __init__(self):
          super().__init__("Share link has expired")


def _utcnow() -> datetime:
     return datetime.now(timezone.utc).replace(tzinfo=None)


def issue_share(
     db: Session,
     invoice_id: int,
     expires_in_days: Optional[int] = None,
     never_expires: bool = False,
) -> InvoiceShare:
     """
     Create a new share token for an invoice.

     Each call issues a distinct token; earlier tokens stay valid until they
     expire. The caller is responsible for checking invoice ownership.

     Args:
          db: SQLAlchemy database session
          invoice_id: invoice the token is bound to
          expires_in_days: lifetime in days; defaults to SHARE_LINK_TTL_DAYS
          never_expires: store no expiry at all
     """
     if never_expires:
          expires_at = None
     else:
          days = expires_in_days if expires_in_days is not None else config.SHARE_LINK_TTL_DAYS
          expires_at = _utcnow() + timedelta(days=days) if days > 0 else None

     share, = data_access.insert(db, InvoiceShare, [{
          "invoice_id": invoice_id,
          "token": secrets.token_urlsafe(TOKEN_BYTES),
          "expires_at": expires_at,
     }])
     logger.info("Issued share link for invoice %s (expires %s)", invoice_id, expires_at or "never")
     return share


def resolve_share(db: Session, token: str, now: Optional[datetime] = None) -> int:
     """
     Map a token to its invoice id.

     Raises:
          ShareNotFound: unknown token
          ShareExpired: the token's expiry is at or before now
     """
     share = data_access.select_one(db, InvoiceShare, token=token) if token else None
     if share is None:
          raise ShareNotFound()
     now = now or _utcnow()
     if share.expires_at is not None and share.expires_at <= now:
          raise ShareExpired()
     return share.invoice_id


def share_url(token: str) -> str:
     return f"{config.PUBLIC_BASE_URL}/invoice/share/{token}"


def compose_share_message(document: InvoiceDocument) -> str:
     """Pre-filled text for messaging apps."""
     header = document.header
     return (
          f"Invoice #{header.invoice_number} from {document.company.name}\n\n"
          f"Amount: {header.currency} {format_amount(document.totals.total)}\n"
          f"Due Date: {header.due_date.isoformat()}"
     )


def compose_link(message: str) -> str:
     """Web compose link used when the client cannot share files natively."""
     return f"{COMPOSE_BASE_URL}?text={quote(message, safe='')}"
