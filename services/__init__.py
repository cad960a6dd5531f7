# services/__init__.py
from .calculator import InvoiceTotals, InvoiceValidationError, calculate_totals, validate_line_items
from .document_builder import build_invoice_document
from .invoice_service import InvoiceService, RecordNotFound
from .share_service import ShareError, ShareExpired, ShareNotFound, issue_share, resolve_share

__all__ = [
     "InvoiceTotals",
     "InvoiceValidationError",
     "calculate_totals",
     "validate_line_items",
     "build_invoice_document",
     "InvoiceService",
     "RecordNotFound",
     "ShareError",
     "ShareExpired",
     "ShareNotFound",
     "issue_share",
     "resolve_share",
]
