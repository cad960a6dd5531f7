# schemas/__init__.py
from .company import CompanyCreate, CompanyUpdate, CompanyResponse
from .customer import CustomerCreate, CustomerUpdate, CustomerResponse
from .document import InvoiceDocument
from .invoice import (
     InvoiceCreate,
     InvoiceUpdate,
     InvoiceResponse,
     InvoiceListResponse,
     MarkPaidRequest,
)
from .payment import PaymentCreate, PaymentResponse, PaymentHistoryResponse
from .share import ShareCreate, ShareResponse

__all__ = [
     "CompanyCreate",
     "CompanyUpdate",
     "CompanyResponse",
     "CustomerCreate",
     "CustomerUpdate",
     "CustomerResponse",
     "InvoiceDocument",
     "InvoiceCreate",
     "InvoiceUpdate",
     "InvoiceResponse",
     "InvoiceListResponse",
     "MarkPaidRequest",
     "PaymentCreate",
     "PaymentResponse",
     "PaymentHistoryResponse",
     "ShareCreate",
     "ShareResponse",
]
