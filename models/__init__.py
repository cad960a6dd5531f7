# models/__init__.py
from .base import Base
from .user import User
from .company import Company
from .customer import Customer
from .invoice import Invoice, InvoiceItem, InvoiceStatus
from .invoice_payment import InvoicePayment, PaymentMethod
from .invoice_share import InvoiceShare
from .user_feedback import UserFeedback

__all__ = [
     "Base",
     "User",
     "Company",
     "Customer",
     "Invoice",
     "InvoiceItem",
     "InvoiceStatus",
     "InvoicePayment",
     "PaymentMethod",
     "InvoiceShare",
     "UserFeedback",
]
