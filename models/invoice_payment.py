# models/invoice_payment.py
"""
InvoicePayment model - append-only record of money received against an invoice.

Payments are never updated; the invoice becomes PAID once the sum of its
payments reaches the invoice total.
"""
import enum

from sqlalchemy import Column, Integer, String, Text, Date, ForeignKey
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin
from .invoice import MONEY


class PaymentMethod(str, enum.Enum):
     CASH = "cash"
     BANK_TRANSFER = "bank_transfer"
     CREDIT_CARD = "credit_card"
     OTHER = "other"


class InvoicePayment(TimestampMixin, Base):

     id = Column(Integer, primary_key=True, autoincrement=True)
     invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True)
     amount = Column(MONEY, nullable=False)
     payment_date = Column(Date, nullable=False)
     payment_method = Column(String(50), nullable=False)
     payment_remarks = Column(Text, nullable=True)

     invoice = relationship("Invoice", back_populates="payments")

     def __repr__(self):
          return f"<InvoicePayment(id={self.id}, invoice_id={self.invoice_id}, amount={self.amount})>"
