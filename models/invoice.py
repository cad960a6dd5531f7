# models/invoice.py
import enum
from datetime import date
from typing import Optional

from sqlalchemy import Column, Integer, String, Text, Numeric, Date, ForeignKey, Enum
from sqlalchemy.orm import relationship
from .base import Base, TimestampMixin


class InvoiceStatus(str, enum.Enum):
     """
     Enumeration for invoice status.

     Only UNPAID <-> PAID is reachable through the payment flows; SENT,
     OVERDUE and CANCELLED can be set explicitly by the owner.
     """
     UNPAID = "unpaid"
     SENT = "sent"
     PAID = "paid"
     OVERDUE = "overdue"
     CANCELLED = "cancelled"


# Twelve fractional digits hold quantity (4) x unit price (4) x tax rate (2) / 100
# exactly; rounding to cents happens when rendered.
MONEY = Numeric(28, 12)


class Invoice(TimestampMixin, Base):
     """
     Invoice model - header, party references and computed totals.

     Invariant: total = subtotal + tax_amount,
     tax_amount = subtotal * tax_rate / 100,
     subtotal = sum(item.quantity * item.unit_price).
     """

     id = Column(Integer, primary_key=True, autoincrement=True)

     # Foreign keys
     user_id = Column(Integer, ForeignKey("users.id", ondelete="NO ACTION"), nullable=False, index=True)
     company_id = Column(
          Integer,
          ForeignKey("companies.id", ondelete="NO ACTION"),
          nullable=False,
          index=True
     )
     customer_id = Column(
          Integer,
          ForeignKey("customers.id", ondelete="CASCADE"),
          nullable=False,
          index=True
     )

     # Header
     invoice_number = Column(String(64), nullable=False, index=True)
     date = Column(Date, nullable=False)
     due_date = Column(Date, nullable=False, index=True)
     currency = Column(String(3), nullable=True)
     tax_type = Column(String(50), nullable=True)
     tax_rate = Column(Numeric(7, 4), nullable=True)

     # Totals
     subtotal = Column(MONEY, nullable=False, default=0)
     tax_amount = Column(MONEY, nullable=False, default=0)
     total = Column(MONEY, nullable=False, default=0)

     status = Column(
          Enum(
               InvoiceStatus,
               name="invoice_status",
               create_constraint=True,
               values_callable=lambda e: [m.value for m in e],
          ),
          default=InvoiceStatus.UNPAID,
          nullable=False,
          index=True
     )
     notes = Column(Text, nullable=True)
     payment_method = Column(String(50), nullable=True)
     payment_remarks = Column(Text, nullable=True)

     # Relationships
     company = relationship("Company", back_populates="invoices")
     customer = relationship("Customer", back_populates="invoices")
     items = relationship(
          "InvoiceItem",
          back_populates="invoice",
          cascade="all, delete-orphan",
          order_by="InvoiceItem.id"
     )
     payments = relationship(
          "InvoicePayment",
          back_populates="invoice",
          cascade="all, delete-orphan",
          order_by="InvoicePayment.id"
     )
     shares = relationship("InvoiceShare", back_populates="invoice", cascade="all, delete-orphan")

     def __repr__(self):
          return f"<Invoice(id={self.id}, number='{self.invoice_number}', status='{self.status.value}')>"

     @property
     def is_overdue(self) -> bool:
          """Display-only check: unpaid and past the due date."""
          return self.status == InvoiceStatus.UNPAID and self.due_date < date.today()

     def mark_as_paid(self, payment_method: Optional[str] = None, payment_remarks: Optional[str] = None) -> None:
          """Mark the invoice as paid, optionally recording how."""
          self.status = InvoiceStatus.PAID
          if payment_method is not None:
               self.payment_method = payment_method
          if payment_remarks is not None:
               self.payment_remarks = payment_remarks

     def mark_as_unpaid(self) -> None:
          """Reset to unpaid and clear the payment method and remarks."""
          self.status = InvoiceStatus.UNPAID
          self.payment_method = None
          self.payment_remarks = None


class InvoiceItem(Base):
     """Line item; amount = quantity * unit_price."""

     id = Column(Integer, primary_key=True, autoincrement=True)
     invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True)
     description = Column(Text, nullable=False)
     quantity = Column(Numeric(12, 4), nullable=False)
     unit_price = Column(MONEY, nullable=False)
     amount = Column(MONEY, nullable=False)

     invoice = relationship("Invoice", back_populates="items")

     def __repr__(self):
          return f"<InvoiceItem(id={self.id}, invoice_id={self.invoice_id}, amount={self.amount})>"
