# services/invoice_service.py
"""
Invoice Service - Business logic layer for invoice operations.

This service handles invoice creation, payments, status changes and the
dashboard figures, separate from the API layer. Methods flush but do not
commit; routers commit once the request's work is done.
"""
import logging
import time
from datetime import date
from decimal import Decimal
from typing import List, NamedTuple, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from models import Company, Customer, Invoice, InvoiceItem, InvoicePayment
from models.invoice import InvoiceStatus
from schemas.document import InvoiceDocument
from schemas.invoice import InvoiceCreate
from schemas.payment import PaymentCreate
from services import data_access
from services.calculator import InvoiceValidationError, calculate_totals, line_amount, validate_line_items
from services.document_builder import build_invoice_document

logger = logging.getLogger(__name__)


class RecordNotFound(LookupError):
     """A referenced record does not exist or is not owned by the caller."""


class PaymentSummary(NamedTuple):
     total: Decimal
     total_paid: Decimal
     balance_due: Decimal


class DashboardStats(NamedTuple):
     total_customers: int
     total_invoices: int
     paid_invoices: int
     total_revenue: Decimal
     invoices: List[Invoice]


def generate_invoice_number() -> str:
     return f"INV-{int(time.time() * 1000)}"


class InvoiceService:
     """Service class for invoice-related business logic."""

     @staticmethod
     def get_owned_invoice(db: Session, user_id: int, invoice_id: int) -> Invoice:
          """
          Fetch an invoice belonging to the user.

          Raises:
               RecordNotFound: if the invoice does not exist for this user
          """
          invoice = data_access.select_one(db, Invoice, id=invoice_id, user_id=user_id)
          if invoice is None:
               raise RecordNotFound(f"Invoice with ID {invoice_id} not found")
          return invoice

     @staticmethod
     def create_invoice(db: Session, user_id: int, data: InvoiceCreate) -> Invoice:
          """
          Create an invoice and its line items.

          Everything is checked before the first write, so a rejected request
          leaves no invoice or item rows behind.

          Args:
               db: SQLAlchemy database session
               user_id: owner of the new invoice
               data: validated request body

          Returns:
               Created Invoice object (flushed, not committed)

          Raises:
               RecordNotFound: company or customer is not the user's
               InvoiceValidationError: customer/company mismatch or bad items
          """
          company = data_access.select_one(db, Company, id=data.company_id, user_id=user_id)
          if company is None:
               raise RecordNotFound(f"Company with ID {data.company_id} not found")

          customer = data_access.select_one(db, Customer, id=data.customer_id, user_id=user_id)
          if customer is None:
               raise RecordNotFound(f"Customer with ID {data.customer_id} not found")
          if customer.company_id != company.id:
               raise InvoiceValidationError("customer_id", "Customer does not belong to the selected company")

          validate_line_items(data.items, data.tax_rate)
          totals = calculate_totals(data.items, data.tax_rate)

          invoice, = data_access.insert(db, Invoice, [{
               "user_id": user_id,
               "company_id": company.id,
               "customer_id": customer.id,
               "invoice_number": data.invoice_number or generate_invoice_number(),
               "date": data.date or date.today(),
               "due_date": data.due_date,
               "currency": data.currency.upper() if data.currency else None,
               "tax_type": data.tax_type,
               "tax_rate": data.tax_rate,
               "subtotal": totals.subtotal,
               "tax_amount": totals.tax_amount,
               "total": totals.total,
               "status": InvoiceStatus.UNPAID,
               "notes": data.notes,
          }])

          data_access.insert(db, InvoiceItem, [
               {
                    "invoice_id": invoice.id,
                    "description": item.description,
                    "quantity": item.quantity,
                    "unit_price": item.unit_price,
                    "amount": line_amount(item.quantity, item.unit_price),
               }
               for item in data.items
          ])
          db.refresh(invoice)

          logger.info("Created invoice %s (%s items, total %s)", invoice.invoice_number, len(data.items), totals.total)
          return invoice

     @staticmethod
     def payment_summary(db: Session, invoice: Invoice) -> PaymentSummary:
          paid = (
               db.query(func.coalesce(func.sum(InvoicePayment.amount), 0))
               .filter(InvoicePayment.invoice_id == invoice.id)
               .scalar()
          )
          total = Decimal(str(invoice.total))
          total_paid = Decimal(str(paid))
          return PaymentSummary(total=total, total_paid=total_paid, balance_due=max(total - total_paid, Decimal("0")))

     @staticmethod
     def record_payment(db: Session, invoice: Invoice, data: PaymentCreate) -> InvoicePayment:
          """
          Append a payment; the invoice becomes PAID once payments cover the total.

          Raises:
               InvoiceValidationError: if the invoice is already paid or cancelled
          """
          if invoice.status == InvoiceStatus.PAID:
               raise InvoiceValidationError("status", "Invoice already paid")
          if invoice.status == InvoiceStatus.CANCELLED:
               raise InvoiceValidationError("status", "Cannot record a payment on a cancelled invoice")

          payment, = data_access.insert(db, InvoicePayment, [{
               "invoice_id": invoice.id,
               "amount": data.amount,
               "payment_date": data.payment_date,
               "payment_method": data.payment_method.value,
               "payment_remarks": data.payment_remarks,
          }])

          summary = InvoiceService.payment_summary(db, invoice)
          if summary.total_paid >= summary.total:
               invoice.mark_as_paid(data.payment_method.value, data.payment_remarks)
               db.flush()
               logger.info("Invoice %s fully paid (%s received)", invoice.invoice_number, summary.total_paid)
          return payment

     @staticmethod
     def mark_paid(
          db: Session,
          invoice: Invoice,
          payment_method: Optional[str] = None,
          payment_remarks: Optional[str] = None
     ) -> Invoice:
          invoice.mark_as_paid(payment_method, payment_remarks)
          db.flush()
          return invoice

     @staticmethod
     def mark_unpaid(db: Session, invoice: Invoice) -> Invoice:
          invoice.mark_as_unpaid()
          db.flush()
          return invoice

     @staticmethod
     def load_invoice_document(db: Session, invoice: Invoice) -> InvoiceDocument:
          """Fetch items, company and customer for an invoice and build its document."""
          items = data_access.select(db, InvoiceItem, order_by=InvoiceItem.id, invoice_id=invoice.id)
          company = data_access.select_one(db, Company, id=invoice.company_id)
          customer = data_access.select_one(db, Customer, id=invoice.customer_id)
          if company is None or customer is None:
               raise RecordNotFound(f"Invoice {invoice.id} references a missing company or customer")
          return build_invoice_document(invoice, items, company, customer)

     @staticmethod
     def dashboard_stats(db: Session, user_id: int, status: Optional[InvoiceStatus] = None) -> DashboardStats:
          """
          Counts and revenue for the user's dashboard.

          Revenue is the sum of totals of paid invoices. The invoice list is
          optionally narrowed by status; the counts are not.
          """
          total_customers = db.query(func.count(Customer.id)).filter(Customer.user_id == user_id).scalar()
          invoice_query = db.query(Invoice).filter(Invoice.user_id == user_id)
          total_invoices = invoice_query.count()
          paid_query = invoice_query.filter(Invoice.status == InvoiceStatus.PAID)
          paid_invoices = paid_query.count()
          revenue = (
               db.query(func.coalesce(func.sum(Invoice.total), 0))
               .filter(Invoice.user_id == user_id, Invoice.status == InvoiceStatus.PAID)
               .scalar()
          )

          listed = invoice_query
          if status is not None:
               listed = listed.filter(Invoice.status == status)
          invoices = listed.order_by(Invoice.date.desc(), Invoice.id.desc()).all()

          return DashboardStats(
               total_customers=total_customers or 0,
               total_invoices=total_invoices,
               paid_invoices=paid_invoices,
               total_revenue=Decimal(str(revenue)),
               invoices=invoices,
          )
