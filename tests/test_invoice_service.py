from datetime import date, timedelta
from decimal import Decimal

import pytest

from models import Invoice, InvoiceItem, InvoicePayment, InvoiceShare
from models.invoice import InvoiceStatus
from models.invoice_payment import PaymentMethod
from schemas.invoice import InvoiceCreate, InvoiceItemCreate
from schemas.payment import PaymentCreate
from services import data_access
from services.calculator import InvoiceValidationError
from services.invoice_service import InvoiceService, RecordNotFound
from services.share_service import issue_share


def invoice_data(seeded, items, tax_rate=Decimal("21")):
     # model_construct skips request validation so the service's own checks run
     return InvoiceCreate.model_construct(
          company_id=seeded["company"].id,
          customer_id=seeded["customer"].id,
          due_date=date.today() + timedelta(days=14),
          date=None,
          invoice_number=None,
          currency="eur",
          tax_type="VAT",
          tax_rate=tax_rate,
          notes=None,
          items=items,
     )


def item(quantity, unit_price):
     return InvoiceItemCreate.model_construct(
          description="Work",
          quantity=Decimal(str(quantity)),
          unit_price=Decimal(str(unit_price)),
     )


def payment(amount, method=PaymentMethod.BANK_TRANSFER):
     return PaymentCreate(amount=Decimal(str(amount)), payment_date=date.today(), payment_method=method)


def test_create_invoice_computes_totals_and_defaults(db, seeded):
     invoice = InvoiceService.create_invoice(db, seeded["user"].id, invoice_data(seeded, [item(2, 50), item(1, 100)]))
     db.commit()

     assert invoice.subtotal == Decimal("200")
     assert invoice.tax_amount == Decimal("42")
     assert invoice.total == Decimal("242")
     assert invoice.status == InvoiceStatus.UNPAID
     assert invoice.currency == "EUR"
     assert invoice.date == date.today()
     assert invoice.invoice_number.startswith("INV-")
     assert len(data_access.select(db, InvoiceItem, invoice_id=invoice.id)) == 2


def test_invalid_items_write_nothing(db, seeded):
     before = db.query(Invoice).count()
     with pytest.raises(InvoiceValidationError) as exc:
          InvoiceService.create_invoice(db, seeded["user"].id, invoice_data(seeded, [item(0, 10)]))
     assert exc.value.field == "items.0.quantity"
     assert db.query(Invoice).count() == before
     assert db.query(InvoiceItem).count() == 2  # only the seeded invoice's items


def test_empty_items_rejected(db, seeded):
     with pytest.raises(InvoiceValidationError):
          InvoiceService.create_invoice(db, seeded["user"].id, invoice_data(seeded, []))


def test_foreign_company_is_not_found(db, seeded):
     with pytest.raises(RecordNotFound):
          InvoiceService.create_invoice(db, seeded["user"].id + 1, invoice_data(seeded, [item(1, 1)]))


def test_cumulative_payments_mark_invoice_paid(db, seeded):
     invoice = seeded["invoice"]
     invoice.total = Decimal("100")
     db.commit()

     InvoiceService.record_payment(db, invoice, payment(30))
     summary = InvoiceService.payment_summary(db, invoice)
     assert invoice.status == InvoiceStatus.UNPAID
     assert summary.total_paid == Decimal("30")
     assert summary.balance_due == Decimal("70")

     InvoiceService.record_payment(db, invoice, payment(70, PaymentMethod.CASH))
     summary = InvoiceService.payment_summary(db, invoice)
     assert invoice.status == InvoiceStatus.PAID
     assert invoice.payment_method == "cash"
     assert summary.balance_due == Decimal("0")

     with pytest.raises(InvoiceValidationError):
          InvoiceService.record_payment(db, invoice, payment(1))


def test_mark_unpaid_clears_payment_details(db, seeded):
     invoice = seeded["invoice"]
     InvoiceService.mark_paid(db, invoice, "bank_transfer", "Paid in full")
     assert invoice.status == InvoiceStatus.PAID
     assert invoice.payment_remarks == "Paid in full"

     InvoiceService.mark_unpaid(db, invoice)
     assert invoice.status == InvoiceStatus.UNPAID
     assert invoice.payment_method is None
     assert invoice.payment_remarks is None


def test_delete_invoice_without_children(db, seeded):
     invoice = Invoice(
          user_id=seeded["user"].id,
          company_id=seeded["company"].id,
          customer_id=seeded["customer"].id,
          invoice_number="INV-EMPTY",
          date=date.today(),
          due_date=date.today(),
     )
     db.add(invoice)
     db.commit()

     assert data_access.delete(db, Invoice, id=invoice.id, user_id=seeded["user"].id) == 1
     db.commit()
     assert data_access.select_one(db, Invoice, id=invoice.id) is None


def test_delete_invoice_removes_items_payments_and_shares(db, seeded):
     invoice = seeded["invoice"]
     InvoiceService.record_payment(db, invoice, payment(10))
     issue_share(db, invoice.id)
     db.commit()

     data_access.delete(db, Invoice, id=invoice.id)
     db.commit()

     assert db.query(InvoiceItem).filter_by(invoice_id=invoice.id).count() == 0
     assert db.query(InvoicePayment).filter_by(invoice_id=invoice.id).count() == 0
     assert db.query(InvoiceShare).filter_by(invoice_id=invoice.id).count() == 0


def test_delete_with_no_match_returns_zero(db, seeded):
     assert data_access.delete(db, Invoice, id=9999) == 0


def test_dashboard_stats(db, seeded):
     user_id = seeded["user"].id
     stats = InvoiceService.dashboard_stats(db, user_id)
     assert (stats.total_customers, stats.total_invoices, stats.paid_invoices) == (1, 1, 0)
     assert stats.total_revenue == Decimal("0")

     InvoiceService.mark_paid(db, seeded["invoice"])
     db.commit()
     stats = InvoiceService.dashboard_stats(db, user_id)
     assert stats.paid_invoices == 1
     assert stats.total_revenue == Decimal("242")
     assert InvoiceService.dashboard_stats(db, user_id, InvoiceStatus.UNPAID).invoices == []
