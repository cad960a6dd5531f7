# services/document_builder.py
"""
Assembles the renderer-ready InvoiceDocument from pre-fetched records.

No database or network access happens here; callers fetch the invoice,
its items, company and customer first.
"""
from decimal import Decimal
from typing import Sequence

import config
from models import Company, Customer, Invoice, InvoiceItem
from schemas.document import (
     CompanyBlock,
     CustomerBlock,
     DocumentHeader,
     DocumentLine,
     DocumentTotals,
     InvoiceDocument,
)
from services.calculator import calculate_totals, line_amount, to_decimal


def build_invoice_document(
     invoice: Invoice,
     items: Sequence[InvoiceItem],
     company: Company,
     customer: Customer,
) -> InvoiceDocument:
     """
     Build the immutable document for one invoice.

     Totals are recomputed from the items so the document always satisfies
     total = subtotal + tax. Invoices stored before currency/tax fields
     existed get the configured defaults and a zero tax rate.
     """
     tax_rate = to_decimal(invoice.tax_rate) if invoice.tax_rate is not None else Decimal("0")
     totals = calculate_totals(items, tax_rate)

     header = DocumentHeader(
          invoice_number=invoice.invoice_number,
          issue_date=invoice.date,
          due_date=invoice.due_date,
          currency=invoice.currency or config.DEFAULT_CURRENCY,
          tax_label=invoice.tax_type or config.DEFAULT_TAX_TYPE,
          tax_rate=tax_rate,
     )

     lines = tuple(
          DocumentLine(
               description=item.description,
               quantity=to_decimal(item.quantity),
               unit_price=to_decimal(item.unit_price),
               tax_rate=tax_rate,
               amount=line_amount(item.quantity, item.unit_price),
          )
          for item in items
     )

     return InvoiceDocument(
          header=header,
          company=CompanyBlock(
               name=company.name,
               address=company.address,
               email=company.email,
               phone=company.phone,
               website=company.website,
               tax_id=company.tax_id,
               logo_url=company.logo_url,
               bank_name=company.bank_name,
               bank_account=company.bank_account,
          ),
          customer=CustomerBlock(
               name=customer.name,
               address=customer.address,
               email=customer.email,
               phone=customer.phone,
          ),
          items=lines,
          totals=DocumentTotals(
               subtotal=totals.subtotal,
               tax_amount=totals.tax_amount,
               total=totals.total,
          ),
          status=invoice.status,
          notes=invoice.notes,
     )
