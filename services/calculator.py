# services/calculator.py
"""
Invoice total calculation.

subtotal   = sum(quantity * unit_price)
tax_amount = subtotal * tax_rate / 100
total      = subtotal + tax_amount

Amounts are Decimals and are never rounded here; rounding to two places is
a display concern (see services.invoice_renderer.format_amount).
"""
from decimal import Decimal
from typing import Any, Iterable, NamedTuple, Sequence, Union

Number = Union[Decimal, int, float, str]

ZERO = Decimal("0")
HUNDRED = Decimal("100")

# Largest scales accepted on input; see models.invoice.MONEY.
QUANTITY_PLACES = 4
PRICE_PLACES = 4
TAX_RATE_PLACES = 2


class InvoiceValidationError(ValueError):
     """Raised when an invoice cannot be created from the given line items."""

     def __init__(self, field: str, message: str):
          super().__init__(message)
          self.field = field
          self.message = message


class InvoiceTotals(NamedTuple):
     subtotal: Decimal
     tax_amount: Decimal
     total: Decimal


def to_decimal(value: Number) -> Decimal:
     """Convert through str so floats keep their printed value (0.1 -> Decimal('0.1'))."""
     if isinstance(value, Decimal):
          return value
     return Decimal(str(value))


def _field(item: Any, name: str) -> Any:
     if isinstance(item, dict):
          return item[name]
     return getattr(item, name)


def line_amount(quantity: Number, unit_price: Number) -> Decimal:
     return to_decimal(quantity) * to_decimal(unit_price)


def calculate_totals(items: Iterable[Any], tax_rate: Number = 0) -> InvoiceTotals:
     """
     Compute subtotal, tax and total for line items.

     Args:
          items: objects or dicts exposing quantity and unit_price
          tax_rate: tax percentage (e.g. 21 for 21%)

     Raises:
          ValueError: if a quantity, price or the tax rate is negative
     """
     rate = to_decimal(tax_rate if tax_rate is not None else 0)
     if rate < ZERO:
          raise ValueError("tax_rate must not be negative")

     subtotal = ZERO
     for item in items:
          quantity = to_decimal(_field(item, "quantity"))
          unit_price = to_decimal(_field(item, "unit_price"))
          if quantity < ZERO or unit_price < ZERO:
               raise ValueError("quantity and unit_price must not be negative")
          subtotal += quantity * unit_price

     tax_amount = subtotal * rate / HUNDRED
     return InvoiceTotals(subtotal=subtotal, tax_amount=tax_amount, total=subtotal + tax_amount)


def decimal_places(value: Number) -> int:
     """Number of fractional digits, ignoring trailing zeros (1.2500 -> 2)."""
     exponent = to_decimal(value).normalize().as_tuple().exponent
     return max(0, -exponent) if isinstance(exponent, int) else 0


def validate_line_items(items: Sequence[Any], tax_rate: Number = 0) -> None:
     """
     Reject item lists an invoice cannot be created from.

     Quantities and prices are limited to QUANTITY_PLACES and PRICE_PLACES,
     and the tax rate to TAX_RATE_PLACES, so the stored line amounts and
     totals equal the values recomputed from the stored rows.

     Raises:
          InvoiceValidationError: if the list is empty, any item has a
               non-positive quantity or unit price, or a value has more
               decimals than can be stored
     """
     if not items:
          raise InvoiceValidationError("items", "An invoice needs at least one line item")

     for index, item in enumerate(items):
          quantity = to_decimal(_field(item, "quantity"))
          unit_price = to_decimal(_field(item, "unit_price"))
          if quantity <= ZERO:
               raise InvoiceValidationError(f"items.{index}.quantity", "Quantity must be greater than zero")
          if unit_price <= ZERO:
               raise InvoiceValidationError(f"items.{index}.unit_price", "Unit price must be greater than zero")
          if decimal_places(quantity) > QUANTITY_PLACES:
               raise InvoiceValidationError(
                    f"items.{index}.quantity", f"Quantity allows at most {QUANTITY_PLACES} decimals"
               )
          if decimal_places(unit_price) > PRICE_PLACES:
               raise InvoiceValidationError(
                    f"items.{index}.unit_price", f"Unit price allows at most {PRICE_PLACES} decimals"
               )

     if tax_rate is not None and decimal_places(tax_rate) > TAX_RATE_PLACES:
          raise InvoiceValidationError("tax_rate", f"Tax rate allows at most {TAX_RATE_PLACES} decimals")
