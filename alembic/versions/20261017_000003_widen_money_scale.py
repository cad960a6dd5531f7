"""Widen money columns to twelve fractional digits

Revision ID: 20261017_000003
Revises: 20261017_000002
Create Date: 2026-10-17

Line amounts and totals are stored unrounded. With quantities and unit
prices limited to four decimals and tax rates to two, every stored product
fits in scale 12 without rounding.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261017_000003'
down_revision: Union[str, None] = '20261017_000002'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

OLD_MONEY = sa.Numeric(precision=18, scale=6)
NEW_MONEY = sa.Numeric(precision=28, scale=12)

MONEY_COLUMNS = {
    'invoices': ('subtotal', 'tax_amount', 'total'),
    'invoice_items': ('unit_price', 'amount'),
    'invoice_payments': ('amount',),
}


def _retype(old_type, new_type) -> None:
    for table, columns in MONEY_COLUMNS.items():
        with op.batch_alter_table(table) as batch_op:
            for column in columns:
                batch_op.alter_column(column, existing_type=old_type, type_=new_type, existing_nullable=False)


def upgrade() -> None:
    _retype(OLD_MONEY, NEW_MONEY)


def downgrade() -> None:
    _retype(NEW_MONEY, OLD_MONEY)
