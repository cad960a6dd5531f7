"""Add currency and tax fields to invoices

Revision ID: 20261017_000002
Revises: 20261017_000001
Create Date: 2026-10-17

Invoices created before this revision keep NULL currency/tax values; the
document builder applies the configured defaults and a zero rate for them.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261017_000002'
down_revision: Union[str, None] = '20261017_000001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column('invoices', sa.Column('currency', sa.String(length=3), nullable=True))
    op.add_column('invoices', sa.Column('tax_type', sa.String(length=50), nullable=True))
    op.add_column('invoices', sa.Column('tax_rate', sa.Numeric(precision=7, scale=4), nullable=True))


def downgrade() -> None:
    op.drop_column('invoices', 'tax_rate')
    op.drop_column('invoices', 'tax_type')
    op.drop_column('invoices', 'currency')
