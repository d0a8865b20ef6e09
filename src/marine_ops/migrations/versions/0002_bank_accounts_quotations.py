"""Bank accounts and quotations

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-17 10:04:18.553102

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0002'
down_revision = '0001'
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def _id_index(table):
    op.create_index(op.f(f'ix_{table}_id'), table, ['id'], unique=False)


# Columns naming the account money moved through, per table
ACCOUNT_COLUMNS = {
    'expenses': ('bank_account_id',),
    'income_records': ('bank_account_id',),
    'invoices': ('payment_bank_account_id', 'deposit_bank_account_id', 'deposit_refund_bank_account_id'),
}


def upgrade() -> None:
    """Upgrade database schema."""

    # Banking
    op.create_table('bank_accounts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('company_id', sa.Integer(), nullable=True),
        sa.Column('account_name', sa.String(length=255), nullable=False),
        sa.Column('bank_name', sa.String(length=255), nullable=True),
        sa.Column('account_number', sa.String(length=100), nullable=True),
        sa.Column('account_type', sa.String(length=20), nullable=False),
        sa.Column('currency', sa.String(length=10), nullable=False),
        sa.Column('opening_balance', sa.Float(), nullable=False),
        sa.Column('opening_date', sa.Date(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('account_name')
    )
    _id_index('bank_accounts')
    op.create_index(op.f('ix_bank_accounts_company_id'), 'bank_accounts', ['company_id'], unique=False)

    op.create_table('bank_transfers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('from_account_id', sa.Integer(), nullable=False),
        sa.Column('to_account_id', sa.Integer(), nullable=True),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('transfer_date', sa.Date(), nullable=False),
        sa.Column('transfer_type', sa.String(length=20), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['from_account_id'], ['bank_accounts.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['to_account_id'], ['bank_accounts.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    _id_index('bank_transfers')
    for column in ('from_account_id', 'to_account_id'):
        op.create_index(op.f(f'ix_bank_transfers_{column}'), 'bank_transfers', [column], unique=False)

    op.create_table('bank_balance_records',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('bank_account_id', sa.Integer(), nullable=False),
        sa.Column('recorded_date', sa.Date(), nullable=False),
        sa.Column('manual_balance', sa.Float(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['bank_account_id'], ['bank_accounts.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    _id_index('bank_balance_records')
    op.create_index(op.f('ix_bank_balance_records_bank_account_id'), 'bank_balance_records',
                    ['bank_account_id'], unique=False)

    # Batch mode rebuilds the table on SQLite, which cannot add foreign keys in place
    for table, columns in ACCOUNT_COLUMNS.items():
        with op.batch_alter_table(table) as batch_op:
            for column in columns:
                batch_op.add_column(sa.Column(column, sa.Integer(), nullable=True))
                batch_op.create_foreign_key(
                    f'fk_{table}_{column}', 'bank_accounts', [column], ['id'], ondelete='SET NULL'
                )
    for table in ('expenses', 'income_records'):
        op.create_index(op.f(f'ix_{table}_bank_account_id'), table, ['bank_account_id'], unique=False)

    # Quotations
    op.create_table('quotations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('quotation_number', sa.String(length=50), nullable=False),
        sa.Column('company_id', sa.Integer(), nullable=True),
        sa.Column('client_name', sa.String(length=255), nullable=False),
        sa.Column('client_address', sa.Text(), nullable=True),
        sa.Column('client_phone', sa.String(length=50), nullable=True),
        sa.Column('client_email', sa.String(length=255), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('valid_until', sa.Date(), nullable=True),
        sa.Column('subtotal', sa.Float(), nullable=False),
        sa.Column('apply_tax', sa.Boolean(), nullable=False),
        sa.Column('tax_rate', sa.Float(), nullable=False),
        sa.Column('tax', sa.Float(), nullable=False),
        sa.Column('total', sa.Float(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('payment_terms', sa.Text(), nullable=True),
        sa.Column('deposit_percent', sa.Float(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('converted_to_invoice_id', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['converted_to_invoice_id'], ['invoices.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    _id_index('quotations')
    op.create_index(op.f('ix_quotations_quotation_number'), 'quotations', ['quotation_number'], unique=True)
    for column in ('company_id', 'converted_to_invoice_id'):
        op.create_index(op.f(f'ix_quotations_{column}'), 'quotations', [column], unique=False)

    op.create_table('quotation_items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('quotation_id', sa.Integer(), nullable=False),
        sa.Column('item_type', sa.String(length=30), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('quantity', sa.Float(), nullable=False),
        sa.Column('unit', sa.String(length=20), nullable=True),
        sa.Column('unit_price', sa.Float(), nullable=False),
        sa.Column('total_price', sa.Float(), nullable=False),
        sa.Column('land_equipment_id', sa.Integer(), nullable=True),
        sa.Column('land_id', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['quotation_id'], ['quotations.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['land_equipment_id'], ['land_equipment.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['land_id'], ['land_purchases.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    _id_index('quotation_items')
    op.create_index(op.f('ix_quotation_items_quotation_id'), 'quotation_items', ['quotation_id'], unique=False)


def downgrade() -> None:
    """Downgrade database schema."""
    op.drop_table('quotation_items')
    op.drop_table('quotations')

    for table in ('expenses', 'income_records'):
        op.drop_index(op.f(f'ix_{table}_bank_account_id'), table_name=table)
    for table, columns in ACCOUNT_COLUMNS.items():
        with op.batch_alter_table(table) as batch_op:
            for column in columns:
                batch_op.drop_constraint(f'fk_{table}_{column}', type_='foreignkey')
                batch_op.drop_column(column)

    for table in ('bank_balance_records', 'bank_transfers', 'bank_accounts'):
        op.drop_table(table)
