"""Initial schema

Revision ID: 0001
Revises:
Create Date: 2026-10-16 09:12:40.118204

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def _id_index(table):
    op.create_index(op.f(f'ix_{table}_id'), table, ['id'], unique=False)


def upgrade() -> None:
    """Upgrade database schema."""

    # Tenancy
    op.create_table('companies',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('type', sa.String(length=20), nullable=False),
        sa.Column('parent_id', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['parent_id'], ['companies.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name')
    )
    _id_index('companies')
    op.create_index(op.f('ix_companies_parent_id'), 'companies', ['parent_id'], unique=False)

    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=50), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('last_login', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    _id_index('users')
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

    op.create_table('owners',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('ownership_percentage', sa.Float(), nullable=False),
        sa.Column('initial_capital', sa.Float(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    _id_index('owners')

    # Assets and top-level finance records
    op.create_table('vessels',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('company_id', sa.Integer(), nullable=True),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('vessel_type', sa.String(length=100), nullable=True),
        sa.Column('purchase_price', sa.Float(), nullable=True),
        sa.Column('purchase_date', sa.Date(), nullable=True),
        sa.Column('paid_by_owner_id', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(length=30), nullable=False),
        sa.Column('current_location', sa.String(length=255), nullable=True),
        sa.Column('tonnage', sa.Float(), nullable=True),
        sa.Column('year_built', sa.Integer(), nullable=True),
        sa.Column('classification_status', sa.String(length=100), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['paid_by_owner_id'], ['owners.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    _id_index('vessels')
    op.create_index(op.f('ix_vessels_company_id'), 'vessels', ['company_id'], unique=False)
    op.create_index(op.f('ix_vessels_name'), 'vessels', ['name'], unique=False)
    op.create_index(op.f('ix_vessels_paid_by_owner_id'), 'vessels', ['paid_by_owner_id'], unique=False)

    op.create_table('land_purchases',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('company_id', sa.Integer(), nullable=True),
        sa.Column('land_name', sa.String(length=255), nullable=False),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('purchase_price', sa.Float(), nullable=True),
        sa.Column('purchase_date', sa.Date(), nullable=True),
        sa.Column('paid_by_owner_id', sa.Integer(), nullable=True),
        sa.Column('estimated_tonnage', sa.Float(), nullable=True),
        sa.Column('remaining_tonnage', sa.Float(), nullable=True),
        sa.Column('scrap_tonnage_sold', sa.Float(), nullable=False),
        sa.Column('status', sa.String(length=30), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['paid_by_owner_id'], ['owners.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    _id_index('land_purchases')
    op.create_index(op.f('ix_land_purchases_company_id'), 'land_purchases', ['company_id'], unique=False)
    op.create_index(op.f('ix_land_purchases_paid_by_owner_id'), 'land_purchases', ['paid_by_owner_id'], unique=False)

    op.create_table('employees',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('company_id', sa.Integer(), nullable=True),
        sa.Column('employee_code', sa.String(length=50), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('position', sa.String(length=100), nullable=True),
        sa.Column('department', sa.String(length=100), nullable=True),
        sa.Column('hire_date', sa.Date(), nullable=True),
        sa.Column('salary', sa.Float(), nullable=True),
        sa.Column('salary_type', sa.String(length=20), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('emergency_contact', sa.String(length=255), nullable=True),
        sa.Column('emergency_phone', sa.String(length=50), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('employee_code')
    )
    _id_index('employees')
    op.create_index(op.f('ix_employees_company_id'), 'employees', ['company_id'], unique=False)

    op.create_table('expenses',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('company_id', sa.Integer(), nullable=True),
        sa.Column('expense_type', sa.String(length=100), nullable=False),
        sa.Column('category', sa.String(length=100), nullable=True),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('vendor_name', sa.String(length=255), nullable=True),
        sa.Column('project_id', sa.Integer(), nullable=True),
        sa.Column('project_type', sa.String(length=20), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('payment_method', sa.String(length=50), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('paid_date', sa.Date(), nullable=True),
        sa.Column('paid_by_owner_id', sa.Integer(), nullable=True),
        sa.Column('reference_id', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['paid_by_owner_id'], ['owners.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    _id_index('expenses')
    for column in ('company_id', 'date', 'project_id', 'project_type', 'paid_by_owner_id', 'reference_id'):
        op.create_index(op.f(f'ix_expenses_{column}'), 'expenses', [column], unique=False)

    op.create_table('income_records',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('company_id', sa.Integer(), nullable=True),
        sa.Column('income_date', sa.Date(), nullable=False),
        sa.Column('income_type', sa.String(length=50), nullable=False),
        sa.Column('source_type', sa.String(length=50), nullable=True),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('payment_method', sa.String(length=50), nullable=True),
        sa.Column('reference_id', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    _id_index('income_records')
    for column in ('company_id', 'income_date', 'reference_id'):
        op.create_index(op.f(f'ix_income_records_{column}'), 'income_records', [column], unique=False)

    op.create_table('invoices',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('invoice_number', sa.String(length=50), nullable=False),
        sa.Column('company_id', sa.Integer(), nullable=True),
        sa.Column('invoice_type', sa.String(length=20), nullable=False),
        sa.Column('client_name', sa.String(length=255), nullable=False),
        sa.Column('client_address', sa.Text(), nullable=True),
        sa.Column('client_phone', sa.String(length=50), nullable=True),
        sa.Column('client_email', sa.String(length=255), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('subtotal', sa.Float(), nullable=False),
        sa.Column('apply_tax', sa.Boolean(), nullable=False),
        sa.Column('tax_rate', sa.Float(), nullable=False),
        sa.Column('tax', sa.Float(), nullable=False),
        sa.Column('total', sa.Float(), nullable=False),
        sa.Column('status', sa.String(length=30), nullable=False),
        sa.Column('payment_date', sa.Date(), nullable=True),
        sa.Column('payment_method', sa.String(length=50), nullable=True),
        sa.Column('deposit_amount', sa.Float(), nullable=False),
        sa.Column('deposit_date', sa.Date(), nullable=True),
        sa.Column('deposit_payment_method', sa.String(length=50), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    _id_index('invoices')
    op.create_index(op.f('ix_invoices_invoice_number'), 'invoices', ['invoice_number'], unique=True)
    op.create_index(op.f('ix_invoices_company_id'), 'invoices', ['company_id'], unique=False)

    # Vessel children
    op.create_table('vessel_scrap_sales',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('vessel_id', sa.Integer(), nullable=False),
        sa.Column('sale_date', sa.Date(), nullable=False),
        sa.Column('buyer_name', sa.String(length=255), nullable=True),
        sa.Column('quantity_tons', sa.Float(), nullable=False),
        sa.Column('price_per_ton', sa.Float(), nullable=False),
        sa.Column('total_amount', sa.Float(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['vessel_id'], ['vessels.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    _id_index('vessel_scrap_sales')
    op.create_index(op.f('ix_vessel_scrap_sales_vessel_id'), 'vessel_scrap_sales', ['vessel_id'], unique=False)

    op.create_table('vessel_equipment_sales',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('vessel_id', sa.Integer(), nullable=False),
        sa.Column('equipment_name', sa.String(length=255), nullable=False),
        sa.Column('sale_date', sa.Date(), nullable=False),
        sa.Column('buyer_name', sa.String(length=255), nullable=True),
        sa.Column('sale_price', sa.Float(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['vessel_id'], ['vessels.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    _id_index('vessel_equipment_sales')
    op.create_index(op.f('ix_vessel_equipment_sales_vessel_id'), 'vessel_equipment_sales', ['vessel_id'], unique=False)

    op.create_table('vessel_rentals',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('vessel_id', sa.Integer(), nullable=False),
        sa.Column('customer_name', sa.String(length=255), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('total_amount', sa.Float(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('payment_status', sa.String(length=20), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['vessel_id'], ['vessels.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    _id_index('vessel_rentals')
    op.create_index(op.f('ix_vessel_rentals_vessel_id'), 'vessel_rentals', ['vessel_id'], unique=False)

    op.create_table('vessel_overhaul_projects',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('vessel_id', sa.Integer(), nullable=False),
        sa.Column('company_id', sa.Integer(), nullable=True),
        sa.Column('project_name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('total_budget', sa.Float(), nullable=True),
        sa.Column('total_spent', sa.Float(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['vessel_id'], ['vessels.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    _id_index('vessel_overhaul_projects')
    op.create_index(op.f('ix_vessel_overhaul_projects_vessel_id'), 'vessel_overhaul_projects', ['vessel_id'], unique=False)
    op.create_index(op.f('ix_vessel_overhaul_projects_company_id'), 'vessel_overhaul_projects', ['company_id'], unique=False)

    op.create_table('overhaul_tasks',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('project_id', sa.Integer(), nullable=False),
        sa.Column('company_id', sa.Integer(), nullable=True),
        sa.Column('task_name', sa.String(length=255), nullable=False),
        sa.Column('component_type', sa.String(length=50), nullable=False),
        sa.Column('repair_type', sa.String(length=50), nullable=False),
        sa.Column('contractor_name', sa.String(length=255), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=True),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('estimated_cost', sa.Float(), nullable=True),
        sa.Column('actual_cost', sa.Float(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['project_id'], ['vessel_overhaul_projects.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    _id_index('overhaul_tasks')
    op.create_index(op.f('ix_overhaul_tasks_project_id'), 'overhaul_tasks', ['project_id'], unique=False)

    # Crew and payroll
    op.create_table('crew_assignments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('vessel_id', sa.Integer(), nullable=False),
        sa.Column('employee_id', sa.Integer(), nullable=False),
        sa.Column('role', sa.String(length=100), nullable=True),
        sa.Column('assignment_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['vessel_id'], ['vessels.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['employee_id'], ['employees.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    _id_index('crew_assignments')
    op.create_index(op.f('ix_crew_assignments_vessel_id'), 'crew_assignments', ['vessel_id'], unique=False)
    op.create_index(op.f('ix_crew_assignments_employee_id'), 'crew_assignments', ['employee_id'], unique=False)

    op.create_table('crew_certifications',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('employee_id', sa.Integer(), nullable=False),
        sa.Column('certification_name', sa.String(length=255), nullable=False),
        sa.Column('certificate_number', sa.String(length=100), nullable=True),
        sa.Column('issuing_authority', sa.String(length=255), nullable=True),
        sa.Column('issue_date', sa.Date(), nullable=True),
        sa.Column('expiry_date', sa.Date(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['employee_id'], ['employees.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    _id_index('crew_certifications')
    op.create_index(op.f('ix_crew_certifications_employee_id'), 'crew_certifications', ['employee_id'], unique=False)
    op.create_index(op.f('ix_crew_certifications_expiry_date'), 'crew_certifications', ['expiry_date'], unique=False)

    op.create_table('salary_payments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('employee_id', sa.Integer(), nullable=False),
        sa.Column('payment_date', sa.Date(), nullable=False),
        sa.Column('period', sa.String(length=20), nullable=True),
        sa.Column('base_amount', sa.Float(), nullable=False),
        sa.Column('bonuses', sa.Float(), nullable=False),
        sa.Column('deductions', sa.Float(), nullable=False),
        sa.Column('total_amount', sa.Float(), nullable=False),
        sa.Column('payment_method', sa.String(length=50), nullable=True),
        sa.Column('paid_by_owner_id', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['employee_id'], ['employees.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['paid_by_owner_id'], ['owners.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    _id_index('salary_payments')
    op.create_index(op.f('ix_salary_payments_employee_id'), 'salary_payments', ['employee_id'], unique=False)
    op.create_index(op.f('ix_salary_payments_paid_by_owner_id'), 'salary_payments', ['paid_by_owner_id'], unique=False)

    op.create_table('maintenance_schedules',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('vessel_id', sa.Integer(), nullable=False),
        sa.Column('maintenance_type', sa.String(length=30), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('scheduled_date', sa.Date(), nullable=False),
        sa.Column('completed_date', sa.Date(), nullable=True),
        sa.Column('estimated_cost', sa.Float(), nullable=True),
        sa.Column('actual_cost', sa.Float(), nullable=True),
        sa.Column('priority', sa.String(length=20), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['vessel_id'], ['vessels.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    _id_index('maintenance_schedules')
    op.create_index(op.f('ix_maintenance_schedules_vessel_id'), 'maintenance_schedules', ['vessel_id'], unique=False)
    op.create_index(op.f('ix_maintenance_schedules_scheduled_date'), 'maintenance_schedules', ['scheduled_date'], unique=False)

    # Scrap land children
    op.create_table('land_scrap_sales',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('land_id', sa.Integer(), nullable=False),
        sa.Column('company_id', sa.Integer(), nullable=True),
        sa.Column('sale_date', sa.Date(), nullable=False),
        sa.Column('buyer_name', sa.String(length=255), nullable=True),
        sa.Column('quantity_tons', sa.Float(), nullable=False),
        sa.Column('price_per_ton', sa.Float(), nullable=False),
        sa.Column('total_amount', sa.Float(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['land_id'], ['land_purchases.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['company_id'], ['companies.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    _id_index('land_scrap_sales')
    op.create_index(op.f('ix_land_scrap_sales_land_id'), 'land_scrap_sales', ['land_id'], unique=False)

    op.create_table('land_equipment',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('land_id', sa.Integer(), nullable=False),
        sa.Column('equipment_name', sa.String(length=255), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('estimated_value', sa.Float(), nullable=True),
        sa.Column('sale_price', sa.Float(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['land_id'], ['land_purchases.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    _id_index('land_equipment')
    op.create_index(op.f('ix_land_equipment_land_id'), 'land_equipment', ['land_id'], unique=False)

    # Invoice lines, linked to land stock
    op.create_table('invoice_items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('invoice_id', sa.Integer(), nullable=False),
        sa.Column('item_type', sa.String(length=30), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('quantity', sa.Float(), nullable=False),
        sa.Column('unit', sa.String(length=20), nullable=True),
        sa.Column('unit_price', sa.Float(), nullable=False),
        sa.Column('total_price', sa.Float(), nullable=False),
        sa.Column('land_equipment_id', sa.Integer(), nullable=True),
        sa.Column('land_id', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['invoice_id'], ['invoices.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['land_equipment_id'], ['land_equipment.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['land_id'], ['land_purchases.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    _id_index('invoice_items')
    op.create_index(op.f('ix_invoice_items_invoice_id'), 'invoice_items', ['invoice_id'], unique=False)

    # Owner equity
    op.create_table('capital_contributions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('contribution_date', sa.Date(), nullable=False),
        sa.Column('contribution_type', sa.String(length=50), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['owner_id'], ['owners.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    _id_index('capital_contributions')
    op.create_index(op.f('ix_capital_contributions_owner_id'), 'capital_contributions', ['owner_id'], unique=False)

    op.create_table('capital_withdrawals',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('withdrawal_date', sa.Date(), nullable=False),
        sa.Column('withdrawal_type', sa.String(length=50), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['owner_id'], ['owners.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    _id_index('capital_withdrawals')
    op.create_index(op.f('ix_capital_withdrawals_owner_id'), 'capital_withdrawals', ['owner_id'], unique=False)

    op.create_table('owner_distributions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('distribution_date', sa.Date(), nullable=False),
        sa.Column('source_type', sa.String(length=50), nullable=False),
        sa.Column('source_id', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['owner_id'], ['owners.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    _id_index('owner_distributions')
    op.create_index(op.f('ix_owner_distributions_owner_id'), 'owner_distributions', ['owner_id'], unique=False)
    op.create_index(op.f('ix_owner_distributions_source_id'), 'owner_distributions', ['source_id'], unique=False)

    op.create_table('payment_splits',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('expense_id', sa.Integer(), nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        sa.Column('amount_paid', sa.Float(), nullable=False),
        sa.Column('payment_date', sa.Date(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['expense_id'], ['expenses.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['owner_id'], ['owners.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    _id_index('payment_splits')
    op.create_index(op.f('ix_payment_splits_expense_id'), 'payment_splits', ['expense_id'], unique=False)
    op.create_index(op.f('ix_payment_splits_owner_id'), 'payment_splits', ['owner_id'], unique=False)


def downgrade() -> None:
    """Downgrade database schema."""
    # Children first; dropping a table drops its indexes
    for table in (
        'payment_splits', 'owner_distributions', 'capital_withdrawals', 'capital_contributions',
        'invoice_items', 'land_equipment', 'land_scrap_sales', 'maintenance_schedules',
        'salary_payments', 'crew_certifications', 'crew_assignments', 'overhaul_tasks',
        'vessel_overhaul_projects', 'vessel_rentals', 'vessel_equipment_sales', 'vessel_scrap_sales',
        'invoices', 'income_records', 'expenses', 'employees', 'land_purchases', 'vessels',
        'owners', 'users', 'companies',
    ):
        op.drop_table(table)
