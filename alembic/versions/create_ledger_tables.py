"""create_ledger_tables

Revision ID: create_ledger_tables
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = 'create_ledger_tables'
down_revision = None
branch_labels = None
depends_on = None

# SQLAlchemy stores enum member names, not their display values
entry_type = sa.Enum('income', 'expense', name='entrytype')
# categories reuses the type created with the entries table
existing_entry_type = postgresql.ENUM('income', 'expense', name='entrytype', create_type=False)
project_status = sa.Enum('under_discussion', 'in_progress', 'completed', name='projectstatus')
bill_type = sa.Enum('original', 'duplicate', name='billtype')
document_type = sa.Enum('invoice', 'estimate', 'quotation', name='documenttype')
client_title = sa.Enum('mr', 'ms', 'none', name='clienttitle')
item_unit = sa.Enum('sft', 'lump', 'ls', name='itemunit')


def _uuid():
    return postgresql.UUID(as_uuid=True)


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', _uuid(), primary_key=True),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('hashed_password', sa.String(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('is_superuser', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('username', sa.String(), nullable=True, unique=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'projects',
        sa.Column('id', _uuid(), primary_key=True),
        sa.Column('user_id', _uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('description', sa.String(length=500), nullable=True),
        sa.Column('budget', sa.Float(), nullable=False, server_default='0'),
        sa.Column('status', project_status, nullable=False, server_default='under_discussion'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('budget >= 0', name='ck_projects_budget_non_negative'),
    )
    op.create_index('ix_projects_user_id', 'projects', ['user_id'])

    op.create_table(
        'entries',
        sa.Column('id', _uuid(), primary_key=True),
        sa.Column('user_id', _uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('project_id', _uuid(), sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('type', entry_type, nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('category', sa.String(length=100), nullable=False),
        sa.Column('description', sa.String(length=255), nullable=True),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('is_shared_expense', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('original_amount', sa.Float(), nullable=True),
        sa.Column('batch_id', _uuid(), nullable=True),
        sa.Column('is_income_from_other_project', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('source_project_id', _uuid(), sa.ForeignKey('projects.id', ondelete='SET NULL'), nullable=True),
        sa.Column('transfer_entry_id', _uuid(), sa.ForeignKey('entries.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint(
            'NOT (is_shared_expense AND is_income_from_other_project)',
            name='ck_entries_single_origin',
        ),
    )
    op.create_index('ix_entries_user_id', 'entries', ['user_id'])
    op.create_index('ix_entries_project_id', 'entries', ['project_id'])
    op.create_index('ix_entries_batch_id', 'entries', ['batch_id'])

    op.create_table(
        'categories',
        sa.Column('id', _uuid(), primary_key=True),
        sa.Column('user_id', _uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('type', existing_entry_type, nullable=False),
        sa.Column('category', sa.String(length=100), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('user_id', 'type', 'category', name='uq_categories_user_type_category'),
    )

    op.create_table(
        'interior_bills',
        sa.Column('id', _uuid(), primary_key=True),
        sa.Column('user_id', _uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('bill_number', sa.String(length=50), nullable=False, unique=True),
        sa.Column('bill_type', bill_type, nullable=False),
        sa.Column('original_bill_id', _uuid(), sa.ForeignKey('interior_bills.id', ondelete='SET NULL'), nullable=True),
        sa.Column('document_type', document_type, nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('title', client_title, nullable=False),
        sa.Column('client_name', sa.String(length=150), nullable=False),
        sa.Column('client_email', sa.String(length=150), nullable=False),
        sa.Column('client_phone', sa.String(length=30), nullable=False),
        sa.Column('client_address', sa.String(length=500), nullable=False),
        sa.Column('grand_total', sa.Float(), nullable=False, server_default='0'),
        sa.Column('discount', sa.Float(), nullable=False, server_default='0'),
        sa.Column('final_amount', sa.Float(), nullable=False, server_default='0'),
        sa.Column('company_details', sa.JSON(), nullable=True),
        sa.Column('payment_terms', sa.JSON(), nullable=False),
        sa.Column('terms_and_conditions', sa.JSON(), nullable=False),
        sa.Column('project_id', _uuid(), sa.ForeignKey('projects.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_interior_bills_user_id', 'interior_bills', ['user_id'])

    op.create_table(
        'interior_items',
        sa.Column('id', _uuid(), primary_key=True),
        sa.Column('bill_id', _uuid(), sa.ForeignKey('interior_bills.id', ondelete='CASCADE'), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('particular', sa.String(length=255), nullable=False),
        sa.Column('description', sa.String(length=1000), nullable=True),
        sa.Column('unit', item_unit, nullable=False),
        sa.Column('quantity', sa.Float(), nullable=False, server_default='1'),
        sa.Column('width', sa.Float(), nullable=True),
        sa.Column('height', sa.Float(), nullable=True),
        sa.Column('depth', sa.Float(), nullable=True),
        sa.Column('square_feet', sa.Float(), nullable=True),
        sa.Column('price_per_unit', sa.Float(), nullable=False),
        sa.Column('total', sa.Float(), nullable=False, server_default='0'),
        sa.Column('discount_item', sa.Float(), nullable=False, server_default='0'),
        sa.Column('net_total', sa.Float(), nullable=False, server_default='0'),
    )

    op.create_table(
        'payment_bills',
        sa.Column('id', _uuid(), primary_key=True),
        sa.Column('user_id', _uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('bill_number', sa.String(length=50), nullable=False, unique=True),
        sa.Column('project_id', _uuid(), sa.ForeignKey('projects.id', ondelete='CASCADE'), nullable=False),
        sa.Column('amount_received', sa.Float(), nullable=False),
        sa.Column('recognized_income', sa.Float(), nullable=False, server_default='0'),
        sa.Column('remaining_amount', sa.Float(), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('notes', sa.String(length=1000), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_payment_bills_user_id', 'payment_bills', ['user_id'])


def downgrade() -> None:
    op.drop_table('payment_bills')
    op.drop_table('interior_items')
    op.drop_table('interior_bills')
    op.drop_table('categories')
    op.drop_table('entries')
    op.drop_table('projects')
    op.drop_table('users')
    for enum_type in (item_unit, client_title, document_type, bill_type, project_status, entry_type):
        enum_type.drop(op.get_bind(), checkfirst=True)
