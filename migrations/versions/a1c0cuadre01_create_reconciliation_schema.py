"""create reconciliation schema

Revision ID: a1c0cuadre01
Revises:
Create Date: 2026-10-19

"""

from alembic import op
import sqlalchemy as sa


revision = 'a1c0cuadre01'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'districts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('name', name='uq_districts_name'),
    )

    op.create_table(
        'branches',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('address', sa.String(length=255), nullable=True),
        sa.Column('district_id', sa.Integer(), sa.ForeignKey('districts.id'), nullable=True),
        sa.Column('attendance_days', sa.String(length=40), nullable=False, server_default='LU,MA,MI,JU,VI,SA'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('name', name='uq_branches_name'),
    )
    op.create_index('ix_branches_district_id', 'branches', ['district_id'], unique=False)

    op.create_table(
        'shift_types',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=60), nullable=False),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('name', name='uq_shift_types_name'),
    )

    op.create_table(
        'accounts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('number', sa.String(length=60), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('bank', sa.String(length=120), nullable=False),
        sa.Column('is_special', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('number', name='uq_accounts_number'),
    )

    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(length=80), nullable=False),
        sa.Column('full_name', sa.String(length=120), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_users_username', 'users', ['username'], unique=True)

    op.create_table(
        'shift_records',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('fecha', sa.Date(), nullable=False),
        sa.Column('branch_id', sa.Integer(), sa.ForeignKey('branches.id'), nullable=False),
        sa.Column('shift_type_id', sa.Integer(), sa.ForeignKey('shift_types.id'), nullable=False),
        sa.Column('correlativo_inicial', sa.Text(), nullable=True),
        sa.Column('correlativo_final', sa.Text(), nullable=True),
        sa.Column('account_id', sa.Integer(), sa.ForeignKey('accounts.id'), nullable=True),
        sa.Column('monto_depositado', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('venta_tarjeta', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('total_sistema', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('gastos', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('canjes', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('total_ventas', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('total_vendido', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('total_facturado', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('total_no_facturado', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('total_meta', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('observaciones', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('fecha', 'branch_id', 'shift_type_id', name='uq_shift_records_day_branch_shift'),
    )
    op.create_index('ix_shift_records_fecha', 'shift_records', ['fecha'], unique=False)
    op.create_index('ix_shift_records_branch_id', 'shift_records', ['branch_id'], unique=False)
    op.create_index('ix_shift_records_shift_type_id', 'shift_records', ['shift_type_id'], unique=False)
    op.create_index('ix_shift_records_account_id', 'shift_records', ['account_id'], unique=False)
    op.create_index('ix_shift_records_created_at', 'shift_records', ['created_at'], unique=False)
    op.create_index('ix_shift_records_fecha_branch', 'shift_records', ['fecha', 'branch_id'], unique=False)

    op.create_table(
        'monthly_goals',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('branch_id', sa.Integer(), sa.ForeignKey('branches.id'), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('month', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(12, 2), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('branch_id', 'year', 'month', name='uq_monthly_goals_branch_period'),
    )
    op.create_index('ix_monthly_goals_branch_id', 'monthly_goals', ['branch_id'], unique=False)


def downgrade():
    op.drop_index('ix_monthly_goals_branch_id', table_name='monthly_goals')
    op.drop_table('monthly_goals')

    op.drop_index('ix_shift_records_fecha_branch', table_name='shift_records')
    op.drop_index('ix_shift_records_created_at', table_name='shift_records')
    op.drop_index('ix_shift_records_account_id', table_name='shift_records')
    op.drop_index('ix_shift_records_shift_type_id', table_name='shift_records')
    op.drop_index('ix_shift_records_branch_id', table_name='shift_records')
    op.drop_index('ix_shift_records_fecha', table_name='shift_records')
    op.drop_table('shift_records')

    op.drop_index('ix_users_username', table_name='users')
    op.drop_table('users')
    op.drop_table('accounts')
    op.drop_table('shift_types')

    op.drop_index('ix_branches_district_id', table_name='branches')
    op.drop_table('branches')
    op.drop_table('districts')
