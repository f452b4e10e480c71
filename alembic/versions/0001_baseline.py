"""Baseline migration - users, cases, leads, calls and finance tables

Revision ID: 0001_baseline
Revises:
Create Date: 2026-10-19

Creates every table of the recovery CRM. Written with op.create_table so
the same revision runs on PostgreSQL and SQLite.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_baseline'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _money() -> sa.Numeric:
    return sa.Numeric(12, 2, asdecimal=False)


def upgrade() -> None:
    """Create all tables."""

    # ==========================================================================
    # Users & Attendance
    # ==========================================================================
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('username', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('phone', sa.String(20), nullable=False),
        sa.Column('role', sa.String(20), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('assigned_cases', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_assignment_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('username', name='uq_users_username'),
        sa.UniqueConstraint('email', name='uq_users_email'),
    )
    op.create_index('idx_users_role', 'users', ['role'])

    op.create_table(
        'attendance_logs',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('login_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('logout_time', sa.DateTime(timezone=True), nullable=True),
        sa.Column('log_date', sa.String(10), nullable=False),
        *_timestamps(),
    )
    op.create_index('idx_attendance_user_login', 'attendance_logs', ['user_id', 'login_time'])

    # ==========================================================================
    # Leads & Calls
    # ==========================================================================
    op.create_table(
        'followups',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('time', sa.String(50), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(20), nullable=False),
        sa.Column('response', sa.Text(), nullable=False, server_default=''),
        sa.Column('issue_type', sa.String(255), nullable=False, server_default=''),
        sa.Column('village', sa.String(255), nullable=False, server_default=''),
        sa.Column('status', sa.String(30), nullable=False),
        sa.Column('callback_time', sa.String(50), nullable=False, server_default=''),
        sa.Column('created_by', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        *_timestamps(),
    )
    op.create_index('idx_followups_created', 'followups', ['created_at'])

    op.create_table(
        'call_logs',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('time', sa.String(50), nullable=False),
        sa.Column('customer', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(20), nullable=False),
        sa.Column('duration', sa.String(50), nullable=False, server_default=''),
        sa.Column('status', sa.String(30), nullable=False),
        sa.Column('response', sa.Text(), nullable=False, server_default=''),
        sa.Column('callback_time', sa.String(50), nullable=False, server_default=''),
        sa.Column('created_by', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        *_timestamps(),
    )
    op.create_index('idx_call_logs_created', 'call_logs', ['created_at'])

    # ==========================================================================
    # Customers (cases) & Requests
    # ==========================================================================
    op.create_table(
        'customers',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('case_number', sa.Integer(), nullable=False),
        sa.Column('case_id', sa.String(20), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(10), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('aadhaar', sa.String(12), nullable=True),
        sa.Column('pan', sa.String(10), nullable=True),
        sa.Column('cibil', sa.Integer(), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('problem', sa.Text(), nullable=False),
        sa.Column('bank', sa.String(255), nullable=True),
        sa.Column('other_bank', sa.String(255), nullable=True),
        sa.Column('loan_type', sa.String(50), nullable=True),
        sa.Column('account_number', sa.String(18), nullable=True),
        sa.Column('issues', sa.JSON(), nullable=False),
        sa.Column('page_number', sa.Integer(), nullable=True),
        sa.Column('referred_person', sa.String(255), nullable=True),
        sa.Column('telecaller_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('telecaller_name', sa.String(255), nullable=True),
        sa.Column(
            'converted_from_lead_id', sa.Uuid(),
            sa.ForeignKey('followups.id', ondelete='SET NULL'), nullable=True,
        ),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('priority', sa.String(10), nullable=False),
        sa.Column('assigned_to', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('assigned_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('resolved_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('amount', _money(), nullable=True),
        sa.Column('total_amount', _money(), nullable=True),
        sa.Column('advance_amount', _money(), nullable=True),
        sa.Column('payment_status', sa.String(20), nullable=False),
        sa.Column('cibil_before', sa.Integer(), nullable=True),
        sa.Column('cibil_after', sa.Integer(), nullable=True),
        sa.Column('documents', sa.JSON(), nullable=False),
        sa.Column('notes', sa.JSON(), nullable=False),
        sa.Column('call_history', sa.JSON(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('case_number', name='uq_customer_case_number'),
        sa.UniqueConstraint('case_id', name='uq_customer_case_id'),
        sa.CheckConstraint('cibil IS NULL OR cibil BETWEEN 300 AND 900', name='ck_customer_cibil'),
        sa.CheckConstraint(
            'cibil_before IS NULL OR cibil_before BETWEEN 300 AND 900', name='ck_customer_cibil_before'
        ),
        sa.CheckConstraint(
            'cibil_after IS NULL OR cibil_after BETWEEN 300 AND 900', name='ck_customer_cibil_after'
        ),
    )
    op.create_index('idx_customers_status', 'customers', ['status'])
    op.create_index('idx_customers_assigned_to', 'customers', ['assigned_to'])
    op.create_index('idx_customers_created', 'customers', ['created_at'])

    op.create_table(
        'case_requests',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('customer_id', sa.Uuid(), sa.ForeignKey('customers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('agent_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        sa.Column('agent_name', sa.String(255), nullable=True),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('admin_response', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('idx_case_requests_customer', 'case_requests', ['customer_id'])

    # ==========================================================================
    # Finance
    # ==========================================================================
    op.create_table(
        'offers',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('customer_id', sa.Uuid(), sa.ForeignKey('customers.id', ondelete='CASCADE'), nullable=False),
        sa.Column('agent_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('deal_amount', _money(), nullable=False),
        sa.Column('advance_paid', _money(), nullable=False, server_default='0'),
        sa.Column('pending_amount', _money(), nullable=False, server_default='0'),
        sa.Column('case_status', sa.String(20), nullable=False),
        sa.Column('payment_status', sa.String(20), nullable=False),
        sa.Column('payment_proof_url', sa.String(500), nullable=True),
        sa.Column('notes', sa.String(500), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('customer_id', name='uq_offer_customer'),
        sa.CheckConstraint('deal_amount >= 0', name='ck_offer_deal_amount'),
        sa.CheckConstraint('advance_paid >= 0', name='ck_offer_advance_paid'),
    )
    op.create_index('idx_offers_agent', 'offers', ['agent_id'])

    op.create_table(
        'payments',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('customer', sa.String(255), nullable=False),
        sa.Column('case_id', sa.String(50), nullable=False),
        sa.Column('amount', _money(), nullable=False),
        sa.Column('date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('method', sa.String(30), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('proof', sa.String(500), nullable=True),
        sa.Column('created_by', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('amount >= 0', name='ck_payment_amount'),
    )
    op.create_index('idx_payments_date', 'payments', ['date'])

    op.create_table(
        'expenses',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('date', sa.String(20), nullable=False),
        sa.Column('amount', _money(), nullable=False),
        sa.Column('advance', _money(), nullable=False, server_default='0'),
        sa.Column('type', sa.String(100), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        *_timestamps(),
    )
    op.create_index('idx_expenses_user', 'expenses', ['user_id'])

    # ==========================================================================
    # Partners & Field Visits
    # ==========================================================================
    op.create_table(
        'referrals',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(20), nullable=False),
        sa.Column('cases', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('success_rate', sa.String(20), nullable=False, server_default='0%'),
        sa.Column('commission', sa.String(50), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        'field_data',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('bank_name', sa.String(255), nullable=True),
        sa.Column('bank_area', sa.String(255), nullable=True),
        sa.Column('manager_name', sa.String(255), nullable=True),
        sa.Column('manager_phone', sa.String(20), nullable=True),
        sa.Column('manager_type', sa.String(100), nullable=True),
        sa.Column('executive_code', sa.String(100), nullable=True),
        sa.Column('collection_data', sa.Text(), nullable=True),
        sa.Column('created_by', sa.Uuid(), sa.ForeignKey('users.id', ondelete='SET NULL'), nullable=True),
        *_timestamps(),
    )
    op.create_index('idx_field_data_created_by', 'field_data', ['created_by'])


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    for table in (
        'field_data',
        'referrals',
        'expenses',
        'payments',
        'offers',
        'case_requests',
        'customers',
        'call_logs',
        'followups',
        'attendance_logs',
        'users',
    ):
        op.drop_table(table)
