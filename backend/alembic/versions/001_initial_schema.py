# backend/alembic/versions/001_initial_schema.py
"""Initial schema

Revision ID: 001
Revises: 
Create Date: 2026-01-01 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create accounts table
    op.create_table(
        'accounts',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('email', sa.String(255), unique=True, nullable=False, index=True),
        sa.Column('hashed_password', sa.String(255)),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('company_name', sa.String(255)),
        sa.Column('avatar_url', sa.String(500)),
        sa.Column('subscription', postgresql.JSON, server_default=sa.text("'{}'::json"), nullable=False),
        sa.Column('limits', postgresql.JSON, server_default=sa.text("'{}'::json"), nullable=False),
        sa.Column('stats', postgresql.JSON, server_default=sa.text("'{}'::json"), nullable=False),
        sa.Column('settings', postgresql.JSON, server_default=sa.text("'{}'::json"), nullable=False),
        sa.Column('is_active', sa.Boolean, default=True, nullable=False),
        sa.Column('email_verified', sa.Boolean, default=False, nullable=False),
        sa.Column('verification_token', sa.String(100)),
        sa.Column('last_login', sa.DateTime),
        sa.Column('created_at', sa.DateTime, nullable=False, index=True),
        sa.Column('updated_at', sa.DateTime, nullable=False),
    )

    # Create properties table
    op.create_table(
        'properties',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('accounts.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('property_type', sa.String(50), server_default=sa.text("'apartment'"), nullable=False),
        sa.Column('property_structure', sa.String(20), server_default=sa.text("'single_unit'"), nullable=False),
        sa.Column('status', sa.String(30), server_default=sa.text("'active'"), nullable=False, index=True),
        sa.Column('address', postgresql.JSON, server_default=sa.text("'{}'::json"), nullable=False),
        sa.Column('details', postgresql.JSON, server_default=sa.text("'{}'::json"), nullable=False),
        sa.Column('financial', postgresql.JSON, server_default=sa.text("'{}'::json"), nullable=False),
        sa.Column('tenants', postgresql.JSON, server_default=sa.text("'[]'::json"), nullable=False),
        sa.Column('images', postgresql.JSON, server_default=sa.text("'[]'::json"), nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=False, index=True),
        sa.Column('updated_at', sa.DateTime, nullable=False),
    )

    # Create tenants (renters) table
    op.create_table(
        'tenants',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('company_id', sa.String(36), sa.ForeignKey('accounts.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('property_id', sa.String(36), index=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(50)),
        sa.Column('address', sa.String(500)),
        sa.Column('emergency_contact', sa.String(255)),
        sa.Column('emergency_phone', sa.String(50)),
        sa.Column('notes', sa.Text),
        sa.Column('status', sa.String(20), server_default=sa.text("'active'"), nullable=False),
        sa.Column('deleted_at', sa.DateTime),
        sa.Column('rent_amount', sa.Float, server_default=sa.text("0"), nullable=False),
        sa.Column('rent_due_day', sa.Integer, server_default=sa.text("1"), nullable=False),
        sa.Column('security_deposit', sa.Float, server_default=sa.text("0"), nullable=False),
        sa.Column('lease_start', sa.Date),
        sa.Column('lease_end', sa.Date),
        sa.Column('audit_trail', postgresql.JSON, server_default=sa.text("'[]'::json"), nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=False, index=True),
        sa.Column('updated_at', sa.DateTime, nullable=False),
    )
    op.create_index('ix_tenants_company_status', 'tenants', ['company_id', 'status'])
    op.create_index('ix_tenants_company_email', 'tenants', ['company_id', 'email'])

    # Create quota counters table
    op.create_table(
        'account_usage',
        sa.Column('account_id', sa.String(36), sa.ForeignKey('accounts.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('resource', sa.String(30), primary_key=True),
        sa.Column('used', sa.Integer, server_default=sa.text("0"), nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=False, index=True),
        sa.Column('updated_at', sa.DateTime, nullable=False),
    )


def downgrade() -> None:
    op.drop_table('account_usage')
    op.drop_index('ix_tenants_company_email', table_name='tenants')
    op.drop_index('ix_tenants_company_status', table_name='tenants')
    op.drop_table('tenants')
    op.drop_table('properties')
    op.drop_table('accounts')
