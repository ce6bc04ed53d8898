"""Initial Rentline schema

Revision ID: 001_initial
Revises:
Create Date: 2026-10-17

Money as INTEGER CENTS (BIGINT). Enum columns are VARCHAR(50) holding the
enum value, matching ``enum_column`` in app.core.database.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


UUID = postgresql.UUID(as_uuid=True)
JSONB = postgresql.JSONB()


def _id() -> sa.Column:
    return sa.Column('id', UUID, primary_key=True)


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    ]


def _fk(name: str, target: str, ondelete: str, nullable: bool = True, index: bool = False) -> sa.Column:
    return sa.Column(
        name, UUID, sa.ForeignKey(target, ondelete=ondelete), nullable=nullable, index=index
    )


def upgrade() -> None:
    # === USERS ===
    op.create_table(
        'users',
        _id(),
        sa.Column('firebase_uid', sa.String(128), unique=True, nullable=False, index=True),
        sa.Column('email', sa.String(255), unique=True, nullable=False, index=True),
        sa.Column('full_name', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('is_super_admin', sa.Boolean(), default=False),
        *_timestamps(),
    )

    # === BUSINESSES ===
    op.create_table(
        'businesses',
        _id(),
        sa.Column('business_name', sa.String(255), nullable=False),
        sa.Column('legal_name', sa.String(255), nullable=True),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('address', sa.Text(), nullable=True),
        sa.Column('currency_code', sa.String(3), default='CAD'),
        sa.Column('timezone', sa.String(50), default='America/Toronto'),
        sa.Column('status', sa.String(50), nullable=False, index=True),
        *_timestamps(),
    )

    op.create_table(
        'business_memberships',
        _id(),
        _fk('business_id', 'businesses.id', 'CASCADE', nullable=False, index=True),
        _fk('user_id', 'users.id', 'CASCADE', nullable=False, index=True),
        sa.Column('role', sa.String(50), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('business_id', 'user_id', name='uq_business_membership'),
    )

    # === PROPERTIES & UNITS ===
    op.create_table(
        'properties',
        _id(),
        _fk('business_id', 'businesses.id', 'CASCADE', nullable=False, index=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('property_type', sa.String(50), nullable=False),
        sa.Column('address_line1', sa.String(255), nullable=False),
        sa.Column('address_line2', sa.String(255), nullable=True),
        sa.Column('city', sa.String(100), nullable=False),
        sa.Column('state', sa.String(50), nullable=False),
        sa.Column('postal_code', sa.String(20), nullable=False),
        sa.Column('country', sa.String(50), default='CA'),
        sa.Column('year_built', sa.Integer(), nullable=True),
        sa.Column('square_feet', sa.Integer(), nullable=True),
        sa.Column('lot_size', sa.String(50), nullable=True),
        sa.Column('bedrooms', sa.Integer(), nullable=True),
        sa.Column('bathrooms', sa.Numeric(4, 1), nullable=True),
        sa.Column('purchase_price_cents', sa.BigInteger(), nullable=True),
        sa.Column('purchase_date', sa.Date(), nullable=True),
        sa.Column('current_value_cents', sa.BigInteger(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('public_page_enabled', sa.Boolean(), default=False),
        sa.Column('public_page_slug', sa.String(120), unique=True, nullable=True),
        sa.Column('accept_online_applications', sa.Boolean(), default=True),
        sa.Column('is_active', sa.Boolean(), default=True, index=True),
        _fk('created_by_id', 'users.id', 'SET NULL'),
        *_timestamps(),
    )

    op.create_table(
        'units',
        _id(),
        _fk('property_id', 'properties.id', 'CASCADE', nullable=False, index=True),
        sa.Column('unit_number', sa.String(50), nullable=False),
        sa.Column('unit_name', sa.String(255), nullable=True),
        sa.Column('bedrooms', sa.Integer(), nullable=True),
        sa.Column('bathrooms', sa.Numeric(4, 1), nullable=True),
        sa.Column('square_feet', sa.Integer(), nullable=True),
        sa.Column('floor_number', sa.Integer(), nullable=True),
        sa.Column('monthly_rent_cents', sa.BigInteger(), nullable=False),
        sa.Column('security_deposit_cents', sa.BigInteger(), nullable=False),
        sa.Column('utilities_included', JSONB, nullable=True),
        sa.Column('amenities', JSONB, nullable=True),
        sa.Column('occupancy_status', sa.String(50), nullable=False, index=True),
        sa.Column('available_date', sa.Date(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), default=True, index=True),
        *_timestamps(),
    )

    # === TENANTS & LEASES ===
    op.create_table(
        'tenants',
        _id(),
        _fk('unit_id', 'units.id', 'CASCADE', nullable=False, index=True),
        _fk('user_id', 'users.id', 'SET NULL'),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=False, index=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('emergency_contact_name', sa.String(255), nullable=True),
        sa.Column('emergency_contact_phone', sa.String(50), nullable=True),
        sa.Column('emergency_contact_relationship', sa.String(100), nullable=True),
        sa.Column('employer', sa.String(255), nullable=True),
        sa.Column('employer_phone', sa.String(50), nullable=True),
        sa.Column('monthly_income_cents', sa.BigInteger(), nullable=True),
        sa.Column('tenant_type', sa.String(50), nullable=False),
        sa.Column('lease_start_date', sa.Date(), nullable=True),
        sa.Column('lease_end_date', sa.Date(), nullable=True),
        sa.Column('monthly_rent_cents', sa.BigInteger(), nullable=True),
        sa.Column('security_deposit_paid_cents', sa.BigInteger(), default=0),
        sa.Column('move_in_date', sa.Date(), nullable=True),
        sa.Column('move_out_date', sa.Date(), nullable=True),
        sa.Column('has_portal_access', sa.Boolean(), default=True),
        sa.Column('portal_invite_sent_at', sa.DateTime(), nullable=True),
        sa.Column('portal_last_login_at', sa.DateTime(), nullable=True),
        sa.Column('status', sa.String(50), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), default=True, index=True),
        *_timestamps(),
    )

    op.create_table(
        'leases',
        _id(),
        _fk('unit_id', 'units.id', 'CASCADE', nullable=False, index=True),
        _fk('tenant_id', 'tenants.id', 'SET NULL', index=True),
        sa.Column('lease_type', sa.String(50), nullable=False),
        sa.Column('status', sa.String(50), nullable=False, index=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('monthly_rent_cents', sa.BigInteger(), nullable=False),
        sa.Column('security_deposit_cents', sa.BigInteger(), default=0),
        sa.Column('rent_due_day', sa.Integer(), default=1),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('activated_at', sa.DateTime(), nullable=True),
        sa.Column('terminated_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            'rent_due_day >= 1 AND rent_due_day <= 28',
            name='ck_lease_rent_due_day_range',
        ),
    )

    # === PAYMENTS & SETTINGS ===
    op.create_table(
        'rent_payments',
        _id(),
        _fk('tenant_id', 'tenants.id', 'CASCADE', nullable=False, index=True),
        _fk('lease_id', 'leases.id', 'SET NULL'),
        sa.Column('amount_cents', sa.BigInteger(), nullable=False),
        sa.Column('currency_code', sa.String(3), default='CAD'),
        sa.Column('payment_type', sa.String(50), nullable=False),
        sa.Column('payment_method', sa.String(50), nullable=True),
        sa.Column('status', sa.String(50), nullable=False, index=True),
        sa.Column('due_date', sa.Date(), nullable=True),
        sa.Column('paid_date', sa.Date(), nullable=True),
        sa.Column('gateway_payment_id', sa.String(100), nullable=True, index=True),
        sa.Column('receipt_url', sa.String(500), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'system_settings',
        _id(),
        sa.Column('setting_key', sa.String(100), unique=True, nullable=False, index=True),
        sa.Column('setting_value', sa.Text(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        _fk('updated_by_id', 'users.id', 'SET NULL'),
        *_timestamps(),
    )

    # === MAINTENANCE ===
    op.create_table(
        'maintenance_requests',
        _id(),
        _fk('unit_id', 'units.id', 'CASCADE', nullable=False, index=True),
        _fk('tenant_id', 'tenants.id', 'SET NULL', index=True),
        _fk('created_by_id', 'users.id', 'SET NULL'),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('category', sa.String(50), nullable=True),
        sa.Column('status', sa.String(50), nullable=False, index=True),
        sa.Column('priority', sa.String(50), nullable=False),
        sa.Column('estimated_cost_cents', sa.BigInteger(), nullable=True),
        sa.Column('actual_cost_cents', sa.BigInteger(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        *_timestamps(),
    )

    # === LISTINGS & APPLICATIONS ===
    op.create_table(
        'listings',
        _id(),
        _fk('business_id', 'businesses.id', 'CASCADE', nullable=False, index=True),
        _fk('property_id', 'properties.id', 'CASCADE', nullable=False, index=True),
        _fk('unit_id', 'units.id', 'CASCADE', index=True),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(50), nullable=False, index=True),
        sa.Column('slug', sa.String(200), unique=True, nullable=False),
        sa.Column('listing_code', sa.String(16), unique=True, nullable=False, index=True),
        sa.Column('available_date', sa.Date(), nullable=True),
        sa.Column('lease_term_months', sa.Integer(), nullable=True),
        sa.Column('monthly_rent_cents', sa.BigInteger(), nullable=False),
        sa.Column('deposit_cents', sa.BigInteger(), nullable=True),
        sa.Column('application_fee_cents', sa.BigInteger(), nullable=True),
        sa.Column('bedrooms', sa.Integer(), nullable=True),
        sa.Column('bathrooms', sa.Numeric(4, 1), nullable=True),
        sa.Column('square_feet', sa.Integer(), nullable=True),
        sa.Column('furnished', sa.Boolean(), default=False),
        sa.Column('pets_allowed', sa.Boolean(), default=False),
        sa.Column('pet_policy', sa.Text(), nullable=True),
        sa.Column('parking_spaces', sa.Integer(), default=0),
        sa.Column('amenities', JSONB, nullable=True),
        sa.Column('utilities_included', JSONB, nullable=True),
        sa.Column('photos', JSONB, nullable=True),
        sa.Column('accept_applications', sa.Boolean(), default=True),
        sa.Column('view_count', sa.Integer(), default=0),
        sa.Column('application_count', sa.Integer(), default=0),
        sa.Column('last_viewed_at', sa.DateTime(), nullable=True),
        sa.Column('published_at', sa.DateTime(), nullable=True),
        sa.Column('expires_at', sa.DateTime(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'rental_applications',
        _id(),
        _fk('listing_id', 'listings.id', 'CASCADE', nullable=False, index=True),
        _fk('business_id', 'businesses.id', 'CASCADE', nullable=False, index=True),
        _fk('property_id', 'properties.id', 'CASCADE', nullable=False),
        _fk('unit_id', 'units.id', 'SET NULL'),
        sa.Column('applicant_email', sa.String(255), nullable=False),
        sa.Column('applicant_first_name', sa.String(100), nullable=False),
        sa.Column('applicant_last_name', sa.String(100), nullable=False),
        sa.Column('applicant_phone', sa.String(50), nullable=True),
        sa.Column('responses', JSONB, nullable=True),
        sa.Column('status', sa.String(50), nullable=False, index=True),
        sa.Column('landlord_rating', sa.Integer(), nullable=True),
        sa.Column('landlord_notes', sa.Text(), nullable=True),
        sa.Column('submitted_at', sa.DateTime(), nullable=False),
        sa.Column('reviewed_at', sa.DateTime(), nullable=True),
        _fk('reviewed_by_id', 'users.id', 'SET NULL'),
        sa.Column('approved_at', sa.DateTime(), nullable=True),
        sa.Column('rejected_at', sa.DateTime(), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        _fk('converted_to_tenant_id', 'tenants.id', 'SET NULL'),
        sa.Column('converted_at', sa.DateTime(), nullable=True),
        *_timestamps(),
    )

    # === PACKAGES, FEATURES & ADD-ONS ===
    op.create_table(
        'package_tiers',
        _id(),
        sa.Column('tier_name', sa.String(100), nullable=False),
        sa.Column('tier_slug', sa.String(100), unique=True, nullable=False, index=True),
        sa.Column('display_name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('monthly_price_cents', sa.BigInteger(), default=0),
        sa.Column('annual_price_cents', sa.BigInteger(), default=0),
        sa.Column('package_type', sa.String(50), default='standard'),
        sa.Column('max_businesses', sa.Integer(), default=1),
        sa.Column('max_properties', sa.Integer(), default=5),
        sa.Column('max_units', sa.Integer(), default=10),
        sa.Column('max_tenants', sa.Integer(), default=10),
        sa.Column('max_users', sa.Integer(), default=1),
        sa.Column('max_payment_methods', sa.Integer(), default=1),
        sa.Column('features', JSONB, nullable=True),
        sa.Column('is_active', sa.Boolean(), default=True, index=True),
        sa.Column('is_featured', sa.Boolean(), default=False),
        sa.Column('display_order', sa.Integer(), default=0),
        sa.Column('version', sa.Integer(), default=1),
        *_timestamps(),
    )

    op.create_table(
        'business_package_settings',
        _id(),
        sa.Column(
            'business_id', UUID,
            sa.ForeignKey('businesses.id', ondelete='CASCADE'),
            unique=True, nullable=False,
        ),
        _fk('package_tier_id', 'package_tiers.id', 'SET NULL', index=True),
        sa.Column('custom_max_businesses', sa.Integer(), nullable=True),
        sa.Column('custom_max_properties', sa.Integer(), nullable=True),
        sa.Column('custom_max_units', sa.Integer(), nullable=True),
        sa.Column('custom_max_tenants', sa.Integer(), nullable=True),
        sa.Column('custom_max_users', sa.Integer(), nullable=True),
        sa.Column('custom_max_payment_methods', sa.Integer(), nullable=True),
        sa.Column('custom_features', JSONB, nullable=True),
        sa.Column('custom_monthly_price_cents', sa.BigInteger(), nullable=True),
        sa.Column('custom_annual_price_cents', sa.BigInteger(), nullable=True),
        sa.Column('has_custom_pricing', sa.Boolean(), default=False),
        sa.Column('has_custom_limits', sa.Boolean(), default=False),
        sa.Column('billing_cycle', sa.String(50), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'features',
        _id(),
        sa.Column('slug', sa.String(100), unique=True, nullable=False, index=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('feature_type', sa.String(50), nullable=False),
        sa.Column('category', sa.String(50), nullable=False),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('display_order', sa.Integer(), default=0),
        *_timestamps(),
    )

    op.create_table(
        'tier_features',
        _id(),
        _fk('tier_id', 'package_tiers.id', 'CASCADE', nullable=False, index=True),
        _fk('feature_id', 'features.id', 'CASCADE', nullable=False, index=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('tier_id', 'feature_id', name='uq_tier_feature'),
    )

    op.create_table(
        'tier_addons',
        _id(),
        _fk('tier_id', 'package_tiers.id', 'CASCADE', nullable=False, index=True),
        _fk('feature_id', 'features.id', 'CASCADE', nullable=False, index=True),
        sa.Column('price_cents', sa.BigInteger(), default=0),
        sa.Column('billing_period', sa.String(50), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('tier_id', 'feature_id', name='uq_tier_addon'),
    )

    op.create_table(
        'addon_products',
        _id(),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('addon_type', sa.String(50), nullable=False, index=True),
        sa.Column('quantity_per_unit', sa.Integer(), default=1),
        sa.Column('price_cents', sa.BigInteger(), nullable=False),
        sa.Column('billing_period', sa.String(50), nullable=False),
        _fk('feature_id', 'features.id', 'SET NULL'),
        sa.Column('is_active', sa.Boolean(), default=True),
        *_timestamps(),
    )

    op.create_table(
        'addon_purchases',
        _id(),
        _fk('business_id', 'businesses.id', 'CASCADE', nullable=False, index=True),
        _fk('addon_product_id', 'addon_products.id', 'CASCADE', nullable=False, index=True),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(50), nullable=False, index=True),
        sa.Column('purchased_at', sa.DateTime(), nullable=False),
        sa.Column('next_billing_date', sa.Date(), nullable=True),
        sa.Column('cancelled_at', sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('quantity > 0', name='ck_addon_purchase_quantity_positive'),
    )

    # === ACCOUNTING & BUDGETS ===
    op.create_table(
        'gl_accounts',
        _id(),
        _fk('business_id', 'businesses.id', 'CASCADE', nullable=False, index=True),
        sa.Column('account_number', sa.String(20), nullable=False),
        sa.Column('account_name', sa.String(255), nullable=False),
        sa.Column('account_type', sa.String(50), nullable=False, index=True),
        sa.Column('account_subtype', sa.String(100), nullable=True),
        _fk('parent_account_id', 'gl_accounts.id', 'SET NULL'),
        sa.Column('normal_balance', sa.String(50), nullable=False),
        sa.Column('is_header_account', sa.Boolean(), default=False),
        sa.Column('is_active', sa.Boolean(), default=True, index=True),
        sa.Column('description', sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('business_id', 'account_number', name='uq_gl_account_number'),
    )

    op.create_table(
        'gl_ledger',
        _id(),
        _fk('business_id', 'businesses.id', 'CASCADE', nullable=False, index=True),
        _fk('account_id', 'gl_accounts.id', 'CASCADE', nullable=False, index=True),
        sa.Column('posting_date', sa.Date(), nullable=False, index=True),
        sa.Column('debit_cents', sa.BigInteger(), nullable=False),
        sa.Column('credit_cents', sa.BigInteger(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('reference', sa.String(100), nullable=True),
        _fk('created_by_id', 'users.id', 'SET NULL'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            'debit_cents >= 0 AND credit_cents >= 0',
            name='ck_gl_ledger_non_negative',
        ),
    )

    op.create_table(
        'budgets',
        _id(),
        _fk('business_id', 'businesses.id', 'CASCADE', nullable=False, index=True),
        sa.Column('budget_name', sa.String(255), nullable=False),
        sa.Column('budget_code', sa.String(50), nullable=True),
        sa.Column('fiscal_year', sa.Integer(), nullable=False, index=True),
        sa.Column('budget_type', sa.String(50), nullable=False),
        _fk('property_id', 'properties.id', 'SET NULL'),
        sa.Column('currency_code', sa.String(3), default='CAD'),
        sa.Column('status', sa.String(50), nullable=False, index=True),
        sa.Column('approved_at', sa.DateTime(), nullable=True),
        _fk('approved_by_id', 'users.id', 'SET NULL'),
        sa.Column('notes', sa.Text(), nullable=True),
        _fk('created_by_id', 'users.id', 'SET NULL'),
        *_timestamps(),
    )

    op.create_table(
        'budget_items',
        _id(),
        _fk('budget_id', 'budgets.id', 'CASCADE', nullable=False, index=True),
        _fk('account_id', 'gl_accounts.id', 'CASCADE', nullable=False),
        *[sa.Column(f'period_{i}_cents', sa.BigInteger(), default=0) for i in range(1, 13)],
        sa.Column('annual_total_cents', sa.BigInteger(), default=0),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('budget_id', 'account_id', name='uq_budget_item_account'),
    )

    # === AFFILIATE PROGRAM ===
    op.create_table(
        'affiliate_settings',
        _id(),
        sa.Column('commission_type', sa.String(50), nullable=False),
        sa.Column('commission_percentage', sa.Integer(), nullable=False),
        sa.Column('recurring_months', sa.Integer(), nullable=True),
        sa.Column('minimum_payout_cents', sa.BigInteger(), nullable=False),
        sa.Column('payout_schedule', sa.String(50), nullable=False),
        sa.Column('attribution_window_days', sa.Integer(), nullable=False),
        sa.Column('cookie_duration_days', sa.Integer(), nullable=False),
        sa.Column('program_active', sa.Boolean(), default=True),
        sa.Column('require_approval', sa.Boolean(), default=True),
        sa.Column('allow_self_referral', sa.Boolean(), default=False),
        *_timestamps(),
    )

    op.create_table(
        'affiliates',
        _id(),
        sa.Column(
            'user_id', UUID,
            sa.ForeignKey('users.id', ondelete='CASCADE'),
            unique=True, nullable=False,
        ),
        sa.Column('referral_code', sa.String(50), unique=True, nullable=False, index=True),
        sa.Column('company_name', sa.String(255), nullable=True),
        sa.Column('website_url', sa.String(500), nullable=True),
        sa.Column('promotional_methods', sa.Text(), nullable=True),
        sa.Column('status', sa.String(50), nullable=False, index=True),
        sa.Column('approved_at', sa.DateTime(), nullable=True),
        _fk('approved_by_id', 'users.id', 'SET NULL'),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('suspension_reason', sa.Text(), nullable=True),
        sa.Column('payout_method', sa.String(50), nullable=True),
        sa.Column('payout_email', sa.String(255), nullable=True),
        sa.Column('bank_details', JSONB, nullable=True),
        sa.Column('total_clicks', sa.Integer(), default=0),
        sa.Column('total_signups', sa.Integer(), default=0),
        sa.Column('total_paid_signups', sa.Integer(), default=0),
        sa.Column('total_commission_earned_cents', sa.BigInteger(), default=0),
        sa.Column('total_commission_paid_cents', sa.BigInteger(), default=0),
        sa.Column('pending_commission_cents', sa.BigInteger(), default=0),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'affiliate_referrals',
        _id(),
        _fk('affiliate_id', 'affiliates.id', 'CASCADE', nullable=False, index=True),
        _fk('referred_user_id', 'users.id', 'SET NULL'),
        _fk('referred_business_id', 'businesses.id', 'SET NULL'),
        sa.Column('click_id', sa.String(100), unique=True, nullable=False),
        sa.Column('clicked_at', sa.DateTime(), nullable=False),
        sa.Column('landing_page', sa.String(500), nullable=True),
        sa.Column('signup_at', sa.DateTime(), nullable=True),
        sa.Column('first_payment_at', sa.DateTime(), nullable=True),
        sa.Column('first_payment_amount_cents', sa.BigInteger(), nullable=True),
        sa.Column('converted', sa.Boolean(), default=False, index=True),
        sa.Column('attribution_expires_at', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )

    op.create_table(
        'affiliate_payouts',
        _id(),
        _fk('affiliate_id', 'affiliates.id', 'CASCADE', nullable=False, index=True),
        sa.Column('amount_cents', sa.BigInteger(), nullable=False),
        sa.Column('commission_count', sa.Integer(), nullable=False),
        sa.Column('period_start', sa.Date(), nullable=False),
        sa.Column('period_end', sa.Date(), nullable=False),
        sa.Column('status', sa.String(50), nullable=False, index=True),
        sa.Column('payout_method', sa.String(50), nullable=False),
        sa.Column('transaction_id', sa.String(255), nullable=True),
        sa.Column('failure_reason', sa.Text(), nullable=True),
        sa.Column('requested_at', sa.DateTime(), nullable=False),
        sa.Column('approved_at', sa.DateTime(), nullable=True),
        _fk('approved_by_id', 'users.id', 'SET NULL'),
        sa.Column('processed_at', sa.DateTime(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'affiliate_commissions',
        _id(),
        _fk('affiliate_id', 'affiliates.id', 'CASCADE', nullable=False, index=True),
        _fk('referral_id', 'affiliate_referrals.id', 'CASCADE', nullable=False, index=True),
        sa.Column('billing_month', sa.Date(), nullable=False, index=True),
        sa.Column('subscription_amount_cents', sa.BigInteger(), nullable=False),
        sa.Column('commission_percentage', sa.Integer(), nullable=False),
        sa.Column('commission_amount_cents', sa.BigInteger(), nullable=False),
        sa.Column('status', sa.String(50), nullable=False, index=True),
        _fk('payout_id', 'affiliate_payouts.id', 'SET NULL', index=True),
        *_timestamps(),
    )

    # === AI PROVIDERS ===
    op.create_table(
        'ai_api_keys',
        _id(),
        sa.Column('key_name', sa.String(255), nullable=False),
        sa.Column('provider_name', sa.String(50), nullable=False, index=True),
        sa.Column('api_key', sa.Text(), nullable=False),
        sa.Column('supported_models', JSONB, nullable=True),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('verification_status', sa.String(50), nullable=False),
        sa.Column('last_verified_at', sa.DateTime(), nullable=True),
        sa.Column('total_spent_cents', sa.BigInteger(), default=0),
        sa.Column('monthly_limit_cents', sa.BigInteger(), nullable=True),
        _fk('created_by_id', 'users.id', 'SET NULL'),
        *_timestamps(),
    )

    op.create_table(
        'ai_llm_providers',
        _id(),
        sa.Column('provider_name', sa.String(50), nullable=False),
        sa.Column('model_name', sa.String(100), nullable=False),
        sa.Column('display_name', sa.String(255), nullable=False),
        sa.Column('input_cost_per_mtok_cents', sa.Integer(), default=0),
        sa.Column('output_cost_per_mtok_cents', sa.Integer(), default=0),
        sa.Column('context_window', sa.Integer(), nullable=True),
        sa.Column('is_active', sa.Boolean(), default=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('provider_name', 'model_name', name='uq_ai_provider_model'),
    )

    op.create_table(
        'ai_usage_logs',
        _id(),
        _fk('api_key_id', 'ai_api_keys.id', 'SET NULL', index=True),
        _fk('business_id', 'businesses.id', 'SET NULL', index=True),
        sa.Column('feature_name', sa.String(100), nullable=False),
        sa.Column('provider_name', sa.String(50), nullable=False),
        sa.Column('model_name', sa.String(100), nullable=False),
        sa.Column('input_tokens', sa.Integer(), default=0),
        sa.Column('output_tokens', sa.Integer(), default=0),
        sa.Column('total_tokens', sa.Integer(), default=0),
        sa.Column('cost_cents', sa.BigInteger(), default=0),
        sa.Column('request_metadata', JSONB, nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, index=True),
    )

    op.create_table(
        'ai_feature_llm_mappings',
        _id(),
        sa.Column('feature_name', sa.String(100), unique=True, nullable=False),
        sa.Column('provider_name', sa.String(50), nullable=False),
        sa.Column('model_name', sa.String(100), nullable=False),
        _fk('api_key_id', 'ai_api_keys.id', 'SET NULL'),
        sa.Column('is_active', sa.Boolean(), default=True),
        *_timestamps(),
    )

    # === ONBOARDING, AUDIT & JOBS ===
    op.create_table(
        'onboarding_state',
        _id(),
        sa.Column(
            'user_id', UUID,
            sa.ForeignKey('users.id', ondelete='CASCADE'),
            unique=True, nullable=False,
        ),
        sa.Column('has_added_property', sa.Boolean(), default=False),
        sa.Column('has_added_unit', sa.Boolean(), default=False),
        _fk('first_property_id', 'properties.id', 'SET NULL'),
        _fk('first_unit_id', 'units.id', 'SET NULL'),
        sa.Column('onboarding_dismissed', sa.Boolean(), default=False),
        sa.Column('post_onboarding_dismissed', sa.Boolean(), default=False),
        *_timestamps(),
    )

    op.create_table(
        'audit_log',
        _id(),
        _fk('business_id', 'businesses.id', 'SET NULL', index=True),
        _fk('user_id', 'users.id', 'SET NULL', index=True),
        sa.Column('action', sa.String(50), nullable=False, index=True),
        sa.Column('resource_type', sa.String(50), nullable=False),
        sa.Column('resource_id', UUID, nullable=True),
        sa.Column('details', JSONB, nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )

    op.create_table(
        'jobs_outbox',
        _id(),
        sa.Column('type', sa.String(100), nullable=False, index=True),
        sa.Column('payload', JSONB, nullable=False),
        sa.Column('status', sa.String(50), nullable=False, index=True),
        sa.Column('unique_scope', sa.String(500), unique=True, nullable=False),
        sa.Column('attempts', sa.Integer(), default=0),
        sa.Column('max_attempts', sa.Integer(), default=3),
        sa.Column('last_error', sa.Text(), nullable=True),
        sa.Column('run_after', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('started_at', sa.DateTime(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_jobs_outbox_status_run_after', 'jobs_outbox', ['status', 'run_after'])


def downgrade() -> None:
    op.drop_index('ix_jobs_outbox_status_run_after', table_name='jobs_outbox')
    for table in (
        'jobs_outbox',
        'audit_log',
        'onboarding_state',
        'ai_feature_llm_mappings',
        'ai_usage_logs',
        'ai_llm_providers',
        'ai_api_keys',
        'affiliate_commissions',
        'affiliate_payouts',
        'affiliate_referrals',
        'affiliates',
        'affiliate_settings',
        'budget_items',
        'budgets',
        'gl_ledger',
        'gl_accounts',
        'addon_purchases',
        'addon_products',
        'tier_addons',
        'tier_features',
        'features',
        'business_package_settings',
        'package_tiers',
        'rental_applications',
        'listings',
        'maintenance_requests',
        'system_settings',
        'rent_payments',
        'leases',
        'tenants',
        'units',
        'properties',
        'business_memberships',
        'businesses',
        'users',
    ):
        op.drop_table(table)
