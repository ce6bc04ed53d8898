"""Enumeration types for the Rentline domain model."""

from enum import Enum


# === Tenancy ===

class BusinessRole(str, Enum):
    """Role within a business."""
    OWNER = "OWNER"
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


class BusinessStatus(str, Enum):
    """Platform status of a business account."""
    ACTIVE = "active"
    SUSPENDED = "suspended"
    CANCELLED = "cancelled"


# === Properties, units, tenants ===

class PropertyType(str, Enum):
    """Type of property."""
    SINGLE_FAMILY = "single_family"
    MULTI_FAMILY = "multi_family"
    APARTMENT_BUILDING = "apartment_building"
    CONDO = "condo"
    TOWNHOUSE = "townhouse"
    COMMERCIAL = "commercial"
    MIXED_USE = "mixed_use"
    RESIDENTIAL = "residential"
    LAND = "land"
    VACANT_LAND = "vacant_land"
    OTHER = "other"


class OccupancyStatus(str, Enum):
    """Occupancy of a unit."""
    VACANT = "vacant"
    OCCUPIED = "occupied"
    MAINTENANCE = "maintenance"
    RESERVED = "reserved"


class TenantType(str, Enum):
    """How a renter relates to the unit."""
    PRIMARY = "primary"
    CO_TENANT = "co_tenant"
    OCCUPANT = "occupant"
    GUARANTOR = "guarantor"


class TenantStatus(str, Enum):
    """Lifecycle of a renter."""
    PROSPECT = "prospect"
    APPLICANT = "applicant"
    ACTIVE = "active"
    NOTICE_GIVEN = "notice_given"
    MOVED_OUT = "moved_out"
    EVICTED = "evicted"


# === Leases, payments, maintenance ===

class LeaseType(str, Enum):
    """Term structure of a lease."""
    FIXED_TERM = "fixed_term"
    MONTH_TO_MONTH = "month_to_month"
    YEAR_TO_YEAR = "year_to_year"


class LeaseStatus(str, Enum):
    """Status of a lease."""
    DRAFT = "draft"
    PENDING_SIGNATURE = "pending_signature"
    ACTIVE = "active"
    EXPIRED = "expired"
    TERMINATED = "terminated"
    RENEWED = "renewed"


class PaymentType(str, Enum):
    """What a rent payment is for."""
    RENT = "rent"
    SECURITY_DEPOSIT = "security_deposit"
    PET_DEPOSIT = "pet_deposit"
    LATE_FEE = "late_fee"
    UTILITY = "utility"
    MAINTENANCE = "maintenance"
    OTHER = "other"


class PaymentMethod(str, Enum):
    """How a payment was made."""
    CASH = "cash"
    CHECK = "check"
    BANK_TRANSFER = "bank_transfer"
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    E_TRANSFER = "e_transfer"
    OTHER = "other"


class PaymentStatus(str, Enum):
    """Status of a rent payment."""
    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"
    LATE = "late"
    FAILED = "failed"
    REFUNDED = "refunded"


class MaintenanceStatus(str, Enum):
    """Status of a maintenance request."""
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class MaintenancePriority(str, Enum):
    """Urgency of a maintenance request."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EMERGENCY = "emergency"


# === Listings and applications ===

class ListingStatus(str, Enum):
    """Status of a public listing."""
    DRAFT = "draft"
    ACTIVE = "active"
    INACTIVE = "inactive"
    RENTED = "rented"


class ApplicationStatus(str, Enum):
    """Status of a rental application."""
    SUBMITTED = "submitted"
    REVIEWING = "reviewing"
    APPROVED = "approved"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


# === Packages, features, add-ons ===

class BillingCycle(str, Enum):
    """Billing cycle of a package subscription."""
    MONTHLY = "monthly"
    ANNUAL = "annual"


class FeatureType(str, Enum):
    """Whether a catalog entry is a plain feature or a sellable add-on."""
    FEATURE = "feature"
    ADDON = "addon"


class FeatureCategory(str, Enum):
    """Grouping of features in the catalog."""
    CORE = "core"
    ADVANCED = "advanced"
    AI = "ai"
    PAYMENTS = "payments"
    BRANDING = "branding"
    TEAM = "team"
    ENTERPRISE = "enterprise"


class AddonType(str, Enum):
    """Resource an add-on product extends."""
    PROPERTY = "property"
    UNIT = "unit"
    TENANT = "tenant"
    TEAM_MEMBER = "team_member"
    BUSINESS = "business"


class AddonPurchaseStatus(str, Enum):
    """Status of an add-on purchase."""
    ACTIVE = "active"
    CANCELLED = "cancelled"


# === Accounting ===

class GLAccountType(str, Enum):
    """General-ledger account classification."""
    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSE = "expense"


class NormalBalance(str, Enum):
    """Side on which an account's balance increases."""
    DEBIT = "debit"
    CREDIT = "credit"


class BudgetType(str, Enum):
    """Kind of budget."""
    ANNUAL = "annual"
    QUARTERLY = "quarterly"
    MONTHLY = "monthly"
    PROJECT = "project"
    PROPERTY = "property"


class BudgetStatus(str, Enum):
    """Approval lifecycle of a budget."""
    DRAFT = "draft"
    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"
    ACTIVE = "active"
    CLOSED = "closed"
    ARCHIVED = "archived"


class SeasonalPattern(str, Enum):
    """Preset monthly distributions for an annual amount."""
    EVEN = "even"
    WINTER_HEAVY = "winter_heavy"
    SUMMER_HEAVY = "summer_heavy"
    QUARTERLY_SPIKE = "quarterly_spike"


# === Affiliates ===

class AffiliateStatus(str, Enum):
    """Status of an affiliate partner."""
    PENDING = "pending"
    APPROVED = "approved"
    SUSPENDED = "suspended"
    REJECTED = "rejected"


class AffiliatePayoutMethod(str, Enum):
    """How an affiliate is paid."""
    PAYPAL = "paypal"
    BANK_TRANSFER = "bank_transfer"
    CHECK = "check"
    E_TRANSFER = "e_transfer"


class AffiliateCommissionType(str, Enum):
    """Commission model of the affiliate program."""
    ONE_TIME = "one_time"
    RECURRING = "recurring"


class AffiliateCommissionStatus(str, Enum):
    """Status of a single commission."""
    EARNED = "earned"
    PENDING_PAYOUT = "pending_payout"
    PAID = "paid"
    REFUNDED = "refunded"
    CANCELLED = "cancelled"


class AffiliatePayoutStatus(str, Enum):
    """Status of an affiliate payout."""
    PENDING = "pending"
    APPROVED = "approved"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class AffiliatePayoutSchedule(str, Enum):
    """How often payouts are issued."""
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


# === AI keys ===

class KeyVerificationStatus(str, Enum):
    """Result of the last provider key check."""
    PENDING = "pending"
    VERIFIED = "verified"
    FAILED = "failed"


# === Platform ===

class AuditAction(str, Enum):
    """Actions tracked in audit log."""
    BUSINESS_CREATED = "business_created"
    MEMBER_ADDED = "member_added"
    MEMBER_REMOVED = "member_removed"
    TENANT_CREATED = "tenant_created"
    TENANT_INVITED = "tenant_invited"
    LEASE_ACTIVATED = "lease_activated"
    LEASE_TERMINATED = "lease_terminated"
    APPLICATION_CONVERTED = "application_converted"
    BUDGET_APPROVED = "budget_approved"
    BUDGET_CLOSED = "budget_closed"
    PACKAGE_CHANGED = "package_changed"
    BUSINESS_STATUS_CHANGED = "business_status_changed"
    AFFILIATE_APPLIED = "affiliate_applied"
    AFFILIATE_APPROVED = "affiliate_approved"
    AFFILIATE_REJECTED = "affiliate_rejected"
    AFFILIATE_SUSPENDED = "affiliate_suspended"
    PAYOUT_REQUESTED = "payout_requested"
    PAYOUT_COMPLETED = "payout_completed"
    PAYOUT_FAILED = "payout_failed"
    PAYOUT_CANCELLED = "payout_cancelled"
    PAYMENT_CAPTURED = "payment_captured"
    SETTING_UPDATED = "setting_updated"


class JobStatus(str, Enum):
    """Status of async job in outbox."""
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"
    DEAD_LETTER = "dead_letter"
