"""General ledger and budget schemas."""

from datetime import date, datetime
from typing import Optional
from uuid import UUID

from pydantic import Field, field_validator, model_validator

from app.models.enums import (
    BudgetStatus,
    BudgetType,
    GLAccountType,
    NormalBalance,
    SeasonalPattern,
)
from app.schemas.base import BaseSchema, IDMixin, TimestampMixin


# === GL accounts ===

class GLAccountCreate(BaseSchema):
    """Create a GL account."""

    account_number: str = Field(..., min_length=1, max_length=20)
    account_name: str = Field(..., min_length=1, max_length=255)
    account_type: GLAccountType
    account_subtype: Optional[str] = Field(None, max_length=100)
    parent_account_id: Optional[UUID] = None
    normal_balance: Optional[NormalBalance] = None
    is_header_account: bool = False
    description: Optional[str] = None


class GLAccountUpdate(BaseSchema):
    """Update a GL account."""

    account_number: Optional[str] = Field(None, min_length=1, max_length=20)
    account_name: Optional[str] = Field(None, min_length=1, max_length=255)
    account_subtype: Optional[str] = Field(None, max_length=100)
    parent_account_id: Optional[UUID] = None
    normal_balance: Optional[NormalBalance] = None
    is_header_account: Optional[bool] = None
    description: Optional[str] = None


class GLAccountResponse(BaseSchema, IDMixin, TimestampMixin):
    """GL account response."""

    business_id: UUID
    account_number: str
    account_name: str
    account_type: GLAccountType
    account_subtype: Optional[str] = None
    parent_account_id: Optional[UUID] = None
    normal_balance: NormalBalance
    is_header_account: bool
    is_active: bool
    description: Optional[str] = None


class LedgerEntryCreate(BaseSchema):
    """Post a single-sided ledger entry."""

    account_id: UUID
    posting_date: date
    debit_cents: int = Field(0, ge=0)
    credit_cents: int = Field(0, ge=0)
    description: Optional[str] = None
    reference: Optional[str] = Field(None, max_length=100)

    @model_validator(mode="after")
    def validate_one_side(self):
        """Exactly one of debit or credit is positive."""
        if (self.debit_cents > 0) == (self.credit_cents > 0):
            raise ValueError("Exactly one of debit_cents or credit_cents must be positive")
        return self


class LedgerEntryResponse(BaseSchema, IDMixin):
    """Ledger entry response."""

    business_id: UUID
    account_id: UUID
    posting_date: date
    debit_cents: int
    credit_cents: int
    description: Optional[str] = None
    reference: Optional[str] = None
    created_at: datetime


# === Budgets ===

class BudgetCreate(BaseSchema):
    """Create a draft budget."""

    budget_name: str = Field(..., min_length=1, max_length=255)
    budget_code: Optional[str] = Field(None, max_length=50)
    fiscal_year: int = Field(..., ge=2000, le=2100)
    budget_type: BudgetType = BudgetType.ANNUAL
    property_id: Optional[UUID] = None
    currency_code: str = Field("CAD", min_length=3, max_length=3)
    notes: Optional[str] = None


class BudgetUpdate(BaseSchema):
    """Update a draft budget."""

    budget_name: Optional[str] = Field(None, min_length=1, max_length=255)
    budget_code: Optional[str] = Field(None, max_length=50)
    fiscal_year: Optional[int] = Field(None, ge=2000, le=2100)
    budget_type: Optional[BudgetType] = None
    property_id: Optional[UUID] = None
    currency_code: Optional[str] = Field(None, min_length=3, max_length=3)
    notes: Optional[str] = None


class BudgetItemInput(BaseSchema):
    """Twelve monthly amounts for one account."""

    account_id: UUID
    periods: list[int]
    notes: Optional[str] = None

    @field_validator("periods")
    @classmethod
    def validate_periods(cls, v: list[int]) -> list[int]:
        """Exactly twelve amounts."""
        if len(v) != 12:
            raise ValueError("periods must contain exactly 12 amounts")
        return v


class BudgetItemsUpsert(BaseSchema):
    """Batch of item upserts."""

    items: list[BudgetItemInput]


class BudgetItemResponse(BaseSchema, IDMixin):
    """Budget item response."""

    budget_id: UUID
    account_id: UUID
    periods: list[int]
    annual_total_cents: int
    notes: Optional[str] = None


class BudgetResponse(BaseSchema, IDMixin, TimestampMixin):
    """Budget response."""

    business_id: UUID
    budget_name: str
    budget_code: Optional[str] = None
    fiscal_year: int
    budget_type: BudgetType
    property_id: Optional[UUID] = None
    currency_code: str
    status: BudgetStatus
    approved_at: Optional[datetime] = None
    approved_by_id: Optional[UUID] = None
    notes: Optional[str] = None


class BudgetDetailResponse(BudgetResponse):
    """Budget with its items."""

    items: list[BudgetItemResponse] = Field(default_factory=list)


class BudgetCopy(BaseSchema):
    """Copy a budget into a new fiscal year."""

    new_fiscal_year: int = Field(..., ge=2000, le=2100)
    adjustment_percent: float = 0


class BudgetFromAccounts(BaseSchema):
    """Create a zero-filled budget over all revenue and expense accounts."""

    budget_name: str = Field(..., min_length=1, max_length=255)
    fiscal_year: int = Field(..., ge=2000, le=2100)
    budget_type: BudgetType = BudgetType.ANNUAL
    property_id: Optional[UUID] = None


class BudgetTotals(BaseSchema):
    """Per-period and per-type totals."""

    period_totals: list[int]
    total_budget_cents: int
    account_type_totals: dict[str, int]


class VarianceLine(BaseSchema):
    """Budget against actual for one account."""

    account_id: UUID
    account_number: str
    account_name: str
    account_type: GLAccountType
    budgeted_cents: int
    actual_cents: int
    variance_cents: int
    variance_percent: float
    is_favorable: bool


class VarianceReport(BaseSchema):
    """Variance for a budget over a date range."""

    budget_id: UUID
    start_date: date
    end_date: date
    lines: list[VarianceLine]
    total_budgeted: int
    total_actual: int
    total_variance: int


class VarianceFigures(BaseSchema):
    """Budgeted, actual and variance totals."""

    budgeted: int
    actual: int
    variance: int


class VarianceSummary(BaseSchema):
    """Variance grouped by account type."""

    revenue: VarianceFigures
    expense: VarianceFigures
    net_income: VarianceFigures


class SpreadRequest(BaseSchema):
    """Distribute an annual amount across twelve periods."""

    annual_cents: int
    pattern: Optional[SeasonalPattern] = None
