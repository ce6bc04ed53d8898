"""General ledger and budget models."""

import uuid
from datetime import datetime, date
from typing import Optional

from sqlalchemy import (
    String, DateTime, Date, ForeignKey, Text, Integer, BigInteger, Boolean, Uuid,
    UniqueConstraint, CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base, enum_column
from app.models.enums import BudgetStatus, BudgetType, GLAccountType, NormalBalance

PERIODS = 12


class GLAccount(Base):
    """Chart-of-accounts entry."""

    __tablename__ = "gl_accounts"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    business_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    account_number: Mapped[str] = mapped_column(String(20), nullable=False)
    account_name: Mapped[str] = mapped_column(String(255), nullable=False)
    account_type: Mapped[GLAccountType] = mapped_column(
        enum_column(GLAccountType),
        nullable=False,
        index=True,
    )
    account_subtype: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    parent_account_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("gl_accounts.id", ondelete="SET NULL"),
        nullable=True,
    )
    normal_balance: Mapped[NormalBalance] = mapped_column(
        enum_column(NormalBalance),
        nullable=False,
    )
    is_header_account: Mapped[bool] = mapped_column(Boolean, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    __table_args__ = (
        UniqueConstraint("business_id", "account_number", name="uq_gl_account_number"),
    )


class GLLedgerEntry(Base):
    """A posted debit or credit against an account."""

    __tablename__ = "gl_ledger"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    business_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    account_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("gl_accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    posting_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    debit_cents: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    credit_cents: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    reference: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    created_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        CheckConstraint(
            "debit_cents >= 0 AND credit_cents >= 0",
            name="ck_gl_ledger_non_negative",
        ),
    )


class Budget(Base):
    """A fiscal-year budget with twelve monthly allocations per account."""

    __tablename__ = "budgets"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    business_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("businesses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    budget_name: Mapped[str] = mapped_column(String(255), nullable=False)
    budget_code: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    fiscal_year: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    budget_type: Mapped[BudgetType] = mapped_column(
        enum_column(BudgetType),
        default=BudgetType.ANNUAL,
        nullable=False,
    )
    property_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("properties.id", ondelete="SET NULL"),
        nullable=True,
    )
    currency_code: Mapped[str] = mapped_column(String(3), default="CAD")
    status: Mapped[BudgetStatus] = mapped_column(
        enum_column(BudgetStatus),
        default=BudgetStatus.DRAFT,
        nullable=False,
        index=True,
    )
    approved_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    approved_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_by_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )


class BudgetItem(Base):
    """Monthly allocations of one account within a budget."""

    __tablename__ = "budget_items"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )
    budget_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("budgets.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    account_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("gl_accounts.id", ondelete="CASCADE"),
        nullable=False,
    )
    period_1_cents: Mapped[int] = mapped_column(BigInteger, default=0)
    period_2_cents: Mapped[int] = mapped_column(BigInteger, default=0)
    period_3_cents: Mapped[int] = mapped_column(BigInteger, default=0)
    period_4_cents: Mapped[int] = mapped_column(BigInteger, default=0)
    period_5_cents: Mapped[int] = mapped_column(BigInteger, default=0)
    period_6_cents: Mapped[int] = mapped_column(BigInteger, default=0)
    period_7_cents: Mapped[int] = mapped_column(BigInteger, default=0)
    period_8_cents: Mapped[int] = mapped_column(BigInteger, default=0)
    period_9_cents: Mapped[int] = mapped_column(BigInteger, default=0)
    period_10_cents: Mapped[int] = mapped_column(BigInteger, default=0)
    period_11_cents: Mapped[int] = mapped_column(BigInteger, default=0)
    period_12_cents: Mapped[int] = mapped_column(BigInteger, default=0)
    annual_total_cents: Mapped[int] = mapped_column(BigInteger, default=0)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    __table_args__ = (
        UniqueConstraint("budget_id", "account_id", name="uq_budget_item_account"),
    )

    @property
    def periods(self) -> list[int]:
        """The twelve monthly amounts in order."""
        return [getattr(self, f"period_{i}_cents") or 0 for i in range(1, PERIODS + 1)]

    def set_periods(self, amounts: list[int]) -> None:
        """Assign all twelve monthly amounts and recompute the annual total."""
        if len(amounts) != PERIODS:
            raise ValueError(f"Expected {PERIODS} period amounts, got {len(amounts)}")
        for i, amount in enumerate(amounts, start=1):
            setattr(self, f"period_{i}_cents", amount)
        self.annual_total_cents = sum(amounts)
