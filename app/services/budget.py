"""Budgets and the budget-versus-actual variance engine."""

import calendar
import logging
from collections import defaultdict
from datetime import date, datetime
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import DomainError, InvalidStateError, NotFoundError
from app.core.money import round_cents, round_half_up
from app.models.accounting import PERIODS, Budget, BudgetItem, GLAccount, GLLedgerEntry
from app.models.enums import (
    AuditAction,
    BudgetStatus,
    GLAccountType,
    NormalBalance,
    SeasonalPattern,
)
from app.services.audit import AuditService

logger = logging.getLogger(__name__)

# Share of the annual amount falling in each month, January first
SEASONAL_PATTERNS: dict[SeasonalPattern, list[float]] = {
    SeasonalPattern.EVEN: [1 / 12] * 12,
    # heating
    SeasonalPattern.WINTER_HEAVY: [0.12, 0.12, 0.10, 0.07, 0.05, 0.04, 0.04, 0.05, 0.07, 0.10, 0.12, 0.12],
    # cooling, landscaping
    SeasonalPattern.SUMMER_HEAVY: [0.05, 0.05, 0.07, 0.10, 0.12, 0.14, 0.14, 0.12, 0.10, 0.07, 0.05, 0.05],
    # insurance, property tax
    SeasonalPattern.QUARTERLY_SPIKE: [0.25, 0.02, 0.02, 0.25, 0.02, 0.02, 0.25, 0.02, 0.02, 0.25, 0.02, 0.02],
}


def spread_annual_amount(annual_cents: int) -> list[int]:
    """Twelve equal monthly amounts; the division remainder goes to December."""
    monthly = annual_cents // PERIODS
    amounts = [monthly] * PERIODS
    amounts[-1] += annual_cents - monthly * PERIODS
    return amounts


def apply_seasonal_distribution(annual_cents: int, pattern: SeasonalPattern) -> list[int]:
    """Distribute by a preset pattern; rounding drift is absorbed by January."""
    amounts = [round_cents(annual_cents * pct) for pct in SEASONAL_PATTERNS[pattern]]
    amounts[0] += annual_cents - sum(amounts)
    return amounts


def is_favorable(account_type: GLAccountType, budgeted_cents: int, actual_cents: int) -> bool:
    """Expenses are favorable under budget; every other type over budget."""
    if account_type == GLAccountType.EXPENSE:
        return actual_cents < budgeted_cents
    return actual_cents > budgeted_cents


def variance_percent(variance_cents: int, budgeted_cents: int) -> float:
    if budgeted_cents == 0:
        return 0
    return round_half_up(variance_cents / budgeted_cents * 100, 2)


def period_date_range(fiscal_year: int, period_number: int) -> tuple[date, date]:
    """First and last day of calendar month ``period_number``."""
    if not 1 <= period_number <= PERIODS:
        raise DomainError("period_number must be between 1 and 12")
    last_day = calendar.monthrange(fiscal_year, period_number)[1]
    return date(fiscal_year, period_number, 1), date(fiscal_year, period_number, last_day)


def _format_percent(pct: float) -> str:
    return f"{pct:g}"


class BudgetService:
    """Budget CRUD, approval lifecycle and variance reports."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # === Budgets ===

    async def create_budget(
        self,
        business_id: UUID,
        data: dict[str, Any],
        created_by_id: Optional[UUID] = None,
    ) -> Budget:
        budget = Budget(
            business_id=business_id,
            status=BudgetStatus.DRAFT,
            created_by_id=created_by_id,
            **data,
        )
        self.db.add(budget)
        await self.db.flush()
        return budget

    async def list_budgets(
        self,
        business_id: UUID,
        fiscal_year: Optional[int] = None,
        status: Optional[BudgetStatus] = None,
    ) -> list[Budget]:
        query = select(Budget).where(Budget.business_id == business_id)
        if fiscal_year:
            query = query.where(Budget.fiscal_year == fiscal_year)
        if status:
            query = query.where(Budget.status == status)
        result = await self.db.execute(
            query.order_by(Budget.fiscal_year.desc(), Budget.budget_name)
        )
        return list(result.scalars().all())

    async def get_budget(self, business_id: UUID, budget_id: UUID) -> Budget:
        result = await self.db.execute(
            select(Budget).where(Budget.id == budget_id, Budget.business_id == business_id)
        )
        budget = result.scalar_one_or_none()
        if not budget:
            raise NotFoundError("Budget")
        return budget

    async def get_items(self, budget_id: UUID) -> list[BudgetItem]:
        result = await self.db.execute(
            select(BudgetItem).where(BudgetItem.budget_id == budget_id).order_by(BudgetItem.created_at)
        )
        return list(result.scalars().all())

    async def get_budget_with_items(
        self, business_id: UUID, budget_id: UUID
    ) -> tuple[Budget, list[BudgetItem]]:
        budget = await self.get_budget(business_id, budget_id)
        return budget, await self.get_items(budget.id)

    async def update_budget(
        self, business_id: UUID, budget_id: UUID, data: dict[str, Any]
    ) -> Budget:
        budget = await self.get_budget(business_id, budget_id)
        if budget.status != BudgetStatus.DRAFT:
            raise InvalidStateError("Can only update draft budgets")
        for field, value in data.items():
            setattr(budget, field, value)
        await self.db.flush()
        return budget

    async def delete_budget(self, business_id: UUID, budget_id: UUID) -> None:
        budget = await self.get_budget(business_id, budget_id)
        if budget.status != BudgetStatus.DRAFT:
            raise InvalidStateError("Can only delete draft budgets")
        for item in await self.get_items(budget.id):
            await self.db.delete(item)
        await self.db.delete(budget)
        await self.db.flush()

    # === Items ===

    async def upsert_budget_items(
        self,
        business_id: UUID,
        budget_id: UUID,
        items: list[dict[str, Any]],
    ) -> list[BudgetItem]:
        """Insert or replace one item per account."""
        budget = await self.get_budget(business_id, budget_id)
        if budget.status != BudgetStatus.DRAFT:
            raise InvalidStateError("Can only modify draft budgets")

        existing = {item.account_id: item for item in await self.get_items(budget.id)}
        for data in items:
            periods = list(data["periods"])
            if len(periods) != PERIODS:
                raise DomainError("Each budget item needs exactly 12 period amounts")
            account = await self.db.execute(
                select(GLAccount.id).where(
                    GLAccount.id == data["account_id"],
                    GLAccount.business_id == business_id,
                )
            )
            if account.scalar_one_or_none() is None:
                raise NotFoundError("Account")

            item = existing.get(data["account_id"])
            if item is None:
                item = BudgetItem(budget_id=budget.id, account_id=data["account_id"])
                self.db.add(item)
                existing[data["account_id"]] = item
            item.set_periods(periods)
            if "notes" in data:
                item.notes = data["notes"]

        await self.db.flush()
        return await self.get_items(budget.id)

    async def delete_budget_item(self, business_id: UUID, budget_id: UUID, item_id: UUID) -> None:
        budget = await self.get_budget(business_id, budget_id)
        if budget.status != BudgetStatus.DRAFT:
            raise InvalidStateError("Can only modify draft budgets")
        result = await self.db.execute(
            select(BudgetItem).where(BudgetItem.id == item_id, BudgetItem.budget_id == budget.id)
        )
        item = result.scalar_one_or_none()
        if not item:
            raise NotFoundError("Budget item")
        await self.db.delete(item)
        await self.db.flush()

    # === Lifecycle ===

    async def approve_budget(
        self, business_id: UUID, budget_id: UUID, approved_by_id: Optional[UUID]
    ) -> Budget:
        budget = await self.get_budget(business_id, budget_id)
        if budget.status != BudgetStatus.DRAFT:
            raise InvalidStateError("Can only approve draft budgets")
        budget.status = BudgetStatus.APPROVED
        budget.approved_at = datetime.utcnow()
        budget.approved_by_id = approved_by_id
        await self.db.flush()

        await AuditService(self.db).log(
            action=AuditAction.BUDGET_APPROVED,
            resource_type="budget",
            resource_id=budget.id,
            business_id=business_id,
            user_id=approved_by_id,
        )
        return budget

    async def close_budget(
        self, business_id: UUID, budget_id: UUID, actor_id: Optional[UUID] = None
    ) -> Budget:
        budget = await self.get_budget(business_id, budget_id)
        if budget.status != BudgetStatus.APPROVED:
            raise InvalidStateError("Can only close approved budgets")
        budget.status = BudgetStatus.CLOSED
        await self.db.flush()

        await AuditService(self.db).log(
            action=AuditAction.BUDGET_CLOSED,
            resource_type="budget",
            resource_id=budget.id,
            business_id=business_id,
            user_id=actor_id,
        )
        return budget

    # === Derived budgets ===

    async def get_budget_totals(self, business_id: UUID, budget_id: UUID) -> dict[str, Any]:
        budget, items = await self.get_budget_with_items(business_id, budget_id)
        period_totals = [0] * PERIODS
        type_totals = {GLAccountType.REVENUE.value: 0, GLAccountType.EXPENSE.value: 0}

        accounts = await self._account_map(business_id)
        for item in items:
            periods = item.periods
            for i, amount in enumerate(periods):
                period_totals[i] += amount
            account = accounts.get(item.account_id)
            if account and account.account_type.value in type_totals:
                type_totals[account.account_type.value] += sum(periods)

        return {
            "period_totals": period_totals,
            "total_budget_cents": sum(period_totals),
            "account_type_totals": type_totals,
        }

    async def copy_budget(
        self,
        business_id: UUID,
        budget_id: UUID,
        new_fiscal_year: int,
        adjustment_percent: float = 0,
        created_by_id: Optional[UUID] = None,
    ) -> Budget:
        """New draft budget for another year with every amount scaled."""
        source, items = await self.get_budget_with_items(business_id, budget_id)

        copy = Budget(
            business_id=business_id,
            budget_name=f"{source.budget_name} - {new_fiscal_year}",
            budget_code=source.budget_code,
            fiscal_year=new_fiscal_year,
            budget_type=source.budget_type,
            property_id=source.property_id,
            currency_code=source.currency_code,
            status=BudgetStatus.DRAFT,
            notes=(
                f"Copied from {source.budget_name} with "
                f"{_format_percent(adjustment_percent)}% adjustment"
            ),
            created_by_id=created_by_id,
        )
        self.db.add(copy)
        await self.db.flush()

        multiplier = 1 + adjustment_percent / 100
        for item in items:
            new_item = BudgetItem(budget_id=copy.id, account_id=item.account_id, notes=item.notes)
            new_item.set_periods([round_cents(amount * multiplier) for amount in item.periods])
            self.db.add(new_item)
        await self.db.flush()
        return copy

    async def create_budget_from_accounts(
        self,
        business_id: UUID,
        data: dict[str, Any],
        created_by_id: Optional[UUID] = None,
    ) -> Budget:
        """Budget with a zero item for every active revenue and expense account."""
        budget = await self.create_budget(business_id, data, created_by_id=created_by_id)
        result = await self.db.execute(
            select(GLAccount)
            .where(
                GLAccount.business_id == business_id,
                GLAccount.is_active == True,  # noqa: E712
                GLAccount.is_header_account == False,  # noqa: E712
                GLAccount.account_type.in_((GLAccountType.REVENUE, GLAccountType.EXPENSE)),
            )
            .order_by(GLAccount.account_number)
        )
        for account in result.scalars().all():
            item = BudgetItem(budget_id=budget.id, account_id=account.id)
            item.set_periods([0] * PERIODS)
            self.db.add(item)
        await self.db.flush()
        return budget

    # === Variance ===

    async def _account_map(self, business_id: UUID) -> dict[UUID, GLAccount]:
        result = await self.db.execute(
            select(GLAccount).where(GLAccount.business_id == business_id)
        )
        return {account.id: account for account in result.scalars().all()}

    async def calculate_variance(
        self,
        business_id: UUID,
        budget_id: UUID,
        period_number: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> dict[str, Any]:
        """Budget against posted actuals.

        The range is the explicit dates, else calendar month ``period_number``
        of the fiscal year, else the whole fiscal year.
        """
        budget, items = await self.get_budget_with_items(business_id, budget_id)
        accounts = await self._account_map(business_id)

        if start_date and end_date:
            range_start, range_end = start_date, end_date
        elif period_number:
            range_start, range_end = period_date_range(budget.fiscal_year, period_number)
        else:
            range_start = date(budget.fiscal_year, 1, 1)
            range_end = date(budget.fiscal_year, 12, 31)

        entries = await self.db.execute(
            select(
                GLLedgerEntry.account_id,
                GLLedgerEntry.debit_cents,
                GLLedgerEntry.credit_cents,
            ).where(
                GLLedgerEntry.business_id == business_id,
                GLLedgerEntry.posting_date >= range_start,
                GLLedgerEntry.posting_date <= range_end,
            )
        )
        actuals: dict[UUID, int] = defaultdict(int)
        for account_id, debit, credit in entries.all():
            amount = (debit or 0) - (credit or 0)
            account = accounts.get(account_id)
            if account and account.normal_balance == NormalBalance.CREDIT:
                amount = -amount
            actuals[account_id] += amount

        lines = []
        total_budgeted = 0
        total_actual = 0
        for item in items:
            account = accounts.get(item.account_id)
            if account is None:
                continue

            periods = item.periods
            budgeted = periods[period_number - 1] if period_number else sum(periods)
            actual = actuals.get(item.account_id, 0)
            variance = budgeted - actual

            lines.append({
                "account_id": account.id,
                "account_number": account.account_number,
                "account_name": account.account_name,
                "account_type": account.account_type,
                "budgeted_cents": budgeted,
                "actual_cents": actual,
                "variance_cents": variance,
                "variance_percent": variance_percent(variance, budgeted),
                "is_favorable": is_favorable(account.account_type, budgeted, actual),
            })
            total_budgeted += budgeted
            total_actual += actual

        lines.sort(key=lambda line: line["account_number"])
        return {
            "budget_id": budget.id,
            "start_date": range_start,
            "end_date": range_end,
            "lines": lines,
            "total_budgeted": total_budgeted,
            "total_actual": total_actual,
            "total_variance": total_budgeted - total_actual,
        }

    async def get_variance_summary_by_type(
        self,
        business_id: UUID,
        budget_id: UUID,
        period_number: Optional[int] = None,
    ) -> dict[str, dict[str, int]]:
        report = await self.calculate_variance(business_id, budget_id, period_number=period_number)
        summary = {
            "revenue": {"budgeted": 0, "actual": 0, "variance": 0},
            "expense": {"budgeted": 0, "actual": 0, "variance": 0},
        }
        for line in report["lines"]:
            bucket = summary.get(line["account_type"].value)
            if bucket is None:
                continue
            bucket["budgeted"] += line["budgeted_cents"]
            bucket["actual"] += line["actual_cents"]
            bucket["variance"] += line["variance_cents"]

        summary["net_income"] = {
            key: summary["revenue"][key] - summary["expense"][key]
            for key in ("budgeted", "actual", "variance")
        }
        return summary
