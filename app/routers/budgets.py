"""Budgets router - budget lifecycle, items and variance reports."""

from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import (
    AuthenticatedUser,
    require_business_admin,
    require_business_member,
)
from app.models.enums import BudgetStatus
from app.schemas.accounting import (
    BudgetCopy,
    BudgetCreate,
    BudgetDetailResponse,
    BudgetFromAccounts,
    BudgetItemResponse,
    BudgetItemsUpsert,
    BudgetResponse,
    BudgetTotals,
    BudgetUpdate,
    SpreadRequest,
    VarianceReport,
    VarianceSummary,
)
from app.services.budget import (
    BudgetService,
    apply_seasonal_distribution,
    spread_annual_amount,
)

router = APIRouter(prefix="/budgets", tags=["budgets"])


@router.post("", response_model=BudgetResponse, status_code=status.HTTP_201_CREATED)
async def create_budget(
    data: BudgetCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Create a draft budget."""
    budget = await BudgetService(db).create_budget(
        current_user.business_id, data.model_dump(), created_by_id=current_user.db_user_id
    )
    await db.commit()
    await db.refresh(budget)
    return BudgetResponse.model_validate(budget)


@router.post(
    "/from-accounts",
    response_model=BudgetResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_budget_from_accounts(
    data: BudgetFromAccounts,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Draft budget with a zero line for every revenue and expense account."""
    budget = await BudgetService(db).create_budget_from_accounts(
        current_user.business_id, data.model_dump(), created_by_id=current_user.db_user_id
    )
    await db.commit()
    await db.refresh(budget)
    return BudgetResponse.model_validate(budget)


@router.post("/spread", response_model=List[int])
async def spread_amount(
    data: SpreadRequest,
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Split an annual amount into twelve monthly amounts."""
    if data.pattern is None:
        return spread_annual_amount(data.annual_cents)
    return apply_seasonal_distribution(data.annual_cents, data.pattern)


@router.get("", response_model=List[BudgetResponse])
async def list_budgets(
    fiscal_year: Optional[int] = None,
    status_filter: Optional[BudgetStatus] = Query(default=None, alias="status"),
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """List budgets, newest fiscal year first."""
    budgets = await BudgetService(db).list_budgets(
        current_user.business_id, fiscal_year=fiscal_year, status=status_filter
    )
    return [BudgetResponse.model_validate(b) for b in budgets]


@router.get("/{budget_id}", response_model=BudgetDetailResponse)
async def get_budget(
    budget_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Get a budget with its items."""
    budget, items = await BudgetService(db).get_budget_with_items(
        current_user.business_id, budget_id
    )
    return BudgetDetailResponse(
        **BudgetResponse.model_validate(budget).model_dump(),
        items=[BudgetItemResponse.model_validate(i) for i in items],
    )


@router.patch("/{budget_id}", response_model=BudgetResponse)
async def update_budget(
    budget_id: UUID,
    data: BudgetUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Update a draft budget."""
    budget = await BudgetService(db).update_budget(
        current_user.business_id, budget_id, data.model_dump(exclude_unset=True)
    )
    await db.commit()
    await db.refresh(budget)
    return BudgetResponse.model_validate(budget)


@router.delete("/{budget_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_budget(
    budget_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Delete a draft budget and its items."""
    await BudgetService(db).delete_budget(current_user.business_id, budget_id)
    await db.commit()


@router.put("/{budget_id}/items", response_model=List[BudgetItemResponse])
async def upsert_budget_items(
    budget_id: UUID,
    data: BudgetItemsUpsert,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Insert or replace items, one per account."""
    items = await BudgetService(db).upsert_budget_items(
        current_user.business_id,
        budget_id,
        [item.model_dump() for item in data.items],
    )
    await db.commit()
    return [BudgetItemResponse.model_validate(i) for i in items]


@router.delete("/{budget_id}/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_budget_item(
    budget_id: UUID,
    item_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Remove an item from a draft budget."""
    await BudgetService(db).delete_budget_item(current_user.business_id, budget_id, item_id)
    await db.commit()


@router.post("/{budget_id}/approve", response_model=BudgetResponse)
async def approve_budget(
    budget_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_admin),
):
    """Approve a draft budget (admin only)."""
    budget = await BudgetService(db).approve_budget(
        current_user.business_id, budget_id, current_user.db_user_id
    )
    await db.commit()
    await db.refresh(budget)
    return BudgetResponse.model_validate(budget)


@router.post("/{budget_id}/close", response_model=BudgetResponse)
async def close_budget(
    budget_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_admin),
):
    """Close an approved budget (admin only)."""
    budget = await BudgetService(db).close_budget(
        current_user.business_id, budget_id, actor_id=current_user.db_user_id
    )
    await db.commit()
    await db.refresh(budget)
    return BudgetResponse.model_validate(budget)


@router.post(
    "/{budget_id}/copy",
    response_model=BudgetResponse,
    status_code=status.HTTP_201_CREATED,
)
async def copy_budget(
    budget_id: UUID,
    data: BudgetCopy,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Copy a budget into another fiscal year with a percentage adjustment."""
    budget = await BudgetService(db).copy_budget(
        current_user.business_id,
        budget_id,
        data.new_fiscal_year,
        data.adjustment_percent,
        created_by_id=current_user.db_user_id,
    )
    await db.commit()
    await db.refresh(budget)
    return BudgetResponse.model_validate(budget)


@router.get("/{budget_id}/totals", response_model=BudgetTotals)
async def get_budget_totals(
    budget_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Per-period and per-account-type totals."""
    totals = await BudgetService(db).get_budget_totals(current_user.business_id, budget_id)
    return BudgetTotals(**totals)


@router.get("/{budget_id}/variance", response_model=VarianceReport)
async def get_variance(
    budget_id: UUID,
    period_number: Optional[int] = Query(default=None, ge=1, le=12),
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Budget against posted actuals."""
    report = await BudgetService(db).calculate_variance(
        current_user.business_id,
        budget_id,
        period_number=period_number,
        start_date=start_date,
        end_date=end_date,
    )
    return VarianceReport(**report)


@router.get("/{budget_id}/variance/summary", response_model=VarianceSummary)
async def get_variance_summary(
    budget_id: UUID,
    period_number: Optional[int] = Query(default=None, ge=1, le=12),
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Variance grouped into revenue, expense and net income."""
    summary = await BudgetService(db).get_variance_summary_by_type(
        current_user.business_id, budget_id, period_number=period_number
    )
    return VarianceSummary(**summary)
