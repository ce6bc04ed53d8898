"""Accounting router - chart of accounts and ledger postings."""

from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.security import AuthenticatedUser, require_business_member
from app.models.enums import GLAccountType
from app.schemas.accounting import (
    GLAccountCreate,
    GLAccountResponse,
    GLAccountUpdate,
    LedgerEntryCreate,
    LedgerEntryResponse,
)
from app.services.accounting import AccountingService

router = APIRouter(prefix="/accounting", tags=["accounting"])


@router.post(
    "/accounts",
    response_model=GLAccountResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_account(
    data: GLAccountCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Add an account to the chart of accounts."""
    account = await AccountingService(db).create_account(
        current_user.business_id, data.model_dump()
    )
    await db.commit()
    await db.refresh(account)
    return GLAccountResponse.model_validate(account)


@router.get("/accounts", response_model=List[GLAccountResponse])
async def list_accounts(
    account_type: Optional[GLAccountType] = None,
    is_active: Optional[bool] = None,
    is_header_account: Optional[bool] = None,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Chart of accounts ordered by account number."""
    accounts = await AccountingService(db).list_accounts(
        current_user.business_id,
        account_type=account_type,
        is_active=is_active,
        is_header_account=is_header_account,
    )
    return [GLAccountResponse.model_validate(a) for a in accounts]


@router.get("/accounts/{account_id}", response_model=GLAccountResponse)
async def get_account(
    account_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Get an account by ID."""
    account = await AccountingService(db).get_account(current_user.business_id, account_id)
    return GLAccountResponse.model_validate(account)


@router.patch("/accounts/{account_id}", response_model=GLAccountResponse)
async def update_account(
    account_id: UUID,
    data: GLAccountUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Update an account."""
    account = await AccountingService(db).update_account(
        current_user.business_id, account_id, data.model_dump(exclude_unset=True)
    )
    await db.commit()
    await db.refresh(account)
    return GLAccountResponse.model_validate(account)


@router.post("/accounts/{account_id}/deactivate", response_model=GLAccountResponse)
async def deactivate_account(
    account_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Deactivate an account."""
    account = await AccountingService(db).deactivate_account(current_user.business_id, account_id)
    await db.commit()
    await db.refresh(account)
    return GLAccountResponse.model_validate(account)


@router.post("/accounts/{account_id}/reactivate", response_model=GLAccountResponse)
async def reactivate_account(
    account_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Reactivate an account."""
    account = await AccountingService(db).reactivate_account(current_user.business_id, account_id)
    await db.commit()
    await db.refresh(account)
    return GLAccountResponse.model_validate(account)


@router.post(
    "/entries",
    response_model=LedgerEntryResponse,
    status_code=status.HTTP_201_CREATED,
)
async def post_entry(
    data: LedgerEntryCreate,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Post a debit or credit to an account."""
    entry = await AccountingService(db).post_entry(
        current_user.business_id, data.model_dump(), created_by_id=current_user.db_user_id
    )
    await db.commit()
    await db.refresh(entry)
    return LedgerEntryResponse.model_validate(entry)


@router.get("/entries", response_model=List[LedgerEntryResponse])
async def list_entries(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    account_id: Optional[UUID] = None,
    db: AsyncSession = Depends(get_db),
    current_user: AuthenticatedUser = Depends(require_business_member),
):
    """Ledger postings, optionally by date range or account."""
    entries = await AccountingService(db).list_entries(
        current_user.business_id,
        start_date=start_date,
        end_date=end_date,
        account_id=account_id,
    )
    return [LedgerEntryResponse.model_validate(e) for e in entries]
