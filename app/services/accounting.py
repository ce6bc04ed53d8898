"""Chart of accounts and ledger postings."""

from datetime import date
from typing import Any, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import DomainError, NotFoundError
from app.models.accounting import GLAccount, GLLedgerEntry
from app.models.enums import GLAccountType, NormalBalance

DEBIT_NORMAL_TYPES = (GLAccountType.ASSET, GLAccountType.EXPENSE)


def default_normal_balance(account_type: GLAccountType) -> NormalBalance:
    """Assets and expenses increase with debits; everything else with credits."""
    if account_type in DEBIT_NORMAL_TYPES:
        return NormalBalance.DEBIT
    return NormalBalance.CREDIT


class AccountingService:
    """GL accounts and ledger entries of a business."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _number_taken(
        self, business_id: UUID, account_number: str, exclude_id: Optional[UUID] = None
    ) -> bool:
        query = select(GLAccount.id).where(
            GLAccount.business_id == business_id,
            GLAccount.account_number == account_number,
        )
        if exclude_id:
            query = query.where(GLAccount.id != exclude_id)
        return (await self.db.execute(query)).scalar_one_or_none() is not None

    async def create_account(self, business_id: UUID, data: dict[str, Any]) -> GLAccount:
        if await self._number_taken(business_id, data["account_number"]):
            raise DomainError(f"Account number {data['account_number']} already exists")
        if data.get("parent_account_id"):
            await self.get_account(business_id, data["parent_account_id"])

        data = dict(data)
        if not data.get("normal_balance"):
            data["normal_balance"] = default_normal_balance(data["account_type"])
        account = GLAccount(business_id=business_id, is_active=True, **data)
        self.db.add(account)
        await self.db.flush()
        return account

    async def list_accounts(
        self,
        business_id: UUID,
        account_type: Optional[GLAccountType] = None,
        is_active: Optional[bool] = None,
        is_header_account: Optional[bool] = None,
    ) -> list[GLAccount]:
        query = select(GLAccount).where(GLAccount.business_id == business_id)
        if account_type:
            query = query.where(GLAccount.account_type == account_type)
        if is_active is not None:
            query = query.where(GLAccount.is_active == is_active)
        if is_header_account is not None:
            query = query.where(GLAccount.is_header_account == is_header_account)
        result = await self.db.execute(query.order_by(GLAccount.account_number))
        return list(result.scalars().all())

    async def get_account(self, business_id: UUID, account_id: UUID) -> GLAccount:
        result = await self.db.execute(
            select(GLAccount).where(
                GLAccount.id == account_id,
                GLAccount.business_id == business_id,
            )
        )
        account = result.scalar_one_or_none()
        if not account:
            raise NotFoundError("Account")
        return account

    async def update_account(
        self, business_id: UUID, account_id: UUID, data: dict[str, Any]
    ) -> GLAccount:
        account = await self.get_account(business_id, account_id)
        number = data.get("account_number")
        if number and await self._number_taken(business_id, number, exclude_id=account_id):
            raise DomainError(f"Account number {number} already exists")
        if data.get("parent_account_id") == account_id:
            raise DomainError("An account cannot be its own parent")
        for field, value in data.items():
            setattr(account, field, value)
        await self.db.flush()
        return account

    async def deactivate_account(self, business_id: UUID, account_id: UUID) -> GLAccount:
        account = await self.get_account(business_id, account_id)
        account.is_active = False
        await self.db.flush()
        return account

    async def reactivate_account(self, business_id: UUID, account_id: UUID) -> GLAccount:
        account = await self.get_account(business_id, account_id)
        account.is_active = True
        await self.db.flush()
        return account

    async def post_entry(
        self,
        business_id: UUID,
        data: dict[str, Any],
        created_by_id: Optional[UUID] = None,
    ) -> GLLedgerEntry:
        """Post a debit or a credit (exactly one side positive)."""
        debit = data.get("debit_cents") or 0
        credit = data.get("credit_cents") or 0
        if debit < 0 or credit < 0 or (debit > 0) == (credit > 0):
            raise DomainError("Exactly one of debit_cents or credit_cents must be positive")

        account = await self.get_account(business_id, data["account_id"])
        if account.is_header_account:
            raise DomainError("Cannot post to a header account")

        entry = GLLedgerEntry(business_id=business_id, created_by_id=created_by_id, **data)
        self.db.add(entry)
        await self.db.flush()
        return entry

    async def list_entries(
        self,
        business_id: UUID,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[UUID] = None,
    ) -> list[GLLedgerEntry]:
        query = select(GLLedgerEntry).where(GLLedgerEntry.business_id == business_id)
        if start_date:
            query = query.where(GLLedgerEntry.posting_date >= start_date)
        if end_date:
            query = query.where(GLLedgerEntry.posting_date <= end_date)
        if account_id:
            query = query.where(GLLedgerEntry.account_id == account_id)
        result = await self.db.execute(
            query.order_by(GLLedgerEntry.posting_date, GLLedgerEntry.created_at)
        )
        return list(result.scalars().all())
