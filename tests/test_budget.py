"""Budget math, lifecycle and the budget-versus-actual variance report."""

from datetime import date

import pytest

from app.core.errors import DomainError, InvalidStateError
from app.models.enums import BudgetStatus, GLAccountType, NormalBalance, SeasonalPattern
from app.services.accounting import AccountingService
from app.services.budget import (
    BudgetService,
    apply_seasonal_distribution,
    is_favorable,
    period_date_range,
    spread_annual_amount,
    variance_percent,
)


# === Pure arithmetic ===

def test_spread_puts_remainder_in_last_period():
    amounts = spread_annual_amount(100000)
    assert len(amounts) == 12
    assert amounts[:11] == [8333] * 11
    assert amounts[11] == 8337
    assert sum(amounts) == 100000


def test_spread_of_zero():
    assert spread_annual_amount(0) == [0] * 12


@pytest.mark.parametrize("pattern", list(SeasonalPattern))
def test_seasonal_distribution_sums_to_annual(pattern):
    amounts = apply_seasonal_distribution(123457, pattern)
    assert len(amounts) == 12
    assert sum(amounts) == 123457


def test_winter_heavy_distribution():
    amounts = apply_seasonal_distribution(100000, SeasonalPattern.WINTER_HEAVY)
    assert amounts == [12000, 12000, 10000, 7000, 5000, 4000, 4000, 5000, 7000, 10000, 12000, 12000]


def test_even_distribution_drift_goes_to_first_period():
    amounts = apply_seasonal_distribution(100000, SeasonalPattern.EVEN)
    assert amounts[0] == 8337
    assert amounts[1:] == [8333] * 11


def test_favorability_depends_on_account_type():
    assert is_favorable(GLAccountType.EXPENSE, 10000, 9000) is True
    assert is_favorable(GLAccountType.EXPENSE, 10000, 11000) is False
    assert is_favorable(GLAccountType.REVENUE, 10000, 11000) is True
    assert is_favorable(GLAccountType.REVENUE, 10000, 10000) is False


def test_variance_percent():
    assert variance_percent(-5000, 10000) == -50.0
    assert variance_percent(1, 3) == 33.33
    assert variance_percent(500, 0) == 0


def test_period_date_range():
    assert period_date_range(2024, 2) == (date(2024, 2, 1), date(2024, 2, 29))
    assert period_date_range(2026, 12) == (date(2026, 12, 1), date(2026, 12, 31))
    with pytest.raises(DomainError):
        period_date_range(2026, 13)


# === Service ===

@pytest.fixture
async def accounts(db, business):
    service = AccountingService(db)
    rent = await service.create_account(
        business.id,
        {"account_number": "4000", "account_name": "Rent Income", "account_type": GLAccountType.REVENUE},
    )
    repairs = await service.create_account(
        business.id,
        {"account_number": "5000", "account_name": "Repairs", "account_type": GLAccountType.EXPENSE},
    )
    await db.commit()
    return rent, repairs


@pytest.fixture
async def budget(db, business, accounts):
    rent, repairs = accounts
    service = BudgetService(db)
    budget = await service.create_budget(
        business.id, {"budget_name": "FY2026 Operating", "fiscal_year": 2026}
    )
    await service.upsert_budget_items(
        business.id,
        budget.id,
        [
            {"account_id": repairs.id, "periods": spread_annual_amount(120000)},
            {"account_id": rent.id, "periods": [200000] * 12},
        ],
    )
    await db.commit()
    return budget


async def test_normal_balance_defaults_from_account_type(accounts):
    rent, repairs = accounts
    assert rent.normal_balance == NormalBalance.CREDIT
    assert repairs.normal_balance == NormalBalance.DEBIT


async def test_monthly_variance(db, business, accounts, budget):
    rent, repairs = accounts
    ledger = AccountingService(db)
    await ledger.post_entry(
        business.id, {"account_id": rent.id, "posting_date": date(2026, 3, 5), "credit_cents": 210000}
    )
    await ledger.post_entry(
        business.id, {"account_id": repairs.id, "posting_date": date(2026, 3, 10), "debit_cents": 15000}
    )
    # Outside March
    await ledger.post_entry(
        business.id, {"account_id": repairs.id, "posting_date": date(2026, 4, 2), "debit_cents": 5000}
    )
    await db.commit()

    report = await BudgetService(db).calculate_variance(business.id, budget.id, period_number=3)

    assert report["start_date"] == date(2026, 3, 1)
    assert report["end_date"] == date(2026, 3, 31)
    assert [line["account_number"] for line in report["lines"]] == ["4000", "5000"]

    rent_line, repairs_line = report["lines"]
    assert rent_line["budgeted_cents"] == 200000
    assert rent_line["actual_cents"] == 210000
    assert rent_line["variance_cents"] == -10000
    assert rent_line["variance_percent"] == -5.0
    assert rent_line["is_favorable"] is True

    assert repairs_line["budgeted_cents"] == 10000
    assert repairs_line["actual_cents"] == 15000
    assert repairs_line["variance_cents"] == -5000
    assert repairs_line["variance_percent"] == -50.0
    assert repairs_line["is_favorable"] is False

    assert report["total_budgeted"] == 210000
    assert report["total_actual"] == 225000
    assert report["total_variance"] == -15000

    summary = await BudgetService(db).get_variance_summary_by_type(
        business.id, budget.id, period_number=3
    )
    assert summary["revenue"] == {"budgeted": 200000, "actual": 210000, "variance": -10000}
    assert summary["expense"] == {"budgeted": 10000, "actual": 15000, "variance": -5000}
    assert summary["net_income"] == {"budgeted": 190000, "actual": 195000, "variance": -5000}


async def test_annual_variance_without_entries(db, business, budget):
    report = await BudgetService(db).calculate_variance(business.id, budget.id)
    assert report["start_date"] == date(2026, 1, 1)
    assert report["end_date"] == date(2026, 12, 31)
    assert report["total_budgeted"] == 2400000 + 120000
    assert report["total_actual"] == 0


async def test_budget_totals(db, business, budget):
    totals = await BudgetService(db).get_budget_totals(business.id, budget.id)
    assert totals["total_budget_cents"] == 2520000
    assert totals["account_type_totals"] == {"revenue": 2400000, "expense": 120000}
    assert totals["period_totals"][0] == 210000


async def test_upsert_replaces_existing_item(db, business, accounts, budget):
    rent, _ = accounts
    items = await BudgetService(db).upsert_budget_items(
        business.id, budget.id, [{"account_id": rent.id, "periods": [100] * 12}]
    )
    assert len(items) == 2
    rent_item = next(item for item in items if item.account_id == rent.id)
    assert rent_item.annual_total_cents == 1200


async def test_only_draft_budgets_can_change(db, business, owner, accounts, budget):
    rent, _ = accounts
    service = BudgetService(db)

    approved = await service.approve_budget(business.id, budget.id, owner.id)
    assert approved.status == BudgetStatus.APPROVED
    assert approved.approved_by_id == owner.id

    with pytest.raises(InvalidStateError, match="Can only modify draft budgets"):
        await service.upsert_budget_items(
            business.id, budget.id, [{"account_id": rent.id, "periods": [1] * 12}]
        )
    with pytest.raises(InvalidStateError, match="Can only approve draft budgets"):
        await service.approve_budget(business.id, budget.id, owner.id)
    with pytest.raises(InvalidStateError, match="Can only delete draft budgets"):
        await service.delete_budget(business.id, budget.id)

    closed = await service.close_budget(business.id, budget.id, owner.id)
    assert closed.status == BudgetStatus.CLOSED


async def test_copy_budget_scales_amounts(db, business, accounts, budget):
    rent, _ = accounts
    service = BudgetService(db)
    copy = await service.copy_budget(business.id, budget.id, 2027, adjustment_percent=10)

    assert copy.status == BudgetStatus.DRAFT
    assert copy.fiscal_year == 2027
    assert copy.budget_name == "FY2026 Operating - 2027"
    assert copy.notes == "Copied from FY2026 Operating with 10% adjustment"

    items = await service.get_items(copy.id)
    rent_item = next(item for item in items if item.account_id == rent.id)
    assert rent_item.periods == [220000] * 12


async def test_budget_from_accounts(db, business, accounts):
    budget = await BudgetService(db).create_budget_from_accounts(
        business.id, {"budget_name": "Blank", "fiscal_year": 2027}
    )
    items = await BudgetService(db).get_items(budget.id)
    assert len(items) == 2
    assert all(item.annual_total_cents == 0 for item in items)


async def test_variance_endpoint(client, db, business, accounts, budget):
    rent, _ = accounts
    await AccountingService(db).post_entry(
        business.id, {"account_id": rent.id, "posting_date": date(2026, 1, 15), "credit_cents": 200000}
    )
    await db.commit()

    response = await client.get(
        f"/v1/budgets/{budget.id}/variance", params={"period_number": 1}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["total_budgeted"] == 210000
    assert body["lines"][0]["variance_cents"] == 0

    response = await client.post("/v1/budgets/spread", json={"annual_cents": 1200})
    assert response.status_code == 200
    assert response.json() == [100] * 12


async def test_copy_without_adjustment_keeps_amounts(db, business, accounts, budget):
    service = BudgetService(db)
    copy = await service.copy_budget(business.id, budget.id, 2027)

    assert copy.notes == "Copied from FY2026 Operating with 0% adjustment"
    source = {item.account_id: item.periods for item in await service.get_items(budget.id)}
    copied = {item.account_id: item.periods for item in await service.get_items(copy.id)}
    assert copied == source


async def test_zero_budget_variance_is_negated_actuals(db, business, accounts):
    rent, repairs = accounts
    service = BudgetService(db)
    budget = await service.create_budget(business.id, {"budget_name": "Zero", "fiscal_year": 2026})
    await service.upsert_budget_items(
        business.id,
        budget.id,
        [
            {"account_id": repairs.id, "periods": [0] * 12},
            {"account_id": rent.id, "periods": [0] * 12},
        ],
    )
    ledger = AccountingService(db)
    await ledger.post_entry(
        business.id, {"account_id": repairs.id, "posting_date": date(2026, 6, 1), "debit_cents": 4200}
    )
    await ledger.post_entry(
        business.id, {"account_id": rent.id, "posting_date": date(2026, 9, 1), "credit_cents": 150000}
    )
    await db.commit()

    report = await service.calculate_variance(business.id, budget.id)

    assert report["total_budgeted"] == 0
    assert report["total_actual"] == 154200
    assert report["total_variance"] == -154200
    for line in report["lines"]:
        assert line["variance_cents"] == -line["actual_cents"]
        assert line["variance_percent"] == 0


async def test_expense_on_budget_is_not_favorable(db, business, accounts):
    _, repairs = accounts
    service = BudgetService(db)
    budget = await service.create_budget(
        business.id, {"budget_name": "FY2025 Repairs", "fiscal_year": 2025}
    )
    await service.upsert_budget_items(
        business.id, budget.id, [{"account_id": repairs.id, "periods": spread_annual_amount(120000)}]
    )
    await AccountingService(db).post_entry(
        business.id, {"account_id": repairs.id, "posting_date": date(2025, 1, 20), "debit_cents": 10000}
    )
    await db.commit()

    report = await service.calculate_variance(business.id, budget.id, period_number=1)

    [line] = report["lines"]
    assert line["budgeted_cents"] == 10000
    assert line["actual_cents"] == 10000
    assert line["variance_cents"] == 0
    assert line["is_favorable"] is False
