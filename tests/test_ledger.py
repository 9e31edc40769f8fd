# tests/test_ledger.py
from datetime import datetime

import pytest

from interior_ledger.core.exceptions import NotFoundError, ValidationError
from interior_ledger.models.enums import EntryType
from interior_ledger.utils.ledger import (
    balance_summary,
    category_breakdown,
    gross_income,
    income_vs_expense,
    monthly_breakdown,
    monthly_expenses,
    monthly_trend,
    net_balance,
    project_balance_sheet,
    recent_transactions,
    recognized_income,
    remaining_budget,
    total_expenses,
    user_totals,
    yearly_breakdown,
)
from interior_ledger.utils.transfers import transfer_income


@pytest.fixture
async def kitchen(db, make_project, make_entry):
    """Kitchen with two client payments and three expenses in 2024."""
    project = await make_project("Kitchen", budget=50000)
    await make_entry(project.id, "Income", 20000, "Advance", date=datetime(2024, 1, 10))
    await make_entry(project.id, "Income", 5000, "Client Payment", date=datetime(2024, 3, 2))
    await make_entry(project.id, "Expense", 8000, "Tiles", date=datetime(2024, 1, 20))
    await make_entry(project.id, "Expense", 3000, "Labour", date=datetime(2024, 3, 5))
    await make_entry(project.id, "Expense", 1500, "Labour", date=datetime(2023, 12, 28))
    return project


async def test_empty_project_aggregates_are_zero(db, user_id, make_project):
    project = await make_project("Empty", budget=1000)
    assert await gross_income(user_id, project.id, db) == 0.0
    assert await recognized_income(user_id, project.id, db) == 0.0
    assert await total_expenses(user_id, project.id, db) == 0.0
    assert await net_balance(user_id, project.id, db) == 0.0
    assert await remaining_budget(project, db) == 1000.0
    assert await category_breakdown(user_id, project.id, EntryType.expense, db) == []
    assert await monthly_expenses(user_id, project.id, db) == []


async def test_totals(db, user_id, kitchen):
    assert await gross_income(user_id, kitchen.id, db) == 25000.0
    assert await recognized_income(user_id, kitchen.id, db) == 25000.0
    assert await total_expenses(user_id, kitchen.id, db) == 12500.0
    assert await net_balance(user_id, kitchen.id, db) == 12500.0
    assert await remaining_budget(kitchen, db) == 25000.0


async def test_transfers_count_toward_gross_but_not_recognized_income(db, user_id, kitchen, make_project):
    await make_project("Lobby")
    await transfer_income(user_id, kitchen.id, "Lobby", 4000, db)

    assert await gross_income(user_id, kitchen.id, db) == 29000.0
    assert await recognized_income(user_id, kitchen.id, db) == 25000.0
    assert await remaining_budget(kitchen, db) == 25000.0

    summary = await balance_summary(user_id, kitchen.id, db)
    assert summary["total_income"] == 29000.0
    assert summary["recognized_income"] == 25000.0
    assert summary["remaining_budget"] == 25000.0
    assert summary["net_balance"] == 29000.0 - 12500.0


async def test_balance_summary_of_unknown_project(db, user_id, random_id):
    with pytest.raises(NotFoundError):
        await balance_summary(user_id, random_id, db)


async def test_balance_summary_of_someone_elses_project(db, other_user_id, kitchen):
    with pytest.raises(NotFoundError):
        await balance_summary(other_user_id, kitchen.id, db)


async def test_missing_scope_is_a_validation_error(db, user_id):
    with pytest.raises(ValidationError):
        await gross_income(user_id, None, db)


async def test_monthly_breakdown_has_twelve_rows(db, user_id, kitchen):
    rows = await monthly_breakdown(user_id, kitchen.id, db, year=2024)

    assert [r["month"] for r in rows] == list(range(1, 13))
    assert rows[0] == {"month": 1, "income": 20000.0, "expenses": 8000.0, "balance": 12000.0}
    assert rows[2] == {"month": 3, "income": 5000.0, "expenses": 3000.0, "balance": 2000.0}
    assert all(r["income"] == r["expenses"] == 0.0 for r in rows if r["month"] not in (1, 3))


async def test_monthly_breakdown_of_a_year_without_entries(db, user_id, kitchen):
    rows = await monthly_breakdown(user_id, kitchen.id, db, year=2019)
    assert len(rows) == 12
    assert sum(r["balance"] for r in rows) == 0.0


async def test_monthly_breakdown_year_bounds(db, user_id, kitchen, make_entry):
    await make_entry(kitchen.id, "Expense", 700, "Paint", date=datetime(9999, 12, 31, 23, 0))
    rows = await monthly_breakdown(user_id, kitchen.id, db, year=9999)
    assert rows[11]["expenses"] == 700.0

    for year in (0, 10000):
        with pytest.raises(ValidationError):
            await monthly_breakdown(user_id, kitchen.id, db, year=year)


async def test_yearly_breakdown_lists_only_years_with_entries(db, user_id, kitchen):
    rows = await yearly_breakdown(user_id, db)
    assert [r["year"] for r in rows] == [2023, 2024]
    assert rows[0]["expenses"] == 1500.0
    assert rows[1]["balance"] == 25000.0 - 11000.0


async def test_category_breakdown_largest_first(db, user_id, kitchen):
    rows = await category_breakdown(user_id, kitchen.id, EntryType.expense, db)
    assert rows == [{"category": "Tiles", "total": 8000.0}, {"category": "Labour", "total": 4500.0}]


async def test_income_vs_expense(db, user_id, kitchen):
    rows = await income_vs_expense(user_id, kitchen.id, db)
    assert [(r["type"], r["total"]) for r in rows] == [(EntryType.income, 25000.0), (EntryType.expense, 12500.0)]


async def test_monthly_series(db, user_id, kitchen):
    assert await monthly_expenses(user_id, kitchen.id, db) == [
        {"year": 2023, "month": 12, "total": 1500.0},
        {"year": 2024, "month": 1, "total": 8000.0},
        {"year": 2024, "month": 3, "total": 3000.0},
    ]
    trend = await monthly_trend(user_id, kitchen.id, db)
    assert {"year": 2024, "month": 1, "type": "Income", "total": 20000.0} in trend
    assert len(trend) == 5


async def test_reads_are_idempotent(db, user_id, kitchen):
    first = await project_balance_sheet(user_id, kitchen.id, db)
    second = await project_balance_sheet(user_id, kitchen.id, db)
    assert first == second
    assert await monthly_breakdown(user_id, kitchen.id, db, year=2024) == await monthly_breakdown(
        user_id, kitchen.id, db, year=2024
    )


async def test_project_balance_sheet_sections(db, user_id, kitchen):
    sheet = await project_balance_sheet(user_id, kitchen.id, db)

    assert sheet["project_details"]["name"] == "Kitchen"
    assert sheet["summary"]["budget_remaining"] == 25000.0
    assert sheet["expenses"]["total"] == 12500.0
    assert [c["category"] for c in sheet["expenses"]["categories"]] == ["Tiles", "Labour"]
    labour = sheet["expenses"]["categories"][1]
    assert labour["total_amount"] == 4500.0
    assert len(labour["entries"]) == 2


async def test_user_totals_across_projects(db, user_id, kitchen, make_project, make_entry):
    bath = await make_project("Bath")
    await make_entry(bath.id, "Expense", 700, "Plumbing", date=datetime(2024, 3, 9))

    totals = await user_totals(user_id, db, recent_limit=3)

    assert totals["summary"] == {
        "total_projects": 2,
        "total_income": 25000.0,
        "total_expenses": 13200.0,
        "net_balance": 11800.0,
    }
    assert totals["expenses_by_category"]["Labour"] == 4500.0
    assert [(m["year"], m["month"]) for m in totals["monthly_breakdown"]] == [(2024, 3), (2024, 1), (2023, 12)]
    assert len(totals["recent_transactions"]) == 3
    assert totals["recent_transactions"][0]["project_name"] == "Bath"


async def test_recent_transactions_newest_first(db, user_id, kitchen):
    rows = await recent_transactions(user_id, db, limit=2)
    assert [r["amount"] for r in rows] == [3000.0, 5000.0]
