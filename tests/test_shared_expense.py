# tests/test_shared_expense.py
from datetime import datetime

import pytest

from interior_ledger.core.exceptions import NoEligibleProjectsError, PartialDistributionError, ValidationError
from interior_ledger.crud.entry import get_entries_for_user, list_entries
from interior_ledger.models.enums import ProjectStatus
from interior_ledger.utils.ledger import total_expenses
from interior_ledger.utils.shared_expense import (
    SHARED_EXPENSE_LABEL,
    distribute_shared_expense,
    group_shared_expenses,
    shared_expense_description,
)


def test_description_suffix():
    assert shared_expense_description("Office rent") == "Office rent (Shared Expense)"
    assert shared_expense_description(None) == SHARED_EXPENSE_LABEL == "Shared Expense"


async def test_rent_split_between_two_projects(db, user_id, make_project):
    a = await make_project("A")
    b = await make_project("B")

    result = await distribute_shared_expense(user_id, 1000, "Rent", db)

    assert result["distributed_amount"] == 500.0
    assert result["original_amount"] == 1000.0
    assert result["project_count"] == 2
    for project in (a, b):
        (entry,) = await list_entries(user_id, project.id, db)
        assert entry.amount == 500.0
        assert entry.is_shared_expense is True
        assert entry.original_amount == 1000.0
        assert entry.category == "Rent"
        assert entry.description == "Shared Expense"
        assert entry.batch_id == result["batch_id"]


async def test_only_in_progress_projects_receive_a_share(db, user_id, make_project):
    active = await make_project("Active")
    await make_project("Pitch", status=ProjectStatus.under_discussion)
    done = await make_project("Done", status=ProjectStatus.completed)

    result = await distribute_shared_expense(user_id, 300, "Utilities", db, description="Power bill")

    assert result["project_count"] == 1
    assert result["entries"][0].project_id == active.id
    assert result["entries"][0].description == "Power bill (Shared Expense)"
    assert await list_entries(user_id, done.id, db) == []


async def test_shares_sum_back_to_the_original_amount(db, user_id, make_project):
    for name in ("A", "B", "C"):
        await make_project(name)

    result = await distribute_shared_expense(user_id, 100, "Rent", db)

    assert len(result["entries"]) == 3
    assert abs(sum(e.amount for e in result["entries"]) - 100) < 1e-9


async def test_project_expense_total_counts_the_distributed_amount(db, user_id, make_project):
    a = await make_project("A")
    await make_project("B")
    await distribute_shared_expense(user_id, 1000, "Rent", db)
    assert await total_expenses(user_id, a.id, db) == 500.0


async def test_no_in_progress_projects(db, user_id, make_project):
    await make_project("Pitch", status=ProjectStatus.under_discussion)
    with pytest.raises(NoEligibleProjectsError):
        await distribute_shared_expense(user_id, 1000, "Rent", db)


async def test_amount_must_be_positive(db, user_id, make_project):
    await make_project("A")
    with pytest.raises(ValidationError):
        await distribute_shared_expense(user_id, 0, "Rent", db)


async def test_failed_write_rolls_back_every_share(db, user_id, make_project, monkeypatch):
    a_id = (await make_project("A")).id
    await make_project("B")
    original_flush = db.flush
    calls = {"count": 0}

    async def flaky_flush(*args, **kwargs):
        calls["count"] += 1
        if calls["count"] == 2:
            raise RuntimeError("connection dropped")
        return await original_flush(*args, **kwargs)

    monkeypatch.setattr(db, "flush", flaky_flush)
    with pytest.raises(PartialDistributionError) as exc_info:
        await distribute_shared_expense(user_id, 1000, "Rent", db)
    monkeypatch.undo()

    error = exc_info.value
    assert error.expected_count == 2
    assert error.written_project_ids == [a_id]
    assert error.rolled_back is True
    assert error.to_dict()["written_count"] == 1
    assert await get_entries_for_user(user_id, db) == []


async def test_grouping_reconstructs_one_split(db, user_id, make_project):
    await make_project("A")
    await make_project("B")
    when = datetime(2024, 4, 1, 9, 0)
    await distribute_shared_expense(user_id, 1000, "Rent", db, date=when)

    (group,) = await group_shared_expenses(user_id, db)

    assert group["original_amount"] == 1000.0
    assert group["distributed_amount"] == 500.0
    assert group["project_count"] == 2
    assert len(group["batch_ids"]) == 1


async def test_grouping_merges_identical_splits(db, user_id, make_project):
    await make_project("A")
    await make_project("B")
    when = datetime(2024, 4, 1, 9, 0)
    first = await distribute_shared_expense(user_id, 1000, "Rent", db, date=when)
    second = await distribute_shared_expense(user_id, 1000, "Rent", db, date=when)

    (group,) = await group_shared_expenses(user_id, db)

    assert len(group["entries"]) == 4
    assert set(group["batch_ids"]) == {first["batch_id"], second["batch_id"]}


async def test_grouping_for_one_project(db, user_id, make_project):
    a = await make_project("A")
    await make_project("B")
    await distribute_shared_expense(user_id, 1000, "Rent", db, date=datetime(2024, 4, 1))
    await distribute_shared_expense(user_id, 400, "Utilities", db, date=datetime(2024, 5, 1))

    groups = await group_shared_expenses(user_id, db, project_id=a.id)

    assert [g["category"] for g in groups] == ["Utilities", "Rent"]
    assert all(g["project_ids"] == [a.id] for g in groups)
