# tests/test_entries.py
from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import IntegrityError

from interior_ledger.core.exceptions import NotFoundError, ValidationError
from interior_ledger.crud.category import list_categories
from interior_ledger.crud.entry import (
    add_entry,
    delete_entry,
    get_entry_by_id,
    list_entries,
    update_entry,
)
from interior_ledger.models.entry import Entry
from interior_ledger.models.enums import EntryType
from interior_ledger.schemas.entry import EntryUpdate


async def test_add_entry_with_builtin_category_registers_nothing(db, user_id, make_project):
    project = await make_project("Kitchen")
    entry = await add_entry(user_id, project.id, EntryType.expense, 2500, "Tiles", db)

    assert entry.amount == 2500.0
    assert entry.is_shared_expense is False
    assert entry.is_income_from_other_project is False
    assert await list_categories(user_id, db) == {"Expense": [], "Income": []}


async def test_add_entry_with_custom_category_registers_it_once(db, user_id, make_project):
    project = await make_project("Kitchen")
    await add_entry(user_id, project.id, EntryType.expense, 100, "Custom Vendor Fee", db)
    await add_entry(user_id, project.id, EntryType.expense, 150, "Custom Vendor Fee", db)

    assert await list_categories(user_id, db) == {"Expense": ["Custom Vendor Fee"], "Income": []}
    assert len(await list_entries(user_id, project.id, db)) == 2


async def test_add_entry_defaults_date_to_now(db, user_id, make_project):
    project = await make_project("Kitchen")
    before = datetime.utcnow()
    entry = await add_entry(user_id, project.id, EntryType.income, 1000, "Advance", db)
    assert entry.date >= before


@pytest.mark.parametrize("field", ["project_id", "amount", "category"])
async def test_add_entry_rejects_missing_fields(db, user_id, make_project, field):
    project = await make_project("Kitchen")
    kwargs = {"project_id": project.id, "amount": 100, "category": "Paint"}
    kwargs[field] = None if field != "amount" else 0
    with pytest.raises(ValidationError):
        await add_entry(user_id, kwargs["project_id"], EntryType.expense, kwargs["amount"], kwargs["category"], db)


async def test_add_entry_rejects_unknown_type(db, user_id, make_project):
    project = await make_project("Kitchen")
    with pytest.raises(ValidationError):
        await add_entry(user_id, project.id, "Refund", 100, "Paint", db)


async def test_list_entries_newest_first(db, user_id, make_project, make_entry):
    project = await make_project("Kitchen")
    await make_entry(project.id, "Expense", 10, "Paint", date=datetime(2024, 1, 5))
    await make_entry(project.id, "Expense", 20, "Paint", date=datetime(2024, 2, 5))

    entries = await list_entries(user_id, project.id, db)
    assert [e.amount for e in entries] == [20.0, 10.0]


async def test_update_entry_patches_only_given_fields(db, user_id, make_project, make_entry):
    project = await make_project("Kitchen")
    entry = await make_entry(project.id, "Expense", 10, "Paint", description="first coat")

    updated = await update_entry(entry.id, {"amount": 12.5, "owner": "ignored"}, db)
    assert updated.amount == 12.5
    assert updated.category == "Paint"
    assert updated.description == "first coat"


async def test_update_entry_rejects_empty_required_field(db, user_id, make_project, make_entry):
    project = await make_project("Kitchen")
    entry = await make_entry(project.id, "Expense", 10, "Paint")
    with pytest.raises(ValidationError):
        await update_entry(entry.id, {"category": ""}, db)


async def test_update_unknown_entry(db, random_id):
    with pytest.raises(NotFoundError):
        await update_entry(random_id, {"amount": 1}, db)


async def test_delete_entry_removes_exactly_one(db, user_id, make_project, make_entry):
    project = await make_project("Kitchen")
    keep = await make_entry(project.id, "Expense", 10, "Paint")
    drop = await make_entry(project.id, "Expense", 20, "Paint")

    await delete_entry(drop.id, db)
    assert await get_entry_by_id(drop.id, user_id, db) is None
    assert [e.id for e in await list_entries(user_id, project.id, db)] == [keep.id]


async def test_delete_unknown_entry(db, random_id):
    with pytest.raises(NotFoundError):
        await delete_entry(random_id, db)


async def test_entries_are_scoped_per_user(db, user_id, other_user_id, make_project, make_entry):
    project = await make_project("Kitchen")
    entry = await make_entry(project.id, "Expense", 10, "Paint")
    assert await get_entry_by_id(entry.id, other_user_id, db) is None
    assert await list_entries(other_user_id, project.id, db) == []


async def test_offset_dates_are_stored_as_utc(db, user_id, make_project):
    project = await make_project("Kitchen")
    late_evening = datetime(2024, 1, 31, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
    entry = await add_entry(user_id, project.id, EntryType.expense, 100, "Paint", db, date=late_evening)
    assert entry.date == datetime(2024, 2, 1, 4, 30)

    updated = await update_entry(entry.id, EntryUpdate(date="2024-03-01T00:15:00+05:30"), db)
    assert updated.date == datetime(2024, 2, 29, 18, 45)


async def test_failed_entry_write_leaves_no_category(db, user_id, make_project, monkeypatch):
    project_id = (await make_project("Kitchen")).id

    async def failing_commit():
        raise RuntimeError("connection dropped")

    monkeypatch.setattr(db, "commit", failing_commit)
    with pytest.raises(RuntimeError):
        await add_entry(user_id, project_id, EntryType.expense, 100, "Custom Vendor Fee", db)
    monkeypatch.undo()

    assert await list_categories(user_id, db) == {"Expense": [], "Income": []}
    assert await list_entries(user_id, project_id, db) == []


async def test_entry_cannot_be_both_shared_and_transferred(db, user_id, make_project):
    project_id = (await make_project("Kitchen")).id
    db.add(Entry(
        user_id=user_id,
        project_id=project_id,
        type=EntryType.income,
        amount=100,
        category="Lobby",
        is_shared_expense=True,
        is_income_from_other_project=True,
    ))
    with pytest.raises(IntegrityError):
        await db.flush()
    await db.rollback()
