# tests/test_categories.py
import pytest

from interior_ledger.core.categories import (
    BUILTIN_CATEGORIES,
    builtin_category_listing,
    is_builtin_category,
)
from interior_ledger.core.exceptions import DuplicateError, ValidationError
from interior_ledger.crud.category import (
    ensure_category,
    get_categories_for_user,
    list_all_categories,
    list_categories,
    register_category,
)
from interior_ledger.models.enums import EntryType


class TestBuiltinCategories:

    def test_builtin_names_are_per_type(self):
        assert is_builtin_category(EntryType.expense, "Tiles")
        assert not is_builtin_category(EntryType.income, "Tiles")
        assert is_builtin_category(EntryType.income, "Client Payment")

    def test_project_payment_is_a_builtin_expense(self):
        assert "Project Payment" in BUILTIN_CATEGORIES[EntryType.expense]

    def test_listing_is_sorted_and_keyed_by_type_value(self):
        listing = builtin_category_listing()
        assert set(listing) == {"Expense", "Income"}
        assert listing["Expense"] == sorted(listing["Expense"])

    def test_custom_table_can_be_supplied(self):
        table = {EntryType.expense: frozenset({"Glass"}), EntryType.income: frozenset()}
        assert is_builtin_category(EntryType.expense, "Glass", table)
        assert not is_builtin_category(EntryType.expense, "Tiles", table)


async def test_register_then_list(db, user_id):
    await register_category(user_id, EntryType.expense, "Custom Vendor Fee", db)
    await register_category(user_id, EntryType.income, "Referral Bonus", db)

    listed = await list_categories(user_id, db)
    assert listed == {"Expense": ["Custom Vendor Fee"], "Income": ["Referral Bonus"]}


async def test_register_duplicate_is_reported(db, user_id):
    await register_category(user_id, EntryType.expense, "Custom Vendor Fee", db)
    with pytest.raises(DuplicateError):
        await register_category(user_id, EntryType.expense, "Custom Vendor Fee", db)


async def test_same_name_under_other_type_is_not_a_duplicate(db, user_id):
    await register_category(user_id, EntryType.expense, "Consulting", db)
    await register_category(user_id, EntryType.income, "Consulting", db)
    assert len(await get_categories_for_user(user_id, db)) == 2


async def test_register_requires_a_name(db, user_id):
    with pytest.raises(ValidationError):
        await register_category(user_id, EntryType.expense, "", db)


async def test_ensure_category_ignores_builtins_and_repeats(db, user_id):
    assert await ensure_category(user_id, EntryType.expense, "Tiles", db) is None
    created = await ensure_category(user_id, EntryType.expense, "Site Security", db)
    assert created is not None
    assert await ensure_category(user_id, EntryType.expense, "Site Security", db) is None
    assert [c.category for c in await get_categories_for_user(user_id, db)] == ["Site Security"]


async def test_categories_are_scoped_per_user(db, user_id, other_user_id):
    await register_category(other_user_id, EntryType.expense, "Their Category", db)
    assert await list_categories(user_id, db) == {"Expense": [], "Income": []}


async def test_all_categories_merges_builtin_and_custom(db, user_id):
    await register_category(user_id, EntryType.expense, "Custom Vendor Fee", db)
    merged = await list_all_categories(user_id, db)
    assert "Tiles" in merged["Expense"]
    assert merged["Expense"][-1] == "Custom Vendor Fee"
    assert "Custom Vendor Fee" not in merged["Income"]
