# interior_ledger/core/categories.py
from typing import Dict, FrozenSet, List, Mapping

from interior_ledger.models.enums import EntryType

# Built-in categories are never stored; only names outside this table become
# Category rows. Every caller that needs the list receives this table explicitly.
BUILTIN_CATEGORIES: Dict[EntryType, FrozenSet[str]] = {
    EntryType.expense: frozenset({
        "Materials",
        "Labour",
        "Tiles",
        "Plywood",
        "Hardware",
        "Paint",
        "Electrical",
        "Plumbing",
        "Furniture",
        "Transport",
        "Rent",
        "Salary",
        "Utilities",
        "Project Payment",
        "Miscellaneous",
    }),
    EntryType.income: frozenset({
        "Client Payment",
        "Advance",
        "Final Payment",
        "Consultation Fee",
        "Miscellaneous",
    }),
}

# Category stamped on the expense half of a cross-project transfer
PROJECT_PAYMENT_CATEGORY = "Project Payment"


def is_builtin_category(
    entry_type: EntryType,
    category: str,
    builtin_categories: Mapping[EntryType, FrozenSet[str]] = BUILTIN_CATEGORIES,
) -> bool:
    return category in builtin_categories.get(EntryType(entry_type), frozenset())


def builtin_category_listing(
    builtin_categories: Mapping[EntryType, FrozenSet[str]] = BUILTIN_CATEGORIES,
) -> Dict[str, List[str]]:
    return {
        EntryType.expense.value: sorted(builtin_categories.get(EntryType.expense, ())),
        EntryType.income.value: sorted(builtin_categories.get(EntryType.income, ())),
    }
