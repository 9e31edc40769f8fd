# interior_ledger/crud/category.py
import logging
import uuid
from typing import Dict, FrozenSet, List, Mapping, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from interior_ledger.core.categories import BUILTIN_CATEGORIES, builtin_category_listing, is_builtin_category
from interior_ledger.core.db_utils import with_db_retry
from interior_ledger.core.exceptions import DuplicateError
from interior_ledger.models.category import Category
from interior_ledger.models.enums import EntryType
from interior_ledger.utils.validation import require_fields

logger = logging.getLogger(__name__)

@with_db_retry()
async def get_categories_for_user(user_id: uuid.UUID, db: AsyncSession) -> List[Category]:
    result = await db.execute(
        select(Category).where(Category.user_id == user_id).order_by(Category.created_at, Category.category)
    )
    return result.scalars().all()

async def get_category(user_id: uuid.UUID, entry_type: EntryType, name: str, db: AsyncSession) -> Optional[Category]:
    result = await db.execute(
        select(Category).where(
            Category.user_id == user_id,
            Category.type == EntryType(entry_type),
            Category.category == name,
        )
    )
    return result.scalar_one_or_none()

async def list_categories(user_id: uuid.UUID, db: AsyncSession) -> Dict[str, List[str]]:
    """Custom category names per type. Built-ins are a caller-side constant."""
    require_fields(user_id=user_id)
    formatted: Dict[str, List[str]] = {EntryType.expense.value: [], EntryType.income.value: []}
    for cat in await get_categories_for_user(user_id, db):
        formatted[EntryType(cat.type).value].append(cat.category)
    return formatted

async def list_all_categories(
    user_id: uuid.UUID,
    db: AsyncSession,
    builtin_categories: Mapping[EntryType, FrozenSet[str]] = BUILTIN_CATEGORIES,
) -> Dict[str, List[str]]:
    """Built-in names first, then the user's custom names, per type."""
    merged = builtin_category_listing(builtin_categories)
    custom = await list_categories(user_id, db)
    for type_name, names in custom.items():
        merged[type_name].extend(name for name in names if name not in merged[type_name])
    return merged

async def register_category(user_id: uuid.UUID, entry_type: EntryType, name: str, db: AsyncSession) -> Category:
    """Explicit registration: a colliding (user, type, category) is reported back."""
    require_fields(user_id=user_id, type=entry_type, category=name)
    if await get_category(user_id, entry_type, name, db) is not None:
        raise DuplicateError("Category already exists")

    new_cat = Category(user_id=user_id, type=EntryType(entry_type), category=name)
    db.add(new_cat)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race against a concurrent insert of the same triple
        await db.rollback()
        raise DuplicateError("Category already exists")
    await db.refresh(new_cat)
    logger.info(f"Registered category '{name}' ({EntryType(entry_type).value}) for user {user_id}")
    return new_cat

async def ensure_category(
    user_id: uuid.UUID,
    entry_type: EntryType,
    name: str,
    db: AsyncSession,
    builtin_categories: Mapping[EntryType, FrozenSet[str]] = BUILTIN_CATEGORIES,
) -> Optional[Category]:
    """Insert-or-ignore used by the ledger write path.

    Only flushes: the caller commits the category together with the entry
    that introduced it. Returns the newly created Category, or None when the
    name is built-in or already registered.
    """
    if is_builtin_category(entry_type, name, builtin_categories):
        return None
    if await get_category(user_id, entry_type, name, db) is not None:
        return None

    new_cat = Category(user_id=user_id, type=EntryType(entry_type), category=name)
    db.add(new_cat)
    try:
        await db.flush()
    except IntegrityError:
        await db.rollback()
        return None
    await db.refresh(new_cat)
    logger.info(f"Auto-registered category '{name}' ({EntryType(entry_type).value}) for user {user_id}")
    return new_cat
