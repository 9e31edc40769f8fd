# interior_ledger/crud/entry.py
import logging
import uuid
from datetime import datetime
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Union

from sqlalchemy import desc
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from interior_ledger.core.categories import BUILTIN_CATEGORIES
from interior_ledger.core.db_utils import with_db_retry
from interior_ledger.core.exceptions import NotFoundError, ValidationError
from interior_ledger.crud.category import ensure_category
from interior_ledger.models.entry import Entry
from interior_ledger.models.enums import EntryType
from interior_ledger.schemas.entry import EntryUpdate
from interior_ledger.utils.validation import require_fields, to_naive_utc

logger = logging.getLogger(__name__)

# Fields a ledger patch may touch; everything else is derived or an origin flag
PATCHABLE_FIELDS = ("type", "amount", "category", "description", "date")
# Fields that must keep a value once the entry exists
REQUIRED_FIELDS = ("type", "amount", "category", "date")

@with_db_retry()
async def list_entries(user_id: uuid.UUID, project_id: uuid.UUID, db: AsyncSession) -> List[Entry]:
    """All entries of one project, newest first."""
    require_fields(user_id=user_id, project_id=project_id)
    result = await db.execute(
        select(Entry)
        .where(Entry.user_id == user_id, Entry.project_id == project_id)
        .order_by(desc(Entry.date))
    )
    return result.scalars().all()

@with_db_retry()
async def get_entries_for_user(user_id: uuid.UUID, db: AsyncSession) -> List[Entry]:
    require_fields(user_id=user_id)
    result = await db.execute(select(Entry).where(Entry.user_id == user_id).order_by(desc(Entry.date)))
    return result.scalars().all()

async def get_entry_by_id(entry_id: uuid.UUID, user_id: uuid.UUID, db: AsyncSession) -> Optional[Entry]:
    result = await db.execute(
        select(Entry).where(Entry.id == entry_id, Entry.user_id == user_id)
    )
    return result.scalar_one_or_none()

async def _get_entry(entry_id: uuid.UUID, db: AsyncSession) -> Entry:
    result = await db.execute(select(Entry).where(Entry.id == entry_id))
    entry = result.scalar_one_or_none()
    if entry is None:
        raise NotFoundError("Entry not found")
    return entry

async def get_transfer_partner(entry: Entry, db: AsyncSession) -> Optional[Entry]:
    """The other half of a cross-project transfer, if this entry is one."""
    if entry.is_income_from_other_project:
        result = await db.execute(select(Entry).where(Entry.transfer_entry_id == entry.id))
        return result.scalars().first()
    if entry.transfer_entry_id is not None:
        result = await db.execute(select(Entry).where(Entry.id == entry.transfer_entry_id))
        return result.scalar_one_or_none()
    return None

async def add_entry(
    user_id: uuid.UUID,
    project_id: uuid.UUID,
    type: EntryType,
    amount: float,
    category: str,
    db: AsyncSession,
    description: Optional[str] = None,
    date: Optional[datetime] = None,
    builtin_categories: Mapping[EntryType, FrozenSet[str]] = BUILTIN_CATEGORIES,
) -> Entry:
    """Record one Income/Expense line.

    A category outside the built-in table is registered for the user the
    first time it is seen.
    """
    require_fields(user_id=user_id, project_id=project_id, type=type, amount=amount, category=category)
    try:
        entry_type = EntryType(type)
    except ValueError:
        raise ValidationError(f"type must be one of: {', '.join(t.value for t in EntryType)}")

    entry = Entry(
        user_id=user_id,
        project_id=project_id,
        type=entry_type,
        amount=float(amount),
        category=category,
        description=description,
        date=to_naive_utc(date) or datetime.utcnow(),
    )
    try:
        await ensure_category(user_id, entry_type, category, db, builtin_categories)
        db.add(entry)
        await db.commit()
    except Exception:
        # The category row only exists alongside the entry that introduced it
        await db.rollback()
        raise
    await db.refresh(entry)
    logger.info(f"Added {entry_type.value} entry {entry.id} of {entry.amount} to project {project_id}")
    return entry

async def update_entry(
    entry_id: uuid.UUID,
    fields: Union[EntryUpdate, Dict[str, Any]],
    db: AsyncSession,
) -> Entry:
    """Field-level patch of type/amount/category/description/date.

    Ownership is checked by the caller. Amount and date changes on one half
    of a transfer are mirrored onto the other half so the pair stays balanced.
    """
    if isinstance(fields, EntryUpdate):
        changes = fields.model_dump(exclude_unset=True)
    else:
        changes = {key: value for key, value in fields.items() if key in PATCHABLE_FIELDS}

    for name in REQUIRED_FIELDS:
        if name in changes and not changes[name]:
            raise ValidationError(f"{name} cannot be empty")
    if changes.get("date") is not None:
        changes["date"] = to_naive_utc(changes["date"])
    if "type" in changes:
        try:
            changes["type"] = EntryType(changes["type"])
        except ValueError:
            raise ValidationError(f"type must be one of: {', '.join(t.value for t in EntryType)}")

    entry = await _get_entry(entry_id, db)
    partner = await get_transfer_partner(entry, db)
    if partner is not None and "type" in changes and changes["type"] != entry.type:
        raise ValidationError("The type of a cross-project transfer entry cannot be changed")

    for field, value in changes.items():
        setattr(entry, field, value)
    if partner is not None:
        for field in ("amount", "date"):
            if field in changes:
                setattr(partner, field, changes[field])
        db.add(partner)
    db.add(entry)
    await db.commit()
    await db.refresh(entry)
    logger.info(f"Updated entry {entry.id}: {', '.join(sorted(changes)) or 'no changes'}")
    return entry

async def delete_entry(entry_id: uuid.UUID, db: AsyncSession) -> Entry:
    """Remove exactly one entry. Use delete_transfer for a transfer pair."""
    entry = await _get_entry(entry_id, db)
    await db.delete(entry)
    await db.commit()
    logger.info(f"Deleted entry {entry_id}")
    return entry
