# interior_ledger/utils/shared_expense.py
"""
Split one logical expense evenly across every In Progress project.

The split uses plain float division; the cent-level drift between projects
is accepted and never reconciled. All entries of one distribution share a
batch_id and are written in a single session transaction.
"""
import logging
import uuid
from collections import OrderedDict
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import desc
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from interior_ledger.core.exceptions import NoEligibleProjectsError, PartialDistributionError
from interior_ledger.crud.project import get_in_progress_projects
from interior_ledger.models.entry import Entry
from interior_ledger.models.enums import EntryType
from interior_ledger.utils.validation import require_fields, require_positive, to_naive_utc

logger = logging.getLogger(__name__)

SHARED_EXPENSE_LABEL = "Shared Expense"


def shared_expense_description(description: Optional[str]) -> str:
    if description:
        return f"{description} ({SHARED_EXPENSE_LABEL})"
    return SHARED_EXPENSE_LABEL


async def distribute_shared_expense(
    user_id: uuid.UUID,
    amount: float,
    category: str,
    db: AsyncSession,
    description: Optional[str] = None,
    date: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Create one Expense entry per In Progress project of the user.

    Raises NoEligibleProjectsError when the user has no In Progress project,
    and PartialDistributionError (after rolling everything back) when a write
    fails part way through.
    """
    require_fields(user_id=user_id, category=category)
    require_positive("amount", amount)

    projects = await get_in_progress_projects(user_id, db)
    if not projects:
        raise NoEligibleProjectsError()

    original_amount = float(amount)
    distributed_amount = original_amount / len(projects)
    batch_id = uuid.uuid4()
    entry_date = to_naive_utc(date) or datetime.utcnow()
    entry_description = shared_expense_description(description)

    created: List[Entry] = []
    written_project_ids: List[uuid.UUID] = []
    current_project_id: Optional[uuid.UUID] = None
    try:
        for project in projects:
            current_project_id = project.id
            entry = Entry(
                user_id=user_id,
                project_id=project.id,
                type=EntryType.expense,
                amount=distributed_amount,
                category=category,
                description=entry_description,
                date=entry_date,
                is_shared_expense=True,
                original_amount=original_amount,
                batch_id=batch_id,
            )
            db.add(entry)
            await db.flush()
            created.append(entry)
            written_project_ids.append(project.id)
        current_project_id = None
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.error(
            f"Shared expense batch {batch_id} failed after {len(written_project_ids)}/{len(projects)} "
            f"projects, rolled back: {str(e)}"
        )
        raise PartialDistributionError(
            f"Shared expense distribution failed after {len(written_project_ids)} of {len(projects)} projects; "
            "no entries were kept",
            expected_count=len(projects),
            written_project_ids=written_project_ids,
            failed_project_id=current_project_id,
            rolled_back=True,
        ) from e

    for entry in created:
        await db.refresh(entry)
    logger.info(
        f"Distributed shared expense {original_amount} as {len(created)} x {distributed_amount} "
        f"(batch {batch_id}) for user {user_id}"
    )
    return {
        "entries": created,
        "distributed_amount": distributed_amount,
        "original_amount": original_amount,
        "project_count": len(created),
        "batch_id": batch_id,
    }


async def group_shared_expenses(
    user_id: uuid.UUID,
    db: AsyncSession,
    project_id: Optional[uuid.UUID] = None,
) -> List[Dict[str, Any]]:
    """Display view of shared expenses, newest first.

    Groups are keyed on (date, original_amount, category). This is a lossy
    derived view: two separate distributions with the same date, amount and
    category fall into one group, and ``batch_ids`` then lists more than one
    id.
    """
    require_fields(user_id=user_id)
    query = select(Entry).where(Entry.user_id == user_id, Entry.is_shared_expense.is_(True))
    if project_id is not None:
        query = query.where(Entry.project_id == project_id)
    result = await db.execute(query.order_by(desc(Entry.date), Entry.created_at))

    groups: "OrderedDict[tuple, Dict[str, Any]]" = OrderedDict()
    for entry in result.scalars().all():
        key = (entry.date, entry.original_amount, entry.category)
        group = groups.get(key)
        if group is None:
            group = {
                "date": entry.date,
                "original_amount": entry.original_amount,
                "category": entry.category,
                "description": entry.description,
                "distributed_amount": entry.amount,
                "project_ids": [],
                "batch_ids": [],
                "entries": [],
            }
            groups[key] = group
        group["entries"].append(entry)
        if entry.project_id not in group["project_ids"]:
            group["project_ids"].append(entry.project_id)
        if entry.batch_id is not None and entry.batch_id not in group["batch_ids"]:
            group["batch_ids"].append(entry.batch_id)

    for group in groups.values():
        group["project_count"] = len(group["project_ids"])
    return list(groups.values())
