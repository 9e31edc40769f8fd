# interior_ledger/utils/transfers.py
"""
Cross-project income transfer.

A project that spends money earned on another project records it as income
transferred from that project. Two entries are written together:

1. Income on the receiving project, flagged is_income_from_other_project,
   categorized under the funding project's name;
2. Expense on the funding project, category "Project Payment", pointing back
   at (1) through transfer_entry_id.

Both carry the same amount and date, so money is conserved across the two
books. Transfer income never counts toward recognized income.
"""
import logging
import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from interior_ledger.core.categories import PROJECT_PAYMENT_CATEGORY
from interior_ledger.core.exceptions import NotFoundError, PartialTransferError, ValidationError
from interior_ledger.crud.entry import get_transfer_partner
from interior_ledger.crud.project import get_project_by_id, get_project_by_name_for_user
from interior_ledger.models.entry import Entry
from interior_ledger.models.enums import EntryType
from interior_ledger.utils.validation import require_fields, require_positive, to_naive_utc

logger = logging.getLogger(__name__)

TRANSFER_BOTH_SUCCEEDED = "both_succeeded"
AMOUNT_TOLERANCE = 1e-9


def payment_description(project_name: str) -> str:
    return f"Payment to {project_name}"


async def transfer_income(
    user_id: uuid.UUID,
    current_project_id: uuid.UUID,
    source_project_name: str,
    amount: float,
    db: AsyncSession,
    description: Optional[str] = None,
    date: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Write both halves of a transfer in one transaction.

    If the expense half fails after the income half was flushed, the
    transaction is rolled back and PartialTransferError reports the
    compensation.
    """
    require_fields(user_id=user_id, current_project_id=current_project_id, source_project_name=source_project_name)
    require_positive("amount", amount)

    current_project = await get_project_by_id(current_project_id, user_id, db)
    if current_project is None:
        raise NotFoundError("Project not found")
    source_project = await get_project_by_name_for_user(source_project_name, user_id, db)
    if source_project is None:
        raise NotFoundError(f"Source project '{source_project_name}' not found")
    if source_project.id == current_project.id:
        raise ValidationError("A project cannot transfer income to itself")

    # Rollback expires loaded instances, so keep plain copies of what the logs need
    current_id, source_id = current_project.id, source_project.id
    entry_date = to_naive_utc(date) or datetime.utcnow()
    income = Entry(
        user_id=user_id,
        project_id=current_project.id,
        type=EntryType.income,
        amount=float(amount),
        category=source_project.name,
        description=description,
        date=entry_date,
        is_income_from_other_project=True,
        source_project_id=source_project.id,
    )
    try:
        db.add(income)
        await db.flush()
        income_id = income.id
    except Exception as e:
        await db.rollback()
        logger.error(f"Transfer income write failed for project {current_id}: {str(e)}")
        raise PartialTransferError(
            "Recording the transferred income failed; nothing was written",
            failed_step="income",
            compensated=False,
        ) from e

    expense = Entry(
        user_id=user_id,
        project_id=source_id,
        type=EntryType.expense,
        amount=float(amount),
        category=PROJECT_PAYMENT_CATEGORY,
        description=payment_description(current_project.name),
        date=entry_date,
        transfer_entry_id=income.id,
    )
    try:
        db.add(expense)
        await db.flush()
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.error(
            f"Transfer expense write failed on project {source_id}; "
            f"income {income_id} rolled back: {str(e)}"
        )
        raise PartialTransferError(
            "Recording the payment on the source project failed; the transferred income was rolled back",
            failed_step="expense",
            compensated=True,
        ) from e

    await db.refresh(income)
    await db.refresh(expense)
    logger.info(
        f"Transferred {income.amount} from project {source_id} to project {current_id} "
        f"(income {income.id}, expense {expense.id})"
    )
    return {"status": TRANSFER_BOTH_SUCCEEDED, "income_entry": income, "expense_entry": expense}


async def delete_transfer(entry_id: uuid.UUID, db: AsyncSession) -> List[uuid.UUID]:
    """Delete both halves of a transfer pair given either half."""
    result = await db.execute(select(Entry).where(Entry.id == entry_id))
    entry = result.scalar_one_or_none()
    if entry is None:
        raise NotFoundError("Entry not found")

    partner = await get_transfer_partner(entry, db)
    deleted = [entry.id]
    try:
        await db.delete(entry)
        if partner is not None:
            await db.delete(partner)
            deleted.append(partner.id)
        await db.commit()
    except Exception as e:
        await db.rollback()
        logger.error(f"Deleting transfer pair of entry {entry_id} failed, rolled back: {str(e)}")
        raise
    if partner is None:
        logger.warning(f"Transfer entry {entry_id} had no paired entry; deleted it alone")
    logger.info(f"Deleted transfer entries {', '.join(str(i) for i in deleted)}")
    return deleted


async def verify_transfer_pairs(user_id: uuid.UUID, db: AsyncSession) -> List[Dict[str, Any]]:
    """Transfer incomes whose paired expense is missing or unbalanced."""
    require_fields(user_id=user_id)
    result = await db.execute(
        select(Entry).where(Entry.user_id == user_id, Entry.is_income_from_other_project.is_(True))
    )
    mismatches = []
    for income in result.scalars().all():
        pairs = await db.execute(select(Entry).where(Entry.transfer_entry_id == income.id))
        expenses = pairs.scalars().all()
        base = {
            "income_entry_id": income.id,
            "project_id": income.project_id,
            "source_project_id": income.source_project_id,
            "amount": income.amount,
        }
        if len(expenses) != 1:
            base["reason"] = "missing paired expense" if not expenses else "more than one paired expense"
            mismatches.append(base)
            continue
        expense = expenses[0]
        if expense.project_id != income.source_project_id:
            base.update(paired_expense_id=expense.id, paired_amount=expense.amount,
                        reason="paired expense is not on the source project")
            mismatches.append(base)
        elif abs(expense.amount - income.amount) > AMOUNT_TOLERANCE:
            base.update(paired_expense_id=expense.id, paired_amount=expense.amount,
                        reason="amounts differ")
            mismatches.append(base)
    return mismatches
