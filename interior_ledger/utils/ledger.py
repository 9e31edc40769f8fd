# interior_ledger/utils/ledger.py
"""
Read-only aggregates over ledger entries.

Nothing in this module writes to the store. Every aggregate over an empty
scope returns its identity value (0.0, [] or {}); missing scoping keys raise
ValidationError.

Two income policies coexist:
- gross income counts every Income entry (balance-sheet views);
- recognized income skips transfers from other projects and is the only
  figure measured against a project's budget.
"""
import logging
import uuid
from collections import defaultdict
from datetime import MAXYEAR, MINYEAR, datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import desc, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from interior_ledger.core.config import settings
from interior_ledger.core.exceptions import NotFoundError, ValidationError
from interior_ledger.crud.entry import get_entries_for_user, list_entries
from interior_ledger.crud.project import count_projects_for_user, get_project_by_id
from interior_ledger.models.entry import Entry
from interior_ledger.models.enums import EntryType
from interior_ledger.models.project import Project
from interior_ledger.utils.validation import require_fields

logger = logging.getLogger(__name__)


# ────────────────────────────────────────────────────────────────────────────────
# HELPERS
# ────────────────────────────────────────────────────────────────────────────────
async def _sum_amount(db: AsyncSession, *criteria) -> float:
    result = await db.execute(
        select(func.coalesce(func.sum(Entry.amount), 0.0)).where(*criteria)
    )
    return float(result.scalar_one() or 0.0)


def _project_scope(user_id: uuid.UUID, project_id: uuid.UUID) -> tuple:
    require_fields(user_id=user_id, project_id=project_id)
    return (Entry.user_id == user_id, Entry.project_id == project_id)


def _split_by_type(entries: List[Entry]) -> Dict[str, float]:
    totals = {"income": 0.0, "expenses": 0.0}
    for entry in entries:
        if entry.type == EntryType.income:
            totals["income"] += entry.amount
        else:
            totals["expenses"] += entry.amount
    return totals


async def _get_owned_project(user_id: uuid.UUID, project_id: uuid.UUID, db: AsyncSession) -> Project:
    project = await get_project_by_id(project_id, user_id, db)
    if project is None:
        raise NotFoundError("Project not found")
    return project


# ────────────────────────────────────────────────────────────────────────────────
# PROJECT TOTALS
# ────────────────────────────────────────────────────────────────────────────────
async def gross_income(user_id: uuid.UUID, project_id: uuid.UUID, db: AsyncSession) -> float:
    """Every Income entry, transfers from other projects included."""
    scope = _project_scope(user_id, project_id)
    return await _sum_amount(db, *scope, Entry.type == EntryType.income)


async def recognized_income(user_id: uuid.UUID, project_id: uuid.UUID, db: AsyncSession) -> float:
    """Client income only: transfers from other projects are excluded."""
    scope = _project_scope(user_id, project_id)
    return await _sum_amount(
        db,
        *scope,
        Entry.type == EntryType.income,
        Entry.is_income_from_other_project.is_(False),
    )


async def total_expenses(user_id: uuid.UUID, project_id: uuid.UUID, db: AsyncSession) -> float:
    """Shared expenses count at their distributed amount."""
    scope = _project_scope(user_id, project_id)
    return await _sum_amount(db, *scope, Entry.type == EntryType.expense)


async def net_balance(user_id: uuid.UUID, project_id: uuid.UUID, db: AsyncSession) -> float:
    return await gross_income(user_id, project_id, db) - await total_expenses(user_id, project_id, db)


async def remaining_budget(project: Project, db: AsyncSession) -> float:
    """Budget left to collect from the client: budget minus recognized income."""
    return float(project.budget or 0.0) - await recognized_income(project.user_id, project.id, db)


async def balance_summary(user_id: uuid.UUID, project_id: uuid.UUID, db: AsyncSession) -> Dict[str, Any]:
    project = await _get_owned_project(user_id, project_id, db)
    income_total = await gross_income(user_id, project_id, db)
    recognized = await recognized_income(user_id, project_id, db)
    expense_total = await total_expenses(user_id, project_id, db)
    return {
        "total_income": income_total,
        "recognized_income": recognized,
        "total_expenses": expense_total,
        "net_balance": income_total - expense_total,
        "remaining_budget": float(project.budget or 0.0) - recognized,
        "currency": settings.CURRENCY,
        "last_updated": datetime.utcnow(),
    }


# ────────────────────────────────────────────────────────────────────────────────
# TIME SERIES
# ────────────────────────────────────────────────────────────────────────────────
async def monthly_breakdown(
    user_id: uuid.UUID,
    project_id: uuid.UUID,
    db: AsyncSession,
    year: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """Always twelve rows, January to December; empty months are zero."""
    scope = _project_scope(user_id, project_id)
    year_to_query = year if year is not None else datetime.utcnow().year
    if not MINYEAR <= year_to_query <= MAXYEAR:
        raise ValidationError(f"year must be between {MINYEAR} and {MAXYEAR}")

    criteria = [*scope, Entry.date >= datetime(year_to_query, 1, 1)]
    if year_to_query < MAXYEAR:
        criteria.append(Entry.date < datetime(year_to_query + 1, 1, 1))
    result = await db.execute(select(Entry).where(*criteria))
    per_month: Dict[int, List[Entry]] = defaultdict(list)
    for entry in result.scalars().all():
        per_month[entry.date.month].append(entry)

    breakdown = []
    for month in range(1, 13):
        totals = _split_by_type(per_month.get(month, []))
        breakdown.append({
            "month": month,
            "income": totals["income"],
            "expenses": totals["expenses"],
            "balance": totals["income"] - totals["expenses"],
        })
    return breakdown


async def yearly_breakdown(user_id: uuid.UUID, db: AsyncSession) -> List[Dict[str, Any]]:
    """Across every project of the user; only years with entries, oldest first."""
    entries = await get_entries_for_user(user_id, db)
    per_year: Dict[int, List[Entry]] = defaultdict(list)
    for entry in entries:
        per_year[entry.date.year].append(entry)

    breakdown = []
    for year in sorted(per_year):
        totals = _split_by_type(per_year[year])
        breakdown.append({
            "year": year,
            "income": totals["income"],
            "expenses": totals["expenses"],
            "balance": totals["income"] - totals["expenses"],
        })
    return breakdown


async def monthly_expenses(user_id: uuid.UUID, project_id: uuid.UUID, db: AsyncSession) -> List[Dict[str, Any]]:
    """Expense totals per (year, month) with data, oldest first."""
    entries = await list_entries(user_id, project_id, db)
    totals: Dict[tuple, float] = defaultdict(float)
    for entry in entries:
        if entry.type == EntryType.expense:
            totals[(entry.date.year, entry.date.month)] += entry.amount
    return [
        {"year": year, "month": month, "total": total}
        for (year, month), total in sorted(totals.items())
    ]


async def monthly_trend(user_id: uuid.UUID, project_id: uuid.UUID, db: AsyncSession) -> List[Dict[str, Any]]:
    """Income and expense totals per (year, month, type), oldest first."""
    entries = await list_entries(user_id, project_id, db)
    totals: Dict[tuple, float] = defaultdict(float)
    for entry in entries:
        totals[(entry.date.year, entry.date.month, EntryType(entry.type).value)] += entry.amount
    return [
        {"year": year, "month": month, "type": type_value, "total": total}
        for (year, month, type_value), total in sorted(totals.items())
    ]


# ────────────────────────────────────────────────────────────────────────────────
# CATEGORY VIEWS
# ────────────────────────────────────────────────────────────────────────────────
async def category_breakdown(
    user_id: uuid.UUID,
    project_id: uuid.UUID,
    entry_type: EntryType,
    db: AsyncSession,
) -> List[Dict[str, Any]]:
    """Totals per category for one entry type, largest first."""
    scope = _project_scope(user_id, project_id)
    require_fields(type=entry_type)
    total = func.sum(Entry.amount).label("total")
    result = await db.execute(
        select(Entry.category, total)
        .where(*scope, Entry.type == EntryType(entry_type))
        .group_by(Entry.category)
        .order_by(desc(total), Entry.category)
    )
    return [{"category": category, "total": float(amount)} for category, amount in result.all()]


async def income_vs_expense(user_id: uuid.UUID, project_id: uuid.UUID, db: AsyncSession) -> List[Dict[str, Any]]:
    scope = _project_scope(user_id, project_id)
    result = await db.execute(
        select(Entry.type, func.sum(Entry.amount))
        .where(*scope)
        .group_by(Entry.type)
    )
    return [
        {"type": EntryType(entry_type), "total": float(amount)}
        for entry_type, amount in sorted(result.all(), key=lambda row: EntryType(row[0]).value, reverse=True)
    ]


# ────────────────────────────────────────────────────────────────────────────────
# USER-WIDE VIEWS
# ────────────────────────────────────────────────────────────────────────────────
async def recent_transactions(
    user_id: uuid.UUID,
    db: AsyncSession,
    limit: int = settings.RECENT_TRANSACTIONS_LIMIT,
) -> List[Dict[str, Any]]:
    require_fields(user_id=user_id)
    result = await db.execute(
        select(Entry, Project.name)
        .join(Project, Entry.project_id == Project.id)
        .where(Entry.user_id == user_id)
        .order_by(desc(Entry.date))
        .limit(limit)
    )
    return [
        {
            "id": entry.id,
            "type": entry.type,
            "amount": entry.amount,
            "category": entry.category,
            "description": entry.description,
            "date": entry.date,
            "project_id": entry.project_id,
            "project_name": project_name,
        }
        for entry, project_name in result.all()
    ]


async def user_totals(
    user_id: uuid.UUID,
    db: AsyncSession,
    recent_limit: int = settings.RECENT_TRANSACTIONS_LIMIT,
) -> Dict[str, Any]:
    """Totals over every project of the user plus the newest transactions."""
    entries = await get_entries_for_user(user_id, db)

    income_by_category: Dict[str, float] = defaultdict(float)
    expenses_by_category: Dict[str, float] = defaultdict(float)
    per_month: Dict[tuple, List[Entry]] = defaultdict(list)
    for entry in entries:
        if entry.type == EntryType.income:
            income_by_category[entry.category] += entry.amount
        else:
            expenses_by_category[entry.category] += entry.amount
        per_month[(entry.date.year, entry.date.month)].append(entry)

    income_total = sum(income_by_category.values())
    expense_total = sum(expenses_by_category.values())

    monthly = []
    for (year, month) in sorted(per_month, reverse=True):
        totals = _split_by_type(per_month[(year, month)])
        monthly.append({
            "year": year,
            "month": month,
            "income": totals["income"],
            "expenses": totals["expenses"],
            "balance": totals["income"] - totals["expenses"],
        })

    return {
        "summary": {
            "total_projects": await count_projects_for_user(user_id, db),
            "total_income": income_total,
            "total_expenses": expense_total,
            "net_balance": income_total - expense_total,
        },
        "income_by_category": dict(income_by_category),
        "expenses_by_category": dict(expenses_by_category),
        "monthly_breakdown": monthly,
        "recent_transactions": await recent_transactions(user_id, db, limit=recent_limit),
    }


# ────────────────────────────────────────────────────────────────────────────────
# BALANCE SHEET
# ────────────────────────────────────────────────────────────────────────────────
def _categorize(entries: List[Entry]) -> Dict[str, Any]:
    grouped: Dict[str, List[Entry]] = defaultdict(list)
    for entry in entries:
        grouped[entry.category].append(entry)

    categories = []
    for category, items in grouped.items():
        categories.append({
            "category": category,
            "total_amount": sum(item.amount for item in items),
            "entries": [
                {
                    "id": item.id,
                    "amount": item.amount,
                    "description": item.description,
                    "date": item.date,
                    "is_shared_expense": bool(item.is_shared_expense),
                    "is_income_from_other_project": bool(item.is_income_from_other_project),
                }
                for item in items
            ],
        })
    categories.sort(key=lambda c: c["total_amount"], reverse=True)
    return {"total": sum(c["total_amount"] for c in categories), "categories": categories}


async def project_balance_sheet(user_id: uuid.UUID, project_id: uuid.UUID, db: AsyncSession) -> Dict[str, Any]:
    """Project details with income and expenses grouped by category."""
    require_fields(user_id=user_id, project_id=project_id)
    project = await _get_owned_project(user_id, project_id, db)
    entries = await list_entries(user_id, project_id, db)

    income = _categorize([e for e in entries if e.type == EntryType.income])
    expenses = _categorize([e for e in entries if e.type == EntryType.expense])
    recognized = sum(
        e.amount for e in entries
        if e.type == EntryType.income and not e.is_income_from_other_project
    )

    return {
        "project_details": {
            "id": project.id,
            "name": project.name,
            "description": project.description,
            "budget": project.budget,
            "status": project.status,
        },
        "summary": {
            "total_income": income["total"],
            "recognized_income": recognized,
            "total_expenses": expenses["total"],
            "net_balance": income["total"] - expenses["total"],
            "budget_remaining": float(project.budget or 0.0) - recognized,
        },
        "income": income,
        "expenses": expenses,
    }
