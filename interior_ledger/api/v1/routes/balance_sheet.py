# interior_ledger/api/v1/routes/balance_sheet.py
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Dict, List, Optional
import uuid

from interior_ledger.schemas.analytics import (
    BalanceSummary,
    MonthlyBreakdownItem,
    YearlyBreakdownItem,
    UserTotals,
)
from interior_ledger.crud.project import get_project_by_id
from interior_ledger.utils.ledger import (
    balance_summary,
    monthly_breakdown,
    yearly_breakdown,
    user_totals,
    project_balance_sheet,
)
from interior_ledger.utils.documents import build_balance_sheet_document
from interior_ledger.core.database import get_async_session
from interior_ledger.core.auth import User
from interior_ledger.api.deps import get_current_user

router = APIRouter(prefix="/balance-sheet", tags=["balance-sheet"])

@router.get("/yearly", response_model=List[YearlyBreakdownItem])
async def read_yearly_breakdown(
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Income, expenses and balance per year across all of the user's projects."""
    user_id = uuid.UUID(str(user.id))
    return await yearly_breakdown(user_id, db)

@router.get("/user/total-calculations", response_model=UserTotals)
async def read_user_totals(
    recent_limit: Optional[int] = Query(None, ge=1, le=100),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    user_id = uuid.UUID(str(user.id))
    if recent_limit is None:
        return await user_totals(user_id, db)
    return await user_totals(user_id, db, recent_limit=recent_limit)

@router.get("/{project_id}/summary", response_model=BalanceSummary)
async def read_balance_summary(
    project_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    user_id = uuid.UUID(str(user.id))
    return await balance_summary(user_id, project_id, db)

@router.get("/{project_id}/monthly", response_model=List[MonthlyBreakdownItem])
async def read_monthly_breakdown(
    project_id: uuid.UUID,
    year: Optional[int] = Query(None, ge=1900, le=9999, description="Defaults to the current year"),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    user_id = uuid.UUID(str(user.id))
    if not await get_project_by_id(project_id, user_id, db):
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Project not found")
    return await monthly_breakdown(user_id, project_id, db, year=year)

@router.get("/{project_id}/details")
async def read_project_balance_sheet(
    project_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
) -> Dict[str, Any]:
    """
    Project details with income and expenses grouped by category, plus the
    recognized income and remaining budget.
    """
    user_id = uuid.UUID(str(user.id))
    return await project_balance_sheet(user_id, project_id, db)

@router.get("/{project_id}/document")
async def read_balance_sheet_document(
    project_id: uuid.UUID,
    categories: Optional[List[str]] = Query(None, description="Only list these categories"),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
) -> Dict[str, Any]:
    user_id = uuid.UUID(str(user.id))
    return await build_balance_sheet_document(user_id, project_id, db, selected_categories=categories)
