# interior_ledger/api/v1/routes/analytics.py
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import uuid

from interior_ledger.schemas.analytics import CategoryTotal, TypeTotal, MonthTotal, MonthTypeTotal
from interior_ledger.crud.project import get_project_by_id
from interior_ledger.models.enums import EntryType
from interior_ledger.utils.ledger import (
    monthly_expenses,
    income_vs_expense,
    category_breakdown,
    monthly_trend,
)
from interior_ledger.core.database import get_async_session
from interior_ledger.core.auth import User
from interior_ledger.api.deps import get_current_user

router = APIRouter(prefix="/analytics", tags=["analytics"])

async def _owned_project_id(project_id: uuid.UUID, user: User, db: AsyncSession) -> uuid.UUID:
    user_id = uuid.UUID(str(user.id))
    if not await get_project_by_id(project_id, user_id, db):
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Project not found")
    return user_id

@router.get("/{project_id}/monthly-expenses", response_model=List[MonthTotal])
async def read_monthly_expenses(
    project_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    user_id = await _owned_project_id(project_id, user, db)
    return await monthly_expenses(user_id, project_id, db)

@router.get("/{project_id}/income-vs-expense", response_model=List[TypeTotal])
async def read_income_vs_expense(
    project_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    user_id = await _owned_project_id(project_id, user, db)
    return await income_vs_expense(user_id, project_id, db)

@router.get("/{project_id}/category-expenses", response_model=List[CategoryTotal])
async def read_category_expenses(
    project_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    user_id = await _owned_project_id(project_id, user, db)
    return await category_breakdown(user_id, project_id, EntryType.expense, db)

@router.get("/{project_id}/category-income", response_model=List[CategoryTotal])
async def read_category_income(
    project_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    user_id = await _owned_project_id(project_id, user, db)
    return await category_breakdown(user_id, project_id, EntryType.income, db)

@router.get("/{project_id}/monthly-trend", response_model=List[MonthTypeTotal])
async def read_monthly_trend(
    project_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    user_id = await _owned_project_id(project_id, user, db)
    return await monthly_trend(user_id, project_id, db)
