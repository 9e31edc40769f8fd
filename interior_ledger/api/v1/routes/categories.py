# interior_ledger/api/v1/routes/categories.py
from fastapi import APIRouter, Depends, status, Request
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Dict, List
import uuid

from interior_ledger.schemas.category import CategoryCreate, CategoryRead
from interior_ledger.crud.category import list_categories, list_all_categories, register_category
from interior_ledger.core.categories import builtin_category_listing
from interior_ledger.core.database import get_async_session
from interior_ledger.core.auth import User
from interior_ledger.api.deps import get_current_user

router = APIRouter(prefix="/categories", tags=["categories"])

@router.get("", response_model=Dict[str, List[str]])
async def read_categories(
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Custom categories registered by the user, keyed by entry type."""
    user_id = uuid.UUID(str(user.id))
    return await list_categories(user_id, db)

@router.post("", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
async def create_category(
    cat_in: CategoryCreate,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    user_id = uuid.UUID(str(user.id))
    return await register_category(user_id, cat_in.type, cat_in.category, db)

@router.get("/builtin", response_model=Dict[str, List[str]])
async def read_builtin_categories():
    return builtin_category_listing()

@router.get("/all", response_model=Dict[str, List[str]])
async def read_all_categories(
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    user_id = uuid.UUID(str(user.id))
    return await list_all_categories(user_id, db)
