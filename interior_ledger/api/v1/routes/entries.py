# interior_ledger/api/v1/routes/entries.py
from fastapi import APIRouter, Depends, HTTPException, status, Request, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import logging
import uuid

from interior_ledger.schemas.entry import (
    EntryCreate,
    EntryRead,
    EntryUpdate,
    EntryDeleteResult,
    SharedExpenseCreate,
    SharedExpenseResult,
    SharedExpenseGroup,
    TransferCreate,
    TransferResult,
    TransferMismatch,
)
from interior_ledger.crud.entry import (
    add_entry,
    list_entries,
    get_entries_for_user,
    get_entry_by_id,
    update_entry,
    delete_entry,
)
from interior_ledger.crud.project import get_project_by_id
from interior_ledger.utils.shared_expense import distribute_shared_expense, group_shared_expenses
from interior_ledger.utils.transfers import transfer_income, delete_transfer, verify_transfer_pairs
from interior_ledger.core.database import get_async_session
from interior_ledger.core.auth import User
from interior_ledger.api.deps import get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/entries", tags=["entries"])

async def _require_project(project_id: uuid.UUID, user_id: uuid.UUID, db: AsyncSession):
    project = await get_project_by_id(project_id, user_id, db)
    if not project:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")
    return project

async def _require_entry(entry_id: uuid.UUID, user_id: uuid.UUID, db: AsyncSession):
    entry = await get_entry_by_id(entry_id, user_id, db)
    if not entry:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Entry not found")
    return entry

@router.get("", response_model=List[EntryRead])
async def read_entries(
    request: Request,
    project_id: Optional[uuid.UUID] = Query(None),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    user_id = uuid.UUID(str(user.id))
    if project_id is None:
        return await get_entries_for_user(user_id, db)
    await _require_project(project_id, user_id, db)
    return await list_entries(user_id, project_id, db)

@router.post("", response_model=EntryRead, status_code=status.HTTP_201_CREATED)
async def create_entry(
    entry_in: EntryCreate,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    user_id = uuid.UUID(str(user.id))
    await _require_project(entry_in.project_id, user_id, db)
    return await add_entry(
        user_id,
        entry_in.project_id,
        entry_in.type,
        entry_in.amount,
        entry_in.category,
        db,
        description=entry_in.description,
        date=entry_in.date,
    )

# ------------------------------------------------------------
# SHARED EXPENSES
# ------------------------------------------------------------
@router.post("/shared-expense", response_model=SharedExpenseResult, status_code=status.HTTP_201_CREATED)
async def create_shared_expense(
    shared_in: SharedExpenseCreate,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Split one expense evenly across every In Progress project."""
    user_id = uuid.UUID(str(user.id))
    return await distribute_shared_expense(
        user_id,
        shared_in.amount,
        shared_in.category,
        db,
        description=shared_in.description,
        date=shared_in.date,
    )

@router.get("/shared-expenses", response_model=List[SharedExpenseGroup])
async def read_shared_expenses(
    request: Request,
    project_id: Optional[uuid.UUID] = Query(None),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    user_id = uuid.UUID(str(user.id))
    if project_id is not None:
        await _require_project(project_id, user_id, db)
    return await group_shared_expenses(user_id, db, project_id=project_id)

# ------------------------------------------------------------
# CROSS-PROJECT TRANSFERS
# ------------------------------------------------------------
@router.post("/transfer", response_model=TransferResult, status_code=status.HTTP_201_CREATED)
async def create_transfer(
    transfer_in: TransferCreate,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    user_id = uuid.UUID(str(user.id))
    return await transfer_income(
        user_id,
        transfer_in.current_project_id,
        transfer_in.source_project_name,
        transfer_in.amount,
        db,
        description=transfer_in.description,
        date=transfer_in.date,
    )

@router.get("/transfers/verify", response_model=List[TransferMismatch])
async def verify_transfers(
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Lists transfer incomes whose paired expense is missing or does not balance."""
    user_id = uuid.UUID(str(user.id))
    return await verify_transfer_pairs(user_id, db)

# ------------------------------------------------------------
# SINGLE ENTRY
# ------------------------------------------------------------
@router.get("/{entry_id}", response_model=EntryRead)
async def read_entry(
    entry_id: uuid.UUID,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    user_id = uuid.UUID(str(user.id))
    return await _require_entry(entry_id, user_id, db)

@router.patch("/{entry_id}", response_model=EntryRead)
async def update_entry_endpoint(
    entry_id: uuid.UUID,
    entry_in: EntryUpdate,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    user_id = uuid.UUID(str(user.id))
    await _require_entry(entry_id, user_id, db)
    return await update_entry(entry_id, entry_in, db)

@router.delete("/{entry_id}", response_model=EntryDeleteResult)
async def delete_entry_endpoint(
    entry_id: uuid.UUID,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    user_id = uuid.UUID(str(user.id))
    entry = await _require_entry(entry_id, user_id, db)
    if entry.is_transfer_half:
        deleted_ids = await delete_transfer(entry_id, db)
        message = "Transfer entries deleted successfully"
    else:
        await delete_entry(entry_id, db)
        deleted_ids = [entry_id]
        message = "Entry deleted successfully"
    return EntryDeleteResult(message=message, deleted_count=len(deleted_ids), deleted_ids=deleted_ids)
