# interior_ledger/api/v1/routes/bills.py
from fastapi import APIRouter, Depends, HTTPException, status, Request, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Dict, List, Optional
import uuid

from interior_ledger.schemas.bill import (
    InteriorBillCreate,
    InteriorBillUpdate,
    InteriorBillRead,
    ConnectBillRequest,
)
from interior_ledger.schemas.project import ProjectRead
from interior_ledger.crud.bill import (
    get_bills_for_user,
    get_bill_by_id,
    create_bill_for_user,
    update_bill,
    duplicate_bill,
    connect_bill_to_project,
    delete_bill,
)
from interior_ledger.crud.project import get_project_by_id
from interior_ledger.models.enums import DocumentType
from interior_ledger.utils.documents import build_interior_bill_document
from interior_ledger.core.database import get_async_session
from interior_ledger.core.auth import User
from interior_ledger.api.deps import get_current_user

router = APIRouter(prefix="/bills", tags=["bills"])

async def _get_owned_bill(bill_id: uuid.UUID, user: User, db: AsyncSession):
    bill = await get_bill_by_id(bill_id, uuid.UUID(str(user.id)), db)
    if not bill:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Bill not found")
    return bill

@router.get("", response_model=List[InteriorBillRead])
async def read_bills(
    request: Request,
    document_type: Optional[DocumentType] = Query(None),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    user_id = uuid.UUID(str(user.id))
    return await get_bills_for_user(user_id, db, document_type=document_type)

@router.post("", response_model=InteriorBillRead, status_code=status.HTTP_201_CREATED)
async def create_bill(
    bill_in: InteriorBillCreate,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Item totals, discount and final amount are computed server side."""
    user_id = uuid.UUID(str(user.id))
    return await create_bill_for_user(user_id, bill_in, db)

@router.get("/{bill_id}", response_model=InteriorBillRead)
async def read_bill(
    bill_id: uuid.UUID,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await _get_owned_bill(bill_id, user, db)

@router.put("/{bill_id}", response_model=InteriorBillRead)
async def update_bill_endpoint(
    bill_id: uuid.UUID,
    bill_in: InteriorBillUpdate,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    bill = await _get_owned_bill(bill_id, user, db)
    return await update_bill(bill, bill_in, db)

@router.post("/{bill_id}/duplicate", response_model=InteriorBillRead, status_code=status.HTTP_201_CREATED)
async def duplicate_bill_endpoint(
    bill_id: uuid.UUID,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    bill = await _get_owned_bill(bill_id, user, db)
    return await duplicate_bill(bill, db)

@router.post("/{bill_id}/connect", response_model=ProjectRead)
async def connect_bill_endpoint(
    bill_id: uuid.UUID,
    connect_in: ConnectBillRequest,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Attach the bill to a project and adopt its final amount as the project budget."""
    bill = await _get_owned_bill(bill_id, user, db)
    project = await get_project_by_id(connect_in.project_id, uuid.UUID(str(user.id)), db)
    if not project:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Project not found")
    return await connect_bill_to_project(bill, project, db)

@router.get("/{bill_id}/document")
async def read_bill_document(
    bill_id: uuid.UUID,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
) -> Dict[str, Any]:
    bill = await _get_owned_bill(bill_id, user, db)
    return build_interior_bill_document(bill)

@router.delete("/{bill_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_bill_endpoint(
    bill_id: uuid.UUID,
    request: Request,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    bill = await _get_owned_bill(bill_id, user, db)
    await delete_bill(bill, db)
    return None
