# interior_ledger/api/v1/routes/payment_bills.py
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Dict, List
import uuid

from interior_ledger.schemas.bill import PaymentBillCreate, PaymentBillRead
from interior_ledger.crud.payment_bill import (
    generate_payment_bill,
    get_payment_bills_for_project,
    get_payment_bill_by_id,
)
from interior_ledger.crud.project import get_project_by_id
from interior_ledger.utils.documents import build_payment_receipt_document
from interior_ledger.core.database import get_async_session
from interior_ledger.core.auth import User
from interior_ledger.api.deps import get_current_user

router = APIRouter(prefix="/payment-bills", tags=["payment-bills"])

async def _get_owned_project(project_id: uuid.UUID, user: User, db: AsyncSession):
    project = await get_project_by_id(project_id, uuid.UUID(str(user.id)), db)
    if not project:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Project not found")
    return project

@router.post("", response_model=PaymentBillRead, status_code=status.HTTP_201_CREATED)
async def create_payment_bill(
    bill_in: PaymentBillCreate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """
    Receipt for a client payment. Remaining amount is budget minus recognized
    income; transfers from other projects are not counted.
    """
    project = await _get_owned_project(bill_in.project_id, user, db)
    return await generate_payment_bill(project, bill_in.amount_received, db, notes=bill_in.notes)

@router.get("", response_model=List[PaymentBillRead])
async def read_payment_bills(
    project_id: uuid.UUID = Query(...),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    await _get_owned_project(project_id, user, db)
    return await get_payment_bills_for_project(project_id, uuid.UUID(str(user.id)), db)

@router.get("/{bill_id}", response_model=PaymentBillRead)
async def read_payment_bill(
    bill_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    bill = await get_payment_bill_by_id(bill_id, uuid.UUID(str(user.id)), db)
    if not bill:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Payment bill not found")
    return bill

@router.get("/{bill_id}/document")
async def read_payment_bill_document(
    bill_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
) -> Dict[str, Any]:
    bill = await get_payment_bill_by_id(bill_id, uuid.UUID(str(user.id)), db)
    if not bill:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Payment bill not found")
    return build_payment_receipt_document(bill)
