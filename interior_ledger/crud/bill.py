# interior_ledger/crud/bill.py
import logging
import uuid
from datetime import datetime
from typing import List, Optional

from sqlalchemy import desc
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from interior_ledger.core.db_utils import with_db_retry
from interior_ledger.models.bill import InteriorBill, InteriorItem
from interior_ledger.models.enums import BillType, DocumentType
from interior_ledger.models.project import Project
from interior_ledger.schemas.bill import InteriorBillCreate, InteriorBillUpdate
from interior_ledger.utils.billing import (
    INTERIOR_BILL_PREFIX,
    compute_bill_totals,
    generate_bill_number,
    normalize_terms,
)
from interior_ledger.utils.validation import require_non_negative

logger = logging.getLogger(__name__)

def _build_items(computed_items: List[dict]) -> List[InteriorItem]:
    return [InteriorItem(position=index, **item) for index, item in enumerate(computed_items)]

def _apply_bill_fields(bill: InteriorBill, bill_in: InteriorBillCreate) -> None:
    totals = compute_bill_totals(
        [item.model_dump() for item in bill_in.items],
        bill_in.discount_type,
        bill_in.discount_value,
    )
    bill.document_type = bill_in.document_type
    bill.date = bill_in.date or bill.date or datetime.utcnow()
    bill.title = bill_in.title
    bill.client_name = bill_in.client_name
    bill.client_email = str(bill_in.client_email)
    bill.client_phone = bill_in.client_phone
    bill.client_address = bill_in.client_address
    bill.company_details = bill_in.company_details.model_dump() if bill_in.company_details else None
    bill.payment_terms = [term.model_dump() for term in bill_in.payment_terms]
    bill.terms_and_conditions = normalize_terms(bill_in.terms_and_conditions)
    bill.items = _build_items(totals["items"])
    bill.grand_total = totals["grand_total"]
    bill.discount = totals["discount"]
    bill.final_amount = totals["final_amount"]

@with_db_retry()
async def get_bills_for_user(
    user_id: uuid.UUID,
    db: AsyncSession,
    document_type: Optional[DocumentType] = None,
) -> List[InteriorBill]:
    query = select(InteriorBill).where(InteriorBill.user_id == user_id)
    if document_type is not None:
        query = query.where(InteriorBill.document_type == DocumentType(document_type))
    result = await db.execute(query.order_by(desc(InteriorBill.date)))
    return result.scalars().all()

async def get_bill_by_id(bill_id: uuid.UUID, user_id: uuid.UUID, db: AsyncSession) -> Optional[InteriorBill]:
    result = await db.execute(
        select(InteriorBill).where(InteriorBill.id == bill_id, InteriorBill.user_id == user_id)
    )
    return result.scalar_one_or_none()

async def create_bill_for_user(user_id: uuid.UUID, bill_in: InteriorBillCreate, db: AsyncSession) -> InteriorBill:
    bill = InteriorBill(
        user_id=user_id,
        bill_number=generate_bill_number(INTERIOR_BILL_PREFIX),
        bill_type=BillType.original,
    )
    _apply_bill_fields(bill, bill_in)
    db.add(bill)
    await db.commit()
    await db.refresh(bill)
    logger.info(f"Created {bill.document_type.value} {bill.bill_number} for user {user_id} ({bill.final_amount})")
    return bill

async def update_bill(bill: InteriorBill, bill_in: InteriorBillUpdate, db: AsyncSession) -> InteriorBill:
    _apply_bill_fields(bill, bill_in)
    db.add(bill)
    await db.commit()
    await db.refresh(bill)
    return bill

async def duplicate_bill(bill: InteriorBill, db: AsyncSession) -> InteriorBill:
    """Copy of a bill marked DUPLICATE, pointing at the bill it was made from."""
    copy = InteriorBill(
        user_id=bill.user_id,
        bill_number=generate_bill_number(INTERIOR_BILL_PREFIX),
        bill_type=BillType.duplicate,
        original_bill_id=bill.id,
        document_type=bill.document_type,
        date=datetime.utcnow(),
        title=bill.title,
        client_name=bill.client_name,
        client_email=bill.client_email,
        client_phone=bill.client_phone,
        client_address=bill.client_address,
        grand_total=bill.grand_total,
        discount=bill.discount,
        final_amount=bill.final_amount,
        company_details=bill.company_details,
        payment_terms=list(bill.payment_terms or []),
        terms_and_conditions=list(bill.terms_and_conditions or []),
        project_id=bill.project_id,
    )
    copy.items = [
        InteriorItem(
            position=item.position,
            particular=item.particular,
            description=item.description,
            unit=item.unit,
            quantity=item.quantity,
            width=item.width,
            height=item.height,
            depth=item.depth,
            square_feet=item.square_feet,
            price_per_unit=item.price_per_unit,
            total=item.total,
            discount_item=item.discount_item,
            net_total=item.net_total,
        )
        for item in bill.items
    ]
    source_number = bill.bill_number
    db.add(copy)
    await db.commit()
    await db.refresh(copy)
    logger.info(f"Duplicated bill {source_number} as {copy.bill_number}")
    return copy

async def connect_bill_to_project(bill: InteriorBill, project: Project, db: AsyncSession) -> Project:
    """Link an estimate to a project; its final amount becomes the project budget."""
    require_non_negative("budget", bill.final_amount)
    bill_number = bill.bill_number
    bill.project_id = project.id
    project.budget = float(bill.final_amount)
    db.add_all([bill, project])
    await db.commit()
    await db.refresh(project)
    logger.info(f"Bill {bill_number} connected to project {project.id}; budget set to {project.budget}")
    return project

async def delete_bill(bill: InteriorBill, db: AsyncSession) -> None:
    await db.delete(bill)
    await db.commit()
