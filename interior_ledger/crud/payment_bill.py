# interior_ledger/crud/payment_bill.py
import logging
import uuid
from typing import List, Optional

from sqlalchemy import desc
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from interior_ledger.models.payment_bill import PaymentBill
from interior_ledger.models.project import Project
from interior_ledger.utils.billing import PAYMENT_BILL_PREFIX, generate_bill_number
from interior_ledger.utils.ledger import recognized_income
from interior_ledger.utils.validation import require_positive

logger = logging.getLogger(__name__)

async def generate_payment_bill(
    project: Project,
    amount_received: float,
    db: AsyncSession,
    notes: Optional[str] = None,
) -> PaymentBill:
    """Receipt for a client payment.

    The remaining amount is the project budget minus recognized income, so
    transfers from other projects never reduce what the client still owes.
    """
    require_positive("amount_received", amount_received)
    project_id = project.id
    recognized = await recognized_income(project.user_id, project.id, db)
    bill = PaymentBill(
        user_id=project.user_id,
        bill_number=generate_bill_number(PAYMENT_BILL_PREFIX),
        project_id=project.id,
        amount_received=float(amount_received),
        recognized_income=recognized,
        remaining_amount=float(project.budget or 0.0) - recognized,
        notes=notes,
    )
    db.add(bill)
    await db.commit()
    await db.refresh(bill)
    logger.info(f"Generated payment bill {bill.bill_number} for project {project_id}")
    return bill

async def get_payment_bills_for_project(project_id: uuid.UUID, user_id: uuid.UUID, db: AsyncSession) -> List[PaymentBill]:
    result = await db.execute(
        select(PaymentBill)
        .where(PaymentBill.project_id == project_id, PaymentBill.user_id == user_id)
        .order_by(desc(PaymentBill.date))
    )
    return result.scalars().all()

async def get_payment_bill_by_id(bill_id: uuid.UUID, user_id: uuid.UUID, db: AsyncSession) -> Optional[PaymentBill]:
    result = await db.execute(
        select(PaymentBill).where(PaymentBill.id == bill_id, PaymentBill.user_id == user_id)
    )
    return result.scalar_one_or_none()
