# interior_ledger/utils/documents.py
"""
Plain data handed to the PDF / Excel generators.

The generators own layout; these builders only guarantee the fields they
consume: the project, the bill or entries, recognized income, remaining
budget and the categorized lists.
"""
import uuid
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from interior_ledger.core.config import settings
from interior_ledger.models.bill import InteriorBill
from interior_ledger.models.payment_bill import PaymentBill
from interior_ledger.utils.ledger import project_balance_sheet


def _filter_categories(section: Dict[str, Any], selected: Optional[set]) -> Dict[str, Any]:
    if selected is None:
        return section
    categories = [c for c in section["categories"] if c["category"] in selected]
    return {"total": sum(c["total_amount"] for c in categories), "categories": categories}


async def build_balance_sheet_document(
    user_id: uuid.UUID,
    project_id: uuid.UUID,
    db: AsyncSession,
    selected_categories: Optional[Iterable[str]] = None,
) -> Dict[str, Any]:
    """Balance-sheet payload, optionally restricted to some categories.

    The summary figures always cover the whole project; only the listed
    sections are filtered.
    """
    sheet = await project_balance_sheet(user_id, project_id, db)
    selected = set(selected_categories) if selected_categories else None
    return {
        "document": "balance_sheet",
        "generated_at": datetime.utcnow(),
        "currency": settings.CURRENCY,
        "project": sheet["project_details"],
        "summary": sheet["summary"],
        "recognized_income": sheet["summary"]["recognized_income"],
        "remaining_budget": sheet["summary"]["budget_remaining"],
        "income": _filter_categories(sheet["income"], selected),
        "expenses": _filter_categories(sheet["expenses"], selected),
    }


def build_payment_receipt_document(bill: PaymentBill) -> Dict[str, Any]:
    project = bill.project
    return {
        "document": "payment_receipt",
        "currency": settings.CURRENCY,
        "bill_number": bill.bill_number,
        "date": bill.date,
        "project": {"id": project.id, "name": project.name, "budget": project.budget},
        "amount_received": bill.amount_received,
        "recognized_income": bill.recognized_income,
        "remaining_budget": bill.remaining_amount,
        "notes": bill.notes,
    }


def build_interior_bill_document(bill: InteriorBill) -> Dict[str, Any]:
    return {
        "document": bill.document_type.value.lower(),
        "currency": settings.CURRENCY,
        "bill_number": bill.bill_number,
        "bill_type": bill.bill_type.value,
        "date": bill.date,
        "client": {
            "title": bill.title.value,
            "name": bill.client_name,
            "email": bill.client_email,
            "phone": bill.client_phone,
            "address": bill.client_address,
        },
        "company": bill.company_details or {},
        "items": [
            {
                "particular": item.particular,
                "description": item.description,
                "unit": item.unit.value,
                "quantity": item.quantity,
                "square_feet": item.square_feet,
                "price_per_unit": item.price_per_unit,
                "total": item.total,
                "discount": item.discount_item,
                "net_total": item.net_total,
            }
            for item in bill.items
        ],
        "grand_total": bill.grand_total,
        "discount": bill.discount,
        "final_amount": bill.final_amount,
        "payment_terms": bill.payment_terms or [],
        "terms_and_conditions": bill.terms_and_conditions or [],
        "project_id": bill.project_id,
    }
