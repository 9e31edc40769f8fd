# interior_ledger/utils/billing.py
import time
import uuid
from typing import Any, Dict, Iterable, List, Optional

from interior_ledger.core.exceptions import ValidationError
from interior_ledger.models.enums import DiscountType, ItemUnit

INTERIOR_BILL_PREFIX = "INT"
PAYMENT_BILL_PREFIX = "BILL"

# Metal work (MS/SS) is priced by volume, so it also needs a depth
DEPTH_MATERIALS = ("ms", "ss")


def generate_bill_number(prefix: str) -> str:
    return f"{prefix}-{int(time.time() * 1000)}-{uuid.uuid4().hex[:6].upper()}"


def requires_depth(particular: Optional[str]) -> bool:
    lowered = (particular or "").lower()
    return any(material in lowered for material in DEPTH_MATERIALS)


def compute_item(item: Dict[str, Any]) -> Dict[str, Any]:
    """Fill in square_feet, total and net_total for one bill line.

    Sft: square_feet = width x height; total = square_feet x price x quantity.
    Lump / Ls: total = price x quantity.
    """
    computed = dict(item)
    unit = ItemUnit(computed["unit"])
    quantity = computed.get("quantity") or 1
    price = float(computed.get("price_per_unit") or 0)
    computed["quantity"] = quantity

    if unit == ItemUnit.sft:
        width, height = computed.get("width"), computed.get("height")
        if width is None or height is None:
            raise ValidationError(f"Width and height are required for Sft item '{computed.get('particular')}'")
        if requires_depth(computed.get("particular")) and computed.get("depth") is None:
            raise ValidationError(f"Depth is required for MS/SS item '{computed.get('particular')}'")
        computed["square_feet"] = float(width) * float(height)
        computed["total"] = computed["square_feet"] * price * quantity
    else:
        computed["square_feet"] = None
        computed["total"] = price * quantity

    discount_item = float(computed.get("discount_item") or 0)
    computed["discount_item"] = discount_item
    computed["net_total"] = computed["total"] - discount_item
    return computed


def compute_discount(grand_total: float, discount_type: DiscountType, discount_value: float) -> float:
    value = float(discount_value or 0)
    if value < 0:
        raise ValidationError("discount_value must be greater than or equal to 0")
    if DiscountType(discount_type) == DiscountType.percentage:
        if value > 100:
            raise ValidationError("A percentage discount cannot exceed 100")
        return grand_total * value / 100
    return value


def compute_bill_totals(
    items: Iterable[Dict[str, Any]],
    discount_type: DiscountType = DiscountType.flat,
    discount_value: float = 0.0,
) -> Dict[str, Any]:
    computed_items = [compute_item(item) for item in items]
    if not computed_items:
        raise ValidationError("A bill needs at least one item")
    grand_total = sum(item["net_total"] for item in computed_items)
    discount = compute_discount(grand_total, discount_type, discount_value)
    final_amount = grand_total - discount
    if final_amount < 0:
        raise ValidationError("Discount cannot exceed the bill total")
    return {
        "items": computed_items,
        "grand_total": grand_total,
        "discount": discount,
        "final_amount": final_amount,
    }


def normalize_terms(terms: Optional[Iterable[Any]]) -> List[str]:
    """Terms arrive as strings or {"text": ...} objects; store plain strings."""
    if not terms:
        return []
    normalized = []
    for term in terms:
        if isinstance(term, dict) and term.get("text"):
            normalized.append(str(term["text"]))
        else:
            normalized.append(str(term))
    return normalized
