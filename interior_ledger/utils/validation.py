# interior_ledger/utils/validation.py
from datetime import datetime, timezone
from typing import Any, Optional

from interior_ledger.core.exceptions import ValidationError


def require_fields(**fields: Any) -> None:
    """Raise ValidationError naming every missing or falsy required value."""
    missing = [name for name, value in fields.items() if not value]
    if missing:
        raise ValidationError(f"{', '.join(missing)} {'is' if len(missing) == 1 else 'are'} required")


def require_non_negative(name: str, value: float) -> None:
    if value is None or value < 0:
        raise ValidationError(f"{name} must be a number greater than or equal to 0")


def require_positive(name: str, value: float) -> None:
    if value is None or value <= 0:
        raise ValidationError(f"{name} must be greater than 0")


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Entry dates are stored as naive UTC; aware values are converted first."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
