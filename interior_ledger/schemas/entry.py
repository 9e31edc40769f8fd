# interior_ledger/schemas/entry.py
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator
from datetime import datetime
import uuid
from interior_ledger.models.enums import EntryType
from interior_ledger.utils.validation import to_naive_utc

class UtcDateModel(BaseModel):
    @field_validator("date", check_fields=False)
    @classmethod
    def normalize_date(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)

class EntryBase(UtcDateModel):
    type: EntryType
    amount: float = Field(..., description="Amount in the configured currency unit")
    category: str = Field(..., min_length=1)
    description: Optional[str] = None
    date: Optional[datetime] = None

class EntryCreate(EntryBase):
    project_id: uuid.UUID

class EntryUpdate(UtcDateModel):
    type: Optional[EntryType] = None
    amount: Optional[float] = None
    category: Optional[str] = None
    description: Optional[str] = None
    date: Optional[datetime] = None

class EntryRead(EntryBase):
    id: uuid.UUID
    user_id: uuid.UUID
    project_id: uuid.UUID
    date: datetime
    is_shared_expense: bool = False
    original_amount: Optional[float] = None
    batch_id: Optional[uuid.UUID] = None
    is_income_from_other_project: bool = False
    source_project_id: Optional[uuid.UUID] = None
    transfer_entry_id: Optional[uuid.UUID] = None

    class Config:
        from_attributes = True

class SharedExpenseCreate(UtcDateModel):
    amount: float = Field(..., gt=0)
    category: str = Field(..., min_length=1)
    description: Optional[str] = None
    date: Optional[datetime] = None

class SharedExpenseResult(BaseModel):
    entries: List[EntryRead]
    distributed_amount: float
    original_amount: float
    project_count: int
    batch_id: uuid.UUID

class SharedExpenseGroup(BaseModel):
    date: datetime
    original_amount: float
    category: str
    description: Optional[str] = None
    distributed_amount: float
    project_count: int
    project_ids: List[uuid.UUID]
    batch_ids: List[uuid.UUID]
    entries: List[EntryRead]

class TransferCreate(UtcDateModel):
    current_project_id: uuid.UUID
    source_project_name: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    description: Optional[str] = None
    date: Optional[datetime] = None

class TransferResult(BaseModel):
    status: str
    income_entry: EntryRead
    expense_entry: EntryRead

class TransferMismatch(BaseModel):
    income_entry_id: uuid.UUID
    project_id: uuid.UUID
    source_project_id: Optional[uuid.UUID] = None
    amount: float
    paired_expense_id: Optional[uuid.UUID] = None
    paired_amount: Optional[float] = None
    reason: str

class EntryDeleteResult(BaseModel):
    message: str
    deleted_count: int
    deleted_ids: List[uuid.UUID]
