# interior_ledger/schemas/category.py
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional
import uuid
from interior_ledger.models.enums import EntryType

class CategoryCreate(BaseModel):
    type: EntryType
    category: str = Field(..., min_length=1, max_length=100)

class CategoryRead(CategoryCreate):
    id: uuid.UUID
    user_id: uuid.UUID
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
