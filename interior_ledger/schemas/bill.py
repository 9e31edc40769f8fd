# interior_ledger/schemas/bill.py
from typing import Any, Dict, List, Optional, Union
from pydantic import BaseModel, Field, EmailStr
from datetime import datetime
import uuid
from interior_ledger.models.enums import BillType, ClientTitle, DiscountType, DocumentType, ItemUnit

class InteriorItemIn(BaseModel):
    particular: str = Field(..., min_length=1)
    description: Optional[str] = None
    unit: ItemUnit
    quantity: Optional[float] = Field(1, ge=0)
    width: Optional[float] = None
    height: Optional[float] = None
    depth: Optional[float] = None
    price_per_unit: float = Field(..., ge=0)
    discount_item: float = Field(0.0, ge=0)

class InteriorItemRead(InteriorItemIn):
    id: uuid.UUID
    square_feet: Optional[float] = None
    total: float
    net_total: float

    class Config:
        from_attributes = True

class PaymentTerm(BaseModel):
    stage: str
    percentage: Optional[float] = None
    amount: Optional[float] = None
    note: Optional[str] = None

class CompanyDetails(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    phones: List[str] = []

class InteriorBillBase(BaseModel):
    document_type: DocumentType = DocumentType.invoice
    date: Optional[datetime] = None
    title: ClientTitle = ClientTitle.none
    client_name: str = Field(..., min_length=1)
    client_email: EmailStr
    client_phone: str = Field(..., min_length=1)
    client_address: str = Field(..., min_length=1)
    company_details: Optional[CompanyDetails] = None
    payment_terms: List[PaymentTerm] = []
    # Terms may arrive as plain strings or as {"text": ...} objects
    terms_and_conditions: List[Union[str, Dict[str, Any]]] = []

class InteriorBillCreate(InteriorBillBase):
    items: List[InteriorItemIn] = Field(..., min_length=1)
    discount_type: DiscountType = DiscountType.flat
    discount_value: float = Field(0.0, ge=0)

class InteriorBillUpdate(InteriorBillCreate):
    pass

class InteriorBillRead(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    bill_number: str
    bill_type: BillType
    original_bill_id: Optional[uuid.UUID] = None
    document_type: DocumentType
    date: datetime
    title: ClientTitle
    client_name: str
    client_email: str
    client_phone: str
    client_address: str
    items: List[InteriorItemRead]
    grand_total: float
    discount: float
    final_amount: float
    company_details: Optional[Dict[str, Any]] = None
    payment_terms: List[Dict[str, Any]] = []
    terms_and_conditions: List[str] = []
    project_id: Optional[uuid.UUID] = None

    class Config:
        from_attributes = True

class ConnectBillRequest(BaseModel):
    project_id: uuid.UUID

class PaymentBillCreate(BaseModel):
    project_id: uuid.UUID
    amount_received: float = Field(..., gt=0)
    notes: Optional[str] = None

class PaymentBillRead(BaseModel):
    id: uuid.UUID
    bill_number: str
    project_id: uuid.UUID
    amount_received: float
    recognized_income: float
    remaining_amount: float
    date: datetime
    notes: Optional[str] = None

    class Config:
        from_attributes = True
