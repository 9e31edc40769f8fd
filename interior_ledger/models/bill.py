# interior_ledger/models/bill.py
import uuid
from datetime import datetime
from sqlalchemy import Column, String, ForeignKey, Float, Integer, Enum, DateTime, JSON
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import relationship
from interior_ledger.core.database import Base
from interior_ledger.models.enums import BillType, ClientTitle, DocumentType, ItemUnit

class InteriorBill(Base):
    """Invoice, estimate or quotation issued to a client."""
    __tablename__ = "interior_bills"

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(PG_UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    bill_number = Column(String(length=50), unique=True, nullable=False)
    bill_type = Column(Enum(BillType), nullable=False, default=BillType.original)
    original_bill_id = Column(PG_UUID(as_uuid=True), ForeignKey("interior_bills.id", ondelete="SET NULL"), nullable=True)
    document_type = Column(Enum(DocumentType), nullable=False, default=DocumentType.invoice)
    date = Column(DateTime, nullable=False, default=datetime.utcnow)

    title = Column(Enum(ClientTitle), nullable=False, default=ClientTitle.none)
    client_name = Column(String(length=150), nullable=False)
    client_email = Column(String(length=150), nullable=False)
    client_phone = Column(String(length=30), nullable=False)
    client_address = Column(String(length=500), nullable=False)

    grand_total = Column(Float, nullable=False, default=0.0)
    discount = Column(Float, nullable=False, default=0.0)
    final_amount = Column(Float, nullable=False, default=0.0)

    company_details = Column(JSON, nullable=True)
    payment_terms = Column(JSON, nullable=False, default=list)
    terms_and_conditions = Column(JSON, nullable=False, default=list)

    project_id = Column(PG_UUID(as_uuid=True), ForeignKey("projects.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    items = relationship(
        "InteriorItem",
        back_populates="bill",
        cascade="all, delete-orphan",
        order_by="InteriorItem.position",
        lazy="selectin",
    )

    def __repr__(self):
        return f"<InteriorBill number={self.bill_number} type={self.document_type} final={self.final_amount}>"


class InteriorItem(Base):
    __tablename__ = "interior_items"

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    bill_id = Column(PG_UUID(as_uuid=True), ForeignKey("interior_bills.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    particular = Column(String(length=255), nullable=False)
    description = Column(String(length=1000), nullable=True)
    unit = Column(Enum(ItemUnit), nullable=False)
    quantity = Column(Float, nullable=False, default=1)
    width = Column(Float, nullable=True)
    height = Column(Float, nullable=True)
    depth = Column(Float, nullable=True)
    square_feet = Column(Float, nullable=True)
    price_per_unit = Column(Float, nullable=False)
    total = Column(Float, nullable=False, default=0.0)
    discount_item = Column(Float, nullable=False, default=0.0)
    net_total = Column(Float, nullable=False, default=0.0)

    bill = relationship("InteriorBill", back_populates="items")
