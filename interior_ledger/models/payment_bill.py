# interior_ledger/models/payment_bill.py
import uuid
from datetime import datetime
from sqlalchemy import Column, String, ForeignKey, Float, DateTime
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import relationship
from interior_ledger.core.database import Base

class PaymentBill(Base):
    """Payment receipt. Snapshots recognized income and the remaining budget."""
    __tablename__ = "payment_bills"

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(PG_UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    bill_number = Column(String(length=50), unique=True, nullable=False)
    project_id = Column(PG_UUID(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    amount_received = Column(Float, nullable=False)
    recognized_income = Column(Float, nullable=False, default=0.0)
    remaining_amount = Column(Float, nullable=False)
    date = Column(DateTime, nullable=False, default=datetime.utcnow)
    notes = Column(String(length=1000), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    project = relationship("Project", back_populates="payment_bills", lazy="joined")

    def __repr__(self):
        return f"<PaymentBill number={self.bill_number} received={self.amount_received} remaining={self.remaining_amount}>"
