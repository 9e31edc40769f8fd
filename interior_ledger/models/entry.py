# interior_ledger/models/entry.py
import uuid
from datetime import datetime
from sqlalchemy import Column, String, ForeignKey, Float, Boolean, Enum, DateTime, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import relationship
from interior_ledger.core.database import Base
from interior_ledger.models.enums import EntryType

class Entry(Base):
    __tablename__ = "entries"
    __table_args__ = (
        # A shared expense and a transferred income are mutually exclusive origins
        CheckConstraint(
            "NOT (is_shared_expense AND is_income_from_other_project)",
            name="ck_entries_single_origin",
        ),
    )

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(PG_UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    project_id = Column(PG_UUID(as_uuid=True), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(Enum(EntryType), nullable=False)
    amount = Column(Float, nullable=False)
    category = Column(String(length=100), nullable=False)
    description = Column(String(length=255), nullable=True)
    date = Column(DateTime, nullable=False, default=datetime.utcnow)

    # Shared expense: one real entry per In Progress project
    is_shared_expense = Column(Boolean, nullable=False, default=False)
    original_amount = Column(Float, nullable=True)
    batch_id = Column(PG_UUID(as_uuid=True), nullable=True, index=True)

    # Cross-project transfer: income half points at the funding project,
    # expense half points back at the income half
    is_income_from_other_project = Column(Boolean, nullable=False, default=False)
    source_project_id = Column(PG_UUID(as_uuid=True), ForeignKey("projects.id", ondelete="SET NULL"), nullable=True)
    transfer_entry_id = Column(PG_UUID(as_uuid=True), ForeignKey("entries.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    project = relationship("Project", back_populates="entries", foreign_keys=[project_id])
    source_project = relationship("Project", foreign_keys=[source_project_id])

    @property
    def is_transfer_half(self) -> bool:
        return bool(self.is_income_from_other_project or self.transfer_entry_id)

    def __repr__(self):
        return f"<Entry type={self.type} amount={self.amount} category={self.category} project_id={self.project_id}>"
