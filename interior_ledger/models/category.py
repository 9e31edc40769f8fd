# interior_ledger/models/category.py
import uuid
from datetime import datetime
from sqlalchemy import Column, String, ForeignKey, Enum, DateTime, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import relationship
from interior_ledger.core.database import Base
from interior_ledger.models.enums import EntryType

class Category(Base):
    """User-defined category name. Built-in names are never stored here."""
    __tablename__ = "categories"
    __table_args__ = (
        UniqueConstraint("user_id", "type", "category", name="uq_categories_user_type_category"),
    )

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(PG_UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    type = Column(Enum(EntryType), nullable=False)
    category = Column(String(length=100), nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="categories")

    def __repr__(self):
        return f"<Category type={self.type} category={self.category} user_id={self.user_id}>"
