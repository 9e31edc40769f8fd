# interior_ledger/models/project.py
import uuid
from datetime import datetime
from sqlalchemy import Column, String, ForeignKey, Float, Enum, DateTime, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import relationship
from interior_ledger.core.database import Base
from interior_ledger.models.enums import ProjectStatus

class Project(Base):
    __tablename__ = "projects"
    __table_args__ = (
        CheckConstraint("budget >= 0", name="ck_projects_budget_non_negative"),
    )

    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(PG_UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(length=150), nullable=False)
    description = Column(String(length=500), nullable=True)
    # Changed only by explicit budget updates or by connecting an estimate bill
    budget = Column(Float, nullable=False, default=0.0)
    status = Column(Enum(ProjectStatus), nullable=False, default=ProjectStatus.under_discussion)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="projects")
    entries = relationship(
        "Entry",
        back_populates="project",
        cascade="all, delete-orphan",
        foreign_keys="Entry.project_id",
        passive_deletes=True,
    )
    payment_bills = relationship("PaymentBill", back_populates="project", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<Project name={self.name} budget={self.budget} status={self.status} user_id={self.user_id}>"
