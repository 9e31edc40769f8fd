# interior_ledger/schemas/project.py
from typing import Optional
from pydantic import BaseModel, Field
from datetime import datetime
import uuid
from interior_ledger.models.enums import ProjectStatus

class ProjectBase(BaseModel):
    name: str = Field(..., min_length=1, description="Project name, e.g. Kitchen Remodel")
    description: Optional[str] = None
    budget: float = Field(0.0, ge=0)
    status: ProjectStatus = ProjectStatus.under_discussion

class ProjectCreate(ProjectBase):
    pass

class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None

class ProjectBudgetUpdate(BaseModel):
    budget: float = Field(..., ge=0)

class ProjectRead(ProjectBase):
    id: uuid.UUID
    user_id: uuid.UUID
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class ProjectDeleteResult(BaseModel):
    message: str
    project_id: uuid.UUID
    deleted_entries: int
