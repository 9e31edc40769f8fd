# interior_ledger/api/v1/routes/projects.py
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import uuid

from interior_ledger.schemas.project import (
    ProjectCreate,
    ProjectRead,
    ProjectUpdate,
    ProjectBudgetUpdate,
    ProjectDeleteResult,
)
from interior_ledger.crud.project import (
    create_project_for_user,
    get_projects_for_user,
    get_project_by_id,
    update_project,
    update_project_budget,
    delete_project,
)
from interior_ledger.models.enums import ProjectStatus
from interior_ledger.core.database import get_async_session
from interior_ledger.core.auth import User
from interior_ledger.api.deps import get_current_user

router = APIRouter(prefix="/projects", tags=["projects"])

async def _get_owned_project(project_id: uuid.UUID, user: User, db: AsyncSession):
    project = await get_project_by_id(project_id, uuid.UUID(str(user.id)), db)
    if not project:
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail="Project not found")
    return project

@router.get("", response_model=List[ProjectRead])
async def read_projects(
    project_status: Optional[ProjectStatus] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await get_projects_for_user(uuid.UUID(str(user.id)), db, status=project_status)

@router.post("", response_model=ProjectRead, status_code=status.HTTP_201_CREATED)
async def create_project(
    project_in: ProjectCreate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await create_project_for_user(uuid.UUID(str(user.id)), project_in, db)

@router.get("/{project_id}", response_model=ProjectRead)
async def read_project(
    project_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    return await _get_owned_project(project_id, user, db)

@router.patch("/{project_id}", response_model=ProjectRead)
async def update_project_endpoint(
    project_id: uuid.UUID,
    project_in: ProjectUpdate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    project = await _get_owned_project(project_id, user, db)
    return await update_project(project, project_in, db)

@router.put("/{project_id}/budget", response_model=ProjectRead)
async def update_project_budget_endpoint(
    project_id: uuid.UUID,
    budget_in: ProjectBudgetUpdate,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    project = await _get_owned_project(project_id, user, db)
    return await update_project_budget(project, budget_in.budget, db)

@router.delete("/{project_id}", response_model=ProjectDeleteResult)
async def delete_project_endpoint(
    project_id: uuid.UUID,
    db: AsyncSession = Depends(get_async_session),
    user: User = Depends(get_current_user),
):
    """Deletes the project together with every entry recorded against it."""
    project = await _get_owned_project(project_id, user, db)
    deleted_entries = await delete_project(project, db)
    return ProjectDeleteResult(
        message="Project and associated entries deleted successfully",
        project_id=project_id,
        deleted_entries=deleted_entries,
    )
