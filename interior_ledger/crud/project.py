# interior_ledger/crud/project.py
import logging
import uuid
from typing import List, Optional

from sqlalchemy import delete, func, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from interior_ledger.core.db_utils import with_db_retry
from interior_ledger.models.bill import InteriorBill
from interior_ledger.models.entry import Entry
from interior_ledger.models.enums import ProjectStatus
from interior_ledger.models.payment_bill import PaymentBill
from interior_ledger.models.project import Project
from interior_ledger.schemas.project import ProjectCreate, ProjectUpdate
from interior_ledger.utils.validation import require_fields, require_non_negative

logger = logging.getLogger(__name__)

@with_db_retry()
async def get_projects_for_user(
    user_id: uuid.UUID,
    db: AsyncSession,
    status: Optional[ProjectStatus] = None,
) -> List[Project]:
    require_fields(user_id=user_id)
    query = select(Project).where(Project.user_id == user_id)
    if status is not None:
        query = query.where(Project.status == ProjectStatus(status))
    result = await db.execute(query.order_by(Project.created_at, Project.name))
    return result.scalars().all()

async def get_in_progress_projects(user_id: uuid.UUID, db: AsyncSession) -> List[Project]:
    return await get_projects_for_user(user_id, db, status=ProjectStatus.in_progress)

async def count_projects_for_user(user_id: uuid.UUID, db: AsyncSession) -> int:
    result = await db.execute(
        select(func.count()).select_from(Project).where(Project.user_id == user_id)
    )
    return result.scalar_one() or 0

async def get_project_by_id(project_id: uuid.UUID, user_id: uuid.UUID, db: AsyncSession) -> Optional[Project]:
    result = await db.execute(
        select(Project).where(Project.id == project_id, Project.user_id == user_id)
    )
    return result.scalar_one_or_none()

async def get_project_by_name_for_user(name: str, user_id: uuid.UUID, db: AsyncSession) -> Optional[Project]:
    """Exact name match first, then a case-insensitive one; oldest project wins."""
    result = await db.execute(
        select(Project)
        .where(Project.user_id == user_id, Project.name == name)
        .order_by(Project.created_at)
    )
    project = result.scalars().first()
    if project is not None:
        return project
    result = await db.execute(
        select(Project)
        .where(Project.user_id == user_id, func.lower(Project.name) == func.lower(name))
        .order_by(Project.created_at)
    )
    return result.scalars().first()

async def create_project_for_user(user_id: uuid.UUID, project_in: ProjectCreate, db: AsyncSession) -> Project:
    require_fields(user_id=user_id, name=project_in.name)
    require_non_negative("budget", project_in.budget)
    new_project = Project(**project_in.model_dump(), user_id=user_id)
    db.add(new_project)
    await db.commit()
    await db.refresh(new_project)
    logger.info(f"Created project {new_project.id} '{new_project.name}' for user {user_id}")
    return new_project

async def update_project(project: Project, project_in: ProjectUpdate, db: AsyncSession) -> Project:
    for field, value in project_in.model_dump(exclude_unset=True).items():
        if field in ("name", "status") and value is None:
            continue
        setattr(project, field, value)
    db.add(project)
    await db.commit()
    await db.refresh(project)
    return project

async def update_project_budget(project: Project, budget: float, db: AsyncSession) -> Project:
    require_non_negative("budget", budget)
    project.budget = float(budget)
    db.add(project)
    await db.commit()
    await db.refresh(project)
    logger.info(f"Budget of project {project.id} set to {project.budget}")
    return project

async def delete_project(project: Project, db: AsyncSession) -> int:
    """Delete a project after every one of its entries, in one transaction.

    Transfer incomes on other projects that were funded by this project keep
    their transfer flag but lose the dangling source reference.
    Returns the number of entries removed.
    """
    project_id = project.id
    try:
        # Payment halves on other projects keep their row but lose the link
        await db.execute(
            update(Entry)
            .where(Entry.transfer_entry_id.in_(
                select(Entry.id).where(Entry.project_id == project_id)
            ))
            .values(transfer_entry_id=None)
        )
        result = await db.execute(
            delete(Entry).where(Entry.project_id == project_id)
        )
        deleted_entries = result.rowcount or 0
        await db.execute(
            update(Entry)
            .where(Entry.source_project_id == project_id)
            .values(source_project_id=None)
        )
        await db.execute(
            delete(PaymentBill).where(PaymentBill.project_id == project_id)
        )
        await db.execute(
            update(InteriorBill)
            .where(InteriorBill.project_id == project_id)
            .values(project_id=None)
        )
        await db.delete(project)
        await db.commit()
    except Exception as e:
        logger.error(f"Deleting project {project_id} failed, rolling back: {str(e)}")
        await db.rollback()
        raise
    logger.info(f"Deleted project {project_id} and {deleted_entries} entries")
    return deleted_entries
