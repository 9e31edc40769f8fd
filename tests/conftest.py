# tests/conftest.py
import os

# Settings are read at import time, so the test environment goes first
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-the-ledger-suite")
os.environ.setdefault("FRONTEND_URL", "http://localhost:3000")

import uuid
from datetime import datetime
from types import SimpleNamespace

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from interior_ledger.core.auth import User
from interior_ledger.core.database import Base, get_async_session
from interior_ledger.models import bill, category, entry, payment_bill, project  # noqa: F401
from interior_ledger.models.enums import EntryType, ProjectStatus
from interior_ledger.schemas.project import ProjectCreate
from interior_ledger.crud.project import create_project_for_user
from interior_ledger.crud.entry import add_entry


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


async def _create_user(db, email):
    user = User(email=email, hashed_password="not-a-real-hash", is_active=True, is_verified=True)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest.fixture
async def user_id(db):
    user = await _create_user(db, "studio@example.com")
    return user.id


@pytest.fixture
async def other_user_id(db):
    user = await _create_user(db, "someone-else@example.com")
    return user.id


@pytest.fixture
def make_project(db, user_id):
    async def _make(name, budget=0.0, status=ProjectStatus.in_progress, owner_id=None):
        return await create_project_for_user(
            owner_id or user_id,
            ProjectCreate(name=name, budget=budget, status=status),
            db,
        )
    return _make


@pytest.fixture
def make_entry(db, user_id):
    async def _make(project_id, type, amount, category, date=None, description=None):
        return await add_entry(
            user_id,
            project_id,
            EntryType(type),
            amount,
            category,
            db,
            description=description,
            date=date or datetime(2024, 3, 15, 10, 0),
        )
    return _make


@pytest.fixture
async def client(session_factory, user_id):
    from interior_ledger.main import app
    from interior_ledger.api.deps import get_current_user

    async def override_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_session
    app.dependency_overrides[get_current_user] = lambda: SimpleNamespace(id=user_id)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def random_id():
    return uuid.uuid4()
