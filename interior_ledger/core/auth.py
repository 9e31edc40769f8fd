# interior_ledger/core/auth.py

import uuid
import logging
from datetime import datetime
from typing import Optional

from fastapi import Depends, Request
from fastapi_users import FastAPIUsers, BaseUserManager, UUIDIDMixin
from fastapi_users.authentication import (
    AuthenticationBackend,
    BearerTransport,
    JWTStrategy,
)
from fastapi_users.db import SQLAlchemyUserDatabase
from fastapi_users import schemas

from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import relationship
from sqlalchemy.ext.asyncio import AsyncSession

from .database import Base, get_async_session
from .config import settings

logger = logging.getLogger(__name__)

# Audience stamped into every access token issued by the JWT strategy
TOKEN_AUDIENCE = ["fastapi-users:auth"]

# 1. User DB model
class User(Base):
    __tablename__ = "users"
    
    id = Column(PG_UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    is_superuser = Column(Boolean, default=False, nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)
    
    username = Column(String, unique=True, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    projects = relationship(
        "Project",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    categories = relationship(
        "Category",
        back_populates="user",
        cascade="all, delete-orphan",
    )

# 2. Pydantic schemas
class UserRead(schemas.BaseUser[uuid.UUID]):
    username: Optional[str] = None
    
    class Config:
        from_attributes = True

class UserCreate(schemas.BaseUserCreate):
    username: Optional[str] = None

class UserUpdate(schemas.BaseUserUpdate):
    username: Optional[str] = None

# 3. User Manager
class UserManager(UUIDIDMixin, BaseUserManager[User, uuid.UUID]):
    reset_password_token_secret = settings.SECRET_KEY
    verification_token_secret = settings.SECRET_KEY

    async def on_after_register(self, user: User, request: Optional[Request] = None):
        logger.info(f"User {user.email} has registered")

    async def on_after_request_verify(self, user: User, token: str, request: Optional[Request] = None):
        # Mail delivery is handled by the frontend; the token is only logged truncated
        logger.info(f"Verification requested for user {user.email}. Token: {token[:10]}...")

    async def on_after_forgot_password(self, user: User, token: str, request: Optional[Request] = None):
        logger.info(f"Password reset requested for user {user.email}. Token: {token[:10]}...")

    async def on_after_verify(self, user: User, request: Optional[Request] = None):
        logger.info(f"User {user.email} has been verified")

    async def on_after_reset_password(self, user: User, request: Optional[Request] = None):
        logger.info(f"Password reset completed for user {user.email}")

# 4. User Database
async def get_user_db(session: AsyncSession = Depends(get_async_session)):
    yield SQLAlchemyUserDatabase(session, User)

# 5. User Manager dependency
async def get_user_manager(user_db: SQLAlchemyUserDatabase = Depends(get_user_db)):
    yield UserManager(user_db)

# 6. Authentication
bearer_transport = BearerTransport(tokenUrl="/api/v1/auth/jwt/login")

def get_jwt_strategy() -> JWTStrategy:
    return JWTStrategy(
        secret=settings.SECRET_KEY,
        lifetime_seconds=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        token_audience=TOKEN_AUDIENCE,
    )

auth_backend = AuthenticationBackend(
    name="jwt",
    transport=bearer_transport,
    get_strategy=get_jwt_strategy,
)

# 7. FastAPI Users instance
fastapi_users = FastAPIUsers[User, uuid.UUID](get_user_manager, [auth_backend])

__all__ = [
    "fastapi_users",
    "auth_backend", 
    "get_user_db",
    "get_user_manager",
    "User",
    "UserRead",
    "UserCreate", 
    "UserUpdate",
    "UserManager",
    "TOKEN_AUDIENCE",
]
