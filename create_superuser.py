#!/usr/bin/env python3
"""
Create an administrator account for the Interior Ledger API.
Usage: python create_superuser.py
"""

import asyncio
import getpass
from interior_ledger.core.database import AsyncSessionLocal, engine
from interior_ledger.core.auth import User, UserManager, UserCreate
from interior_ledger.models import project, entry, category, bill, payment_bill  # noqa: F401
from fastapi_users.db import SQLAlchemyUserDatabase
from fastapi_users.exceptions import UserAlreadyExists

async def create_superuser():
    print("Creating superuser...")

    email = input("Enter superuser email: ") or "admin@example.com"
    password = getpass.getpass("Enter superuser password: ")
    username = input("Enter username (optional): ") or None
    if not password:
        print("❌ A password is required")
        return

    try:
        async with AsyncSessionLocal() as session:
            user_manager = UserManager(SQLAlchemyUserDatabase(session, User))
            superuser = await user_manager.create(
                UserCreate(
                    email=email,
                    password=password,
                    username=username,
                    is_superuser=True,
                    is_verified=True,
                )
            )
    except UserAlreadyExists:
        print(f"User with email {email} already exists!")
        return
    finally:
        await engine.dispose()

    print("✅ Superuser created successfully!")
    print(f"📧 Email: {superuser.email}")
    print(f"🔑 ID: {superuser.id}")

if __name__ == "__main__":
    asyncio.run(create_superuser())
