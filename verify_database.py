#!/usr/bin/env python3
"""
Check that the ledger tables exist and that every cross-project transfer
still has a balancing payment entry.
Usage: python verify_database.py
"""
import asyncio
import sys
from sqlalchemy import inspect, select, text
from interior_ledger.core.database import AsyncSessionLocal, Base, engine
from interior_ledger.core.auth import User
from interior_ledger.models import project, entry, category, bill, payment_bill  # noqa: F401
from interior_ledger.utils.transfers import verify_transfer_pairs

async def check_tables() -> bool:
    async with engine.connect() as conn:
        existing = set(await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names()))
        print("📋 Ledger tables:")
        missing = False
        for table in sorted(Base.metadata.tables):
            if table in existing:
                count = (await conn.execute(text(f"SELECT COUNT(*) FROM {table}"))).scalar()
                print(f"   ✅ {table}: {count} rows")
            else:
                missing = True
                print(f"   ❌ {table}: missing")

        if "alembic_version" in existing:
            version = (await conn.execute(text("SELECT version_num FROM alembic_version"))).scalar()
            print(f"\n🔄 Current Alembic version: {version}")
        else:
            print("\n⚠️  No alembic_version table; the schema was not created by migrations")
    return not missing

async def check_transfers() -> bool:
    async with AsyncSessionLocal() as session:
        user_ids = (await session.execute(select(User.id))).scalars().all()
        problems = 0
        for user_id in user_ids:
            for mismatch in await verify_transfer_pairs(user_id, session):
                problems += 1
                print(f"   ❌ user {user_id}: income {mismatch['income_entry_id']} - {mismatch['reason']}")
    if problems:
        print(f"\n⚠️  {problems} unbalanced transfer(s)")
    else:
        print("\n✅ Every transfer income has a balancing payment")
    return problems == 0

async def verify_database() -> bool:
    try:
        tables_ok = await check_tables()
        transfers_ok = await check_transfers() if tables_ok else False
    finally:
        await engine.dispose()
    return tables_ok and transfers_ok

def main():
    if not asyncio.run(verify_database()):
        sys.exit(1)

if __name__ == "__main__":
    main()
