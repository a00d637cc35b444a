"""
Database Seed Data Module

Bootstrap accounts for a fresh install. Safe to run repeatedly: existing
emails are left untouched.
Run with: python -m app.db.seed_data
"""
import asyncio
from typing import List

from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import AsyncSessionLocal, close_db, init_db
from app.core.security import get_password_hash
from app.models.user import User, UserRole, UserStatus


# ==================== Sample Data Constants ====================

DEFAULT_ACCOUNTS = [
    {"name": "Super Administrator", "email": "superadmin@admin.com", "password": "SuperAdmin@123", "role": UserRole.SUPER_ADMIN},
    {"name": "Administrator", "email": "admin@admin.com", "password": "Admin@123", "role": UserRole.ADMIN},
    {"name": "Regular User", "email": "user@example.com", "password": "User@123", "role": UserRole.USER},
]


# ==================== Seed Functions ====================

async def seed_users(db: AsyncSession) -> List[User]:
    """Create the default accounts that do not exist yet"""
    created = []
    for account in DEFAULT_ACCOUNTS:
        existing = await db.execute(select(User).where(User.email == account["email"]))
        if existing.scalar_one_or_none():
            print(f"Exists: {account['email']}")
            continue

        user = User(
            name=account["name"],
            email=account["email"],
            hashed_password=get_password_hash(account["password"]),
            role=account["role"],
            status=UserStatus.ACTIVE,
        )
        db.add(user)
        created.append(user)
        print(f"Created {account['role'].value}: {account['email']}")

    await db.flush()
    return created


async def seed_all():
    """Create tables and the default accounts"""
    print("=" * 50)
    print("Starting database seeding...")
    print("=" * 50)

    await init_db()

    async with AsyncSessionLocal() as db:
        try:
            users = await seed_users(db)
            await db.commit()
            print("=" * 50)
            print(f"Database seeding completed successfully! ({len(users)} new accounts)")
            print("Default credentials:")
            for account in DEFAULT_ACCOUNTS:
                print(f"  {account['role'].value:<12} {account['email']} / {account['password']}")
            print("=" * 50)

        except Exception as e:
            await db.rollback()
            print(f"Error seeding database: {e}")
            raise

    await close_db()


async def clear_all():
    """Remove the default accounts"""
    print("Clearing default accounts...")
    async with AsyncSessionLocal() as db:
        await db.execute(delete(User).where(User.email.in_([a["email"] for a in DEFAULT_ACCOUNTS])))
        await db.commit()
        print("Default accounts cleared!")
    await close_db()


def main():
    import sys

    if len(sys.argv) > 1 and sys.argv[1] == "clear":
        asyncio.run(clear_all())
    else:
        asyncio.run(seed_all())


if __name__ == "__main__":
    main()
