#!/usr/bin/env python3
"""
Script to create the first admin user for the Maria Faz back office.
"""

import asyncio
import getpass
import sys

from sqlalchemy import or_, select

import app.models  # noqa: F401
from app.core.database import AsyncSessionLocal, async_engine
from app.core.security import get_password_hash
from app.models.base import Base
from app.models.user import User, UserRole

MIN_PASSWORD_LENGTH = 8


async def create_admin_user():
    print("🔧 Creating admin user for Maria Faz")
    print("-" * 40)

    username = input("Enter admin username: ").strip()
    if not username:
        print("❌ Username cannot be empty")
        return False

    email = input("Enter admin email: ").strip()
    if not email:
        print("❌ Email cannot be empty")
        return False

    full_name = input("Enter full name (optional): ").strip() or None

    password = getpass.getpass("Enter admin password: ").strip()
    if len(password) < MIN_PASSWORD_LENGTH:
        print(f"❌ Password must be at least {MIN_PASSWORD_LENGTH} characters long")
        return False

    password_confirm = getpass.getpass("Confirm password: ").strip()
    if password != password_confirm:
        print("❌ Passwords do not match")
        return False

    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with AsyncSessionLocal() as db:
        existing_user_stmt = select(User).where(
            or_(User.username == username, User.email == email)
        )
        existing_user = (await db.execute(existing_user_stmt)).scalar_one_or_none()
        if existing_user:
            print(f"❌ User with username '{username}' or email '{email}' already exists")
            return False

        admin_user = User(
            username=username,
            email=email,
            full_name=full_name,
            hashed_password=get_password_hash(password),
            role=UserRole.ADMIN,
            is_active=True,
        )
        db.add(admin_user)
        await db.commit()
        await db.refresh(admin_user)

        print("✅ Admin user created successfully!")
        print(f"   Username: {admin_user.username}")
        print(f"   Email: {admin_user.email}")
        print(f"   Role: {admin_user.role.value}")
        print(f"   User ID: {admin_user.id}")
        return True


async def main():
    print("=" * 50)
    print("🏠 MARIA FAZ - ADMIN USER CREATOR")
    print("=" * 50)
    print()

    try:
        success = await create_admin_user()
    except KeyboardInterrupt:
        print("\n\n❌ Setup cancelled by user")
        sys.exit(1)
    finally:
        await async_engine.dispose()

    print("\n" + "=" * 50)
    print("✅ SETUP COMPLETE!" if success else "❌ SETUP FAILED!")
    print("=" * 50)
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    asyncio.run(main())
