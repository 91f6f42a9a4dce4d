"""
Seed Admin User

Creates the portal admin account. Admins cannot register through the API.

Credentials are read from the environment:
    ADMIN_EMAIL, ADMIN_PASSWORD, ADMIN_FIRST_NAME (optional), ADMIN_LAST_NAME (optional)

Usage:
    cd apps/api
    ADMIN_EMAIL=admin@sovportal.in ADMIN_PASSWORD=... python scripts/seed_admin.py
"""

import asyncio
import logging
import os
import sys

from app.core.database import async_session_maker, close_db
from app.core.security import hash_password
from app.modules.users.models import UserRole
from app.modules.users.repository import UserRepository

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
logger = logging.getLogger("seed_admin")


async def seed_admin() -> int:
    """Create the admin user if it doesn't exist. Returns a process exit code."""
    email = os.getenv("ADMIN_EMAIL")
    password = os.getenv("ADMIN_PASSWORD")

    if not email or not password:
        logger.error("ADMIN_EMAIL and ADMIN_PASSWORD must be set")
        return 1

    try:
        async with async_session_maker() as db:
            existing = await UserRepository.get_by_email(db, email)
            if existing:
                logger.info(f"Admin already exists: {existing.email} ({existing.role.value})")
                return 0

            admin = await UserRepository.create(
                db,
                email=email,
                password_hash=hash_password(password),
                first_name=os.getenv("ADMIN_FIRST_NAME", "Portal"),
                last_name=os.getenv("ADMIN_LAST_NAME", "Admin"),
                role=UserRole.ADMIN,
                is_active=True,
                is_verified=True,
            )
            logger.info(f"Admin created: {admin.email} (id: {admin.id})")
    finally:
        await close_db()

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(seed_admin()))
