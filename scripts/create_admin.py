#!/usr/bin/env python3
"""
Create the bootstrap admin account.

Usage:
    ADMIN_EMAIL=... ADMIN_PASSWORD=... python scripts/create_admin.py

Credentials come from ADMIN_EMAIL / ADMIN_PASSWORD; when ADMIN_PASSWORD is
not set the password is prompted for. Existing accounts are left untouched.
"""

import asyncio
import getpass
import logging
import sys

from marine_ops.accounts import UserManager
from marine_ops.api.auth.jwt_handler import JWTHandler
from marine_ops.config import config
from marine_ops.db import get_database
from marine_ops.logging_config import setup_logging

logger = logging.getLogger("create_admin")


def read_credentials():
    if config.admin_email and config.admin_password:
        return config.get_admin_credentials()

    email = config.admin_email or input("Admin email: ").strip()
    password = getpass.getpass("Admin password: ")
    if password != getpass.getpass("Confirm password: "):
        raise ValueError("Passwords do not match")
    return email, password


async def create_admin(email: str, password: str) -> int:
    database = await get_database()
    try:
        async with database.get_session() as session:
            manager = UserManager(session, JWTHandler())
            if await manager.get_by_email(email):
                logger.info(f"Admin {email} already exists, nothing to do")
                return 0
            user = await manager.create_user(
                email=email, password=password, full_name="Administrator", role="admin"
            )
            logger.info(f"Created admin user {user.id} ({user.email})")
            return 0
    finally:
        await database.close()


def main():
    setup_logging()
    try:
        email, password = read_credentials()
    except ValueError as e:
        logger.error(str(e))
        return 1
    return asyncio.run(create_admin(email, password))


if __name__ == "__main__":
    sys.exit(main())
