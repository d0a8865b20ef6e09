"""
Dashboard user accounts.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from marine_ops.models.company import User
from marine_ops.repository import Repository
from marine_ops.api.auth.permissions import ROLE_PERMISSIONS
from marine_ops.exceptions import ConflictError, DomainValidationError
import logging

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


class UserManager:
    def __init__(self, db_session: AsyncSession, password_hasher):
        """
        Args:
            db_session: Async session
            password_hasher: Object with ``hash_password``/``verify_password``
        """
        self.db = db_session
        self.users = Repository(db_session, User)
        self.hasher = password_hasher

    async def get_by_email(self, email: str) -> Optional[User]:
        return await self.db.scalar(select(User).where(func.lower(User.email) == email.lower()))

    async def authenticate(self, email: str, password: str) -> Optional[User]:
        """Return the user when the credentials match, stamping ``last_login``."""
        user = await self.get_by_email(email)
        if user is None or not self.hasher.verify_password(password, user.password_hash):
            logger.warning(f"Failed login for {email}")
            return None

        if user.is_active:
            user.last_login = datetime.now(timezone.utc)
            await self.db.commit()
            logger.info(f"User {user.id} logged in")
        return user

    async def list_users(self) -> List[User]:
        return await self.users.list(order_by=User.email)

    async def create_user(self, email: str, password: str, full_name: str,
                          role: str = "storekeeper", **values) -> User:
        self._check_role(role)
        self._check_password(password)
        if await self.get_by_email(email):
            raise ConflictError(f"A user with email {email} already exists")

        user = await self.users.create(
            email=email.lower(),
            full_name=full_name,
            role=role,
            password_hash=self.hasher.hash_password(password),
            is_active=True,
            **values,
        )
        await self.db.commit()
        logger.info(f"Created {role} user {user.email}")
        return user

    async def update_user(self, user_id: int, changes: Dict) -> User:
        changes = dict(changes)
        if "role" in changes:
            self._check_role(changes["role"])
        password = changes.pop("password", None)
        if password:
            self._check_password(password)
            changes["password_hash"] = self.hasher.hash_password(password)

        user = await self.users.update(user_id, changes)
        await self.db.commit()
        return user

    @staticmethod
    def _check_role(role: str):
        if role not in ROLE_PERMISSIONS:
            raise DomainValidationError(f"Unknown role: {role}")

    @staticmethod
    def _check_password(password: str):
        if len(password) < MIN_PASSWORD_LENGTH:
            raise DomainValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
            )
