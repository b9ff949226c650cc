"""User registration."""
import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.errors import StorageError, ValidationError
from app.models.user import User
from app.services.storage import storage_errors

logger = logging.getLogger(__name__)


async def create_user(db: AsyncSession, name: Optional[str], email: Optional[str]) -> User:
    """Register a user. Emails are unique."""
    if not name or not email:
        raise ValidationError("Name and email are required")

    user = User(name=name, email=email)
    db.add(user)
    try:
        async with storage_errors("create user"):
            try:
                await db.commit()
            except IntegrityError:
                await db.rollback()
                raise ValidationError("Email already exists")
            await db.refresh(user)
    except StorageError:
        await db.rollback()
        raise

    logger.info(f"Registered user {user.id}")
    return user


async def recent_users(db: AsyncSession, limit: Optional[int] = None) -> List[User]:
    """Most recently registered users, newest first."""
    limit = limit or settings.RECENT_USERS_LIMIT
    async with storage_errors("list users"):
        result = await db.execute(select(User).order_by(User.id.desc()).limit(limit))
        return list(result.scalars().all())
