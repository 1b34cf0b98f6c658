from typing import Optional
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

from onboarding.repositories.base import BaseRepository
from onboarding.models.profile import Profile

logger = logging.getLogger(__name__)


class ProfileRepository(BaseRepository[Profile]):
    """Profile lookups used by authentication and display enrichment."""

    def __init__(self):
        super().__init__(Profile)

    async def get_by_email(self, db: AsyncSession, email: str) -> Optional[Profile]:
        """Case-insensitive lookup by email address."""
        try:
            stmt = select(Profile).where(func.lower(Profile.email) == email.strip().lower())
            result = await db.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching profile by email: {e}")
            raise
