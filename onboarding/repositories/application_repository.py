"""
Application queries.

Admin listing and statistics read every application and transform in
memory, so the list queries here are deliberately unpaginated.
"""
from typing import Optional, List
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload
import logging

from onboarding.repositories.base import BaseRepository
from onboarding.models.application import Application

logger = logging.getLogger(__name__)


class ApplicationRepository(BaseRepository[Application]):
    """Repository for candidate applications."""

    def __init__(self):
        super().__init__(Application)

    async def get_by_user(self, db: AsyncSession, user_id: UUID) -> List[Application]:
        """
        All applications owned by a candidate, newest first.

        Args:
            db: Database session
            user_id: Owning profile id

        Returns:
            List of applications (possibly empty)
        """
        try:
            stmt = (
                select(Application)
                .where(Application.user_id == user_id)
                .order_by(Application.created_at.desc())
            )
            result = await db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error fetching applications for user {user_id}: {e}")
            raise

    async def get_for_user(
        self,
        db: AsyncSession,
        application_id: UUID,
        user_id: UUID
    ) -> Optional[Application]:
        """Fetch an application only if it belongs to ``user_id``."""
        try:
            stmt = select(Application).where(
                Application.id == application_id,
                Application.user_id == user_id,
            )
            result = await db.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching application {application_id} for user {user_id}: {e}")
            raise

    async def list_with_profiles(self, db: AsyncSession) -> List[Application]:
        """
        Every application with its owner profile eagerly loaded.

        Returns:
            Applications ordered newest first, ``profile`` populated
        """
        try:
            stmt = (
                select(Application)
                .options(selectinload(Application.profile))
                .order_by(Application.created_at.desc())
                .execution_options(populate_existing=True)
            )
            result = await db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error listing applications: {e}")
            raise
