from typing import List
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload
import logging

from onboarding.repositories.base import BaseRepository
from onboarding.models.activity_log import ActivityLog

logger = logging.getLogger(__name__)


class ActivityLogRepository(BaseRepository[ActivityLog]):
    """Timeline rows for one application."""

    def __init__(self):
        super().__init__(ActivityLog)

    async def list_for_application(self, db: AsyncSession, application_id: UUID) -> List[ActivityLog]:
        """Activity newest first with the performer profile loaded."""
        try:
            stmt = (
                select(ActivityLog)
                .options(selectinload(ActivityLog.performer))
                .where(ActivityLog.application_id == application_id)
                .order_by(ActivityLog.created_at.desc())
                .execution_options(populate_existing=True)
            )
            result = await db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error fetching timeline for application {application_id}: {e}")
            raise
