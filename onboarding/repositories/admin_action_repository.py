from typing import List, Optional
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

from onboarding.repositories.base import BaseRepository
from onboarding.models.admin_action import AdminActionLog

logger = logging.getLogger(__name__)


class AdminActionRepository(BaseRepository[AdminActionLog]):
    """Append-only access to the admin audit trail."""

    def __init__(self):
        super().__init__(AdminActionLog)

    async def list_actions(
        self,
        db: AsyncSession,
        application_id: Optional[UUID] = None,
        limit: int = 100
    ) -> List[AdminActionLog]:
        """
        Most recent audit entries, optionally for one application.

        Entries of deleted applications are still returned.
        """
        try:
            stmt = select(AdminActionLog).order_by(AdminActionLog.created_at.desc())
            if application_id is not None:
                stmt = stmt.where(AdminActionLog.application_id == application_id)
            result = await db.execute(stmt.limit(limit))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error fetching admin actions: {e}")
            raise
