"""
Application timeline: activity rows written by the workflow and read back
for candidates and admins.
"""
from typing import Any, Dict, List, Optional
from uuid import UUID
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from onboarding.models.activity_log import ActivityLog, ActivityType
from onboarding.models.application import Application
from onboarding.repositories.activity_log_repository import ActivityLogRepository
from onboarding.utils.timeutils import utcnow

logger = logging.getLogger(__name__)


class ActivityService:
    """Service for writing and reading application activity."""

    def __init__(self, activity_repo: Optional[ActivityLogRepository] = None):
        self.activity_repo = activity_repo or ActivityLogRepository()

    async def log_activity(
        self,
        db: AsyncSession,
        application_id: UUID,
        activity_type: ActivityType,
        description: str,
        performed_by: Optional[UUID] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> ActivityLog:
        """
        Append a timeline entry. Does not commit.

        Args:
            db: Active database session
            application_id: Application the entry belongs to
            activity_type: What happened
            description: Human readable summary
            performed_by: Acting profile id, if any
            metadata: Extra JSON details (status change, document id...)
        """
        return await self.activity_repo.create(db, {
            "application_id": application_id,
            "activity_type": activity_type.value,
            "description": description,
            "performed_by": performed_by,
            "details": metadata or {},
            "created_at": utcnow(),
        })

    async def get_timeline(self, db: AsyncSession, application: Application) -> List[dict]:
        """
        Timeline of an application, newest first.

        Returns:
            List of dicts with the activity fields plus performer_name and performer_role
        """
        try:
            entries = await self.activity_repo.list_for_application(db, application.id)
            return [self._to_timeline_entry(entry) for entry in entries]
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching timeline for application {application.id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to retrieve timeline"
            )

    def _to_timeline_entry(self, entry: ActivityLog) -> dict:
        performer = entry.performer
        return {
            "id": entry.id,
            "activity_type": entry.activity_type,
            "description": entry.description,
            "performed_by": entry.performed_by,
            "performer_name": performer.display_name if performer else None,
            "performer_role": performer.role.value if performer else None,
            "metadata": entry.details or {},
            "created_at": entry.created_at,
        }
