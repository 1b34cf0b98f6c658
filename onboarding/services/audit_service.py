from typing import Any, Dict, List, Optional
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from onboarding.models.admin_action import AdminActionLog, AdminActionType
from onboarding.repositories.admin_action_repository import AdminActionRepository
from onboarding.utils.timeutils import utcnow

logger = logging.getLogger(__name__)


class AuditService:
    """Writes and lists admin action log entries."""

    def __init__(self, action_repo: Optional[AdminActionRepository] = None):
        self.action_repo = action_repo or AdminActionRepository()

    async def log_action(
        self,
        db: AsyncSession,
        admin_id: UUID,
        action: AdminActionType,
        application_id: Optional[UUID] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> AdminActionLog:
        """Append one audit entry in the caller's transaction."""
        entry = await self.action_repo.create(db, {
            "admin_id": admin_id,
            "application_id": application_id,
            "action": action.value,
            "details": details or {},
            "created_at": utcnow(),
        })
        logger.info(f"Admin {admin_id} performed {action.value} on application {application_id}")
        return entry

    async def list_actions(
        self,
        db: AsyncSession,
        application_id: Optional[UUID] = None,
        limit: int = 100
    ) -> List[AdminActionLog]:
        return await self.action_repo.list_actions(db, application_id=application_id, limit=limit)
