from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import uuid

from onboarding.core.database import get_db
from onboarding.api.deps import get_admin
from onboarding.models.profile import Profile
from onboarding.schemas.application import AdminActionResponse
from onboarding.services.audit_service import AuditService

router = APIRouter()


@router.get("", response_model=List[AdminActionResponse])
async def list_admin_actions(
    application_id: Optional[uuid.UUID] = Query(None),
    limit: int = Query(100, ge=1, le=500),
    current_profile: Profile = Depends(get_admin),
    db: AsyncSession = Depends(get_db)
):
    """Recent admin actions, including those on deleted applications"""
    return await AuditService().list_actions(db, application_id=application_id, limit=limit)
