"""
Notification endpoints for candidates: list with unread count, mark one or
all as read.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import uuid

from onboarding.core.database import get_db
from onboarding.api.deps import get_current_profile
from onboarding.models.profile import Profile
from onboarding.services.notification_service import NotificationService
from onboarding.schemas.notification import (
    NotificationListResponse,
    NotificationResponse,
    MarkReadResponse,
)

router = APIRouter()


@router.get("", response_model=NotificationListResponse)
async def get_notifications(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(50, ge=1, le=100, description="Items per page"),
    is_read: Optional[bool] = Query(None, description="Filter by read status"),
    current_profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db)
):
    """Paginated notifications for the current profile, newest first"""
    return await NotificationService().get_user_notifications(
        db,
        current_profile.id,
        page=page,
        limit=limit,
        is_read=is_read
    )


@router.patch("/read-all", response_model=MarkReadResponse)
async def mark_all_notifications_read(
    current_profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db)
):
    count = await NotificationService().mark_all_read(db, current_profile.id)
    await db.commit()
    return {
        "updated_count": count,
        "message": f"Marked {count} notifications as read"
    }


@router.patch("/{notification_id}/read", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: uuid.UUID,
    current_profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db)
):
    notification = await NotificationService().mark_notification_read(
        db,
        notification_id,
        current_profile.id
    )
    await db.commit()
    return notification
