"""
Candidate notifications: creation on workflow events, listing and read markers.
"""

from __future__ import annotations
from typing import Optional
from uuid import UUID
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from onboarding.models.notification import Notification, NotificationType
from onboarding.repositories.notification_repository import NotificationRepository
from onboarding.utils.pagination import calculate_offset, calculate_total_pages
from onboarding.utils.timeutils import utcnow

logger = logging.getLogger(__name__)


class NotificationService:
    """Service for creating and reading notifications."""

    def __init__(self, notification_repo: Optional[NotificationRepository] = None):
        self.notification_repo = notification_repo or NotificationRepository()

    async def create_notification(
        self,
        db: AsyncSession,
        user_id: UUID,
        title: str,
        message: str,
        notification_type: NotificationType = NotificationType.INFO,
        link: Optional[str] = None
    ) -> Notification:
        """
        Create a notification for a user. Does not commit.

        Args:
            db: Active database session
            user_id: Recipient profile id
            title: Short heading
            message: Body text
            notification_type: info, success, warning or error
            link: Optional in-app link

        Returns:
            Created notification
        """
        notification = await self.notification_repo.create(db, {
            "user_id": user_id,
            "title": title,
            "message": message,
            "type": notification_type.value,
            "link": link,
            "is_read": False,
            "created_at": utcnow(),
        })
        logger.info(f"Notification '{title}' created for user {user_id}")
        return notification

    async def get_user_notifications(
        self,
        db: AsyncSession,
        user_id: UUID,
        page: int = 1,
        limit: int = 50,
        is_read: Optional[bool] = None
    ) -> dict:
        """
        Get paginated notifications for a user.

        Returns:
            Dictionary with items, total, page, pages, unread_count
        """
        try:
            notifications, total = await self.notification_repo.get_user_notifications(
                db, user_id, skip=calculate_offset(page, limit), limit=limit, is_read=is_read
            )
            unread_count = await self.notification_repo.get_unread_count(db, user_id)

            return {
                "items": notifications,
                "total": total,
                "page": page,
                "pages": calculate_total_pages(total, limit),
                "unread_count": unread_count
            }

        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error getting notifications for user {user_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to retrieve notifications"
            )

    async def mark_notification_read(
        self,
        db: AsyncSession,
        notification_id: UUID,
        user_id: UUID
    ) -> Notification:
        """
        Mark one of the user's notifications as read.

        Raises:
            HTTPException 404: If the notification does not exist or belongs to someone else
        """
        try:
            notification = await self.notification_repo.get(db, notification_id)
            if notification is None or notification.user_id != user_id:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Notification not found"
                )
            return await self.notification_repo.mark_as_read(db, notification)

        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error marking notification {notification_id} read: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to update notification"
            )

    async def mark_all_read(self, db: AsyncSession, user_id: UUID) -> int:
        """Mark every unread notification of the user as read and return the count."""
        try:
            return await self.notification_repo.mark_all_as_read(db, user_id)
        except Exception as e:
            logger.error(f"Error marking all notifications read for user {user_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to update notifications"
            )
