"""
Notification repository: per-user listing, unread counts and read markers.
"""

from __future__ import annotations
from typing import Optional
from uuid import UUID
from datetime import datetime, timezone
from sqlalchemy import select, func, update as sql_update, desc
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

from onboarding.models.notification import Notification
from .base import BaseRepository

logger = logging.getLogger(__name__)


class NotificationRepository(BaseRepository[Notification]):
    """Repository for Notification model with per-user queries."""

    def __init__(self):
        super().__init__(Notification)

    async def get_user_notifications(
        self,
        db: AsyncSession,
        user_id: UUID,
        skip: int = 0,
        limit: int = 50,
        is_read: Optional[bool] = None
    ) -> tuple[list[Notification], int]:
        """
        Get paginated notifications for a user, newest first.

        Args:
            db: Active database session
            user_id: UUID of the user
            skip: Number of records to skip (offset)
            limit: Maximum number of records to return
            is_read: Optional filter by read status

        Returns:
            Tuple of (notifications, total count with the same filters)
        """
        try:
            query = (
                select(Notification)
                .where(Notification.user_id == user_id)
                .order_by(desc(Notification.created_at))
            )
            count_query = (
                select(func.count())
                .select_from(Notification)
                .where(Notification.user_id == user_id)
            )

            if is_read is not None:
                query = query.where(Notification.is_read == is_read)
                count_query = count_query.where(Notification.is_read == is_read)

            result = await db.execute(query.offset(skip).limit(limit))
            notifications = list(result.scalars().all())

            count_result = await db.execute(count_query)
            total = count_result.scalar_one()

            return notifications, total

        except SQLAlchemyError as e:
            logger.error(f"Error fetching notifications for user {user_id}: {e}")
            raise

    async def get_unread_count(self, db: AsyncSession, user_id: UUID) -> int:
        try:
            stmt = (
                select(func.count())
                .select_from(Notification)
                .where(Notification.user_id == user_id, Notification.is_read.is_(False))
            )
            result = await db.execute(stmt)
            return result.scalar_one()
        except SQLAlchemyError as e:
            logger.error(f"Error counting unread notifications for user {user_id}: {e}")
            raise

    async def mark_as_read(self, db: AsyncSession, notification: Notification) -> Notification:
        """Mark a single notification read (no-op if it already is)."""
        if notification.is_read:
            return notification
        return await self.update(
            db,
            notification,
            {"is_read": True, "read_at": datetime.now(timezone.utc)},
        )

    async def mark_all_as_read(self, db: AsyncSession, user_id: UUID) -> int:
        """
        Mark every unread notification of a user as read.

        Returns:
            Number of notifications updated
        """
        try:
            stmt = (
                sql_update(Notification)
                .where(Notification.user_id == user_id, Notification.is_read.is_(False))
                .values(is_read=True, read_at=datetime.now(timezone.utc))
                .execution_options(synchronize_session=False)
            )
            result = await db.execute(stmt)
            await db.flush()
            return result.rowcount
        except SQLAlchemyError as e:
            logger.error(f"Error marking notifications read for user {user_id}: {e}")
            raise
