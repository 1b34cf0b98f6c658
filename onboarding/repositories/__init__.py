"""
Repository layer: one class per table, all queries in SQLAlchemy 2.0 style.
"""

from .base import BaseRepository
from .profile_repository import ProfileRepository
from .application_repository import ApplicationRepository
from .document_repository import DocumentRepository
from .notification_repository import NotificationRepository
from .admin_action_repository import AdminActionRepository
from .activity_log_repository import ActivityLogRepository

__all__ = [
    "BaseRepository",
    "ProfileRepository",
    "ApplicationRepository",
    "DocumentRepository",
    "NotificationRepository",
    "AdminActionRepository",
    "ActivityLogRepository",
]
