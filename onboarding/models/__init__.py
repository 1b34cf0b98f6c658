from .profile import Profile, ProfileRole
from .application import Application, ApplicationStatus
from .document import Document, DocumentType, VerificationStatus
from .admin_action import AdminActionLog, AdminActionType
from .notification import Notification, NotificationType
from .activity_log import ActivityLog, ActivityType

__all__ = [
    "Profile", "ProfileRole", "Application", "ApplicationStatus",
    "Document", "DocumentType", "VerificationStatus",
    "AdminActionLog", "AdminActionType", "Notification", "NotificationType",
    "ActivityLog", "ActivityType",
]
