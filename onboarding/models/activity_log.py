from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from sqlalchemy.sql import func
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import relationship
import uuid
import enum
from onboarding.core.database import Base


class ActivityType(str, enum.Enum):
    SUBMITTED = "submitted"
    STATUS_CHANGED = "status_changed"
    DOCUMENT_UPLOADED = "document_uploaded"
    DOCUMENT_VERIFIED = "document_verified"
    DOCUMENT_REJECTED = "document_rejected"
    DOCUMENT_REPLACED = "document_replaced"
    DOCUMENT_DELETED = "document_deleted"


class ActivityLog(Base):
    """Per-application timeline entry."""
    __tablename__ = "activity_logs"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    application_id = Column(
        UUID(as_uuid=True),
        ForeignKey("candidate_applications.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    activity_type = Column(String(50), nullable=False)
    description = Column(Text, nullable=False)
    performed_by = Column(UUID(as_uuid=True), ForeignKey("profiles.id"), nullable=True)
    # "metadata" is reserved on declarative classes
    details = Column("metadata", JSONB, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    performer = relationship("Profile", foreign_keys=[performed_by])

    def __repr__(self):
        return f"<ActivityLog(application_id={self.application_id}, type={self.activity_type})>"
