from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.sql import func
from sqlalchemy.dialects.postgresql import UUID, JSONB
import uuid
import enum
from onboarding.core.database import Base


class AdminActionType(str, enum.Enum):
    APPROVE = "approve"
    REJECT = "reject"
    UNDER_REVIEW = "under_review"
    REQUEST_DOCUMENTS = "request_documents"
    VERIFY_DOCUMENT = "verify_document"
    REJECT_DOCUMENT = "reject_document"
    DELETE_APPLICATION = "delete_application"


class AdminActionLog(Base):
    """Append-only audit trail of admin decisions."""
    __tablename__ = "admin_actions_log"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    admin_id = Column(UUID(as_uuid=True), ForeignKey("profiles.id"), nullable=False, index=True)

    # No foreign key: entries outlive deleted applications
    application_id = Column(UUID(as_uuid=True), nullable=True, index=True)

    action = Column(String(50), nullable=False)
    details = Column(JSONB, nullable=False, default=dict)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    def __repr__(self):
        return f"<AdminActionLog(admin_id={self.admin_id}, application_id={self.application_id}, action={self.action})>"
