from sqlalchemy import Boolean, Column, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.sql import func
from sqlalchemy.dialects.postgresql import UUID, JSONB
from sqlalchemy.orm import relationship
import uuid
import enum
from onboarding.core.database import Base


class ApplicationStatus(str, enum.Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    DOCUMENTS_PENDING = "documents_pending"
    COMPLETED = "completed"


class Application(Base):
    __tablename__ = "candidate_applications"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    user_id = Column(UUID(as_uuid=True), ForeignKey("profiles.id"), nullable=False, index=True)

    post_applied_for = Column(String(255))

    # Applicant-entered fields
    name = Column(String(255))
    father_or_husband_name = Column(String(255))
    permanent_address = Column(Text)
    communication_address = Column(Text)
    date_of_birth = Column(Date)
    sex = Column(String(10))  # Male, Female, Other
    nationality = Column(String(100))
    marital_status = Column(String(20))  # Single, Married, Divorced, Widowed
    religion = Column(String(100))
    mobile_no = Column(String(20))
    email = Column(String(255))

    # Banking and identity
    bank_name = Column(String(255))
    account_no = Column(String(50))
    ifsc_code = Column(String(20))
    branch = Column(String(255))
    pan_no = Column(String(20))
    aadhar_no = Column(String(20))

    education = Column(JSONB, nullable=False, default=list)
    # Ordered list: [{"level": "10th", "year_of_passing": "2015", "percentage": "88.4"}]

    declaration_place = Column(String(255))
    declaration_date = Column(Date)
    declaration_accepted = Column(Boolean, nullable=False, default=False)

    status = Column(String(25), nullable=False, default=ApplicationStatus.DRAFT.value, index=True)
    progress_percent = Column(Integer, nullable=False, default=0)

    required_document_types = Column(JSONB, nullable=False, default=list)
    # Document types counted by the progress rule, copied from settings on creation

    # Review
    submitted_at = Column(DateTime(timezone=True), nullable=True, index=True)
    reviewed_by = Column(UUID(as_uuid=True), ForeignKey("profiles.id"), nullable=True, index=True)
    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    rejection_reason = Column(Text, nullable=True)
    # Required when status=rejected
    admin_notes = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    profile = relationship("Profile", foreign_keys=[user_id])

    def __repr__(self):
        return f"<Application(id={self.id}, user_id={self.user_id}, status={self.status})>"
