"""
Uploaded onboarding documents and their verification metadata.
"""
from sqlalchemy import Column, DateTime, ForeignKey, String, Integer, Text
from sqlalchemy.sql import func
from sqlalchemy.dialects.postgresql import UUID
import uuid
import enum
from onboarding.core.database import Base


class DocumentType(str, enum.Enum):
    PAN_CARD = "pan_card"
    AADHAR_CARD = "aadhar_card"
    PASSPORT = "passport"
    TENTH_CERTIFICATE = "tenth_certificate"
    TWELFTH_CERTIFICATE = "twelfth_certificate"
    BACHELORS_DEGREE = "bachelors_degree"
    MASTERS_DEGREE = "masters_degree"
    POLICE_CLEARANCE = "police_clearance"
    PHOTO = "photo"
    SIGNATURE = "signature"
    OTHER = "other"


DOCUMENT_TYPE_LABELS = {
    DocumentType.PAN_CARD.value: "PAN Card",
    DocumentType.AADHAR_CARD.value: "Aadhar Card",
    DocumentType.PASSPORT.value: "Passport",
    DocumentType.TENTH_CERTIFICATE.value: "10th Certificate",
    DocumentType.TWELFTH_CERTIFICATE.value: "12th Certificate",
    DocumentType.BACHELORS_DEGREE.value: "Bachelor's Degree",
    DocumentType.MASTERS_DEGREE.value: "Master's Degree",
    DocumentType.POLICE_CLEARANCE.value: "Police Clearance",
    DocumentType.PHOTO.value: "Photograph",
    DocumentType.SIGNATURE.value: "Signature",
    DocumentType.OTHER.value: "Other Document",
}


class VerificationStatus(str, enum.Enum):
    PENDING = "pending"
    UPLOADED = "uploaded"  # legacy spelling of pending
    VERIFIED = "verified"
    REJECTED = "rejected"


class Document(Base):
    """
    One row per uploaded file. The bytes live in the candidate-documents
    bucket at {user_id}/{application_id}/{document_type}/{file}.
    """
    __tablename__ = "documents"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    application_id = Column(
        UUID(as_uuid=True),
        ForeignKey("candidate_applications.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(UUID(as_uuid=True), ForeignKey("profiles.id"), nullable=False, index=True)

    document_type = Column(String(50), nullable=False, index=True)

    # File metadata
    file_name = Column(String(255), nullable=False)  # User's original filename
    file_type = Column(String(50), nullable=False)  # Detected MIME type
    file_size = Column(Integer, nullable=False)  # Bytes
    storage_path = Column(String(500), nullable=False)

    # Verification
    status = Column(String(20), nullable=False, default=VerificationStatus.PENDING.value, index=True)
    verified_by = Column(UUID(as_uuid=True), ForeignKey("profiles.id"), nullable=True)
    verified_at = Column(DateTime(timezone=True), nullable=True)
    rejection_reason = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    @property
    def is_verified(self) -> bool:
        return self.status == VerificationStatus.VERIFIED.value

    def __repr__(self):
        return f"<Document(id={self.id}, application_id={self.application_id}, type={self.document_type}, status={self.status})>"
