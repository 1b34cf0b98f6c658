from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime
import uuid

from onboarding.models.document import DocumentType


class DocumentResponse(BaseModel):
    """Stored document metadata"""
    id: uuid.UUID
    application_id: uuid.UUID
    user_id: uuid.UUID
    document_type: DocumentType
    file_name: str
    file_type: str
    file_size: int
    storage_path: str
    status: str
    verified_by: Optional[uuid.UUID] = None
    verified_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class DocumentUploadResponse(BaseModel):
    document: DocumentResponse
    progress_percent: int
    message: str = "Document uploaded successfully"


class DocumentDeleteResponse(BaseModel):
    progress_percent: int
    message: str = "Document deleted successfully"


class DocumentRejectRequest(BaseModel):
    reason: str

    @field_validator('reason')
    @classmethod
    def reason_must_not_be_empty(cls, v):
        if not v or not v.strip():
            raise ValueError('A rejection reason is required')
        return v.strip()


class DocumentReviewResponse(BaseModel):
    document: DocumentResponse
    progress_percent: int
    application_status: str


class BulkVerifyRequest(BaseModel):
    document_ids: List[uuid.UUID] = Field(..., min_length=1)


class BulkVerifyResponse(BaseModel):
    verified: List[DocumentResponse]
    progress_by_application: dict[uuid.UUID, int]


class SignedUrlResponse(BaseModel):
    url: str
    expires_in: int
    expires_at: datetime
