from pydantic import BaseModel, field_validator
from typing import Optional, List, Any, Dict
from datetime import date, datetime
import uuid

from onboarding.schemas.document import DocumentResponse
from onboarding.schemas.profile import ProfileSummary
from onboarding.utils.pagination import PaginationMeta


class EducationEntry(BaseModel):
    level: str
    year_of_passing: Optional[str] = None
    percentage: Optional[str] = None


class ApplicationFields(BaseModel):
    """Applicant-entered fields; every one is optional while drafting"""
    post_applied_for: Optional[str] = None
    name: Optional[str] = None
    father_or_husband_name: Optional[str] = None
    permanent_address: Optional[str] = None
    communication_address: Optional[str] = None
    date_of_birth: Optional[date] = None
    sex: Optional[str] = None
    nationality: Optional[str] = None
    marital_status: Optional[str] = None
    religion: Optional[str] = None
    mobile_no: Optional[str] = None
    email: Optional[str] = None
    bank_name: Optional[str] = None
    account_no: Optional[str] = None
    ifsc_code: Optional[str] = None
    branch: Optional[str] = None
    pan_no: Optional[str] = None
    aadhar_no: Optional[str] = None
    education: Optional[List[EducationEntry]] = None
    declaration_place: Optional[str] = None
    declaration_date: Optional[date] = None
    declaration_accepted: Optional[bool] = None

    def changes(self) -> Dict[str, Any]:
        """Fields the client actually sent, ready to apply to the model"""
        return self.model_dump(exclude_unset=True, mode="python")


class ApplicationCreate(ApplicationFields):
    pass


class ApplicationUpdate(ApplicationFields):
    pass


class ApplicationSubmit(ApplicationFields):
    """Optional last edits applied in the same transaction as the submit"""
    pass


class ApplicationResponse(ApplicationFields):
    id: uuid.UUID
    user_id: uuid.UUID
    education: List[EducationEntry] = []
    declaration_accepted: bool = False
    status: str
    progress_percent: int
    required_document_types: List[str] = []
    submitted_at: Optional[datetime] = None
    reviewed_by: Optional[uuid.UUID] = None
    reviewed_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    admin_notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ApplicationDetailResponse(ApplicationResponse):
    """Application with its owner and documents"""
    profile: Optional[ProfileSummary] = None
    documents: List[DocumentResponse] = []


class ApplicationListItem(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    name: Optional[str] = None
    email: Optional[str] = None
    post_applied_for: Optional[str] = None
    status: str
    progress_percent: int
    submitted_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class ApplicationListResponse(BaseModel):
    items: List[ApplicationListItem]
    pagination: PaginationMeta


class AdminDecisionRequest(BaseModel):
    """Body for approve, under-review and request-documents actions"""
    notes: Optional[str] = None


class ApplicationRejectRequest(BaseModel):
    reason: str
    notes: Optional[str] = None

    @field_validator('reason')
    @classmethod
    def reason_must_not_be_empty(cls, v):
        if not v or not v.strip():
            raise ValueError('A rejection reason is required')
        return v.strip()


class TimelineEntry(BaseModel):
    id: uuid.UUID
    activity_type: str
    description: str
    performed_by: Optional[uuid.UUID] = None
    performer_name: Optional[str] = None
    performer_role: Optional[str] = None
    metadata: Dict[str, Any] = {}
    created_at: Optional[datetime] = None


class AdminActionResponse(BaseModel):
    id: uuid.UUID
    admin_id: uuid.UUID
    application_id: Optional[uuid.UUID] = None
    action: str
    details: Dict[str, Any] = {}
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
