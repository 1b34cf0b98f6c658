from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
import uuid

from onboarding.core.database import get_db
from onboarding.api.deps import get_admin
from onboarding.models.profile import Profile
from onboarding.schemas.document import (
    BulkVerifyRequest,
    BulkVerifyResponse,
    DocumentRejectRequest,
    DocumentReviewResponse,
)
from onboarding.services.document_service import DocumentService
from onboarding.services.verification_service import VerificationService

router = APIRouter()


@router.post("/verify", response_model=BulkVerifyResponse)
async def verify_documents(
    payload: BulkVerifyRequest,
    current_profile: Profile = Depends(get_admin),
    db: AsyncSession = Depends(get_db)
):
    """Verify several documents; fails without changes if any id is unknown"""
    verified, progress = await VerificationService().verify_documents(
        db, payload.document_ids, current_profile
    )
    await db.commit()
    return {"verified": verified, "progress_by_application": progress}


@router.post("/{document_id}/verify", response_model=DocumentReviewResponse)
async def verify_document(
    document_id: uuid.UUID,
    current_profile: Profile = Depends(get_admin),
    db: AsyncSession = Depends(get_db)
):
    document = await DocumentService().get_document(db, document_id, current_profile)
    document, progress, application_status = await VerificationService().verify_document(
        db, document, current_profile
    )
    await db.commit()
    await db.refresh(document)
    return {
        "document": document,
        "progress_percent": progress,
        "application_status": application_status
    }


@router.post("/{document_id}/reject", response_model=DocumentReviewResponse)
async def reject_document(
    document_id: uuid.UUID,
    payload: DocumentRejectRequest,
    current_profile: Profile = Depends(get_admin),
    db: AsyncSession = Depends(get_db)
):
    """Reject a document; the candidate sees the reason and may replace it"""
    document = await DocumentService().get_document(db, document_id, current_profile)
    document, progress, application_status = await VerificationService().reject_document(
        db, document, current_profile, payload.reason
    )
    await db.commit()
    await db.refresh(document)
    return {
        "document": document,
        "progress_percent": progress,
        "application_status": application_status
    }
