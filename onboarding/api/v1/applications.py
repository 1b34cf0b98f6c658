"""
Candidate application endpoints: draft, edit, submit, read, timeline and
document uploads.
"""
from fastapi import APIRouter, Body, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
import uuid

from onboarding.core.database import get_db
from onboarding.api.deps import get_current_profile, get_candidate
from onboarding.models.document import DocumentType
from onboarding.models.profile import Profile
from onboarding.schemas.application import (
    ApplicationCreate,
    ApplicationUpdate,
    ApplicationSubmit,
    ApplicationResponse,
    ApplicationDetailResponse,
    TimelineEntry,
)
from onboarding.schemas.document import DocumentResponse, DocumentUploadResponse
from onboarding.services.activity_service import ActivityService
from onboarding.services.application_service import ApplicationService
from onboarding.services.document_service import DocumentService

router = APIRouter()


@router.post("", response_model=ApplicationResponse, status_code=status.HTTP_201_CREATED)
async def create_application(
    payload: Optional[ApplicationCreate] = Body(None),
    current_profile: Profile = Depends(get_candidate),
    db: AsyncSession = Depends(get_db)
):
    """Start a new draft application"""
    service = ApplicationService()
    application = await service.create_application(
        db, current_profile, payload.changes() if payload else {}
    )
    await db.commit()
    await db.refresh(application)
    return application


@router.get("", response_model=List[ApplicationResponse])
async def list_my_applications(
    current_profile: Profile = Depends(get_candidate),
    db: AsyncSession = Depends(get_db)
):
    return await ApplicationService().list_user_applications(db, current_profile.id)


@router.get("/current", response_model=ApplicationResponse)
async def get_current_application(
    current_profile: Profile = Depends(get_candidate),
    db: AsyncSession = Depends(get_db)
):
    """The candidate's most recent application"""
    application = await ApplicationService().get_current_application(db, current_profile.id)
    if application is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No application found"
        )
    return application


@router.get("/{application_id}", response_model=ApplicationDetailResponse)
async def get_application(
    application_id: uuid.UUID,
    current_profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db)
):
    """Application with documents; owner or admin only"""
    service = ApplicationService()
    application = await service.get_application(db, application_id, current_profile)
    return await service.get_application_detail(db, application)


@router.patch("/{application_id}", response_model=ApplicationResponse)
async def update_application(
    application_id: uuid.UUID,
    payload: ApplicationUpdate,
    current_profile: Profile = Depends(get_candidate),
    db: AsyncSession = Depends(get_db)
):
    """
    Save applicant fields.

    Drafts accept every field; submitted applications only accept
    mobile_no and communication_address.
    """
    service = ApplicationService()
    application = await service.get_application(db, application_id, current_profile)
    application = await service.update_application(db, application, payload.changes(), current_profile)
    await db.commit()
    await db.refresh(application)
    return application


@router.post("/{application_id}/submit", response_model=ApplicationResponse)
async def submit_application(
    application_id: uuid.UUID,
    payload: Optional[ApplicationSubmit] = Body(None),
    current_profile: Profile = Depends(get_candidate),
    db: AsyncSession = Depends(get_db)
):
    """Submit a draft, optionally saving final edits in the same transaction"""
    service = ApplicationService()
    application = await service.get_application(db, application_id, current_profile)
    application = await service.submit_application(
        db, application, current_profile, payload.changes() if payload else None
    )
    await db.commit()
    await db.refresh(application)
    return application


@router.get("/{application_id}/timeline", response_model=List[TimelineEntry])
async def get_application_timeline(
    application_id: uuid.UUID,
    current_profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db)
):
    """Activity for an application, newest first"""
    application = await ApplicationService().get_application(db, application_id, current_profile)
    return await ActivityService().get_timeline(db, application)


@router.get("/{application_id}/documents", response_model=List[DocumentResponse])
async def list_application_documents(
    application_id: uuid.UUID,
    current_profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db)
):
    application = await ApplicationService().get_application(db, application_id, current_profile)
    return await DocumentService().list_documents(db, application, current_profile)


@router.post(
    "/{application_id}/documents",
    response_model=DocumentUploadResponse,
    status_code=status.HTTP_201_CREATED
)
async def upload_document(
    application_id: uuid.UUID,
    document_type: DocumentType = Form(...),
    file: UploadFile = File(..., description="PDF, JPEG or PNG, max 5MB"),
    current_profile: Profile = Depends(get_candidate),
    db: AsyncSession = Depends(get_db)
):
    """
    Upload one document to an application.

    The document starts as pending. A second upload of a type that already
    has a pending or verified document is refused; use replace instead.
    """
    application = await ApplicationService().get_application(db, application_id, current_profile)
    document, progress = await DocumentService().upload_document(
        db, application, current_profile, document_type, file
    )
    await db.commit()
    await db.refresh(document)
    return {"document": document, "progress_percent": progress}
