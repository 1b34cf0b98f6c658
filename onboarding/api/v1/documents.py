from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import uuid

from onboarding.core.database import get_db
from onboarding.api.deps import get_current_profile, get_candidate
from onboarding.models.profile import Profile
from onboarding.schemas.document import (
    DocumentResponse,
    DocumentUploadResponse,
    DocumentDeleteResponse,
    SignedUrlResponse,
)
from onboarding.services.document_service import DocumentService
from onboarding.services.storage_service import storage_service

router = APIRouter()


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: uuid.UUID,
    current_profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db)
):
    return await DocumentService().get_document(db, document_id, current_profile)


@router.put("/{document_id}", response_model=DocumentUploadResponse)
async def replace_document(
    document_id: uuid.UUID,
    file: UploadFile = File(..., description="PDF, JPEG or PNG, max 5MB"),
    current_profile: Profile = Depends(get_candidate),
    db: AsyncSession = Depends(get_db)
):
    """Replace the file of a pending or rejected document"""
    service = DocumentService()
    document = await service.get_document(db, document_id, current_profile)
    replacement, progress = await service.replace_document(db, document, current_profile, file)
    await db.commit()
    await storage_service.remove_pending(db)
    await db.refresh(replacement)
    return {
        "document": replacement,
        "progress_percent": progress,
        "message": "Document replaced successfully"
    }


@router.delete("/{document_id}", response_model=DocumentDeleteResponse)
async def delete_document(
    document_id: uuid.UUID,
    current_profile: Profile = Depends(get_candidate),
    db: AsyncSession = Depends(get_db)
):
    service = DocumentService()
    document = await service.get_document(db, document_id, current_profile)
    progress = await service.delete_document(db, document, current_profile)
    await db.commit()
    await storage_service.remove_pending(db)
    return {"progress_percent": progress}


@router.get("/{document_id}/signed-url", response_model=SignedUrlResponse)
async def get_signed_url(
    document_id: uuid.UUID,
    expires_in: Optional[int] = Query(None, ge=60, le=7 * 24 * 3600, description="Lifetime in seconds"),
    current_profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db)
):
    """Time-limited download link for the owner or an admin"""
    service = DocumentService()
    document = await service.get_document(db, document_id, current_profile)
    url, lifetime, expires_at = service.create_signed_url(document, expires_in)
    return {"url": url, "expires_in": lifetime, "expires_at": expires_at}
