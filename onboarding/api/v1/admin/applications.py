"""
Admin application endpoints: list, export, detail and status decisions.
"""
from fastapi import APIRouter, Body, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import uuid

from onboarding.core.database import get_db
from onboarding.api.deps import get_admin
from onboarding.models.profile import Profile
from onboarding.schemas.application import (
    AdminDecisionRequest,
    ApplicationDetailResponse,
    ApplicationListResponse,
    ApplicationRejectRequest,
    ApplicationResponse,
)
from onboarding.services.application_service import ApplicationService
from onboarding.services.listing_service import ListingService
from onboarding.services.storage_service import storage_service
from onboarding.utils.application_filters import SORT_NEWEST

router = APIRouter()

SORT_PATTERN = "^(newest|oldest|name)$"


@router.get("", response_model=ApplicationListResponse)
async def list_applications(
    search: Optional[str] = Query(None, description="Matches name, email or post"),
    status_filter: Optional[str] = Query("all", alias="status", description="Status, 'all' or 'approved'"),
    sort: str = Query(SORT_NEWEST, pattern=SORT_PATTERN),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=100),
    current_profile: Profile = Depends(get_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    Filtered, sorted and paginated applications.

    Drafts only appear when status=draft.
    """
    return await ListingService().list_applications(
        db, search=search, status_filter=status_filter, sort_by=sort, page=page, limit=limit
    )


@router.get("/export")
async def export_applications(
    search: Optional[str] = Query(None),
    status_filter: Optional[str] = Query("all", alias="status"),
    sort: str = Query(SORT_NEWEST, pattern=SORT_PATTERN),
    current_profile: Profile = Depends(get_admin),
    db: AsyncSession = Depends(get_db)
):
    """CSV of the filtered list, every page"""
    content = await ListingService().export_csv(
        db, search=search, status_filter=status_filter, sort_by=sort
    )
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="applications.csv"'}
    )


@router.get("/{application_id}", response_model=ApplicationDetailResponse)
async def get_application(
    application_id: uuid.UUID,
    current_profile: Profile = Depends(get_admin),
    db: AsyncSession = Depends(get_db)
):
    service = ApplicationService()
    application = await service.get_application(db, application_id, current_profile)
    return await service.get_application_detail(db, application)


@router.post("/{application_id}/under-review", response_model=ApplicationResponse)
async def move_to_under_review(
    application_id: uuid.UUID,
    payload: Optional[AdminDecisionRequest] = Body(None),
    current_profile: Profile = Depends(get_admin),
    db: AsyncSession = Depends(get_db)
):
    service = ApplicationService()
    application = await service.get_application(db, application_id, current_profile)
    application = await service.move_to_under_review(
        db, application, current_profile, payload.notes if payload else None
    )
    await db.commit()
    await db.refresh(application)
    return application


@router.post("/{application_id}/request-documents", response_model=ApplicationResponse)
async def request_documents(
    application_id: uuid.UUID,
    payload: Optional[AdminDecisionRequest] = Body(None),
    current_profile: Profile = Depends(get_admin),
    db: AsyncSession = Depends(get_db)
):
    service = ApplicationService()
    application = await service.get_application(db, application_id, current_profile)
    application = await service.request_documents(
        db, application, current_profile, payload.notes if payload else None
    )
    await db.commit()
    await db.refresh(application)
    return application


@router.post("/{application_id}/approve", response_model=ApplicationResponse)
async def approve_application(
    application_id: uuid.UUID,
    payload: Optional[AdminDecisionRequest] = Body(None),
    current_profile: Profile = Depends(get_admin),
    db: AsyncSession = Depends(get_db)
):
    """Accept an application awaiting a decision"""
    service = ApplicationService()
    application = await service.get_application(db, application_id, current_profile)
    application = await service.approve_application(
        db, application, current_profile, payload.notes if payload else None
    )
    await db.commit()
    await db.refresh(application)
    return application


@router.post("/{application_id}/reject", response_model=ApplicationResponse)
async def reject_application(
    application_id: uuid.UUID,
    payload: ApplicationRejectRequest,
    current_profile: Profile = Depends(get_admin),
    db: AsyncSession = Depends(get_db)
):
    """Reject an application; a reason is mandatory"""
    service = ApplicationService()
    application = await service.get_application(db, application_id, current_profile)
    application = await service.reject_application(
        db, application, current_profile, payload.reason, payload.notes
    )
    await db.commit()
    await db.refresh(application)
    return application


@router.delete("/{application_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_application(
    application_id: uuid.UUID,
    current_profile: Profile = Depends(get_admin),
    db: AsyncSession = Depends(get_db)
):
    """Delete an application with its documents and files"""
    service = ApplicationService()
    application = await service.get_application(db, application_id, current_profile)
    await service.delete_application(db, application, current_profile)
    await db.commit()
    await storage_service.remove_pending(db)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
