"""
Current-profile endpoints: read, edit and profile photo.
"""
from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from onboarding.core.database import get_db
from onboarding.api.deps import get_current_profile
from onboarding.models.profile import Profile
from onboarding.schemas.profile import ProfileResponse, ProfileUpdate, AvatarUploadResponse, AvatarDeleteResponse
from onboarding.services.profile_service import ProfileService, profile_to_response
from onboarding.services.storage_service import storage_service

router = APIRouter()


@router.get("/me", response_model=ProfileResponse)
async def get_me(current_profile: Profile = Depends(get_current_profile)):
    return profile_to_response(current_profile)


@router.patch("/me", response_model=ProfileResponse)
async def update_me(
    payload: ProfileUpdate,
    current_profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db)
):
    """Update display fields of the current profile"""
    profile = await ProfileService().update_profile(
        db, current_profile, payload.model_dump(exclude_unset=True, exclude_none=True)
    )
    await db.commit()
    await db.refresh(profile)
    return profile_to_response(profile)


@router.post("/me/photo", response_model=AvatarUploadResponse)
async def upload_photo(
    file: UploadFile = File(..., description="Profile photo (JPEG, PNG or WebP, max 2MB)"),
    current_profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db)
):
    """
    Upload or replace the profile photo.

    The image is cropped to a square, resized to 512x512 and stored as WebP.
    """
    profile = await ProfileService().upload_photo(db, current_profile, file)
    await db.commit()
    await storage_service.remove_pending(db)
    await db.refresh(profile)
    return {"avatar_url": profile_to_response(profile)["avatar_url"]}


@router.delete("/me/photo", response_model=AvatarDeleteResponse)
async def delete_photo(
    current_profile: Profile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db)
):
    await ProfileService().delete_photo(db, current_profile)
    await db.commit()
    await storage_service.remove_pending(db)
    return {}
