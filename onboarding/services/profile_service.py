"""
Profiles: registration, credential checks, profile edits and photos.
"""
from typing import Optional
from uuid import UUID
from fastapi import HTTPException, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from onboarding.core.security import get_password_hash, verify_password
from onboarding.models.profile import Profile, ProfileRole
from onboarding.repositories.profile_repository import ProfileRepository
from onboarding.services.image_service import image_service
from onboarding.services.storage_service import (
    PROFILE_PHOTOS_BUCKET,
    build_profile_photo_path,
    storage_service,
)

logger = logging.getLogger(__name__)


def profile_to_response(profile: Profile) -> dict:
    """Profile fields plus the public photo URL."""
    return {
        "id": profile.id,
        "email": profile.email,
        "full_name": profile.full_name,
        "role": profile.role,
        "avatar_url": (
            storage_service.public_url(PROFILE_PHOTOS_BUCKET, profile.avatar_path)
            if profile.avatar_path else None
        ),
        "created_at": profile.created_at,
        "updated_at": profile.updated_at,
    }


class ProfileService:
    """Service for profile and credential operations."""

    def __init__(self, profile_repo: Optional[ProfileRepository] = None):
        self.profile_repo = profile_repo or ProfileRepository()

    async def register(self, db: AsyncSession, email: str, password: str, full_name: str) -> Profile:
        """
        Create a candidate profile.

        Registration never grants admin; promotion happens out of band.

        Raises:
            HTTPException 400: If the email is already registered
        """
        existing = await self.profile_repo.get_by_email(db, email)
        if existing is not None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already registered"
            )

        profile = await self.profile_repo.create(db, {
            "email": email.strip().lower(),
            "password_hash": get_password_hash(password),
            "full_name": full_name,
            "role": ProfileRole.CANDIDATE,
        })
        logger.info(f"Registered candidate {profile.id}")
        return profile

    async def authenticate(self, db: AsyncSession, email: str, password: str) -> Profile:
        """
        Check credentials.

        Raises:
            HTTPException 401: On unknown email or wrong password
        """
        profile = await self.profile_repo.get_by_email(db, email)
        if profile is None or not verify_password(password, profile.password_hash):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Incorrect email or password",
                headers={"WWW-Authenticate": "Bearer"},
            )
        return profile

    async def update_profile(self, db: AsyncSession, profile: Profile, changes: dict) -> Profile:
        if not changes:
            return profile
        return await self.profile_repo.update(db, profile, changes)

    async def upload_photo(self, db: AsyncSession, profile: Profile, file: UploadFile) -> Profile:
        """
        Validate, normalise and store a profile photo, replacing the old one.

        Raises:
            HTTPException 400: If the image fails validation
        """
        content = await image_service.validate_image(file)
        processed = image_service.process_profile_photo(content)

        path = build_profile_photo_path(profile.id)
        await storage_service.upload(PROFILE_PHOTOS_BUCKET, path, processed, "image/webp")

        old_path = profile.avatar_path
        try:
            profile = await self.profile_repo.update(db, profile, {"avatar_path": path})
        except Exception:
            await storage_service.remove(PROFILE_PHOTOS_BUCKET, [path])
            raise

        if old_path:
            storage_service.remove_after_commit(db, PROFILE_PHOTOS_BUCKET, [old_path])

        logger.info(f"Profile photo updated for {profile.id}")
        return profile

    async def delete_photo(self, db: AsyncSession, profile: Profile) -> Profile:
        """
        Remove the profile photo.

        Raises:
            HTTPException 404: If the profile has no photo
        """
        if not profile.avatar_path:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="No profile photo to delete"
            )
        old_path = profile.avatar_path
        profile = await self.profile_repo.update(db, profile, {"avatar_path": None})
        storage_service.remove_after_commit(db, PROFILE_PHOTOS_BUCKET, [old_path])
        return profile

    async def set_role(self, db: AsyncSession, email: str, role: ProfileRole) -> Profile:
        """
        Change the role of an existing profile.

        Raises:
            HTTPException 404: If no profile has that email
        """
        profile = await self.profile_repo.get_by_email(db, email)
        if profile is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"No profile with email {email}"
            )
        profile = await self.profile_repo.update(db, profile, {"role": role})
        logger.info(f"Profile {profile.id} role set to {role.value}")
        return profile

    async def get_profile(self, db: AsyncSession, profile_id: UUID) -> Optional[Profile]:
        return await self.profile_repo.get(db, profile_id)
