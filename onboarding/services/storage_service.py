"""
Local object storage organised in named buckets.

Objects live under ``{STORAGE_ROOT}/{bucket}/{path}``. Each bucket carries its
own size and MIME limits which are enforced here, independently of the
upload validators in front of it. Private objects are handed out through
signed URLs served by ``/api/v1/storage``.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import FrozenSet, Iterable, Optional, Tuple
import logging
import re
import uuid

import aiofiles
from fastapi import HTTPException, status

from onboarding.core.config import settings
from onboarding.core.security import create_storage_token

logger = logging.getLogger(__name__)

DOCUMENTS_BUCKET = "candidate-documents"
PROFILE_PHOTOS_BUCKET = "profile-photos"

# Session.info key holding (bucket, path) pairs to delete after commit
PENDING_REMOVALS_KEY = "pending_storage_removals"


@dataclass(frozen=True)
class BucketPolicy:
    max_size: int
    allowed_mime_types: FrozenSet[str]
    public: bool = False


BUCKETS = {
    DOCUMENTS_BUCKET: BucketPolicy(
        max_size=5 * 1024 * 1024,
        allowed_mime_types=frozenset({"application/pdf", "image/jpeg", "image/png"}),
    ),
    PROFILE_PHOTOS_BUCKET: BucketPolicy(
        max_size=2 * 1024 * 1024,
        allowed_mime_types=frozenset({"image/jpeg", "image/png", "image/webp"}),
        public=True,
    ),
}

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def sanitize_filename(filename: str) -> str:
    """
    Replace anything outside ``[A-Za-z0-9._-]`` with an underscore.

    Example:
        >>> sanitize_filename("my pan card (1).pdf")
        'my_pan_card__1_.pdf'
    """
    cleaned = _UNSAFE_CHARS.sub("_", filename or "").strip("._")
    return cleaned or "file"


def build_document_path(
    user_id: uuid.UUID,
    application_id: uuid.UUID,
    document_type: str,
    filename: str,
    now: Optional[datetime] = None
) -> str:
    """
    Storage path for an onboarding document.

    Format: ``{user_id}/{application_id}/{document_type}/{timestamp}_{sanitized}``
    with the timestamp in milliseconds since the epoch.
    """
    moment = now or datetime.now(timezone.utc)
    timestamp = int(moment.timestamp() * 1000)
    return f"{user_id}/{application_id}/{document_type}/{timestamp}_{sanitize_filename(filename)}"


def build_profile_photo_path(user_id: uuid.UUID) -> str:
    """Storage path for a processed profile photo: ``{user_id}/{filename}``."""
    return f"{user_id}/{uuid.uuid4().hex}.webp"


class StorageService:
    """Service for storing, reading and removing bucket objects."""

    @property
    def base_dir(self) -> Path:
        return Path(settings.storage_root)

    def get_policy(self, bucket: str) -> BucketPolicy:
        policy = BUCKETS.get(bucket)
        if policy is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Unknown storage bucket: {bucket}"
            )
        return policy

    def resolve(self, bucket: str, path: str) -> Path:
        """
        Absolute file location of an object.

        Raises:
            HTTPException 400: If the path escapes the bucket directory
        """
        self.get_policy(bucket)
        bucket_dir = (self.base_dir / bucket).resolve()
        target = (bucket_dir / path).resolve()
        if not path or ".." in Path(path).parts or bucket_dir not in target.parents:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid storage path"
            )
        return target

    async def upload(
        self,
        bucket: str,
        path: str,
        content: bytes,
        content_type: str
    ) -> str:
        """
        Write an object, enforcing the bucket's limits.

        Args:
            bucket: Bucket name
            path: Object path inside the bucket
            content: File bytes
            content_type: MIME type of the content

        Returns:
            The stored path

        Raises:
            HTTPException 400: If the object breaks the bucket's size or type limits
            HTTPException 409: If an object already exists at that path
        """
        policy = self.get_policy(bucket)
        if len(content) > policy.max_size:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"File too large. Maximum size: {policy.max_size / (1024 * 1024):g}MB"
            )
        if content_type not in policy.allowed_mime_types:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"File type {content_type} is not allowed in bucket {bucket}"
            )

        file_path = self.resolve(bucket, path)
        if file_path.exists():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="An object already exists at this path"
            )
        file_path.parent.mkdir(parents=True, exist_ok=True)

        async with aiofiles.open(file_path, 'wb') as f:
            await f.write(content)

        logger.info(f"Stored {len(content)} bytes at {bucket}/{path}")
        return path

    async def download(self, bucket: str, path: str) -> bytes:
        """
        Read an object.

        Raises:
            HTTPException 404: If the object does not exist
        """
        file_path = self.resolve(bucket, path)
        if not file_path.is_file():
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="File not found"
            )
        async with aiofiles.open(file_path, 'rb') as f:
            return await f.read()

    async def remove(self, bucket: str, paths: Iterable[str]) -> int:
        """
        Delete objects. Missing objects are skipped.

        Returns:
            Number of files actually removed
        """
        removed = 0
        for path in paths:
            if not path:
                continue
            file_path = self.resolve(bucket, path)
            try:
                if file_path.exists():
                    file_path.unlink()
                    removed += 1
            except OSError as e:
                logger.warning(f"Error deleting {bucket}/{path}: {e}")
        return removed

    def remove_after_commit(self, db, bucket: str, paths: Iterable[str]) -> None:
        """
        Queue objects for removal once the session's transaction commits.

        The queue lives in ``db.info``; callers run ``remove_pending`` right
        after ``db.commit()``. A rolled back request never removes its files.
        """
        queue = db.info.setdefault(PENDING_REMOVALS_KEY, [])
        queue.extend((bucket, path) for path in paths if path)

    async def remove_pending(self, db) -> int:
        """
        Remove every object queued on the session.

        Returns:
            Number of files actually removed
        """
        removed = 0
        for bucket, path in db.info.pop(PENDING_REMOVALS_KEY, []):
            removed += await self.remove(bucket, [path])
        return removed

    def exists(self, bucket: str, path: str) -> bool:
        return self.resolve(bucket, path).is_file()

    def public_url(self, bucket: str, path: str) -> str:
        return f"/api/v1/storage/{bucket}/{path}"

    def create_signed_url(
        self,
        bucket: str,
        path: str,
        expires_in: Optional[int] = None
    ) -> Tuple[str, datetime]:
        """
        Time-limited URL for a private object.

        Args:
            bucket: Bucket name
            path: Object path
            expires_in: Lifetime in seconds (defaults to SIGNED_URL_EXPIRES)

        Returns:
            Tuple of (url, expiry time)
        """
        self.get_policy(bucket)
        lifetime = expires_in if expires_in is not None else settings.signed_url_expires
        token, expires_at = create_storage_token(bucket, path, lifetime)
        return f"{self.public_url(bucket, path)}?token={token}", expires_at


# Singleton instance
storage_service = StorageService()
