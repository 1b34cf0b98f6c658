"""
Serves stored objects. Private buckets require a signed token bound to the
exact bucket and path; public buckets are readable without one.
"""
from fastapi import APIRouter, HTTPException, Query, status
from fastapi.responses import FileResponse
from typing import Optional

from onboarding.core.security import verify_storage_token
from onboarding.services.storage_service import storage_service

router = APIRouter()


@router.get("/{bucket}/{path:path}")
async def get_object(
    bucket: str,
    path: str,
    token: Optional[str] = Query(None, description="Signed URL token")
):
    policy = storage_service.get_policy(bucket)
    if not policy.public and (token is None or not verify_storage_token(token, bucket, path)):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Invalid or expired link"
        )

    file_path = storage_service.resolve(bucket, path)
    if not file_path.is_file():
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="File not found"
        )
    return FileResponse(file_path, filename=file_path.name)
