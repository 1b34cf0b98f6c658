"""
Unit tests for bucket storage: paths, limits and signed URLs.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from fastapi import HTTPException

from onboarding.services.storage_service import (
    DOCUMENTS_BUCKET,
    PROFILE_PHOTOS_BUCKET,
    StorageService,
    build_document_path,
    sanitize_filename,
)

PDF_BYTES = b"%PDF-1.4\n1 0 obj\n<<>>\nendobj\ntrailer\n<<>>\n%%EOF\n"


class TestPaths:
    def test_sanitize_filename(self):
        assert sanitize_filename("my pan card (1).pdf") == "my_pan_card__1_.pdf"
        assert sanitize_filename("../../etc/passwd") == "etc_passwd"
        assert sanitize_filename("") == "file"

    def test_document_path_layout(self):
        user_id, application_id = uuid.uuid4(), uuid.uuid4()
        now = datetime(2026, 10, 1, tzinfo=timezone.utc)
        path = build_document_path(user_id, application_id, "pan_card", "PAN card.pdf", now)
        assert path == f"{user_id}/{application_id}/pan_card/{int(now.timestamp() * 1000)}_PAN_card.pdf"


class TestStorageService:
    async def test_upload_download_remove(self, storage_root):
        service = StorageService()
        await service.upload(DOCUMENTS_BUCKET, "u/a/pan_card/1_pan.pdf", PDF_BYTES, "application/pdf")

        assert (storage_root / DOCUMENTS_BUCKET / "u/a/pan_card/1_pan.pdf").is_file()
        assert await service.download(DOCUMENTS_BUCKET, "u/a/pan_card/1_pan.pdf") == PDF_BYTES
        assert await service.remove(DOCUMENTS_BUCKET, ["u/a/pan_card/1_pan.pdf", "missing.pdf"]) == 1
        assert not service.exists(DOCUMENTS_BUCKET, "u/a/pan_card/1_pan.pdf")

    async def test_queued_removal_waits_for_remove_pending(self, storage_root):
        service = StorageService()
        session = SimpleNamespace(info={})
        await service.upload(DOCUMENTS_BUCKET, "q/1.pdf", PDF_BYTES, "application/pdf")

        service.remove_after_commit(session, DOCUMENTS_BUCKET, ["q/1.pdf", None])
        assert (storage_root / DOCUMENTS_BUCKET / "q/1.pdf").is_file()

        assert await service.remove_pending(session) == 1
        assert not service.exists(DOCUMENTS_BUCKET, "q/1.pdf")
        assert await service.remove_pending(session) == 0

    async def test_existing_object_is_not_overwritten(self):
        service = StorageService()
        await service.upload(DOCUMENTS_BUCKET, "x/1.pdf", PDF_BYTES, "application/pdf")
        with pytest.raises(HTTPException) as exc_info:
            await service.upload(DOCUMENTS_BUCKET, "x/1.pdf", PDF_BYTES, "application/pdf")
        assert exc_info.value.status_code == 409

    async def test_bucket_size_limit(self):
        service = StorageService()
        too_big = b"0" * (2 * 1024 * 1024 + 1)
        with pytest.raises(HTTPException) as exc_info:
            await service.upload(PROFILE_PHOTOS_BUCKET, "u/p.webp", too_big, "image/webp")
        assert exc_info.value.status_code == 400

    async def test_bucket_mime_limit(self):
        service = StorageService()
        with pytest.raises(HTTPException) as exc_info:
            await service.upload(PROFILE_PHOTOS_BUCKET, "u/p.pdf", PDF_BYTES, "application/pdf")
        assert exc_info.value.status_code == 400

    async def test_download_missing_is_404(self):
        with pytest.raises(HTTPException) as exc_info:
            await StorageService().download(DOCUMENTS_BUCKET, "nope.pdf")
        assert exc_info.value.status_code == 404

    def test_path_traversal_is_refused(self):
        with pytest.raises(HTTPException) as exc_info:
            StorageService().resolve(DOCUMENTS_BUCKET, "../profile-photos/x.webp")
        assert exc_info.value.status_code == 400

    def test_unknown_bucket(self):
        with pytest.raises(HTTPException) as exc_info:
            StorageService().get_policy("backups")
        assert exc_info.value.status_code == 404

    def test_signed_url(self):
        url, expires_at = StorageService().create_signed_url(DOCUMENTS_BUCKET, "u/a/x.pdf", 120)
        assert url.startswith(f"/api/v1/storage/{DOCUMENTS_BUCKET}/u/a/x.pdf?token=")
        assert expires_at > datetime.now(timezone.utc)
