"""
Candidate-side document operations: upload, replace, delete, list and
signed links.

Every change ends with a progress recompute so ``progress_percent`` never
drifts from the documents on file.
"""
from typing import List, Optional, Tuple
from uuid import UUID
from fastapi import HTTPException, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import datetime
import logging

from onboarding.core.config import settings
from onboarding.models.activity_log import ActivityType
from onboarding.models.application import Application
from onboarding.models.document import DOCUMENT_TYPE_LABELS, Document, DocumentType, VerificationStatus
from onboarding.models.profile import Profile
from onboarding.repositories.application_repository import ApplicationRepository
from onboarding.repositories.document_repository import DocumentRepository
from onboarding.services.activity_service import ActivityService
from onboarding.services.application_service import ensure_can_access
from onboarding.services.document_validation_service import document_validation_service
from onboarding.services.progress_service import ProgressService
from onboarding.services.storage_service import DOCUMENTS_BUCKET, build_document_path, storage_service
from onboarding.utils.status import UPLOAD_LOCKED_STATUSES
from onboarding.utils.timeutils import utcnow

logger = logging.getLogger(__name__)


class DocumentService:
    """Service for managing an application's uploaded documents."""

    def __init__(
        self,
        document_repo: Optional[DocumentRepository] = None,
        application_repo: Optional[ApplicationRepository] = None,
        activity_service: Optional[ActivityService] = None,
        progress_service: Optional[ProgressService] = None
    ):
        self.document_repo = document_repo or DocumentRepository()
        self.application_repo = application_repo or ApplicationRepository()
        self.activity_service = activity_service or ActivityService()
        self.progress_service = progress_service or ProgressService()

    def _ensure_owner(self, application: Application, actor: Profile) -> None:
        if application.user_id != actor.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access denied. You can only manage documents on your own application"
            )

    def _ensure_uploads_open(self, application: Application) -> None:
        if application.status in UPLOAD_LOCKED_STATUSES:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Documents cannot be changed on an application that is {application.status}"
            )

    def _ensure_not_verified(self, document: Document) -> None:
        if document.status == VerificationStatus.VERIFIED.value:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Verified documents cannot be changed"
            )

    async def _store_and_insert(
        self,
        db: AsyncSession,
        application: Application,
        document_type: str,
        file: UploadFile
    ) -> Document:
        """Validate, write the file and insert its row; the file is removed if the insert fails."""
        content, mime_type = await document_validation_service.validate_document(file)

        path = build_document_path(application.user_id, application.id, document_type, file.filename)
        await storage_service.upload(DOCUMENTS_BUCKET, path, content, mime_type)

        try:
            return await self.document_repo.create(db, {
                "application_id": application.id,
                "user_id": application.user_id,
                "document_type": document_type,
                "file_name": file.filename,
                "file_type": mime_type,
                "file_size": len(content),
                "storage_path": path,
                "status": VerificationStatus.PENDING.value,
                "created_at": utcnow(),
            })
        except Exception:
            await storage_service.remove(DOCUMENTS_BUCKET, [path])
            raise

    async def get_document(self, db: AsyncSession, document_id: UUID, actor: Profile) -> Document:
        """
        Load a document the actor may see.

        Raises:
            HTTPException 404: If the document does not exist
            HTTPException 403: If the actor is neither owner nor admin
        """
        document = await self.document_repo.get(db, document_id)
        if document is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Document not found"
            )
        if not actor.is_admin and document.user_id != actor.id:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access denied. You can only access your own documents"
            )
        return document

    async def list_documents(
        self,
        db: AsyncSession,
        application: Application,
        actor: Profile
    ) -> List[Document]:
        ensure_can_access(application, actor)
        try:
            return await self.document_repo.list_by_application(db, application.id)
        except Exception as e:
            logger.error(f"Error listing documents for application {application.id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to retrieve documents"
            )

    async def upload_document(
        self,
        db: AsyncSession,
        application: Application,
        candidate: Profile,
        document_type: DocumentType,
        file: UploadFile
    ) -> Tuple[Document, int]:
        """
        Upload a document for one of the candidate's applications.

        Args:
            db: Database session
            application: Target application
            candidate: Uploading profile (must own the application)
            document_type: Which document this is
            file: Uploaded file

        Returns:
            Tuple of (new pending document, recomputed progress)

        Raises:
            HTTPException 400: If the file fails validation
            HTTPException 403: If the candidate does not own the application
            HTTPException 409: If the application is closed or the type already has a live document
        """
        try:
            self._ensure_owner(application, candidate)
            self._ensure_uploads_open(application)

            existing = await self.document_repo.get_active_by_type(db, application.id, document_type.value)
            if existing is not None:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=(
                        f"A {DOCUMENT_TYPE_LABELS[document_type.value]} is already uploaded. "
                        "Replace it instead."
                    )
                )

            document = await self._store_and_insert(db, application, document_type.value, file)

            await self.activity_service.log_activity(
                db,
                application.id,
                ActivityType.DOCUMENT_UPLOADED,
                f"{DOCUMENT_TYPE_LABELS[document_type.value]} uploaded",
                performed_by=candidate.id,
                metadata={"document_id": str(document.id), "document_type": document_type.value},
            )

            progress = await self.progress_service.recompute_progress(db, application.id, candidate.id)
            logger.info(f"Document {document.id} ({document_type.value}) uploaded to application {application.id}")
            return document, progress

        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error uploading document to application {application.id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to upload document"
            )

    async def replace_document(
        self,
        db: AsyncSession,
        document: Document,
        candidate: Profile,
        file: UploadFile
    ) -> Tuple[Document, int]:
        """
        Swap the file of a document that has not been verified.

        The old row is removed and a fresh pending row takes its place. The
        old file is queued for removal after commit.

        Raises:
            HTTPException 409: If the document is verified or the application is closed
        """
        try:
            application = await self.application_repo.get(db, document.application_id)
            if application is None:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Application not found"
                )
            self._ensure_owner(application, candidate)
            self._ensure_uploads_open(application)
            self._ensure_not_verified(document)

            old_id = document.id
            old_path = document.storage_path
            document_type = document.document_type

            replacement = await self._store_and_insert(db, application, document_type, file)
            await self.document_repo.delete(db, old_id)
            storage_service.remove_after_commit(db, DOCUMENTS_BUCKET, [old_path])

            await self.activity_service.log_activity(
                db,
                application.id,
                ActivityType.DOCUMENT_REPLACED,
                f"{DOCUMENT_TYPE_LABELS.get(document_type, document_type)} replaced",
                performed_by=candidate.id,
                metadata={
                    "document_id": str(replacement.id),
                    "replaced_document_id": str(old_id),
                    "document_type": document_type,
                },
            )

            progress = await self.progress_service.recompute_progress(db, application.id, candidate.id)
            logger.info(f"Document {old_id} replaced by {replacement.id}")
            return replacement, progress

        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error replacing document {document.id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to replace document"
            )

    async def delete_document(self, db: AsyncSession, document: Document, candidate: Profile) -> int:
        """
        Delete a non-verified document. The file is queued for removal
        after commit.

        Returns:
            Recomputed progress of the application

        Raises:
            HTTPException 409: If the document is verified or the application is closed
        """
        try:
            if document.user_id != candidate.id:
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail="Access denied. You can only delete your own documents"
                )
            application = await self.application_repo.get(db, document.application_id)
            if application is None:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Application not found"
                )
            self._ensure_uploads_open(application)
            self._ensure_not_verified(document)

            application_id = document.application_id
            document_id = document.id
            document_type = document.document_type
            path = document.storage_path

            await self.document_repo.delete(db, document_id)
            storage_service.remove_after_commit(db, DOCUMENTS_BUCKET, [path])

            await self.activity_service.log_activity(
                db,
                application_id,
                ActivityType.DOCUMENT_DELETED,
                f"{DOCUMENT_TYPE_LABELS.get(document_type, document_type)} deleted",
                performed_by=candidate.id,
                metadata={"document_id": str(document_id), "document_type": document_type},
            )

            return await self.progress_service.recompute_progress(db, application_id, candidate.id)

        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting document {document.id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to delete document"
            )

    def create_signed_url(self, document: Document, expires_in: Optional[int] = None) -> Tuple[str, int, datetime]:
        """
        Signed link to the stored file.

        Returns:
            Tuple of (url, lifetime in seconds, expiry time)

        Raises:
            HTTPException 404: If the file is missing from storage
        """
        if not storage_service.exists(DOCUMENTS_BUCKET, document.storage_path):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Document file not found"
            )
        lifetime = expires_in if expires_in is not None else settings.signed_url_expires
        url, expires_at = storage_service.create_signed_url(DOCUMENTS_BUCKET, document.storage_path, lifetime)
        return url, lifetime, expires_at
