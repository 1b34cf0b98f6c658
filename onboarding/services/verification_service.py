"""
Admin review of individual documents.

Verifying or rejecting a document stamps the reviewer, writes the audit
trail and timeline, notifies the candidate and recomputes progress, which
may complete an accepted application.
"""
from typing import Dict, List, Optional, Sequence, Tuple
from uuid import UUID
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from onboarding.models.activity_log import ActivityType
from onboarding.models.admin_action import AdminActionType
from onboarding.models.document import DOCUMENT_TYPE_LABELS, Document, VerificationStatus
from onboarding.models.notification import NotificationType
from onboarding.models.profile import Profile
from onboarding.repositories.application_repository import ApplicationRepository
from onboarding.repositories.document_repository import DocumentRepository
from onboarding.services.activity_service import ActivityService
from onboarding.services.audit_service import AuditService
from onboarding.services.notification_service import NotificationService
from onboarding.services.progress_service import ProgressService
from onboarding.utils.timeutils import utcnow

logger = logging.getLogger(__name__)


class VerificationService:
    """Service for admin document decisions."""

    def __init__(
        self,
        document_repo: Optional[DocumentRepository] = None,
        application_repo: Optional[ApplicationRepository] = None,
        activity_service: Optional[ActivityService] = None,
        audit_service: Optional[AuditService] = None,
        notification_service: Optional[NotificationService] = None,
        progress_service: Optional[ProgressService] = None
    ):
        self.document_repo = document_repo or DocumentRepository()
        self.application_repo = application_repo or ApplicationRepository()
        self.activity_service = activity_service or ActivityService()
        self.audit_service = audit_service or AuditService()
        self.notification_service = notification_service or NotificationService()
        self.progress_service = progress_service or ProgressService()

    async def _application_status(self, db: AsyncSession, application_id: UUID) -> str:
        application = await self.application_repo.get(db, application_id)
        return application.status if application else ""

    async def _apply_verification(
        self,
        db: AsyncSession,
        document: Document,
        admin: Profile
    ) -> Document:
        document = await self.document_repo.update(db, document, {
            "status": VerificationStatus.VERIFIED.value,
            "verified_by": admin.id,
            "verified_at": utcnow(),
            "rejection_reason": None,
        })
        label = DOCUMENT_TYPE_LABELS.get(document.document_type, document.document_type)

        await self.audit_service.log_action(
            db,
            admin.id,
            AdminActionType.VERIFY_DOCUMENT,
            application_id=document.application_id,
            details={"document_id": str(document.id), "document_type": document.document_type},
        )
        await self.activity_service.log_activity(
            db,
            document.application_id,
            ActivityType.DOCUMENT_VERIFIED,
            f"{label} verified",
            performed_by=admin.id,
            metadata={"document_id": str(document.id), "document_type": document.document_type},
        )
        await self.notification_service.create_notification(
            db,
            document.user_id,
            "Document Verified",
            f"Your {label} has been verified.",
            NotificationType.SUCCESS,
            link="/candidate/documents",
        )
        return document

    async def verify_document(
        self,
        db: AsyncSession,
        document: Document,
        admin: Profile
    ) -> Tuple[Document, int, str]:
        """
        Mark a document verified.

        Returns:
            Tuple of (document, recomputed progress, application status afterwards)
        """
        try:
            document = await self._apply_verification(db, document, admin)
            progress = await self.progress_service.recompute_progress(db, document.application_id, admin.id)
            application_status = await self._application_status(db, document.application_id)
            logger.info(f"Document {document.id} verified by admin {admin.id}")
            return document, progress, application_status

        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error verifying document {document.id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to verify document"
            )

    async def reject_document(
        self,
        db: AsyncSession,
        document: Document,
        admin: Profile,
        reason: str
    ) -> Tuple[Document, int, str]:
        """
        Mark a document rejected with a reason the candidate will see.

        Raises:
            HTTPException 400: If the reason is blank
        """
        try:
            reason = (reason or "").strip()
            if not reason:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="A rejection reason is required"
                )

            document = await self.document_repo.update(db, document, {
                "status": VerificationStatus.REJECTED.value,
                "verified_by": admin.id,
                "verified_at": utcnow(),
                "rejection_reason": reason,
            })
            label = DOCUMENT_TYPE_LABELS.get(document.document_type, document.document_type)
            details = {
                "document_id": str(document.id),
                "document_type": document.document_type,
                "reason": reason,
            }

            await self.audit_service.log_action(
                db,
                admin.id,
                AdminActionType.REJECT_DOCUMENT,
                application_id=document.application_id,
                details=details,
            )
            await self.activity_service.log_activity(
                db,
                document.application_id,
                ActivityType.DOCUMENT_REJECTED,
                f"{label} rejected",
                performed_by=admin.id,
                metadata=details,
            )
            await self.notification_service.create_notification(
                db,
                document.user_id,
                "Document Needs Attention",
                f"Your {label} requires resubmission. Reason: {reason}",
                NotificationType.WARNING,
                link="/candidate/documents",
            )

            progress = await self.progress_service.recompute_progress(db, document.application_id, admin.id)
            application_status = await self._application_status(db, document.application_id)
            logger.info(f"Document {document.id} rejected by admin {admin.id}")
            return document, progress, application_status

        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error rejecting document {document.id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to reject document"
            )

    async def verify_documents(
        self,
        db: AsyncSession,
        document_ids: Sequence[UUID],
        admin: Profile
    ) -> Tuple[List[Document], Dict[UUID, int]]:
        """
        Verify several documents at once.

        Progress is recomputed once per affected application.

        Returns:
            Tuple of (verified documents, progress by application id)

        Raises:
            HTTPException 404: If any id does not match a document; nothing is changed
        """
        try:
            unique_ids = list(dict.fromkeys(document_ids))
            documents = await self.document_repo.get_many(db, unique_ids)
            found = {d.id for d in documents}
            missing = [str(i) for i in unique_ids if i not in found]
            if missing:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail=f"Documents not found: {', '.join(missing)}"
                )

            verified = []
            for document in documents:
                verified.append(await self._apply_verification(db, document, admin))

            progress_by_application: Dict[UUID, int] = {}
            for application_id in dict.fromkeys(d.application_id for d in verified):
                progress_by_application[application_id] = await self.progress_service.recompute_progress(
                    db, application_id, admin.id
                )

            logger.info(f"Admin {admin.id} bulk-verified {len(verified)} documents")
            return verified, progress_by_application

        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error bulk verifying documents: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to verify documents"
            )
