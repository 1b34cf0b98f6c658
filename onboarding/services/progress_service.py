"""
Onboarding progress derived from document verification.

    progress = floor(verified required types * 100 / required count)

clamped to [0, 100]. A required type counts once no matter how many verified
documents it has. With no required types configured the denominator is the
number of documents on the application, and an application without
documents sits at 0%.
"""
from typing import Iterable, Optional, Sequence
from uuid import UUID
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from onboarding.models.activity_log import ActivityType
from onboarding.models.application import Application, ApplicationStatus
from onboarding.models.document import Document, VerificationStatus
from onboarding.models.notification import NotificationType
from onboarding.repositories.application_repository import ApplicationRepository
from onboarding.repositories.document_repository import DocumentRepository
from onboarding.services.activity_service import ActivityService
from onboarding.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


def calculate_progress(documents: Iterable[Document], required_types: Sequence[str]) -> int:
    """
    Pure progress rule.

    Args:
        documents: Documents attached to the application (anything with
            ``document_type`` and ``status``)
        required_types: Document types required for this application

    Returns:
        Integer percentage in [0, 100]

    Example:
        2 required types, PAN verified and Aadhar pending -> 50
    """
    documents = list(documents)
    verified = [d for d in documents if d.status == VerificationStatus.VERIFIED.value]

    required = set(required_types or [])
    if required:
        denominator = len(required)
        numerator = len({d.document_type for d in verified} & required)
    else:
        denominator = len(documents)
        numerator = len(verified)

    if denominator == 0:
        return 0

    return max(0, min(100, (numerator * 100) // denominator))


class ProgressService:
    """Recomputes and stores ``progress_percent`` after document changes."""

    def __init__(
        self,
        application_repo: Optional[ApplicationRepository] = None,
        document_repo: Optional[DocumentRepository] = None,
        activity_service: Optional[ActivityService] = None,
        notification_service: Optional[NotificationService] = None
    ):
        self.application_repo = application_repo or ApplicationRepository()
        self.document_repo = document_repo or DocumentRepository()
        self.activity_service = activity_service or ActivityService()
        self.notification_service = notification_service or NotificationService()

    async def recompute_progress(
        self,
        db: AsyncSession,
        application_id: UUID,
        performed_by: Optional[UUID] = None
    ) -> int:
        """
        Recalculate and persist progress for one application.

        An accepted application whose progress reaches 100 moves to
        ``completed`` in the same transaction. A completed application whose
        progress drops below 100 goes back to ``accepted`` so the candidate
        can upload again.

        Args:
            db: Active database session
            application_id: Application to recompute
            performed_by: Profile whose action triggered the recompute

        Returns:
            The new progress percentage

        Raises:
            HTTPException 404: If the application does not exist
        """
        application = await self.application_repo.get(db, application_id)
        if application is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Application not found"
            )

        documents = await self.document_repo.list_by_application(db, application_id)
        progress = calculate_progress(documents, application.required_document_types or [])

        updates = {}
        if progress != application.progress_percent:
            updates["progress_percent"] = progress

        completes = (
            progress == 100
            and application.status == ApplicationStatus.ACCEPTED.value
        )
        reopens = (
            progress < 100
            and application.status == ApplicationStatus.COMPLETED.value
        )
        if completes:
            updates["status"] = ApplicationStatus.COMPLETED.value
        elif reopens:
            updates["status"] = ApplicationStatus.ACCEPTED.value

        if updates:
            await self.application_repo.update(db, application, updates)

        if completes:
            await self._on_completed(db, application, performed_by)
        elif reopens:
            await self._on_reopened(db, application, performed_by)

        logger.debug(f"Progress for application {application_id}: {progress}%")
        return progress

    async def _on_completed(
        self,
        db: AsyncSession,
        application: Application,
        performed_by: Optional[UUID]
    ) -> None:
        await self.activity_service.log_activity(
            db,
            application.id,
            ActivityType.STATUS_CHANGED,
            "Onboarding completed: all required documents verified",
            performed_by=performed_by,
            metadata={
                "from": ApplicationStatus.ACCEPTED.value,
                "to": ApplicationStatus.COMPLETED.value,
            },
        )
        await self.notification_service.create_notification(
            db,
            application.user_id,
            "Onboarding Complete",
            "All your documents have been verified. Your onboarding is complete.",
            NotificationType.SUCCESS,
            link="/candidate/dashboard",
        )
        logger.info(f"Application {application.id} completed")

    async def _on_reopened(
        self,
        db: AsyncSession,
        application: Application,
        performed_by: Optional[UUID]
    ) -> None:
        await self.activity_service.log_activity(
            db,
            application.id,
            ActivityType.STATUS_CHANGED,
            "Onboarding reopened: a required document is no longer verified",
            performed_by=performed_by,
            metadata={
                "from": ApplicationStatus.COMPLETED.value,
                "to": ApplicationStatus.ACCEPTED.value,
            },
        )
        logger.info(f"Application {application.id} reopened")
