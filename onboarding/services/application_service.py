"""
Application workflow: drafting, submission and admin decisions.

Every admin transition writes an audit entry, a timeline entry and a
notification for the candidate in the same transaction as the status
change. Nothing here commits; request handlers own the transaction.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional
from uuid import UUID
from fastapi import HTTPException, status
from sqlalchemy import delete as sql_delete
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from onboarding.core.config import settings
from onboarding.models.activity_log import ActivityLog, ActivityType
from onboarding.models.admin_action import AdminActionType
from onboarding.models.application import Application, ApplicationStatus
from onboarding.models.document import Document
from onboarding.models.notification import NotificationType
from onboarding.models.profile import Profile
from onboarding.repositories.application_repository import ApplicationRepository
from onboarding.repositories.document_repository import DocumentRepository
from onboarding.repositories.profile_repository import ProfileRepository
from onboarding.services.activity_service import ActivityService
from onboarding.services.audit_service import AuditService
from onboarding.services.notification_service import NotificationService
from onboarding.services.progress_service import ProgressService
from onboarding.services.storage_service import DOCUMENTS_BUCKET, storage_service
from onboarding.utils.status import can_transition, editable_fields, get_status_display
from onboarding.utils.timeutils import utcnow
from onboarding.utils.validation import validate_submission

logger = logging.getLogger(__name__)

APPLICANT_FIELDS = (
    "post_applied_for", "name", "father_or_husband_name", "permanent_address",
    "communication_address", "date_of_birth", "sex", "nationality",
    "marital_status", "religion", "mobile_no", "email", "bank_name",
    "account_no", "ifsc_code", "branch", "pan_no", "aadhar_no", "education",
    "declaration_place", "declaration_date", "declaration_accepted",
)

# (title, message, type, link) sent to the candidate per admin decision
DECISION_NOTIFICATIONS = {
    ApplicationStatus.UNDER_REVIEW.value: (
        "Application Under Review",
        "Your application is now being reviewed by our team.",
        NotificationType.INFO,
        "/candidate/dashboard",
    ),
    ApplicationStatus.DOCUMENTS_PENDING.value: (
        "Documents Requested",
        "Please upload the remaining documents for your application.",
        NotificationType.WARNING,
        "/candidate/documents",
    ),
    ApplicationStatus.ACCEPTED.value: (
        "Application Approved!",
        "Your application has been approved. Please upload your documents to proceed.",
        NotificationType.SUCCESS,
        "/candidate/documents",
    ),
    ApplicationStatus.REJECTED.value: (
        "Application Status Update",
        "Your application status has been updated. Please check your dashboard for details.",
        NotificationType.WARNING,
        "/candidate/dashboard",
    ),
}


def ensure_can_access(application: Application, actor: Profile) -> None:
    """
    Owners and admins may read an application; everyone else gets 403.

    Raises:
        HTTPException 403: If the actor is neither the owner nor an admin
    """
    if actor.is_admin or application.user_id == actor.id:
        return
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="Access denied. You can only access your own applications"
    )


def application_to_row(application: Application) -> Dict[str, Any]:
    """
    Flatten an application (with ``profile`` loaded) for listing and export.

    Name and email fall back to the owner's profile while the draft is empty.
    """
    profile = application.profile
    return {
        "id": application.id,
        "user_id": application.user_id,
        "name": application.name or (profile.full_name if profile else None),
        "email": application.email or (profile.email if profile else None),
        "post_applied_for": application.post_applied_for,
        "status": application.status,
        "progress_percent": application.progress_percent,
        "submitted_at": application.submitted_at,
        "reviewed_at": application.reviewed_at,
        "created_at": application.created_at,
    }


class ApplicationService:
    """Service for the candidate application lifecycle."""

    def __init__(
        self,
        application_repo: Optional[ApplicationRepository] = None,
        document_repo: Optional[DocumentRepository] = None,
        profile_repo: Optional[ProfileRepository] = None,
        activity_service: Optional[ActivityService] = None,
        audit_service: Optional[AuditService] = None,
        notification_service: Optional[NotificationService] = None,
        progress_service: Optional[ProgressService] = None
    ):
        self.application_repo = application_repo or ApplicationRepository()
        self.document_repo = document_repo or DocumentRepository()
        self.profile_repo = profile_repo or ProfileRepository()
        self.activity_service = activity_service or ActivityService()
        self.audit_service = audit_service or AuditService()
        self.notification_service = notification_service or NotificationService()
        self.progress_service = progress_service or ProgressService()

    async def get_application(
        self,
        db: AsyncSession,
        application_id: UUID,
        actor: Profile
    ) -> Application:
        """
        Load an application the actor is allowed to see.

        Raises:
            HTTPException 404: If the application does not exist
            HTTPException 403: If the actor may not read it
        """
        try:
            application = await self.application_repo.get(db, application_id)
            if application is None:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail="Application not found"
                )
            ensure_can_access(application, actor)
            return application

        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching application {application_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to retrieve application"
            )

    async def get_application_detail(self, db: AsyncSession, application: Application) -> dict:
        """
        Application with owner summary and documents.

        Returns:
            Dict ready for ``ApplicationDetailResponse``
        """
        profile = await self.profile_repo.get(db, application.user_id)
        documents = await self.document_repo.list_by_application(db, application.id)
        data = {column.key: getattr(application, column.key) for column in Application.__mapper__.column_attrs}
        data["profile"] = profile
        data["documents"] = documents
        return data

    async def list_user_applications(self, db: AsyncSession, user_id: UUID) -> List[Application]:
        try:
            return await self.application_repo.get_by_user(db, user_id)
        except Exception as e:
            logger.error(f"Error listing applications for user {user_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to retrieve applications"
            )

    async def get_current_application(self, db: AsyncSession, user_id: UUID) -> Optional[Application]:
        """The candidate's most recent application, or None."""
        applications = await self.list_user_applications(db, user_id)
        return applications[0] if applications else None

    async def create_application(
        self,
        db: AsyncSession,
        candidate: Profile,
        fields: Dict[str, Any]
    ) -> Application:
        """
        Start a new application in ``draft``.

        The required document set is copied from settings so later
        configuration changes do not move existing applications' progress.

        Args:
            db: Database session
            candidate: Owning profile
            fields: Initial applicant fields (may be empty)

        Returns:
            Created application
        """
        try:
            data = {k: v for k, v in fields.items() if k in APPLICANT_FIELDS and v is not None}
            data.update({
                "user_id": candidate.id,
                "status": ApplicationStatus.DRAFT.value,
                "progress_percent": 0,
                "required_document_types": list(settings.required_document_types),
                "created_at": utcnow(),
            })
            data.setdefault("education", [])
            data.setdefault("declaration_accepted", False)

            application = await self.application_repo.create(db, data)
            logger.info(f"Application {application.id} created for user {candidate.id}")
            return application

        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error creating application for user {candidate.id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to create application"
            )

    async def update_application(
        self,
        db: AsyncSession,
        application: Application,
        fields: Dict[str, Any],
        actor: Profile
    ) -> Application:
        """
        Apply candidate edits within what the current status allows.

        Draft: every applicant field. Submitted: contact fields only.
        Anything later: nothing.

        Raises:
            HTTPException 403: If the actor is not the owner
            HTTPException 409: If a field is not editable in the current status
        """
        try:
            if application.user_id != actor.id:
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail="Access denied. Only the applicant can edit an application"
                )

            changes = {k: v for k, v in fields.items() if k in APPLICANT_FIELDS}
            allowed = editable_fields(application.status)
            if allowed is not None:
                blocked = sorted(set(changes) - allowed)
                if blocked:
                    if allowed:
                        detail = (
                            "Only contact details can be changed after submission. "
                            f"Not editable: {', '.join(blocked)}"
                        )
                    else:
                        detail = f"Application can no longer be edited in status {application.status}"
                    raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)

            if not changes:
                return application

            return await self.application_repo.update(db, application, changes)

        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error updating application {application.id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to update application"
            )

    async def submit_application(
        self,
        db: AsyncSession,
        application: Application,
        candidate: Profile,
        fields: Optional[Dict[str, Any]] = None
    ) -> Application:
        """
        Move a draft to ``submitted``, applying any final edits atomically.

        The merged field values are validated before anything is written.

        Raises:
            HTTPException 403: If the candidate does not own the application
            HTTPException 409: If the application is not a draft
            HTTPException 422: With a field -> message map when required
                fields are missing or malformed
        """
        try:
            if application.user_id != candidate.id:
                raise HTTPException(
                    status_code=status.HTTP_403_FORBIDDEN,
                    detail="Access denied. Only the applicant can submit an application"
                )

            if not can_transition(application.status, ApplicationStatus.SUBMITTED.value):
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=f"Cannot submit an application in status {application.status}"
                )

            changes = {k: v for k, v in (fields or {}).items() if k in APPLICANT_FIELDS}
            merged = {field: getattr(application, field) for field in APPLICANT_FIELDS}
            merged.update(changes)

            errors = validate_submission(merged)
            if errors:
                raise HTTPException(
                    status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                    detail={"message": "Application is incomplete", "errors": errors}
                )

            changes.update({
                "status": ApplicationStatus.SUBMITTED.value,
                "submitted_at": utcnow(),
            })
            application = await self.application_repo.update(db, application, changes)

            await self.activity_service.log_activity(
                db,
                application.id,
                ActivityType.SUBMITTED,
                "Application submitted",
                performed_by=candidate.id,
                metadata={"from": ApplicationStatus.DRAFT.value, "to": ApplicationStatus.SUBMITTED.value},
            )
            await self.notification_service.create_notification(
                db,
                candidate.id,
                "Application Submitted Successfully",
                "Your application has been submitted and is under review.",
                NotificationType.SUCCESS,
                link="/candidate/dashboard",
            )

            logger.info(f"Application {application.id} submitted")
            return application

        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error submitting application {application.id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to submit application"
            )

    async def _admin_transition(
        self,
        db: AsyncSession,
        application: Application,
        admin: Profile,
        target: ApplicationStatus,
        action: AdminActionType,
        updates: Optional[Dict[str, Any]] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> Application:
        previous = application.status
        if not can_transition(previous, target.value):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Cannot change application from {previous} to {target.value}"
            )

        values = dict(updates or {})
        values["status"] = target.value
        application = await self.application_repo.update(db, application, values)

        audit_details = {"from": previous, "to": target.value}
        audit_details.update(details or {})
        await self.audit_service.log_action(
            db, admin.id, action, application_id=application.id, details=audit_details
        )

        description = f"Status changed to {get_status_display(target.value)}"
        await self.activity_service.log_activity(
            db,
            application.id,
            ActivityType.STATUS_CHANGED,
            description,
            performed_by=admin.id,
            metadata=audit_details,
        )

        title, message, notification_type, link = DECISION_NOTIFICATIONS[target.value]
        await self.notification_service.create_notification(
            db, application.user_id, title, message, notification_type, link=link
        )

        logger.info(f"Application {application.id}: {previous} -> {target.value} by admin {admin.id}")
        return application

    async def move_to_under_review(
        self,
        db: AsyncSession,
        application: Application,
        admin: Profile,
        notes: Optional[str] = None
    ) -> Application:
        """``submitted -> under_review``."""
        try:
            updates = {"admin_notes": notes} if notes else {}
            return await self._admin_transition(
                db, application, admin,
                ApplicationStatus.UNDER_REVIEW, AdminActionType.UNDER_REVIEW,
                updates=updates,
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error moving application {application.id} to review: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to update application status"
            )

    async def request_documents(
        self,
        db: AsyncSession,
        application: Application,
        admin: Profile,
        notes: Optional[str] = None
    ) -> Application:
        """``submitted | under_review -> documents_pending``."""
        try:
            updates = {"admin_notes": notes} if notes else {}
            return await self._admin_transition(
                db, application, admin,
                ApplicationStatus.DOCUMENTS_PENDING, AdminActionType.REQUEST_DOCUMENTS,
                updates=updates,
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error requesting documents for application {application.id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to update application status"
            )

    async def approve_application(
        self,
        db: AsyncSession,
        application: Application,
        admin: Profile,
        notes: Optional[str] = None
    ) -> Application:
        """
        Accept an application under review.

        Stamps the reviewer and review time and clears any earlier
        rejection reason. An application whose required documents are
        already all verified goes straight on to ``completed``.

        Raises:
            HTTPException 409: If the application is not awaiting a decision
        """
        try:
            updates = {
                "reviewed_by": admin.id,
                "reviewed_at": utcnow(),
                "rejection_reason": None,
            }
            if notes:
                updates["admin_notes"] = notes
            application = await self._admin_transition(
                db, application, admin,
                ApplicationStatus.ACCEPTED, AdminActionType.APPROVE,
                updates=updates,
                details={"notes": notes} if notes else None,
            )
            await self.progress_service.recompute_progress(db, application.id, admin.id)
            return application
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error approving application {application.id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to approve application"
            )

    async def reject_application(
        self,
        db: AsyncSession,
        application: Application,
        admin: Profile,
        reason: str,
        notes: Optional[str] = None
    ) -> Application:
        """
        Reject an application with a mandatory reason.

        Raises:
            HTTPException 400: If the reason is blank
            HTTPException 409: If the application is not awaiting a decision
        """
        try:
            reason = (reason or "").strip()
            if not reason:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="A rejection reason is required"
                )

            updates = {
                "reviewed_by": admin.id,
                "reviewed_at": utcnow(),
                "rejection_reason": reason,
            }
            if notes:
                updates["admin_notes"] = notes
            details = {"reason": reason}
            if notes:
                details["notes"] = notes
            return await self._admin_transition(
                db, application, admin,
                ApplicationStatus.REJECTED, AdminActionType.REJECT,
                updates=updates,
                details=details,
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error rejecting application {application.id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to reject application"
            )

    async def delete_application(
        self,
        db: AsyncSession,
        application: Application,
        admin: Profile
    ) -> None:
        """
        Remove an application and its documents. The stored files are queued
        for removal after commit.

        The audit entry keeps the application id after the row is gone.
        """
        application_id = application.id
        try:
            documents = await self.document_repo.list_by_application(db, application_id)
            paths = [d.storage_path for d in documents]
            details = {
                "name": application.name,
                "email": application.email,
                "status": application.status,
                "documents_removed": len(paths),
            }

            await db.execute(sql_delete(Document).where(Document.application_id == application_id))
            await db.execute(sql_delete(ActivityLog).where(ActivityLog.application_id == application_id))
            await self.application_repo.delete(db, application_id)

            await self.audit_service.log_action(
                db,
                admin.id,
                AdminActionType.DELETE_APPLICATION,
                application_id=application_id,
                details=details,
            )

            storage_service.remove_after_commit(db, DOCUMENTS_BUCKET, paths)
            logger.info(f"Application {application_id} deleted by admin {admin.id}; {len(paths)} files queued for removal")

        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error deleting application {application_id}: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to delete application"
            )
