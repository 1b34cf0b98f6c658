"""
Document repository for onboarding uploads.
"""
from typing import Optional, List, Dict
from uuid import UUID
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
import logging

from onboarding.repositories.base import BaseRepository
from onboarding.models.document import Document, VerificationStatus

logger = logging.getLogger(__name__)


class DocumentRepository(BaseRepository[Document]):
    """Repository for document metadata rows."""

    def __init__(self):
        super().__init__(Document)

    async def list_by_application(self, db: AsyncSession, application_id: UUID) -> List[Document]:
        """
        Documents attached to an application, newest first.

        Args:
            db: Database session
            application_id: Application UUID

        Returns:
            List of documents
        """
        try:
            stmt = (
                select(Document)
                .where(Document.application_id == application_id)
                .order_by(Document.created_at.desc())
            )
            result = await db.execute(stmt)
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            logger.error(f"Error fetching documents for application {application_id}: {e}")
            raise

    async def get_active_by_type(
        self,
        db: AsyncSession,
        application_id: UUID,
        document_type: str
    ) -> Optional[Document]:
        """
        The non-rejected document of a given type, if any.

        A rejected document does not block a fresh upload of the same type.
        """
        try:
            stmt = (
                select(Document)
                .where(
                    Document.application_id == application_id,
                    Document.document_type == document_type,
                    Document.status != VerificationStatus.REJECTED.value,
                )
                .order_by(Document.created_at.desc())
                .limit(1)
            )
            result = await db.execute(stmt)
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching {document_type} for application {application_id}: {e}")
            raise

    async def count_by_status(self, db: AsyncSession) -> Dict[str, int]:
        """Number of documents per verification status across all applications."""
        try:
            stmt = select(Document.status, func.count()).group_by(Document.status)
            result = await db.execute(stmt)
            return {row[0]: row[1] for row in result.all()}
        except SQLAlchemyError as e:
            logger.error(f"Error counting documents by status: {e}")
            raise
