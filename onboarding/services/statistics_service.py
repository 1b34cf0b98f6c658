"""
Statistics for the admin reports page.

``compute_statistics`` is a single pass over already-fetched application
rows so it can be tested without a database; ``StatisticsService`` does the
fetching.
"""

from __future__ import annotations
from collections import Counter
from typing import Any, Dict, Iterable, Optional
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from onboarding.models.application import ApplicationStatus
from onboarding.models.document import VerificationStatus
from onboarding.repositories.application_repository import ApplicationRepository
from onboarding.repositories.document_repository import DocumentRepository
from onboarding.services.application_service import application_to_row
from onboarding.utils.application_filters import SORT_NEWEST, filter_applications, sort_applications
from onboarding.utils.csv_export import report_to_csv
from onboarding.utils.status import TERMINAL_STATUSES
from onboarding.utils.timeutils import ensure_aware

logger = logging.getLogger(__name__)

GRANULARITY_FORMATS = {
    "day": "%Y-%m-%d",
    "month": "%Y-%m",
}

APPROVED_STATUSES = (ApplicationStatus.ACCEPTED.value, ApplicationStatus.COMPLETED.value)


def compute_statistics(
    rows: Iterable[Dict[str, Any]],
    document_counts: Optional[Dict[str, int]] = None,
    granularity: str = "day"
) -> dict:
    """
    Aggregate application rows.

    Args:
        rows: Application rows with status, progress_percent, submitted_at
            and reviewed_at
        document_counts: Documents per verification status
        granularity: ``day`` or ``month`` buckets for the submissions histogram

    Returns:
        Dict matching ``StatisticsResponse``

    Raises:
        ValueError: For an unknown granularity
    """
    if granularity not in GRANULARITY_FORMATS:
        raise ValueError(f"Unknown granularity: {granularity}")
    bucket_format = GRANULARITY_FORMATS[granularity]

    status_counts = {s.value: 0 for s in ApplicationStatus}
    histogram: Counter = Counter()
    review_days = []
    documents_pending = 0
    completed = 0

    for row in rows:
        row_status = row.get("status")
        status_counts[row_status] = status_counts.get(row_status, 0) + 1

        progress = row.get("progress_percent") or 0
        if row_status == ApplicationStatus.ACCEPTED.value and progress < 100:
            documents_pending += 1
        # completed means approved and fully verified
        if row_status in APPROVED_STATUSES and progress >= 100:
            completed += 1

        submitted_at = ensure_aware(row.get("submitted_at"))
        if submitted_at is not None and row_status != ApplicationStatus.DRAFT.value:
            histogram[submitted_at.strftime(bucket_format)] += 1

        reviewed_at = ensure_aware(row.get("reviewed_at"))
        if row_status in TERMINAL_STATUSES and submitted_at and reviewed_at:
            review_days.append((reviewed_at - submitted_at).total_seconds() / 86400)

    approved = sum(status_counts[s] for s in APPROVED_STATUSES)
    rejected = status_counts[ApplicationStatus.REJECTED.value]
    decided = approved + rejected

    counts = {s.value: 0 for s in VerificationStatus}
    counts.update(document_counts or {})

    return {
        "total_applications": sum(status_counts.values()) - status_counts[ApplicationStatus.DRAFT.value],
        "status_counts": status_counts,
        "pending_review": (
            status_counts[ApplicationStatus.SUBMITTED.value]
            + status_counts[ApplicationStatus.UNDER_REVIEW.value]
        ),
        "documents_pending": documents_pending,
        "completed": completed,
        "approval_rate": round(approved * 100 / decided, 2) if decided else 0.0,
        "average_review_days": round(sum(review_days) / len(review_days), 1) if review_days else 0.0,
        "document_counts": counts,
        "granularity": granularity,
        "submissions": [
            {"period": period, "count": histogram[period]}
            for period in sorted(histogram)
        ],
    }


class StatisticsService:
    """Service for admin reporting."""

    def __init__(
        self,
        application_repo: Optional[ApplicationRepository] = None,
        document_repo: Optional[DocumentRepository] = None
    ):
        self.application_repo = application_repo or ApplicationRepository()
        self.document_repo = document_repo or DocumentRepository()

    async def get_statistics(self, db: AsyncSession, granularity: str = "day") -> dict:
        """
        Compute reporting numbers over every application.

        Raises:
            HTTPException 400: For an unknown granularity
        """
        try:
            applications = await self.application_repo.list_with_profiles(db)
            document_counts = await self.document_repo.count_by_status(db)
            return compute_statistics(
                (application_to_row(a) for a in applications),
                document_counts,
                granularity,
            )

        except ValueError as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(e)
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error computing statistics: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to compute statistics"
            )

    async def export_report_csv(
        self,
        db: AsyncSession,
        search: Optional[str] = None,
        status_filter: Optional[str] = None,
        sort_by: str = SORT_NEWEST
    ) -> str:
        """Report export with processing time per application."""
        try:
            applications = await self.application_repo.list_with_profiles(db)
            rows = filter_applications(
                (application_to_row(a) for a in applications),
                search=search,
                status=status_filter,
            )
            return report_to_csv(sort_applications(rows, sort_by))

        except ValueError as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(e)
            )
        except Exception as e:
            logger.error(f"Error exporting report: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to export report"
            )
