"""
Admin application list: full fetch, then search, status filter, sort and
page in memory. The CSV export uses the same pipeline without paging.
"""
from typing import Any, Dict, List, Optional
from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from onboarding.core.config import settings
from onboarding.repositories.application_repository import ApplicationRepository
from onboarding.services.application_service import application_to_row
from onboarding.utils.application_filters import SORT_NEWEST, filter_applications, sort_applications
from onboarding.utils.csv_export import applications_to_csv
from onboarding.utils.pagination import PaginationMeta, paginate

logger = logging.getLogger(__name__)


class ListingService:
    """Service backing the admin application list and its export."""

    def __init__(self, application_repo: Optional[ApplicationRepository] = None):
        self.application_repo = application_repo or ApplicationRepository()

    async def get_rows(
        self,
        db: AsyncSession,
        search: Optional[str] = None,
        status_filter: Optional[str] = None,
        sort_by: str = SORT_NEWEST
    ) -> List[Dict[str, Any]]:
        """
        Filtered and sorted rows, unpaginated.

        Raises:
            HTTPException 400: For an unknown sort key
        """
        try:
            applications = await self.application_repo.list_with_profiles(db)
            rows = filter_applications(
                (application_to_row(a) for a in applications),
                search=search,
                status=status_filter,
            )
            return sort_applications(rows, sort_by)

        except ValueError as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=str(e)
            )
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error listing applications: {e}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to retrieve applications"
            )

    async def list_applications(
        self,
        db: AsyncSession,
        search: Optional[str] = None,
        status_filter: Optional[str] = None,
        sort_by: str = SORT_NEWEST,
        page: int = 1,
        limit: Optional[int] = None
    ) -> dict:
        """
        One page of the admin list.

        Args:
            db: Database session
            search: Substring matched against name, email and post
            status_filter: Status, ``all`` or ``approved`` (alias of accepted)
            sort_by: ``newest``, ``oldest`` or ``name``
            page: 1-indexed page number
            limit: Page size (defaults to ADMIN_PAGE_SIZE)

        Returns:
            Dict with ``items`` and ``pagination``
        """
        page_size = limit or settings.admin_page_size
        rows = await self.get_rows(db, search, status_filter, sort_by)
        return {
            "items": paginate(rows, page, page_size),
            "pagination": PaginationMeta.build(page, page_size, len(rows)),
        }

    async def export_csv(
        self,
        db: AsyncSession,
        search: Optional[str] = None,
        status_filter: Optional[str] = None,
        sort_by: str = SORT_NEWEST
    ) -> str:
        rows = await self.get_rows(db, search, status_filter, sort_by)
        logger.info(f"Exporting {len(rows)} applications to CSV")
        return applications_to_csv(rows)
