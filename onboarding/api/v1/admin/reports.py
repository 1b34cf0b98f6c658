from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from onboarding.core.database import get_db
from onboarding.api.deps import get_admin
from onboarding.models.profile import Profile
from onboarding.schemas.statistics import StatisticsResponse
from onboarding.services.statistics_service import StatisticsService
from onboarding.utils.application_filters import SORT_NEWEST

router = APIRouter()


@router.get("/statistics", response_model=StatisticsResponse)
async def get_statistics(
    granularity: str = Query("day", pattern="^(day|month)$"),
    current_profile: Profile = Depends(get_admin),
    db: AsyncSession = Depends(get_db)
):
    """Counts, approval rate, review time and the submissions histogram"""
    return await StatisticsService().get_statistics(db, granularity)


@router.get("/export")
async def export_report(
    search: Optional[str] = Query(None),
    status_filter: Optional[str] = Query("all", alias="status"),
    sort: str = Query(SORT_NEWEST, pattern="^(newest|oldest|name)$"),
    current_profile: Profile = Depends(get_admin),
    db: AsyncSession = Depends(get_db)
):
    content = await StatisticsService().export_report_csv(
        db, search=search, status_filter=status_filter, sort_by=sort
    )
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="onboarding-report.csv"'}
    )
