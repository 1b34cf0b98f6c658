from pydantic import BaseModel
from typing import Dict, List, Literal


Granularity = Literal["day", "month"]


class PeriodCount(BaseModel):
    period: str
    count: int


class StatisticsResponse(BaseModel):
    """Aggregate numbers for the admin reports page"""
    total_applications: int
    status_counts: Dict[str, int]
    pending_review: int
    documents_pending: int
    completed: int
    approval_rate: float
    average_review_days: float
    document_counts: Dict[str, int]
    granularity: Granularity
    submissions: List[PeriodCount]
