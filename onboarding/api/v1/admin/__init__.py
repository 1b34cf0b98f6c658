from fastapi import APIRouter

from .applications import router as applications_router
from .documents import router as documents_router
from .reports import router as reports_router
from .audit import router as audit_router

router = APIRouter()
router.include_router(applications_router, prefix="/applications", tags=["admin-applications"])
router.include_router(documents_router, prefix="/documents", tags=["admin-documents"])
router.include_router(reports_router, prefix="/reports", tags=["admin-reports"])
router.include_router(audit_router, prefix="/audit", tags=["admin-audit"])

__all__ = ["router"]
