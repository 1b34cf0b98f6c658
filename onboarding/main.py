import logging

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from onboarding.core.config import settings
from onboarding.core.database import get_db
from onboarding.core.logging import REQUEST_ID_HEADER, RequestIdMiddleware, configure_logging
from onboarding.api.v1 import auth, profiles, applications, documents, notifications, storage
from onboarding.api.v1 import admin

configure_logging(settings.app_env)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Onboarding Portal API",
    description="Candidate applications, document verification and admin review",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(RequestIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[REQUEST_ID_HEADER],
)

app.include_router(auth.router, prefix="/api/v1/auth", tags=["Authentication"])
app.include_router(profiles.router, prefix="/api/v1/profiles", tags=["Profiles"])
app.include_router(applications.router, prefix="/api/v1/applications", tags=["Applications"])
app.include_router(documents.router, prefix="/api/v1/documents", tags=["Documents"])
app.include_router(notifications.router, prefix="/api/v1/notifications", tags=["Notifications"])
app.include_router(storage.router, prefix="/api/v1/storage", tags=["Storage"])
app.include_router(admin.router, prefix="/api/v1/admin")


@app.get("/healthz")
async def health_check():
    """Liveness probe"""
    return {"status": "ok", "version": "1.0.0"}


@app.get("/readyz")
async def readiness_check(db: AsyncSession = Depends(get_db)):
    """Readiness probe: the database must answer"""
    try:
        await db.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(f"Readiness check failed: {e}")
        raise HTTPException(status_code=503, detail="Database unavailable")
    return {"status": "ready"}


@app.get("/")
async def root():
    return {"message": "Onboarding Portal API", "docs": "/docs"}
