from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from onboarding.core.database import get_db
from onboarding.core.security import (
    blacklist_token,
    create_access_token,
    create_refresh_token,
    verify_token,
)
from onboarding.models.profile import Profile
from onboarding.schemas.auth import RegisterRequest, LoginRequest, Token, RefreshTokenRequest, LogoutResponse
from onboarding.api.deps import get_current_profile, security, profile_repo
from onboarding.services.profile_service import ProfileService
import uuid

router = APIRouter()


def _issue_tokens(profile: Profile) -> dict:
    return {
        "access_token": create_access_token(data={"sub": str(profile.id)}),
        "refresh_token": create_refresh_token(data={"sub": str(profile.id)}),
        "token_type": "bearer"
    }


@router.post("/register", response_model=Token, status_code=status.HTTP_201_CREATED)
async def register(payload: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Register a new candidate"""
    service = ProfileService()
    profile = await service.register(db, payload.email, payload.password, payload.full_name)
    await db.commit()
    return _issue_tokens(profile)


@router.post("/login", response_model=Token)
async def login(credentials: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Authenticate and return tokens"""
    profile = await ProfileService().authenticate(db, credentials.email, credentials.password)
    return _issue_tokens(profile)


@router.post("/admin/login", response_model=Token)
async def admin_login(credentials: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Authenticate an admin; valid candidate credentials are refused"""
    profile = await ProfileService().authenticate(db, credentials.email, credentials.password)
    if not profile.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied. Admin privileges required."
        )
    return _issue_tokens(profile)


@router.post("/refresh", response_model=Token)
async def refresh_token(payload: RefreshTokenRequest, db: AsyncSession = Depends(get_db)):
    """Exchange a refresh token for a new token pair"""
    profile_id = verify_token(payload.refresh_token, "refresh")
    if profile_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid refresh token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    profile = await profile_repo.get(db, uuid.UUID(profile_id))
    if not profile:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # Rotate: the used refresh token cannot be replayed
    blacklist_token(payload.refresh_token)
    return _issue_tokens(profile)


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    current_profile: Profile = Depends(get_current_profile)
):
    """
    Invalidate the presented access token.

    The token is blacklisted in process memory until it expires or the
    service restarts. Clients should also drop their refresh token.
    """
    blacklist_token(credentials.credentials)
    return {
        "message": "Successfully logged out",
        "detail": "Please clear tokens from client storage"
    }
