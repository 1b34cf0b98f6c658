from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Callable
from onboarding.core.database import get_db
from onboarding.core.security import verify_token
from onboarding.models.profile import Profile, ProfileRole
from onboarding.repositories.profile_repository import ProfileRepository
import uuid

security = HTTPBearer(auto_error=False)

profile_repo = ProfileRepository()


async def get_current_profile(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> Profile:
    """Resolve the bearer token to a profile"""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if credentials is None:
        raise credentials_exception

    profile_id = verify_token(credentials.credentials, "access")
    if profile_id is None:
        raise credentials_exception

    try:
        profile = await profile_repo.get(db, uuid.UUID(profile_id))
    except ValueError:
        raise credentials_exception
    if profile is None:
        raise credentials_exception

    return profile


def require_roles(allowed_roles: List[ProfileRole]) -> Callable:
    """Dependency factory for role-based access control"""
    def role_dependency(current_profile: Profile = Depends(get_current_profile)) -> Profile:
        if current_profile.role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required roles: {[role.value for role in allowed_roles]}"
            )
        return current_profile
    return role_dependency


get_candidate = require_roles([ProfileRole.CANDIDATE])
get_admin = require_roles([ProfileRole.ADMIN])
