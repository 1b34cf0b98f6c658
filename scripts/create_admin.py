#!/usr/bin/env python3
"""
Promote a profile to admin.

Registration only ever creates candidates, so the first admin is created
here. With --password the profile is registered first when it does not
exist yet.

    python scripts/create_admin.py --email hr@example.com --password 'S3cret!pass' --full-name "HR Desk"
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from fastapi import HTTPException

from onboarding.core.database import AsyncSessionLocal
from onboarding.models.profile import ProfileRole
from onboarding.services.profile_service import ProfileService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def create_admin(email: str, password: Optional[str], full_name: str) -> bool:
    """
    Ensure a profile with this email exists and holds the admin role.

    Returns:
        True on success, False if the profile is missing and no password was given
    """
    service = ProfileService()

    async with AsyncSessionLocal() as db:
        existing = await service.profile_repo.get_by_email(db, email)
        if existing is None:
            if not password:
                logger.error(f"No profile with email {email}; pass --password to create one")
                return False
            await service.register(db, email, password, full_name)
            logger.info(f"Registered {email}")

        try:
            profile = await service.set_role(db, email, ProfileRole.ADMIN)
        except HTTPException as e:
            logger.error(f"Could not promote {email}: {e.detail}")
            await db.rollback()
            return False

        await db.commit()
        logger.info(f"{profile.email} is now an admin")
        return True


def main():
    parser = argparse.ArgumentParser(description="Create or promote an onboarding admin")
    parser.add_argument("--email", required=True, help="Admin email address")
    parser.add_argument("--password", help="Password, used only when the profile does not exist")
    parser.add_argument("--full-name", default="Administrator", help="Display name for a new profile")
    args = parser.parse_args()

    ok = asyncio.run(create_admin(args.email, args.password, args.full_name))
    sys.exit(0 if ok else 1)


if __name__ == "__main__":
    main()
