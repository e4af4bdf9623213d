"""Seed the first administrator profile for development databases."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fielddesk.auth_utils import hash_password
from fielddesk.config import settings
from fielddesk.models.profile import Role, UserProfile

logger = logging.getLogger(__name__)


async def seed_default_admin(db: AsyncSession) -> UserProfile | None:
    """Create the seed administrator unless it exists or no password is configured."""
    if not settings.seed_admin_password:
        logger.info("SEED_ADMIN_PASSWORD not set; skipping admin seed")
        return None

    existing = await db.execute(
        select(UserProfile).where(UserProfile.email == settings.seed_admin_email)
    )
    if existing.scalar_one_or_none():
        return None

    admin = UserProfile(
        email=settings.seed_admin_email,
        hashed_password=hash_password(settings.seed_admin_password),
        full_name="System Administrator",
        role=Role.ADMIN,
    )
    db.add(admin)
    await db.commit()
    logger.info("Seeded administrator %s", admin.email)
    return admin
