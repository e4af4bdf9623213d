"""Authentication endpoints: login, refresh, me."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from jose import JWTError
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fielddesk.auth_utils import (
    decode_token,
    get_current_profile,
    tokens_for,
    verify_password,
)
from fielddesk.database import get_db
from fielddesk.models.profile import UserProfile
from fielddesk.schemas import ProfileLogin, ProfileResponse, RefreshRequest, TokenResponse

logger = logging.getLogger(__name__)
router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


@router.post("/login", response_model=TokenResponse)
@limiter.limit("30/minute")
async def login(
    data: ProfileLogin,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(UserProfile).where(UserProfile.email == data.email))
    profile = result.scalar_one_or_none()

    if profile is None or not verify_password(data.password, profile.hashed_password):
        logger.info("Failed login for %s", data.email)
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if not profile.is_status_active():
        raise HTTPException(status_code=403, detail=f"Account is {profile.status}")

    access_token, refresh_token = tokens_for(profile)
    logger.info("Login successful: %s", profile.email)
    return TokenResponse(access_token=access_token, refresh_token=refresh_token)


@router.post("/refresh", response_model=TokenResponse)
@limiter.limit("30/minute")
async def refresh(
    data: RefreshRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    invalid = HTTPException(status_code=401, detail="Invalid refresh token")
    try:
        payload = decode_token(data.refresh_token)
    except JWTError:
        raise invalid
    if payload.get("type") != "refresh" or not payload.get("sub"):
        raise invalid

    result = await db.execute(select(UserProfile).where(UserProfile.user_id == payload["sub"]))
    profile = result.scalar_one_or_none()
    if profile is None:
        raise invalid
    if not profile.is_status_active():
        raise HTTPException(status_code=403, detail=f"Account is {profile.status}")

    access_token, refresh_token = tokens_for(profile)
    return TokenResponse(access_token=access_token, refresh_token=refresh_token)


@router.get("/me", response_model=ProfileResponse)
async def me(profile: UserProfile = Depends(get_current_profile)):
    return ProfileResponse(
        user_id=profile.user_id,
        role=profile.role.value,
        full_name=profile.full_name,
        email=profile.email,
        status=profile.status,
        is_admin=profile.is_admin,
    )
