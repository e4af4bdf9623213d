"""Company header details used on exported workbooks."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fielddesk.api.common import load_header
from fielddesk.auth_utils import get_current_profile, require_roles
from fielddesk.config import settings
from fielddesk.database import get_db
from fielddesk.models.header import HeaderDetails
from fielddesk.models.profile import Role, UserProfile
from fielddesk.schemas import HeaderDetailsResponse, HeaderDetailsUpdate

router = APIRouter()


@router.get("", response_model=HeaderDetailsResponse)
async def get_header_details(
    profile: UserProfile = Depends(get_current_profile),
    db: AsyncSession = Depends(get_db),
):
    header = await load_header(db)
    if header is None:
        return HeaderDetailsResponse(company_name=settings.company_name)
    return header


@router.put("", response_model=HeaderDetailsResponse)
async def update_header_details(
    data: HeaderDetailsUpdate,
    profile: UserProfile = Depends(require_roles(Role.ADMIN)),
    db: AsyncSession = Depends(get_db),
):
    header = await load_header(db)
    if header is None:
        header = HeaderDetails()
        db.add(header)
    for key, value in data.model_dump().items():
        setattr(header, key, value)
    await db.flush()
    await db.refresh(header)
    return header
