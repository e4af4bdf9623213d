"""Dashboard endpoint: counts, loan volume, payout status split, regions."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from fielddesk.api.common import raise_if_load_failed
from fielddesk.auth_utils import get_session_context
from fielddesk.database import get_db
from fielddesk.schemas import DashboardResponse
from fielddesk.screens import DashboardScreen
from fielddesk.services.access_filter import SessionContext
from fielddesk.services.record_store import RecordStore

router = APIRouter()


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    ctx: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db),
):
    screen = DashboardScreen(RecordStore(db), ctx)
    summary = await screen.load()
    raise_if_load_failed(screen)
    return DashboardResponse(
        greeting_name=screen.greeting_name,
        inspections=summary.inspections,
        volume=summary.volume,
        total_payouts=summary.total_payouts,
        pending=summary.pending,
        paid=summary.paid,
        regions=summary.region_chart,
        payout_status=summary.payout_status_chart,
    )
