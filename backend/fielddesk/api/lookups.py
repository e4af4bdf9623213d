"""Fixed lookup tables for form selects and filters."""

from fastapi import APIRouter

from fielddesk.constants import PAYMENT_STATUSES, PAYOUT_STATUSES, STATES
from fielddesk.schemas import LookupsResponse

router = APIRouter()


@router.get("", response_model=LookupsResponse)
async def get_lookups():
    return LookupsResponse(
        states=list(STATES),
        payment_statuses=list(PAYMENT_STATUSES),
        payout_statuses=list(PAYOUT_STATUSES),
    )
