"""Payout report endpoints: list, create, edit, calculate, export, email link."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from fielddesk.api.common import (
    XLSX_MEDIA_TYPE,
    http_error_for,
    load_header,
    raise_if_load_failed,
    raise_if_submit_failed,
    xlsx_headers,
)
from fielddesk.auth_utils import get_session_context
from fielddesk.config import settings
from fielddesk.database import get_db
from fielddesk.schemas import (
    MailLinkResponse,
    PayoutCalculationRequest,
    PayoutCalculationResponse,
    PayoutReportCreate,
    PayoutReportResponse,
    PayoutReportUpdate,
    PayoutStatus,
)
from fielddesk.screens import PayoutReportsScreen
from fielddesk.services.access_filter import SessionContext
from fielddesk.models.error_log import FailedAction
from fielddesk.services.error_logger import log_report_failure
from fielddesk.services.payout_calculator import WITHHOLDING_RATE, compute, to_cents
from fielddesk.services.record_store import RecordStore, RecordStoreError

logger = logging.getLogger(__name__)
router = APIRouter()

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


def _screen(db: AsyncSession, ctx: SessionContext) -> PayoutReportsScreen:
    return PayoutReportsScreen(RecordStore(db), ctx)


def _to_response(screen: PayoutReportsScreen, record) -> PayoutReportResponse:
    return PayoutReportResponse.model_validate(record).model_copy(
        update={"can_edit": screen.can_edit(record)}
    )


@router.get("", response_model=list[PayoutReportResponse])
async def list_payouts(
    month: Optional[str] = Query(None, pattern=MONTH_PATTERN),
    payment_status: Optional[PayoutStatus] = Query(None),
    ctx: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db),
):
    screen = _screen(db, ctx)
    screen.set_filters(month=month, payment_status=payment_status)
    await screen.load()
    raise_if_load_failed(screen)
    return [_to_response(screen, r) for r in screen.rows]


@router.post("", response_model=PayoutReportResponse, status_code=201)
async def create_payout(
    data: PayoutReportCreate,
    ctx: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db),
):
    screen = _screen(db, ctx)
    screen.new_form()
    for name, value in data.model_dump().items():
        screen.set_field(name, value)
    record = await screen.submit(refresh=False)
    raise_if_submit_failed(screen, record)
    return _to_response(screen, record)


@router.put("/{report_id}", response_model=PayoutReportResponse)
async def update_payout(
    report_id: str,
    data: PayoutReportUpdate,
    ctx: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db),
):
    """Edit a payout; derived amounts move only with loan amount or percentage."""
    screen = _screen(db, ctx)
    try:
        await screen.open_edit_by_id(report_id)
    except RecordStoreError as e:
        raise http_error_for(e)

    for name, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
        screen.set_field(name, value)
    record = await screen.submit(refresh=False)
    raise_if_submit_failed(screen, record)
    return _to_response(screen, record)


@router.post("/calculate", response_model=PayoutCalculationResponse)
async def calculate_payout(
    data: PayoutCalculationRequest,
    ctx: SessionContext = Depends(get_session_context),
):
    """Preview the derived amounts for a form being filled in."""
    amounts = compute(to_cents(data.loan_amount), to_cents(data.payout_percentage))
    return PayoutCalculationResponse(
        **amounts.as_record_fields(),
        withholding_rate=WITHHOLDING_RATE,
    )


@router.get("/export")
async def export_payouts(
    month: Optional[str] = Query(None, pattern=MONTH_PATTERN),
    payment_status: Optional[PayoutStatus] = Query(None),
    ctx: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db),
):
    screen = _screen(db, ctx)
    try:
        screen.set_filters(month=month, payment_status=payment_status)
        await screen.load()
        raise_if_load_failed(screen)
        content = screen.export(await load_header(db))
        return Response(
            content=content,
            media_type=XLSX_MEDIA_TYPE,
            headers=xlsx_headers(screen.export_filename()),
        )
    except HTTPException:
        raise
    except Exception as e:
        await log_report_failure(e, action=FailedAction.EXPORT, table=screen.table, ctx=ctx)
        raise HTTPException(status_code=503, detail="Could not build the export")


@router.get("/email-link", response_model=MailLinkResponse)
async def payouts_email_link(
    ctx: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db),
):
    screen = _screen(db, ctx)
    try:
        mailto = screen.email_link(settings.export_mail_recipient)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    return MailLinkResponse(mailto=mailto, filename=screen.export_filename())
