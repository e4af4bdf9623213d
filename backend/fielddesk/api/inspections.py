"""Field inspection report endpoints: list, create, edit, export, email link."""

import logging
from datetime import date
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
    InspectionReportCreate,
    InspectionReportResponse,
    InspectionReportUpdate,
    MailLinkResponse,
    PaymentStatus,
)
from fielddesk.screens import InspectionReportsScreen
from fielddesk.services.access_filter import SessionContext
from fielddesk.models.error_log import FailedAction
from fielddesk.services.error_logger import log_report_failure
from fielddesk.services.record_store import RecordStore, RecordStoreError

logger = logging.getLogger(__name__)
router = APIRouter()


def _screen(db: AsyncSession, ctx: SessionContext) -> InspectionReportsScreen:
    return InspectionReportsScreen(RecordStore(db), ctx)


def _to_response(screen: InspectionReportsScreen, record) -> InspectionReportResponse:
    return InspectionReportResponse.model_validate(record).model_copy(
        update={"can_edit": screen.can_edit(record)}
    )


@router.get("", response_model=list[InspectionReportResponse])
async def list_inspections(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    payment_status: Optional[PaymentStatus] = Query(None),
    ctx: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db),
):
    """Inspection reports visible to the caller, optionally filtered."""
    screen = _screen(db, ctx)
    screen.set_filters(start_date=start_date, end_date=end_date, payment_status=payment_status)
    await screen.load()
    raise_if_load_failed(screen)
    return [_to_response(screen, r) for r in screen.rows]


@router.post("", response_model=InspectionReportResponse, status_code=201)
async def create_inspection(
    data: InspectionReportCreate,
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


@router.put("/{report_id}", response_model=InspectionReportResponse)
async def update_inspection(
    report_id: str,
    data: InspectionReportUpdate,
    ctx: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db),
):
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


@router.get("/export")
async def export_inspections(
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    payment_status: Optional[PaymentStatus] = Query(None),
    ctx: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db),
):
    """Download the filtered list as an Excel workbook."""
    screen = _screen(db, ctx)
    try:
        screen.set_filters(start_date=start_date, end_date=end_date, payment_status=payment_status)
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
async def inspections_email_link(
    ctx: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db),
):
    """Mail composer link for sending the exported workbook (administrators)."""
    screen = _screen(db, ctx)
    try:
        mailto = screen.email_link(settings.export_mail_recipient)
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    return MailLinkResponse(mailto=mailto, filename=screen.export_filename())
