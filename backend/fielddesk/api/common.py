"""Helpers shared by the report routers."""

from typing import Optional

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from fielddesk.models.header import HeaderDetails
from fielddesk.screens import Screen, ScreenState
from fielddesk.services.record_store import EditNotAllowed, RecordNotFound, RecordStoreError
from fielddesk.services import export_service


def raise_if_load_failed(screen: Screen) -> None:
    """A failed fetch surfaces as 503; the client keeps showing what it had."""
    if screen.state is ScreenState.FAILED:
        raise HTTPException(status_code=503, detail=screen.error or "Could not load records")


def raise_if_submit_failed(screen: Screen, record) -> None:
    if record is None:
        raise HTTPException(status_code=400, detail=screen.error or "Error saving report")


def http_error_for(exc: RecordStoreError) -> HTTPException:
    if isinstance(exc, RecordNotFound):
        return HTTPException(status_code=404, detail="Report not found")
    if isinstance(exc, EditNotAllowed):
        return HTTPException(status_code=403, detail=str(exc))
    return HTTPException(status_code=503, detail=str(exc))


async def load_header(db: AsyncSession) -> Optional[HeaderDetails]:
    result = await db.execute(select(HeaderDetails).limit(1))
    return result.scalar_one_or_none()


def xlsx_headers(filename: str) -> dict:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


XLSX_MEDIA_TYPE = export_service.XLSX_CONTENT_TYPE
