"""Record failures to the ``fielddesk.errors`` logger and the error_logs table.

Report screens call ``log_report_failure`` when the store rejects a fetch or a
save. The middleware and the export routes call ``log_error`` /
``log_error_standalone`` for unexpected errors. The standalone variant writes
through its own session, so a report transaction that is being rolled back
does not take the error record with it.
"""

import logging
import traceback
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from fielddesk.database import async_session
from fielddesk.models.error_log import ErrorLog, ErrorSeverity, FailedAction
from fielddesk.services.access_filter import SessionContext

logger = logging.getLogger("fielddesk.errors")


def _printable(value: Any, limit: int) -> str:
    text = "".join(ch if (ch >= " " or ch in "\n\r\t") else " " for ch in str(value))
    return text[:limit]


def _origin(exc: BaseException) -> Optional[str]:
    tb = exc.__traceback__
    if tb is None:
        return None
    while tb.tb_next:
        tb = tb.tb_next
    code = tb.tb_frame.f_code
    return _printable(f"{code.co_filename}:{code.co_name}:{tb.tb_lineno}", 500)


def build_entry(
    exc: BaseException,
    *,
    severity: ErrorSeverity = ErrorSeverity.ERROR,
    action: FailedAction = FailedAction.REQUEST,
    request_path: Optional[str] = None,
    **context: Any,
) -> ErrorLog:
    """An unsaved ErrorLog row for ``exc``.

    ``context`` takes the remaining ErrorLog columns: report_table, record_id,
    user_id, request_method, status_code, response_time_ms.
    """
    formatted = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return ErrorLog(
        severity=severity,
        action=action,
        error_type=type(exc).__name__,
        message=_printable(exc, 2000),
        traceback=_printable(formatted, 10000),
        origin=_origin(exc),
        request_path=_printable(request_path, 500) if request_path else None,
        **context,
    )


def _summary(entry: ErrorLog) -> str:
    if entry.request_path:
        where = f"{entry.request_method or '?'} {entry.request_path}"
    elif entry.report_table:
        where = f"{entry.action.value} {entry.report_table}"
        if entry.record_id:
            where += f" id={entry.record_id}"
    else:
        where = entry.action.value
    return f"{where}: {entry.error_type}: {entry.message}"


async def log_error(
    exc: BaseException,
    *,
    db: Optional[AsyncSession] = None,
    **fields: Any,
) -> Optional[ErrorLog]:
    """Log ``exc`` and, given a session, add it to error_logs.

    Returns the flushed row, or None when no session was given or the write
    failed.
    """
    entry = build_entry(exc, **fields)
    level = logging.WARNING if entry.severity is ErrorSeverity.WARNING else logging.ERROR
    logger.log(level, _summary(entry), exc_info=exc)

    if db is None:
        return None
    try:
        db.add(entry)
        await db.flush()
    except SQLAlchemyError as db_err:
        logger.warning("Could not persist error record: %s", db_err)
        return None
    return entry


async def log_error_standalone(exc: BaseException, **fields: Any) -> Optional[ErrorLog]:
    """``log_error`` through a fresh session that is committed on its own."""
    try:
        async with async_session() as db:
            entry = await log_error(exc, db=db, **fields)
            if entry is not None:
                await db.commit()
            return entry
    except (SQLAlchemyError, OSError) as db_err:
        logger.warning("Standalone error record failed: %s", db_err)
        return None


async def log_report_failure(
    exc: BaseException,
    *,
    action: FailedAction,
    table: str,
    ctx: SessionContext,
    record_id: Optional[str] = None,
) -> Optional[ErrorLog]:
    """Record a fetch or save the record store rejected for ``table``."""
    severity = ErrorSeverity.WARNING if action is FailedAction.SAVE else ErrorSeverity.ERROR
    return await log_error_standalone(
        exc,
        severity=severity,
        action=action,
        report_table=table,
        record_id=record_id,
        user_id=ctx.user_id,
    )
