"""Middleware that records unhandled request errors and unexpected 5xx responses.

503 responses are left out: they come from record store failures the report
screens have already recorded with their table and record id. 4xx responses go
to the logger only.
"""

from __future__ import annotations

import logging
import time
from typing import Optional

from fastapi import Request, Response
from jose import JWTError
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import JSONResponse

from fielddesk.auth_utils import decode_token
from fielddesk.models.error_log import ErrorSeverity, FailedAction
from fielddesk.services.error_logger import log_error_standalone

logger = logging.getLogger("fielddesk.middleware")


def _user_id_from(request: Request) -> Optional[str]:
    auth_header = request.headers.get("authorization", "")
    if not auth_header.startswith("Bearer "):
        return None
    try:
        return decode_token(auth_header[7:]).get("sub") or None
    except JWTError:
        return None


class ErrorCaptureMiddleware(BaseHTTPMiddleware):
    """Turns unhandled exceptions into a JSON 500 and records them."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start = time.time()

        try:
            response = await call_next(request)
        except Exception as exc:
            await log_error_standalone(
                exc,
                severity=ErrorSeverity.CRITICAL,
                action=FailedAction.REQUEST,
                request_method=request.method,
                request_path=request.url.path,
                status_code=500,
                response_time_ms=round((time.time() - start) * 1000, 2),
                user_id=_user_id_from(request),
            )
            return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})

        elapsed_ms = round((time.time() - start) * 1000, 2)
        if response.status_code >= 500 and response.status_code != 503:
            await log_error_standalone(
                RuntimeError(f"HTTP {response.status_code} on {request.method} {request.url.path}"),
                action=FailedAction.REQUEST,
                request_method=request.method,
                request_path=request.url.path,
                status_code=response.status_code,
                response_time_ms=elapsed_ms,
                user_id=_user_id_from(request),
            )
        elif 400 <= response.status_code < 500 and response.status_code not in (401, 403):
            logger.warning(
                "HTTP %s on %s %s (%.2f ms)",
                response.status_code, request.method, request.url.path, elapsed_ms,
            )
        return response
