"""FieldDesk report service - FastAPI entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from fielddesk.config import settings
from fielddesk.database import engine, Base, async_session
from fielddesk.middleware.error_capture import ErrorCaptureMiddleware
from fielddesk.api import (
    auth,
    dashboard,
    header_details,
    inspections,
    lookups,
    payouts,
)
from fielddesk.seed_users import seed_default_admin

import fielddesk.models  # noqa: F401  (register tables on Base.metadata)

logger = logging.getLogger(__name__)
logging.getLogger("fielddesk").setLevel(settings.log_level.upper())


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup (dev only); in prod the schema is managed externally."""
    if settings.environment == "development":
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        async with async_session() as db:
            await seed_default_admin(db)
    yield


limiter = Limiter(key_func=get_remote_address)

app = FastAPI(
    title="FieldDesk API",
    description="Field inspection and payout report tracking",
    version="0.1.0",
    lifespan=lifespan,
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


# ── Security headers middleware ──────────────────────────────────
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Adds standard security headers to every response."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if settings.environment != "development":
            response.headers["Strict-Transport-Security"] = "max-age=63072000; includeSubDomains"
        return response


# Error capture middleware
app.add_middleware(ErrorCaptureMiddleware)

app.add_middleware(SecurityHeadersMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type", "Accept", "X-Requested-With"],
)

# Routers
app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(dashboard.router, prefix="/api/dashboard", tags=["Dashboard"])
app.include_router(inspections.router, prefix="/api/inspections", tags=["Inspection Reports"])
app.include_router(payouts.router, prefix="/api/payouts", tags=["Payout Reports"])
app.include_router(header_details.router, prefix="/api/header-details", tags=["Header Details"])
app.include_router(lookups.router, prefix="/api/lookups", tags=["Lookups"])


@app.get("/api/health")
async def health_check():
    return {"status": "healthy", "service": "fielddesk-api", "version": "0.1.0"}
