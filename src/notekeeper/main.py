"""Main entry point for the notekeeper application."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from notekeeper.api.v1 import auth_router, notes_router, system_router, users_router
from notekeeper.core.errors import AccountError
from notekeeper.core.logging import RequestLoggingMiddleware, configure_logging
from notekeeper.core.settings import settings
from notekeeper.db.session import create_tables
from notekeeper.db.time import utcnow
from notekeeper.schemas.common import ErrorResponse
from notekeeper.services.mailer import get_notifier

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    configure_logging(settings)
    if settings.auto_create_tables:
        logger.info("Creating database tables")
        await create_tables()
    logger.info("%s %s started", settings.app_name, settings.app_version)
    yield
    notifier = get_notifier()
    if notifier.pending:
        logger.info("Waiting for %d pending email deliveries", notifier.pending)
    await notifier.drain()


# Initialize FastAPI app
app = FastAPI(
    title=f"{settings.app_name} API",
    description="Notes service with e-mailed one-time login codes",
    version=settings.app_version,
    debug=settings.debug,
    lifespan=lifespan,
    docs_url="/docs" if settings.enable_docs else None,
    redoc_url="/redoc" if settings.enable_docs else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)
app.add_middleware(GZipMiddleware)
app.add_middleware(RequestLoggingMiddleware)


@app.exception_handler(AccountError)
async def account_error_handler(request: Request, exc: AccountError) -> JSONResponse:
    """Render domain errors with their own status and a uniform body."""
    logger.warning(
        "%s %s failed with %d %s: %s",
        request.method,
        request.url.path,
        exc.status_code,
        exc.name,
        exc.detail,
    )
    body = ErrorResponse(
        statusCode=exc.status_code,
        error=exc.name,
        detail=exc.detail,
        path=request.url.path,
        timestamp=utcnow().isoformat(),
    ).model_dump()
    body.update(exc.extra())
    return JSONResponse(status_code=exc.status_code, content=body)


# Include API routers
app.include_router(auth_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")
app.include_router(notes_router, prefix="/api/v1")
app.include_router(system_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("notekeeper.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
