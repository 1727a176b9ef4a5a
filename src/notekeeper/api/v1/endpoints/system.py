"""Liveness and service information endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from notekeeper.core.settings import settings

router = APIRouter(tags=["system"])


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@router.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    info = {
        "name": settings.app_name,
        "version": settings.app_version,
    }
    if settings.enable_docs:
        info["docs"] = "/docs"
        info["redoc"] = "/redoc"
    return info
