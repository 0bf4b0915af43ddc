"""
FastAPI application factory and API package.

Run with:
    uvicorn safeguard_mapper.api:app --port 8080

Or via the CLI:
    python -m safeguard_mapper serve
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from safeguard_mapper.api.routes import api_router, get_mapping_service, health_router
from safeguard_mapper.config import get_settings
from safeguard_mapper.exceptions import MappingError, SafeguardNotFoundError

logger = logging.getLogger(__name__)


async def periodic_cache_cleanup(app: FastAPI, interval_seconds: float) -> None:
    """Sweep the catalog cache every interval until cancelled."""
    while True:
        await asyncio.sleep(interval_seconds)
        service = app.dependency_overrides.get(get_mapping_service, get_mapping_service)()
        try:
            service.cleanup_cache()
        except Exception:
            logger.exception("Background cache cleanup failed")


def create_app() -> FastAPI:
    """Application factory — create and configure the FastAPI instance."""
    settings = get_settings()

    application = FastAPI(
        title=settings.app_name,
        description="Maps vendor capability claims to CIS safeguard capability roles",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    application.include_router(health_router, tags=["Health"])
    application.include_router(api_router, prefix="/api", tags=["Safeguards"])

    @application.exception_handler(MappingError)
    async def mapping_error_handler(request: Request, exc: MappingError):
        status_code = 404 if isinstance(exc, SafeguardNotFoundError) else 400
        logger.info(f"{request.method} {request.url.path} → {status_code}: {exc.message}")
        return JSONResponse(
            status_code=status_code,
            content={
                "error": exc.message,
                "code": exc.code,
                "guidance": exc.guidance,
                "details": exc.details,
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )

    @application.on_event("startup")
    async def startup():
        application.state.cleanup_task = asyncio.create_task(
            periodic_cache_cleanup(application, settings.background_cleanup_seconds)
        )
        logger.info(f"Starting {settings.app_name} API")

    @application.on_event("shutdown")
    async def shutdown():
        task = getattr(application.state, "cleanup_task", None)
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        logger.info(f"Stopped {settings.app_name} API")

    return application


# Module-level instance for `uvicorn safeguard_mapper.api:app`
app = create_app()
