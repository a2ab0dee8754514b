import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lightwaves.api import reveal_router, root_router, wallet_router
from lightwaves.api.dependencies import build_services
from lightwaves.config import Settings, get_settings
from lightwaves.models.failure import ConfigurationError, KnownError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler: one shared HTTP client for all upstreams."""
    settings: Settings = app.state.settings
    async with httpx.AsyncClient(timeout=settings.http_timeout, follow_redirects=True) as http:
        app.state.services = build_services(settings, http)
        logger.info(
            "%s started (environment=%s, discovery=%s)",
            settings.app_name,
            settings.environment,
            settings.discovery_strategy,
        )
        yield


async def known_error_handler(_request: Request, exc: KnownError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


async def validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request body", "details": problems},
    )


async def unexpected_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the API application.

    Exits the process if configuration is missing or invalid; there is no
    partial startup.
    """
    if settings is None:
        try:
            settings = get_settings()
        except ConfigurationError as e:
            logger.critical("CRITICAL ERROR: %s: %s", e.message, e.detail)
            raise SystemExit(1) from e

    app = FastAPI(title=settings.app_name, lifespan=lifespan)
    app.state.settings = settings

    app.include_router(root_router)
    app.include_router(wallet_router)
    app.include_router(reveal_router)

    app.add_exception_handler(KnownError, known_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    return app


app = create_app()
