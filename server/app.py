from __future__ import annotations
# revealgate - Password-gated reveal.js server
# Copyright (C) 2026 revealgate Authors
# SPDX-License-Identifier: Apache-2.0
#
# This file is part of revealgate, licensed under Apache-2.0.
# See LICENSE for the full license text.


import logging
import time
import uuid
from contextlib import asynccontextmanager

import structlog
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse as StarletteJSONResponse

from core.auth.cache import REFRESH_INTERVAL_MINUTES, CredentialCache
from core.auth.gate import AccessGate
from core.auth.identity import InstanceIdentity
from core.auth.session import SessionAuthenticator
from core.auth.source import CredentialSource, GoogleSheetsSource
from core.config.models import RevealGateConfig
from core.exceptions import SourceUnavailableError, StartupError
from core.logging_config import get_request_id, set_request_id
from core.paths import REVEALJS_DIR
from core.version import __version__
from server.routes.deck import create_deck_router
from server.routes.login import create_login_router

logger = logging.getLogger("revealgate.server")

# Paths to exclude from request logging (packaged assets, favicon)
_NOISY_PREFIXES = ("/revealjs/", "/favicon.ico")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every HTTP request with method, path, status, and duration.

    Automatically binds a ``request_id`` into structlog contextvars so that
    all log records emitted during request processing carry the ID.
    """

    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        structlog.contextvars.clear_contextvars()
        request_id = request.headers.get(
            "X-Request-ID", uuid.uuid4().hex[:12],
        )
        set_request_id(request_id)
        structlog.contextvars.bind_contextvars(
            method=request.method,
            path=request.url.path,
        )

        start = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - start) * 1000, 1)

        response.headers["X-Request-ID"] = request_id

        if not request.url.path.startswith(_NOISY_PREFIXES):
            req_logger = logging.getLogger("revealgate.request")
            req_logger.info(
                "request %s %s -> %d (%.1fms)",
                request.method,
                request.url.path,
                response.status_code,
                duration_ms,
            )

        return response


def build_gate(
    config: RevealGateConfig,
    source: CredentialSource | None = None,
    identity: InstanceIdentity | None = None,
) -> tuple[AccessGate, CredentialCache | None]:
    """Wire the access gate; protection is on iff a credential source exists."""
    if source is None and config.credentials.configured:
        source = GoogleSheetsSource.from_config(config.credentials)
    if source is None:
        logger.info("No credential source configured; password protection disabled")
        return AccessGate(), None

    cache = CredentialCache(
        source,
        pass_column=config.credentials.pass_column,
        expire_column=config.credentials.expire_column,
        timeout_s=config.credentials.timeout_s,
    )
    identity = identity or InstanceIdentity.generate()
    return AccessGate(SessionAuthenticator(cache, identity)), cache


@asynccontextmanager
async def lifespan(app: FastAPI):
    cache: CredentialCache | None = app.state.credential_cache
    scheduler: AsyncIOScheduler | None = None

    if cache is not None:
        # The gate must not go live with an empty allow-list.
        try:
            credentials = await cache.refresh()
        except SourceUnavailableError as exc:
            logger.error("Initial credential refresh failed: %s", exc)
            raise StartupError(
                f"Password protection is configured but the credential source is unusable: {exc}"
            ) from exc

        scheduler = AsyncIOScheduler()
        scheduler.add_job(
            cache.refresh_safely,
            IntervalTrigger(minutes=REFRESH_INTERVAL_MINUTES),
            id="credential_refresh",
            name="System: Credential Cache Refresh",
            replace_existing=True,
        )
        scheduler.start()
        app.state.scheduler = scheduler
        logger.info(
            "Password protection enabled: %d password(s), refresh every %d min",
            len(credentials), REFRESH_INTERVAL_MINUTES,
        )
    else:
        logger.info("Server started without password protection")
    yield
    if scheduler is not None:
        scheduler.shutdown(wait=False)
    logger.info("Server stopped")


def create_app(
    config: RevealGateConfig,
    *,
    source: CredentialSource | None = None,
    identity: InstanceIdentity | None = None,
) -> FastAPI:
    app = FastAPI(title="revealgate", version=__version__, lifespan=lifespan)

    gate, cache = build_gate(config, source=source, identity=identity)
    app.state.config = config
    app.state.gate = gate
    app.state.credential_cache = cache

    # ── Global exception handler ────────────────────────────
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception(
            "Unhandled exception (request_id=%s): %s", get_request_id(), exc,
        )
        return StarletteJSONResponse(
            {"error": "Internal server error"}, status_code=500,
        )

    # ── Request logging middleware ─────────────────────────
    app.add_middleware(RequestLoggingMiddleware)

    # ── Cache control for gated content ────────────────────
    # Gated responses must not be served from a shared cache to a
    # visitor without a session.
    @app.middleware("http")
    async def gated_cache_control(request: Request, call_next):  # type: ignore[no-untyped-def]
        response = await call_next(request)
        if request.app.state.gate.protected and not request.url.path.startswith("/revealjs/"):
            response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"
        return response

    # ── Route registration ─────────────────────────────────
    # Order matters: the deck router's catch-all must come last.
    if gate.protected:
        app.include_router(create_login_router())

    if REVEALJS_DIR.exists():
        app.mount(
            "/revealjs",
            StaticFiles(directory=str(REVEALJS_DIR)),
            name="revealjs",
        )

    app.include_router(create_deck_router())

    return app
