from __future__ import annotations

import time
from contextlib import suppress
from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from pickandgo.client.http import BackendClient
from pickandgo.core.config import ConfigResolver
from pickandgo.core.errors import (
    AgreementNotAcceptedError,
    ApiError,
    AuthError,
    PickAndGoError,
    WizardError,
)
from pickandgo.core.logging import get_logger
from pickandgo.core.session import SessionContext

from .auth import mount_auth
from .checkout import mount_checkout
from .wizards import WizardRegistry, mount_vehicle_wizards


def _status_for(exc: PickAndGoError) -> int:
    if isinstance(exc, ApiError):
        return 502
    if isinstance(exc, AuthError):
        return 401
    if isinstance(exc, (WizardError, AgreementNotAcceptedError)):
        return 409
    return 400


def create_app(
    *,
    config_resolver: ConfigResolver | None = None,
    backend: BackendClient | None = None,
    session: SessionContext | None = None,
) -> FastAPI:
    """Build the web application.

    Args:
        config_resolver: Resolver for api/web settings (default: ConfigResolver())
        backend: Backend client (default: built from the resolver)
        session: Signed-in user context shared by all routes
    """
    resolver = config_resolver or ConfigResolver()

    app = FastAPI(title="Pick & Go")
    app.state.config_resolver = resolver
    app.state.backend = backend or BackendClient.from_resolver(resolver)
    app.state.session = session or SessionContext()
    app.state.wizards = WizardRegistry()
    app.state.web_logger = get_logger("pickandgo.web")

    @app.middleware("http")
    async def _log_route_boundary(request: Request, call_next: Any) -> Any:
        logger = request.app.state.web_logger
        op = f"{request.method} {request.url.path}"
        t0 = time.monotonic()
        logger.debug(f"{op}: start")
        try:
            response = await call_next(request)
        except Exception as e:
            dur_ms = int((time.monotonic() - t0) * 1000)
            with suppress(Exception):
                logger.error(f"{op}: failed {type(e).__name__}: {e} ({dur_ms} ms)")
            raise
        dur_ms = int((time.monotonic() - t0) * 1000)
        logger.verbose(f"{op}: {response.status_code} ({dur_ms} ms)")
        return response

    @app.exception_handler(PickAndGoError)
    async def _pickandgo_error(request: Request, exc: PickAndGoError) -> JSONResponse:
        content: dict[str, Any] = {"detail": exc.message}
        if exc.suggestion:
            content["suggestion"] = exc.suggestion
        if isinstance(exc, ApiError) and exc.status_code is not None:
            content["upstream_status"] = exc.status_code
        return JSONResponse(status_code=_status_for(exc), content=content)

    @app.on_event("shutdown")
    async def _close_backend() -> None:
        await app.state.backend.aclose()

    mount_auth(app)
    mount_vehicle_wizards(app)
    mount_checkout(app)

    @app.get("/api/health")
    def api_health() -> dict[str, Any]:
        return {"ok": True}

    return app
