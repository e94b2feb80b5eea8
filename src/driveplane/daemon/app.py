"""Starlette application factory."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from driveplane.core.errors import InternalError
from driveplane.daemon.middleware import RequestIdMiddleware
from driveplane.daemon.routes import create_routes, error_response

if TYPE_CHECKING:
    from driveplane.config.models import SearchConfig
    from driveplane.index.ops import SearchCoordinator

logger = structlog.get_logger()


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    """Render uncaught handler errors in the standard error envelope."""
    logger.exception("request_failed", path=request.url.path)
    return error_response(InternalError.unexpected(type(exc).__name__))


def create_app(coordinator: SearchCoordinator, search_config: SearchConfig) -> Starlette:
    """Create the Starlette application around a coordinator."""
    app = Starlette(
        routes=create_routes(coordinator, search_config),
        middleware=[Middleware(RequestIdMiddleware)],
        exception_handlers={Exception: _unhandled_error},
    )
    app.state.coordinator = coordinator
    return app
