"""
FastAPI application factory.

All routes live under ``/api``. Errors are always rendered as
``{"error": message}``; unknown paths get a 404 with
"Endpoint not found".
"""

import logging
from typing import Optional

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from expense_tracker import __version__
from expense_tracker.api import costs, users
from expense_tracker.api.responses import error_response
from expense_tracker.config import get_settings
from expense_tracker.orchestrator import AppComponents, create_app_components


logger = structlog.get_logger(__name__)

ENDPOINT_NOT_FOUND = "Endpoint not found"


def create_app(components: Optional[AppComponents] = None) -> FastAPI:
    """
    Build the API.

    Args:
        components: Pre-built components (tests inject an in-memory store).
                    If None, they are created from settings.
    """
    settings = get_settings().app
    logging.basicConfig(level=settings.log_level, format="%(message)s")

    app = FastAPI(
        title="Expense Tracker API",
        version=__version__,
        debug=settings.debug_mode,
    )
    app.state.components = components or create_app_components()

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
            return error_response(ENDPOINT_NOT_FOUND, status.HTTP_404_NOT_FOUND)
        return error_response(str(exc.detail), exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def request_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid request.") if errors else "Invalid request."
        return error_response(message, status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception):
        logger.exception("unhandled_error", path=request.url.path)
        return error_response(str(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)

    # /api/users before the catch-all /api/{id} routes
    app.include_router(users.router, prefix="/api/users", tags=["users"])
    app.include_router(costs.router, prefix="/api", tags=["costs"])

    logger.info(
        "app_created",
        environment=settings.app_environment,
        storage_backend=settings.storage_backend,
    )
    return app
