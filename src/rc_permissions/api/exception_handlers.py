"""
FastAPI exception handlers for rc-permissions errors.

Maps engine exceptions to HTTP responses by type, so routes can call the
permission service and let failures propagate.
"""
from typing import Any, Callable, Dict, Optional
import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from ..core.exceptions import (
    RCPermissionsError,
    HttpStatusMapper,
    create_error_response,
)

logger = logging.getLogger(__name__)

ResponseFormatter = Callable[[RCPermissionsError], Dict[str, Any]]


class ExceptionHandlerRegistry:
    """Registers handlers translating library exceptions into JSON responses."""

    def __init__(
        self,
        response_formatter: Optional[ResponseFormatter] = None,
        status_mapper: Optional[HttpStatusMapper] = None,
        is_production: bool = True,
    ):
        self.response_formatter = response_formatter or create_error_response
        self.status_mapper = status_mapper or HttpStatusMapper()
        self.is_production = is_production

    def register_handlers(self, app: FastAPI) -> None:
        """Register exception handlers for the application.

        Args:
            app: FastAPI application instance
        """
        @app.exception_handler(RCPermissionsError)
        async def rc_permissions_exception_handler(request: Request, exc: RCPermissionsError):
            """Handle engine exceptions."""
            status_code = self.status_mapper.get_status_code(exc)
            if status_code >= 500:
                logger.error(f"{exc.__class__.__name__} on {request.url.path}: {exc}")
            return JSONResponse(
                status_code=status_code,
                content=self.response_formatter(exc),
            )

        @app.exception_handler(Exception)
        async def general_exception_handler(request: Request, exc: Exception):
            """Handle unexpected exceptions."""
            logger.error(f"Unhandled exception: {exc}", exc_info=True)

            message = "An unexpected error occurred" if self.is_production else str(exc)
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=self.response_formatter(RCPermissionsError(message, "INTERNAL_ERROR")),
            )


def register_exception_handlers(
    app: FastAPI,
    response_formatter: Optional[ResponseFormatter] = None,
    is_production: bool = True,
) -> None:
    """
    Register exception handlers for a FastAPI application.

    Args:
        app: FastAPI application instance
        response_formatter: Custom response formatter function
        is_production: Hide messages of unexpected exceptions
    """
    registry = ExceptionHandlerRegistry(response_formatter, is_production=is_production)
    registry.register_handlers(app)
