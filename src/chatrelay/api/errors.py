"""Error responses for the HTTP boundary.

Every failure reaches the client as ``{"error": <generic message>}``.
The detail goes to the server log only.
"""

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict

from ..errors import (
    AuthenticationError,
    ChatRelayError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from ..logger import get_logger

logger = get_logger(__name__)


class ErrorResponder(BaseModel):
    """Builds standardized JSON error responses for one endpoint.

    Attributes:
        logger: Logger receiving the error detail
        operation: Endpoint name, added to every log event
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    logger: Any
    operation: str

    def _create_response(self, message: str, status_code: int) -> JSONResponse:
        return JSONResponse(content={"error": message}, status_code=status_code)

    def handle_bad_request(self, e: Exception, message: str) -> JSONResponse:
        self.logger.warning(message, operation=self.operation, error=str(e))
        return self._create_response(message, status.HTTP_400_BAD_REQUEST)

    def handle_unauthorized(self, e: Exception, message: str) -> JSONResponse:
        self.logger.warning(message, operation=self.operation, error=str(e))
        return self._create_response(message, status.HTTP_401_UNAUTHORIZED)

    def handle_not_found_error(self, e: Exception, message: str) -> JSONResponse:
        self.logger.warning(message, operation=self.operation, error=str(e))
        return self._create_response(message, status.HTTP_404_NOT_FOUND)

    def handle_exception(self, e: Exception, message: str, **extra: Any) -> JSONResponse:
        """Log the full detail of an internal or upstream failure."""
        if isinstance(e, UpstreamError):
            extra.update(upstream_status=e.status_code, upstream_body=e.body)
        self.logger.error(message, operation=self.operation, error=str(e), exc_info=e, **extra)
        return self._create_response(message, status.HTTP_500_INTERNAL_SERVER_ERROR)

    def respond(self, e: Exception, message: str, **extra: Any) -> JSONResponse:
        """Map an error from the taxonomy onto its response."""
        if isinstance(e, ValidationError):
            return self.handle_bad_request(e, str(e))
        if isinstance(e, NotFoundError):
            return self.handle_not_found_error(e, "Conversation not found")
        if isinstance(e, AuthenticationError):
            return self.handle_unauthorized(e, str(e))
        return self.handle_exception(e, message, **extra)


def register_exception_handlers(app: FastAPI) -> None:
    """Install handlers for errors raised outside route bodies."""

    @app.exception_handler(RequestValidationError)
    async def _malformed_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.warning("Malformed request body", path=request.url.path, errors=exc.errors())
        return JSONResponse(
            content={"error": "Malformed request body"},
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    @app.exception_handler(AuthenticationError)
    async def _unauthorized(request: Request, exc: AuthenticationError) -> JSONResponse:
        logger.warning("Rejected request", path=request.url.path, reason=str(exc))
        return JSONResponse(
            content={"error": str(exc)},
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    @app.exception_handler(ChatRelayError)
    async def _unhandled(request: Request, exc: ChatRelayError) -> JSONResponse:
        logger.error("Unhandled error", path=request.url.path, error=str(exc), exc_info=exc)
        return JSONResponse(
            content={"error": "Internal server error"},
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
