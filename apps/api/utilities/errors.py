import typing
from logging import getLogger

from litestar import Request, Response
from litestar.exceptions import HTTPException
from litestar.status_codes import HTTP_500_INTERNAL_SERVER_ERROR

log = getLogger(__name__)

__all__ = [
    "CustomHTTPException",
    "DomainError",
    "http_exception_handler",
    "internal_error_handler",
]


class CustomHTTPException(HTTPException): ...


def http_exception_handler(request: Request, exc: HTTPException) -> Response:
    """Render every HTTP error with the ``{success, message}`` envelope.

    Dict ``extra`` values are merged into the body so handlers can attach
    fields such as ``errors`` or ``requiresVerification``.
    """
    content: dict[str, typing.Any] = {"success": False, "message": exc.detail}
    if isinstance(exc.extra, dict):
        content.update(exc.extra)
    elif exc.extra:
        content["errors"] = exc.extra
    return Response(content, status_code=exc.status_code, headers=exc.headers)


def internal_error_handler(request: Request, exc: Exception) -> Response:
    """Log an unexpected exception and answer with a detail-free 500."""
    log.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return Response(
        {"success": False, "message": "Internal server error"},
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
    )


class DomainError(Exception):
    """Base exception for domain-level business rule violations.

    Attributes:
        message: Human-readable error message.
        context: Additional context about the error.

    """

    def __init__(self, message: str, **context: typing.Any) -> None:  # noqa: ANN401
        """Initialize domain error.

        Args:
            message: Human-readable error message.
            **context: Additional context (e.g., field names, identifiers).

        """
        super().__init__(message)
        self.message = message
        self.context = context
