"""
Custom exceptions and handlers for consistent API error responses.

Services raise the typed errors below; the handlers registered on the app are
the only place they are turned into HTTP responses. Every failure body has the
shape ``{"message": ..., "errors": {...}}``.
"""

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)


class APIError(HTTPException):
    """Base API error with consistent structure"""

    def __init__(
        self,
        status_code: int,
        detail: str,
        error_code: Optional[str] = None,
        errors: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.error_code = error_code
        self.errors = errors


class InvalidRequestError(APIError):
    """Malformed or semantically invalid input"""

    def __init__(
        self,
        detail: str = "Invalid request",
        error_code: str = "INVALID_REQUEST",
        errors: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            error_code=error_code,
            errors=errors,
        )


class UnauthorizedError(APIError):
    """Authentication error"""

    def __init__(
        self, detail: str = "Unauthorized", error_code: str = "UNAUTHORIZED"
    ):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            error_code=error_code,
            headers={"WWW-Authenticate": "Bearer"},
        )


class ForbiddenError(APIError):
    """Permission denied error"""

    def __init__(self, detail: str = "Forbidden", error_code: str = "FORBIDDEN"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN, detail=detail, error_code=error_code
        )


class NotFoundError(APIError):
    """Resource not found error"""

    def __init__(
        self, detail: str = "Resource not found", error_code: str = "NOT_FOUND"
    ):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND, detail=detail, error_code=error_code
        )


class ConflictError(APIError):
    """Resource conflict error"""

    def __init__(self, detail: str = "Resource conflict", error_code: str = "CONFLICT"):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT, detail=detail, error_code=error_code
        )


class InvalidTransitionError(ConflictError):
    def __init__(self, current: str, target: str, entity: str = "order"):
        super().__init__(
            detail=f"Cannot transition {entity} from {current} to {target}",
            error_code="INVALID_TRANSITION",
        )
        self.current = current
        self.target = target


class TableUnavailableError(ConflictError):
    def __init__(self, detail: str = "Table is not available on the requested date"):
        super().__init__(detail=detail, error_code="TABLE_UNAVAILABLE")


class DuplicateEmailError(ConflictError):
    def __init__(self, detail: str = "Email already registered"):
        super().__init__(detail=detail, error_code="DUPLICATE_EMAIL")


class MenuAlreadyInWishlistError(ConflictError):
    def __init__(self, detail: str = "Menu already in wishlist"):
        super().__init__(detail=detail, error_code="MENU_ALREADY_IN_WISHLIST")


class RateLimitExceededError(APIError):
    def __init__(self, retry_after: int):
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many requests",
            error_code="RATE_LIMITED",
            headers={"Retry-After": str(retry_after)},
        )


class InternalError(APIError):
    def __init__(
        self, detail: str = "Internal server error", error_code: str = "INTERNAL"
    ):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            error_code=error_code,
        )


class GatewayError(APIError):
    """The payment gateway rejected a call or could not be reached"""

    def __init__(
        self,
        detail: str = "Payment gateway error",
        error_code: str = "GATEWAY_ERROR",
        upstream_status: Optional[int] = None,
    ):
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=detail,
            error_code=error_code,
        )
        self.upstream_status = upstream_status


def error_body(message: str, errors: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"message": message}
    if errors:
        body["errors"] = errors
    return body


async def handle_api_error(request: Request, exc: APIError) -> JSONResponse:
    """Handle custom API errors"""
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code} at {request.url.path}: {exc.detail}")
    else:
        logger.info(f"{exc.error_code} at {request.url.path}: {exc.detail}")

    errors = dict(exc.errors or {})
    if exc.error_code:
        errors.setdefault("code", exc.error_code)

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.detail, errors),
        headers=exc.headers,
    )


async def handle_http_exception(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Wrap framework raised HTTP errors (404 routes, 405 methods) in the envelope"""
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Convert request body/query validation failures to a 400"""
    fields = []
    for error in exc.errors():
        fields.append(
            {
                "field": ".".join(str(part) for part in error.get("loc", ())),
                "message": error.get("msg", "invalid value"),
            }
        )
    logger.info(f"Validation failed at {request.url.path}: {fields}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(
            "Invalid request", {"code": "INVALID_REQUEST", "fields": fields}
        ),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error at {request.url.path}: {exc}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal server error"),
    )


def register_exception_handlers(app):
    """Register all exception handlers with the FastAPI app"""
    app.add_exception_handler(APIError, handle_api_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
