"""
Centralized error handling and user-friendly error messages.

Services raise the typed errors below; `register_exception_handlers` renders them
(and anything unexpected) as `{"success": false, "error": ...}` JSON bodies.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base application error."""
    def __init__(self, message: str, status_code: int = 500, details: dict | None = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed or missing input."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, status_code=400, details=details)


class AuthError(AppError):
    """Missing, invalid or expired credential."""
    def __init__(self, message: str = "Authentication required", details: dict | None = None):
        super().__init__(message, status_code=401, details=details)


class ForbiddenError(AppError):
    """Authenticated but not permitted."""
    def __init__(self, message: str = "Access forbidden", details: dict | None = None):
        super().__init__(message, status_code=403, details=details)


class NotFoundError(AppError):
    """Resource not found error."""
    def __init__(self, message: str = "Resource not found", details: dict | None = None):
        super().__init__(message, status_code=404, details=details)


class ConflictError(AppError):
    """Uniqueness or state conflict."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, status_code=409, details=details)


class DependencyError(AppError):
    """An external collaborator (mail transport) failed."""
    def __init__(self, message: str = "An external service failed", details: dict | None = None):
        super().__init__(message, status_code=502, details=details)


class ExpiredError(AppError):
    """Time-boxed token used past its validity."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message, status_code=400, details=details)


# User-friendly error messages
ERROR_MESSAGES = {
    # Authentication
    "invalid_credentials": "Invalid email or password. Please try again.",
    "email_exists": "An account with this email already exists. Please login instead.",
    "weak_password": "Password must be at least 6 characters long.",
    "session_expired": "Your session has expired. Please login again.",
    "token_required": "Access token required",
    "account_deactivated": "Account has been deactivated",
    "verification_required": "Please verify your email address to perform this action",
    "verification_email_failed": "We could not send the verification email. Please try again later.",

    # Jobs
    "job_not_found": "Job not found",
    "job_closed": "Job is not accepting proposals",
    "invalid_job_data": "Job information is incomplete. Please fill in all required fields.",

    # Proposals / reviews
    "proposal_not_found": "Proposal not found",
    "already_proposed": "You have already submitted a proposal for this job",
    "already_reviewed": "You have already reviewed this user for this job",
    "user_not_found": "User not found",
    "profile_not_found": "Profile not found",

    # General
    "unauthorized": "Please login to access this feature.",
    "forbidden": "Not authorized",
    "not_found": "The requested resource was not found.",
    "route_not_found": "Route not found",
    "server_error": "Something went wrong on our end. Please try again later.",
    "database_error": "Database connection issue. Please try again later.",
    "validation_error": "Please check your input and try again.",
}


def get_error_message(error_key: str, default: str | None = None) -> str:
    """Get a user-friendly error message."""
    return ERROR_MESSAGES.get(error_key, default or ERROR_MESSAGES["server_error"])


def create_error_response(
    status_code: int,
    message: str,
    details: dict | None = None
) -> JSONResponse:
    """Create a standardized error response."""
    content = {
        "success": False,
        "error": message,
        "status_code": status_code,
    }

    if details:
        content["details"] = details

    return JSONResponse(
        status_code=status_code,
        content=content
    )


def _first_validation_problem(exc: RequestValidationError) -> str:
    errors = exc.errors() or []
    if not errors:
        return get_error_message("validation_error")
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(loc)
    msg = first.get("msg") or get_error_message("validation_error")
    return f"{field}: {msg}" if field else msg


def register_exception_handlers(app: FastAPI, *, expose_internals: bool) -> None:
    """Map the error taxonomy (and framework/database errors) to JSON responses."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return create_error_response(exc.status_code, exc.message, exc.details or None)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        message = exc.detail
        if exc.status_code == 404 and message == "Not Found":
            message = get_error_message("route_not_found")
        return create_error_response(exc.status_code, str(message))

    @app.exception_handler(RequestValidationError)
    async def request_validation_error_handler(request: Request, exc: RequestValidationError):
        return create_error_response(400, _first_validation_problem(exc))

    @app.exception_handler(OperationalError)
    async def sqlalchemy_operational_error_handler(request: Request, exc: OperationalError):
        logger.exception("Database OperationalError: %s", exc)
        details = {"reason": str(getattr(exc, "orig", None) or exc)} if expose_internals else None
        return create_error_response(503, get_error_message("database_error"), details)

    @app.exception_handler(SQLAlchemyError)
    async def sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError):
        logger.exception("Database SQLAlchemyError: %s", exc)
        return create_error_response(500, get_error_message("database_error"))

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception: %s", exc)
        details = {"reason": f"{type(exc).__name__}: {exc}"} if expose_internals else None
        return create_error_response(500, get_error_message("server_error"), details)
