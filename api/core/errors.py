"""Error taxonomy shared by the store, policy layer and route handlers."""

import logging
from typing import Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class LMSError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"message": self.message}


class ValidationFailed(LMSError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid data"

    def __init__(self, message: Optional[str] = None, errors: Optional[Dict[str, List[str]]] = None):
        super().__init__(message)
        self.errors = errors or {}

    @classmethod
    def for_field(cls, field: str, error: str, message: Optional[str] = None) -> "ValidationFailed":
        return cls(message, errors={field: [error]})

    def to_dict(self) -> dict:
        return {"message": self.message, "errors": self.errors}


class AuthenticationRequired(LMSError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class AuthorizationDenied(LMSError):
    # The message never says which rule failed
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFound(LMSError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class Conflict(LMSError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict"


def field_errors(exc: RequestValidationError) -> Dict[str, List[str]]:
    """Group pydantic errors by field path, dropping the request-part prefix."""
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in ("body", "query", "path"):
            loc = loc[1:]
        key = ".".join(loc) or "__root__"
        errors.setdefault(key, []).append(error.get("msg", "Invalid value"))
    return errors


async def lms_error_handler(request: Request, exc: LMSError) -> JSONResponse:
    if isinstance(exc, AuthorizationDenied):
        logger.info("Denied %s %s", request.method, request.url.path)
    elif isinstance(exc, Conflict):
        logger.info("Conflict on %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Invalid request data", "errors": field_errors(exc)},
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": LMSError.default_message},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LMSError, lms_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
