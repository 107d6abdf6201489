"""
Error taxonomy and the handlers that turn it into JSON responses.

Every error raised by a route is converted at the request boundary:
field validation failures become ``{"errors": [...]}`` bodies, everything
else becomes ``{"msg": ...}``. Internal failures are logged in full and
answered with a generic ``Server Error`` message.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from auth.jwt import SigningError

logger = logging.getLogger(__name__)

SERVER_ERROR = "Server Error"


class ApiError(Exception):
    """Base class for errors that map directly onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def body(self) -> Dict[str, Any]:
        return {"msg": self.message}


class ValidationError(ApiError):
    """Malformed input; carries a list of field-level messages."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, errors: List[Dict[str, Any]]) -> None:
        super().__init__(errors[0]["msg"] if errors else "Invalid request")
        self.errors = errors

    @classmethod
    def single(cls, message: str) -> "ValidationError":
        return cls([{"msg": message}])

    def body(self) -> Dict[str, Any]:
        return {"errors": self.errors}


class BadRequestError(ApiError):
    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(ApiError):
    """Missing, invalid or expired token."""

    status_code = status.HTTP_401_UNAUTHORIZED


class AuthorizationError(ApiError):
    """Valid identity without rights over the resource."""

    status_code = status.HTTP_401_UNAUTHORIZED


class NotFoundError(ApiError):
    status_code = status.HTTP_404_NOT_FOUND


class InternalError(ApiError):
    def __init__(self, message: str = SERVER_ERROR) -> None:
        super().__init__(message)

    def body(self) -> Dict[str, Any]:
        return {"msg": SERVER_ERROR}


def _field_errors(exc: RequestValidationError) -> List[Dict[str, Any]]:
    """Flatten pydantic errors into ``{"msg", "param", "location"}`` items."""
    items: List[Dict[str, Any]] = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        location = loc[0] if loc else "body"
        param = ".".join(loc[1:]) if len(loc) > 1 else ""
        items.append({"msg": err.get("msg", "Invalid value"), "param": param, "location": location})
    return items


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the JSON error handlers to ``app``."""

    @app.exception_handler(ApiError)
    async def handle_api_error(request: Request, exc: ApiError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.body())

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"errors": _field_errors(exc)},
        )

    @app.exception_handler(SigningError)
    async def handle_signing_error(request: Request, exc: SigningError) -> JSONResponse:
        logger.error("Token signing failed on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=500, content={"msg": SERVER_ERROR})

    @app.exception_handler(PyMongoError)
    async def handle_datastore_error(request: Request, exc: PyMongoError) -> JSONResponse:
        logger.exception("Datastore error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"msg": SERVER_ERROR})

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"msg": SERVER_ERROR})
