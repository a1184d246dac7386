"""Error taxonomy for the playlist API and the handlers rendering it.

Every response body, success or failure, is the envelope
``{"status": bool, "message": str, "data": ...}``.
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class PlaylistAPIError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal Server Error"

    def __init__(self, message: str | None = None, data: Any = None) -> None:
        super().__init__(message or self.message)
        if message:
            self.message = message
        self.data = data if data is not None else {}


class Unauthenticated(PlaylistAPIError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Unauthorized access"


class InvalidInput(PlaylistAPIError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request data"


class NotFound(PlaylistAPIError):
    """Missing, not owned, or in the wrong lifecycle state. Deliberately opaque."""

    status_code = status.HTTP_404_NOT_FOUND
    message = "Playlist not found"


class Forbidden(PlaylistAPIError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Unauthorized Access"


class Expired(PlaylistAPIError):
    status_code = status.HTTP_410_GONE
    message = "Cannot restore this playlist"


class MembershipNotFoundError(RuntimeError):
    """Raised when a membership row to delete does not exist.

    Not part of the taxonomy above, so it surfaces as a 500.
    """


def envelope(message: str, data: Any = None, *, ok: bool = True) -> dict[str, Any]:
    return {"status": ok, "message": message, "data": data if data is not None else {}}


def _operation_tag(request: Request) -> str:
    route = request.scope.get("route")
    name = getattr(route, "name", None) or request.url.path
    return f"{name.replace('_', ' ').upper()} API ERROR"


async def _handle_api_error(request: Request, exc: PlaylistAPIError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(envelope(exc.message, exc.data, ok=False)),
    )


async def _handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(envelope(str(exc.detail), ok=False)),
        headers=getattr(exc, "headers", None),
    )


async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {key: value for key, value in error.items() if key in ("loc", "msg", "type")}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder(envelope(InvalidInput.message, errors, ok=False)),
    )


async def _handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("%s %s %s", _operation_tag(request), request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=envelope("Internal Server Error", ok=False),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PlaylistAPIError, _handle_api_error)
    app.add_exception_handler(StarletteHTTPException, _handle_http_exception)
    app.add_exception_handler(RequestValidationError, _handle_validation_error)
    app.add_exception_handler(Exception, _handle_unexpected_error)
