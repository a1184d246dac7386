import os
import secrets

from fastapi import HTTPException, Request, status

DEBUG_TOKEN_ENV = "DEBUG_TOKEN"
DEBUG_TOKEN_HEADER = "X-Debug-Token"


def get_debug_token() -> str | None:
    token = os.getenv(DEBUG_TOKEN_ENV)
    return token or None


def require_debug_tools(request: Request) -> None:
    # Every failure is a plain 404 so the debug surface stays undiscoverable.
    debug_token = get_debug_token()
    request_token = request.headers.get(DEBUG_TOKEN_HEADER)
    if not debug_token or not request_token:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
    if not secrets.compare_digest(request_token, debug_token):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
