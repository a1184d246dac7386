from dataclasses import dataclass

from fastapi import Depends, Request

from app.core.config import AUTH_USER_HEADER
from app.core.errors import Unauthenticated


@dataclass(frozen=True)
class CurrentUser:
    user_id: str


def get_current_user(request: Request) -> CurrentUser | None:
    """Identity injected by the upstream authentication layer, trusted as-is."""
    user_id = (request.headers.get(AUTH_USER_HEADER) or "").strip()
    if not user_id:
        return None
    return CurrentUser(user_id=user_id)


def require_current_user(
    current_user: CurrentUser | None = Depends(get_current_user),
) -> CurrentUser:
    if current_user is None:
        raise Unauthenticated()
    return current_user
