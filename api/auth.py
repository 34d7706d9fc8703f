"""Session resolution and the gate for routes that change listings."""

import logging
from typing import Awaitable, Callable, Optional

from fastapi import Request, Response

from config import SESSION_COOKIE_NAME, Settings
from errors import AuthorizationError
from Users.session import SessionStore
from Users.user import SessionUser

logger = logging.getLogger(__name__)


def set_session_cookie(response: Response, token: str, settings: Settings) -> None:
    response.set_cookie(
        SESSION_COOKIE_NAME,
        token,
        max_age=settings.session_max_age,
        httponly=True,
        samesite="lax",
        secure=settings.production,
        path="/",
    )


def clear_session_cookie(response: Response, settings: Settings) -> None:
    response.delete_cookie(
        SESSION_COOKIE_NAME,
        httponly=True,
        samesite="lax",
        secure=settings.production,
        path="/",
    )


async def session_middleware(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    """
    Attach the session user to ``request.state`` and slide the cookie expiry.

    ``request.state.session_token`` is cleared by login and logout, which set
    or delete the cookie themselves, so the old token is not re-issued.
    """

    settings: Settings = request.app.state.settings
    request.state.user = None
    request.state.session_token = None
    if not settings.auth_enabled or not request.app.state.ready:
        return await call_next(request)

    token = request.cookies.get(SESSION_COOKIE_NAME)
    sessions: SessionStore = request.app.state.sessions
    user = await sessions.resolve(token)
    if user is not None:
        request.state.user = user
        request.state.session_token = token

    response = await call_next(request)
    if request.state.session_token:
        set_session_cookie(response, request.state.session_token, settings)
    return response


def current_user(request: Request) -> Optional[SessionUser]:
    return getattr(request.state, "user", None)


def can_edit(request: Request) -> bool:
    settings: Settings = request.app.state.settings
    return not settings.auth_enabled or current_user(request) is not None


def require_user(request: Request) -> Optional[SessionUser]:
    """
    Gate dependency for protected routes.

    Returns the session user (None when authentication is switched off).

    Raises:
        AuthorizationError: for anonymous requests; API paths answer 401,
            pages redirect to ``/login``.
    """

    if can_edit(request):
        return current_user(request)
    logger.info("Anonymous request to protected route", extra={"path": request.url.path})
    raise AuthorizationError()
