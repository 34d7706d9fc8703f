"""Login and logout pages."""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response

from config import SESSION_COOKIE_NAME, Settings
from Database.db import BookingDB
from Database.deps import get_db, get_settings
from errors import ValidationError
from Users.session import SessionStore
from Users.user import authenticate
from Views.renderer import render_view

from .auth import clear_session_cookie, current_user, set_session_cookie

logger = logging.getLogger(__name__)

auth_router = APIRouter()


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=status.HTTP_302_FOUND)


@auth_router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request, settings: Settings = Depends(get_settings)) -> Response:
    if not settings.auth_enabled or current_user(request) is not None:
        return _redirect("/hotels")
    return HTMLResponse(render_view("login.html", {}))


@auth_router.post("/login")
async def login(
    request: Request,
    db: BookingDB = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> Response:
    """
    Check the submitted ``username`` and ``password`` and start a session.

    Every failure answers "Invalid credentials" without saying which part was wrong.
    """

    if not settings.auth_enabled:
        return _redirect("/hotels")

    form = await request.form()
    username = str(form.get("username") or "")
    password = str(form.get("password") or "")
    if not username or not password:
        raise ValidationError("Invalid credentials")

    user = await authenticate(db, username, password)
    sessions: SessionStore = request.app.state.sessions
    await sessions.destroy(request.cookies.get(SESSION_COOKIE_NAME))
    token = await sessions.create(user)
    request.state.user = user
    request.state.session_token = None

    response = _redirect("/hotels")
    set_session_cookie(response, token, settings)
    return response


@auth_router.post("/logout")
async def logout(request: Request, settings: Settings = Depends(get_settings)) -> Response:
    sessions: SessionStore = request.app.state.sessions
    await sessions.destroy(request.cookies.get(SESSION_COOKIE_NAME))
    request.state.user = None
    request.state.session_token = None

    response = _redirect("/login")
    clear_session_cookie(response, settings)
    return response
