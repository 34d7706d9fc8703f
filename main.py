'''
FastAPI application for EasyBooking, a hotel listing site.

Available endpoints:
- /, /about, /contact: static pages.
- /login, /logout: admin session handling.
- /search, /hotels, /hotels/new, /item/{id}, /item/{id}/edit, /item/{id}/delete:
  server rendered listing pages.
- /api/hotels: JSON list, read, create, update and delete of hotel listings.
- /__debug: diagnostic information, answered even before the database is ready.
'''

import logging
import os
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, RedirectResponse, Response
from fastapi.staticfiles import StaticFiles
from pymongo import MongoClient
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.auth import session_middleware
from api.auth_routes import auth_router
from api.hotel_routes import hotel_router
from api.page_routes import page_router
from config import Settings
from Database.db import BookingDB
from Database.seed import provision
from errors import (
    AppError,
    AuthorizationError,
    InvalidIdentifierError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from Users.session import SessionStore
from Views.renderer import TEMPLATES_DIR, render_view

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent
STATIC_DIR = PROJECT_ROOT / "public"
API_PREFIX = "/api"
DEBUG_PATH = "/__debug"


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def _is_api(request: Request) -> bool:
    path = request.url.path
    return path == API_PREFIX or path.startswith(API_PREFIX + "/")


def _is_ungated(request: Request) -> bool:
    path = request.url.path
    return path == DEBUG_PATH or path.startswith("/static/")


def _not_found_page(status_code: int) -> HTMLResponse:
    return HTMLResponse(render_view("404.html", {}), status_code=status_code)


def _list_files(directory: Path) -> list[str]:
    return sorted(path.name for path in directory.iterdir()) if directory.is_dir() else []


async def handle_app_error(request: Request, exc: AppError) -> Response:
    """JSON ``{"error": ...}`` under /api; redirect, 404 page or plain text elsewhere."""

    logger.info(
        "%s %s answered %s: %s",
        request.method,
        request.url.path,
        int(exc.status),
        exc.message,
        extra={"error_context": exc.context},
    )
    if _is_api(request):
        return JSONResponse(exc.to_dict(), status_code=exc.status)
    if isinstance(exc, AuthorizationError):
        return RedirectResponse("/login", status_code=status.HTTP_302_FOUND)
    if isinstance(exc, (NotFoundError, InvalidIdentifierError)):
        return _not_found_page(exc.status)
    return PlainTextResponse(exc.message, status_code=exc.status)


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> Response:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return await handle_app_error(request, NotFoundError())
    detail = str(exc.detail)
    if _is_api(request):
        return JSONResponse({"error": detail}, status_code=exc.status_code, headers=exc.headers)
    return PlainTextResponse(detail, status_code=exc.status_code, headers=exc.headers)


async def handle_request_validation(request: Request, exc: RequestValidationError) -> Response:
    logger.info("Malformed request body", extra={"path": request.url.path})
    return await handle_app_error(request, ValidationError())


async def handle_unexpected(request: Request, exc: Exception) -> Response:
    logger.exception("Unhandled error", extra={"path": request.url.path})
    if _is_api(request):
        return JSONResponse({"error": "Internal server error"}, status_code=500)
    return PlainTextResponse("Server error", status_code=500)


def create_app(settings: Optional[Settings] = None, client: Optional[MongoClient] = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: configuration; read from the environment when omitted.
        client: pre-built MongoDB client; a new one is opened from
            ``settings.mongo_uri`` when omitted.

    Returns:
        FastAPI: the configured application. Requests are answered with 503
        until the startup steps in the lifespan succeed.
    """

    settings = settings or Settings.from_env()
    configure_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # --- Startup ---
        db = BookingDB(settings.mongo_uri, settings.db_name, client=client)
        app.state.db = db
        app.state.sessions = SessionStore(db, settings.session_secret, settings.session_max_age)
        try:
            await run_in_threadpool(provision, db, settings.admin_password)
        except PyMongoError:
            logger.exception("MongoDB connection failed; database routes answer 503")
        else:
            app.state.ready = True
            logger.info("MongoDB ready")
        yield
        # --- Shutdown ---
        app.state.ready = False
        await run_in_threadpool(db.close)

    app = FastAPI(title="EasyBooking", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.ready = False

    # registered innermost first
    app.middleware("http")(session_middleware)

    @app.middleware("http")
    async def readiness_gate(request: Request, call_next):
        if request.app.state.ready or _is_ungated(request):
            return await call_next(request)
        unavailable = StoreUnavailableError()
        return PlainTextResponse(unavailable.message, status_code=unavailable.status)

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "%s %s %s %.1fms", request.method, request.url.path, response.status_code, elapsed_ms
        )
        return response

    app.add_exception_handler(AppError, handle_app_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(Exception, handle_unexpected)

    @app.get(DEBUG_PATH, include_in_schema=False)
    async def debug(request: Request) -> dict[str, Any]:
        return {
            "cwd": os.getcwd(),
            "root": str(PROJECT_ROOT),
            "templates_exists": TEMPLATES_DIR.is_dir(),
            "static_exists": STATIC_DIR.is_dir(),
            "files_in_templates": _list_files(TEMPLATES_DIR),
            "files_in_static": _list_files(STATIC_DIR),
            "ready": bool(request.app.state.ready),
            "auth_enabled": settings.auth_enabled,
        }

    app.include_router(hotel_router, prefix="/api/hotels", tags=["Hotels API"])
    app.include_router(auth_router, tags=["Auth"])
    app.include_router(page_router, tags=["Pages"])
    app.mount("/static", StaticFiles(directory=STATIC_DIR, check_dir=False), name="static")
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=app.state.settings.port)
