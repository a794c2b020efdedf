from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from admin import router as admin_router
from auth import router as auth_router
from core.config import Settings
from core.context import AppContext, build_context
from core.db import Database
from core.errors import AppError, InternalError
from core.logging import configure_logging
from music import router as music_router

logger = logging.getLogger(__name__)

_INTERNAL_ERROR_DETAIL = "Internal server error."


def _error_response(status_code: int, detail: str) -> JSONResponse:
    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=status_code, content={"detail": detail}, headers=headers)


async def handle_app_error(request: Request, exc: AppError) -> JSONResponse:
    if isinstance(exc, InternalError) or exc.status_code >= 500:
        logger.error(
            "internal_error method=%s path=%s",
            request.method,
            request.url.path,
            exc_info=exc,
        )
        return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, _INTERNAL_ERROR_DETAIL)
    return _error_response(exc.status_code, exc.message)


async def handle_request_validation(_: Request, exc: RequestValidationError) -> JSONResponse:
    # Malformed input is a plain 400 here, not FastAPI's 422.
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = str(first.get("msg") or "Invalid request.")
    detail = f"{location}: {message}" if location else message
    return _error_response(status.HTTP_400_BAD_REQUEST, detail)


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "unhandled_error method=%s path=%s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return _error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, _INTERNAL_ERROR_DETAIL)


def create_app(settings: Settings | None = None, context: AppContext | None = None) -> FastAPI:
    """
    Build the API.

    With `context` given the app uses it as-is and opens no database pool.
    """
    settings = settings or (context.settings if context is not None else Settings())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if context is not None:
            yield
            return

        configure_logging(settings.LOG_LEVEL)
        # One pool per process.
        db = Database.from_settings(settings)
        await db.connect()
        app.state.context = build_context(settings, db)
        try:
            yield
        finally:
            await db.close()

    app = FastAPI(title="Track Locker API", lifespan=lifespan)
    if context is not None:
        app.state.context = context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppError, handle_app_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(Exception, handle_unexpected)

    app.include_router(auth_router.router, tags=["auth"])
    app.include_router(music_router.router, tags=["music"])
    app.include_router(admin_router.router, tags=["admin"])

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    @app.get("/")
    def root() -> dict:
        return {"message": "track-locker api"}

    return app


app = create_app()
