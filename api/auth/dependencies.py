"""
Auth dependencies for protected FastAPI routes.
"""

from __future__ import annotations

from fastapi import Depends, Header, HTTPException, Request, status

from core.context import AppContext


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _extract_bearer_token(authorization: str | None) -> str:
    raw = (authorization or "").strip()
    if not raw:
        raise _unauthorized("Missing Authorization header.")

    parts = raw.split(" ", 1)
    if len(parts) != 2:
        raise _unauthorized("Invalid Authorization header format.")

    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer" or not token:
        raise _unauthorized("Authorization must be: Bearer <token>.")
    return token


def get_context(request: Request) -> AppContext:
    return request.app.state.context


async def get_bearer_token(authorization: str | None = Header(default=None)) -> str:
    return _extract_bearer_token(authorization)


async def get_current_user(
    access_token: str = Depends(get_bearer_token),
    context: AppContext = Depends(get_context),
) -> dict:
    return await context.auth.authenticate(access_token)
