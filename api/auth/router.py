"""
Auth API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from core.context import AppContext

from . import dependencies, schemas
from .service import to_user_response

router = APIRouter(prefix="/auth")


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=schemas.RegisterResponse)
async def register(
    payload: schemas.RegisterRequest,
    context: AppContext = Depends(dependencies.get_context),
) -> schemas.RegisterResponse:
    user_row = await context.auth.register(payload.username, payload.email, payload.password)
    return schemas.RegisterResponse(user=to_user_response(user_row))


@router.post("/login", response_model=schemas.TokenResponse)
async def login(
    payload: schemas.LoginRequest,
    context: AppContext = Depends(dependencies.get_context),
) -> schemas.TokenResponse:
    result = await context.auth.login(payload.username, payload.password)
    return schemas.TokenResponse(
        token=result.token,
        expires_in=result.expires_in,
        user=to_user_response(result.user),
    )


@router.get("/me", response_model=schemas.UserResponse)
async def me(current_user: dict = Depends(dependencies.get_current_user)) -> schemas.UserResponse:
    return to_user_response(current_user)
