"""
Admin API endpoints. Every route here requires the `admin` role.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from auth import dependencies as auth_dependencies
from auth import schemas as auth_schemas
from core.context import AppContext

router = APIRouter(prefix="/admin")


@router.get("/users", response_model=auth_schemas.UserListResponse)
async def list_users(
    current_user: dict = Depends(auth_dependencies.get_current_user),
    context: AppContext = Depends(auth_dependencies.get_context),
) -> auth_schemas.UserListResponse:
    rows = await context.auth.list_users(current_user)
    return auth_schemas.UserListResponse(
        users=[auth_schemas.UserSummary(username=str(r["username"]), email=str(r["email"])) for r in rows]
    )
