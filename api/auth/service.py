"""
Auth business logic.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from uuid import UUID

from core.errors import (
    ConflictError,
    InvalidCredentialsError,
    InvalidTokenError,
    PermissionDeniedError,
    ValidationError,
)

from . import schemas
from .repository import EMAIL_IN_USE, USERNAME_TAKEN, UserRepository, normalize_email, normalize_username
from .security import ACCESS_TOKEN_TTL_S, PasswordHasher, TokenService

logger = logging.getLogger(__name__)


def to_user_response(user_row: dict) -> schemas.UserResponse:
    return schemas.UserResponse(
        id=user_row["id"],
        username=str(user_row["username"]),
        email=str(user_row["email"]),
        role=schemas.Role(user_row.get("role") or schemas.Role.USER),
        created_at=user_row["created_at"],
    )


def parse_uuid(raw: object) -> UUID | None:
    if isinstance(raw, UUID):
        return raw
    try:
        return UUID(str(raw or "").strip())
    except ValueError:
        return None


def is_admin(user_row: dict) -> bool:
    return str(user_row.get("role") or "") == schemas.Role.ADMIN.value


@dataclass(frozen=True)
class LoginResult:
    token: str
    user: dict
    expires_in: int = ACCESS_TOKEN_TTL_S


class AuthService:
    def __init__(self, users: UserRepository, hasher: PasswordHasher, tokens: TokenService) -> None:
        self.users = users
        self.hasher = hasher
        self.tokens = tokens

    async def register(self, username: str, email: str, password: str) -> dict:
        username = normalize_username(username)
        email = normalize_email(email)
        if not username or not email or not password:
            raise ValidationError("All fields are required")

        # Advisory only; the unique constraints decide under concurrency.
        existing = await self.users.find_by_email_or_username(email, username)
        if existing is not None:
            if normalize_email(existing["email"]) == email:
                raise ConflictError(EMAIL_IN_USE)
            raise ConflictError(USERNAME_TAKEN)

        password_hash = await asyncio.to_thread(self.hasher.hash, password)
        user_row = await self.users.create(username=username, email=email, password_hash=password_hash)
        logger.info("user_registered user_id=%s", user_row["id"])
        return user_row

    async def login(self, username: str, password: str) -> LoginResult:
        username = normalize_username(username)
        if not username or not password:
            raise ValidationError("Username and password are required")

        user_row = await self.users.find_by_username(username)
        if user_row is None:
            logger.info("login_failed username=%s", username)
            raise InvalidCredentialsError()

        is_valid = await asyncio.to_thread(
            self.hasher.verify,
            password,
            str(user_row.get("password_hash") or ""),
        )
        if not is_valid:
            logger.info("login_failed username=%s", username)
            raise InvalidCredentialsError()

        token = self.tokens.issue(str(user_row["id"]))
        user = {k: v for k, v in user_row.items() if k != "password_hash"}
        return LoginResult(token=token, user=user)

    async def authenticate(self, access_token: str) -> dict:
        """
        Resolve a bearer token to its user row.
        """
        subject = self.tokens.verify(access_token)
        user_id = parse_uuid(subject)
        if user_id is None:
            raise InvalidTokenError("Invalid access token subject.")

        user_row = await self.users.find_by_id(str(user_id))
        if user_row is None:
            raise InvalidTokenError("Invalid access token subject.")
        return user_row

    async def list_users(self, actor: dict) -> list[dict]:
        if not is_admin(actor):
            logger.warning("admin_access_denied user_id=%s", actor.get("id"))
            raise PermissionDeniedError("Access denied. Admins only.")
        return await self.users.list_summaries()
