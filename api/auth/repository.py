"""
Auth persistence helpers.
"""

from __future__ import annotations

import asyncpg

from core.db import Database
from core.errors import ConflictError

from .schemas import Role

EMAIL_IN_USE = "Email already in use"
USERNAME_TAKEN = "Username already taken"

# Constraint names come from db/migrations.
_CONFLICT_MESSAGES = {
    "users_email_key": EMAIL_IN_USE,
    "users_username_key": USERNAME_TAKEN,
}


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def normalize_username(username: str) -> str:
    return (username or "").strip()


class UserRepository:
    def __init__(self, db: Database) -> None:
        self.db = db

    async def create(
        self,
        *,
        username: str,
        email: str,
        password_hash: str,
        role: Role = Role.USER,
    ) -> dict:
        """
        Insert a user. The unique constraints on username/email are the
        final word on duplicates; a violation becomes `ConflictError`.
        """
        try:
            row = await self.db.fetch_one(
                """
                INSERT INTO users (username, email, password_hash, role)
                VALUES ($1, $2, $3, $4)
                RETURNING id, username, email, role, created_at
                """,
                normalize_username(username),
                normalize_email(email),
                password_hash,
                Role(role).value,
            )
        except asyncpg.UniqueViolationError as exc:
            constraint = getattr(exc, "constraint_name", None) or ""
            raise ConflictError(_CONFLICT_MESSAGES.get(constraint, USERNAME_TAKEN)) from exc
        if row is None:
            raise RuntimeError("Failed to create user.")
        return row

    async def find_by_username(self, username: str) -> dict | None:
        return await self.db.fetch_one(
            """
            SELECT id, username, email, password_hash, role, created_at
            FROM users
            WHERE username = $1
            """,
            normalize_username(username),
        )

    async def find_by_email_or_username(self, email: str, username: str) -> dict | None:
        return await self.db.fetch_one(
            """
            SELECT id, username, email, role, created_at
            FROM users
            WHERE lower(email) = lower($1)
               OR username = $2
            ORDER BY (lower(email) = lower($1)) DESC
            LIMIT 1
            """,
            normalize_email(email),
            normalize_username(username),
        )

    async def find_by_id(self, user_id: str) -> dict | None:
        return await self.db.fetch_one(
            """
            SELECT id, username, email, role, created_at
            FROM users
            WHERE id = $1::uuid
            """,
            str(user_id),
        )

    async def list_summaries(self) -> list[dict]:
        return await self.db.fetch_all(
            """
            SELECT username, email
            FROM users
            ORDER BY created_at, username
            """
        )
