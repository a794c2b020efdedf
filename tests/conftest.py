"""
Shared pytest fixtures.

The in-memory repositories mirror the SQL repositories' method signatures
and the storage guarantees the services rely on: unique username/email,
owner-filtered reads and deletes.
"""

from datetime import datetime, timezone
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from auth.repository import EMAIL_IN_USE, USERNAME_TAKEN, normalize_email, normalize_username
from auth.schemas import Role
from auth.security import PasswordHasher, TokenService
from auth.service import AuthService
from core.config import Settings
from core.context import build_context
from core.errors import ConflictError, ValidationError
from main import create_app
from music.service import TrackService

TEST_SECRET = "test-secret-key-for-the-track-locker-suite"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryUserRepository:
    def __init__(self):
        self.rows: dict[str, dict] = {}

    @staticmethod
    def _public(row: dict) -> dict:
        return {k: v for k, v in row.items() if k != "password_hash"}

    async def create(self, *, username, email, password_hash, role=Role.USER):
        username = normalize_username(username)
        email = normalize_email(email)
        # No awaits between check and insert: behaves like the unique constraints.
        for row in self.rows.values():
            if row["email"] == email:
                raise ConflictError(EMAIL_IN_USE)
            if row["username"] == username:
                raise ConflictError(USERNAME_TAKEN)
        row = {
            "id": uuid4(),
            "username": username,
            "email": email,
            "password_hash": password_hash,
            "role": Role(role).value,
            "created_at": _now(),
        }
        self.rows[str(row["id"])] = row
        return self._public(row)

    async def find_by_username(self, username):
        username = normalize_username(username)
        for row in self.rows.values():
            if row["username"] == username:
                return dict(row)
        return None

    async def find_by_email_or_username(self, email, username):
        email = normalize_email(email)
        username = normalize_username(username)
        by_email = [r for r in self.rows.values() if r["email"] == email]
        by_username = [r for r in self.rows.values() if r["username"] == username]
        matches = by_email or by_username
        return self._public(matches[0]) if matches else None

    async def find_by_id(self, user_id):
        row = self.rows.get(str(user_id))
        return self._public(row) if row is not None else None

    async def list_summaries(self):
        return [{"username": r["username"], "email": r["email"]} for r in self.rows.values()]

    def set_role(self, username, role):
        for row in self.rows.values():
            if row["username"] == username:
                row["role"] = Role(role).value


class InMemoryTrackRepository:
    def __init__(self, users: InMemoryUserRepository):
        self.users = users
        self.rows: dict[str, dict] = {}

    async def insert_track(self, *, owner_id, external_track_id, title, artist, album, image_url):
        if str(owner_id) not in self.users.rows:
            raise ValidationError("Unknown owner.")
        now = _now()
        row = {
            "id": uuid4(),
            "owner_id": self.users.rows[str(owner_id)]["id"],
            "external_track_id": external_track_id,
            "title": title,
            "artist": artist,
            "album": album,
            "image_url": image_url,
            "created_at": now,
            "updated_at": now,
        }
        self.rows[str(row["id"])] = row
        return dict(row)

    async def list_tracks(self, *, owner_id):
        rows = [dict(r) for r in self.rows.values() if str(r["owner_id"]) == str(owner_id)]
        return sorted(rows, key=lambda r: r["created_at"], reverse=True)

    async def delete_track(self, track_id, *, owner_id):
        row = self.rows.get(str(track_id))
        if row is None or str(row["owner_id"]) != str(owner_id):
            return None
        del self.rows[str(track_id)]
        return {"id": row["id"]}


@pytest.fixture
def settings():
    return Settings(DATABASE_URL="", JWT_SECRET=TEST_SECRET, BCRYPT_ROUNDS=4)


@pytest.fixture
def hasher():
    return PasswordHasher(rounds=4)


@pytest.fixture
def tokens():
    return TokenService(TEST_SECRET)


@pytest.fixture
def users():
    return InMemoryUserRepository()


@pytest.fixture
def track_repository(users):
    return InMemoryTrackRepository(users)


@pytest.fixture
def auth_service(users, hasher, tokens):
    return AuthService(users, hasher, tokens)


@pytest.fixture
def track_service(track_repository, users):
    return TrackService(track_repository, users)


@pytest.fixture
def client(settings, users, track_repository):
    context = build_context(settings, users=users, track_repository=track_repository)
    app = create_app(settings, context=context)
    with TestClient(app) as test_client:
        yield test_client
