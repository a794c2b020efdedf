"""
Application context: every long-lived component, wired once at startup.

Routes reach it through `request.app.state.context`.
"""

from __future__ import annotations

from dataclasses import dataclass

from auth.repository import UserRepository
from auth.security import PasswordHasher, TokenService
from auth.service import AuthService
from music.repository import TrackRepository
from music.service import TrackService

from .config import Settings
from .db import Database


@dataclass
class AppContext:
    settings: Settings
    db: Database | None
    auth: AuthService
    tracks: TrackService


def build_context(
    settings: Settings,
    db: Database | None = None,
    *,
    users: UserRepository | None = None,
    track_repository: TrackRepository | None = None,
) -> AppContext:
    """
    Construct the service graph from `settings`.

    Repositories may be passed in directly (tests); otherwise they are built
    on top of `db`.
    """
    if users is None or track_repository is None:
        if db is None:
            raise RuntimeError("build_context needs a Database when repositories are not given.")
        users = users or UserRepository(db)
        track_repository = track_repository or TrackRepository(db)

    hasher = PasswordHasher(rounds=settings.BCRYPT_ROUNDS)
    tokens = TokenService(settings.JWT_SECRET, algorithm=settings.JWT_ALG)

    return AppContext(
        settings=settings,
        db=db,
        auth=AuthService(users, hasher, tokens),
        tracks=TrackService(track_repository, users),
    )
