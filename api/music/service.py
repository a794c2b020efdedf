"""
Track business logic.

Scope:
- saved tracks belong to exactly one user, fixed at creation
- callers only see and delete their own tracks; a track owned by someone
  else looks exactly like a track that does not exist
"""

from __future__ import annotations

import logging

from auth.repository import UserRepository, normalize_username
from auth.service import is_admin, parse_uuid
from core.errors import NotFoundError, ValidationError

from .repository import TrackRepository

logger = logging.getLogger(__name__)

_TRACK_FIELDS = ("external_track_id", "title", "artist", "album", "image_url")


class TrackService:
    def __init__(self, tracks: TrackRepository, users: UserRepository) -> None:
        self.tracks = tracks
        self.users = users

    async def add_track(
        self,
        owner_id: object,
        *,
        external_track_id: str,
        title: str,
        artist: str,
        album: str,
        image_url: str,
    ) -> dict:
        values = {
            "external_track_id": external_track_id,
            "title": title,
            "artist": artist,
            "album": album,
            "image_url": image_url,
        }
        cleaned = {name: (values[name] or "").strip() for name in _TRACK_FIELDS}
        if owner_id is None or not all(cleaned.values()):
            raise ValidationError("All fields are required")

        owner_uuid = parse_uuid(owner_id)
        if owner_uuid is None:
            raise ValidationError("Invalid owner id format")

        if await self.users.find_by_id(str(owner_uuid)) is None:
            raise ValidationError("Unknown owner.")

        row = await self.tracks.insert_track(owner_id=str(owner_uuid), **cleaned)
        logger.info("track_added track_id=%s owner_id=%s", row["id"], owner_uuid)
        return row

    async def list_tracks(self, owner_id: object) -> list[dict]:
        owner_uuid = parse_uuid(owner_id)
        if owner_uuid is None:
            raise ValidationError("Invalid owner id format")
        return await self.tracks.list_tracks(owner_id=str(owner_uuid))

    async def delete_track(self, owner_id: object, track_id: object) -> None:
        owner_uuid = parse_uuid(owner_id)
        if owner_uuid is None:
            raise ValidationError("Invalid owner id format")

        track_uuid = parse_uuid(track_id)
        deleted = None
        if track_uuid is not None:
            deleted = await self.tracks.delete_track(str(track_uuid), owner_id=str(owner_uuid))
        if deleted is None:
            raise NotFoundError("Track not found")
        logger.info("track_deleted track_id=%s owner_id=%s", track_uuid, owner_uuid)

    async def list_tracks_for_username(self, actor: dict, username: str) -> list[dict]:
        """
        Tracks saved by `username`, visible to that user and to admins.
        """
        user_row = await self.users.find_by_username(normalize_username(username))
        if user_row is None:
            raise NotFoundError("User not found")
        if str(user_row["id"]) != str(actor.get("id")) and not is_admin(actor):
            raise NotFoundError("User not found")
        return await self.tracks.list_tracks(owner_id=str(user_row["id"]))
