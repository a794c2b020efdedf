"""
Track persistence (raw SQL).

Every read and delete is filtered by `owner_id`.
"""

from __future__ import annotations

import asyncpg

from core.db import Database
from core.errors import ValidationError

_TRACK_COLUMNS = """
    id, owner_id, external_track_id, title, artist, album, image_url,
    created_at, updated_at
"""


class TrackRepository:
    def __init__(self, db: Database) -> None:
        self.db = db

    async def insert_track(
        self,
        *,
        owner_id: str,
        external_track_id: str,
        title: str,
        artist: str,
        album: str,
        image_url: str,
    ) -> dict:
        try:
            row = await self.db.fetch_one(
                f"""
                INSERT INTO tracks (owner_id, external_track_id, title, artist, album, image_url)
                VALUES ($1::uuid, $2, $3, $4, $5, $6)
                RETURNING {_TRACK_COLUMNS}
                """,
                str(owner_id),
                external_track_id,
                title,
                artist,
                album,
                image_url,
            )
        except asyncpg.ForeignKeyViolationError as exc:
            # Owner disappeared between the existence check and the insert.
            raise ValidationError("Unknown owner.") from exc
        if row is None:
            raise RuntimeError("Failed to insert track.")
        return row

    async def list_tracks(self, *, owner_id: str) -> list[dict]:
        return await self.db.fetch_all(
            f"""
            SELECT {_TRACK_COLUMNS}
            FROM tracks
            WHERE owner_id = $1::uuid
            ORDER BY created_at DESC, id DESC
            """,
            str(owner_id),
        )

    async def delete_track(self, track_id: str, *, owner_id: str) -> dict | None:
        """
        Delete a track owned by the given user.
        Returns the deleted id, or None when there is no such track for that owner.
        """
        return await self.db.fetch_one(
            """
            DELETE FROM tracks
            WHERE id = $1::uuid
              AND owner_id = $2::uuid
            RETURNING id
            """,
            str(track_id),
            str(owner_id),
        )
