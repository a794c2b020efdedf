"""
Pydantic schemas for track endpoints.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class AddTrackRequest(BaseModel):
    """
    A saved track. Original client field names (`spotifyId`, `name`,
    `imageUrl`) are accepted as aliases. Any owner field in the body is
    ignored; the owner is the authenticated caller.
    """

    model_config = ConfigDict(populate_by_name=True)

    external_track_id: str = Field(
        default="",
        max_length=200,
        validation_alias=AliasChoices("external_track_id", "spotifyId"),
    )
    title: str = Field(default="", max_length=500, validation_alias=AliasChoices("title", "name"))
    artist: str = Field(default="", max_length=500)
    album: str = Field(default="", max_length=500)
    image_url: str = Field(
        default="",
        max_length=2000,
        validation_alias=AliasChoices("image_url", "imageUrl"),
    )


class TrackResponse(BaseModel):
    id: UUID
    owner_id: UUID
    external_track_id: str
    title: str
    artist: str
    album: str
    image_url: str
    created_at: datetime
    updated_at: datetime


class AddTrackResponse(BaseModel):
    message: str = "Track added successfully"
    track: TrackResponse


class SongsResponse(BaseModel):
    songs: list[TrackResponse]
