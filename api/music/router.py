"""
Track API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status

from auth import dependencies as auth_dependencies
from core.context import AppContext

from . import schemas

router = APIRouter()


@router.post("/music", status_code=status.HTTP_201_CREATED, response_model=schemas.AddTrackResponse)
async def add_track(
    payload: schemas.AddTrackRequest,
    current_user: dict = Depends(auth_dependencies.get_current_user),
    context: AppContext = Depends(auth_dependencies.get_context),
) -> schemas.AddTrackResponse:
    row = await context.tracks.add_track(
        current_user["id"],
        external_track_id=payload.external_track_id,
        title=payload.title,
        artist=payload.artist,
        album=payload.album,
        image_url=payload.image_url,
    )
    return schemas.AddTrackResponse(track=schemas.TrackResponse(**row))


@router.get("/music/tracks", response_model=list[schemas.TrackResponse])
async def list_tracks(
    current_user: dict = Depends(auth_dependencies.get_current_user),
    context: AppContext = Depends(auth_dependencies.get_context),
) -> list[schemas.TrackResponse]:
    """
    List the current user's saved tracks. No tracks is an empty list.
    """
    rows = await context.tracks.list_tracks(current_user["id"])
    return [schemas.TrackResponse(**row) for row in rows]


@router.delete("/music/tracks/{track_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_track(
    track_id: str,
    current_user: dict = Depends(auth_dependencies.get_current_user),
    context: AppContext = Depends(auth_dependencies.get_context),
) -> Response:
    await context.tracks.delete_track(current_user["id"], track_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/users/{username}/songs", response_model=schemas.SongsResponse)
async def user_songs(
    username: str,
    current_user: dict = Depends(auth_dependencies.get_current_user),
    context: AppContext = Depends(auth_dependencies.get_context),
) -> schemas.SongsResponse:
    rows = await context.tracks.list_tracks_for_username(current_user, username)
    return schemas.SongsResponse(songs=[schemas.TrackResponse(**row) for row in rows])
