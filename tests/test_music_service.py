from uuid import uuid4

import pytest

from auth.schemas import Role
from core.errors import NotFoundError, ValidationError

TRACK = {
    "external_track_id": "4uLU6hMCjMI75M1A2tKUQC",
    "title": "Never Gonna Give You Up",
    "artist": "Rick Astley",
    "album": "Whenever You Need Somebody",
    "image_url": "https://i.scdn.co/image/ab67616d0000b273",
}


@pytest.fixture
def alice(users):
    row = {
        "id": uuid4(),
        "username": "alice",
        "email": "a@x.com",
        "password_hash": "unused",
        "role": Role.USER.value,
        "created_at": None,
    }
    users.rows[str(row["id"])] = row
    return {k: v for k, v in row.items() if k != "password_hash"}


@pytest.fixture
def bob(users):
    row = {
        "id": uuid4(),
        "username": "bob",
        "email": "b@y.com",
        "password_hash": "unused",
        "role": Role.USER.value,
        "created_at": None,
    }
    users.rows[str(row["id"])] = row
    return {k: v for k, v in row.items() if k != "password_hash"}


@pytest.mark.asyncio
async def test_add_track_sets_owner(track_service, alice):
    row = await track_service.add_track(alice["id"], **TRACK)

    assert row["owner_id"] == alice["id"]
    assert row["title"] == TRACK["title"]
    assert row["created_at"] == row["updated_at"]


@pytest.mark.parametrize("missing", sorted(TRACK))
@pytest.mark.asyncio
async def test_add_track_requires_every_field(track_service, track_repository, alice, missing):
    fields = dict(TRACK, **{missing: ""})

    with pytest.raises(ValidationError):
        await track_service.add_track(alice["id"], **fields)
    assert track_repository.rows == {}


@pytest.mark.parametrize("owner_id", ["not-a-uuid", "12345", ""])
@pytest.mark.asyncio
async def test_add_track_rejects_malformed_owner(track_service, track_repository, owner_id):
    with pytest.raises(ValidationError):
        await track_service.add_track(owner_id, **TRACK)
    assert track_repository.rows == {}


@pytest.mark.asyncio
async def test_add_track_rejects_unknown_owner(track_service, track_repository):
    with pytest.raises(ValidationError):
        await track_service.add_track(uuid4(), **TRACK)
    assert track_repository.rows == {}


@pytest.mark.asyncio
async def test_list_tracks_empty_is_not_an_error(track_service, alice):
    assert await track_service.list_tracks(alice["id"]) == []


@pytest.mark.asyncio
async def test_owners_only_see_their_tracks(track_service, alice, bob):
    mine = await track_service.add_track(alice["id"], **TRACK)
    await track_service.add_track(bob["id"], **dict(TRACK, title="Other"))

    listed = await track_service.list_tracks(alice["id"])

    assert [r["id"] for r in listed] == [mine["id"]]


@pytest.mark.asyncio
async def test_delete_other_users_track_looks_missing(track_service, alice, bob):
    bobs = await track_service.add_track(bob["id"], **TRACK)

    with pytest.raises(NotFoundError) as foreign:
        await track_service.delete_track(alice["id"], bobs["id"])
    with pytest.raises(NotFoundError) as missing:
        await track_service.delete_track(alice["id"], uuid4())

    assert foreign.value.message == missing.value.message
    assert len(await track_service.list_tracks(bob["id"])) == 1


@pytest.mark.asyncio
async def test_delete_twice_reports_not_found(track_service, alice):
    row = await track_service.add_track(alice["id"], **TRACK)

    await track_service.delete_track(alice["id"], row["id"])
    with pytest.raises(NotFoundError):
        await track_service.delete_track(alice["id"], row["id"])
    assert await track_service.list_tracks(alice["id"]) == []


@pytest.mark.asyncio
async def test_delete_malformed_track_id_is_not_found(track_service, alice):
    with pytest.raises(NotFoundError):
        await track_service.delete_track(alice["id"], "not-a-uuid")


@pytest.mark.asyncio
async def test_songs_by_username_for_self(track_service, alice):
    await track_service.add_track(alice["id"], **TRACK)

    songs = await track_service.list_tracks_for_username(alice, "alice")

    assert len(songs) == 1


@pytest.mark.asyncio
async def test_songs_by_username_hidden_from_other_users(track_service, alice, bob):
    await track_service.add_track(bob["id"], **TRACK)

    with pytest.raises(NotFoundError) as hidden:
        await track_service.list_tracks_for_username(alice, "bob")
    with pytest.raises(NotFoundError) as unknown:
        await track_service.list_tracks_for_username(alice, "nobody")

    assert hidden.value.message == unknown.value.message == "User not found"


@pytest.mark.asyncio
async def test_songs_by_username_visible_to_admin(track_service, alice, bob):
    await track_service.add_track(bob["id"], **TRACK)
    admin = dict(alice, role=Role.ADMIN.value)

    songs = await track_service.list_tracks_for_username(admin, "bob")

    assert [s["owner_id"] for s in songs] == [bob["id"]]
