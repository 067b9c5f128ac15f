# ruff: noqa: S101
from __future__ import annotations

import uuid

import pytest

from wipshare.modules.tiers.catalog import DEFAULT_TIERS
from wipshare.modules.tiers.service import TierService
from wipshare.modules.tracks.models import Track
from wipshare.modules.usage.service import UsageService
from wipshare.modules.users.models import User

MB = 1024 * 1024


async def _presigned_key(client, filename: str = "demo.wav", size: int = 2 * MB) -> str:
    response = await client.post(
        "/api/v1/uploads/presign", json={"filename": filename, "isPublic": True, "fileSize": size}
    )
    assert response.status_code == 200
    return response.json()["key"]


async def _confirm(client, key: str, **overrides) -> dict:
    payload = {"title": "Verse idea", "key": key, "filename": "demo.wav", "sizeBytes": 2 * MB, "durationSeconds": 95}
    payload.update(overrides)
    response = await client.post("/api/v1/tracks", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_confirm_upload_creates_track_and_counts_usage(client, session_maker) -> None:
    key = await _presigned_key(client)

    track = await _confirm(client, key, tags=["demo"])

    assert track["user_id"] == "user_alice"
    assert track["key"] == key
    assert track["visibility"] == "private"
    assert track["version"] == "001"
    assert track["tags"] == ["demo"]
    async with session_maker() as session:
        snapshot = await UsageService(session).snapshot("user_alice")
    assert snapshot.track_count == 1
    assert snapshot.storage_bytes == 2 * MB


@pytest.mark.asyncio
async def test_confirm_rejects_someone_elses_key(client) -> None:
    response = await client.post(
        "/api/v1/tracks",
        json={"title": "Stolen", "key": "public/user_bob/202610/abc-demo.wav", "filename": "demo.wav", "sizeBytes": 1},
    )

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_confirm_reports_every_invalid_field(client) -> None:
    response = await client.post(
        "/api/v1/tracks",
        json={
            "title": "",
            "description": "x" * 1001,
            "key": "public/user_alice/202610/abc-demo.wav",
            "filename": "demo.wav",
            "sizeBytes": 1,
            "unknownField": "ignored",
        },
    )

    assert response.status_code == 400
    details = response.json()["details"]
    assert details == [
        {"field": "title", "message": "Track title is required"},
        {"field": "description", "message": "Description cannot exceed 1000 characters"},
    ]


@pytest.mark.asyncio
async def test_confirm_private_key_needs_private_feature(client, storage) -> None:
    key = "private/user_alice/202610/abc-demo.wav"
    storage.objects[key] = 1

    response = await client.post(
        "/api/v1/tracks",
        json={"title": "Hidden", "key": key, "filename": "demo.wav", "sizeBytes": 1},
    )

    assert response.status_code == 403
    assert response.json()["feature"] == "privateTracks"


@pytest.mark.asyncio
async def test_list_get_and_update(client) -> None:
    first = await _confirm(client, await _presigned_key(client, "one.wav"), title="One")
    await _confirm(client, await _presigned_key(client, "two.wav"), title="Two")

    listed = await client.get("/api/v1/tracks")
    fetched = await client.get(f"/api/v1/tracks/{first['id']}")
    patched = await client.patch(f"/api/v1/tracks/{first['id']}", json={"title": "One (v2)", "version": "002"})

    assert listed.status_code == 200
    assert {t["title"] for t in listed.json()} == {"One", "Two"}
    assert fetched.json()["title"] == "One"
    assert patched.status_code == 200
    assert patched.json()["title"] == "One (v2)"
    assert patched.json()["version"] == "002"
    assert patched.json()["filename"] == "demo.wav"


@pytest.mark.asyncio
async def test_update_rejects_null_title(client) -> None:
    track = await _confirm(client, await _presigned_key(client))

    response = await client.patch(f"/api/v1/tracks/{track['id']}", json={"title": None})

    assert response.status_code == 400
    assert response.json()["details"] == [{"field": "title", "message": "Track title cannot be empty"}]


@pytest.mark.asyncio
async def test_unknown_track_is_not_found(client) -> None:
    response = await client.get(f"/api/v1/tracks/{uuid.uuid4()}")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_other_users_private_track_is_hidden(client, session_maker) -> None:
    async with session_maker() as session:
        track = Track(
            user_id="user_bob", title="Bob's", key="private/user_bob/202610/abc-b.wav",
            filename="b.wav", size_bytes=10, visibility="private",
        )
        session.add(track)
        await session.commit()
        track_id = track.id

    response = await client.get(f"/api/v1/tracks/{track_id}")

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_removes_object_and_releases_usage(client, storage, session_maker) -> None:
    key = await _presigned_key(client)
    track = await _confirm(client, key)

    response = await client.delete(f"/api/v1/tracks/{track['id']}")

    assert response.status_code == 204
    assert storage.deleted == [key]
    assert (await client.get(f"/api/v1/tracks/{track['id']}")).status_code == 404
    async with session_maker() as session:
        snapshot = await UsageService(session).snapshot("user_alice")
    assert snapshot.track_count == 0
    assert snapshot.storage_bytes == 0


@pytest.mark.asyncio
async def test_delete_keeps_track_when_storage_fails(client, storage) -> None:
    track = await _confirm(client, await _presigned_key(client))
    storage.fail_deletes = True

    response = await client.delete(f"/api/v1/tracks/{track['id']}")

    assert response.status_code == 502
    assert (await client.get(f"/api/v1/tracks/{track['id']}")).status_code == 200


@pytest.mark.asyncio
async def test_delete_tolerates_object_already_gone(client, storage) -> None:
    key = await _presigned_key(client)
    track = await _confirm(client, key)
    del storage.objects[key]

    response = await client.delete(f"/api/v1/tracks/{track['id']}")

    assert response.status_code == 204


@pytest.mark.asyncio
async def test_play_issues_download_url_and_charges_bandwidth(client, session_maker) -> None:
    track = await _confirm(client, await _presigned_key(client))

    response = await client.post(f"/api/v1/tracks/{track['id']}/play")

    assert response.status_code == 200
    body = response.json()
    assert body["track"]["id"] == track["id"]
    assert "method=GET" in body["download_url"]
    async with session_maker() as session:
        snapshot = await UsageService(session).snapshot("user_alice")
    assert snapshot.bandwidth_bytes == 2 * MB


@pytest.mark.asyncio
async def test_play_denied_once_bandwidth_is_spent(client, session_maker) -> None:
    track = await _confirm(client, await _presigned_key(client))
    async with session_maker() as session:
        usage = await UsageService(session).get_or_create("user_alice")
        usage.current_bandwidth = 5 * 1024 * MB
        await session.commit()

    response = await client.post(f"/api/v1/tracks/{track['id']}/play")

    assert response.status_code == 403
    assert response.json()["dimension"] == "bandwidthBytes"


@pytest.mark.asyncio
async def test_comments_thread_on_a_track(client) -> None:
    track = await _confirm(client, await _presigned_key(client))
    url = f"/api/v1/tracks/{track['id']}/comments"

    parent = await client.post(url, json={"content": "Love the hook", "timestamp": 12.5})
    reply = await client.post(url, json={"content": "Agreed", "parentId": parent.json()["id"]})
    orphan = await client.post(url, json={"content": "Lost", "parentId": str(uuid.uuid4())})
    listed = await client.get(url)

    assert parent.status_code == 201
    assert parent.json()["timestamp"] == 12.5
    assert reply.status_code == 201
    assert reply.json()["parent_id"] == parent.json()["id"]
    assert orphan.status_code == 404
    assert [c["content"] for c in listed.json()] == ["Love the hook", "Agreed"]


@pytest.mark.asyncio
async def test_comment_validation(client) -> None:
    track = await _confirm(client, await _presigned_key(client))

    response = await client.post(f"/api/v1/tracks/{track['id']}/comments", json={"content": "", "timestamp": -1})

    assert response.status_code == 400
    assert [d["message"] for d in response.json()["details"]] == [
        "Comment cannot be empty",
        "Timestamp cannot be negative",
    ]


@pytest.mark.asyncio
async def test_pro_user_confirms_private_track(client, session_maker) -> None:
    async with session_maker() as session:
        session.add(User(id="user_alice", tier="pro"))
        await session.commit()
    response = await client.post("/api/v1/uploads/presign", json={"filename": "secret.wav", "fileSize": 2 * MB})

    track = await _confirm(client, response.json()["key"], filename="secret.wav")

    assert track["key"].startswith("private/user_alice/")


@pytest.mark.asyncio
async def test_play_is_not_blocked_by_a_lowered_track_limit(client, session_maker) -> None:
    first = await _confirm(client, await _presigned_key(client, "one.wav"))
    await _confirm(client, await _presigned_key(client, "two.wav"))
    async with session_maker() as session:
        await TierService(session).upsert_tier("free", DEFAULT_TIERS["free"].model_copy(update={"max_tracks": 1}))

    played = await client.post(f"/api/v1/tracks/{first['id']}/play")
    upload = await client.post("/api/v1/uploads/presign", json={"filename": "three.wav", "isPublic": True, "fileSize": 1})

    assert played.status_code == 200
    assert upload.status_code == 403
    assert upload.json()["dimension"] == "trackCount"


@pytest.mark.asyncio
async def test_confirm_rejects_size_that_differs_from_stored_object(client, session_maker) -> None:
    key = await _presigned_key(client, size=2 * MB)

    response = await client.post(
        "/api/v1/tracks", json={"title": "Tiny?", "key": key, "filename": "demo.wav", "sizeBytes": 1},
    )

    assert response.status_code == 400
    assert response.json()["details"] == [
        {"field": "sizeBytes", "message": "File size does not match the uploaded object"}
    ]
    async with session_maker() as session:
        snapshot = await UsageService(session).snapshot("user_alice")
    assert snapshot.storage_bytes == 0


@pytest.mark.asyncio
async def test_confirm_requires_the_object_to_exist(client) -> None:
    response = await client.post(
        "/api/v1/tracks",
        json={"title": "Ghost", "key": "public/user_alice/202610/abc-ghost.wav", "filename": "ghost.wav", "sizeBytes": 1},
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_confirm_rejects_null_description_and_tags(client) -> None:
    key = await _presigned_key(client)

    rejected = await client.post(
        "/api/v1/tracks",
        json={"title": "T", "key": key, "filename": "demo.wav", "sizeBytes": 2 * MB, "description": None, "tags": None},
    )
    accepted = await _confirm(client, key)

    assert rejected.status_code == 400
    assert rejected.json()["details"] == [
        {"field": "description", "message": "Description must be a string"},
        {"field": "tags", "message": "Tags must be a list"},
    ]
    assert accepted["description"] == ""
    assert accepted["tags"] == []


@pytest.mark.asyncio
async def test_update_rejects_null_description(client) -> None:
    track = await _confirm(client, await _presigned_key(client), description="first take")

    response = await client.patch(f"/api/v1/tracks/{track['id']}", json={"description": None})

    assert response.status_code == 400
    assert response.json()["details"][0]["field"] == "description"
