import os
import uuid

from conftest import API, upload_file
from vidtube.repositories.exceptions import DatabaseCommitError
from vidtube.repositories.video_repository import VideoRepository
from vidtube.services.media_service import public_id_from_url


async def test_publish_requires_authentication(client):
    response = await client.post(
        f"{API}/videos",
        data={"title": "t", "description": "d"},
        files={"videoFile": upload_file("clip.mp4"), "thumbnail": upload_file("thumb.jpg")},
    )
    assert response.status_code == 401


async def test_publish_requires_both_files(client, create_user, media):
    alice = await create_user("alice")
    uploaded_before = len(media.uploaded)

    response = await client.post(
        f"{API}/videos",
        data={"title": "t", "description": "d"},
        files={"videoFile": upload_file("clip.mp4", b"video", "video/mp4")},
        headers=alice.headers,
    )

    assert response.status_code == 400
    assert response.json()["message"] == "thumbnail is required!"
    assert len(media.uploaded) == uploaded_before


async def test_publish_stores_media_and_cleans_staging(client, create_user, create_video):
    alice = await create_user("alice")

    video = await create_video(alice, title="Intro", description="first upload")

    assert video["title"] == "Intro"
    assert video["ownerId"] == alice.id
    assert video["isPublished"] is True
    assert video["views"] == 0
    assert video["duration"] == 12.5
    assert video["videoFile"].endswith(".mp4")
    assert video["thumbnail"].endswith(".jpg")
    assert os.listdir(os.environ["UPLOAD_TEMP_DIR"]) == []


async def test_publish_duration_override(client, create_user, create_video):
    alice = await create_user("alice")

    video = await create_video(alice, duration="95.5")
    assert video["duration"] == 95.5

    invalid = await client.post(
        f"{API}/videos",
        data={"title": "other", "description": "other", "duration": "long"},
        files={"videoFile": upload_file("clip.mp4"), "thumbnail": upload_file("thumb.jpg")},
        headers=alice.headers,
    )
    assert invalid.status_code == 400
    assert invalid.json()["message"] == "invalid duration!"


async def test_publish_duplicate_published_video_conflicts(client, create_user, create_video):
    alice = await create_user("alice")
    bob = await create_user("bob")
    await create_video(alice, title="Same", description="same")

    response = await client.post(
        f"{API}/videos",
        data={"title": "Same", "description": "same"},
        files={"videoFile": upload_file("clip.mp4"), "thumbnail": upload_file("thumb.jpg")},
        headers=bob.headers,
    )
    assert response.status_code == 409


async def test_get_video_detail(client, create_user, create_video):
    alice = await create_user("alice")
    video = await create_video(alice)

    response = await client.get(f"{API}/videos/{video['id']}")

    assert response.status_code == 200
    detail = response.json()["data"]
    assert detail["owner"] == {
        "id": alice.id,
        "username": "alice",
        "fullname": "Alice",
        "avatar": detail["owner"]["avatar"],
    }
    assert detail["likesCount"] == 0
    assert detail["commentsCount"] == 0

    assert (await client.get(f"{API}/videos/not-an-id")).status_code == 400
    assert (await client.get(f"{API}/videos/{uuid.uuid4()}")).status_code == 404


async def test_list_videos_sorts_before_paginating(client, create_user, create_video):
    alice = await create_user("alice")
    # 생성 순서와 제목 순서를 다르게
    for n in (7, 3, 12, 1, 9, 5, 11, 2, 8, 4, 10, 6):
        await create_video(alice, title=f"Video {n:02d}", description=f"clip {n}")

    page_two = await client.get(f"{API}/videos", params={"sortBy": "title", "page": 2, "limit": 5})
    assert page_two.status_code == 200
    assert [v["title"] for v in page_two.json()["data"]] == [f"Video {n:02d}" for n in range(6, 11)]

    descending = await client.get(f"{API}/videos", params={"sortBy": "title", "sortType": "-1", "limit": 3})
    assert [v["title"] for v in descending.json()["data"]] == ["Video 12", "Video 11", "Video 10"]

    past_end = await client.get(f"{API}/videos", params={"page": 4, "limit": 5})
    assert past_end.status_code == 200
    assert past_end.json()["data"] == []


async def test_list_videos_page_params_fall_back_to_defaults(client, create_user, create_video):
    alice = await create_user("alice")
    for n in range(12):
        await create_video(alice, title=f"Video {n:02d}", description="same channel")

    response = await client.get(f"{API}/videos", params={"page": "zero", "limit": "-3"})

    assert response.status_code == 200
    assert len(response.json()["data"]) == 10


async def test_list_videos_rejects_unknown_sort(client):
    bad_field = await client.get(f"{API}/videos", params={"sortBy": "password"})
    bad_direction = await client.get(f"{API}/videos", params={"sortType": "sideways"})

    assert bad_field.status_code == 400
    assert bad_direction.status_code == 400


async def test_search_matches_text_or_owner(client, create_user, create_video):
    alice = await create_user("alice")
    bob = await create_user("bob")
    await create_video(alice, title="Cooking Pasta", description="dinner")
    await create_video(alice, title="Morning run", description="5km")
    await create_video(bob, title="Guitar", description="learn PASTA songs")
    await create_video(bob, title="Piano", description="scales")

    by_text = await client.get(f"{API}/videos", params={"query": "pasta", "sortBy": "title"})
    assert [v["title"] for v in by_text.json()["data"]] == ["Cooking Pasta", "Guitar"]

    text_or_owner = await client.get(
        f"{API}/videos",
        params={"query": "piano", "userId": alice.id, "sortBy": "title"},
    )
    assert [v["title"] for v in text_or_owner.json()["data"]] == ["Cooking Pasta", "Morning run", "Piano"]

    invalid_user = await client.get(f"{API}/videos", params={"userId": "nope"})
    assert invalid_user.status_code == 400


async def test_update_video_by_owner_only(client, create_user, create_video, media):
    alice = await create_user("alice")
    bob = await create_user("bob")
    video = await create_video(alice)

    forbidden = await client.patch(f"{API}/videos/{video['id']}", data={"title": "hacked"}, headers=bob.headers)
    assert forbidden.status_code == 403

    nothing = await client.patch(f"{API}/videos/{video['id']}", headers=alice.headers)
    assert nothing.status_code == 400

    updated = await client.patch(
        f"{API}/videos/{video['id']}",
        data={"title": "  Renamed  "},
        files={"thumbnail": upload_file("new.png", b"new thumb", "image/png")},
        headers=alice.headers,
    )
    assert updated.status_code == 200
    data = updated.json()["data"]
    assert data["title"] == "Renamed"
    assert data["description"] == video["description"]
    assert data["thumbnail"] != video["thumbnail"]
    assert public_id_from_url(video["thumbnail"]) in media.deleted


async def test_toggle_publish(client, create_user, create_video):
    alice = await create_user("alice")
    bob = await create_user("bob")
    video = await create_video(alice)

    first = await client.patch(f"{API}/videos/{video['id']}/toggle-publish", headers=alice.headers)
    second = await client.patch(f"{API}/videos/{video['id']}/toggle-publish", headers=alice.headers)
    forbidden = await client.patch(f"{API}/videos/{video['id']}/toggle-publish", headers=bob.headers)

    assert first.json()["data"]["isPublished"] is False
    assert second.json()["data"]["isPublished"] is True
    assert forbidden.status_code == 403


async def test_unpublished_duplicate_is_allowed(client, create_user, create_video):
    alice = await create_user("alice")
    video = await create_video(alice, title="Draft", description="draft")
    await client.patch(f"{API}/videos/{video['id']}/toggle-publish", headers=alice.headers)

    again = await create_video(alice, title="Draft", description="draft")
    assert again["id"] != video["id"]


async def test_delete_video_cascades(client, create_user, create_video, media):
    alice = await create_user("alice")
    bob = await create_user("bob")
    video = await create_video(alice)
    video_id = video["id"]

    comment_ids = []
    for n in range(3):
        response = await client.post(f"{API}/comments/{video_id}", json={"content": f"c{n}"}, headers=bob.headers)
        comment_ids.append(response.json()["data"]["id"])
    await client.post(f"{API}/likes/toggle/v/{video_id}", headers=bob.headers)
    await client.post(f"{API}/likes/toggle/c/{comment_ids[0]}", headers=alice.headers)

    playlist = await client.post(f"{API}/playlists", json={"name": "mix", "description": "d"}, headers=bob.headers)
    playlist_id = playlist.json()["data"]["id"]
    await client.patch(f"{API}/playlists/{playlist_id}/add/{video_id}", headers=bob.headers)

    forbidden = await client.delete(f"{API}/videos/{video_id}", headers=bob.headers)
    assert forbidden.status_code == 403

    response = await client.delete(f"{API}/videos/{video_id}", headers=alice.headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["video"]["id"] == video_id
    assert data["deletedComments"] == 3
    assert data["deletedLikes"] == 2
    assert data["failedMediaRemovals"] == []
    assert public_id_from_url(video["videoFile"]) in media.deleted
    assert public_id_from_url(video["thumbnail"]) in media.deleted

    comments = await client.get(f"{API}/comments/{video_id}")
    assert comments.json()["data"]["comments"] == []
    assert comments.json()["data"]["totalComments"] == 0

    assert (await client.get(f"{API}/videos/{video_id}")).status_code == 404

    liked = await client.get(f"{API}/likes/videos", headers=bob.headers)
    assert liked.json()["data"] == []

    playlist_after = await client.get(f"{API}/playlists/{playlist_id}")
    assert playlist_after.json()["data"]["videos"] == []
    assert playlist_after.json()["data"]["totalVideos"] == 0


async def test_delete_video_reports_failed_media_removal(client, create_user, create_video, media):
    alice = await create_user("alice")
    video = await create_video(alice)
    media.fail_deletes = True

    response = await client.delete(f"{API}/videos/{video['id']}", headers=alice.headers)

    assert response.status_code == 200
    assert sorted(response.json()["data"]["failedMediaRemovals"]) == sorted([
        public_id_from_url(video["videoFile"]),
        public_id_from_url(video["thumbnail"]),
    ])
    assert (await client.get(f"{API}/videos/{video['id']}")).status_code == 404


async def test_huge_page_returns_empty_list(client, create_user, create_video):
    alice = await create_user("alice")
    await create_video(alice)

    videos = await client.get(f"{API}/videos", params={"page": "99999999999999999999"})
    comments = await client.get(f"{API}/comments/{uuid.uuid4()}", params={"page": "99999999999999999999", "limit": "1"})

    assert videos.status_code == 200
    assert videos.json()["data"] == []
    assert comments.status_code == 200
    assert comments.json()["data"]["comments"] == []


async def test_non_canonical_id_is_bad_request(client, create_user, create_video):
    alice = await create_user("alice")
    video = await create_video(alice)
    parsed = uuid.UUID(video["id"])

    for variant in (parsed.hex, video["id"].upper(), f"{{{video['id']}}}", parsed.urn):
        response = await client.get(f"{API}/videos/{variant}")
        assert response.status_code == 400, variant
        assert response.json()["message"] == "invalid videoId!"


async def test_publish_commit_failure_removes_uploaded_media(client, create_user, media, monkeypatch):
    alice = await create_user("alice")

    async def failing_commit(self):
        raise DatabaseCommitError("something went wrong while saving data!")

    monkeypatch.setattr(VideoRepository, "commit", failing_commit)

    response = await client.post(
        f"{API}/videos",
        data={"title": "t", "description": "d"},
        files={"videoFile": upload_file("clip.mp4"), "thumbnail": upload_file("thumb.jpg")},
        headers=alice.headers,
    )

    assert response.status_code == 500
    assert media.deleted == media.uploaded[-2:]


async def test_update_commit_failure_keeps_old_thumbnail(client, create_user, create_video, media, monkeypatch):
    alice = await create_user("alice")
    video = await create_video(alice)

    async def failing_commit(self):
        raise DatabaseCommitError("something went wrong while saving data!")

    monkeypatch.setattr(VideoRepository, "commit", failing_commit)

    response = await client.patch(
        f"{API}/videos/{video['id']}",
        files={"thumbnail": upload_file("new.png", b"new thumb", "image/png")},
        headers=alice.headers,
    )

    assert response.status_code == 500
    assert media.deleted == [media.uploaded[-1]]
    assert public_id_from_url(video["thumbnail"]) not in media.deleted
