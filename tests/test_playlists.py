import uuid

from conftest import API


async def create_playlist(client, user, name="Favorites", description="best clips"):
    response = await client.post(
        f"{API}/playlists",
        json={"name": name, "description": description},
        headers=user.headers,
    )
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def test_playlist_end_to_end(client, create_user, create_video):
    alice = await create_user("alice")
    bob = await create_user("bob")
    first = await create_video(bob, title="one", description="1")
    second = await create_video(bob, title="two", description="2")

    playlist = await create_playlist(client, alice)
    assert playlist["videos"] == []
    assert playlist["ownerId"] == alice.id
    playlist_id = playlist["id"]

    forbidden = await client.patch(f"{API}/playlists/{playlist_id}/add/{first['id']}", headers=bob.headers)
    assert forbidden.status_code == 403

    for video in (first, second, first):
        response = await client.patch(f"{API}/playlists/{playlist_id}/add/{video['id']}", headers=alice.headers)
        assert response.status_code == 200
    assert response.json()["data"]["videos"] == [first["id"], second["id"], first["id"]]

    detail = await client.get(f"{API}/playlists/{playlist_id}")
    data = detail.json()["data"]
    assert data["totalVideos"] == 3
    assert [v["id"] for v in data["videos"]] == [first["id"], second["id"], first["id"]]
    assert data["videos"][0]["owner"]["username"] == "bob"
    assert data["owner"]["username"] == "alice"

    removed = await client.patch(f"{API}/playlists/{playlist_id}/remove/{first['id']}", headers=alice.headers)
    assert removed.status_code == 200
    assert removed.json()["data"]["videos"] == [second["id"]]

    appended = await client.patch(f"{API}/playlists/{playlist_id}/add/{first['id']}", headers=alice.headers)
    assert appended.json()["data"]["videos"] == [second["id"], first["id"]]


async def test_add_video_lookup_errors(client, create_user, create_video):
    alice = await create_user("alice")
    video = await create_video(alice)
    playlist = await create_playlist(client, alice)

    unknown_playlist = await client.patch(f"{API}/playlists/{uuid.uuid4()}/add/{video['id']}", headers=alice.headers)
    unknown_video = await client.patch(f"{API}/playlists/{playlist['id']}/add/{uuid.uuid4()}", headers=alice.headers)
    malformed = await client.patch(f"{API}/playlists/{playlist['id']}/add/abc", headers=alice.headers)

    assert unknown_playlist.status_code == 404
    assert unknown_playlist.json()["message"] == "playlist not found!"
    assert unknown_video.status_code == 404
    assert unknown_video.json()["message"] == "video not found!"
    assert malformed.status_code == 400


async def test_create_playlist_duplicate_and_validation(client, create_user):
    alice = await create_user("alice")
    bob = await create_user("bob")
    await create_playlist(client, alice)

    duplicate = await client.post(
        f"{API}/playlists", json={"name": "Favorites", "description": "best clips"}, headers=alice.headers
    )
    missing_description = await client.post(f"{API}/playlists", json={"name": "x"}, headers=alice.headers)

    assert duplicate.status_code == 409
    assert missing_description.status_code == 400
    # 다른 사용자는 같은 이름/설명 사용 가능
    await create_playlist(client, bob)


async def test_update_playlist(client, create_user):
    alice = await create_user("alice")
    bob = await create_user("bob")
    playlist = await create_playlist(client, alice)
    await create_playlist(client, alice, name="Later", description="watch later")

    url = f"{API}/playlists/{playlist['id']}"
    empty = await client.patch(url, json={}, headers=alice.headers)
    forbidden = await client.patch(url, json={"name": "Mine"}, headers=bob.headers)
    conflict = await client.patch(url, json={"name": "Later", "description": "watch later"}, headers=alice.headers)
    unchanged = await client.patch(url, json={"name": "Favorites"}, headers=alice.headers)
    renamed = await client.patch(url, json={"description": "top picks"}, headers=alice.headers)

    assert empty.status_code == 400
    assert forbidden.status_code == 403
    assert conflict.status_code == 409
    assert unchanged.status_code == 200
    assert renamed.json()["data"]["name"] == "Favorites"
    assert renamed.json()["data"]["description"] == "top picks"


async def test_list_user_playlists(client, create_user, create_video):
    alice = await create_user("alice")
    video = await create_video(alice)
    first = await create_playlist(client, alice, name="A", description="a")
    await create_playlist(client, alice, name="B", description="b")
    await client.patch(f"{API}/playlists/{first['id']}/add/{video['id']}", headers=alice.headers)

    response = await client.get(f"{API}/playlists/user/{alice.id}")

    assert response.status_code == 200
    playlists = response.json()["data"]
    assert [p["name"] for p in playlists] == ["A", "B"]
    assert playlists[0]["totalVideos"] == 1
    assert [v["id"] for v in playlists[0]["videos"]] == [video["id"]]
    assert playlists[1]["videos"] == []

    unknown = await client.get(f"{API}/playlists/user/{uuid.uuid4()}")
    assert unknown.status_code == 404


async def test_delete_playlist(client, create_user, create_video):
    alice = await create_user("alice")
    bob = await create_user("bob")
    video = await create_video(alice)
    playlist = await create_playlist(client, alice)
    await client.patch(f"{API}/playlists/{playlist['id']}/add/{video['id']}", headers=alice.headers)

    forbidden = await client.delete(f"{API}/playlists/{playlist['id']}", headers=bob.headers)
    deleted = await client.delete(f"{API}/playlists/{playlist['id']}", headers=alice.headers)

    assert forbidden.status_code == 403
    assert deleted.status_code == 200
    assert deleted.json()["data"]["videos"] == [video["id"]]
    assert (await client.get(f"{API}/playlists/{playlist['id']}")).status_code == 404
    assert (await client.get(f"{API}/videos/{video['id']}")).status_code == 200
