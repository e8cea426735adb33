import uuid

from conftest import API


async def add_comment(client, user, video_id, content):
    response = await client.post(f"{API}/comments/{video_id}", json={"content": content}, headers=user.headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def test_add_comment_validation(client, create_user, create_video):
    alice = await create_user("alice")
    video = await create_video(alice)

    blank = await client.post(f"{API}/comments/{video['id']}", json={"content": "   "}, headers=alice.headers)
    missing_video = await client.post(f"{API}/comments/{uuid.uuid4()}", json={"content": "hi"}, headers=alice.headers)
    bad_id = await client.post(f"{API}/comments/123", json={"content": "hi"}, headers=alice.headers)
    anonymous = await client.post(f"{API}/comments/{video['id']}", json={"content": "hi"})

    assert blank.status_code == 400
    assert blank.json()["message"] == "content is required!"
    assert missing_video.status_code == 404
    assert bad_id.status_code == 400
    assert anonymous.status_code == 401


async def test_list_comments_page(client, create_user, create_video):
    alice = await create_user("alice")
    bob = await create_user("bob")
    video = await create_video(alice)
    for n in range(12):
        await add_comment(client, bob, video["id"], f"comment {n:02d}")

    response = await client.get(f"{API}/comments/{video['id']}", params={"page": 2, "limit": 5})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["totalComments"] == 12
    assert data["page"] == 2
    assert data["limit"] == 5
    assert [c["content"] for c in data["comments"]] == [f"comment {n:02d}" for n in range(5, 10)]
    first = data["comments"][0]
    assert first["commentedBy"]["username"] == "bob"
    assert "password" not in first["commentedBy"]
    assert first["likesCount"] == 0


async def test_list_comments_of_unknown_video_is_empty(client):
    response = await client.get(f"{API}/comments/{uuid.uuid4()}")

    assert response.status_code == 200
    assert response.json()["data"]["comments"] == []


async def test_comment_likes_are_counted(client, create_user, create_video):
    alice = await create_user("alice")
    bob = await create_user("bob")
    video = await create_video(alice)
    comment = await add_comment(client, bob, video["id"], "nice")

    await client.post(f"{API}/likes/toggle/c/{comment['id']}", headers=alice.headers)
    await client.post(f"{API}/likes/toggle/c/{comment['id']}", headers=bob.headers)

    response = await client.get(f"{API}/comments/{video['id']}")
    assert response.json()["data"]["comments"][0]["likesCount"] == 2


async def test_update_and_delete_comment_by_owner(client, create_user, create_video):
    alice = await create_user("alice")
    bob = await create_user("bob")
    video = await create_video(alice)
    comment = await add_comment(client, bob, video["id"], "first")

    forbidden = await client.patch(f"{API}/comments/{comment['id']}", json={"content": "x"}, headers=alice.headers)
    assert forbidden.status_code == 403

    updated = await client.patch(f"{API}/comments/{comment['id']}", json={"content": " edited "}, headers=bob.headers)
    assert updated.status_code == 200
    assert updated.json()["data"]["content"] == "edited"

    await client.post(f"{API}/likes/toggle/c/{comment['id']}", headers=alice.headers)

    forbidden_delete = await client.delete(f"{API}/comments/{comment['id']}", headers=alice.headers)
    assert forbidden_delete.status_code == 403

    deleted = await client.delete(f"{API}/comments/{comment['id']}", headers=bob.headers)
    assert deleted.status_code == 200
    assert deleted.json()["data"]["id"] == comment["id"]

    again = await client.delete(f"{API}/comments/{comment['id']}", headers=bob.headers)
    assert again.status_code == 404

    listing = await client.get(f"{API}/comments/{video['id']}")
    assert listing.json()["data"]["totalComments"] == 0

    detail = await client.get(f"{API}/videos/{video['id']}")
    assert detail.json()["data"]["commentsCount"] == 0
