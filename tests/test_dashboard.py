from sqlalchemy import update

from conftest import API
from vidtube.models.video import Video


async def test_channel_stats(client, create_user, create_video, session_factory):
    alice = await create_user("alice")
    bob = await create_user("bob")
    carol = await create_user("carol")
    first = await create_video(alice, title="first", description="1")
    second = await create_video(alice, title="second", description="2")
    await create_video(bob, title="bob's", description="3")

    async with session_factory() as session:
        await session.execute(update(Video).where(Video.id == first["id"]).values(views=40))
        await session.execute(update(Video).where(Video.id == second["id"]).values(views=2))
        await session.commit()

    await client.post(f"{API}/likes/toggle/v/{first['id']}", headers=bob.headers)
    await client.post(f"{API}/likes/toggle/v/{first['id']}", headers=carol.headers)
    await client.post(f"{API}/likes/toggle/v/{second['id']}", headers=bob.headers)
    # 댓글 좋아요는 채널 좋아요 수에 포함하지 않음
    comment = await client.post(f"{API}/comments/{first['id']}", json={"content": "hi"}, headers=bob.headers)
    await client.post(f"{API}/likes/toggle/c/{comment.json()['data']['id']}", headers=carol.headers)
    await client.post(f"{API}/subscriptions/c/{alice.id}", headers=bob.headers)

    response = await client.get(f"{API}/dashboard/stats", headers=alice.headers)

    assert response.status_code == 200
    stats = response.json()["data"]
    assert stats["id"] == alice.id
    assert stats["username"] == "alice"
    assert stats["totalVideos"] == 2
    assert stats["totalVideoViews"] == 42
    assert stats["totalLikes"] == 3
    assert stats["totalSubscribers"] == 1


async def test_channel_stats_for_new_channel(client, create_user):
    alice = await create_user("alice")

    stats = (await client.get(f"{API}/dashboard/stats", headers=alice.headers)).json()["data"]

    assert stats["totalVideos"] == 0
    assert stats["totalVideoViews"] == 0
    assert stats["totalLikes"] == 0
    assert stats["totalSubscribers"] == 0


async def test_channel_videos_newest_first(client, create_user, create_video):
    alice = await create_user("alice")
    bob = await create_user("bob")
    older = await create_video(alice, title="older", description="1")
    newer = await create_video(alice, title="newer", description="2")
    await create_video(bob, title="other", description="3")

    response = await client.get(f"{API}/dashboard/videos", headers=alice.headers)

    assert response.status_code == 200
    videos = response.json()["data"]
    assert [v["id"] for v in videos] == [newer["id"], older["id"]]
    assert videos[0]["owner"]["id"] == alice.id
    assert (await client.get(f"{API}/dashboard/videos")).status_code == 401
