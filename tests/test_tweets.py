import uuid

from conftest import API


async def post_tweet(client, user, content):
    response = await client.post(f"{API}/tweets", json={"content": content}, headers=user.headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def test_create_tweet(client, create_user):
    alice = await create_user("alice")

    tweet = await post_tweet(client, alice, "  first tweet ")
    blank = await client.post(f"{API}/tweets", json={"content": ""}, headers=alice.headers)
    anonymous = await client.post(f"{API}/tweets", json={"content": "hi"})

    assert tweet["content"] == "first tweet"
    assert tweet["ownerId"] == alice.id
    assert blank.status_code == 400
    assert anonymous.status_code == 401


async def test_list_user_tweets(client, create_user):
    alice = await create_user("alice")
    bob = await create_user("bob")
    for n in range(3):
        await post_tweet(client, alice, f"tweet {n}")
    await post_tweet(client, bob, "bob's tweet")

    response = await client.get(f"{API}/tweets/{alice.id}")

    assert response.status_code == 200
    tweets = response.json()["data"]
    assert [t["content"] for t in tweets] == ["tweet 0", "tweet 1", "tweet 2"]
    assert all(t["owner"]["id"] == alice.id for t in tweets)
    assert all(t["likesCount"] == 0 for t in tweets)

    limited = await client.get(f"{API}/tweets/{alice.id}", params={"page": 2, "limit": 2})
    assert [t["content"] for t in limited.json()["data"]] == ["tweet 2"]


async def test_list_tweets_of_user_without_tweets(client, create_user):
    alice = await create_user("alice")

    empty = await client.get(f"{API}/tweets/{alice.id}")
    unknown = await client.get(f"{API}/tweets/{uuid.uuid4()}")

    assert empty.json()["data"] == []
    assert unknown.status_code == 404


async def test_update_and_delete_tweet(client, create_user):
    alice = await create_user("alice")
    bob = await create_user("bob")
    tweet = await post_tweet(client, alice, "original")
    await client.post(f"{API}/likes/toggle/t/{tweet['id']}", headers=bob.headers)

    forbidden = await client.patch(f"{API}/tweets/{tweet['id']}", json={"content": "x"}, headers=bob.headers)
    updated = await client.patch(f"{API}/tweets/{tweet['id']}", json={"content": "edited"}, headers=alice.headers)

    assert forbidden.status_code == 403
    assert updated.json()["data"]["content"] == "edited"

    listing = await client.get(f"{API}/tweets/{alice.id}")
    assert listing.json()["data"][0]["likesCount"] == 1

    assert (await client.delete(f"{API}/tweets/{tweet['id']}", headers=bob.headers)).status_code == 403
    deleted = await client.delete(f"{API}/tweets/{tweet['id']}", headers=alice.headers)
    assert deleted.status_code == 200
    assert deleted.json()["data"]["id"] == tweet["id"]

    assert (await client.get(f"{API}/tweets/{alice.id}")).json()["data"] == []
    assert (await client.delete(f"{API}/tweets/{tweet['id']}", headers=alice.headers)).status_code == 404
