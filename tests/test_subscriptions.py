import uuid

from conftest import API


async def test_toggle_subscription_alternates(client, create_user):
    alice = await create_user("alice")
    bob = await create_user("bob")
    url = f"{API}/subscriptions/c/{alice.id}"

    results = [(await client.post(url, headers=bob.headers)).json() for _ in range(4)]

    assert [r["data"]["subscribed"] for r in results] == [True, False, True, False]
    assert results[0]["message"] == "channel subscribed successfully."
    assert results[0]["data"]["subscription"]["subscriberId"] == bob.id
    assert results[0]["data"]["subscription"]["channelId"] == alice.id

    subscribers = await client.get(url)
    assert subscribers.json()["data"] == []


async def test_toggle_subscription_errors(client, create_user):
    alice = await create_user("alice")

    own = await client.post(f"{API}/subscriptions/c/{alice.id}", headers=alice.headers)
    unknown = await client.post(f"{API}/subscriptions/c/{uuid.uuid4()}", headers=alice.headers)
    malformed = await client.post(f"{API}/subscriptions/c/bad", headers=alice.headers)
    anonymous = await client.post(f"{API}/subscriptions/c/{alice.id}")

    assert own.status_code == 400
    assert own.json()["message"] == "you cannot subscribe to your own channel!"
    assert unknown.status_code == 404
    assert malformed.status_code == 400
    assert anonymous.status_code == 401


async def test_subscriber_and_channel_lists(client, create_user):
    alice = await create_user("alice")
    bob = await create_user("bob")
    carol = await create_user("carol")

    await client.post(f"{API}/subscriptions/c/{alice.id}", headers=bob.headers)
    await client.post(f"{API}/subscriptions/c/{alice.id}", headers=carol.headers)
    await client.post(f"{API}/subscriptions/c/{carol.id}", headers=bob.headers)

    subscribers = (await client.get(f"{API}/subscriptions/c/{alice.id}")).json()["data"]
    assert [s["subscriber"]["username"] for s in subscribers] == ["bob", "carol"]
    assert all(s["subscribedAt"] for s in subscribers)
    assert "password" not in subscribers[0]["subscriber"]

    channels = (await client.get(f"{API}/subscriptions/u/{bob.id}")).json()["data"]
    assert [c["channel"]["username"] for c in channels] == ["alice", "carol"]
    assert [c["subscribersCount"] for c in channels] == [2, 1]

    assert (await client.get(f"{API}/subscriptions/u/{alice.id}")).json()["data"] == []
    assert (await client.get(f"{API}/subscriptions/u/nope")).status_code == 400
