from conftest import API, upload_file
from vidtube.repositories.user_repository import UserRepository


async def register(client, username="alice", email="alice@example.com", password="secret123", **files):
    files = files or {"avatar": upload_file()}
    return await client.post(
        f"{API}/users/register",
        data={"fullname": "Alice Kim", "email": email, "username": username, "password": password},
        files=files,
    )


async def test_register_returns_public_fields_only(client, media):
    response = await register(client, username="Alice")

    assert response.status_code == 201
    body = response.json()
    assert body["statusCode"] == 201
    assert body["success"] is True
    user = body["data"]
    assert user["username"] == "alice"
    assert user["avatar"].startswith("https://media.test/vidtube/")
    assert user["coverImage"] == ""
    assert "password" not in user
    assert "refreshToken" not in user
    assert len(media.uploaded) == 1


async def test_register_with_cover_image(client, media):
    response = await register(
        client,
        avatar=upload_file(),
        coverImage=upload_file("cover.jpg", b"cover", "image/jpeg"),
    )

    assert response.status_code == 201
    assert response.json()["data"]["coverImage"].endswith(".jpg")
    assert len(media.uploaded) == 2


async def test_register_twice_conflicts(client):
    assert (await register(client)).status_code == 201

    same_username = await register(client, email="other@example.com")
    same_email = await register(client, username="bob")

    for response in (same_username, same_email):
        assert response.status_code == 409
        body = response.json()
        assert body == {
            "statusCode": 409,
            "message": "user with email or username already exists.",
            "success": False,
            "errors": [],
        }


async def test_register_requires_avatar(client, media):
    response = await client.post(
        f"{API}/users/register",
        data={"fullname": "Alice", "email": "alice@example.com", "username": "alice", "password": "pw"},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "avatar file is required!"
    assert media.uploaded == []


async def test_register_rejects_blank_fields(client):
    response = await client.post(
        f"{API}/users/register",
        data={"fullname": "   ", "email": "alice@example.com", "username": "alice", "password": "pw"},
        files={"avatar": upload_file()},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "fullname is required!"


async def test_login_by_email_sets_http_only_cookies(client):
    await register(client)

    response = await client.post(f"{API}/users/login", json={"email": "alice@example.com", "password": "secret123"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user"]["email"] == "alice@example.com"
    assert data["accessToken"] and data["refreshToken"]

    cookies = response.headers.get_list("set-cookie")
    access_cookie = next(c for c in cookies if c.startswith("accessToken="))
    refresh_cookie = next(c for c in cookies if c.startswith("refreshToken="))
    for cookie in (access_cookie, refresh_cookie):
        assert "HttpOnly" in cookie
        assert "Secure" in cookie


async def test_login_failures(client):
    await register(client)

    missing = await client.post(f"{API}/users/login", json={"password": "secret123"})
    unknown = await client.post(f"{API}/users/login", json={"username": "nobody", "password": "secret123"})
    wrong = await client.post(f"{API}/users/login", json={"username": "alice", "password": "nope"})

    assert missing.status_code == 400
    assert unknown.status_code == 404
    assert wrong.status_code == 401
    assert wrong.json()["message"] == "incorrect password!"


async def test_current_user_requires_token(client, create_user):
    alice = await create_user("alice")

    ok = await client.get(f"{API}/users/current-user", headers=alice.headers)
    missing = await client.get(f"{API}/users/current-user")
    garbage = await client.get(f"{API}/users/current-user", headers={"Authorization": "Bearer not-a-jwt"})
    refresh_as_access = await client.get(
        f"{API}/users/current-user",
        headers={"Authorization": f"Bearer {alice.refresh_token}"},
    )

    assert ok.status_code == 200
    assert ok.json()["data"]["id"] == alice.id
    assert missing.status_code == 401
    assert garbage.status_code == 401
    assert refresh_as_access.status_code == 401


async def test_cookie_token_takes_precedence_over_header(client, create_user):
    alice = await create_user("alice")
    bob = await create_user("bob")

    response = await client.get(
        f"{API}/users/current-user",
        headers={"Cookie": f"accessToken={alice.access_token}", **bob.headers},
    )
    assert response.status_code == 200
    assert response.json()["data"]["username"] == "alice"

    invalid_cookie = await client.get(
        f"{API}/users/current-user",
        headers={"Cookie": "accessToken=broken", **bob.headers},
    )
    assert invalid_cookie.status_code == 401


async def test_refresh_token_rotation(client, create_user):
    alice = await create_user("alice")

    refreshed = await client.post(f"{API}/users/refresh-token", json={"refreshToken": alice.refresh_token})
    assert refreshed.status_code == 200
    new_tokens = refreshed.json()["data"]
    assert new_tokens["refreshToken"] != alice.refresh_token

    reused = await client.post(f"{API}/users/refresh-token", json={"refreshToken": alice.refresh_token})
    assert reused.status_code == 401

    via_cookie = await client.post(
        f"{API}/users/refresh-token",
        headers={"Cookie": f"refreshToken={new_tokens['refreshToken']}"},
    )
    assert via_cookie.status_code == 200


async def test_refresh_without_token_is_unauthorized(client):
    response = await client.post(f"{API}/users/refresh-token")
    assert response.status_code == 401


async def test_logout_invalidates_refresh_token(client, create_user):
    alice = await create_user("alice")

    response = await client.post(f"{API}/users/logout", headers=alice.headers)

    assert response.status_code == 200
    assert response.json()["data"] == {}
    cleared = response.headers.get_list("set-cookie")
    assert any(c.startswith("accessToken=") for c in cleared)
    assert any(c.startswith("refreshToken=") for c in cleared)

    refresh = await client.post(f"{API}/users/refresh-token", json={"refreshToken": alice.refresh_token})
    assert refresh.status_code == 401


async def test_logout_requires_authentication(client):
    response = await client.post(f"{API}/users/logout")
    assert response.status_code == 401
    assert response.json()["success"] is False


async def test_register_losing_race_removes_uploaded_media(client, media, monkeypatch):
    assert (await register(client)).status_code == 201

    # 사전 중복 검사를 통과한 뒤 유니크 제약에서 충돌하는 경우
    async def no_existing_user(self, username, email):
        return None

    monkeypatch.setattr(UserRepository, "find_by_username_or_email", no_existing_user)

    response = await register(
        client,
        avatar=upload_file(),
        coverImage=upload_file("cover.jpg", b"cover", "image/jpeg"),
    )

    assert response.status_code == 409
    assert media.deleted == media.uploaded[-2:]
