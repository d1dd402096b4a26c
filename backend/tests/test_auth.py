from conftest import register_user


async def test_register_returns_token_and_user(client):
    resp = await client.post(
        "/api/auth/register",
        json={"email": "ana@example.com", "username": "ana", "password": "s3cret-pass", "timezone": "Europe/Lisbon"},
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["token"]
    assert body["user"]["email"] == "ana@example.com"
    assert body["user"]["timezone"] == "Europe/Lisbon"


async def test_register_creates_myself_companion(client, headers):
    resp = await client.get("/api/companions", headers=headers)
    assert resp.status_code == 200
    companions = resp.json()
    assert len(companions) == 1
    assert companions[0]["is_myself"] is True
    assert companions[0]["relationship"] == "Myself"


async def test_duplicate_email_rejected(client, auth):
    resp = await client.post(
        "/api/auth/register",
        json={"email": "traveler@example.com", "username": "again", "password": "another-pass"},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Email already registered"


async def test_short_password_rejected(client):
    resp = await client.post(
        "/api/auth/register", json={"email": "x@example.com", "username": "x", "password": "short"}
    )
    assert resp.status_code == 422


async def test_login(client, auth):
    resp = await client.post("/api/auth/login", json={"email": "traveler@example.com", "password": "s3cret-pass"})
    assert resp.status_code == 200
    assert resp.json()["user"]["username"] == "traveler"

    bad = await client.post("/api/auth/login", json={"email": "traveler@example.com", "password": "wrong-pass"})
    assert bad.status_code == 401
    assert bad.json()["detail"] == "Invalid email or password"


async def test_requests_without_token_are_rejected(client):
    resp = await client.get("/api/users/me")
    assert resp.status_code == 401
    resp = await client.get("/api/users/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401


async def test_get_and_update_me(client, headers):
    resp = await client.get("/api/users/me", headers=headers)
    assert resp.json()["username"] == "traveler"

    resp = await client.patch("/api/users/me", json={"timezone": "Asia/Tokyo"}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["timezone"] == "Asia/Tokyo"
    assert resp.json()["username"] == "traveler"

    resp = await client.patch("/api/users/me", json={"timezone": "Mars/Olympus"}, headers=headers)
    assert resp.status_code == 400


async def test_users_are_isolated(client):
    first = await register_user(client, email="one@example.com", username="one")
    second = await register_user(client, email="two@example.com", username="two")
    me_one = (await client.get("/api/users/me", headers=first["headers"])).json()
    me_two = (await client.get("/api/users/me", headers=second["headers"])).json()
    assert me_one["id"] != me_two["id"]
