from conftest import auth_header, login


async def test_logout_single_device(client, test_user):
    phone = await login(client)
    laptop = await login(client)

    response = await client.post("/api/logout", json={"refresh_token": phone["refreshToken"]},
                                 headers=auth_header(phone["accessToken"]))

    assert response.status_code == 200
    data = response.json()["data"]
    assert data == {"scope": "single", "revokedCount": 1}

    # This device's refresh token is dead, the other device is untouched
    assert (await client.post("/api/refresh", json={"refresh_token": phone["refreshToken"]})).status_code == 401
    assert (await client.post("/api/refresh", json={"refresh_token": laptop["refreshToken"]})).status_code == 200


async def test_access_token_rejected_after_logout(client, test_user):
    tokens = await login(client)
    await client.post("/api/logout", json={"refresh_token": tokens["refreshToken"]},
                      headers=auth_header(tokens["accessToken"]))

    response = await client.get("/api/user", headers=auth_header(tokens["accessToken"]))

    assert response.status_code == 401
    assert response.json()["message"] == "Unauthorized: Token has been revoked"


async def test_logout_without_refresh_token_logs_out_everywhere(client, test_user):
    first = await login(client)
    second = await login(client)

    response = await client.post("/api/logout", headers=auth_header(first["accessToken"]))

    assert response.status_code == 200
    body = response.json()
    assert body["data"] == {"scope": "all", "revokedCount": 2}
    assert body["message"] == "Logged out from all devices"
    assert (await client.post("/api/refresh", json={"refresh_token": second["refreshToken"]})).status_code == 401


async def test_logout_with_unknown_refresh_token(client, test_user):
    tokens = await login(client)

    response = await client.post("/api/logout", json={"refresh_token": "invalid_token_format"},
                                 headers=auth_header(tokens["accessToken"]))

    # Idempotent: the access token is still revoked, nothing else happens
    assert response.status_code == 200
    assert response.json()["data"]["revokedCount"] == 0


async def test_logout_requires_authentication(client):
    response = await client.post("/api/logout", json={})

    assert response.status_code == 401
    assert response.json()["message"] == "Unauthorized: Missing or invalid token"


async def test_logout_all(client, test_user):
    sessions = [await login(client) for _ in range(3)]

    response = await client.post("/api/logout/all", headers=auth_header(sessions[0]["accessToken"]))

    assert response.status_code == 200
    assert response.json()["data"]["revokedCount"] == 3
    for tokens in sessions:
        refresh = await client.post("/api/refresh", json={"refresh_token": tokens["refreshToken"]})
        assert refresh.status_code == 401

    # logout/all does not blacklist the caller's access token
    assert (await client.get("/api/user", headers=auth_header(sessions[0]["accessToken"]))).status_code == 200
