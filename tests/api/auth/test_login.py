from conftest import TEST_PASSWORD, auth_header


async def test_login_success(client, test_user):
    response = await client.post("/api/login", json={
        "email": test_user.email,
        "password": TEST_PASSWORD
    })

    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Login successful"
    assert body["data"]["user"]["id"] == test_user.id
    assert body["data"]["accessToken"]
    assert body["data"]["refreshToken"]


async def test_login_email_is_case_insensitive(client, test_user):
    response = await client.post("/api/login", json={
        "email": test_user.email.upper(),
        "password": TEST_PASSWORD
    })

    assert response.status_code == 200


async def test_login_wrong_password(client, test_user):
    response = await client.post("/api/login", json={
        "email": test_user.email,
        "password": "WrongPassword1"
    })

    assert response.status_code == 422
    body = response.json()
    assert body["message"] == "The provided credentials are incorrect."
    assert body["data"]["errors"]["email"] == ["The provided credentials are incorrect."]


async def test_login_unknown_email(client):
    response = await client.post("/api/login", json={
        "email": "nobody@example.com",
        "password": TEST_PASSWORD
    })

    assert response.status_code == 422
    assert response.json()["message"] == "The provided credentials are incorrect."


async def test_access_token_from_login_authenticates(client, test_user):
    response = await client.post("/api/login", json={"email": test_user.email, "password": TEST_PASSWORD})
    token = response.json()["data"]["accessToken"]

    response = await client.get("/api/user", headers=auth_header(token))

    assert response.status_code == 200
    assert response.json()["data"]["user"]["email"] == test_user.email
