from datetime import datetime, timedelta, timezone
from conftest import auth_header, login


async def test_get_user(client, test_user):
    tokens = await login(client)

    response = await client.get("/api/user", headers=auth_header(tokens["accessToken"]))

    assert response.status_code == 200
    user = response.json()["data"]["user"]
    assert user["id"] == test_user.id
    assert user["name"] == test_user.name
    assert "hashed_password" not in user


async def test_get_user_without_token(client):
    response = await client.get("/api/user")

    assert response.status_code == 401
    body = response.json()
    assert body["status"] == "error"
    assert body["error"] == "Unauthorized"
    assert body["message"] == "Unauthorized: Missing or invalid token"


async def test_get_user_with_wrong_scheme(client):
    response = await client.get("/api/user", headers={"Authorization": "Basic dXNlcjpwYXNz"})

    assert response.status_code == 401
    assert response.json()["message"] == "Unauthorized: Missing or invalid token"


async def test_get_user_with_garbage_token(client):
    response = await client.get("/api/user", headers=auth_header("not.a.token"))

    assert response.status_code == 401
    assert response.json()["message"] == "Unauthorized: Invalid or expired token"


async def test_get_user_with_expired_token(client, codec, test_user):
    token = codec.issue(test_user, now=datetime.now(timezone.utc) - timedelta(hours=1))

    response = await client.get("/api/user", headers=auth_header(token))

    assert response.status_code == 401
    assert response.json()["message"] == "Unauthorized: Invalid or expired token"


async def test_token_for_deleted_user_rejected(client, codec, session, test_user):
    token = codec.issue(test_user)
    session.delete(test_user)
    session.commit()

    response = await client.get("/api/user", headers=auth_header(token))

    assert response.status_code == 401
