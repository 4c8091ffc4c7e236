from models.users import User
from utils.hashing import verify_password
from conftest import TEST_PASSWORD, auth_header, login


async def test_change_password_success(client, test_user, session):
    tokens = await login(client)

    response = await client.post("/api/change-password", json={
        "current_password": TEST_PASSWORD,
        "password": "NewPassword456",
        "password_confirmation": "NewPassword456"
    }, headers=auth_header(tokens["accessToken"]))

    assert response.status_code == 200
    assert response.json()["data"]["revokedCount"] == 1

    session.refresh(test_user)
    assert verify_password("NewPassword456", test_user.hashed_password)

    # Old sessions are gone, new password works
    assert (await client.post("/api/refresh", json={"refresh_token": tokens["refreshToken"]})).status_code == 401
    await login(client, password="NewPassword456")


async def test_change_password_wrong_current(client, test_user, session):
    old_hash = test_user.hashed_password
    tokens = await login(client)

    response = await client.post("/api/change-password", json={
        "current_password": "WrongPassword1",
        "password": "NewPassword456",
        "password_confirmation": "NewPassword456"
    }, headers=auth_header(tokens["accessToken"]))

    assert response.status_code == 422
    assert "current_password" in response.json()["data"]["errors"]

    session.refresh(test_user)
    assert session.get(User, test_user.id).hashed_password == old_hash


async def test_change_password_confirmation_mismatch(client, test_user):
    tokens = await login(client)

    response = await client.post("/api/change-password", json={
        "current_password": TEST_PASSWORD,
        "password": "NewPassword456",
        "password_confirmation": "Different456"
    }, headers=auth_header(tokens["accessToken"]))

    assert response.status_code == 422
    assert "password_confirmation" in response.json()["data"]["errors"]


async def test_change_password_requires_authentication(client):
    response = await client.post("/api/change-password", json={
        "current_password": TEST_PASSWORD,
        "password": "NewPassword456",
        "password_confirmation": "NewPassword456"
    })

    assert response.status_code == 401
