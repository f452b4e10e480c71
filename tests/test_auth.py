"""Tests for registration, login, logout and the current-user endpoint."""
import pytest
from httpx import AsyncClient

from conftest import TEST_PASSWORD


REGISTER_BODY = {
    "username": "priya",
    "email": "Priya@Example.com",
    "password": "secret123",
    "first_name": "Priya",
    "last_name": "Nair",
    "phone": "9876543210",
}


@pytest.mark.asyncio
async def test_register_returns_user_without_password(client: AsyncClient):
    response = await client.post("/api/auth/register", json=REGISTER_BODY)
    assert response.status_code == 201
    data = response.json()
    assert data["email"] == "priya@example.com"
    assert data["role"] == "telecaller"
    assert "password" not in data
    assert "password_hash" not in data


@pytest.mark.asyncio
async def test_registered_user_listed_without_password(client: AsyncClient):
    await client.post("/api/auth/register", json=REGISTER_BODY)
    response = await client.get("/api/users")
    assert response.status_code == 200
    users = response.json()
    assert [u["username"] for u in users] == ["priya"]
    assert all("password_hash" not in u for u in users)


@pytest.mark.asyncio
async def test_register_duplicate_email_rejected(client: AsyncClient):
    await client.post("/api/auth/register", json=REGISTER_BODY)
    duplicate = {**REGISTER_BODY, "username": "someone_else"}
    response = await client.post("/api/auth/register", json=duplicate)
    assert response.status_code == 400
    assert response.json()["detail"] == "User already exists"


@pytest.mark.asyncio
async def test_register_missing_field_is_400(client: AsyncClient):
    body = {k: v for k, v in REGISTER_BODY.items() if k != "phone"}
    response = await client.post("/api/auth/register", json=body)
    assert response.status_code == 400
    data = response.json()
    assert data["detail"].startswith("phone:")
    assert data["errors"]


@pytest.mark.asyncio
async def test_login_with_username_or_email(client: AsyncClient, agent):
    by_username = await client.post(
        "/api/auth/login", json={"username": agent.username, "password": TEST_PASSWORD}
    )
    assert by_username.status_code == 200
    body = by_username.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["id"] == str(agent.id)

    by_email = await client.post(
        "/api/auth/login", json={"email": agent.email.upper(), "password": TEST_PASSWORD}
    )
    assert by_email.status_code == 200


@pytest.mark.asyncio
async def test_wrong_password_and_unknown_user_are_indistinguishable(client: AsyncClient, agent):
    wrong_password = await client.post(
        "/api/auth/login", json={"username": agent.username, "password": "nope"}
    )
    unknown_user = await client.post(
        "/api/auth/login", json={"username": "ghost", "password": "nope"}
    )
    assert wrong_password.status_code == unknown_user.status_code == 401
    assert wrong_password.json()["detail"] == unknown_user.json()["detail"]


@pytest.mark.asyncio
async def test_me_requires_bearer_token(client: AsyncClient, agent_auth):
    assert (await client.get("/api/auth/me")).status_code == 401

    bad = await client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert bad.status_code == 401

    response = await client.get("/api/auth/me", headers=agent_auth.headers)
    assert response.status_code == 200
    assert response.json()["username"] == agent_auth.user.username


@pytest.mark.asyncio
async def test_login_opens_attendance_and_logout_closes_it(client: AsyncClient, marketing):
    login = await client.post(
        "/api/auth/login", json={"username": marketing.username, "password": TEST_PASSWORD}
    )
    token = login.json()["access_token"]

    today = await client.get(f"/api/attendance/{marketing.id}")
    assert today.json()["login_time"] is not None
    assert today.json()["logout_time"] is None

    logout = await client.post(
        "/api/auth/logout", headers={"Authorization": f"Bearer {token}"}
    )
    assert logout.status_code == 200
    assert logout.json()["duration"] == "0h 0m"

    again = await client.post("/api/auth/logout", json={"user_id": str(marketing.id)})
    assert again.status_code == 404
    assert again.json()["detail"] == "No active session found"


@pytest.mark.asyncio
async def test_logout_without_user_is_400(client: AsyncClient):
    response = await client.post("/api/auth/logout")
    assert response.status_code == 400
