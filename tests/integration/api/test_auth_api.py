"""Integration tests for the authentication API."""

import pytest
from httpx import AsyncClient

from cinevault.infrastructure.auth import TokenKind


@pytest.mark.asyncio
async def test_register_returns_user_without_password(client: AsyncClient):
    response = await client.post(
        "/api/v1/auth/register", json={"username": "alice", "password": "secret123"}
    )

    assert response.status_code == 201
    data = response.json()
    assert data["username"] == "alice"
    assert "password" not in data
    assert "password_hash" not in data


@pytest.mark.asyncio
async def test_register_duplicate_username(client: AsyncClient, user):
    response = await client.post(
        "/api/v1/auth/register", json={"username": "alice", "password": "another1"}
    )

    assert response.status_code == 409


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"username": "al", "password": "secret123"},
        {"username": "alice", "password": "short"},
        {"username": "a" * 51, "password": "secret123"},
        {"username": "alice"},
    ],
)
async def test_register_validation(client: AsyncClient, payload):
    response = await client.post("/api/v1/auth/register", json=payload)

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_login_failures_are_uniform(client: AsyncClient, user):
    wrong_password = await client.post(
        "/api/v1/auth/login", json={"username": "alice", "password": "wrong-password"}
    )
    unknown_user = await client.post(
        "/api/v1/auth/login", json={"username": "mallory", "password": "secret123"}
    )

    assert wrong_password.status_code == 401
    assert unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json()


@pytest.mark.asyncio
async def test_refresh_rejects_access_token(client: AsyncClient, user, jwt_service):
    access_token = jwt_service.issue(user.id, TokenKind.ACCESS)

    response = await client.post("/api/v1/auth/refresh", json={"refresh_token": access_token})

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_refresh_rejects_expired_token(client: AsyncClient, user, jwt_service, clock):
    refresh_token = jwt_service.issue(user.id, TokenKind.REFRESH)
    clock.advance(days=8)

    response = await client.post("/api/v1/auth/refresh", json={"refresh_token": refresh_token})

    assert response.status_code == 401
    assert response.json()["detail"] == "Could not validate credentials"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "header",
    [None, "", "Bearer", "Basic dXNlcjpwYXNz", "Bearer not-a-jwt", "Bearer a b"],
)
async def test_protected_route_rejects_bad_authorization(client: AsyncClient, header):
    headers = {"Authorization": header} if header is not None else {}

    response = await client.post("/api/v1/movies", json={}, headers=headers)

    assert response.status_code == 401
    assert response.json()["detail"] == "Could not validate credentials"
    assert response.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_health_and_correlation_id(client: AsyncClient):
    response = await client.get("/health", headers={"X-Correlation-ID": "cid_test"})

    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert response.headers["X-Correlation-ID"] == "cid_test"


@pytest.mark.asyncio
async def test_api_index_lists_endpoint_groups(client: AsyncClient):
    response = await client.get("/api/v1")

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "CineVault"
    assert "/api/v1/movies" in body["endpoints"]
