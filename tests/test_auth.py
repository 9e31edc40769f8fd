# tests/test_auth.py
import pytest
from httpx import ASGITransport, AsyncClient

from interior_ledger.core.auth import User, get_jwt_strategy
from interior_ledger.core.database import get_async_session


@pytest.fixture
async def anon_client(session_factory):
    """Client that goes through the real token checks."""
    from interior_ledger.main import app

    async def override_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def test_missing_token(anon_client):
    response = await anon_client.get("/api/v1/projects")
    assert response.status_code == 401
    assert response.json()["detail"] == "Not authenticated"


async def test_garbage_token(anon_client):
    response = await anon_client.get("/api/v1/projects", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid token"


async def test_issued_token_is_accepted(anon_client, db, user_id):
    user = await db.get(User, user_id)
    token = await get_jwt_strategy().write_token(user)

    response = await anon_client.get("/api/v1/projects", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json() == []

    response = await anon_client.get("/api/v1/projects", params={"token": token})
    assert response.status_code == 200


async def test_inactive_user_is_rejected(anon_client, db, user_id):
    user = await db.get(User, user_id)
    token = await get_jwt_strategy().write_token(user)
    user.is_active = False
    await db.commit()

    response = await anon_client.get("/api/v1/projects", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


async def test_register_login_and_use_the_ledger(anon_client):
    response = await anon_client.post(
        "/api/v1/auth/register",
        json={"email": "new.designer@example.com", "password": "s3cret-pass", "username": "newdesigner"},
    )
    assert response.status_code == 201, response.text

    response = await anon_client.post(
        "/api/v1/auth/jwt/login",
        data={"username": "new.designer@example.com", "password": "s3cret-pass"},
    )
    assert response.status_code == 200, response.text
    headers = {"Authorization": f"Bearer {response.json()['access_token']}"}

    me = await anon_client.get("/api/v1/users/me", headers=headers)
    assert me.json()["username"] == "newdesigner"

    response = await anon_client.post("/api/v1/projects", json={"name": "Studio"}, headers=headers)
    assert response.status_code == 201
    assert response.json()["status"] == "Under Discussion"


async def test_logout_without_token(anon_client):
    response = await anon_client.post("/api/v1/auth/jwt/logout")
    assert response.status_code == 200
