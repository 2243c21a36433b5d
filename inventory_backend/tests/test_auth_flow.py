"""
Integration tests for authentication and staff user management.

Verifies Login -> Me and the Admin-only user endpoints.
"""

from inventory_backend.app.core.jwt import create_access_token


def _auth(token):
    return {"Authorization": f"Bearer {token}"}


async def test_login_and_me(client, admin_token):
    response = await client.get("/v1/auth/me", headers=_auth(admin_token))

    assert response.status_code == 200
    assert response.json()["username"] == "admin"
    assert response.json()["role_name"] == "Admin"


async def test_login_with_wrong_password(client):
    response = await client.post("/v1/auth/login", json={"username": "admin", "password": "wrong"})

    assert response.status_code == 401
    assert response.json()["error_code"] == "ERR_AUTH_001"


async def test_me_requires_token(client):
    response = await client.get("/v1/auth/me")
    assert response.status_code in (401, 403)


async def test_token_of_unknown_user_is_rejected(client):
    token = create_access_token(data={"sub": "ghost", "user_id": 999, "role": "Admin"})

    response = await client.get("/v1/users", headers=_auth(token))

    assert response.status_code == 401


async def test_roles_are_seeded(client):
    roles = sorted(r["name"] for r in (await client.get("/v1/roles")).json())
    assert roles == ["Admin", "Salesperson"]


async def test_admin_creates_salesperson(client, admin_token):
    roles = {r["name"]: r["id"] for r in (await client.get("/v1/roles")).json()}

    created = await client.post(
        "/v1/users",
        json={"username": "cashier1", "password": "secret1", "role_id": roles["Salesperson"]},
        headers=_auth(admin_token),
    )
    assert created.status_code == 201
    assert created.json()["role_name"] == "Salesperson"

    duplicate = await client.post(
        "/v1/users",
        json={"username": "cashier1", "password": "secret1", "role_id": roles["Salesperson"]},
        headers=_auth(admin_token),
    )
    assert duplicate.status_code == 409
    assert duplicate.json()["error_code"] == "ERR_CONFLICT_004"

    listed = [u["username"] for u in (await client.get("/v1/users", headers=_auth(admin_token))).json()]
    assert listed == ["admin", "cashier1"]


async def test_salesperson_cannot_manage_users(client, admin_token):
    roles = {r["name"]: r["id"] for r in (await client.get("/v1/roles")).json()}
    await client.post(
        "/v1/users",
        json={"username": "cashier2", "password": "secret2", "role_id": roles["Salesperson"]},
        headers=_auth(admin_token),
    )
    login = await client.post("/v1/auth/login", json={"username": "cashier2", "password": "secret2"})
    token = login.json()["access_token"]

    response = await client.get("/v1/users", headers=_auth(token))

    assert response.status_code == 403
    assert response.json()["error_code"] == "ERR_PERM_001"


async def test_user_validation(client, admin_token):
    short = await client.post(
        "/v1/users", json={"username": "shorty", "password": "123", "role_id": 1}, headers=_auth(admin_token)
    )
    assert short.status_code == 422

    unknown_role = await client.post(
        "/v1/users", json={"username": "norole", "password": "secret1", "role_id": 99}, headers=_auth(admin_token)
    )
    assert unknown_role.status_code == 404


async def test_password_longer_than_bcrypt_limit(client, admin_token):
    too_long = "é" * 40

    created = await client.post(
        "/v1/users", json={"username": "longpass", "password": too_long, "role_id": 1}, headers=_auth(admin_token)
    )
    assert created.status_code == 422

    login = await client.post("/v1/auth/login", json={"username": "admin", "password": "x" * 100})
    assert login.status_code == 401
