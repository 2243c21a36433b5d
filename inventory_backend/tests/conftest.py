"""
Centralized Test Configuration.

Every test gets a fresh in-memory store, bootstrapped and seeded the same
way the application does it at startup.
"""

import pytest
from httpx import AsyncClient, ASGITransport

from inventory_backend.app.main import create_app
from inventory_backend.app.db.session import Database
from inventory_backend.app.utils.calendar import jalali_today

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"
ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "password123"


@pytest.fixture
async def database():
    """Fresh in-memory store with schema and reference data."""
    db = Database(TEST_DATABASE_URL)
    await db.startup(reset=True, admin_username=ADMIN_USERNAME, admin_password=ADMIN_PASSWORD)
    yield db
    await db.dispose()


@pytest.fixture
async def app(database):
    return create_app(database)


@pytest.fixture
async def client(app):
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def db_session(database):
    """Session for arranging data and inspecting state directly."""
    async with database.session() as session:
        yield session


@pytest.fixture
async def admin_token(client):
    response = await client.post(
        "/v1/auth/login",
        json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
    )
    assert response.status_code == 200
    return response.json()["access_token"]


@pytest.fixture
def today():
    """Today's Jalali date in wire format."""
    return jalali_today().strftime("%Y/%m/%d")


# --- Data helpers ---

@pytest.fixture
def create_customer(client):
    async def _create(full_name="Sara Ahmadi", phone_number=None, **extra):
        response = await client.post(
            "/v1/customers",
            json={"full_name": full_name, "phone_number": phone_number, **extra},
        )
        assert response.status_code == 201, response.text
        return response.json()
    return _create


@pytest.fixture
def create_partner(client):
    async def _create(partner_name="Tehran Mobile Wholesale", phone_number=None, **extra):
        response = await client.post(
            "/v1/partners",
            json={"partner_name": partner_name, "phone_number": phone_number, **extra},
        )
        assert response.status_code == 201, response.text
        return response.json()
    return _create


@pytest.fixture
def create_product(client):
    async def _create(name="USB-C Charger", purchase_price=60.0, selling_price=100.0, stock_quantity=10, **extra):
        response = await client.post(
            "/v1/products",
            json={
                "name": name,
                "purchase_price": purchase_price,
                "selling_price": selling_price,
                "stock_quantity": stock_quantity,
                **extra,
            },
        )
        assert response.status_code == 201, response.text
        return response.json()
    return _create


@pytest.fixture
def create_phone(client):
    async def _create(imei="356789012345678", purchase_price=400.0, sale_price=500.0, model="Galaxy A54", **extra):
        response = await client.post(
            "/v1/phones",
            json={
                "model": model,
                "imei": imei,
                "purchase_price": purchase_price,
                "sale_price": sale_price,
                **extra,
            },
        )
        assert response.status_code == 201, response.text
        return response.json()
    return _create
