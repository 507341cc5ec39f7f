import datetime as dt
import pytest
from fastapi.testclient import TestClient
from keydash.public_api.application import create_app
from keydash.settings import KeydashSettings


@pytest.fixture
def app_settings():
    return KeydashSettings(
        secret="test" * 8,
        password_iterations=1000,
        default_admin={"username": "admin", "password": "admin123"},
    )


@pytest.fixture
def client(app_settings):
    return TestClient(create_app(settings=app_settings))


@pytest.fixture
def admin_client(client):
    response = client.post("/api/admin/login", json={"username": "admin", "password": "admin123"})
    assert response.status_code == 200
    return client


@pytest.fixture
def reseller_client(app_settings):
    """A logged in reseller holding 3 credits."""
    client = TestClient(create_app(settings=app_settings))
    client.post("/api/admin/login", json={"username": "admin", "password": "admin123"})
    token = client.post("/api/admin/generate-tokens", json={"count": 1}).json()["tokens"][0]["token"]
    client.post("/api/logout")

    response = client.post(
        "/api/reseller/register",
        json={"username": "seller", "email": "seller@example.com", "password": "password", "referralToken": token},
    )
    assert response.status_code == 201

    client.post("/api/admin/login", json={"username": "admin", "password": "admin123"})
    reseller_id = client.get("/api/admin/resellers").json()["resellers"][0]["id"]
    client.post("/api/admin/add-credits", json={"resellerId": reseller_id, "amount": 3})
    client.post("/api/logout")

    response = client.post("/api/reseller/login", json={"username": "seller", "password": "password"})
    assert response.status_code == 200
    return client


@pytest.fixture
def expiry_date():
    return (dt.datetime.utcnow() + dt.timedelta(days=30)).isoformat()
