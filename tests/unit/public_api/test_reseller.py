def test_register_with_invalid_token(client):
    response = client.post(
        "/api/reseller/register",
        json={"username": "seller", "email": "seller@example.com", "password": "password", "referralToken": "nope"},
    )
    assert response.status_code == 400
    assert response.json() == {"status": "error", "message": "Invalid referral token"}


def test_register_validation(client):
    response = client.post(
        "/api/reseller/register",
        json={"username": "ab", "email": "not-an-email", "password": "123", "referralToken": "x"},
    )
    assert response.status_code == 400
    fields = {e["field"] for e in response.json()["errors"]}
    assert {"username", "email", "password"} <= fields


def test_reseller_login_and_me(reseller_client):
    me = reseller_client.get("/api/me")
    assert me.status_code == 200
    user = me.json()["user"]
    assert user["username"] == "seller"
    assert user["credits"] == 3
    assert user["keysGenerated"] == 0
    assert user["isAdmin"] is False


def test_logout(reseller_client):
    response = reseller_client.post("/api/logout")
    assert response.json() == {"status": "success", "message": "Logged out successfully"}
    assert reseller_client.get("/api/reseller/keys").status_code == 401


def test_admin_cannot_use_reseller_routes(admin_client):
    assert admin_client.get("/api/reseller/keys").status_code == 403


def test_generate_list_and_delete_keys(reseller_client, expiry_date):
    response = reseller_client.post(
        "/api/reseller/generate-key",
        json={"game": "Space Game", "deviceLimit": 2, "expiryDate": expiry_date, "customKey": "MY-KEY"},
    )
    assert response.status_code == 201
    key = response.json()["key"]
    assert key["key"] == "MY-KEY"
    assert key["devicesUsed"] == 0
    assert key["status"] == "active"
    assert "resellerId" not in key

    response = reseller_client.post(
        "/api/reseller/generate-key",
        json={"game": "Space Game", "deviceLimit": 2, "expiryDate": expiry_date, "customKey": "MY-KEY"},
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Custom key already exists"

    reseller_client.post(
        "/api/reseller/generate-key", json={"game": "Old Game", "deviceLimit": 1, "expiryDate": "2001-01-01T00:00:00"}
    )
    keys = reseller_client.get("/api/reseller/keys").json()["keys"]
    assert [k["status"] for k in keys] == ["active", "expired"]

    stats = reseller_client.get("/api/reseller/stats").json()["stats"]
    assert stats == {"totalKeys": 2, "activeKeys": 1, "expiredKeys": 1}

    response = reseller_client.delete(f"/api/reseller/keys/{key['id']}")
    assert response.status_code == 200
    assert response.json()["message"] == "Key deleted successfully"
    assert reseller_client.delete(f"/api/reseller/keys/{key['id']}").status_code == 404

    assert reseller_client.get("/api/me").json()["user"]["keysGenerated"] == 2


def test_generate_key_without_credits(reseller_client, expiry_date):
    for _ in range(3):
        reseller_client.post(
            "/api/reseller/generate-key", json={"game": "Game", "deviceLimit": 1, "expiryDate": expiry_date}
        )
    response = reseller_client.post(
        "/api/reseller/generate-key", json={"game": "Game", "deviceLimit": 1, "expiryDate": expiry_date}
    )
    assert response.status_code == 400
    assert response.json() == {"status": "error", "message": "Insufficient credits"}
    assert len(reseller_client.get("/api/reseller/keys").json()["keys"]) == 3
