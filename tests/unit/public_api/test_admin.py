def test_admin_login(client):
    response = client.post("/api/admin/login", json={"username": "admin", "password": "admin123"})
    assert response.status_code == 200
    assert response.json()["user"]["username"] == "admin"
    assert "sid" in response.cookies

    me = client.get("/api/me").json()
    assert me["user"]["isAdmin"] is True


def test_admin_login_invalid_credentials(client):
    response = client.post("/api/admin/login", json={"username": "admin", "password": "nope"})
    assert response.status_code == 401
    assert response.json() == {"status": "error", "message": "Invalid credentials"}


def test_admin_routes_require_session(client):
    assert client.get("/api/admin/tokens").status_code == 401
    assert client.get("/api/me").status_code == 401


def test_generate_and_list_tokens(admin_client):
    response = admin_client.post("/api/admin/generate-tokens", json={"count": 2})
    assert response.status_code == 201
    tokens = response.json()["tokens"]
    assert len(tokens) == 2
    assert all(len(t["token"]) == 32 and t["used"] is False for t in tokens)

    listed = admin_client.get("/api/admin/tokens").json()["tokens"]
    assert [t["token"] for t in listed] == [t["token"] for t in tokens]
    assert {"id", "token", "used", "createdAt"} <= set(listed[0])


def test_add_credits_unknown_reseller(admin_client):
    response = admin_client.post("/api/admin/add-credits", json={"resellerId": 999, "amount": 5})
    assert response.status_code == 404
    assert response.json() == {"status": "error", "message": "Reseller not found"}


def test_add_credits_requires_positive_amount(admin_client):
    response = admin_client.post("/api/admin/add-credits", json={"resellerId": 1, "amount": 0})
    assert response.status_code == 400


def test_reseller_cannot_use_admin_routes(reseller_client):
    response = reseller_client.get("/api/admin/resellers")
    assert response.status_code == 403
    assert response.json() == {"status": "error", "message": "Forbidden"}


def test_admin_manages_resellers(reseller_client, expiry_date):
    key = reseller_client.post(
        "/api/reseller/generate-key", json={"game": "Space Game", "deviceLimit": 1, "expiryDate": expiry_date}
    ).json()["key"]
    reseller_client.post("/api/logout")
    reseller_client.post("/api/admin/login", json={"username": "admin", "password": "admin123"})

    resellers = reseller_client.get("/api/admin/resellers").json()["resellers"]
    assert len(resellers) == 1
    reseller = resellers[0]
    assert reseller["credits"] == 2
    assert reseller["keysGenerated"] == 1
    assert "password" not in reseller

    response = reseller_client.post("/api/admin/add-credits", json={"resellerId": reseller["id"], "amount": 5})
    assert response.status_code == 200
    assert response.json()["reseller"] == {
        "id": reseller["id"],
        "username": "seller",
        "email": "seller@example.com",
        "credits": 7,
    }

    stats = reseller_client.get("/api/admin/stats").json()["stats"]
    assert stats == {"totalResellers": 1, "totalKeys": 1, "totalCredits": 7}

    response = reseller_client.delete(f"/api/admin/resellers/{reseller['id']}")
    assert response.status_code == 200
    assert response.json()["message"] == "Reseller deleted successfully"
    assert reseller_client.delete(f"/api/admin/resellers/{reseller['id']}").status_code == 404
    assert reseller_client.get(f"/api/key-status/{key['key']}").json()["data"]["isValid"] is False
