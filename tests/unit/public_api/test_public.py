def _generate_key(client, expiry_date, device_limit=1, custom_key=None):
    body = {"game": "Space Game", "deviceLimit": device_limit, "expiryDate": expiry_date}
    if custom_key:
        body["customKey"] = custom_key
    response = client.post("/api/reseller/generate-key", json=body)
    assert response.status_code == 201
    return response.json()["key"]


def test_verify_round_trip(reseller_client, expiry_date):
    key = _generate_key(reseller_client, expiry_date, device_limit=1)

    response = reseller_client.post("/api/verify", json={"key": key["key"], "hwid": "A"})
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    assert body["message"] == "Key verified successfully"
    assert body["data"]["game"] == "Space Game"
    assert body["data"]["deviceLimit"] == 1
    assert body["data"]["devicesUsed"] == 1
    assert "expiryDate" in body["data"]

    response = reseller_client.post("/api/verify", json={"key": key["key"], "hwid": "B"})
    assert response.status_code == 400
    assert response.json() == {"status": "error", "message": "Device limit reached"}

    response = reseller_client.post("/api/verify", json={"key": key["key"], "hwid": "A"})
    assert response.status_code == 200
    assert response.json()["data"]["devicesUsed"] == 1


def test_verify_invalid_key(client):
    response = client.post("/api/verify", json={"key": "NOPE", "hwid": "A"})
    assert response.status_code == 404
    assert response.json() == {"status": "error", "message": "Invalid key"}


def test_verify_expired_key(reseller_client):
    key = _generate_key(reseller_client, "2000-01-01T00:00:00Z", device_limit=2)
    response = reseller_client.post("/api/verify", json={"key": key["key"], "hwid": "A"})
    assert response.status_code == 400
    assert response.json() == {"status": "error", "message": "Key has expired"}


def test_verify_validation_error(client):
    response = client.post("/api/verify", json={"key": "", "hwid": "A"})
    assert response.status_code == 400
    body = response.json()
    assert body["status"] == "error"
    assert body["errors"][0]["field"] == "key"


def test_key_status_missing_key(client):
    response = client.get("/api/key-status/does-not-exist")
    assert response.status_code == 200
    assert response.json() == {"status": "success", "data": {"isValid": False, "message": "Invalid key"}}


def test_key_status(reseller_client, expiry_date):
    key = _generate_key(reseller_client, expiry_date, device_limit=2, custom_key="STATUS-KEY")

    response = reseller_client.get("/api/key-status/STATUS-KEY")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["isValid"] is True
    assert data["status"] == "active"
    assert data["devicesUsed"] == 0
    assert data["deviceLimit"] == 2
    assert data["game"] == "Space Game"
    assert "message" not in data

    reseller_client.post("/api/verify", json={"key": key["key"], "hwid": "A"})
    reseller_client.post("/api/verify", json={"key": key["key"], "hwid": "B"})
    data = reseller_client.get("/api/key-status/STATUS-KEY").json()["data"]
    assert data["isValid"] is False
    assert data["status"] == "full"


def test_api_usage(reseller_client, expiry_date):
    key = _generate_key(reseller_client, expiry_date, device_limit=2)
    reseller_client.post("/api/verify", json={"key": key["key"], "hwid": "A"})
    reseller_client.get(f"/api/key-status/{key['key']}")

    response = reseller_client.get("/api/reseller/api-usage")
    assert response.status_code == 200
    stats = response.json()["stats"]
    assert stats["totalRequests"] == 2
    assert stats["usageByKey"] == {key["key"]: 2}
    assert stats["lastRequest"] is not None
