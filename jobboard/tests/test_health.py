def test_health_ok(client):
    r = client.get("/health")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "ok"
    assert data["database"] == "ok"
    assert r.headers.get("x-request-id")


def test_request_id_is_echoed(client):
    r = client.get("/health", headers={"x-request-id": "req-123"})
    assert r.headers["x-request-id"] == "req-123"
