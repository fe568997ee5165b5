import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import fakeredis.aioredis  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from hotelops.app.main import app  # noqa: E402

app.state.redis = fakeredis.aioredis.FakeRedis(decode_responses=True)


def test_health_ok():
    client = TestClient(app)
    resp = client.get("/health", headers={"X-Request-ID": "abc"})
    assert resp.status_code == 200
    assert resp.json() == {"ok": True, "data": {"status": "ok"}}
    assert resp.headers["X-Request-ID"] == "abc"


def test_not_found_returns_err():
    client = TestClient(app)
    resp = client.get("/missing")
    assert resp.status_code == 404
    body = resp.json()
    assert body["ok"] is False
    assert body["error"]["code"] == 404


def test_missing_token_is_unauthorized():
    client = TestClient(app)
    resp = client.get("/rewards/wallet", headers={"X-Request-ID": "rid-1"})
    assert resp.status_code == 401
    body = resp.json()
    assert body["error"]["code"] == "UNAUTHORIZED"
    assert body["request_id"] == "rid-1"


def test_bad_token_is_unauthorized():
    client = TestClient(app)
    resp = client.post(
        "/ops/monitor", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert resp.status_code == 401
    assert resp.json()["error"]["message"] == "Could not validate credentials"


def test_validation_error_is_bad_request():
    client = TestClient(app)
    resp = client.post("/tickets", content="not json", headers={"content-type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "BAD_REQUEST"
