"""Tests for the callback receiver endpoint."""

from __future__ import annotations

from conftest import TestConfig, create_app


def test_callback_stores_result(client, store):
    response = client.post("/callback", json={"callbackId": "cb-1", "totalEstimate": 1500})

    assert response.status_code == 200
    assert response.get_json() == {"success": True, "callbackId": "cb-1", "stored": True}
    entry = store.get("cb-1")
    assert entry.status == "success"
    assert entry.total_estimate == 1500


def test_callback_coalesces_provider_field_name(client, store):
    response = client.post(
        "/callback", json={"callbackId": "cb-2", "Total Estimate $": 2200, "Squares": 31}
    )

    assert response.status_code == 200
    entry = store.get("cb-2")
    assert entry.total_estimate == 2200
    assert entry.squares == 31


def test_callback_missing_id_is_rejected(client, store):
    response = client.post("/callback", json={"totalEstimate": 1500})

    assert response.status_code == 400
    assert response.get_json() == {"error": "Missing callbackId"}
    assert len(store) == 0


def test_callback_success_without_estimate_is_rejected(client, store):
    response = client.post("/callback", json={"callbackId": "cb-3", "status": "success"})

    assert response.status_code == 400
    assert response.get_json() == {"error": "totalEstimate must be a number"}
    assert store.get("cb-3") is None


def test_callback_error_result_is_stored(client, store):
    response = client.post(
        "/callback",
        json={"callbackId": "cb-4", "status": "error", "message": "roof not found"},
    )

    assert response.status_code == 200
    entry = store.get("cb-4")
    assert entry.status == "error"
    assert entry.message == "roof not found"


def test_callback_rejects_malformed_json(client):
    response = client.post(
        "/callback", data="{not json", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400
    assert "error" in response.get_json()


def test_callback_wrong_method(client):
    response = client.get("/callback")

    assert response.status_code == 405
    assert response.get_json()["error"] == "Method not allowed"
    assert "POST" in response.headers["Allow"]


def test_callback_preflight_allows_any_origin(client):
    response = client.options(
        "/callback",
        headers={
            "Origin": "https://estimates.example.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Content-Type",
        },
    )

    assert response.status_code == 200
    assert response.headers["Access-Control-Allow-Origin"] == "*"


def test_callback_renders_notification_page_for_browsers(client):
    response = client.post(
        "/callback",
        json={"callbackId": "cb-5", "totalEstimate": 18250.5},
        headers={"Accept": "text/html,application/xhtml+xml,*/*;q=0.8"},
    )

    assert response.status_code == 200
    assert response.mimetype == "text/html"
    body = response.get_data(as_text=True)
    assert "Estimate received: $18,250.50" in body
    assert "postMessage" in body
    assert '"cb-5"' in body


def test_callback_store_failure_returns_500(client, app):
    from backend.estimate_relay.store import ResultStoreError

    class BrokenStore:
        backend_name = "broken"

        def put(self, callback_id, entry):
            raise ResultStoreError("store offline")

    app.extensions["result_store"] = BrokenStore()

    response = client.post("/callback", json={"callbackId": "cb-6", "totalEstimate": 1})

    assert response.status_code == 500
    assert response.get_json() == {"error": "Internal server error"}


def test_callback_rate_limit():
    class LimitedConfig(TestConfig):
        CALLBACK_RATE_LIMIT = "2 per minute"

    client = create_app(LimitedConfig).test_client()
    payload = {"callbackId": "cb-limited", "totalEstimate": 1}

    assert client.post("/callback", json=payload).status_code == 200
    assert client.post("/callback", json=payload).status_code == 200
    response = client.post("/callback", json=payload)

    assert response.status_code == 429
    assert "error" in response.get_json()


def test_callback_huge_integer_estimate_is_rejected(client, store):
    body = '{"callbackId": "cb-big", "totalEstimate": 1' + "0" * 400 + "}"

    response = client.post("/callback", data=body, headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert response.get_json() == {"error": "totalEstimate must be a number"}
    assert store.get("cb-big") is None
