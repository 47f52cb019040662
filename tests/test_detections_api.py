"""Endpoint tests for POST/GET /detections."""
from __future__ import annotations

import logging
from uuid import UUID

EVENT_ID = UUID("11111111-2222-4333-8444-555555555555")


def _inserts(fake_db) -> list:
    return [c for c in fake_db.calls if "INSERT INTO detections" in c[1]]


def test_post_requires_token(client, fake_db) -> None:
    resp = client.post("/detections", json=[{"mac_address": "AA:BB"}])
    assert resp.status_code == 401
    assert resp.json() == {"error": "Missing token"}
    assert fake_db.calls == []


def test_expired_token_is_rejected(client, expired_headers) -> None:
    resp = client.post("/detections", json=[{"mac_address": "AA:BB"}], headers=expired_headers)
    assert resp.status_code == 401
    assert resp.json() == {"error": "Invalid token"}


def test_empty_array_is_rejected_without_store_call(client, fake_db, auth_headers) -> None:
    resp = client.post("/detections", json=[], headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Body must be a non-empty array"}
    assert fake_db.calls == []


def test_non_array_body_is_rejected(client, fake_db, auth_headers) -> None:
    resp = client.post("/detections", json={"mac_address": "AA:BB"}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Body must be a non-empty array"}


def test_non_json_body_is_rejected(client, fake_db, auth_headers) -> None:
    resp = client.post(
        "/detections",
        content=b"not json",
        headers={**auth_headers, "Content-Type": "application/json"},
    )
    assert resp.status_code == 400
    assert fake_db.calls == []


def test_one_bad_record_rejects_the_batch(client, fake_db, auth_headers) -> None:
    before = client.get("/detections", headers=auth_headers).json()

    resp = client.post(
        "/detections",
        json=[{"mac_address": "AA:BB"}, {"mac_address": 123}],
        headers=auth_headers,
    )
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid detection payload"}
    assert _inserts(fake_db) == []

    after = client.get("/detections", headers=auth_headers).json()
    assert len(after) == len(before) == 0


def test_batch_is_inserted_with_one_statement(client, fake_db, auth_headers) -> None:
    batch = [
        {"mac_address": f"AA:BB:CC:00:00:{i:02d}", "rssi": -40 - i, "event_id": str(EVENT_ID)}
        for i in range(5)
    ]
    resp = client.post("/detections", json=batch, headers=auth_headers)

    assert resp.status_code == 200
    assert resp.json() == {"inserted": 5}
    assert len(_inserts(fake_db)) == 1
    assert len(fake_db.detections) == 5
    assert [d["mac_address"] for d in fake_db.detections] == [b["mac_address"] for b in batch]


def test_null_optional_fields_round_trip_as_null(client, auth_headers) -> None:
    record = {
        "mac_address": None,
        "event_id": None,
        "signal_type": None,
        "rssi": None,
        "estimated_distance": None,
        "latitude": None,
        "longitude": None,
    }
    assert client.post("/detections", json=[record], headers=auth_headers).json() == {"inserted": 1}

    rows = client.get("/detections", headers=auth_headers).json()
    assert len(rows) == 1
    for key in record:
        assert key in rows[0]
        assert rows[0][key] is None
    assert rows[0]["detected_at"] is not None


def test_storage_failure_persists_nothing(client, fake_db, auth_headers) -> None:
    fake_db.fail_writes = True
    resp = client.post("/detections", json=[{"mac_address": "AA"}, {"mac_address": "BB"}], headers=auth_headers)

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to insert detections"}
    assert fake_db.detections == []


def test_row_count_mismatch_rolls_back(client, fake_db, auth_headers, caplog) -> None:
    fake_db.insert_status = "INSERT 0 1"
    with caplog.at_level(logging.ERROR):
        resp = client.post("/detections", json=[{"mac_address": "AA"}, {"mac_address": "BB"}], headers=auth_headers)

    assert resp.status_code == 500
    assert resp.json() == {"error": "Failed to insert detections"}
    assert fake_db.detections == []
    assert "detections_count_mismatch" in caplog.text


def test_get_filters_by_event_and_orders_newest_first(client, auth_headers) -> None:
    batch = [
        {"mac_address": "old", "event_id": str(EVENT_ID), "detected_at": "2025-01-01T00:00:00Z"},
        {"mac_address": "new", "event_id": str(EVENT_ID), "detected_at": "2025-01-02T00:00:00Z"},
        {"mac_address": "other", "detected_at": "2025-01-03T00:00:00Z"},
    ]
    client.post("/detections", json=batch, headers=auth_headers)

    rows = client.get("/detections", params={"event_id": str(EVENT_ID)}, headers=auth_headers).json()
    assert [r["mac_address"] for r in rows] == ["new", "old"]

    rows = client.get("/detections", headers=auth_headers).json()
    assert [r["mac_address"] for r in rows] == ["other", "new", "old"]


def test_get_unknown_event_returns_empty_list(client, auth_headers) -> None:
    client.post("/detections", json=[{"mac_address": "AA", "event_id": str(EVENT_ID)}], headers=auth_headers)
    resp = client.get(
        "/detections",
        params={"event_id": "99999999-8888-4777-8666-555555555555"},
        headers=auth_headers,
    )
    assert resp.status_code == 200
    assert resp.json() == []


def test_get_rejects_malformed_event_id(client, fake_db, auth_headers) -> None:
    resp = client.get("/detections", params={"event_id": "abc"}, headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid event_id"}
    assert fake_db.calls == []


def test_get_limit_is_clamped(client, fake_db, auth_headers) -> None:
    client.get("/detections", params={"limit": "9999"}, headers=auth_headers)
    client.get("/detections", params={"limit": "-3"}, headers=auth_headers)
    client.get("/detections", params={"limit": "abc"}, headers=auth_headers)
    client.get("/detections", params={"limit": "25"}, headers=auth_headers)

    limits = [c[2][-1] for c in fake_db.calls]
    assert limits == [1000, 200, 200, 25]


def test_non_finite_numbers_are_rejected(client, fake_db, auth_headers) -> None:
    resp = client.post(
        "/detections",
        content=b'[{"mac_address":"AA","latitude":NaN,"longitude":Infinity}]',
        headers={**auth_headers, "Content-Type": "application/json"},
    )
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid detection payload"}
    assert _inserts(fake_db) == []
    assert fake_db.detections == []


def test_epoch_string_timestamp_is_rejected(client, fake_db, auth_headers) -> None:
    resp = client.post("/detections", json=[{"mac_address": "AA", "detected_at": "1700000000"}], headers=auth_headers)
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid detection payload"}
    assert fake_db.detections == []
