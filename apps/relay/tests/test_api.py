import json
import time
from unittest import mock

import pytest
from django.test import Client

from apps.relay import ingestion
from apps.relay.models import PendingCommand, TelemetryEvent

pytestmark = pytest.mark.django_db


def post_json(client, url, data, **extra):
    return client.post(url, data=json.dumps(data), content_type="application/json", **extra)


# ---------------------------------------------------------------------------
# Telemetry push (open)
# ---------------------------------------------------------------------------

def test_device_pushes_telemetry_without_session(garage):
    resp = post_json(Client(), "/api/telemetry/garage-01", {"door": "closed", "distance_cm": 12})

    assert resp.status_code == 200
    assert resp.json() == {"ok": True}
    assert TelemetryEvent.objects.filter(device_id="garage-01").count() == 1


def test_telemetry_push_is_csrf_exempt(garage):
    device = Client(enforce_csrf_checks=True)
    resp = post_json(device, "/api/telemetry/garage-01", {"door": "open"})
    assert resp.status_code == 200


def test_telemetry_for_unknown_device_is_404(db):
    resp = post_json(Client(), "/api/telemetry/ghost", {"door": "open"})

    assert resp.status_code == 404
    assert resp.json() == {"ok": False, "error": "unknown deviceId"}


def test_telemetry_with_invalid_json_is_400(garage):
    resp = Client().post("/api/telemetry/garage-01", data="{not json", content_type="application/json")
    assert resp.status_code == 400
    assert resp.json()["ok"] is False


@pytest.mark.parametrize("constant", ["NaN", "Infinity", "-Infinity"])
def test_telemetry_with_non_finite_number_is_400(garage, constant):
    resp = Client().post(
        "/api/telemetry/garage-01",
        data='{"distance_cm": %s}' % constant,
        content_type="application/json",
    )

    assert resp.status_code == 400
    assert resp.json() == {"ok": False, "error": "Invalid JSON"}
    assert not TelemetryEvent.objects.exists()


def test_oversized_telemetry_is_rejected(garage, settings):
    settings.DATA_UPLOAD_MAX_MEMORY_SIZE = 100
    resp = post_json(Client(), "/api/telemetry/garage-01", {"blob": "x" * 500})

    assert resp.status_code == 400
    assert not TelemetryEvent.objects.exists()


def test_storage_failure_on_ingest_is_generic_500(garage):
    with mock.patch.object(ingestion.TelemetryEvent.objects, "create", side_effect=RuntimeError("disk full")):
        resp = post_json(Client(), "/api/telemetry/garage-01", {"door": "open"})

    assert resp.status_code == 500
    assert resp.json() == {"ok": False, "error": "telemetry error"}


# ---------------------------------------------------------------------------
# Snapshot and history (owner session)
# ---------------------------------------------------------------------------

def test_garage_scenario(owner_a, owner_b, garage):
    before = int(time.time() * 1000)
    post_json(Client(), "/api/telemetry/garage-01", {"door": "closed", "distance_cm": 12})
    after = int(time.time() * 1000)

    client_a = Client()
    client_a.force_login(owner_a)
    snapshot = client_a.get("/api/telemetry/garage-01").json()
    assert snapshot["door"] == "closed"
    assert snapshot["distance_cm"] == 12
    assert before <= snapshot["serverTs"] <= after

    client_b = Client()
    client_b.force_login(owner_b)
    resp = client_b.get("/api/telemetry/garage-01")
    assert resp.status_code == 404
    assert resp.json() == {"ok": False, "error": "device not found"}


def test_snapshot_is_null_before_first_push(client_a, garage):
    resp = client_a.get("/api/telemetry/garage-01")
    assert resp.status_code == 200
    assert resp.content == b"null"


def test_snapshot_requires_session(garage):
    resp = Client().get("/api/telemetry/garage-01")
    assert resp.status_code == 401
    assert resp.json() == {"ok": False, "error": "unauthorized"}


def test_history_newest_first_with_limit(client_a, garage):
    for n in range(4):
        ingestion.ingest("garage-01", {"distance_cm": n})

    items = client_a.get("/api/events/garage-01?limit=2").json()

    assert [it["payload"]["distance_cm"] for it in items] == [3, 2]
    assert set(items[0]) == {"deviceId", "ts", "payload"}
    assert items[0]["deviceId"] == "garage-01"


def test_history_default_limit_and_bad_limit(client_a, garage):
    ingestion.ingest("garage-01", {"distance_cm": 1})
    assert len(client_a.get("/api/events/garage-01").json()) == 1
    assert len(client_a.get("/api/events/garage-01?limit=nope").json()) == 1


def test_history_requires_session_and_ownership(owner_b, garage):
    assert Client().get("/api/events/garage-01").status_code == 401

    client_b = Client()
    client_b.force_login(owner_b)
    assert client_b.get("/api/events/garage-01").status_code == 404


def test_history_rejects_post(client_a, garage):
    assert client_a.post("/api/events/garage-01").status_code == 405


# ---------------------------------------------------------------------------
# Command mailbox
# ---------------------------------------------------------------------------

def test_owner_sets_command_and_device_consumes_it(client_a, garage):
    resp = post_json(client_a, "/api/cmd/garage-01", {"cmd": "OPEN"})
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}

    device = Client()
    first = device.get("/api/cmd/garage-01").json()
    assert first["cmd"] == "OPEN"
    assert isinstance(first["ts"], int)

    second = device.get("/api/cmd/garage-01")
    assert second.status_code == 200
    assert second.content == b"null"


def test_last_command_wins(client_a, garage):
    post_json(client_a, "/api/cmd/garage-01", {"cmd": "OPEN"})
    post_json(client_a, "/api/cmd/garage-01", {"cmd": "CLOSE"})

    assert Client().get("/api/cmd/garage-01").json()["cmd"] == "CLOSE"
    assert Client().get("/api/cmd/garage-01").content == b"null"


def test_command_accepts_form_encoded_body(client_a, garage):
    resp = client_a.post("/api/cmd/garage-01", {"cmd": "LED_ON"})
    assert resp.status_code == 200
    assert PendingCommand.objects.get(device_id="garage-01").cmd == "LED_ON"


def test_missing_command_is_400(client_a, garage):
    resp = post_json(client_a, "/api/cmd/garage-01", {})
    assert resp.status_code == 400
    assert resp.json() == {"ok": False, "error": "Missing cmd"}


def test_command_requires_session(garage):
    resp = post_json(Client(), "/api/cmd/garage-01", {"cmd": "OPEN"})
    assert resp.status_code == 401
    assert not PendingCommand.objects.exists()


def test_command_for_foreign_device_is_404(owner_b, garage):
    client_b = Client()
    client_b.force_login(owner_b)
    resp = post_json(client_b, "/api/cmd/garage-01", {"cmd": "OPEN"})

    assert resp.status_code == 404
    assert not PendingCommand.objects.exists()


def test_command_post_needs_csrf_token(owner_a, garage):
    browser = Client(enforce_csrf_checks=True)
    browser.force_login(owner_a)
    resp = post_json(browser, "/api/cmd/garage-01", {"cmd": "OPEN"})
    assert resp.status_code == 403


def test_consume_storage_failure_is_500(db):
    with mock.patch("apps.relay.views.telemetry.mailbox.consume_command", side_effect=RuntimeError("db down")):
        resp = Client().get("/api/cmd/garage-01")

    assert resp.status_code == 500
    assert resp.json() == {"ok": False, "error": "cmd error"}


# ---------------------------------------------------------------------------
# Device JSON API
# ---------------------------------------------------------------------------

def test_register_and_list_devices_over_json(client_a):
    resp = post_json(client_a, "/api/devices/", {"deviceId": "garage-01", "name": "Garage", "lat": 44.8})
    assert resp.status_code == 201
    assert resp.json()["deviceId"] == "garage-01"

    dup = post_json(client_a, "/api/devices/", {"deviceId": "garage-01"})
    assert dup.status_code == 400

    listing = client_a.get("/api/devices/").json()
    assert listing["count"] == 1
    assert listing["results"][0]["lat"] == 44.8


def test_device_list_requires_session(db):
    assert Client().get("/api/devices/").status_code == 401


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------

def test_health_reports_device_count(garage):
    body = Client().get("/health").json()
    assert body["ok"] is True
    assert body["devices"] == 1
    assert isinstance(body["ts"], int)
