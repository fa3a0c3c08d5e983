"""
Device-facing and dashboard JSON endpoints: telemetry, history, commands.

Open endpoints (the device id in the URL is the only credential):
    POST /api/telemetry/<device_id>   ingest telemetry
    GET  /api/cmd/<device_id>         consume the pending command

Owner endpoints (session required):
    GET  /api/telemetry/<device_id>   latest snapshot or null
    GET  /api/events/<device_id>      history, newest first
    POST /api/cmd/<device_id>         queue a command
"""

import logging

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods

from .. import gateway, ingestion, mailbox
from .helpers import api_login_required, load_json_body, relay_api

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Telemetry
# ---------------------------------------------------------------------------

@csrf_exempt
@require_http_methods(["GET", "POST"])
def telemetry(request, device_id):
    """Devices POST readings here; the dashboard GETs the latest one."""
    if request.method == "POST":
        return _ingest_telemetry(request, device_id)
    return _latest_telemetry(request, device_id)


@relay_api(internal_error="telemetry error")
def _ingest_telemetry(request, device_id):
    """
    Body (JSON) example:
    {
        "door": "closed",
        "led": "off",
        "distance_cm": 12,
        "pir": 0,
        "ldr": 512,
        "night": false,
        "t_left_ms": 0
    }
    """
    payload = load_json_body(request)
    ingestion.ingest(device_id, payload)
    return JsonResponse({"ok": True})


@relay_api()
@api_login_required
def _latest_telemetry(request, device_id):
    snapshot = gateway.get_device_snapshot(request.user, device_id)
    return JsonResponse(snapshot, safe=False)


@require_GET
@relay_api()
@api_login_required
def event_history(request, device_id):
    """
    Telemetry history for charts.

    Query params:
      - limit: optional int, default 200, capped at 500
    """
    events = gateway.get_event_history(
        request.user,
        device_id,
        request.GET.get("limit", gateway.DEFAULT_HISTORY_LIMIT),
    )
    return JsonResponse([e.to_dict() for e in events], safe=False)


# ---------------------------------------------------------------------------
# Command mailbox
# ---------------------------------------------------------------------------

@require_http_methods(["GET", "POST"])
def command(request, device_id):
    """The dashboard POSTs a command; the device GETs (and consumes) it."""
    if request.method == "POST":
        return _queue_command(request, device_id)
    return _consume_command(request, device_id)


@relay_api()
@api_login_required
def _queue_command(request, device_id):
    """
    Body (JSON):
    {
        "cmd": "OPEN"
    }
    """
    body = load_json_body(request)
    gateway.set_owned_device_command(request.user, device_id, body.get("cmd"))
    return JsonResponse({"ok": True})


@relay_api(internal_error="cmd error")
def _consume_command(request, device_id):
    pending = mailbox.consume_command(device_id)
    if pending is None:
        return JsonResponse(None, safe=False)
    return JsonResponse(pending.to_dict())
