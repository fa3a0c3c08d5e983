"""
RelayHub Platform - Device JSON API

This module provides JSON endpoints for programmatic device management:
    - devices (GET): Retrieve the logged-in user's devices, newest first
    - devices (POST): Register a new device for the logged-in user

All endpoints return JSON responses and require session authentication.

Author:     Gonzalo Patino
Created:    2025
Course:     Southern New Hampshire University
License:    Academic Use Only - See LICENSE file
"""

from django.http import JsonResponse
from django.views.decorators.http import require_http_methods

from .. import gateway
from .helpers import api_login_required, load_json_body, relay_api


@require_http_methods(["GET", "POST"])
@relay_api()
@api_login_required
def devices(request):
    """
    GET /api/devices/

    Response:
    {
        "count": N,
        "results": [
            {
                "deviceId": "garage-01",
                "name": "Garage door",
                "place": "Home",
                "description": "",
                "lat": 44.81,
                "lng": 20.45,
                "createdAt": "...iso8601...",
                "lastSeenAt": null
            },
            ...
        ]
    }

    POST /api/devices/

    Body (JSON):
    {
        "deviceId": "garage-01",
        "name": "Garage door",     # optional
        "place": "Home",           # optional
        "description": "",         # optional
        "lat": 44.81,              # optional
        "lng": 20.45               # optional
    }

    Responses:
    - 201 with the device on success
    - 400 if deviceId is missing or already registered by this user
    - 401 if not authenticated
    """
    if request.method == "POST":
        payload = load_json_body(request)
        device = gateway.register_device(
            request.user,
            payload.get("deviceId"),
            name=payload.get("name") or "",
            place=payload.get("place") or "",
            description=payload.get("description") or "",
            lat=payload.get("lat"),
            lng=payload.get("lng"),
        )
        return JsonResponse(device.to_dict(), status=201)

    results = [d.to_dict() for d in gateway.list_devices_for_owner(request.user)]
    return JsonResponse(
        {
            "count": len(results),
            "results": results,
        }
    )
