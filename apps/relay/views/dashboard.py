"""
Dashboard HTML views - device list, device registration, device detail.
"""

from django.conf import settings
from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.http import Http404
from django.shortcuts import redirect, render
from django.views.decorators.csrf import ensure_csrf_cookie
from django.views.decorators.http import require_http_methods

from .. import gateway
from ..errors import Conflict, NotFound
from ..forms import DeviceForm


@login_required
def dashboard_devices(request):
    """
    Dashboard landing page: list and map pins for the user's devices.
    """
    devices = gateway.list_devices_for_owner(request.user)
    context = {
        "devices": devices,
        "default_lat": settings.RELAY_DEFAULT_LAT,
        "default_lng": settings.RELAY_DEFAULT_LNG,
    }
    return render(request, "dashboard/devices.html", context)


@login_required
@require_http_methods(["GET", "POST"])
def dashboard_register_device(request):
    """
    HTML form to register a device for the logged-in user.

    The device id usually comes from a QR scan and the coordinates from
    the browser's geolocation.
    """
    if request.method == "POST":
        form = DeviceForm(request.POST)
        if form.is_valid():
            try:
                device = gateway.register_device(request.user, **form.cleaned_data)
            except Conflict:
                form.add_error("device_id", "Device already exists")
            else:
                messages.success(request, f"Device '{device.device_id}' registered.")
                return redirect("devices")
        return render(request, "dashboard/new_device.html", {"form": form}, status=400)

    return render(request, "dashboard/new_device.html", {"form": DeviceForm()})


@login_required
@ensure_csrf_cookie
def dashboard_device_detail(request, device_id: str):
    """
    Device dashboard: live status, commands, map pin and history.

    The page itself is static; dashboard.js polls the JSON API.
    """
    try:
        device = gateway.get_owned_device(request.user, device_id)
    except NotFound:
        raise Http404("Device not found")

    context = {
        "device": device,
        "relay_config": {
            "deviceId": device.device_id,
            "lat": device.lat if device.lat is not None else settings.RELAY_DEFAULT_LAT,
            "lng": device.lng if device.lng is not None else settings.RELAY_DEFAULT_LNG,
            "pollIntervalMs": int(settings.RELAY_POLL_INTERVAL * 1000),
            "freshnessMs": settings.RELAY_FRESHNESS_MS,
        },
    }
    return render(request, "dashboard/device_detail.html", context)
