"""
RelayHub Platform - Ownership-Scoped Query Gateway

Every dashboard read or write of device state goes through here and is
scoped to the session's user:
    - list_devices_for_owner
    - register_device
    - get_owned_device
    - get_device_snapshot
    - get_event_history
    - set_owned_device_command

A device owned by somebody else is reported as NotFound, never as
forbidden, so other users cannot discover which device ids exist.

Author:     Gonzalo Patino
Created:    2025
Course:     Southern New Hampshire University
License:    Academic Use Only - See LICENSE file
"""

import logging

from django.db import IntegrityError, transaction

from . import mailbox
from .errors import BadRequest, Conflict, NotFound, Unauthorized
from .models import Device, TelemetryEvent

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 200
MAX_HISTORY_LIMIT = 500


def _require_owner(owner):
    if owner is None or not getattr(owner, "is_authenticated", False):
        raise Unauthorized()
    return owner


def _parse_coordinate(value, field):
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise BadRequest(f"Field '{field}' must be a number")


def list_devices_for_owner(owner):
    """Devices owned by this user, newest first."""
    _require_owner(owner)
    return Device.objects.filter(owner=owner).order_by("-created_at", "-id")


def register_device(owner, device_id, name="", place="", description="", lat=None, lng=None):
    """
    Register a device for owner.

    Raises Conflict when this owner already registered device_id. The
    same device_id registered by a different owner is accepted.
    """
    _require_owner(owner)

    device_id = str(device_id or "").strip()
    if not device_id:
        raise BadRequest("Missing deviceId")
    if len(device_id) > Device._meta.get_field("device_id").max_length:
        raise BadRequest("deviceId is too long")

    if Device.objects.filter(owner=owner, device_id=device_id).exists():
        raise Conflict("Device already registered")

    try:
        with transaction.atomic():
            device = Device.objects.create(
                owner=owner,
                device_id=device_id,
                name=(name or "").strip(),
                place=(place or "").strip(),
                description=(description or "").strip(),
                lat=_parse_coordinate(lat, "lat"),
                lng=_parse_coordinate(lng, "lng"),
            )
    except IntegrityError:
        raise Conflict("Device already registered")

    logger.info("User %s registered device %s", owner.username, device_id)
    return device


def get_owned_device(owner, device_id):
    """The owner's device with this device_id, or NotFound."""
    _require_owner(owner)
    device = Device.objects.filter(owner=owner, device_id=device_id).first()
    if device is None:
        raise NotFound()
    return device


def get_device_snapshot(owner, device_id):
    """Latest telemetry for the device, or None before any has arrived."""
    return get_owned_device(owner, device_id).last_telemetry


def clamp_history_limit(limit):
    try:
        limit = int(limit)
    except (TypeError, ValueError):
        limit = DEFAULT_HISTORY_LIMIT
    return max(1, min(limit, MAX_HISTORY_LIMIT))


def get_event_history(owner, device_id, limit=DEFAULT_HISTORY_LIMIT):
    """
    Most recent events for the device, newest first, capped at
    min(limit, 500).
    """
    device = get_owned_device(owner, device_id)
    limit = clamp_history_limit(limit)
    return list(
        TelemetryEvent.objects
        .filter(device_id=device.device_id)
        .order_by("-server_ts", "-id")[:limit]
    )


def set_owned_device_command(owner, device_id, cmd):
    """Queue cmd for a device the owner holds."""
    _require_owner(owner)
    if cmd is None or str(cmd).strip() == "":
        raise BadRequest("Missing cmd")
    device = get_owned_device(owner, device_id)
    return mailbox.set_command(device.device_id, str(cmd))
