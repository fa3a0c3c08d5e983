"""
RelayHub Platform - Telemetry Ingestion

Accepts payloads pushed by devices:
    - ingest: stamp server time, append a TelemetryEvent, refresh the
      device's latest snapshot
    - prune_events: retention helper for the otherwise unbounded history

Possession of a registered device_id is the only credential a device
needs. Every Device row carrying that device_id receives the snapshot,
whichever owner registered it.

Author:     Gonzalo Patino
Created:    2025
Course:     Southern New Hampshire University
License:    Academic Use Only - See LICENSE file
"""

import logging
import time
from datetime import datetime, timezone as dt_timezone

from django.db import IntegrityError, transaction

from .errors import BadRequest, NotFound
from .models import Device, TelemetryEvent

logger = logging.getLogger(__name__)

SERVER_TS_FIELD = "serverTs"
SERVER_TS_ATTEMPTS = 5


def _now_ms() -> int:
    return int(time.time() * 1000)


def _next_server_ts(device_id: str, now_ms: int) -> int:
    """
    Server timestamp for a new event, strictly greater than the last one
    recorded for this device even if the wall clock stalls or steps back.
    """
    last = (
        TelemetryEvent.objects
        .filter(device_id=device_id)
        .order_by("-server_ts")
        .values_list("server_ts", flat=True)
        .first()
    )
    if last is not None and now_ms <= last:
        return last + 1
    return now_ms


def ingest(device_id: str, payload) -> TelemetryEvent:
    """
    Ingest one telemetry payload for device_id.

    Raises NotFound if no owner has registered device_id, BadRequest if
    the payload is not a JSON object. Unknown fields pass through as-is;
    a device-supplied serverTs is replaced.
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise BadRequest("telemetry must be a JSON object")

    owners = list(
        Device.objects.filter(device_id=device_id).values_list("owner_id", flat=True)
    )
    if not owners:
        logger.warning("Rejected telemetry for unknown device %s", device_id)
        raise NotFound("unknown deviceId")
    if len(owners) > 1:
        logger.warning(
            "Device id %s is registered by %d owners; all of them receive this telemetry",
            device_id,
            len(owners),
        )

    server_ts = _next_server_ts(device_id, _now_ms())
    attempt = 1
    while True:
        received_at = datetime.fromtimestamp(server_ts / 1000, tz=dt_timezone.utc)
        data = dict(payload)
        data[SERVER_TS_FIELD] = server_ts

        # History append and snapshot refresh are separate writes
        try:
            with transaction.atomic():
                event = TelemetryEvent.objects.create(
                    device_id=device_id,
                    ts=received_at,
                    server_ts=server_ts,
                    payload=data,
                )
            break
        except IntegrityError:
            # A concurrent push for this device claimed server_ts first
            if attempt >= SERVER_TS_ATTEMPTS:
                raise
            attempt += 1
            server_ts = _next_server_ts(device_id, server_ts + 1)
            logger.debug("serverTs collision for device %s, retrying with %s", device_id, server_ts)

    Device.objects.filter(device_id=device_id).update(
        last_telemetry=data,
        last_seen_at=received_at,
    )

    logger.info(
        "Ingested telemetry from device %s (event id=%s, serverTs=%s)",
        device_id,
        event.id,
        server_ts,
    )
    return event


def prune_events(older_than: datetime, device_id: str = None) -> int:
    """
    Delete telemetry events recorded before older_than.

    Device snapshots are left alone. Returns the number of events deleted.
    """
    qs = TelemetryEvent.objects.filter(ts__lt=older_than)
    if device_id:
        qs = qs.filter(device_id=device_id)
    deleted, _ = qs.delete()
    logger.info("Pruned %d telemetry events older than %s", deleted, older_than.isoformat())
    return deleted
