"""
RelayHub Platform - Database Models

This module defines the data models for the RelayHub platform:
    - Device: IoT device registered by an owner, with its latest snapshot
    - TelemetryEvent: Append-only telemetry history records
    - PendingCommand: Single-slot command mailbox, one row per device

Users are Django's built-in auth users; usernames are stored lower-cased.

Author:     Gonzalo Patino
Created:    2025
Course:     Southern New Hampshire University
License:    Academic Use Only - See LICENSE file
"""

from django.conf import settings
from django.db import models


class Device(models.Model):
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        related_name="devices",
        on_delete=models.CASCADE,
    )
    # Identifier the hardware reports with; unique per owner only
    device_id = models.CharField(max_length=64, db_index=True)
    name = models.CharField(max_length=100, blank=True)
    place = models.CharField(max_length=200, blank=True)
    description = models.TextField(blank=True)
    lat = models.FloatField(null=True, blank=True)
    lng = models.FloatField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    # Written only by telemetry ingestion
    last_telemetry = models.JSONField(null=True, blank=True)
    last_seen_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["owner", "device_id"],
                name="unique_device_per_owner",
            ),
        ]
        ordering = ["-created_at"]

    def __str__(self):
        label = self.name or self.device_id
        return f"{label} (owner={self.owner.username})"

    def to_dict(self):
        return {
            "deviceId": self.device_id,
            "name": self.name,
            "place": self.place,
            "description": self.description,
            "lat": self.lat,
            "lng": self.lng,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "lastSeenAt": self.last_seen_at.isoformat() if self.last_seen_at else None,
        }


class TelemetryEvent(models.Model):
    device_id = models.CharField(max_length=64)
    ts = models.DateTimeField()
    # Milliseconds since epoch, strictly increasing per device_id
    server_ts = models.BigIntegerField()
    payload = models.JSONField(default=dict)

    class Meta:
        indexes = [
            models.Index(
                fields=["device_id", "-server_ts"],
                name="relay_event_device_ts_idx",
            ),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["device_id", "server_ts"],
                name="unique_event_server_ts",
            ),
        ]

    def __str__(self):
        return f"{self.device_id} @ {self.ts.isoformat()}"

    def to_dict(self):
        return {
            "deviceId": self.device_id,
            "ts": self.ts.isoformat(),
            "payload": self.payload,
        }


class PendingCommand(models.Model):
    device_id = models.CharField(max_length=64, unique=True)
    cmd = models.CharField(max_length=128)
    ts = models.DateTimeField()

    def __str__(self):
        return f"{self.cmd} -> {self.device_id}"

    def to_dict(self):
        return {
            "cmd": self.cmd,
            "ts": int(self.ts.timestamp() * 1000),
        }
