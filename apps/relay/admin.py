from django.contrib import admin
from .models import Device, PendingCommand, TelemetryEvent


@admin.register(Device)
class DeviceAdmin(admin.ModelAdmin):
    list_display = ("device_id", "owner", "name", "place", "last_seen_at", "created_at")
    search_fields = ("device_id", "name", "place", "owner__username")
    readonly_fields = ("created_at", "last_telemetry", "last_seen_at")


# Handy for eyeballing what devices actually sent
@admin.register(TelemetryEvent)
class TelemetryEventAdmin(admin.ModelAdmin):
    list_display = ("id", "device_id", "ts", "server_ts")
    search_fields = ("device_id",)
    ordering = ("-server_ts",)


@admin.register(PendingCommand)
class PendingCommandAdmin(admin.ModelAdmin):
    list_display = ("device_id", "cmd", "ts")
    search_fields = ("device_id",)
