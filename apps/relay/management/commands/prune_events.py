"""
Delete old telemetry history.

Usage:
    python manage.py prune_events --days 30
    python manage.py prune_events --days 7 --device garage-01

Without --days the RELAY_EVENT_RETENTION_DAYS setting is used; when that
is unset too, nothing is deleted.
"""

from datetime import timedelta

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from apps.relay.ingestion import prune_events


class Command(BaseCommand):
    help = "Delete telemetry events older than a retention window."

    def add_arguments(self, parser):
        parser.add_argument("--days", type=int, default=None, help="Keep this many days of history.")
        parser.add_argument("--device", default=None, help="Only prune this device id.")

    def handle(self, *args, **options):
        days = options["days"]
        if days is None:
            days = getattr(settings, "RELAY_EVENT_RETENTION_DAYS", None)
        if days is None:
            self.stdout.write("No retention configured; nothing pruned.")
            return
        if days < 0:
            raise CommandError("--days must be zero or positive")

        cutoff = timezone.now() - timedelta(days=days)
        deleted = prune_events(cutoff, device_id=options["device"])
        self.stdout.write(self.style.SUCCESS(f"Deleted {deleted} telemetry events older than {days} day(s)."))
