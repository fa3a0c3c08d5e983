"""
Watch a device from the terminal, the way the dashboard page does.

Usage:
    python manage.py poll_device garage-01 --username alice
    python manage.py poll_device garage-01 --username alice --cmd OPEN
    python manage.py poll_device garage-01 --base-url https://relay.example.com --ticks 10

The password is read from RELAY_PASSWORD or prompted for.
"""

import getpass
import os

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from apps.relay.poller import COMMANDS, RelayPoller


class Command(BaseCommand):
    help = "Poll a device's live status through the relay API."

    def add_arguments(self, parser):
        parser.add_argument("device_id")
        parser.add_argument("--base-url", default="http://localhost:8000")
        parser.add_argument("--username", required=True)
        parser.add_argument("--ticks", type=int, default=None, help="Stop after this many polls.")
        parser.add_argument("--interval", type=float, default=settings.RELAY_POLL_INTERVAL)
        parser.add_argument("--cmd", choices=COMMANDS, default=None, help="Queue a command first.")

    def handle(self, *args, **options):
        password = os.getenv("RELAY_PASSWORD") or getpass.getpass("Password: ")

        poller = RelayPoller(
            options["base_url"],
            options["device_id"],
            interval=options["interval"],
            freshness_ms=settings.RELAY_FRESHNESS_MS,
            timeout=settings.RELAY_POLL_TIMEOUT,
        )
        if not poller.login(options["username"], password):
            raise CommandError("Login failed")

        if options["cmd"]:
            accepted = poller.send_cmd(options["cmd"])
            self.stdout.write(f"{options['cmd']}: {'accepted' if accepted else 'not accepted'}")

        try:
            poller.run(ticks=options["ticks"], on_result=self._print_result)
        except KeyboardInterrupt:
            self.stdout.write("")

    def _print_result(self, result):
        fields = " ".join(
            f"{name}={value}" for name, value in result.fields().items() if value is not None
        )
        self.stdout.write(f"[{result.status}] {fields}".rstrip())
