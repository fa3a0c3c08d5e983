from datetime import timedelta
from io import StringIO
from unittest import mock

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError
from django.utils import timezone

from apps.relay import ingestion
from apps.relay.models import TelemetryEvent
from apps.relay.poller import PollResult, ONLINE

pytestmark = pytest.mark.django_db


def _age_all_events(days):
    TelemetryEvent.objects.update(ts=timezone.now() - timedelta(days=days))


def test_prune_events_with_days(garage):
    ingestion.ingest("garage-01", {"n": 1})
    _age_all_events(10)
    ingestion.ingest("garage-01", {"n": 2})

    out = StringIO()
    call_command("prune_events", "--days", "5", stdout=out)

    assert TelemetryEvent.objects.count() == 1
    assert "Deleted 1 telemetry events" in out.getvalue()


def test_prune_events_uses_retention_setting(garage, settings):
    settings.RELAY_EVENT_RETENTION_DAYS = 3
    ingestion.ingest("garage-01", {"n": 1})
    _age_all_events(4)

    call_command("prune_events", stdout=StringIO())

    assert not TelemetryEvent.objects.exists()


def test_prune_events_without_retention_keeps_history(garage, settings):
    settings.RELAY_EVENT_RETENTION_DAYS = None
    ingestion.ingest("garage-01", {"n": 1})
    _age_all_events(365)

    out = StringIO()
    call_command("prune_events", stdout=out)

    assert TelemetryEvent.objects.count() == 1
    assert "nothing pruned" in out.getvalue()


def test_prune_events_rejects_negative_days(db):
    with pytest.raises(CommandError):
        call_command("prune_events", "--days", "-1", stdout=StringIO())


def test_poll_device_logs_in_sends_command_and_polls(monkeypatch):
    monkeypatch.setenv("RELAY_PASSWORD", "secret123")
    with mock.patch("apps.relay.management.commands.poll_device.RelayPoller") as poller_cls:
        poller = poller_cls.return_value
        poller.login.return_value = True
        poller.send_cmd.return_value = True
        poller.run.side_effect = lambda ticks, on_result: on_result(
            PollResult(ONLINE, {"door": "open", "serverTs": 1}, 10)
        )

        out = StringIO()
        call_command(
            "poll_device", "garage-01", "--username", "alice", "--cmd", "OPEN", "--ticks", "1",
            stdout=out,
        )

    poller.login.assert_called_once_with("alice", "secret123")
    poller.send_cmd.assert_called_once_with("OPEN")
    assert poller.run.call_args.kwargs["ticks"] == 1
    output = out.getvalue()
    assert "OPEN: accepted" in output
    assert "[online] door=open serverTs=1" in output


def test_poll_device_fails_on_bad_login(monkeypatch):
    monkeypatch.setenv("RELAY_PASSWORD", "wrong")
    with mock.patch("apps.relay.management.commands.poll_device.RelayPoller") as poller_cls:
        poller_cls.return_value.login.return_value = False
        with pytest.raises(CommandError):
            call_command("poll_device", "garage-01", "--username", "alice", stdout=StringIO())
