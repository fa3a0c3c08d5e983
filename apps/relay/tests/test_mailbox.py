import pytest

from apps.relay import mailbox
from apps.relay.models import PendingCommand

pytestmark = pytest.mark.django_db


def test_consume_without_command_returns_none():
    assert mailbox.consume_command("garage-01") is None


def test_set_then_consume_delivers_once():
    mailbox.set_command("garage-01", "OPEN")

    pending = mailbox.consume_command("garage-01")
    assert pending.cmd == "OPEN"
    assert pending.device_id == "garage-01"

    assert mailbox.consume_command("garage-01") is None
    assert not PendingCommand.objects.exists()


def test_second_command_overwrites_first():
    mailbox.set_command("garage-01", "OPEN")
    mailbox.set_command("garage-01", "CLOSE")

    assert PendingCommand.objects.filter(device_id="garage-01").count() == 1
    assert mailbox.consume_command("garage-01").cmd == "CLOSE"
    assert mailbox.consume_command("garage-01") is None


def test_overwrite_refreshes_timestamp():
    first = mailbox.set_command("garage-01", "LED_ON")
    second = mailbox.set_command("garage-01", "LED_OFF")

    stored = PendingCommand.objects.get(device_id="garage-01")
    assert second.ts >= first.ts
    assert stored.ts == second.ts


def test_mailboxes_are_per_device():
    mailbox.set_command("garage-01", "OPEN")
    mailbox.set_command("gate-02", "CLOSE")

    assert mailbox.consume_command("gate-02").cmd == "CLOSE"
    assert mailbox.consume_command("garage-01").cmd == "OPEN"


def test_command_is_stored_as_string():
    mailbox.set_command("garage-01", 42)
    assert mailbox.consume_command("garage-01").cmd == "42"


def test_to_dict_reports_millisecond_timestamp():
    stored = mailbox.set_command("garage-01", "OPEN")
    data = mailbox.consume_command("garage-01").to_dict()

    assert data["cmd"] == "OPEN"
    assert data["ts"] == int(stored.ts.timestamp() * 1000)
