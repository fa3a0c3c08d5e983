"""
RelayHub Platform - Command Mailbox

Single-slot, per-device command queue:
    - set_command: overwrite whatever is pending for the device
    - consume_command: fetch-and-delete the pending command, if any

Delivery is at-most-once. A command handed to a device is gone from the
mailbox even if the device never acts on it.

Author:     Gonzalo Patino
Created:    2025
Course:     Southern New Hampshire University
License:    Academic Use Only - See LICENSE file
"""

import logging

from django.db import IntegrityError, transaction
from django.utils import timezone

from .models import PendingCommand

logger = logging.getLogger(__name__)


def set_command(device_id: str, cmd: str) -> PendingCommand:
    """
    Upsert the pending command for a device (last write wins).

    The caller is responsible for checking that the requesting user owns
    the device.
    """
    now = timezone.now()
    cmd = str(cmd)

    updated = PendingCommand.objects.filter(device_id=device_id).update(cmd=cmd, ts=now)
    if not updated:
        try:
            with transaction.atomic():
                PendingCommand.objects.create(device_id=device_id, cmd=cmd, ts=now)
        except IntegrityError:
            # Another writer created the row between our update and insert
            PendingCommand.objects.filter(device_id=device_id).update(cmd=cmd, ts=now)

    logger.info("Queued command %s for device %s", cmd, device_id)
    return PendingCommand(device_id=device_id, cmd=cmd, ts=now)


def consume_command(device_id: str):
    """
    Remove and return the pending command for a device.

    Returns None when nothing is pending. When two consumers race, only
    the one whose delete actually removed the row gets the command.
    """
    with transaction.atomic():
        pending = (
            PendingCommand.objects
            .select_for_update()
            .filter(device_id=device_id)
            .first()
        )
        if pending is None:
            return None

        deleted, _ = PendingCommand.objects.filter(
            pk=pending.pk,
            cmd=pending.cmd,
            ts=pending.ts,
        ).delete()

    if not deleted:
        return None

    logger.info("Delivered command %s to device %s", pending.cmd, device_id)
    return pending
