"""
RelayHub Platform - Root Views

This module provides root-level views for the Django project.

Author:     Gonzalo Patino
Created:    2025
Course:     Southern New Hampshire University
License:    Academic Use Only - See LICENSE file
"""

import logging
import time

from django.db import DatabaseError
from django.http import JsonResponse

from apps.relay.models import Device

logger = logging.getLogger(__name__)


def health(request):
    """
    Health check endpoint for load balancers and monitoring.

    Always answers 200; the device count drops to 0 when the
    database cannot be reached.

    Returns:
        JsonResponse: {"ok": true, "ts": <ms>, "devices": <count>}
    """
    try:
        devices = Device.objects.count()
    except DatabaseError:
        logger.exception("Health check could not count devices")
        devices = 0

    return JsonResponse(
        {
            "ok": True,
            "ts": int(time.time() * 1000),
            "devices": devices,
        }
    )
