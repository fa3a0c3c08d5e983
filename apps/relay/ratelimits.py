"""
RelayHub Platform - Rate Limiting Decorators

This module provides rate limiting decorators for the account endpoints:
    - ratelimit_login: 5 attempts per minute per IP
    - ratelimit_register: 3 registrations per hour per IP

Device endpoints (telemetry push, command pull) are not rate limited;
devices poll them every second.

Author:     Gonzalo Patino
Created:    2025
Course:     Southern New Hampshire University
License:    Academic Use Only - See LICENSE file
"""

from django.conf import settings
from django.http import JsonResponse
from django_ratelimit.decorators import ratelimit


def ratelimit_login(view_func):
    """Rate limit: 5 attempts per minute for login."""
    return ratelimit(
        key="ip",
        rate=getattr(settings, "RATELIMIT_LOGIN", "5/m"),
        method=["POST"],
        block=True,
    )(view_func)


def ratelimit_register(view_func):
    """Rate limit: 3 registrations per hour per IP."""
    return ratelimit(
        key="ip",
        rate=getattr(settings, "RATELIMIT_REGISTER", "3/h"),
        method=["POST"],
        block=True,
    )(view_func)


def ratelimited_error(request, exception=None):
    """Custom view for rate limit exceeded errors."""
    return JsonResponse(
        {
            "ok": False,
            "error": "Too many requests. Please try again later.",
        },
        status=429,
    )
