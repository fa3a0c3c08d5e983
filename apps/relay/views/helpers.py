"""
Shared helper functions and decorators for views.
"""

import json
import logging
from functools import wraps

from django.core.exceptions import RequestDataTooBig
from django.http import JsonResponse

from ..errors import BadRequest, RelayError, Unauthorized

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def error_response(message, status):
    return JsonResponse({"ok": False, "error": message}, status=status)


def relay_api(internal_error="internal error"):
    """
    Decorator for JSON API views.

    RelayError subclasses become {"ok": false, "error": ...} with their
    status. Anything else is logged and answered with a 500 carrying
    internal_error, so storage details never reach the caller.
    """
    def decorator(view_func):
        @wraps(view_func)
        def _wrapped(request, *args, **kwargs):
            try:
                return view_func(request, *args, **kwargs)
            except RelayError as exc:
                return error_response(exc.message, exc.status)
            except Exception:
                logger.exception(
                    "Unhandled error in %s %s", request.method, request.path
                )
                return error_response(internal_error, 500)
        return _wrapped
    return decorator


def api_login_required(view_func):
    """
    Decorator for JSON API views that require a logged-in user (session-based).
    Raises Unauthorized (HTTP 401 JSON) instead of redirecting to login HTML.
    Must sit inside relay_api.
    """
    @wraps(view_func)
    def _wrapped(request, *args, **kwargs):
        if not request.user.is_authenticated:
            raise Unauthorized()
        return view_func(request, *args, **kwargs)
    return _wrapped


def _reject_constant(name):
    # NaN and +/-Infinity are not JSON and cannot be stored in a JSONField
    raise ValueError(f"invalid JSON constant {name}")


def load_json_body(request) -> dict:
    """
    Parse the request body as a JSON object.

    An empty body is treated as {}. Plain HTML form posts are read from
    request.POST instead.
    """
    try:
        raw = request.body
    except RequestDataTooBig:
        raise BadRequest("payload too large")

    if request.content_type in FORM_CONTENT_TYPES:
        return request.POST.dict()

    if not raw:
        return {}
    try:
        data = json.loads(raw.decode("utf-8"), parse_constant=_reject_constant)
    except (UnicodeDecodeError, ValueError):
        raise BadRequest("Invalid JSON")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise BadRequest("Expected a JSON object")
    return data
