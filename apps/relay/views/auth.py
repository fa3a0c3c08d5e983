"""
Authentication views - both HTML pages and JSON API endpoints.
"""

import logging

from django.contrib.auth import authenticate, get_user_model, login, logout
from django.http import JsonResponse
from django.shortcuts import redirect, render
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods, require_POST

from ..errors import BadRequest, Conflict, Unauthorized
from ..forms import LoginForm, RegistrationForm, normalize_username
from ..ratelimits import ratelimit_login, ratelimit_register
from .helpers import load_json_body, relay_api

logger = logging.getLogger(__name__)

User = get_user_model()


# ---------------------------------------------------------------------------
# HTML auth views
# ---------------------------------------------------------------------------

@ratelimit_login
@require_http_methods(["GET", "POST"])
def login_page(request):
    """
    HTML login form. On success the session is bound to the user and
    the browser goes to the device list.
    """
    if request.user.is_authenticated:
        return redirect("devices")

    if request.method == "POST":
        form = LoginForm(request, data=request.POST)
        if form.is_valid():
            login(request, form.get_user())
            return redirect("devices")
        status = 401
    else:
        form = LoginForm(request)
        status = 200

    return render(request, "registration/login.html", {"form": form}, status=status)


@ratelimit_register
@require_http_methods(["GET", "POST"])
def register_page(request):
    """
    HTML registration form. A new account is logged in right away.
    """
    if request.method == "POST":
        form = RegistrationForm(request.POST)
        if form.is_valid():
            user = form.save()
            login(request, user)
            logger.info("Registered user %s", user.username)
            return redirect("devices")
        status = 400
    else:
        form = RegistrationForm()
        status = 200

    return render(request, "registration/register.html", {"form": form}, status=status)


def logout_view(request):
    """
    HTML logout for dashboard users.

    Logs out the current user and redirects to the login page.
    """
    logout(request)
    return redirect("login")


# ---------------------------------------------------------------------------
# JSON auth endpoints
# ---------------------------------------------------------------------------

def _user_payload(user):
    return {
        "ok": True,
        "id": user.id,
        "username": user.username,
    }


@csrf_exempt
@ratelimit_register
@require_POST
@relay_api()
def register_user(request):
    """
    JSON registration endpoint.

    Body:
    {
        "username": "alice",
        "password": "secret123"
    }

    On success:
    - Creates a new user (username stored lower-case)
    - Logs them in (session cookie)
    - Returns basic user info
    """
    payload = load_json_body(request)

    username = normalize_username(payload.get("username"))
    password = payload.get("password") or ""

    if not username or not password:
        raise BadRequest("Fields 'username' and 'password' are required")

    if User.objects.filter(username__iexact=username).exists():
        raise Conflict("Username taken")

    user = User.objects.create_user(username=username, password=password)
    login(request, user)
    logger.info("Registered user %s", user.username)

    return JsonResponse(_user_payload(user), status=201)


@csrf_exempt
@ratelimit_login
@require_POST
@relay_api()
def login_user(request):
    """
    JSON login endpoint.

    Body:
    {
        "username": "alice",
        "password": "secret123"
    }

    On success:
    - Logs in the user (session cookie, plus a fresh csrftoken cookie)
    - Returns basic user info
    """
    payload = load_json_body(request)

    username = normalize_username(payload.get("username"))
    password = payload.get("password") or ""

    if not username or not password:
        raise BadRequest("Fields 'username' and 'password' are required")

    user = authenticate(request, username=username, password=password)
    if user is None:
        raise Unauthorized("Invalid credentials")

    login(request, user)
    return JsonResponse(_user_payload(user))


@csrf_exempt
@require_POST
def logout_user(request):
    """
    Log out the current user (session-based).
    """
    logout(request)
    return JsonResponse({"ok": True})
