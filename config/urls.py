"""
RelayHub Platform - Root URL Configuration

This module defines the root URL routing for the Django project:
    - /admin/ - Django admin interface
    - /api/ - device and dashboard JSON endpoints
    - /login/, /register/, /logout/ - User authentication pages
    - /devices/ - User dashboard views
    - /health - Health check endpoint

Author:     Gonzalo Patino
Created:    2025
Course:     Southern New Hampshire University
License:    Academic Use Only - See LICENSE file

For URL routing reference:
    https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.contrib import admin
from django.urls import path, include
from django.shortcuts import redirect

from .views import health
from apps.relay import views as relay_views


def root_redirect(request):
    if not request.user.is_authenticated:
        return redirect("login")
    return redirect("devices")


urlpatterns = [
    # Auth HTML views
    path("", root_redirect, name="root-redirect"),
    path("login", relay_views.login_page, name="login"),
    path("register", relay_views.register_page, name="register"),
    path("logout", relay_views.logout_view, name="logout"),

    # Dashboard pages
    path("devices", relay_views.dashboard_devices, name="devices"),
    path("devices/new", relay_views.dashboard_register_device, name="device_new"),
    path(
        "devices/<str:device_id>",
        relay_views.dashboard_device_detail,
        name="device_detail",
    ),

    path("admin/", admin.site.urls),
    path("health", health, name="health"),
    path("api/", include("apps.relay.urls")),
]
