from django.urls import path
from . import views

urlpatterns = [
    # Auth
    path("auth/register/", views.register_user, name="register-user"),
    path("auth/login/", views.login_user, name="login-user"),
    path("auth/logout/", views.logout_user, name="logout-user"),

    # Devices
    path("devices/", views.devices, name="api-devices"),

    # Telemetry (device push / dashboard read)
    path("telemetry/<str:device_id>", views.telemetry, name="api-telemetry"),
    path("events/<str:device_id>", views.event_history, name="api-events"),

    # Command mailbox (dashboard write / device consume)
    path("cmd/<str:device_id>", views.command, name="api-cmd"),
]
