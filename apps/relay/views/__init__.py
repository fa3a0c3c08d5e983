"""
Views package for the relay app.

Views are organized into submodules:
  - helpers: Shared decorators and request parsing
  - auth: HTML and JSON authentication views
  - dashboard: HTML dashboard views (device list, registration, detail)
  - api: JSON device management endpoints
  - telemetry: Telemetry ingestion/history and the command mailbox
"""

# Re-export from helpers
from .helpers import (
    api_login_required,
    load_json_body,
    relay_api,
)

# Re-export from auth
from .auth import (
    login_page,
    login_user,
    logout_user,
    logout_view,
    register_page,
    register_user,
)

# Re-export from dashboard
from .dashboard import (
    dashboard_device_detail,
    dashboard_devices,
    dashboard_register_device,
)

# Re-export from api
from .api import devices

# Re-export from telemetry
from .telemetry import (
    command,
    event_history,
    telemetry,
)

__all__ = [
    # Helpers
    "api_login_required",
    "load_json_body",
    "relay_api",
    # Auth
    "login_page",
    "login_user",
    "logout_user",
    "logout_view",
    "register_page",
    "register_user",
    # Dashboard
    "dashboard_device_detail",
    "dashboard_devices",
    "dashboard_register_device",
    # API
    "devices",
    # Telemetry
    "command",
    "event_history",
    "telemetry",
]
