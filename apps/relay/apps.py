"""
RelayHub Platform - Relay Application Configuration

Django application configuration for the relay app.

Author:     Gonzalo Patino
Created:    2025
Course:     Southern New Hampshire University
License:    Academic Use Only - See LICENSE file
"""

from django.apps import AppConfig


class RelayConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.relay'
    verbose_name = 'Device Relay'
