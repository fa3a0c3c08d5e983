"""
RelayHub Platform - Relay Application

This Django application provides the device relay: device registration,
telemetry ingestion, the per-device command mailbox, and the owner
dashboard.

Author:     Gonzalo Patino
Created:    2025
Course:     Southern New Hampshire University
License:    Academic Use Only - See LICENSE file
"""
