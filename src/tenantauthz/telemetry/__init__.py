"""Logging helpers."""

from tenantauthz.telemetry.logging import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
