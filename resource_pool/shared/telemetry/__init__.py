"""Telemetry: logging setup."""

from resource_pool.shared.telemetry.logging import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
