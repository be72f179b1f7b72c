"""Shared telemetry: logging setup, OpenTelemetry config, and tracing helpers."""

from helpfromfounder.shared.telemetry.logging import (
    RequestIDLogFilter,
    get_logger,
    request_id_var,
    setup_logging,
)
from helpfromfounder.shared.telemetry.telemetry import TelemetryConfig
from helpfromfounder.shared.telemetry.tracing import add_span_attributes, traced

__all__ = [
    "RequestIDLogFilter",
    "request_id_var",
    "setup_logging",
    "get_logger",
    "TelemetryConfig",
    "traced",
    "add_span_attributes",
]
