"""Logging and tracing for kubevault."""

from __future__ import annotations

from kubevault.telemetry.logging import add_trace_context, configure_logging
from kubevault.telemetry.tracing import get_tracer, manifest_span

__all__ = ["add_trace_context", "configure_logging", "get_tracer", "manifest_span"]
