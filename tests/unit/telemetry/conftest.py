"""Fixtures for telemetry unit tests."""

from __future__ import annotations

from collections.abc import Generator

import pytest
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.sdk.trace.sampling import ALWAYS_ON
from opentelemetry.util._once import Once


def _reset_tracer_provider() -> None:
    # None makes get_tracer_provider() fall back to the module's no-op proxy
    trace._TRACER_PROVIDER_SET_ONCE = Once()
    trace._TRACER_PROVIDER = None  # type: ignore[assignment]


@pytest.fixture
def span_exporter() -> Generator[InMemorySpanExporter, None, None]:
    """Install an in-memory exporter as the global tracer provider.

    The global OpenTelemetry state is reset before and after the test.

    Yields:
        The exporter collecting finished spans.
    """
    _reset_tracer_provider()

    exporter = InMemorySpanExporter()
    provider = TracerProvider(sampler=ALWAYS_ON)
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    yield exporter

    exporter.clear()
    _reset_tracer_provider()
