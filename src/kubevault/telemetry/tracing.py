"""OpenTelemetry tracing helpers for manifest generation.

Manifest generation steps emit spans carrying the operation name and the
number of resources involved. Only the OpenTelemetry API is required: without
a configured SDK the spans are no-ops.

Example:
    >>> from kubevault.telemetry.tracing import get_tracer, manifest_span
    >>> with manifest_span(get_tracer(), "generate_secrets", resource_kind="Secret") as span:
    ...     span.set_attribute(ATTR_RESOURCE_COUNT, 3)
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

if TYPE_CHECKING:
    from collections.abc import Iterator

TRACER_NAME = "kubevault.manifests"

ATTR_OPERATION = "kubevault.operation"
ATTR_RESOURCE_KIND = "kubevault.resource_kind"
ATTR_RESOURCE_COUNT = "kubevault.resource_count"
ATTR_NAMESPACE = "kubevault.namespace"


def get_tracer() -> trace.Tracer:
    """Get the tracer for kubevault manifest operations."""
    return trace.get_tracer(TRACER_NAME)


@contextmanager
def manifest_span(
    tracer: trace.Tracer,
    operation: str,
    *,
    resource_kind: str | None = None,
    namespace: str | None = None,
    extra_attributes: dict[str, Any] | None = None,
) -> Iterator[trace.Span]:
    """Open a span around a manifest operation.

    The span is named ``kubevault.{operation}``. Exceptions mark the span as
    failed with the exception type and are re-raised.

    Args:
        tracer: OpenTelemetry tracer instance.
        operation: Operation name (e.g. "generate_secrets").
        resource_kind: K8s kind produced by the operation.
        namespace: Target namespace.
        extra_attributes: Additional span attributes.

    Yields:
        The active span.
    """
    attributes: dict[str, Any] = {ATTR_OPERATION: operation}
    if resource_kind is not None:
        attributes[ATTR_RESOURCE_KIND] = resource_kind
    if namespace is not None:
        attributes[ATTR_NAMESPACE] = namespace
    if extra_attributes:
        attributes.update(extra_attributes)

    with tracer.start_as_current_span(
        f"kubevault.{operation}",
        attributes=attributes,
        record_exception=False,
        set_status_on_exception=False,
    ) as span:
        try:
            yield span
            span.set_status(Status(StatusCode.OK))
        except Exception as e:
            span.set_status(Status(StatusCode.ERROR, type(e).__name__))
            span.set_attribute("exception.type", type(e).__name__)
            raise


__all__ = [
    "ATTR_NAMESPACE",
    "ATTR_OPERATION",
    "ATTR_RESOURCE_COUNT",
    "ATTR_RESOURCE_KIND",
    "TRACER_NAME",
    "get_tracer",
    "manifest_span",
]
