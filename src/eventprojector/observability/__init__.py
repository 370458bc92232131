"""
Tracing support for projectors.

OpenTelemetry is optional; without it every tracer is a no-op.
"""

from eventprojector.observability.attributes import (
    ATTR_DB_SYSTEM,
    ATTR_EVENT_COUNT,
    ATTR_EVENT_TYPE,
    ATTR_HANDLER_COUNT,
    ATTR_HANDLER_INDEX,
    ATTR_HANDLER_NAME,
    ATTR_PROJECTION_NAME,
)
from eventprojector.observability.tracer import (
    MockTracer,
    NullTracer,
    OpenTelemetryTracer,
    RecordedSpan,
    Tracer,
    create_tracer,
)
from eventprojector.observability.tracing import OTEL_AVAILABLE, traced

__all__ = [
    "OTEL_AVAILABLE",
    "traced",
    "Tracer",
    "NullTracer",
    "OpenTelemetryTracer",
    "MockTracer",
    "RecordedSpan",
    "create_tracer",
    "ATTR_DB_SYSTEM",
    "ATTR_EVENT_COUNT",
    "ATTR_EVENT_TYPE",
    "ATTR_HANDLER_COUNT",
    "ATTR_HANDLER_INDEX",
    "ATTR_HANDLER_NAME",
    "ATTR_PROJECTION_NAME",
]
