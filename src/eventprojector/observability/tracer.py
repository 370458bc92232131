"""
Tracers handed to projectors.

Projector and SqlProjector take a ``Tracer`` instead of calling OpenTelemetry
themselves. ``create_tracer`` picks the OpenTelemetry-backed tracer when it is
enabled and installed and a no-op tracer otherwise; tests pass a
``MockTracer`` and assert on what it recorded.
"""

from __future__ import annotations

import contextlib
from collections.abc import Generator, Mapping
from contextlib import AbstractContextManager
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from eventprojector.observability.tracing import OTEL_AVAILABLE


@runtime_checkable
class Tracer(Protocol):
    """Creates spans around projection work."""

    def span(
        self,
        name: str,
        attributes: Mapping[str, Any] | None = None,
    ) -> AbstractContextManager[Any]: ...

    @property
    def enabled(self) -> bool:
        """True when spans are actually exported."""
        ...


class NullTracer:
    """Tracer used when tracing is disabled or OpenTelemetry is missing."""

    @contextlib.contextmanager
    def span(
        self,
        name: str,
        attributes: Mapping[str, Any] | None = None,
    ) -> Generator[None, None, None]:
        yield None

    @property
    def enabled(self) -> bool:
        return False


class OpenTelemetryTracer:
    """
    Tracer backed by the globally configured OpenTelemetry provider.

    Attributes whose value is None are left off the span, since OpenTelemetry
    only accepts primitive values and sequences of them.

    Raises:
        ImportError: If OpenTelemetry is not installed
    """

    def __init__(self, tracer_name: str) -> None:
        from opentelemetry import trace

        self._tracer = trace.get_tracer(tracer_name)

    def span(
        self,
        name: str,
        attributes: Mapping[str, Any] | None = None,
    ) -> AbstractContextManager[Any]:
        return self._tracer.start_as_current_span(
            name,
            attributes={k: v for k, v in (attributes or {}).items() if v is not None},
        )

    @property
    def enabled(self) -> bool:
        return True


@dataclass
class RecordedSpan:
    """A span captured by MockTracer."""

    name: str
    attributes: dict[str, Any] = field(default_factory=dict)
    error: BaseException | None = None


class MockTracer:
    """
    Tracer that records every span, including the exception that ended it.

    Example:
        >>> tracer = MockTracer()
        >>> await Projector(projection, tracer=tracer).project(conn, event)
        >>> tracer.span_names
        ['eventprojector.projector.project', 'eventprojector.projector.handler']
    """

    def __init__(self) -> None:
        self.spans: list[RecordedSpan] = []

    @contextlib.contextmanager
    def span(
        self,
        name: str,
        attributes: Mapping[str, Any] | None = None,
    ) -> Generator[RecordedSpan, None, None]:
        recorded = RecordedSpan(name, dict(attributes or {}))
        self.spans.append(recorded)
        try:
            yield recorded
        except BaseException as e:
            recorded.error = e
            raise

    @property
    def enabled(self) -> bool:
        return True

    @property
    def span_names(self) -> list[str]:
        return [s.name for s in self.spans]

    @property
    def failed_spans(self) -> list[RecordedSpan]:
        """Spans whose body raised."""
        return [s for s in self.spans if s.error is not None]

    def clear(self) -> None:
        self.spans.clear()


def create_tracer(name: str, enable_tracing: bool = True) -> Tracer:
    """
    Return an OpenTelemetryTracer when enabled and installed, else a NullTracer.
    """
    if enable_tracing and OTEL_AVAILABLE:
        return OpenTelemetryTracer(name)
    return NullTracer()


__all__ = [
    "MockTracer",
    "NullTracer",
    "OpenTelemetryTracer",
    "RecordedSpan",
    "Tracer",
    "create_tracer",
]
