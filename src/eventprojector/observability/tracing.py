"""
Optional OpenTelemetry detection and the ``@traced`` method decorator.

OpenTelemetry ships in the ``telemetry`` extra; ``OTEL_AVAILABLE`` is the one
flag the rest of the package consults.
"""

from __future__ import annotations

import functools
import inspect
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

try:
    from opentelemetry import trace  # noqa: F401

    OTEL_AVAILABLE = True
except ImportError:
    OTEL_AVAILABLE = False

R = TypeVar("R")

SpanAttributes = Callable[[Any], dict[str, Any]]


def traced(
    name: str,
    attributes: SpanAttributes | None = None,
) -> Callable[[Callable[..., Awaitable[R]]], Callable[..., Awaitable[R]]]:
    """
    Run a coroutine method inside a span of the instance's tracer.

    The instance must expose ``_tracer`` and ``_enable_tracing``; when tracing
    is disabled the method is awaited directly.

    Args:
        name: Span name (e.g., "eventprojector.sql_projector.project")
        attributes: Called with the instance to build the span attributes,
            so they can name the projection or database being written to.

    Raises:
        TypeError: If applied to a function that is not a coroutine function
    """

    def decorator(func: Callable[..., Awaitable[R]]) -> Callable[..., Awaitable[R]]:
        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"@traced requires a coroutine function, got {func.__qualname__}")

        @functools.wraps(func)
        async def wrapper(self: Any, *args: Any, **kwargs: Any) -> R:
            tracer = getattr(self, "_tracer", None)
            if tracer is None or not getattr(self, "_enable_tracing", False):
                return await func(self, *args, **kwargs)

            with tracer.span(name, attributes(self) if attributes else {}):
                return await func(self, *args, **kwargs)

        return wrapper

    return decorator


__all__ = [
    "OTEL_AVAILABLE",
    "SpanAttributes",
    "traced",
]
