"""
Event handler decorators.

This module contains the @handles decorator for declarative projections.
Methods decorated with @handles on a Projection subclass are discovered when
the projection is constructed and registered for the given event type, in
class definition order.

Example:
    >>> from eventprojector.handlers import handles
    >>> from eventprojector.projections import Projection
    >>>
    >>> class OrderProjection(Projection):
    ...     @handles(OrderPlaced)
    ...     async def _on_order_placed(self, conn, event: OrderPlaced) -> None:
    ...         await conn.execute(...)
"""

from collections.abc import Callable
from typing import Any, TypeVar

from eventprojector.exceptions import InvalidArgumentError

# Type variable for handler functions - preserves the exact type of the decorated function
F = TypeVar("F", bound=Callable[..., Any])

_HANDLES_ATTR = "_handles_event_types"


def handles(event_type: type) -> Callable[[F], F]:
    """
    Decorator to mark a method as a projection handler for an exact event type.

    The handler is later selected only for events whose run-time type is
    exactly event_type; subclasses of event_type do not match. Stacking the
    decorator registers the method once per event type, outermost last.

    Args:
        event_type: The event class this handler processes

    Returns:
        A decorator function that marks the handler and preserves the original function

    Raises:
        InvalidArgumentError: If event_type is None or not a class

    Handler Signatures:
        Any of the accepted shapes, with self first:

            def handler(self, conn, event) -> None
            async def handler(self, conn, event) -> None
            async def handler(self, conn, event, token) -> None

    Example:
        >>> class OrderProjection(Projection):
        ...     @handles(OrderPlaced)
        ...     @handles(OrderAmended)
        ...     async def _upsert_order(self, conn, event) -> None:
        ...         await conn.execute(...)
    """
    if event_type is None:
        raise InvalidArgumentError("event_type")
    if not isinstance(event_type, type):
        raise InvalidArgumentError(
            "event_type",
            f"@handles expects an event class, got {event_type!r}",
        )

    def decorator(func: F) -> F:
        # Mark the underlying function when stacked above @staticmethod or @classmethod
        target = getattr(func, "__func__", func)
        existing: tuple[type, ...] = getattr(target, _HANDLES_ATTR, ())
        setattr(target, _HANDLES_ATTR, (*existing, event_type))
        return func

    return decorator


def get_handled_event_types(func: Callable[..., Any]) -> tuple[type, ...]:
    """
    Get the event types handled by a decorated function.

    Args:
        func: A function potentially decorated with @handles

    Returns:
        Event types in decoration order (innermost first), empty if undecorated

    Example:
        >>> @handles(OrderPlaced)
        ... async def my_handler(self, conn, event): pass
        >>> get_handled_event_types(my_handler)
        (<class 'OrderPlaced'>,)
    """
    return tuple(getattr(getattr(func, "__func__", func), _HANDLES_ATTR, ()))


def is_event_handler(func: Callable[..., Any]) -> bool:
    """
    Check if a function is decorated as an event handler.

    Args:
        func: A function to check

    Returns:
        True if the function is decorated with @handles, False otherwise
    """
    return bool(getattr(func, _HANDLES_ATTR, ()))


__all__ = [
    "handles",
    "get_handled_event_types",
    "is_event_handler",
]
