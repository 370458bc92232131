"""
Handler infrastructure for projections.

This module provides utilities for working with projection handlers:
- normalize_handler: Collapses sync/async/cancellable handlers into the canonical shape
- HandlerAdapter: Transparent canonical wrapper around a sync or async handler
- HandlerShape: The accepted handler shapes
- ProjectionHandler: Immutable (event type, canonical handler) record
- handles: Decorator for marking projection handler methods
- get_handled_event_types: Get event types from a decorated handler
- is_event_handler: Check if a function is a projection handler

Example:
    >>> from eventprojector.handlers import ProjectionHandler, normalize_handler
    >>>
    >>> def on_placed(conn, event):
    ...     conn.rows.append(event)
    >>>
    >>> record = ProjectionHandler.create(OrderPlaced, on_placed)
    >>> await record.invoke(conn, event)
"""

from eventprojector.handlers.adapter import (
    CanonicalHandlerFunc,
    CompletedAwaitable,
    HandlerAdapter,
    HandlerShape,
    detect_handler_shape,
    get_handler_name,
    normalize_handler,
)
from eventprojector.handlers.decorators import (
    get_handled_event_types,
    handles,
    is_event_handler,
)
from eventprojector.handlers.record import ProjectionHandler

__all__ = [
    "CanonicalHandlerFunc",
    "CompletedAwaitable",
    "HandlerAdapter",
    "HandlerShape",
    "ProjectionHandler",
    "detect_handler_shape",
    "get_handled_event_types",
    "get_handler_name",
    "handles",
    "is_event_handler",
    "normalize_handler",
]
