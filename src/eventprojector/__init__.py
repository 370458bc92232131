"""
eventprojector - Projection building blocks for event-sourced read models.

This library provides:
- ProjectionBuilder: Immutable fluent builder of projections
- Projection: Ordered handler collection and declarative base class
- Handler normalization for sync, async and cancellable async handlers
- Exact run-time type handler lookup
- Projector and SqlProjector reference dispatchers
- Cooperative cancellation tokens
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("eventprojector")
except PackageNotFoundError:
    # Package not installed (running from source without install)
    __version__ = "0.0.0.dev0"

# Cancellation
from eventprojector.cancellation import CancellationToken, CancellationTokenSource

# Exceptions
from eventprojector.exceptions import (
    EventProjectorError,
    HandlerSignatureError,
    InvalidArgumentError,
    OperationCancelledError,
    UnhandledEventError,
)

# Handlers
from eventprojector.handlers import (
    CanonicalHandlerFunc,
    HandlerShape,
    ProjectionHandler,
    handles,
    normalize_handler,
)

# Projections
from eventprojector.projections import (
    ExactTypeResolver,
    Projection,
    ProjectionBuilder,
    Projector,
    ProjectorConfig,
)

# Protocols
from eventprojector.protocols import (
    AnyHandler,
    AsyncHandler,
    CancellableAsyncHandler,
    CanonicalHandler,
    ProjectionHandlerSource,
    SyncHandler,
)

# SQL
from eventprojector.sql import SqlProjectionBuilder, SqlProjector, SqlStatement

__all__ = [
    "__version__",
    # Cancellation
    "CancellationToken",
    "CancellationTokenSource",
    # Exceptions
    "EventProjectorError",
    "HandlerSignatureError",
    "InvalidArgumentError",
    "OperationCancelledError",
    "UnhandledEventError",
    # Handlers
    "CanonicalHandlerFunc",
    "HandlerShape",
    "ProjectionHandler",
    "handles",
    "normalize_handler",
    # Projections
    "ExactTypeResolver",
    "Projection",
    "ProjectionBuilder",
    "Projector",
    "ProjectorConfig",
    # Protocols
    "AnyHandler",
    "AsyncHandler",
    "CancellableAsyncHandler",
    "CanonicalHandler",
    "ProjectionHandlerSource",
    "SyncHandler",
    # SQL
    "SqlProjectionBuilder",
    "SqlProjector",
    "SqlStatement",
]
