"""
Handler adapter for normalizing projection handlers.

Projection handlers can be registered in three shapes:
- Synchronous actions: def handler(connection, event) -> None
- Async functions: async def handler(connection, event) -> None
- Cancellable async functions: async def handler(connection, event, token) -> None

This module collapses all of them into the single canonical shape
(connection, event, token) -> Awaitable, so projections and dispatchers
never have to branch on the shape a handler was registered with.
"""

import functools
import inspect
import logging
from collections.abc import Awaitable, Callable, Generator
from enum import Enum
from typing import Any

from eventprojector.cancellation import CancellationToken
from eventprojector.exceptions import HandlerSignatureError, InvalidArgumentError
from eventprojector.protocols import AnyHandler

logger = logging.getLogger(__name__)

# Type for the canonical handler function
CanonicalHandlerFunc = Callable[[Any, Any, CancellationToken], Awaitable[Any]]


class HandlerShape(Enum):
    """
    The accepted handler shapes.

    Values:
        SYNC: (connection, event) -> None, run immediately on invocation
        ASYNC: async (connection, event) -> None, token is not forwarded
        ASYNC_CANCELLABLE: async (connection, event, token) -> None, already canonical
    """

    SYNC = "sync"
    ASYNC = "async"
    ASYNC_CANCELLABLE = "async_cancellable"


class CompletedAwaitable:
    """
    An awaitable that is already complete.

    Returned by synchronous handlers once normalized; awaiting it yields the
    action's return value without suspending.
    """

    __slots__ = ("_result",)

    def __init__(self, result: Any = None) -> None:
        self._result = result

    @property
    def result(self) -> Any:
        return self._result

    def __await__(self) -> Generator[Any, None, Any]:
        return self._result
        yield  # makes this a generator

    def __repr__(self) -> str:
        return f"CompletedAwaitable({self._result!r})"


def get_handler_name(handler: Any) -> str:
    """
    Get a descriptive name for a handler for logging and debugging.

    Args:
        handler: Any handler object (function, bound method, lambda, callable instance)

    Returns:
        String name for the handler
    """
    qualname = getattr(handler, "__qualname__", None)
    if isinstance(qualname, str):
        return qualname
    name = getattr(handler, "__name__", None)
    if isinstance(name, str):
        return name
    if isinstance(handler, functools.partial):
        return get_handler_name(handler.func)
    if hasattr(handler, "__call__"):
        return str(handler.__class__.__name__)
    return repr(handler)


def _is_async_callable(handler: Any) -> bool:
    if inspect.iscoroutinefunction(handler):
        return True
    call = getattr(handler, "__call__", None)
    return call is not None and inspect.iscoroutinefunction(call)


def _positional_arity(handler: Any) -> tuple[int, int | None]:
    """
    Count the positional parameters a handler accepts.

    Returns:
        (required, maximum) where maximum is None for *args

    Raises:
        HandlerSignatureError: If the signature can't be inspected or has
            required keyword-only parameters
    """
    name = get_handler_name(handler)
    try:
        sig = inspect.signature(handler)
    except (ValueError, TypeError) as e:
        raise HandlerSignatureError(name, None) from e

    required = 0
    maximum: int | None = 0
    for param in sig.parameters.values():
        if param.kind in (param.POSITIONAL_ONLY, param.POSITIONAL_OR_KEYWORD):
            if maximum is not None:
                maximum += 1
            if param.default is param.empty:
                required += 1
        elif param.kind is param.VAR_POSITIONAL:
            maximum = None
        elif param.kind is param.KEYWORD_ONLY and param.default is param.empty:
            raise HandlerSignatureError(
                name,
                required,
                f"keyword-only parameter '{param.name}' must have a default value.",
            )
    return required, maximum


def detect_handler_shape(handler: Callable[..., Any]) -> HandlerShape:
    """
    Detect which of the accepted shapes a handler has.

    A handler that accepts three positional arguments (or *args) receives the
    cancellation token. A handler that accepts exactly two is ASYNC when it is
    a coroutine function and SYNC otherwise.

    Args:
        handler: The handler to inspect

    Returns:
        The detected HandlerShape

    Raises:
        HandlerSignatureError: If the handler's arity matches no shape
    """
    required, maximum = _positional_arity(handler)

    if required > 3:
        raise HandlerSignatureError(
            get_handler_name(handler),
            required,
            "a handler accepts at most 3 arguments (connection, event, token).",
        )
    if maximum is None or maximum >= 3:
        return HandlerShape.ASYNC_CANCELLABLE
    if maximum == 2:
        return HandlerShape.ASYNC if _is_async_callable(handler) else HandlerShape.SYNC

    raise HandlerSignatureError(
        get_handler_name(handler),
        maximum,
        "ensure your handler accepts both the connection and the event.",
    )


class HandlerAdapter:
    """
    Transparent wrapper presenting a handler in the canonical shape.

    Calling the adapter calls the original handler with the arguments its
    shape expects and returns its awaitable unchanged. A synchronous result
    is returned as an already completed awaitable; exceptions raised by the
    original propagate untouched.

    Adapters compare equal when they wrap the same original handler with the
    same shape, so registering one function through different routes yields
    equal records.

    Attributes:
        original: The original unwrapped handler
        shape: The shape the handler was registered with
        name: Descriptive name for logging
    """

    __slots__ = ("_original", "_shape", "_name")

    def __init__(self, handler: Callable[..., Any], shape: HandlerShape) -> None:
        self._original = handler
        self._shape = shape
        self._name = get_handler_name(handler)

    @property
    def original(self) -> Callable[..., Any]:
        """Get the original unwrapped handler."""
        return self._original

    @property
    def shape(self) -> HandlerShape:
        """Get the shape the handler was registered with."""
        return self._shape

    @property
    def name(self) -> str:
        """Get the handler's descriptive name."""
        return self._name

    def __call__(self, connection: Any, event: Any, token: CancellationToken) -> Awaitable[Any]:
        if self._shape is HandlerShape.ASYNC_CANCELLABLE:
            result = self._original(connection, event, token)
        else:
            result = self._original(connection, event)

        # Lambdas delegating to a coroutine return the awaitable itself
        if inspect.isawaitable(result):
            return result
        return CompletedAwaitable(result)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, HandlerAdapter):
            return self._shape is other._shape and self._original == other._original
        return NotImplemented

    def __hash__(self) -> int:
        try:
            return hash((self._original, self._shape))
        except TypeError:
            return hash((id(self._original), self._shape))

    def __repr__(self) -> str:
        return f"HandlerAdapter({self._name}, {self._shape.value})"


def normalize_handler(
    handler: AnyHandler | None,
    shape: HandlerShape | None = None,
) -> CanonicalHandlerFunc:
    """
    Normalize a handler to the canonical (connection, event, token) shape.

    The returned callable is a transparent wrapper: it has the same side
    effects, completion value and exceptions as the original handler.
    Normalization itself has no side effects.

    Args:
        handler: Handler in any accepted shape
        shape: Explicit shape, skipping signature inspection

    Returns:
        Canonical handler function

    Raises:
        InvalidArgumentError: If handler is None or not callable
        HandlerSignatureError: If shape is None and the handler matches no shape

    Example:
        >>> def on_created(conn, event):
        ...     conn.rows.append(event.id)
        >>> canonical = normalize_handler(on_created)
        >>> await canonical(conn, event, CancellationToken.none())
    """
    if handler is None:
        raise InvalidArgumentError("handler")
    if not callable(handler):
        raise InvalidArgumentError(
            "handler",
            f"Handler must be callable, got {type(handler).__name__}",
        )

    if shape is None:
        shape = detect_handler_shape(handler)

    if not isinstance(shape, HandlerShape):
        raise InvalidArgumentError("shape", f"Unknown handler shape: {shape!r}")

    # Cancellable coroutine functions are already canonical
    if shape is HandlerShape.ASYNC_CANCELLABLE and _is_async_callable(handler):
        return handler

    return HandlerAdapter(handler, shape)


__all__ = [
    "CanonicalHandlerFunc",
    "CompletedAwaitable",
    "HandlerAdapter",
    "HandlerShape",
    "detect_handler_shape",
    "get_handler_name",
    "normalize_handler",
]
