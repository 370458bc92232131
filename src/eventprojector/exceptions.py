"""Library exceptions for the eventprojector package."""


class EventProjectorError(Exception):
    """Base exception for eventprojector library."""

    pass


class InvalidArgumentError(EventProjectorError, ValueError):
    """
    Raised when a registration receives an absent or unusable argument.

    This is raised synchronously at registration time (before any event
    flows through a projection), e.g. when a handler is None or an
    extension source projection is None.

    Attributes:
        argument: Name of the offending argument
    """

    def __init__(self, argument: str, message: str | None = None) -> None:
        self.argument = argument
        super().__init__(message or f"Argument '{argument}' can not be None")


class HandlerSignatureError(InvalidArgumentError):
    """
    Raised when a handler's signature matches none of the accepted shapes.

    Accepted shapes are:
    - def handler(connection, event) -> None
    - async def handler(connection, event) -> None
    - async def handler(connection, event, token) -> None

    Attributes:
        handler_name: Descriptive name of the handler
        param_count: Number of positional parameters found (None if unknown)
    """

    def __init__(self, handler_name: str, param_count: int | None, reason: str = "") -> None:
        self.handler_name = handler_name
        self.param_count = param_count

        got = (
            f"Got: {param_count} positional parameter(s)"
            if param_count is not None
            else "Got: a callable whose signature can not be inspected"
        )
        message = (
            f"Handler '{handler_name}' has an invalid signature.\n\n"
            f"Expected one of:\n"
            f"  def {handler_name}(connection, event) -> None\n"
            f"  async def {handler_name}(connection, event) -> None\n"
            f"  async def {handler_name}(connection, event, token) -> None\n\n"
            f"{got}\n\n"
            f"Hint: {reason or 'pass shape=HandlerShape... to register it explicitly.'}"
        )

        super().__init__("handler", message)


class UnhandledEventError(EventProjectorError):
    """
    Raised when an event has no registered handler and strict mode is enabled.

    Only the Projector raises this, when configured with
    unregistered_event_handling="error". Handler lookup itself never fails.

    Attributes:
        event_type: The name of the event type that wasn't handled
        projection_name: Name of the projection that was searched
        available_handlers: Event type names that have handlers
    """

    def __init__(
        self,
        event_type: str,
        projection_name: str,
        available_handlers: list[str],
    ) -> None:
        self.event_type = event_type
        self.projection_name = projection_name
        self.available_handlers = available_handlers
        handlers_str = ", ".join(available_handlers) if available_handlers else "none"
        super().__init__(
            f"No handler registered for event type '{event_type}' "
            f"in {projection_name}. "
            f"Available handlers: {handlers_str}. "
            f"Register a handler for {event_type} or set "
            f"unregistered_event_handling='ignore' or 'warn'."
        )


class OperationCancelledError(EventProjectorError):
    """Raised when work observes a cancellation request on its token."""

    def __init__(self, reason: str | None = None) -> None:
        self.reason = reason
        super().__init__(f"Operation was cancelled: {reason}" if reason else "Operation was cancelled")


__all__ = [
    "EventProjectorError",
    "InvalidArgumentError",
    "HandlerSignatureError",
    "UnhandledEventError",
    "OperationCancelledError",
]
