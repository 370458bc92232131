"""
Configuration for projectors.

This module provides:
- ProjectorConfig: How a Projector schedules handlers and treats unmatched events
- UnregisteredEventHandling: Type alias for the unmatched event policies
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, get_args

# How to treat events with no registered handler
UnregisteredEventHandling = Literal["ignore", "warn", "error"]


@dataclass(frozen=True)
class ProjectorConfig:
    """
    Configuration for a projector.

    Attributes:
        unregistered_event_handling: What to do with events no handler is
            registered for
            - "ignore": Skip silently (default)
            - "warn": Log a warning and skip
            - "error": Raise UnhandledEventError
        concurrent_handlers: Run the handlers matched for one event
            concurrently instead of one after another. Sequential execution
            (default) preserves registration order.
        enable_tracing: Wrap projection calls and handler invocations in
            tracing spans when OpenTelemetry is available

    Example:
        >>> config = ProjectorConfig(unregistered_event_handling="warn")
        >>> projector = Projector(projection, config=config)
    """

    unregistered_event_handling: UnregisteredEventHandling = "ignore"
    concurrent_handlers: bool = False
    enable_tracing: bool = True

    def __post_init__(self) -> None:
        """Validate configuration values."""
        allowed = get_args(UnregisteredEventHandling)
        if self.unregistered_event_handling not in allowed:
            raise ValueError(
                f"unregistered_event_handling must be one of {', '.join(allowed)}, "
                f"got {self.unregistered_event_handling!r}. "
                "Use 'ignore' (default) to skip events without handlers."
            )

        if not isinstance(self.concurrent_handlers, bool):
            raise ValueError(
                f"concurrent_handlers must be a bool, got {self.concurrent_handlers!r}. "
                "Use False (default) to run handlers in registration order."
            )

        if not isinstance(self.enable_tracing, bool):
            raise ValueError(
                f"enable_tracing must be a bool, got {self.enable_tracing!r}."
            )


__all__ = [
    "ProjectorConfig",
    "UnregisteredEventHandling",
]
