"""
Shared test fixtures for the eventprojector library.

Usage:
    from tests.fixtures import (
        Message,
        Other,
        OrderPlaced,
        OrderShipped,
        OrderCancelled,
        PriorityOrderPlaced,
        RecordingConnection,
    )
"""

from tests.fixtures.connections import RecordingConnection
from tests.fixtures.events import (
    Message,
    OrderCancelled,
    OrderPlaced,
    OrderShipped,
    Other,
    PriorityOrderPlaced,
)

__all__ = [
    "Message",
    "Other",
    "OrderPlaced",
    "OrderShipped",
    "OrderCancelled",
    "PriorityOrderPlaced",
    "RecordingConnection",
]
