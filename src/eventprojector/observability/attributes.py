"""
Standard span attributes for eventprojector.

Attribute constants used by the projector components for consistent span
naming.
"""

# =============================================================================
# Event Attributes
# =============================================================================

ATTR_EVENT_TYPE = "eventprojector.event.type"
"""Type name of the event (e.g., 'OrderPlaced')."""

ATTR_EVENT_COUNT = "eventprojector.event.count"
"""Number of events in an operation (integer)."""

# =============================================================================
# Projection Attributes
# =============================================================================

ATTR_PROJECTION_NAME = "eventprojector.projection.name"
"""Name of the projection whose handlers are running (string)."""

ATTR_HANDLER_NAME = "eventprojector.handler.name"
"""Name of the handler being invoked (string)."""

ATTR_HANDLER_COUNT = "eventprojector.handler.count"
"""Number of handlers matched for an event (integer)."""

ATTR_HANDLER_INDEX = "eventprojector.handler.index"
"""Position of the handler among the matched handlers (integer)."""

# =============================================================================
# Database Attributes
# =============================================================================

ATTR_DB_SYSTEM = "db.system"
"""SQLAlchemy dialect name of the read-model database (e.g., 'sqlite')."""

__all__ = [
    "ATTR_DB_SYSTEM",
    "ATTR_EVENT_TYPE",
    "ATTR_EVENT_COUNT",
    "ATTR_PROJECTION_NAME",
    "ATTR_HANDLER_NAME",
    "ATTR_HANDLER_COUNT",
    "ATTR_HANDLER_INDEX",
]
