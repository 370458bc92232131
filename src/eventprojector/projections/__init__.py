"""
Projection building and dispatch.

This package provides:
- Projection: Ordered handler collection, usable as a declarative base class
- ProjectionBuilder: Immutable fluent builder producing projections
- ExactTypeResolver: Exact run-time type handler lookup
- Projector: Reference dispatcher running handlers for arriving events
- ProjectorConfig: Projector configuration
"""

from eventprojector.projections.base import Projection
from eventprojector.projections.builder import ProjectionBuilder
from eventprojector.projections.config import ProjectorConfig, UnregisteredEventHandling
from eventprojector.projections.projector import HandlerResolver, Projector
from eventprojector.projections.resolve import ExactTypeResolver, resolve_exact_type

__all__ = [
    "Projection",
    "ProjectionBuilder",
    "ExactTypeResolver",
    "resolve_exact_type",
    "Projector",
    "HandlerResolver",
    "ProjectorConfig",
    "UnregisteredEventHandling",
]
