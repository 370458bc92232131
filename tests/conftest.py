"""
Shared pytest fixtures for the eventprojector library tests.

This module provides:
- Event fixtures (message, order_placed)
- Connection fixtures (connection)
- Cancellation fixtures (token_source)
- Tracing fixtures (mock_tracer)
- SQLite availability checks and markers
"""

from __future__ import annotations

import pytest

from eventprojector.cancellation import CancellationTokenSource
from eventprojector.observability import MockTracer
from tests.fixtures import Message, OrderPlaced, RecordingConnection

# ============================================================================
# SQLite Availability Check
# ============================================================================

AIOSQLITE_AVAILABLE = False
try:
    import aiosqlite  # noqa: F401

    AIOSQLITE_AVAILABLE = True
except ImportError:
    aiosqlite = None  # type: ignore[assignment]


# ============================================================================
# Pytest Configuration
# ============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for tests."""
    config.addinivalue_line("markers", "sqlite: marks tests that require SQLite (aiosqlite)")


# ============================================================================
# Skip Condition
# ============================================================================

skip_if_no_aiosqlite = pytest.mark.skipif(not AIOSQLITE_AVAILABLE, reason="aiosqlite not installed")


# =============================================================================
# Sample Data Fixtures
# =============================================================================


@pytest.fixture
def message() -> Message:
    """Provide a Message event."""
    return Message(text="hello")


@pytest.fixture
def order_placed() -> OrderPlaced:
    """Provide an OrderPlaced event with a random order id."""
    return OrderPlaced()


@pytest.fixture
def connection() -> RecordingConnection:
    """
    Provide a call-recording connection.

    Returns:
        A fresh RecordingConnection with no recorded calls.
    """
    return RecordingConnection()


@pytest.fixture
def token_source() -> CancellationTokenSource:
    """Provide a fresh, uncancelled CancellationTokenSource."""
    return CancellationTokenSource()


@pytest.fixture
def mock_tracer() -> MockTracer:
    """Provide a MockTracer recording spans."""
    return MockTracer()
