"""
Fake read-model connections for tests.

Handlers receive the connection untouched, so a plain object that records
what handlers did is enough to observe ordering and side effects.
"""

from __future__ import annotations

import asyncio
from typing import Any


class RecordingConnection:
    """
    Connection that records calls made by handlers.

    Attributes:
        calls: (label, event) pairs in the order handlers recorded them
    """

    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []

    def record(self, label: str, event: Any = None) -> None:
        self.calls.append((label, event))

    async def record_async(self, label: str, event: Any = None, delay: float = 0) -> None:
        if delay:
            await asyncio.sleep(delay)
        self.calls.append((label, event))

    @property
    def labels(self) -> list[str]:
        return [label for label, _ in self.calls]
