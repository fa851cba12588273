"""Base class for intent handlers."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Any

from intentbus.bus.events import HandlerResult


class IntentHandler(ABC):
    """Consumes the payload of one named intent.

    A handler returns :class:`HandlerResult` for both success and expected
    failures (bad input, device errors). Raised exceptions are treated as
    faults by the dispatcher. Follow-up work is emitted only by enqueueing
    new envelopes on the shared queue.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Intent name this handler consumes, e.g. ``nlp.route``."""

    @abstractmethod
    async def handle(
        self,
        payload: dict[str, Any],
        correlation_id: str,
        cancel: asyncio.Event,
    ) -> HandlerResult:
        """Handle one envelope's payload.

        *cancel* is set when the dispatcher is shutting down; long-running
        handlers should check it and return early.
        """


def get_str(payload: dict[str, Any], key: str) -> str | None:
    """Return ``payload[key]`` if it is a string, else ``None``."""
    value = payload.get(key)
    return value if isinstance(value, str) else None


def get_int(payload: dict[str, Any], key: str) -> int | None:
    """Return ``payload[key]`` if it is an integer (bools excluded), else ``None``."""
    value = payload.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value
