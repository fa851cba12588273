"""Handler registry: canonical intent name → handler instance."""

from __future__ import annotations

from collections.abc import Iterable

from loguru import logger

from intentbus.errors import DuplicateHandlerError
from intentbus.handlers.base import IntentHandler


def _key(name: str) -> str:
    return name.strip().casefold()


class HandlerRegistry:
    """Case-insensitive lookup of handlers by intent name.

    The internal map is copy-on-write: every registration publishes a fresh
    dict, so a concurrent ``resolve`` sees either the old or the new map.
    Registering a second handler under a taken name raises
    :class:`DuplicateHandlerError` unless ``replace=True``.
    """

    def __init__(self, handlers: Iterable[IntentHandler] = ()) -> None:
        self._map: dict[str, IntentHandler] = {}
        for handler in handlers:
            self.register(handler)

    def register(self, handler: IntentHandler, replace: bool = False) -> None:
        key = _key(handler.name)
        if not key:
            raise ValueError("handler name must not be empty")
        if key in self._map:
            if not replace:
                raise DuplicateHandlerError(handler.name)
            logger.info(f"Replacing handler for intent={handler.name}")
        updated = dict(self._map)
        updated[key] = handler
        self._map = updated

    def resolve(self, intent: str) -> IntentHandler | None:
        return self._map.get(_key(intent))

    def names(self) -> list[str]:
        """Registered intent names, in registration order."""
        return [h.name for h in self._map.values()]

    def __contains__(self, intent: object) -> bool:
        return isinstance(intent, str) and _key(intent) in self._map

    def __len__(self) -> int:
        return len(self._map)
