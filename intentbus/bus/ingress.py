"""Ingress: validate a request, build its envelope and put it on the queue.

Unknown intents are rejected here, synchronously, so callers get an error
instead of having their work silently dropped later by the dispatcher.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from loguru import logger

from intentbus.bus.events import DEFAULT_PRIORITY, Envelope, clamp_priority
from intentbus.bus.queue import PriorityQueue
from intentbus.errors import BadRequestError, UnknownIntentError

if TYPE_CHECKING:
    from intentbus.handlers.registry import HandlerRegistry


class Ingress:
    def __init__(
        self,
        queue: PriorityQueue,
        registry: HandlerRegistry,
        default_priority: int = DEFAULT_PRIORITY,
    ) -> None:
        self._queue = queue
        self._registry = registry
        self._default_priority = clamp_priority(default_priority)

    def submit(
        self,
        intent: str | None,
        payload: Mapping[str, Any] | None = None,
        priority: int | None = None,
        correlation_id: str | None = None,
    ) -> Envelope:
        """Build an envelope for *intent* and enqueue it.

        Raises:
            BadRequestError: intent missing/blank or payload not a mapping.
            UnknownIntentError: no handler registered for the intent.
        """
        name = (intent or "").strip()
        if not name:
            raise BadRequestError("intent required")
        if self._registry.resolve(name) is None:
            raise UnknownIntentError(name)
        if payload is not None and not isinstance(payload, Mapping):
            raise BadRequestError("payload must be an object")

        corr = (correlation_id or "").strip() or None
        env = Envelope.create(
            intent=name,
            payload=dict(payload or {}),
            correlation_id=corr,
            priority=clamp_priority(priority, self._default_priority),
        )
        self._queue.enqueue(env)
        logger.debug(
            f"Accepted intent={env.intent} corr={env.correlation_id} "
            f"priority={env.priority} id={env.id}"
        )
        return env
