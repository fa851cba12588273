"""Dispatch loop: drain the priority queue and hand each envelope to its handler.

The loop polls. When the queue is empty it sleeps for a short interval
(woken early only by :meth:`Dispatcher.stop`) instead of blocking on a
condition. One envelope is handled at a time, including any awaited I/O.
"""

from __future__ import annotations

import asyncio
import enum
import json
from typing import Any

from loguru import logger

from intentbus.bus.events import Envelope, HandlerResult
from intentbus.bus.queue import PriorityQueue
from intentbus.handlers.registry import HandlerRegistry

_SUMMARY_LIMIT = 300


class DispatchState(str, enum.Enum):
    IDLE = "idle"
    DISPATCHING = "dispatching"
    STOPPED = "stopped"


def _summarize(data: Any) -> str:
    try:
        text = json.dumps(data, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        text = repr(data)
    if len(text) > _SUMMARY_LIMIT:
        text = text[:_SUMMARY_LIMIT] + "…"
    return text


class Dispatcher:
    def __init__(
        self,
        queue: PriorityQueue,
        registry: HandlerRegistry,
        poll_seconds: float = 0.015,
    ) -> None:
        self._queue = queue
        self._registry = registry
        self._poll = poll_seconds
        self._stop = asyncio.Event()
        self._state = DispatchState.IDLE
        self.processed = 0
        self.failed = 0
        self.dropped = 0

    @property
    def state(self) -> DispatchState:
        return self._state

    @property
    def stopping(self) -> bool:
        return self._stop.is_set()

    async def run_forever(self) -> None:
        logger.info("Dispatcher started")
        self._state = DispatchState.IDLE
        try:
            while not self._stop.is_set():
                if await self.run_once():
                    continue
                try:
                    await asyncio.wait_for(self._stop.wait(), timeout=self._poll)
                except asyncio.TimeoutError:
                    pass
        finally:
            self._state = DispatchState.STOPPED
            logger.info(
                f"Dispatcher stopped (processed={self.processed} "
                f"failed={self.failed} dropped={self.dropped})"
            )

    async def run_once(self) -> bool:
        """Dequeue and handle at most one envelope. Returns ``False`` when idle."""
        env = self._queue.try_dequeue()
        if env is None:
            return False
        self._state = DispatchState.DISPATCHING
        try:
            await self._dispatch(env)
        finally:
            if self._state is DispatchState.DISPATCHING:
                self._state = DispatchState.IDLE
        return True

    async def drain(self) -> int:
        """Handle envelopes until the queue is empty; follow-ups included."""
        handled = 0
        while not self._stop.is_set() and await self.run_once():
            handled += 1
        return handled

    def stop(self) -> None:
        self._stop.set()

    async def _dispatch(self, env: Envelope) -> None:
        handler = self._registry.resolve(env.intent)
        if handler is None:
            self.dropped += 1
            logger.warning(f"No handler for intent={env.intent} corr={env.correlation_id}")
            return

        try:
            result = await handler.handle(env.payload, env.correlation_id, self._stop)
        except Exception:
            self.failed += 1
            logger.exception(
                f"Unhandled handler error intent={env.intent} corr={env.correlation_id}"
            )
            return

        if not isinstance(result, HandlerResult):
            self.failed += 1
            logger.error(
                f"Handler returned {type(result).__name__}, not HandlerResult "
                f"intent={env.intent} corr={env.correlation_id}"
            )
            return

        self.processed += 1
        if result.ok:
            logger.info(
                f"OK intent={env.intent} corr={env.correlation_id} "
                f"data={_summarize(result.data)}"
            )
        else:
            self.failed += 1
            logger.warning(
                f"ERR intent={env.intent} corr={env.correlation_id} "
                f"code={result.error_code} msg={result.message}"
            )
