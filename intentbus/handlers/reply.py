"""Reply handler: answer an intent with a canned or computed text.

One instance is registered per reply intent. The reply is delivered by
enqueueing ``ui.out.say`` so the UI/voice side stays a separate hop.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import datetime
from typing import Any

from loguru import logger

from intentbus.bus.events import DEFAULT_PRIORITY, Envelope, HandlerResult
from intentbus.bus.queue import PriorityQueue
from intentbus.handlers.base import IntentHandler, get_str
from intentbus.responses.keys import candidates_for
from intentbus.responses.store import ResponseStore

SAY_INTENT = "ui.out.say"
FALLBACK_REPLY = "I'm not sure how to respond to that."


def _print_failed(payload: dict[str, Any], now: datetime) -> str:
    detail = (get_str(payload, "stderr") or "").strip()
    return f"The label didn't print: {detail}" if detail else "The label didn't print."


_DYNAMIC: dict[str, Callable[[dict[str, Any], datetime], str]] = {
    "chat.greet": lambda payload, now: "Hey! What's up?",
    "sys.time.date": lambda payload, now: f"Today is {now:%Y-%m-%d}.",
    "sys.time.dayofweek": lambda payload, now: f"It's {now:%A}.",
    "zebra.print.success": lambda payload, now: "Label printed.",
    "zebra.print.failed": _print_failed,
}


class ReplyHandler(IntentHandler):
    def __init__(
        self,
        intent: str,
        responses: ResponseStore,
        queue: PriorityQueue,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._name = intent
        self._responses = responses
        self._queue = queue
        self._clock = clock

    @property
    def name(self) -> str:
        return self._name

    def compose(self, payload: dict[str, Any]) -> str:
        for key in candidates_for(self._name):
            reply = self._responses.pick(key)
            if reply and reply.strip():
                return reply
        dynamic = _DYNAMIC.get(self._name.lower())
        if dynamic is not None:
            return dynamic(payload, self._clock())
        return FALLBACK_REPLY

    async def handle(
        self, payload: dict[str, Any], correlation_id: str, cancel: asyncio.Event
    ) -> HandlerResult:
        reply = self.compose(payload)
        self._queue.enqueue(
            Envelope.create(SAY_INTENT, {"text": reply}, correlation_id, DEFAULT_PRIORITY)
        )
        logger.info(f"Reply intent={self._name} corr={correlation_id} → {reply}")
        return HandlerResult.success({"intent": self._name, "reply": reply})
