"""Text recognition handlers.

``nlp.recognize`` reports what the text means. ``nlp.route`` is the bridge
between raw text and the handlers that do the work: it never does the work
itself, it drops a follow-up envelope for the recognized intent on the queue.
"""

from __future__ import annotations

import asyncio
from typing import Any

from intentbus.bus.events import ROUTE_PRIORITY, Envelope, HandlerResult
from intentbus.bus.queue import PriorityQueue
from intentbus.handlers.base import IntentHandler, get_str
from intentbus.nl.recognizer import TextRecognizer

_TEXT_REQUIRED = "payload.text (string) required"


class NlpRecognizeHandler(IntentHandler):
    name = "nlp.recognize"

    def __init__(self, recognizer: TextRecognizer) -> None:
        self._recognizer = recognizer

    async def handle(
        self, payload: dict[str, Any], correlation_id: str, cancel: asyncio.Event
    ) -> HandlerResult:
        text = get_str(payload, "text")
        if text is None:
            return HandlerResult.fail("BAD_INPUT", _TEXT_REQUIRED)
        return HandlerResult.success(self._recognizer.recognize(text).to_dict())


class NlpRouteHandler(IntentHandler):
    name = "nlp.route"

    def __init__(
        self,
        recognizer: TextRecognizer,
        queue: PriorityQueue,
        priority: int = ROUTE_PRIORITY,
    ) -> None:
        self._recognizer = recognizer
        self._queue = queue
        self._priority = priority

    async def handle(
        self, payload: dict[str, Any], correlation_id: str, cancel: asyncio.Event
    ) -> HandlerResult:
        text = get_str(payload, "text")
        if text is None:
            return HandlerResult.fail("BAD_INPUT", _TEXT_REQUIRED)

        rec = self._recognizer.recognize(text)
        self._queue.enqueue(
            Envelope.create(
                intent=rec.intent,
                payload={**rec.slots, "text": text},
                correlation_id=correlation_id,
                priority=self._priority,
            )
        )
        return HandlerResult.success({
            "recognized": rec.intent,
            "score": rec.score,
            "domain": rec.domain,
            "slots": dict(rec.slots),
            "routed": rec.intent,
        })
