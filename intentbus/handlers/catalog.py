"""Explicit table of the intents this service handles.

Adding a handler means adding a row here; nothing is discovered at runtime.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from loguru import logger

from intentbus.bus.events import ROUTE_PRIORITY
from intentbus.bus.queue import PriorityQueue
from intentbus.handlers.base import IntentHandler
from intentbus.handlers.nlp import NlpRecognizeHandler, NlpRouteHandler
from intentbus.handlers.registry import HandlerRegistry
from intentbus.handlers.reply import ReplyHandler
from intentbus.handlers.system import ListAllFunctionsHandler, SysTimeNowHandler, UiSayLogHandler
from intentbus.handlers.zebra import FAILED_INTENT, SUCCESS_INTENT, ZebraPrintSimpleHandler
from intentbus.nl.engine import UNKNOWN_INTENT
from intentbus.nl.recognizer import TextRecognizer
from intentbus.responses.keys import REPLY_INTENTS
from intentbus.responses.store import ResponseStore


@dataclass
class HandlerContext:
    """Shared collaborators handed to every handler factory."""

    queue: PriorityQueue
    registry: HandlerRegistry
    recognizer: TextRecognizer
    responses: ResponseStore
    route_priority: int = ROUTE_PRIORITY
    printer_queue: str = "zebra1"


HandlerFactory = Callable[[HandlerContext], IntentHandler]


def _reply(intent: str) -> HandlerFactory:
    return lambda ctx: ReplyHandler(intent, ctx.responses, ctx.queue)


CATALOG: tuple[tuple[str, HandlerFactory], ...] = (
    ("nlp.recognize", lambda ctx: NlpRecognizeHandler(ctx.recognizer)),
    ("nlp.route", lambda ctx: NlpRouteHandler(ctx.recognizer, ctx.queue, ctx.route_priority)),
    ("sys.time.now", lambda ctx: SysTimeNowHandler(ctx.queue)),
    (
        "sys.status.listallfunctions",
        lambda ctx: ListAllFunctionsHandler(ctx.registry.names, ctx.queue),
    ),
    ("ui.out.say", lambda ctx: UiSayLogHandler()),
    (
        "zebra.print.simple",
        lambda ctx: ZebraPrintSimpleHandler(ctx.queue, printer=ctx.printer_queue),
    ),
    *((intent, _reply(intent)) for intent in REPLY_INTENTS),
    (SUCCESS_INTENT, _reply(SUCCESS_INTENT)),
    (FAILED_INTENT, _reply(FAILED_INTENT)),
    (UNKNOWN_INTENT, _reply(UNKNOWN_INTENT)),
)


def build_registry(
    ctx: HandlerContext,
    catalog: tuple[tuple[str, HandlerFactory], ...] = CATALOG,
) -> HandlerRegistry:
    """Instantiate every catalog row into ``ctx.registry``.

    Raises:
        DuplicateHandlerError: two rows claim the same intent.
        ValueError: a factory built a handler for a different intent than its row.
    """
    for intent, factory in catalog:
        handler = factory(ctx)
        if handler.name.casefold() != intent.casefold():
            raise ValueError(f"catalog row '{intent}' built handler for '{handler.name}'")
        ctx.registry.register(handler)
    logger.info(f"Registered {len(ctx.registry)} intent handlers")
    return ctx.registry
