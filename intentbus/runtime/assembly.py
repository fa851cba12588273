"""Wire settings into a ready-to-run queue, registry, recognizer and dispatcher."""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from intentbus.bus.ingress import Ingress
from intentbus.bus.queue import PriorityQueue
from intentbus.handlers.catalog import HandlerContext, build_registry
from intentbus.handlers.registry import HandlerRegistry
from intentbus.nl.aliases import AliasResolver
from intentbus.nl.engine import RecognizerEngine
from intentbus.nl.recognizer import TextRecognizer
from intentbus.responses.store import ResponseStore
from intentbus.runtime.dispatcher import Dispatcher
from intentbus.settings import IntentBusSettings, get_settings


@dataclass
class Runtime:
    settings: IntentBusSettings
    queue: PriorityQueue
    registry: HandlerRegistry
    recognizer: TextRecognizer
    responses: ResponseStore
    ingress: Ingress
    dispatcher: Dispatcher

    def reload_definitions(self) -> tuple[int, int]:
        """Re-read intent and response files. Returns ``(intents, response keys)``."""
        return self.recognizer.engine.reload(), self.responses.reload()


def build_runtime(settings: IntentBusSettings | None = None) -> Runtime:
    settings = settings or get_settings()

    engine = RecognizerEngine(
        recompute_tokens=settings.recompute_tokens,
        default_path=settings.intent_path,
    )
    engine.load()
    recognizer = TextRecognizer(engine, AliasResolver(extra=settings.extra_aliases))

    responses = ResponseStore(settings.response_path)
    responses.load()

    queue = PriorityQueue()
    registry = build_registry(
        HandlerContext(
            queue=queue,
            registry=HandlerRegistry(),
            recognizer=recognizer,
            responses=responses,
            route_priority=settings.route_priority,
            printer_queue=settings.printer_queue,
        )
    )
    runtime = Runtime(
        settings=settings,
        queue=queue,
        registry=registry,
        recognizer=recognizer,
        responses=responses,
        ingress=Ingress(queue, registry, settings.default_priority),
        dispatcher=Dispatcher(queue, registry, poll_seconds=settings.dispatch_poll_ms / 1000),
    )
    logger.debug(f"Runtime assembled ({settings.env})")
    return runtime
