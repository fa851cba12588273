import asyncio
import random
import sys
from datetime import datetime, timezone
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pytest

from intentbus.bus.events import Envelope, HandlerResult
from intentbus.bus.queue import PriorityQueue
from intentbus.handlers.base import IntentHandler
from intentbus.handlers.nlp import NlpRecognizeHandler, NlpRouteHandler
from intentbus.handlers.reply import FALLBACK_REPLY, ReplyHandler
from intentbus.handlers.system import ListAllFunctionsHandler, SysTimeNowHandler, UiSayLogHandler
from intentbus.handlers.zebra import ZebraPrintSimpleHandler, build_zpl
from intentbus.nl.engine import RecognizerEngine
from intentbus.nl.recognizer import TextRecognizer
from intentbus.responses.store import ResponseStore


def _call(handler: IntentHandler, payload: dict[str, Any], corr: str = "corr-1") -> HandlerResult:
    return asyncio.run(handler.handle(payload, corr, asyncio.Event()))


def _drain(queue: PriorityQueue) -> list[Envelope]:
    out = []
    while (env := queue.try_dequeue()) is not None:
        out.append(env)
    return out


def _recognizer() -> TextRecognizer:
    engine = RecognizerEngine()
    engine.load([
        {"name": "greetings", "examples": ["hello there"]},
        {"name": "iot.light.set", "examples": ["turn on the kitchen light"]},
    ])
    return TextRecognizer(engine)


# ── nlp ──────────────────────────────────────────────────────────────────


@pytest.mark.parametrize("payload", [{}, {"text": 5}, {"text": None}])
def test_nlp_handlers_require_text(payload: dict[str, Any]) -> None:
    queue = PriorityQueue()
    for handler in (NlpRecognizeHandler(_recognizer()), NlpRouteHandler(_recognizer(), queue)):
        result = _call(handler, payload)
        assert not result.ok
        assert result.error_code == "BAD_INPUT"
    assert len(queue) == 0


def test_nlp_recognize_reports_match() -> None:
    result = _call(NlpRecognizeHandler(_recognizer()), {"text": "hello there"})

    assert result.ok
    assert result.data == {"intent": "chat.greet", "score": 1.0, "domain": "chat", "slots": {}}


def test_nlp_route_enqueues_follow_up_with_same_correlation() -> None:
    queue = PriorityQueue()

    result = _call(NlpRouteHandler(_recognizer(), queue), {"text": "kitchen light on"}, "corr-7")

    assert result.ok
    assert result.data["routed"] == "iot.light.set"
    assert result.data["domain"] == "iot"
    [follow_up] = _drain(queue)
    assert follow_up.intent == "iot.light.set"
    assert follow_up.correlation_id == "corr-7"
    assert follow_up.priority == 4
    assert follow_up.payload == {
        "action": "on",
        "location": "kitchen",
        "device": "light",
        "text": "kitchen light on",
    }


def test_nlp_route_unmatched_text_goes_to_unknown() -> None:
    queue = PriorityQueue()

    result = _call(NlpRouteHandler(_recognizer(), queue), {"text": "quantum soup recipe"})

    assert result.data["recognized"] == "unknown"
    assert queue.try_dequeue().intent == "unknown"


# ── replies ──────────────────────────────────────────────────────────────


def test_reply_uses_legacy_response_key_and_says_it() -> None:
    queue = PriorityQueue()
    store = ResponseStore.from_mapping({"greetings": ["Hi!"]})

    result = _call(ReplyHandler("chat.greet", store, queue), {}, "corr-2")

    assert result.data == {"intent": "chat.greet", "reply": "Hi!"}
    [say] = _drain(queue)
    assert (say.intent, say.payload, say.correlation_id, say.priority) == (
        "ui.out.say",
        {"text": "Hi!"},
        "corr-2",
        5,
    )


def test_reply_tries_candidate_keys_in_order() -> None:
    store = ResponseStore.from_mapping({"creatorname": [], "whoiscreatorname": ["Alex built me."]})

    handler = ReplyHandler("sys.meta.creator", store, PriorityQueue())

    assert handler.compose({}) == "Alex built me."


def test_reply_picks_among_several_texts() -> None:
    texts = ["one", "two", "three"]
    store = ResponseStore.from_mapping({"goodbye": texts}, rng=random.Random(7))
    handler = ReplyHandler("chat.farewell", store, PriorityQueue())

    assert {handler.compose({}) for _ in range(30)} <= set(texts)


def test_reply_dynamic_fallbacks() -> None:
    clock = lambda: datetime(2025, 3, 14, 9, 30)  # noqa: E731 - a Friday
    store, queue = ResponseStore(), PriorityQueue()

    assert ReplyHandler("sys.time.date", store, queue, clock).compose({}) == "Today is 2025-03-14."
    assert ReplyHandler("sys.time.dayofweek", store, queue, clock).compose({}) == "It's Friday."
    assert ReplyHandler("zebra.print.failed", store, queue).compose(
        {"stderr": "printer offline\n"}
    ) == "The label didn't print: printer offline"
    assert ReplyHandler("weather.forecast", store, queue).compose({}) == FALLBACK_REPLY


# ── system ───────────────────────────────────────────────────────────────


def _fixed_clock() -> datetime:
    return datetime(2025, 1, 2, 15, 4, tzinfo=timezone.utc)


def test_time_now_in_requested_zone() -> None:
    try:
        ZoneInfo("UTC")
    except ZoneInfoNotFoundError:
        pytest.skip("tz database not available")
    queue = PriorityQueue()

    result = _call(SysTimeNowHandler(queue, _fixed_clock), {"timezone": "UTC"})

    assert result.data == {"now": "2025-01-02T15:04:00+00:00", "tz": "UTC"}
    assert queue.try_dequeue().payload == {"text": "The time is 3:04 PM."}


@pytest.mark.parametrize("payload", [{}, {"timezone": "Not/AZone"}, {"timezone": 3}])
def test_time_now_falls_back_to_local(payload: dict[str, Any]) -> None:
    result = _call(SysTimeNowHandler(PriorityQueue(), _fixed_clock), payload)

    assert result.ok
    assert result.data["tz"] == "local"
    assert datetime.fromisoformat(result.data["now"]) == _fixed_clock()


def _lister(queue: PriorityQueue) -> ListAllFunctionsHandler:
    names = [
        "chat.greet",
        "sys.time.now",
        "chat.farewell",
        "sys.status.listallfunctions",
        "Chat.Greet",
        "nlp.route",
    ]
    return ListAllFunctionsHandler(lambda: names, queue)


def test_list_functions_excludes_itself_and_sorts() -> None:
    queue = PriorityQueue()

    result = _call(_lister(queue), {})

    assert result.data["items"] == ["chat.farewell", "chat.greet", "nlp.route", "sys.time.now"]
    assert result.data["total"] == 4
    say = queue.try_dequeue()
    assert say.intent == "ui.out.say"
    assert say.payload["text"].startswith("Functions - 4/4:")


def test_list_functions_filters() -> None:
    lister = _lister(PriorityQueue())

    assert _call(lister, {"domain": "chat"}).data["items"] == ["chat.farewell", "chat.greet"]
    assert _call(lister, {"startsWith": "NLP"}).data["items"] == ["nlp.route"]


def test_list_functions_paging() -> None:
    queue = PriorityQueue()

    result = _call(_lister(queue), {"page": 2, "pageSize": 1})

    assert result.data["items"] == ["chat.greet"]
    assert (result.data["page"], result.data["pageSize"], result.data["returned"]) == (2, 1, 1)
    assert "…and 2 more (page 3)" in queue.try_dequeue().payload["text"]
    assert _call(_lister(PriorityQueue()), {"pageSize": 0}).data["pageSize"] == 1
    assert _call(_lister(PriorityQueue()), {"pageSize": 9000}).data["pageSize"] == 500


def test_ui_say_logs_text(log_messages: list[str]) -> None:
    assert _call(UiSayLogHandler(), {"text": "hello"}, "c9").data == {"text": "hello"}
    assert _call(UiSayLogHandler(), {}).data == {"text": "(no text)"}
    assert "UI OUT corr=c9: hello" in log_messages


# ── zebra ────────────────────────────────────────────────────────────────


def _py(code: str) -> list[str]:
    return [sys.executable, "-c", code]


def test_zpl_wraps_label_text() -> None:
    zpl = build_zpl("Box 12")

    assert zpl.startswith("^XA\n")
    assert "^FDBox 12^FS\n" in zpl
    assert zpl.endswith("^XZ\n")


@pytest.mark.parametrize("payload", [{}, {"labelText": 7}, {"labelText": "   "}])
def test_zebra_requires_label_text(payload: dict[str, Any]) -> None:
    result = _call(ZebraPrintSimpleHandler(PriorityQueue()), payload)

    assert result.error_code == "BAD_INPUT"


def test_zebra_success_routes_success_intent() -> None:
    queue = PriorityQueue()
    handler = ZebraPrintSimpleHandler(
        queue, command=_py("import sys; sys.stdin.read(); print('request id zebra1-1')")
    )

    result = _call(handler, {"labelText": "Box 12"}, "corr-z")

    assert result.ok and result.data == {"printed": True}
    [env] = _drain(queue)
    assert env.intent == "zebra.print.success"
    assert env.correlation_id == "corr-z"
    assert env.payload["exitCode"] == 0
    assert "zebra1-1" in env.payload["stdout"]


def test_zebra_failure_routes_failed_intent() -> None:
    queue = PriorityQueue()
    handler = ZebraPrintSimpleHandler(
        queue,
        command=_py("import sys; sys.stdin.read(); sys.stderr.write('no printer'); sys.exit(3)"),
    )

    result = _call(handler, {"labelText": "Box 12"})

    assert (result.ok, result.error_code, result.message) == (False, "PRINT_FAILED", "no printer")
    [env] = _drain(queue)
    assert env.intent == "zebra.print.failed"
    assert env.payload["exitCode"] == 3


def test_zebra_spooler_missing() -> None:
    handler = ZebraPrintSimpleHandler(PriorityQueue(), command=["no-such-spooler-binary-xyz"])

    assert _call(handler, {"labelText": "Box 12"}).error_code == "PRINT_EXCEPTION"


def test_zebra_honours_stop_signal() -> None:
    queue = PriorityQueue()
    handler = ZebraPrintSimpleHandler(queue, command=_py("import time; time.sleep(30)"))

    async def run() -> HandlerResult:
        cancel = asyncio.Event()
        asyncio.get_running_loop().call_later(0.2, cancel.set)
        return await handler.handle({"labelText": "Box 12"}, "corr", cancel)

    result = asyncio.run(run())

    assert result.error_code == "CANCELLED"
    assert len(queue) == 0
