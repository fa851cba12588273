"""System handlers: clock, handler listing, and the UI say sink."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from loguru import logger

from intentbus.bus.events import DEFAULT_PRIORITY, Envelope, HandlerResult
from intentbus.bus.queue import PriorityQueue
from intentbus.handlers.base import IntentHandler, get_int, get_str
from intentbus.handlers.reply import SAY_INTENT

MAX_PAGE_SIZE = 500
DEFAULT_PAGE_SIZE = 100


def _resolve_zone(tz: str | None) -> ZoneInfo | None:
    if not tz or not tz.strip():
        return None
    try:
        return ZoneInfo(tz.strip())
    except (ZoneInfoNotFoundError, ValueError):
        return None


class SysTimeNowHandler(IntentHandler):
    """Current time, optionally in an IANA zone (``payload.timezone``).

    Unknown zones fall back to local time rather than failing.
    """

    name = "sys.time.now"

    def __init__(
        self,
        queue: PriorityQueue,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._queue = queue
        self._clock = clock

    async def handle(
        self, payload: dict[str, Any], correlation_id: str, cancel: asyncio.Event
    ) -> HandlerResult:
        tz_name = get_str(payload, "timezone")
        zone = _resolve_zone(tz_name)
        utc_now = self._clock()
        if zone is None:
            now, tz_used = utc_now.astimezone(), "local"
        else:
            now, tz_used = utc_now.astimezone(zone), tz_name.strip()

        spoken = f"The time is {now:%I:%M %p}.".replace("is 0", "is ", 1)
        self._queue.enqueue(
            Envelope.create(SAY_INTENT, {"text": spoken}, correlation_id, DEFAULT_PRIORITY)
        )
        return HandlerResult.success({"now": now.isoformat(), "tz": tz_used})


class ListAllFunctionsHandler(IntentHandler):
    """Lists registered intent names with optional filters and paging.

    *names* is called at handling time, so handlers registered after this
    one are included.
    """

    name = "sys.status.listallfunctions"

    def __init__(self, names: Callable[[], Iterable[str]], queue: PriorityQueue) -> None:
        self._names = names
        self._queue = queue

    async def handle(
        self, payload: dict[str, Any], correlation_id: str, cancel: asyncio.Event
    ) -> HandlerResult:
        own = self.name.casefold()
        unique: dict[str, str] = {}
        for n in self._names():
            if n and n.strip() and n.casefold() != own:
                unique.setdefault(n.casefold(), n)

        domain = get_str(payload, "domain")
        starts = get_str(payload, "startsWith")
        raw_page = get_int(payload, "page")
        raw_size = get_int(payload, "pageSize")
        page = max(1, 1 if raw_page is None else raw_page)
        page_size = min(MAX_PAGE_SIZE, max(1, DEFAULT_PAGE_SIZE if raw_size is None else raw_size))

        names: Iterable[str] = unique.values()
        if domain and domain.strip():
            prefix = f"{domain}.".casefold()
            names = [n for n in names if n.casefold().startswith(prefix)]
        if starts and starts.strip():
            names = [n for n in names if n.casefold().startswith(starts.casefold())]
        filtered = sorted(names, key=str.casefold)

        total = len(filtered)
        skip = (page - 1) * page_size
        items = filtered[skip:skip + page_size]

        header = f"Functions (domain: {domain})" if domain and domain.strip() else "Functions"
        lines = [f"{header} - {len(items)}/{total}:"]
        lines.extend(f"• {n}" for n in items)
        remaining = total - (skip + len(items))
        if remaining > 0:
            lines.append(f"…and {remaining} more (page {page + 1})")
        self._queue.enqueue(
            Envelope.create(
                SAY_INTENT, {"text": "\n".join(lines)}, correlation_id, DEFAULT_PRIORITY
            )
        )

        logger.info(f"listallfunctions returned {len(items)}/{total} (page {page})")
        return HandlerResult.success({
            "total": total,
            "page": page,
            "pageSize": page_size,
            "returned": len(items),
            "filters": {"domain": domain, "startsWith": starts},
            "items": items,
        })


class UiSayLogHandler(IntentHandler):
    """Terminal sink for ``ui.out.say``: writes the text to the log."""

    name = SAY_INTENT

    async def handle(
        self, payload: dict[str, Any], correlation_id: str, cancel: asyncio.Event
    ) -> HandlerResult:
        text = get_str(payload, "text") or "(no text)"
        logger.info(f"UI OUT corr={correlation_id}: {text}")
        return HandlerResult.success({"text": text})
