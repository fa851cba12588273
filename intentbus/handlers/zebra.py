"""``zebra.print.simple``: print one line of text on a Zebra label printer.

The label is rendered as ZPL and piped to the CUPS ``lp`` spooler. The
outcome is re-routed as ``zebra.print.success`` / ``zebra.print.failed`` so
that user-facing acknowledgements go through the normal reply path.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Any

from loguru import logger

from intentbus.bus.events import Envelope, HandlerResult
from intentbus.bus.queue import PriorityQueue
from intentbus.handlers.base import IntentHandler, get_str

SUCCESS_INTENT = "zebra.print.success"
FAILED_INTENT = "zebra.print.failed"
FOLLOW_UP_PRIORITY = 4


def build_zpl(label_text: str) -> str:
    return (
        "^XA\n"              # start format
        "^FO40,40\n"         # field origin x,y
        "^A0N,40,40\n"       # font 0, normal orientation, height, width
        f"^FD{label_text}^FS\n"
        "^XZ\n"              # end format
    )


class ZebraPrintSimpleHandler(IntentHandler):
    name = "zebra.print.simple"

    def __init__(
        self,
        queue: PriorityQueue,
        printer: str = "zebra1",
        command: Sequence[str] | None = None,
    ) -> None:
        self._queue = queue
        self._command = tuple(command) if command else ("lp", "-d", printer)

    async def handle(
        self, payload: dict[str, Any], correlation_id: str, cancel: asyncio.Event
    ) -> HandlerResult:
        label_text = get_str(payload, "labelText")
        if label_text is None:
            return HandlerResult.fail("BAD_INPUT", "payload.labelText (string) required.")
        if not label_text.strip():
            return HandlerResult.fail("BAD_INPUT", "payload.labelText cannot be empty")
        if cancel.is_set():
            return HandlerResult.fail("CANCELLED", "dispatcher is stopping")

        logger.info(f"Zebra handler received label text: {label_text} (corr={correlation_id})")
        zpl = build_zpl(label_text)
        logger.debug(f"Zebra ZPL generated corr={correlation_id}: {zpl!r}")

        try:
            proc = await asyncio.create_subprocess_exec(
                *self._command,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            logger.error(f"Could not start spooler corr={correlation_id}: {exc}")
            return HandlerResult.fail("PRINT_EXCEPTION", str(exc))

        io_task = asyncio.ensure_future(proc.communicate(zpl.encode("utf-8")))
        stop_task = asyncio.ensure_future(cancel.wait())
        try:
            await asyncio.wait({io_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            stop_task.cancel()

        if not io_task.done():
            proc.kill()
            await io_task
            logger.warning(f"Zebra print cancelled corr={correlation_id}")
            return HandlerResult.fail("CANCELLED", "dispatcher is stopping")

        out_b, err_b = io_task.result()
        stdout = out_b.decode("utf-8", errors="replace")
        stderr = err_b.decode("utf-8", errors="replace")
        exit_code = proc.returncode

        if exit_code == 0:
            logger.info(f"Zebra print succeeded corr={correlation_id} stdout={stdout.strip()}")
            self._queue.enqueue(
                Envelope.create(
                    SUCCESS_INTENT,
                    {"labelText": label_text, "exitCode": exit_code, "stdout": stdout},
                    correlation_id,
                    FOLLOW_UP_PRIORITY,
                )
            )
            return HandlerResult.success({"printed": True})

        logger.warning(
            f"Zebra print failed corr={correlation_id} exitCode={exit_code} stderr={stderr.strip()}"
        )
        self._queue.enqueue(
            Envelope.create(
                FAILED_INTENT,
                {"labelText": label_text, "exitCode": exit_code, "stderr": stderr},
                correlation_id,
                FOLLOW_UP_PRIORITY,
            )
        )
        return HandlerResult.fail("PRINT_FAILED", stderr.strip() or f"exit code {exit_code}")
