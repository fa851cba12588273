"""FastAPI application factory; the lifespan runs the dispatch loop."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from loguru import logger

from intentbus import __version__
from intentbus.runtime.assembly import Runtime, build_runtime
from intentbus.settings import IntentBusSettings, get_settings


def create_app(
    settings: IntentBusSettings | None = None,
    runtime: Runtime | None = None,
) -> FastAPI:
    settings = settings or (runtime.settings if runtime else get_settings())

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Startup: assemble runtime, start dispatcher. Shutdown: stop it."""
        rt = runtime or build_runtime(settings)
        app.state.runtime = rt
        task = asyncio.create_task(rt.dispatcher.run_forever(), name="intentbus-dispatcher")
        try:
            yield
        finally:
            rt.dispatcher.stop()
            await task
            logger.info("HTTP ingress shut down")

    app = FastAPI(title=settings.app_name, version=__version__, lifespan=lifespan)

    # ── mount routers ──
    from intentbus.api.routes import health, intents

    app.include_router(health.router)
    app.include_router(intents.router, tags=["intents"])

    return app
