"""Intents API - accept work for the dispatcher.

``POST /intents`` checks the API key, validates that the intent has a
handler, builds the envelope, enqueues it and answers right away. The
handler runs later on the dispatch loop; its outcome is only logged.
"""

from __future__ import annotations

import hmac
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from intentbus.errors import BadRequestError, UnknownIntentError
from intentbus.runtime.assembly import Runtime

router = APIRouter()


def get_runtime(request: Request) -> Runtime:
    return request.app.state.runtime


RuntimeDep = Annotated[Runtime, Depends(get_runtime)]


def require_api_key(
    runtime: RuntimeDep,
    x_api_key: Annotated[str | None, Header(alias="X-Api-Key")] = None,
) -> None:
    configured = runtime.settings.api_key
    if not configured or not x_api_key or not hmac.compare_digest(x_api_key, configured):
        raise HTTPException(status_code=401, detail="unauthorized")


class IntentRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    intent: str | None = None
    priority: int | None = None
    correlation_id: str | None = Field(default=None, alias="correlationId")
    payload: Any = None


class IntentAccepted(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    accepted: bool = True
    id: str
    correlation_id: str = Field(alias="correlationId")


@router.post(
    "/intents",
    response_model=IntentAccepted,
    response_model_by_alias=True,
    dependencies=[Depends(require_api_key)],
)
async def submit_intent(body: IntentRequest, runtime: RuntimeDep) -> Any:
    try:
        env = runtime.ingress.submit(
            body.intent,
            payload=body.payload,
            priority=body.priority,
            correlation_id=body.correlation_id,
        )
    except (BadRequestError, UnknownIntentError) as exc:
        return JSONResponse(status_code=400, content={"error": str(exc)})
    return IntentAccepted(id=env.id, correlation_id=env.correlation_id)


@router.get("/intents", dependencies=[Depends(require_api_key)])
async def list_intents(runtime: RuntimeDep) -> dict[str, list[str]]:
    return {"intents": sorted(runtime.registry.names(), key=str.casefold)}
