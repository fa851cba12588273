"""Envelope and handler-result types carried on the intent bus."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

MIN_PRIORITY = 0  # highest
MAX_PRIORITY = 9  # lowest
PRIORITY_LEVELS = MAX_PRIORITY - MIN_PRIORITY + 1

DEFAULT_PRIORITY = 5
ROUTE_PRIORITY = 4  # follow-ups emitted by a routing hop


def clamp_priority(value: int | None, default: int = DEFAULT_PRIORITY) -> int:
    """Clamp *value* into the valid priority range (``None`` → *default*)."""
    if value is None:
        value = default
    return max(MIN_PRIORITY, min(MAX_PRIORITY, int(value)))


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True, slots=True)
class Envelope:
    """One unit of routed work.

    Envelopes are immutable; re-routing builds a new envelope with
    :meth:`create`, passing along the correlation id of the original request.
    """

    intent: str
    correlation_id: str
    priority: int = DEFAULT_PRIORITY
    payload: dict[str, Any] = field(default_factory=dict)
    id: str = field(default_factory=_new_id)
    timestamp: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        if not MIN_PRIORITY <= self.priority <= MAX_PRIORITY:
            raise ValueError(
                f"priority {self.priority} outside [{MIN_PRIORITY}, {MAX_PRIORITY}]"
            )

    @classmethod
    def create(
        cls,
        intent: str,
        payload: dict[str, Any] | None = None,
        correlation_id: str | None = None,
        priority: int = DEFAULT_PRIORITY,
    ) -> Envelope:
        return cls(
            intent=intent,
            correlation_id=correlation_id or _new_id(),
            priority=priority,
            payload=dict(payload or {}),
        )


@dataclass(frozen=True, slots=True)
class HandlerResult:
    """Outcome of one handler invocation: success with data, or a typed failure."""

    ok: bool
    error_code: str | None = None
    message: str | None = None
    data: Any = None

    @classmethod
    def success(cls, data: Any = None, message: str | None = None) -> HandlerResult:
        return cls(ok=True, message=message, data=data)

    @classmethod
    def fail(cls, code: str, message: str, data: Any = None) -> HandlerResult:
        return cls(ok=False, error_code=code, message=message, data=data)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "errorCode": self.error_code,
            "message": self.message,
            "data": self.data,
        }
