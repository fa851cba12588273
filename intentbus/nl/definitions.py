"""Intent-definition documents and their immutable in-memory form.

Source format (JSON or YAML)::

    - name: chat.greet
      examples:
        - utterance: hello there
        - good morning            # bare strings are accepted too
    - name: ops.autosave.pause
      deprecated: true
      examples: [pause autosave]
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

# ---------------------------------------------------------------------------
# Source documents
# ---------------------------------------------------------------------------


class ExampleDoc(BaseModel):
    model_config = ConfigDict(extra="ignore")

    utterance: str = ""
    tokens: list[str] | None = None


class IntentDoc(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1)
    examples: list[ExampleDoc] = Field(default_factory=list)
    deprecated: bool = False
    tags: list[str] | None = None

    @field_validator("examples", mode="before")
    @classmethod
    def _coerce_examples(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return [{"utterance": v} if isinstance(v, str) else v for v in value]
        return value


IntentDocList = TypeAdapter(list[IntentDoc])


def read_document(path: Path) -> Any:
    """Parse *path* as YAML (``.yaml``/``.yml``) or JSON."""
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".yaml", ".yml"):
        return yaml.safe_load(text)
    return json.loads(text)


# ---------------------------------------------------------------------------
# Loaded form
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Example:
    utterance: str
    tokens: tuple[str, ...]
    token_set: frozenset[str]

    @classmethod
    def from_tokens(cls, utterance: str, tokens: list[str] | tuple[str, ...]) -> Example:
        lowered = tuple(t.lower() for t in tokens)
        return cls(utterance=utterance, tokens=lowered, token_set=frozenset(lowered))


@dataclass(frozen=True, slots=True)
class IntentDefinition:
    name: str
    examples: tuple[Example, ...] = ()
    deprecated: bool = False
    tags: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class IntentSet:
    """One complete, immutable set of loaded definitions."""

    intents: tuple[IntentDefinition, ...] = ()
    source: str | None = None
    loaded_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def active(self) -> tuple[IntentDefinition, ...]:
        return tuple(i for i in self.intents if not i.deprecated)

    def get(self, name: str) -> IntentDefinition | None:
        key = name.casefold()
        for intent in self.intents:
            if intent.name.casefold() == key:
                return intent
        return None

    def __len__(self) -> int:
        return len(self.intents)


EMPTY_SET = IntentSet()
