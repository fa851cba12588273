"""Response texts keyed by (legacy) intent key, loaded from JSON or YAML.

File shape::

    {"greetings": ["Hey!", "Hello there."], "goodbye": "See you."}
"""

from __future__ import annotations

import random
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml
from loguru import logger
from pydantic import TypeAdapter, ValidationError

from intentbus.nl.definitions import read_document

_ResponseDoc = TypeAdapter(dict[str, list[str] | str | None])

_EMPTY: Mapping[str, tuple[str, ...]] = MappingProxyType({})


def _normalize(doc: dict[str, list[str] | str | None]) -> Mapping[str, tuple[str, ...]]:
    out: dict[str, tuple[str, ...]] = {}
    for key, value in doc.items():
        if value is None:
            texts: tuple[str, ...] = ()
        elif isinstance(value, str):
            texts = (value,)
        else:
            texts = tuple(value)
        out[key.casefold()] = texts
    return MappingProxyType(out)


class ResponseStore:
    """Case-insensitive key → candidate texts. Reload swaps the whole map."""

    def __init__(self, path: Path | None = None, rng: random.Random | None = None) -> None:
        self._path = path
        self._rng = rng or random.Random()
        self._map: Mapping[str, tuple[str, ...]] = _EMPTY

    @classmethod
    def from_mapping(cls, data: dict[str, Any], rng: random.Random | None = None) -> ResponseStore:
        store = cls(rng=rng)
        store._map = _normalize(_ResponseDoc.validate_python(data))
        return store

    @property
    def path(self) -> Path | None:
        return self._path

    def load(self, path: Path | None = None) -> int:
        """(Re)load responses. Returns the number of keys now active.

        A missing file leaves an empty map; an unreadable or malformed file
        keeps the previous map.
        """
        if path is not None:
            self._path = path
        if self._path is None or not self._path.is_file():
            logger.warning(f"Response file not found at {self._path}. Using empty map.")
            self._map = _EMPTY
            return 0
        try:
            doc = _ResponseDoc.validate_python(read_document(self._path))
        except (OSError, ValueError, yaml.YAMLError) as exc:
            # pydantic's ValidationError is a ValueError
            kind = "Malformed" if isinstance(exc, ValidationError) else "Unreadable"
            logger.error(f"{kind} response file {self._path}: {exc}. Keeping previous map.")
            return len(self._map)
        self._map = _normalize(doc)
        logger.info(f"Loaded {len(self._map)} response keys from {self._path}")
        return len(self._map)

    def reload(self) -> int:
        return self.load()

    def pick(self, key: str) -> str | None:
        texts = self._map.get(key.casefold())
        if not texts:
            return None
        if len(texts) == 1:
            return texts[0]
        return self._rng.choice(texts)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.casefold() in self._map

    def __len__(self) -> int:
        return len(self._map)
