"""Jaccard recognizer over loaded intent examples.

Every non-deprecated example is scored against the input with
``|A ∩ B| / |A ∪ B|`` over token sets. The highest score wins; on equal
scores the first intent/example in source order keeps the match. Scores are
rounded to three places and compared against the profile threshold.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from loguru import logger
from pydantic import ValidationError

from intentbus.nl.definitions import (
    EMPTY_SET,
    Example,
    IntentDefinition,
    IntentDoc,
    IntentDocList,
    IntentSet,
    read_document,
)
from intentbus.nl.tokenizer import Tokenizer

UNKNOWN_INTENT = "unknown"


@dataclass(frozen=True, slots=True)
class MatchProfile:
    """A threshold together with the tokenization it was tuned for.

    Stop-word removal raises the overlap of intent-bearing words, so the
    filtering profile uses a lower threshold. Do not mix the two.
    """

    threshold: float
    filter_stop_words: bool


STOPWORD_PROFILE = MatchProfile(threshold=0.35, filter_stop_words=True)
PLAIN_PROFILE = MatchProfile(threshold=0.5, filter_stop_words=False)


def jaccard(a: frozenset[str] | set[str], b: frozenset[str] | set[str]) -> float:
    union = len(a | b)
    if union == 0:
        return 0.0
    return len(a & b) / union


class RecognizerEngine:
    def __init__(
        self,
        tokenizer: Tokenizer | None = None,
        profile: MatchProfile = STOPWORD_PROFILE,
        recompute_tokens: bool = False,
        default_path: Path | None = None,
    ) -> None:
        self._tokenizer = tokenizer or Tokenizer()
        self._profile = profile
        self._recompute = recompute_tokens
        self._default_path = default_path
        self._snapshot: IntentSet = EMPTY_SET

    @property
    def profile(self) -> MatchProfile:
        return self._profile

    @property
    def intents(self) -> IntentSet:
        return self._snapshot

    @property
    def active_intents(self) -> tuple[IntentDefinition, ...]:
        return self._snapshot.active

    @property
    def source(self) -> str | None:
        return self._snapshot.source

    # ── loading ──────────────────────────────────────────────────────────

    def load(self, source: Path | str | list[dict[str, Any]] | None = None) -> int:
        """Replace the active intent set. Returns the number of loaded intents.

        A missing or malformed source is logged and leaves an empty set.
        """
        if source is None:
            source = self._default_path
        if source is None:
            logger.warning("No intent source configured. Using empty set.")
            self._snapshot = EMPTY_SET
            return 0

        if isinstance(source, (str, Path)):
            path = Path(source)
            label = str(path)
            self._default_path = path
            if not path.is_file():
                logger.warning(f"Intent file not found at {path}. Using empty set.")
                self._snapshot = IntentSet(source=label)
                return 0
            try:
                raw = read_document(path)
            except (OSError, ValueError, yaml.YAMLError) as exc:
                logger.error(f"Failed to read intents at {path}: {exc}. Using empty set.")
                self._snapshot = IntentSet(source=label)
                return 0
        else:
            raw, label = source, "<inline>"

        try:
            docs = IntentDocList.validate_python(raw if raw is not None else [])
        except ValidationError as exc:
            logger.error(
                f"Malformed intent definitions in {label} "
                f"({exc.error_count()} errors). Using empty set."
            )
            self._snapshot = IntentSet(source=label)
            return 0

        snapshot = IntentSet(intents=self._build(docs), source=label)
        self._snapshot = snapshot
        logger.info(
            f"Loaded {len(snapshot)} intents (active: {len(snapshot.active)}) from {label}"
        )
        return len(snapshot)

    def reload(self) -> int:
        return self.load(self._default_path)

    def _build(self, docs: Iterable[IntentDoc]) -> tuple[IntentDefinition, ...]:
        seen: set[str] = set()
        built: list[IntentDefinition] = []
        for doc in docs:
            key = doc.name.casefold()
            if key in seen:
                logger.warning(f"Duplicate intent '{doc.name}' in definitions, skipped")
                continue
            seen.add(key)
            examples = []
            for ex in doc.examples:
                if self._recompute or not ex.tokens:
                    tokens = self._tokenizer.tokenize(
                        ex.utterance, filter_stop_words=self._profile.filter_stop_words
                    )
                else:
                    tokens = ex.tokens
                examples.append(Example.from_tokens(ex.utterance, tokens))
            built.append(
                IntentDefinition(
                    name=doc.name,
                    examples=tuple(examples),
                    deprecated=doc.deprecated,
                    tags=tuple(doc.tags or ()),
                )
            )
        return tuple(built)

    # ── matching ─────────────────────────────────────────────────────────

    def recognize_best(self, text: str | None) -> tuple[str, float]:
        if not text or text.isspace():
            return UNKNOWN_INTENT, 0.0

        tokens = self._tokenizer.tokenize(text, self._profile.filter_stop_words)
        user_set = frozenset(t.lower() for t in tokens)

        best, best_score = UNKNOWN_INTENT, 0.0
        for intent in self._snapshot.active:
            for ex in intent.examples:
                score = jaccard(ex.token_set, user_set)
                if score > best_score:
                    best, best_score = intent.name, score

        best_score = round(best_score, 3)
        if best_score >= self._profile.threshold:
            return best, best_score
        return UNKNOWN_INTENT, best_score
