"""Text recognizer: engine match → alias canonicalization → slots and domain."""

from __future__ import annotations

from dataclasses import dataclass, field

from loguru import logger

from intentbus.nl.aliases import AliasResolver
from intentbus.nl.engine import RecognizerEngine
from intentbus.nl.slots import derive_domain, extract_slots


@dataclass(frozen=True, slots=True)
class Recognition:
    intent: str
    score: float
    slots: dict[str, str] = field(default_factory=dict)
    domain: str = "other"

    def to_dict(self) -> dict[str, object]:
        return {
            "intent": self.intent,
            "score": self.score,
            "domain": self.domain,
            "slots": dict(self.slots),
        }


class TextRecognizer:
    def __init__(self, engine: RecognizerEngine, aliases: AliasResolver | None = None) -> None:
        self.engine = engine
        self.aliases = aliases or AliasResolver()

    def recognize(self, text: str) -> Recognition:
        intent, score = self.engine.recognize_best(text)
        # Canonical name first: the domain is derived from its namespace prefix.
        intent = self.aliases.canonicalize(intent)
        slots = extract_slots(text)
        domain = derive_domain(intent, slots)
        logger.debug(f"Recognized {intent} score={score} domain={domain}")
        return Recognition(intent=intent, score=score, slots=slots, domain=domain)
